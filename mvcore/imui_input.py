"""Editing state for the UI's single-line text inputs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

# Size of the scratch area used when shifting the tail of the text; an insert
# is refused when more than this many characters follow the cursor.
TEXT_BUFFER_SIZE = 2048

InputFilter = Callable[[str], bool]


def text_input_filter(char: str) -> bool:
    """True if ``char`` is a printable ASCII character."""
    return len(char) == 1 and " " <= char <= "~"


class TextBuffer:
    """Text edited by a text input, limited to ``size - 1`` characters.

    ``size`` counts a terminating slot, so a buffer of size 5 holds at most
    four characters.
    """

    def __init__(self, size: int, text: str = "") -> None:
        if size <= 0:
            raise ValueError("buffer size must be positive")
        self._size = size
        self._text = ""
        self.text = text

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        """Largest number of characters the buffer can hold."""
        return self._size - 1

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        if len(value) >= self._size:
            raise ValueError(
                f"text of length {len(value)} does not fit a buffer of size {self._size}"
            )
        self._text = value

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"TextBuffer(size={self._size}, text={self._text!r})"


@dataclass
class TextInputState:
    """The focused text buffer and the position of the cursor within it."""

    buffer: TextBuffer | None = None
    cursor: int = 0
    input_filter: InputFilter = field(default=text_input_filter)

    @property
    def active(self) -> bool:
        """True while a buffer has focus."""
        return self.buffer is not None

    def focus(self, buffer: TextBuffer) -> None:
        """Give ``buffer`` focus with the cursor at its end."""
        self.buffer = buffer
        self.cursor = len(buffer.text)

    def release(self) -> None:
        """Drop focus from the current buffer."""
        self.buffer = None

    def _clamp(self) -> TextBuffer | None:
        buffer = self.buffer
        if buffer is not None:
            self.cursor = max(0, min(self.cursor, len(buffer.text)))
        return buffer

    def insert(self, text: str) -> int:
        """Insert the accepted characters of ``text`` at the cursor.

        Nothing is inserted unless the whole of ``text`` would fit. Returns
        the number of characters inserted.
        """
        buffer = self._clamp()
        if buffer is None:
            return 0
        current = buffer.text
        if not (len(current) + len(text) < buffer.size
                and len(current) - self.cursor < TEXT_BUFFER_SIZE):
            return 0
        accepted = "".join(ch for ch in text if self.input_filter(ch))
        if accepted:
            buffer.text = current[:self.cursor] + accepted + current[self.cursor:]
            self.cursor += len(accepted)
        return len(accepted)

    def backspace(self) -> bool:
        """Delete the character before the cursor; True if one was removed."""
        buffer = self._clamp()
        if buffer is None or self.cursor == 0:
            return False
        current = buffer.text
        buffer.text = current[:self.cursor - 1] + current[self.cursor:]
        self.cursor -= 1
        return True

    def delete(self) -> bool:
        """Delete the character under the cursor; True if one was removed."""
        buffer = self._clamp()
        if buffer is None or self.cursor >= len(buffer.text):
            return False
        current = buffer.text
        buffer.text = current[:self.cursor] + current[self.cursor + 1:]
        return True

    def move_left(self) -> bool:
        """Move the cursor one character left; True if it moved."""
        buffer = self._clamp()
        if buffer is None or self.cursor == 0:
            return False
        self.cursor -= 1
        return True

    def move_right(self) -> bool:
        """Move the cursor one character right; True if it moved."""
        buffer = self._clamp()
        if buffer is None or self.cursor >= len(buffer.text):
            return False
        self.cursor += 1
        return True