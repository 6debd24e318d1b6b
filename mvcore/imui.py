"""Immediate-mode UI context: windows, widgets, input handling and layout."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Protocol

from mvcore.geometry import Color, Rect, Vec2
from mvcore.imui_base import (
    Dockspace,
    ElementKind,
    FloatingButton,
    FloatRect,
    Layout,
    Ref,
    UIColor,
    UIElement,
    UIWindow,
    WindowMeta,
    default_style,
)
from mvcore.imui_draw import Font, Host, Renderer, draw_frame
from mvcore.imui_input import TEXT_BUFFER_SIZE, TextBuffer, TextInputState, text_input_filter

MAX_HOVERED_WINDOWS = 16
RESIZE_GRAB_DISTANCE = 20
DRAG_THRESHOLD = 10
MIN_WINDOW_WIDTH = 100
MIN_WINDOW_HEIGHT = 50
DEFAULT_WINDOW_WIDTH = 300
SLIDER_HANDLE = Vec2(10, 15)
SLIDER_TRACK_HEIGHT = 3


class Key(Enum):
    """Keys the UI reacts to."""

    BACKSPACE = auto()
    LEFT = auto()
    RIGHT = auto()
    DELETE = auto()
    RETURN = auto()


class Cursor(Enum):
    """Mouse cursor shapes the UI asks the host for."""

    POINTER = auto()
    RESIZE = auto()
    MOVE = auto()


class UIRenderer(Renderer, Protocol):
    """A renderer that can also be resized and flushed."""

    def resize(self, size: Vec2) -> None: ...

    def flush(self) -> None: ...


class UIHost(Host, Protocol):
    """A host window that also reports keys and takes cursor changes."""

    def key_just_pressed(self, key: Key) -> bool: ...

    def key_just_released(self, key: Key) -> bool: ...

    def set_cursor(self, cursor: Cursor) -> None: ...


def _word_wrap(font: Font, text: str, width: int) -> str:
    lines: list[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split(" "):
            candidate = f"{line} {word}" if line else word
            if line and font.text_width(candidate) > width:
                lines.append(line)
                line = word
            else:
                line = candidate
        lines.append(line)
    return "\n".join(lines)


class UIContext:
    """State of an immediate-mode UI, rebuilt every frame between
    :meth:`begin_frame` and :meth:`end_frame`."""

    def __init__(self, renderer: UIRenderer, host: UIHost, font: Font) -> None:
        self.renderer = renderer
        self.host = host
        self.font = font
        self.style: dict[UIColor, Color] = default_style()

        self.padding = 3
        self.scrollbar_width = 10
        self.floating_padding = 15
        self.column_size = 150
        self.window_max_height = 300

        self.layout = Layout()
        self.windows: list[UIWindow] = []
        self._window_cache: dict[str, UIWindow] = {}
        self.current_window: UIWindow | None = None
        self.top_window: UIWindow | None = None

        self.floating: list[FloatingButton] = []
        self.floating_cursor = Vec2()

        self.hovered: UIElement | None = None
        self.hot: UIElement | None = None
        self.active: UIElement | None = None
        self.sliding: UIElement | None = None
        self._active_key: tuple[str, int] | None = None
        self._sliding_key: tuple[str, int] | None = None

        self.dragging: UIWindow | None = None
        self.resizing: UIWindow | None = None
        self.scrolling: UIWindow | None = None
        self.drag_start = Vec2()
        self.drag_offset = Vec2()
        self.mouse_delta = Vec2()
        self.last_mouse_pos = Vec2()

        self.input = TextInputState()
        self.current_dockspace: Dockspace | None = None
        self.docking = False

        self.loading: str | None = None
        self.loading_percentage = 0
        self.loading_font: Font | None = None

        self.cursor_pos = Vec2()
        self._columns = 1
        self._item = 0
        self._item_height = 0

        self._color_override = Color()
        self._override_color = False

    # -- helpers -----------------------------------------------------------

    def _mouse_over(self, rect: Rect) -> bool:
        return rect.contains(self.host.mouse_position())

    def _dock_rect(self, dock: Dockspace) -> Rect:
        width, height = self.host.size()
        return dock.screen_rect(width, height)

    def _require_window(self) -> UIWindow:
        if self.current_window is None:
            raise RuntimeError("no window is open; call begin_window first")
        return self.current_window

    def _add_item(self, el: UIElement) -> UIElement:
        window = self._require_window()
        el.font = self.font
        el.override_color = self._override_color
        el.color = self._color_override if self._override_color else self.style[UIColor.TEXT]
        key = (window.title, len(window.elements))
        window.elements.append(el)
        if key == self._active_key:
            self.active = el
        if key == self._sliding_key:
            self.sliding = el
        return el

    def _element_key(self, el: UIElement) -> tuple[str, int]:
        window = self._require_window()
        return (window.title, window.elements.index(el))

    def _advance(self, height: int) -> None:
        window = self._require_window()
        self._item += 1
        self._item_height = max(self._item_height, height)
        if self._item >= self._columns:
            self.cursor_pos = Vec2(window.position.x + self.padding,
                                   self.cursor_pos.y + self._item_height)
            self._item_height = 0
            self._item = 0
        else:
            self.cursor_pos = Vec2(self.cursor_pos.x + self.column_size, self.cursor_pos.y)

    def _interactive(self, el: UIElement, check_sliding: bool = True) -> bool:
        window = self._require_window()
        if self.top_window is not window:
            return False
        if check_sliding and self.sliding is not None:
            return False
        return el.position.y < window.position.y + window.dimensions.y

    def _press(self, el: UIElement, rect: Rect, check_sliding: bool = True) -> bool:
        """Update hover state for a clickable element; True if it was clicked."""
        if self._interactive(el, check_sliding) and self._mouse_over(rect):
            self.hovered = el
            if self.host.mouse_held():
                self.hot = el
            return self.host.mouse_just_released()
        return False

    def _hovered_windows(self, limit: int) -> list[UIWindow]:
        mouse = self.host.mouse_position()
        found: list[UIWindow] = []
        for window in self.windows:
            if window.rect.contains(mouse):
                found.append(window)
            if len(found) >= limit:
                break
        return found

    def _place_window(self, window: UIWindow, meta: WindowMeta) -> None:
        if self.dragging is not window and meta.dock is not None:
            r = self._dock_rect(meta.dock)
            window.position = Vec2(r.x, r.y)
            window.dimensions = Vec2(r.w, r.h)
        else:
            window.position = meta.position
            window.dimensions = meta.dimensions

    def _clear_active(self) -> None:
        self.active = None
        self._active_key = None
        self.input.release()

    # -- frame -------------------------------------------------------------

    def set_color(self, index: UIColor | int, color: Color) -> None:
        """Replace the style colour in slot ``index``."""
        self.style[UIColor(index)] = color

    def text_input_event(self, text: str) -> None:
        """Feed typed text to the focused text input, if any."""
        self.input.insert(text)

    def begin_frame(self) -> None:
        """Start building a new frame."""
        self.loading = None
        width, height = self.host.size()
        self.renderer.clip(Rect(0, 0, width, height))
        self.floating_cursor = Vec2(self.floating_padding, height - self.floating_padding)
        self.floating = []
        self.hovered = None
        self.hot = None
        self.mouse_delta = self.host.mouse_position() - self.last_mouse_pos
        self.windows = []
        self.current_dockspace = None
        self.renderer.resize(Vec2(width, height))

    def _handle_keys(self) -> None:
        if not self.input.active:
            return
        host = self.host
        if host.key_just_pressed(Key.BACKSPACE):
            self.input.backspace()
        if host.key_just_pressed(Key.LEFT):
            self.input.move_left()
        if host.key_just_pressed(Key.RIGHT):
            self.input.move_right()
        if host.key_just_pressed(Key.DELETE):
            self.input.delete()

    def _handle_window_mouse(self) -> None:
        host = self.host
        hovered = sorted(self._hovered_windows(MAX_HOVERED_WINDOWS),
                         key=lambda w: w.z, reverse=True)
        if not hovered:
            host.set_cursor(Cursor.POINTER)
            return
        if self.hovered is not None:
            return

        window = hovered[-1]
        meta = self.layout.windows.get(window.title)
        mouse = host.mouse_position()
        dist = int((mouse - (window.position + window.dimensions)).magnitude())

        if dist < RESIZE_GRAB_DISTANCE:
            host.set_cursor(Cursor.RESIZE)
        elif self.dragging is None:
            host.set_cursor(Cursor.POINTER)

        if meta is not None:
            meta.scroll += host.scroll() * (self.font.text_height(window.title) + self.padding)
            meta.scroll = min(0, max(meta.scroll, -window.max_scroll))

        if host.mouse_just_pressed():
            self.drag_start = mouse
            self.drag_offset = mouse - window.position
            self.top_window = window
            if meta is not None:
                meta.z = 0
                if meta.dock is None and dist < RESIZE_GRAB_DISTANCE:
                    self.resizing = window
            for other in self.windows:
                if other is window:
                    continue
                other_meta = self.layout.windows.get(other.title)
                if other_meta is not None:
                    other_meta.z += 1

        drag_dist = int((self.drag_start - mouse).magnitude())
        if (self.sliding is None and self.resizing is None and self.scrolling is None
                and dist > RESIZE_GRAB_DISTANCE and drag_dist > DRAG_THRESHOLD
                and host.mouse_held()):
            host.set_cursor(Cursor.MOVE)
            self.dragging = window

    def end_frame(self) -> None:
        """Handle input for the frame, draw it and flush the renderer."""
        self._handle_keys()
        host = self.host

        if self.hovered is None and host.mouse_just_released():
            self._clear_active()

        self._handle_window_mouse()

        docking = draw_frame(self)

        if host.mouse_just_released():
            if self.dragging is not None and not docking:
                self.layout.change_dock(self.layout.windows.get(self.dragging.title), None)
            self.dragging = None
            self.resizing = None
            self.scrolling = None
            self.sliding = None
            self._sliding_key = None
            host.set_cursor(Cursor.POINTER)

        self.renderer.flush()
        self.last_mouse_pos = host.mouse_position()

    # -- settings and queries ---------------------------------------------

    def set_root_dockspace(self, rect: FloatRect) -> None:
        """Set the screen fraction covered by the root dockspace."""
        self.layout.root.rect = rect

    def max_column_size(self) -> int:
        """Widest a column can be in the current window."""
        window = self._require_window()
        dim = window.dimensions.x
        if window.content_size > window.dimensions.y:
            dim -= self.scrollbar_width
        return dim - self.padding * 2

    def enable_docking(self, enable: bool) -> None:
        self.docking = enable

    def any_window_hovered(self) -> bool:
        return bool(self._hovered_windows(1))

    def any_item_hovered(self) -> bool:
        return self.hovered is not None

    def anything_hovered(self) -> bool:
        return self.any_window_hovered() or self.any_item_hovered()

    def any_item_active(self) -> bool:
        return self.active is not None

    def any_item_hot(self) -> bool:
        return self.hot is not None

    def any_windows_dragging(self) -> bool:
        return self.dragging is not None

    def can_scroll(self) -> bool:
        """True if the current window's content is taller than the window."""
        window = self._require_window()
        return window.content_size > window.dimensions.y

    # -- windows -----------------------------------------------------------

    def begin_window(self, name: str, position: Vec2, open_flag: Ref[bool] | None = None) -> bool:
        """Open a window; returns False, adding nothing, if it is closed."""
        if open_flag is not None and not open_flag.value:
            return False

        window = self._window_cache.get(name)
        if window is None:
            window = UIWindow(title=name)
            self._window_cache[name] = window
        window.font = self.font
        window.open = open_flag
        window.elements = []
        window.position = position
        window.dimensions = Vec2(DEFAULT_WINDOW_WIDTH, self.window_max_height)
        self.windows.append(window)
        self.current_window = window

        meta = self.layout.windows.get(name)
        if meta is None:
            meta = WindowMeta(position, window.dimensions)
            self.layout.windows[name] = meta
        else:
            self._place_window(window, meta)
            window.z = meta.z

        self.cursor_pos = Vec2(
            window.position.x + self.padding,
            window.position.y + meta.scroll + self.font.text_height(name) + self.padding * 2,
        )
        return True

    def end_window(self) -> None:
        """Close the current window and apply dragging and resizing to it."""
        window = self._require_window()
        meta = self.layout.windows[window.title]
        self._place_window(window, meta)

        window.content_size = (self.cursor_pos.y - meta.scroll) - window.position.y
        window.max_scroll = window.content_size - window.dimensions.y

        mouse = self.host.mouse_position()
        if window is self.dragging:
            meta.position = mouse - self.drag_offset
            self.current_dockspace = None
            if self.docking:
                width, height = self.host.size()
                self.current_dockspace = self.layout.dock_at(mouse, width, height)

        if window is self.resizing:
            size = mouse - window.position
            meta.dimensions = Vec2(max(size.x, MIN_WINDOW_WIDTH), max(size.y, MIN_WINDOW_HEIGHT))

        self.current_window = None

    # -- widgets -----------------------------------------------------------

    def text(self, text: str) -> None:
        """Add a line of text."""
        self._add_item(UIElement(ElementKind.TEXT, position=self.cursor_pos, text=text))
        self._advance(self.font.text_height(text) + self.padding)

    def text_wrapped(self, text: str) -> None:
        """Add text wrapped to the column width."""
        wrapped = _word_wrap(self.font, text, self.column_size)
        height = self.font.text_height(wrapped)
        self._add_item(UIElement(
            ElementKind.TEXT_WRAPPED,
            position=self.cursor_pos,
            dimensions=Vec2(self.font.text_width(wrapped), height),
            text=wrapped,
            wrap=self.column_size - self.padding,
        ))
        self._advance(height + self.padding)

    def textf(self, fmt: str, *args: Any) -> None:
        """Add text formatted with ``%``-style arguments."""
        text = fmt % args if args else fmt
        if len(text) >= TEXT_BUFFER_SIZE:
            raise ValueError(f"formatted text must be shorter than {TEXT_BUFFER_SIZE} characters")
        height = self.font.text_height(text)
        self._add_item(UIElement(
            ElementKind.TEXT,
            position=self.cursor_pos,
            dimensions=Vec2(self.font.text_width(text), height),
            text=text,
        ))
        self._advance(height + self.padding)

    def button(self, text: str) -> bool:
        """Add a button; True on the frame it is clicked."""
        pad = self.padding
        r = Rect(self.cursor_pos.x, self.cursor_pos.y,
                 self.font.text_width(text) + pad * 2, self.font.text_height(text) + pad * 2)
        el = self._add_item(UIElement(ElementKind.BUTTON, position=self.cursor_pos,
                                      dimensions=Vec2(r.w, r.h), text=text))
        self._advance(self.font.text_height(text) + pad * 3)
        return self._press(el, r)

    def text_input(self, buffer: TextBuffer) -> bool:
        """Add a single-line text input; True when editing ends with return."""
        pad = self.padding
        r = Rect(self.cursor_pos.x, self.cursor_pos.y,
                 self.column_size - pad * 2, self.font.height + pad * 2)
        el = self._add_item(UIElement(
            ElementKind.TEXT_INPUT,
            position=self.cursor_pos,
            dimensions=Vec2(r.w, r.h),
            buffer=buffer,
            input_position=Vec2(r.x, r.y),
            input_dimensions=Vec2(r.w, r.h),
        ))
        self._advance(self.font.height + pad * 4)
        self.input.input_filter = text_input_filter

        if self._press(el, r, check_sliding=False):
            self.active = el
            self._active_key = self._element_key(el)
            self.input.focus(buffer)

        if self.active is el and self.host.key_just_released(Key.RETURN):
            self._clear_active()
            return True
        return False

    def slider(self, value: Ref[float], minimum: float, maximum: float) -> bool:
        """Add a slider over [minimum, maximum]; True when it changes ``value``."""
        if maximum == minimum:
            raise ValueError("slider range must not be empty")
        pad = self.padding
        r = Rect(self.cursor_pos.x, self.cursor_pos.y,
                 self.column_size - pad * 2, SLIDER_HANDLE.y)
        handle = Rect(
            r.x + int((value.value - minimum) * (r.w - SLIDER_HANDLE.x) / (maximum - minimum)),
            r.y, SLIDER_HANDLE.x, SLIDER_HANDLE.y,
        )
        track = Rect(r.x, r.y + (r.h // 2 + SLIDER_TRACK_HEIGHT // 2) - 1, r.w, SLIDER_TRACK_HEIGHT)
        el = self._add_item(UIElement(ElementKind.SLIDER, position=self.cursor_pos,
                                      dimensions=Vec2(r.w, r.h), track=track, handle=handle))
        self._advance(r.h + pad)

        if self._interactive(el, check_sliding=False) and self._mouse_over(handle):
            self.hovered = el
            if self.host.mouse_held():
                self.hot = el
                self.sliding = el
                self._sliding_key = self._element_key(el)

        if self.sliding is el and r.w:
            new_value = minimum + (self.host.mouse_position().x - r.x) * (maximum - minimum) / r.w
            new_value = min(max(new_value, minimum), maximum)
            if new_value != value.value:
                value.value = new_value
                return True
        return False

    def image(self, texture: Any, rect: Rect, dimensions: Vec2) -> None:
        """Add an image showing ``rect`` of ``texture`` at ``dimensions``."""
        el = self._add_item(UIElement(ElementKind.IMAGE, position=self.cursor_pos,
                                      dimensions=dimensions, texture=texture, rect=rect))
        self._advance(el.dimensions.y + self.padding)

    def image_button(self, texture: Any, rect: Rect, dimensions: Vec2) -> bool:
        """Add a clickable image; True on the frame it is clicked."""
        r = Rect(self.cursor_pos.x, self.cursor_pos.y, dimensions.x, dimensions.y)
        el = self._add_item(UIElement(ElementKind.IMAGE, position=self.cursor_pos,
                                      dimensions=dimensions, texture=texture, rect=rect))
        self._advance(el.dimensions.y + self.padding)
        return self._press(el, r)

    def toggle(self, value: Ref[bool]) -> bool:
        """Add a check box; flips ``value`` and returns True when clicked."""
        size = self.font.height + self.padding * 2
        r = Rect(self.cursor_pos.x, self.cursor_pos.y, size, size)
        el = self._add_item(UIElement(ElementKind.TOGGLE, position=self.cursor_pos,
                                      dimensions=Vec2(size, size), value=value))
        self._advance(el.dimensions.y + self.padding)
        if self._press(el, r):
            value.value = not value.value
            return True
        return False

    def rect(self, dimensions: Vec2, color: Color) -> None:
        """Add a filled rectangle."""
        el = self._add_item(UIElement(ElementKind.RECT, position=self.cursor_pos,
                                      dimensions=dimensions, fill=color))
        self._advance(el.dimensions.y + self.padding)

    def loading_bar(self, text: str, percentage: int) -> None:
        """Show a centred loading bar for this frame."""
        self.loading = text
        self.loading_percentage = percentage
        self.loading_font = self.font

    def _add_floating(self, btn: FloatingButton) -> FloatingButton:
        self.floating_cursor = Vec2(
            self.floating_cursor.x,
            self.floating_cursor.y - (btn.dimensions.y + self.floating_padding),
        )
        btn.position = self.floating_cursor
        self.floating.append(btn)
        return btn

    def floating_button(self, text: str) -> bool:
        """Add a text button stacked up from the bottom-left corner."""
        btn = self._add_floating(FloatingButton(
            font=self.font, text=text,
            dimensions=Vec2(self.font.text_width(text), self.font.text_height(text)),
        ))
        if self.anything_hovered():
            return False
        rect = Rect(btn.position.x, btn.position.y, btn.dimensions.x, btn.dimensions.y)
        if self._mouse_over(rect) and self.sliding is None:
            btn.color = UIColor.FLOATING_BTN_HOVER
            if self.host.mouse_held():
                btn.color = UIColor.FLOATING_BTN_ACTIVE
            if self.host.mouse_just_released():
                return True
        return False

    def floating_image(self, texture: Any, rect: Rect, dimensions: Vec2) -> bool:
        """Add an image button stacked up from the bottom-left corner."""
        btn = self._add_floating(FloatingButton(
            font=self.font, texture=texture, rect=rect, dimensions=dimensions,
        ))
        if self.anything_hovered():
            return False
        area = Rect(btn.position.x, btn.position.y, btn.dimensions.x, btn.dimensions.y)
        return (self._mouse_over(area) and self.sliding is None
                and self.host.mouse_just_released())

    def columns(self, count: int, width: int) -> None:
        """Lay out the following items in ``count`` columns ``width`` wide."""
        self._columns = max(count, 1)
        self.column_size = width

    def color(self, color: Color) -> None:
        """Draw the following items' text in ``color``."""
        self._override_color = True
        self._color_override = color

    def reset_color(self) -> None:
        """Go back to the style's text colour."""
        self._override_color = False

    def save_layout(self, path: str) -> None:
        """Save window positions and dockspaces to ``path``."""
        self.layout.save(path)

    def load_layout(self, path: str) -> None:
        """Restore window positions and dockspaces from ``path``."""
        self.layout.load(path)