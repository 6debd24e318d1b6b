"""Fixed-size integer hash table for mapping system keycodes to engine keys."""

from __future__ import annotations

from collections.abc import Iterator

_EMPTY = -1


class KeyTable:
    """Open-addressing table of non-negative integer keys to integer values."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("key table size must be positive")
        self._keys = [_EMPTY] * size
        self._values = [0] * size

    def __len__(self) -> int:
        return sum(1 for key in self._keys if key != _EMPTY)

    def _probe(self, key: int) -> Iterator[int]:
        size = len(self._keys)
        start = key % size
        for step in range(size):
            yield (start + step) % size

    def search(self, key: int) -> int | None:
        """Return the value stored for ``key``, or None if it is absent."""
        if key < 0:
            return None
        for index in self._probe(key):
            if self._keys[index] == key:
                return self._values[index]
        return None

    def insert(self, key: int, value: int) -> None:
        """Store ``value`` under ``key`` in the first free slot."""
        if key < 0:
            raise ValueError("keys must be non-negative")
        for index in self._probe(key):
            if self._keys[index] == _EMPTY:
                self._keys[index] = key
                self._values[index] = value
                return
        raise OverflowError("key table is full")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, int) and self.search(key) is not None

    def __getitem__(self, key: int) -> int:
        value = self.search(key)
        if value is None:
            raise KeyError(key)
        return value