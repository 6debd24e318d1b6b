"""Small value types for positions, rectangles and colours."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """A two-dimensional vector with integer or float components."""

    x: float = 0
    y: float = 0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its corner and size."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0

    @property
    def position(self) -> Vec2:
        return Vec2(self.x, self.y)

    @property
    def size(self) -> Vec2:
        return Vec2(self.w, self.h)

    def contains(self, point: Vec2) -> bool:
        """True if ``point`` lies strictly inside the rectangle."""
        return (
            self.x < point.x < self.x + self.w
            and self.y < point.y < self.y + self.h
        )

    def overlaps(self, other: Rect) -> bool:
        """True if the two rectangles share some area."""
        return (
            self.x + self.w > other.x
            and self.y + self.h > other.y
            and self.x < other.x + other.w
            and self.y < other.y + other.h
        )


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit channels."""

    r: int = 255
    g: int = 255
    b: int = 255
    a: int = 255

    @classmethod
    def from_hex(cls, rgb: int, alpha: int) -> Color:
        """Build a colour from a 0xRRGGBB value and an alpha byte."""
        return cls((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF, alpha & 0xFF)