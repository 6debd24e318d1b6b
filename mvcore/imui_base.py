"""Shared data model of the immediate-mode UI: styles, elements and docking."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Any, Generic, TypeVar

from mvcore.geometry import Color, Rect, Vec2

T = TypeVar("T")

MAX_DOCKSPACES = 32

_U32 = struct.Struct("<I")
_META = struct.Struct("<7i")
_DOCK = struct.Struct("<iI?4f")


class UIColor(IntEnum):
    """Indices into the UI style colour table."""

    WINDOW_BACKGROUND = 0
    WINDOW_BORDER = 1
    BACKGROUND = 2
    BACKGROUND2 = 3
    HOVERED = 4
    TEXT = 5
    HOT = 6
    IMAGE = 7
    IMAGE_HOVERED = 8
    IMAGE_HOT = 9
    DOCK = 10
    CLOSE = 11
    CLOSE_HOVER = 12
    CLOSE_ACTIVE = 13
    FLOATING_BTN = 14
    FLOATING_BTN_HOVER = 15
    FLOATING_BTN_ACTIVE = 16


class ElementKind(Enum):
    TEXT = auto()
    TEXT_WRAPPED = auto()
    BUTTON = auto()
    TEXT_INPUT = auto()
    SLIDER = auto()
    IMAGE = auto()
    TOGGLE = auto()
    RECT = auto()


class DockDirection(IntEnum):
    """Side of a dockspace; also where a split dock's parent lies."""

    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3


def default_style() -> dict[UIColor, Color]:
    """The default colour for each style slot."""
    return {
        UIColor.WINDOW_BACKGROUND: Color.from_hex(0x1A1A1A, 150),
        UIColor.WINDOW_BORDER: Color.from_hex(0x0F0F0F, 200),
        UIColor.BACKGROUND: Color.from_hex(0x212121, 255),
        UIColor.BACKGROUND2: Color.from_hex(0x2D2D2D, 255),
        UIColor.HOVERED: Color.from_hex(0x242533, 255),
        UIColor.HOT: Color.from_hex(0x393D5B, 255),
        UIColor.TEXT: Color.from_hex(0xFFFFFF, 255),
        UIColor.IMAGE_HOVERED: Color.from_hex(0xAAAEEB, 255),
        UIColor.IMAGE_HOT: Color.from_hex(0x7686FF, 255),
        UIColor.IMAGE: Color.from_hex(0xFFFFFF, 255),
        UIColor.DOCK: Color.from_hex(0xDB3D40, 150),
        UIColor.CLOSE: Color.from_hex(0xC41D23, 255),
        UIColor.CLOSE_HOVER: Color.from_hex(0xF90008, 255),
        UIColor.CLOSE_ACTIVE: Color.from_hex(0x9B1115, 255),
        UIColor.FLOATING_BTN: Color.from_hex(0xE5E5E5, 255),
        UIColor.FLOATING_BTN_HOVER: Color.from_hex(0xC6C6C6, 255),
        UIColor.FLOATING_BTN_ACTIVE: Color.from_hex(0xFFFFFF, 255),
    }


@dataclass
class FloatRect:
    """A rectangle in fractions of the screen size."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    def to_screen(self, width: int, height: int) -> Rect:
        """Scale to a pixel rectangle on a screen of the given size."""
        return Rect(int(self.x * width), int(self.y * height),
                    int(self.w * width), int(self.h * height))


@dataclass(eq=False)
class Dockspace:
    """A screen region that a window can be docked into."""

    rect: FloatRect = field(default_factory=FloatRect)
    parent: Dockspace | None = None
    parent_dir: DockDirection = DockDirection.LEFT
    occupied: bool = False

    def screen_rect(self, width: int, height: int) -> Rect:
        return self.rect.to_screen(width, height)


@dataclass(eq=False)
class WindowMeta:
    """State of a window kept from frame to frame."""

    position: Vec2 = Vec2()
    dimensions: Vec2 = Vec2()
    scroll: int = 0
    z: int = 0
    dock: Dockspace | None = None


@dataclass(eq=False)
class Ref(Generic[T]):
    """A mutable cell, for values a widget changes in place."""

    value: T


@dataclass(eq=False)
class UIElement:
    """One item laid out in a window during a frame."""

    kind: ElementKind
    position: Vec2 = Vec2()
    dimensions: Vec2 = Vec2()
    font: Any = None
    color: Color = Color()
    override_color: bool = False
    text: str = ""
    wrap: int = 0
    value: Ref[Any] | None = None
    buffer: Any = None
    input_position: Vec2 = Vec2()
    input_dimensions: Vec2 = Vec2()
    track: Rect = Rect()
    handle: Rect = Rect()
    texture: Any = None
    rect: Rect = Rect()
    fill: Color = Color()


@dataclass(eq=False)
class FloatingButton:
    """A button drawn outside any window, stacked up from the screen corner."""

    position: Vec2 = Vec2()
    dimensions: Vec2 = Vec2()
    font: Any = None
    color: UIColor = UIColor.FLOATING_BTN
    texture: Any = None
    rect: Rect = Rect()
    text: str | None = None


@dataclass(eq=False)
class UIWindow:
    """A window built during the current frame."""

    title: str
    position: Vec2 = Vec2()
    dimensions: Vec2 = Vec2()
    font: Any = None
    open: Ref[bool] | None = None
    z: int = 0
    max_scroll: int = 0
    content_size: int = 0
    elements: list[UIElement] = field(default_factory=list)

    @property
    def rect(self) -> Rect:
        return Rect(self.position.x, self.position.y,
                    self.dimensions.x, self.dimensions.y)


class Layout:
    """Dockspaces and per-window state, which can be saved and restored."""

    def __init__(self) -> None:
        self.dockspaces: list[Dockspace] = [Dockspace(FloatRect(0.0, 0.0, 1.0, 1.0))]
        self.windows: dict[str, WindowMeta] = {}

    @property
    def root(self) -> Dockspace:
        return self.dockspaces[0]

    def dock_at(self, point: Vec2, width: int, height: int) -> Dockspace | None:
        """The first dockspace whose screen area contains ``point``."""
        for dock in self.dockspaces:
            if dock.screen_rect(width, height).contains(point):
                return dock
        return None

    def change_dock(self, meta: WindowMeta | None, dock: Dockspace | None) -> None:
        """Move a window to ``dock``, merging its old split back into the parent."""
        if meta is None:
            return
        old = meta.dock
        if old is not None:
            old.occupied = False
            parent = old.parent
            if parent is not None:
                if old.parent_dir is DockDirection.LEFT:
                    parent.rect.w += old.rect.w
                elif old.parent_dir is DockDirection.RIGHT:
                    parent.rect.x -= old.rect.w
                    parent.rect.w += old.rect.w
                elif old.parent_dir is DockDirection.UP:
                    parent.rect.h += old.rect.h
                elif old.parent_dir is DockDirection.DOWN:
                    parent.rect.y -= old.rect.h
                    parent.rect.h += old.rect.h
                self._remove(old)
        meta.dock = dock

    def _remove(self, dock: Dockspace) -> None:
        idx = next(i for i, d in enumerate(self.dockspaces) if d is dock)
        last = self.dockspaces.pop()
        if last is not dock:
            self.dockspaces[idx] = last

    def split(self, dock: Dockspace, direction: DockDirection) -> Dockspace:
        """Halve ``dock`` and return a new occupied dock on the ``direction`` side."""
        if len(self.dockspaces) >= MAX_DOCKSPACES:
            raise OverflowError(f"at most {MAX_DOCKSPACES} dockspaces are allowed")
        r = dock.rect
        if direction in (DockDirection.LEFT, DockDirection.RIGHT):
            r.w /= 2
        else:
            r.h /= 2
        new = Dockspace(FloatRect(r.x, r.y, r.w, r.h), parent=dock, occupied=True)
        if direction is DockDirection.LEFT:
            new.parent_dir = DockDirection.RIGHT
            r.x += r.w
        elif direction is DockDirection.RIGHT:
            new.parent_dir = DockDirection.LEFT
            new.rect.x += r.w
        elif direction is DockDirection.UP:
            new.parent_dir = DockDirection.DOWN
            r.y += r.h
        else:
            new.parent_dir = DockDirection.UP
            new.rect.y += r.h
        self.dockspaces.append(new)
        return new

    def _index(self, dock: Dockspace | None) -> int:
        if dock is None:
            return -1
        for i, d in enumerate(self.dockspaces):
            if d is dock:
                return i
        return -1

    def save(self, path: str) -> None:
        """Write window state and dockspaces to ``path`` in binary form."""
        with open(path, "wb") as out:
            out.write(_U32.pack(len(self.windows)))
            for title, meta in self.windows.items():
                encoded = title.encode("utf-8")
                out.write(_U32.pack(len(encoded)))
                out.write(encoded)
                out.write(_META.pack(
                    int(meta.position.x), int(meta.position.y),
                    int(meta.dimensions.x), int(meta.dimensions.y),
                    meta.scroll, meta.z, self._index(meta.dock),
                ))
            out.write(_U32.pack(len(self.dockspaces)))
            for dock in self.dockspaces:
                r = dock.rect
                out.write(_DOCK.pack(self._index(dock.parent), int(dock.parent_dir),
                                     dock.occupied, r.x, r.y, r.w, r.h))

    def load(self, path: str) -> None:
        """Read state written by :meth:`save`, replacing the dockspaces."""
        with open(path, "rb") as src:
            data = src.read()
        offset = 0

        def take(layout: struct.Struct) -> tuple[Any, ...]:
            nonlocal offset
            if offset + layout.size > len(data):
                raise ValueError("layout file is truncated")
            values = layout.unpack_from(data, offset)
            offset += layout.size
            return values

        (meta_count,) = take(_U32)
        metas: list[tuple[str, WindowMeta, int]] = []
        for _ in range(meta_count):
            (title_len,) = take(_U32)
            if offset + title_len > len(data):
                raise ValueError("layout file is truncated")
            title = data[offset:offset + title_len].decode("utf-8")
            offset += title_len
            px, py, dx, dy, scroll, z, dock_idx = take(_META)
            metas.append((title, WindowMeta(Vec2(px, py), Vec2(dx, dy), scroll, z), dock_idx))

        (dock_count,) = take(_U32)
        if dock_count > MAX_DOCKSPACES:
            raise ValueError("layout file holds too many dockspaces")
        raw_docks = [take(_DOCK) for _ in range(dock_count)]
        docks = [Dockspace(FloatRect(x, y, w, h), None, DockDirection(direction), occupied)
                 for _parent, direction, occupied, x, y, w, h in raw_docks]

        def resolve(idx: int) -> Dockspace | None:
            if idx < 0:
                return None
            if idx >= len(docks):
                raise ValueError(f"dockspace index {idx} out of range")
            return docks[idx]

        for dock, raw in zip(docks, raw_docks):
            dock.parent = resolve(raw[0])
        for title, meta, dock_idx in metas:
            meta.dock = resolve(dock_idx)
            self.windows[title] = meta
        self.dockspaces = docks