"""Drawing pass of the immediate-mode UI.

The pass runs at the end of a frame. It draws the floating buttons, every
window and its elements (back to front by ``z``), the docking overlay and
the loading bar. While drawing it also handles scrollbar and close-button
input, and dropping a dragged window onto a docking handle.
"""

from __future__ import annotations

from typing import Any, Protocol

from mvcore.coresys import TexturedQuad
from mvcore.geometry import Color, Rect, Vec2
from mvcore.imui_base import (
    Dockspace,
    DockDirection,
    ElementKind,
    FloatingButton,
    Layout,
    UIColor,
    UIElement,
    UIWindow,
    WindowMeta,
)
from mvcore.imui_input import TextInputState

DOCK_HANDLE_SIZE = 80
DOCK_HANDLE_GAP = 3
LOADING_BAR_WIDTH = 300
LOADING_BAR_HEIGHT = 16
MIN_SCROLL_HANDLE = 32


class Font(Protocol):
    """Text metrics the UI needs from a font."""

    height: int

    def text_width(self, text: str) -> int: ...

    def text_height(self, text: str) -> int: ...


class Renderer(Protocol):
    """Drawing operations the UI needs from a renderer."""

    def push(self, quad: TexturedQuad) -> None: ...

    def clip(self, rect: Rect) -> None: ...

    def text(self, font: Any, text: str, x: int, y: int, color: Color) -> None: ...


class Host(Protocol):
    """The platform window: its size and the state of the mouse."""

    def size(self) -> tuple[int, int]: ...

    def mouse_position(self) -> Vec2: ...

    def mouse_held(self) -> bool: ...

    def mouse_just_pressed(self) -> bool: ...

    def mouse_just_released(self) -> bool: ...

    def scroll(self) -> int: ...


class DrawContext(Protocol):
    """The UI state read, and partly updated, by :func:`draw_frame`."""

    renderer: Renderer
    host: Host
    font: Font
    style: dict[UIColor, Color]
    padding: int
    scrollbar_width: int
    windows: list[UIWindow]
    layout: Layout
    floating: list[FloatingButton]
    hovered: UIElement | None
    hot: UIElement | None
    active: UIElement | None
    sliding: UIElement | None
    dragging: UIWindow | None
    scrolling: UIWindow | None
    mouse_delta: Vec2
    input: TextInputState
    current_dockspace: Dockspace | None
    loading: str | None
    loading_percentage: int
    loading_font: Font | None


def _div(a: float, b: float) -> int:
    """Integer division truncating toward zero."""
    a, b = int(a), int(b)
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _draw_rect(ui: DrawContext, rect: Rect, color: UIColor) -> None:
    ui.renderer.push(TexturedQuad(
        position=Vec2(rect.x, rect.y),
        dimensions=Vec2(rect.w, rect.h),
        color=ui.style[color],
    ))


def _mouse_over(ui: DrawContext, rect: Rect) -> bool:
    return rect.contains(ui.host.mouse_position())


def _clamp_scroll(meta: WindowMeta, window: UIWindow) -> None:
    if meta.scroll < -window.max_scroll:
        meta.scroll = -window.max_scroll
    if meta.scroll > 0:
        meta.scroll = 0


def _draw_floating(ui: DrawContext) -> None:
    for btn in ui.floating:
        if btn.text:
            ui.renderer.text(btn.font, btn.text, btn.position.x, btn.position.y,
                             ui.style[btn.color])
        elif btn.texture is not None:
            ui.renderer.push(TexturedQuad(
                texture=btn.texture,
                position=btn.position,
                dimensions=btn.dimensions,
                rect=btn.rect,
                color=Color(255, 255, 255, 255),
            ))


def _state_color(ui: DrawContext, el: UIElement, normal: UIColor,
                 hovered: UIColor, hot: UIColor) -> UIColor:
    color = normal
    if ui.hovered is el:
        color = hovered
    if ui.hot is el:
        color = hot
    return color


def _draw_text_input(ui: DrawContext, el: UIElement, clip_rect: Rect) -> None:
    pad = ui.padding
    ipos, idim = el.input_position, el.input_dimensions
    color = _state_color(ui, el, UIColor.BACKGROUND, UIColor.HOVERED, UIColor.HOT)
    _draw_rect(ui, Rect(ipos.x, ipos.y, idim.x, idim.y), color)

    text = el.buffer.text if el.buffer is not None else ""
    w = h = c_w = 0
    if el.buffer is not None:
        c_w = el.font.text_width(text[:ui.input.cursor])
        w = el.font.text_width(text)
        h = el.font.text_height(text)

    want_reset = False
    input_scroll = 0
    if w > idim.x - pad - h:
        ui.renderer.clip(Rect(
            ipos.x + pad,
            max(ipos.y + pad, clip_rect.y),
            idim.x - pad * 2,
            idim.y - pad * 2,
        ))
        want_reset = True
        if ui.active is el:
            input_scroll = min(0, idim.x - c_w - pad - h)

    ui.renderer.text(el.font, text, ipos.x + pad + input_scroll, ipos.y + pad, el.color)

    if want_reset:
        ui.renderer.clip(clip_rect)

    if ui.active is el:
        _draw_rect(ui, Rect(ipos.x + c_w + pad + input_scroll, ipos.y + pad, 1, h),
                   UIColor.TEXT)


def _draw_element(ui: DrawContext, el: UIElement, clip_rect: Rect) -> None:
    pad = ui.padding
    kind = el.kind
    if kind in (ElementKind.TEXT, ElementKind.TEXT_WRAPPED):
        ui.renderer.text(el.font, el.text, el.position.x, el.position.y, el.color)
    elif kind is ElementKind.BUTTON:
        color = _state_color(ui, el, UIColor.BACKGROUND, UIColor.HOVERED, UIColor.HOT)
        _draw_rect(ui, Rect(el.position.x, el.position.y,
                            el.dimensions.x, el.dimensions.y), color)
        ui.renderer.text(el.font, el.text, el.position.x + pad,
                         el.position.y + pad, el.color)
    elif kind is ElementKind.SLIDER:
        color = UIColor.BACKGROUND
        if ui.hovered is el:
            color = UIColor.HOVERED
        if ui.hot is el or ui.sliding is el:
            color = UIColor.HOT
        _draw_rect(ui, el.track, UIColor.BACKGROUND2)
        _draw_rect(ui, el.handle, color)
    elif kind is ElementKind.TOGGLE:
        color = _state_color(ui, el, UIColor.BACKGROUND, UIColor.HOVERED, UIColor.HOT)
        _draw_rect(ui, Rect(el.position.x, el.position.y,
                            el.dimensions.x, el.dimensions.y), color)
        if el.value is not None and el.value.value:
            x = el.position.x + (_div(el.dimensions.x, 2) - _div(el.font.text_width("x"), 2))
            ui.renderer.text(el.font, "x", x, el.position.y + pad, el.color)
    elif kind is ElementKind.TEXT_INPUT:
        _draw_text_input(ui, el, clip_rect)
    elif kind is ElementKind.IMAGE:
        color = _state_color(ui, el, UIColor.IMAGE, UIColor.IMAGE_HOVERED,
                             UIColor.IMAGE_HOT)
        ui.renderer.push(TexturedQuad(
            texture=el.texture,
            position=el.position,
            dimensions=el.dimensions,
            rect=el.rect,
            color=ui.style[color],
        ))
    elif kind is ElementKind.RECT:
        ui.renderer.push(TexturedQuad(
            position=el.position,
            dimensions=el.dimensions,
            rect=el.rect,
            color=el.fill,
        ))


def _draw_window(ui: DrawContext, window: UIWindow) -> None:
    host = ui.host
    pad = ui.padding
    meta = ui.layout.windows.get(window.title)

    can_scroll = window.content_size > window.dimensions.y
    title_w = window.font.text_width(window.title)
    title_h = window.font.text_height(window.title) + pad * 2
    scrollbar_width = ui.scrollbar_width if can_scroll else 0

    pos, dim = window.position, window.dimensions
    window_rect = Rect(pos.x, pos.y, dim.x, dim.y)
    border_rect = Rect(window_rect.x - 1, window_rect.y - 1,
                       window_rect.w + 3, window_rect.h + 3)
    scrollbar_rect = Rect(pos.x + dim.x - scrollbar_width, pos.y + title_h,
                          scrollbar_width, dim.y - title_h)
    handle_rect = scrollbar_rect
    scroll_col = UIColor.BACKGROUND2

    if meta is not None and can_scroll:
        handle_h = max(MIN_SCROLL_HANDLE,
                       _div(scrollbar_rect.h * dim.y, window.content_size))
        handle_y = scrollbar_rect.y
        if window.max_scroll:
            handle_y += _div(-meta.scroll * (scrollbar_rect.h - handle_h), window.max_scroll)
        handle_rect = Rect(scrollbar_rect.x, handle_y, scrollbar_rect.w, handle_h)

        width, height = host.size()
        if meta.dock is not None:
            base_w = meta.dock.screen_rect(width, height).w
        else:
            base_w = meta.dimensions.x
        window.dimensions = Vec2(base_w - scrollbar_width, window.dimensions.y)

        if (ui.dragging is None and ui.active is None and ui.hot is None
                and ui.scrolling is None and _mouse_over(ui, handle_rect)):
            scroll_col = UIColor.HOVERED
            meta.scroll += host.scroll() * (ui.font.text_height(window.title) + pad)
            if host.mouse_just_pressed():
                ui.scrolling = window
            _clamp_scroll(meta, window)

    if ui.scrolling is window:
        scroll_col = UIColor.HOT
        if meta is not None and scrollbar_rect.h:
            meta.scroll += _div(-ui.mouse_delta.y * window.content_size, scrollbar_rect.h)
            _clamp_scroll(meta, window)

    ui.renderer.clip(border_rect)
    _draw_rect(ui, border_rect, UIColor.WINDOW_BORDER)
    _draw_rect(ui, window_rect, UIColor.WINDOW_BACKGROUND)
    _draw_rect(ui, scrollbar_rect, UIColor.BACKGROUND)
    _draw_rect(ui, handle_rect, scroll_col)

    pos, dim = window.position, window.dimensions
    ui.renderer.text(window.font, window.title,
                     pos.x + (_div(dim.x, 2) - _div(title_w, 2)),
                     pos.y + pad, ui.style[UIColor.TEXT])

    if window.open is not None:
        close_size = window.font.height
        close_rect = Rect(pos.x + dim.x - (close_size + pad) + scrollbar_width,
                          pos.y + pad, close_size, close_size)
        close_col = UIColor.CLOSE
        if _mouse_over(ui, close_rect):
            close_col = UIColor.CLOSE_HOVER
            if host.mouse_held():
                close_col = UIColor.CLOSE_ACTIVE
            if host.mouse_just_released():
                window.open.value = False
                if meta is not None and meta.dock is not None:
                    ui.layout.change_dock(meta, None)
        _draw_rect(ui, close_rect, close_col)

    clip_rect = Rect(pos.x, pos.y + title_h, dim.x, dim.y - title_h)
    ui.renderer.clip(clip_rect)

    for el in window.elements:
        if el.position.y > pos.y + dim.y:
            break
        if el.position.y + el.dimensions.y < pos.y:
            continue
        _draw_element(ui, el, clip_rect)


def _draw_dock_overlay(ui: DrawContext) -> bool:
    dock = ui.current_dockspace
    dragging = ui.dragging
    if dock is None or dragging is None:
        return True

    width, height = ui.host.size()
    dock_rect = dock.screen_rect(width, height)
    ui.renderer.clip(dock_rect)

    size = DOCK_HANDLE_SIZE
    half = size // 2
    gap = DOCK_HANDLE_GAP
    cx = dock_rect.x + _div(dock_rect.w, 2)
    cy = dock_rect.y + _div(dock_rect.h, 2)

    left = Rect(cx - (size + half) - gap, cy - half, size, size)
    right = Rect(cx + half + gap, cy - half, size, size)
    top = Rect(cx - half, cy - size - half - gap, size, size)
    bottom = Rect(cx - half, cy + half + gap, size, size)
    middle = Rect(cx - half, cy - half, size, size)
    for handle in (left, right, top, bottom, middle):
        _draw_rect(ui, handle, UIColor.DOCK)

    meta = ui.layout.windows.get(dragging.title)
    if meta is None:
        meta = WindowMeta(dragging.position, dragging.dimensions)
        ui.layout.windows[dragging.title] = meta

    r = dock_rect
    half_w, half_h = _div(r.w, 2), _div(r.h, 2)
    splits = (
        (left, DockDirection.LEFT, Rect(r.x, r.y, half_w, r.h)),
        (right, DockDirection.RIGHT, Rect(r.x + int(r.w / 2.0), r.y, int(r.w / 2.0), r.h)),
        (top, DockDirection.UP, Rect(r.x, r.y, r.w, half_h)),
        (bottom, DockDirection.DOWN, Rect(r.x, r.y + half_h, r.w, half_h)),
    )

    docking = True
    preview = Rect()
    for handle, direction, split_preview in splits:
        if _mouse_over(ui, handle):
            preview = split_preview
            if ui.host.mouse_just_released():
                new_dock = ui.layout.split(dock, direction)
                ui.layout.change_dock(meta, new_dock)
            break
    else:
        if _mouse_over(ui, middle) and not dock.occupied:
            preview = r
            if ui.host.mouse_just_released():
                ui.layout.change_dock(meta, dock)
        else:
            docking = False

    _draw_rect(ui, preview, UIColor.DOCK)
    return docking


def _draw_loading_bar(ui: DrawContext) -> None:
    if not ui.loading:
        return
    font = ui.loading_font if ui.loading_font is not None else ui.font
    win_w, win_h = ui.host.size()
    pad = ui.padding
    text_h = font.text_height(ui.loading)

    container = Rect(
        _div(win_w, 2) - LOADING_BAR_WIDTH // 2 - pad,
        _div(win_h, 2) - _div(LOADING_BAR_HEIGHT + text_h + pad, 2) - pad,
        LOADING_BAR_WIDTH + pad * 2,
        LOADING_BAR_HEIGHT + text_h + pad * 3,
    )
    outline = Rect(container.x - 1, container.y - 1, container.w + 2, container.h + 2)
    ui.renderer.clip(outline)

    bar_rect = Rect(
        container.x + pad,
        container.y + text_h + pad * 2,
        container.w - pad * 2,
        container.h - (text_h + pad * 3),
    )
    progress = min(1.0, max(0.0, ui.loading_percentage / 100.0))
    bar = Rect(bar_rect.x, bar_rect.y, int(progress * bar_rect.w), bar_rect.h)

    _draw_rect(ui, outline, UIColor.WINDOW_BORDER)
    _draw_rect(ui, container, UIColor.WINDOW_BACKGROUND)
    _draw_rect(ui, bar_rect, UIColor.BACKGROUND)
    _draw_rect(ui, bar, UIColor.HOT)
    ui.renderer.text(font, ui.loading, container.x + pad, container.y + pad,
                     ui.style[UIColor.TEXT])


def draw_frame(ui: DrawContext) -> bool:
    """Draw the whole UI for this frame.

    Returns False when a window is being dragged over a dockspace but not
    over any usable docking handle, and True otherwise.
    """
    _draw_floating(ui)
    for window in sorted(ui.windows, key=lambda w: w.z, reverse=True):
        _draw_window(ui, window)
    docking = _draw_dock_overlay(ui)
    _draw_loading_bar(ui)
    return docking