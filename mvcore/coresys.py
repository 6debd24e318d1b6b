"""Core components and the systems that draw and light them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from mvcore.entity import World
from mvcore.geometry import Color, Rect, Vec2

ANIMATED_SPRITE_MAX_FRAMES = 16

# Lights are matched by component type name, so any class called ``Light``
# with a ``position`` attribute takes part in lighting.
LIGHT_COMPONENT = "Light"


class Renderer(Protocol):
    """What the systems need from a renderer."""

    def push(self, quad: TexturedQuad) -> None: ...

    def push_light(self, light: Any) -> None: ...


@dataclass
class Transform:
    """Placement of an entity in the world."""

    position: Vec2 = field(default_factory=Vec2)
    dimensions: Vec2 = field(default_factory=Vec2)
    z: int = 0
    rotation: float = 0.0


@dataclass
class Collider:
    """An axis-aligned collision box."""

    rect: Rect = field(default_factory=Rect)


@dataclass
class Sprite:
    """A static image drawn at an entity's transform."""

    texture: Any = None
    rect: Rect = field(default_factory=Rect)
    origin: Vec2 = field(default_factory=Vec2)
    color: Color = field(default_factory=Color)
    hidden: bool = False
    inverted: bool = False
    unlit: bool = False


@dataclass
class AnimatedSprite:
    """A sprite that cycles through frames of a texture."""

    id: int = 0
    texture: Any = None
    frames: list[Rect] = field(default_factory=list)
    current_frame: int = 0
    speed: float = 1.0
    timer: float = 0.0
    origin: Vec2 = field(default_factory=Vec2)
    color: Color = field(default_factory=Color)
    hidden: bool = False
    inverted: bool = False
    unlit: bool = False
    rotation: float = 0.0

    def __post_init__(self) -> None:
        if len(self.frames) > ANIMATED_SPRITE_MAX_FRAMES:
            raise ValueError(
                f"an animated sprite holds at most {ANIMATED_SPRITE_MAX_FRAMES} frames"
            )

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def advance(self, ts: float) -> None:
        """Move the animation on by ``ts`` seconds."""
        self.timer += ts * self.speed
        if self.timer >= 1.0:
            self.timer = 0.0
            self.current_frame += 1
            if self.current_frame >= self.frame_count:
                self.current_frame = 0

    @property
    def current_rect(self) -> Rect:
        if not self.frames:
            return Rect()
        return self.frames[self.current_frame]


@dataclass(frozen=True)
class TexturedQuad:
    """One textured rectangle handed to the renderer."""

    texture: Any = None
    rect: Rect = Rect()
    position: Vec2 = Vec2()
    dimensions: Vec2 = Vec2()
    color: Color = Color()
    origin: Vec2 = Vec2()
    inverted: bool = False
    unlit: bool = False
    rotation: float = 0.0


def _screen_position(position: Vec2) -> Vec2:
    return Vec2(int(position.x), int(position.y))


def apply_lights(world: World, renderer: Renderer) -> None:
    """Move every light to its entity's position and hand it to the renderer."""
    for _entity, transform, light in world.view(Transform, LIGHT_COMPONENT):
        light.position = transform.position
        renderer.push_light(light)


def render_system(world: World, renderer: Renderer, ts: float) -> None:
    """Draw every sprite and animated sprite, back to front by ``z``.

    Animated sprites advance by ``ts`` even when they are hidden.
    """
    queue: list[tuple[int, TexturedQuad]] = []

    for _entity, transform, sprite in world.view(Transform, Sprite):
        if sprite.hidden:
            continue
        queue.append((transform.z, TexturedQuad(
            texture=sprite.texture,
            rect=sprite.rect,
            position=_screen_position(transform.position),
            dimensions=transform.dimensions,
            color=sprite.color,
            origin=sprite.origin,
            inverted=sprite.inverted,
            unlit=sprite.unlit,
            rotation=transform.rotation,
        )))

    for _entity, transform, anim in world.view(Transform, AnimatedSprite):
        anim.advance(ts)
        if anim.hidden:
            continue
        queue.append((transform.z, TexturedQuad(
            texture=anim.texture,
            rect=anim.current_rect,
            position=_screen_position(transform.position),
            dimensions=transform.dimensions,
            color=anim.color,
            origin=anim.origin,
            inverted=anim.inverted,
            unlit=anim.unlit,
            rotation=transform.rotation,
        )))

    queue.sort(key=lambda item: item[0])
    for _z, quad in queue:
        renderer.push(quad)