from dataclasses import dataclass, field

import pytest

from mvcore.coresys import (
    AnimatedSprite,
    Collider,
    Sprite,
    TexturedQuad,
    Transform,
    apply_lights,
    render_system,
)
from mvcore.entity import World
from mvcore.geometry import Color, Rect, Vec2


@dataclass
class Light:
    position: Vec2 = field(default_factory=Vec2)
    intensity: float = 1.0


class FakeRenderer:
    def __init__(self):
        self.quads = []
        self.lights = []

    def push(self, quad):
        self.quads.append(quad)

    def push_light(self, light):
        self.lights.append(light)


def make_entity(world, *components):
    e = world.new_entity()
    for c in components:
        world.add_component(e, c)
    return e


def test_sprites_sorted_by_z():
    world = World()
    renderer = FakeRenderer()
    make_entity(world, Transform(z=5), Sprite(rect=Rect(5, 0, 1, 1)))
    make_entity(world, Transform(z=-2), Sprite(rect=Rect(-2, 0, 1, 1)))
    make_entity(world, Transform(z=3), Sprite(rect=Rect(3, 0, 1, 1)))
    render_system(world, renderer, 0.0)
    assert [q.rect.x for q in renderer.quads] == [-2, 3, 5]


def test_hidden_sprite_is_skipped():
    world = World()
    renderer = FakeRenderer()
    make_entity(world, Transform(), Sprite(hidden=True))
    make_entity(world, Transform(), Sprite(rect=Rect(1, 2, 3, 4)))
    render_system(world, renderer, 0.0)
    assert [q.rect for q in renderer.quads] == [Rect(1, 2, 3, 4)]


def test_quad_copies_sprite_and_transform():
    world = World()
    renderer = FakeRenderer()
    sprite = Sprite(texture="tex", color=Color(1, 2, 3, 4), inverted=True, unlit=True,
                    origin=Vec2(0.5, 0.5))
    make_entity(world, Transform(position=Vec2(10.9, -3.5), dimensions=Vec2(16, 32),
                                 rotation=45.0), sprite)
    render_system(world, renderer, 0.0)
    (quad,) = renderer.quads
    assert quad == TexturedQuad(
        texture="tex", rect=Rect(), position=Vec2(10, -3), dimensions=Vec2(16, 32),
        color=Color(1, 2, 3, 4), origin=Vec2(0.5, 0.5), inverted=True, unlit=True,
        rotation=45.0,
    )


def test_animated_sprite_advances_after_full_second():
    world = World()
    renderer = FakeRenderer()
    frames = [Rect(0, 0, 8, 8), Rect(8, 0, 8, 8)]
    anim = AnimatedSprite(frames=frames, speed=1.0)
    make_entity(world, Transform(), anim)
    render_system(world, renderer, 0.5)
    assert anim.current_frame == 0
    render_system(world, renderer, 0.5)
    assert anim.current_frame == 1
    assert anim.timer == 0.0
    assert renderer.quads[-1].rect == frames[1]


def test_animated_sprite_wraps_around():
    world = World()
    anim = AnimatedSprite(frames=[Rect(0, 0, 1, 1), Rect(1, 0, 1, 1)], speed=2.0)
    make_entity(world, Transform(), anim)
    renderer = FakeRenderer()
    render_system(world, renderer, 0.5)
    render_system(world, renderer, 0.5)
    assert anim.current_frame == 0


def test_hidden_animated_sprite_still_advances():
    world = World()
    anim = AnimatedSprite(frames=[Rect(), Rect(1, 1, 1, 1)], hidden=True)
    make_entity(world, Transform(), anim)
    renderer = FakeRenderer()
    render_system(world, renderer, 1.0)
    assert anim.current_frame == 1
    assert renderer.quads == []


def test_too_many_frames_rejected():
    with pytest.raises(ValueError):
        AnimatedSprite(frames=[Rect()] * 17)


def test_apply_lights_moves_light_to_transform():
    world = World()
    renderer = FakeRenderer()
    light = Light()
    make_entity(world, Transform(position=Vec2(4.0, 9.0)), light)
    apply_lights(world, renderer)
    assert renderer.lights == [light]
    assert light.position == Vec2(4.0, 9.0)


def test_apply_lights_without_lights_pushes_nothing():
    world = World()
    renderer = FakeRenderer()
    make_entity(world, Transform(), Collider(Rect(0, 0, 1, 1)))
    apply_lights(world, renderer)
    assert renderer.lights == []