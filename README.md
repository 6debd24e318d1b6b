# mvcore

Core building blocks for a small 2D game engine, in plain Python with no
third-party dependencies.

## What is inside

- `mvcore.core`: ELF hashing (`elf_hash`), string ids (`str_id`), component
  type descriptors (`TypeInfo`, `type_info`) and random helpers
  (`random_int`, `random_f64`, `random_chance`).
- `mvcore.geometry`: the frozen value types `Vec2`, `Rect` (with `contains`
  and `overlaps`) and `Color` (with `Color.from_hex`).
- `mvcore.keytable`: `KeyTable(size)`, a fixed-size open-addressing table of
  non-negative integer keys. It is meant for mapping platform key codes to
  standard ones. `search` returns `None` for a missing key. `insert` raises
  `OverflowError` when the table is full.
- `mvcore.entity`: a sparse-set entity-component system.
  - `World` holds the entities and their components.
  - Entity handles are versioned; see `make_handle`, `get_entity_id` and
    `get_entity_version`.
  - Create and destroy hooks can be set per component type.
  - `World.view(*types)` yields `(entity, component, ...)` tuples.
  - `EntityBuffer` collects entities to destroy later.
- `mvcore.coresys`: the standard components `Transform`, `Collider`, `Sprite`
  and `AnimatedSprite`, plus two systems:
  - `render_system` pushes `TexturedQuad` items to a renderer, sorted by `z`.
  - `apply_lights` hands components named `Light` to the renderer's
    `push_light`.
- `mvcore.imui`: `UIContext`, an immediate-mode GUI. It provides windows,
  docking, text, wrapped text, buttons, text inputs, sliders, toggles,
  images, rectangles, floating buttons, a loading bar, and layout save/load.
  Its supporting pieces live in three modules:
  - `mvcore.imui_base`: style colours, elements, `Ref`, dockspaces and the
    binary `Layout` format.
  - `mvcore.imui_input`: `TextBuffer` and `TextInputState`.
  - `mvcore.imui_draw`: the `draw_frame` pass.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## A short example

```python
from dataclasses import dataclass

from mvcore.entity import World


@dataclass
class Position:
    x: float
    y: float


@dataclass
class Velocity:
    dx: float
    dy: float


world = World()
e = world.new_entity()
world.add_component(e, Position(0.0, 0.0))
world.add_component(e, Velocity(1.0, 2.0))

for entity, pos, vel in world.view(Position, Velocity):
    pos.x += vel.dx
    pos.y += vel.dy

world.destroy_entity(e)
assert not world.is_valid(e)
```

Entity handles are 64-bit integers. The low 32 bits are the id and the high
32 bits are a version, which is bumped every time the id is recycled.
`World.is_valid` uses the version to detect stale handles.

## Using the UI

`UIContext(renderer, host, font)` draws nothing by itself. You supply three
objects.

The renderer needs these methods:
- `push(quad)`
- `clip(rect)`
- `text(font, text, x, y, color)`
- `resize(size)`
- `flush()`

The host window needs these methods:
- `size()`
- `mouse_position()`
- `mouse_held()`
- `mouse_just_pressed()`
- `mouse_just_released()`
- `scroll()`
- `key_just_pressed(key)`
- `key_just_released(key)`
- `set_cursor(cursor)`

The font needs a `height` attribute and the methods `text_width(text)` and
`text_height(text)`.

Each frame goes in this order:

1. Call `begin_frame()`.
2. For each window, call `begin_window(name, position, open_flag)`, then add
   widgets, then call `end_window()`.
3. Call `end_frame()`.

Values that widgets change in place are passed as `Ref` cells:
- the `open_flag` of a window,
- the value of a slider,
- the value of a toggle.

Text inputs edit a `TextBuffer`.

## What this package does not do

There is no window system, graphics back end, font loader or audio. The
systems and the UI only call the renderer, host and font objects you pass in.
The package offers no command-line program.