"""Core building blocks for a small 2D game engine: an ECS, sprite and light systems, key tables and an immediate-mode UI."""

__version__ = "0.1.0"

__all__ = [
    "core",
    "geometry",
    "keytable",
    "entity",
    "coresys",
    "imui_base",
    "imui_input",
    "imui_draw",
    "imui",
]