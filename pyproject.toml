[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mvcore"
version = "0.1.0"
description = "Core pieces of a small 2D game engine: an entity-component system, a sprite rendering system, key tables and an immediate-mode UI."
requires-python = ">=3.10"
dependencies = []
keywords = ["ecs", "entity-component-system", "game-engine", "imgui", "immediate-mode-ui", "sparse-set"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mvcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
