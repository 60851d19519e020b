[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snakecore"
version = "0.1.0"
description = "Engine core utilities for a real-time renderer: events, assets, scenes, jobs and a shader permutation compiler"
requires-python = ">=3.10"
dependencies = []
keywords = ["rendering", "vulkan", "engine", "shaders", "glsl", "ecs"]
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
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
snake-shader-permutations = "snakecore.shader_permutations:main"

[tool.hatch.build.targets.wheel]
packages = ["snakecore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
