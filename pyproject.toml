[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubcaster"
version = "0.1.0"
description = "A grid-map raycasting first-person explorer with XPM textures, doors and a minimap"
requires-python = ">=3.10"
keywords = ["raycasting", "game", "xpm", "cub", "first-person", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cubcaster = "cubcaster.app:main"

[tool.hatch.build.targets.wheel]
packages = ["cubcaster"]

[tool.pytest.ini_options]
addopts = "-ra"
