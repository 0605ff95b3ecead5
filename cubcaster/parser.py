"""Reading and validating ``.cub`` scene files."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from cubcaster.scene import CubError, Player, Scene

_SPACE = " \t\n\v\f\r"
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]*)")
_DECLARATION_TAGS = ("NO ", "SO ", "WE ", "EA ", "F ", "C ")
_ALL_TAGS = _DECLARATION_TAGS + ("DOOR ",)
_WALL_ERROR = "Map must be surrounded by walls"


def _is_space(char: str) -> bool:
    return char != "" and char in _SPACE


def _is_blank(line: str) -> bool:
    return all(char in _SPACE for char in line)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits)
    return -value if sign == "-" else value


def _is_map_line(line: str) -> bool:
    return "1" in line and not any(tag in line for tag in _ALL_TAGS)


def check_declarations(lines: Sequence[str]) -> None:
    """Require each of NO, SO, WE, EA, F and C to appear exactly once."""
    counts = dict.fromkeys(_DECLARATION_TAGS, 0)
    for line in lines:
        for tag in _DECLARATION_TAGS:
            if tag in line:
                counts[tag] += 1
                break
    if any(count != 1 for count in counts.values()):
        raise CubError("Component must be declared exactly once")


def parse_color(text: str) -> tuple[int, int, int]:
    """Parse ``R,G,B`` with each component in 0..255."""
    parts = [part for part in text.split(",") if part]
    if len(parts) < 3:
        raise CubError("Invalid color format")
    color = (_atoi(parts[0]), _atoi(parts[1]), _atoi(parts[2]))
    if any(value < 0 or value > 255 for value in color):
        raise CubError("Color values must be between 0 and 255")
    return color


def _apply_declaration(scene: Scene, line: str) -> None:
    line = line.lstrip(_SPACE)
    if line.startswith("NO "):
        scene.north_texture = line[3:]
    elif line.startswith("SO "):
        scene.south_texture = line[3:]
    elif line.startswith("WE "):
        scene.west_texture = line[3:]
    elif line.startswith("EA "):
        scene.east_texture = line[3:]
    elif line.startswith("DOOR "):
        scene.door_texture = line[5:]
    elif line.startswith("F "):
        scene.floor_color = parse_color(line[2:])
    elif line.startswith("C "):
        scene.ceiling_color = parse_color(line[2:])


def parse_content(text: str) -> Scene:
    """Read declarations and the map from the text of a scene file."""
    lines = [line for line in text.split("\n") if line]
    check_declarations(lines)
    scene = Scene()
    for index, line in enumerate(lines):
        if _is_blank(line):
            continue
        if _is_map_line(line):
            scene.grid = list(lines[index:])
            break
        _apply_declaration(scene, line)
    if not scene.grid:
        raise CubError("No map found in the file")
    return scene


def _check_horizontal_borders(grid: Sequence[str]) -> None:
    for row in (grid[0], grid[-1]):
        if any(char != "1" and not _is_space(char) for char in row):
            raise CubError(_WALL_ERROR)


def _check_vertical_borders(grid: Sequence[str]) -> None:
    for row in grid:
        content = row.strip(_SPACE)
        if not content or content[0] != "1" or content[-1] != "1":
            raise CubError(_WALL_ERROR)


def _check_inner_walls(grid: Sequence[str]) -> None:
    for i in range(1, len(grid) - 1):
        above, row, below = grid[i - 1], grid[i], grid[i + 1]
        for j in range(1, len(row) - 1):
            char = row[j]
            if char == "1" or _is_space(char):
                continue
            if (
                j >= len(above)
                or _is_space(above[j])
                or j >= len(below)
                or _is_space(below[j])
                or _is_space(row[j - 1])
                or _is_space(row[j + 1])
            ):
                raise CubError(_WALL_ERROR)


def check_walls(grid: Sequence[str]) -> None:
    """Require the walkable area of the map to be closed by walls."""
    if not grid:
        raise CubError(_WALL_ERROR)
    _check_horizontal_borders(grid)
    _check_vertical_borders(grid)
    _check_inner_walls(grid)


def find_player(grid: Sequence[str]) -> tuple[Player, bool]:
    """Return the single player of the map and whether the map has doors."""
    player: Player | None = None
    count = 0
    has_door = False
    for row_index, row in enumerate(grid):
        for col_index, char in enumerate(row):
            if char in "NSEW":
                count += 1
                player = Player.spawn(row_index, col_index, char)
            elif char == "D":
                has_door = True
            elif char not in "01D ":
                raise CubError("Invalid character in map")
    if count != 1 or player is None:
        raise CubError("Map must contain exactly one player")
    return player, has_door


def check_textures_exist(scene: Scene, has_door: bool) -> None:
    """Require every wall texture and both colours to be declared."""
    if (
        scene.north_texture is None
        or scene.south_texture is None
        or scene.west_texture is None
        or scene.east_texture is None
        or not scene.floor_color[0]
        or not scene.ceiling_color[0]
    ):
        raise CubError("Missing texture or color declaration")
    if has_door and scene.door_texture is None:
        raise CubError("Missing door texture declaration")


def check_texture_files(scene: Scene, has_door: bool) -> None:
    """Require every texture file in use to be readable."""
    files = [
        ("north", scene.north_texture),
        ("south", scene.south_texture),
        ("west", scene.west_texture),
        ("east", scene.east_texture),
    ]
    if has_door:
        files.append(("door", scene.door_texture))
    for label, path in files:
        try:
            with open(path or "", "rb"):
                pass
        except OSError:
            raise CubError(f"Cannot open {label} texture file") from None


def parse_file(path: str | Path) -> tuple[Scene, Player]:
    """Read, parse and validate a ``.cub`` file."""
    name = str(path)
    if len(name) < 4 or not name.endswith(".cub"):
        raise CubError("Invalid file extension")
    try:
        handle = open(name, "rb")
    except OSError:
        raise CubError("Cannot open file") from None
    with handle:
        try:
            raw = handle.read()
        except OSError:
            raise CubError("Read error") from None
    scene = parse_content(raw.decode("latin-1"))
    check_walls(scene.grid)
    player, has_door = find_player(scene.grid)
    check_textures_exist(scene, has_door)
    check_texture_files(scene, has_door)
    return scene, player