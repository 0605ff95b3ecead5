"""Scene description, player state and the error raised for invalid maps."""

from __future__ import annotations

from dataclasses import dataclass, field

_FACINGS: dict[str, tuple[float, float, float, float]] = {
    "N": (0.0, -1.0, 0.5, 0.0),
    "S": (0.0, 1.0, -0.5, 0.0),
    "E": (1.0, 0.0, 0.0, 0.5),
    "W": (-1.0, 0.0, 0.0, -0.5),
}


class CubError(Exception):
    """Raised when a scene file or its resources are invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass
class Player:
    """Position, view direction, camera plane and current input state."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float
    move_x: int = 0
    move_y: int = 0
    rotate: int = 0

    @classmethod
    def spawn(cls, row: int, col: int, facing: str) -> Player:
        """Place a player at the centre of a map cell, looking N, S, E or W."""
        try:
            dir_x, dir_y, plane_x, plane_y = _FACINGS[facing]
        except KeyError:
            raise ValueError(f"invalid facing {facing!r}") from None
        return cls(
            x=col + 0.5,
            y=row + 0.5,
            dir_x=dir_x,
            dir_y=dir_y,
            plane_x=plane_x,
            plane_y=plane_y,
        )


@dataclass
class Scene:
    """Textures, colours and the tile grid read from a scene file."""

    north_texture: str | None = None
    south_texture: str | None = None
    west_texture: str | None = None
    east_texture: str | None = None
    door_texture: str | None = None
    floor_color: tuple[int, int, int] = (0, 0, 0)
    ceiling_color: tuple[int, int, int] = (0, 0, 0)
    grid: list[str] = field(default_factory=list)

    def tile(self, x: int, y: int) -> str:
        """Return the tile at column x, row y, or "" outside the grid."""
        if y < 0 or y >= len(self.grid):
            return ""
        row = self.grid[y]
        if x < 0 or x >= len(row):
            return ""
        return row[x]

    def set_tile(self, x: int, y: int, value: str) -> None:
        """Replace the tile at column x, row y with a single character."""
        if len(value) != 1:
            raise ValueError(f"a tile is one character, got {value!r}")
        if not (0 <= y < len(self.grid) and 0 <= x < len(self.grid[y])):
            raise IndexError(f"tile ({x}, {y}) outside the map")
        row = self.grid[y]
        self.grid[y] = row[:x] + value + row[x + 1:]