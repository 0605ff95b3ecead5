"""Player movement, turning, doors and keyboard state."""

from __future__ import annotations

import math
from enum import IntEnum

from cubcaster.scene import Player, Scene

WALK_SPEED = 0.04
RUN_SPEED = 0.09
ROTATION_SPEED = 0.03
DOOR_RANGE = 2

_BLOCKING = ("1", "D")


class Key(IntEnum):
    """Keys the game reacts to, by their X keysym values."""

    ESCAPE = 0xFF1B
    W = 0x77
    A = 0x61
    S = 0x73
    D = 0x64
    SPACE = 0x20
    LEFT = 0xFF51
    RIGHT = 0xFF53
    SHIFT_L = 0xFFE1


class Game:
    """The state of a running game: the map, the player and the input flags."""

    def __init__(self, scene: Scene, player: Player) -> None:
        self.scene = scene
        self.player = player
        self.move_speed = WALK_SPEED
        self.rot_speed = ROTATION_SPEED
        self.door_open = False
        self.running = True

    def _blocked(self, x: float, y: float) -> bool:
        tile = self.scene.tile(int(x), int(y))
        # Anything outside the grid counts as solid.
        return tile == "" or tile in _BLOCKING

    def _move(self, dx: float, dy: float) -> bool:
        player = self.player
        new_x = player.x + dx * self.move_speed
        new_y = player.y + dy * self.move_speed
        moved = False
        if not self._blocked(new_x, player.y):
            player.x = new_x
            moved = True
        if not self._blocked(player.x, new_y):
            player.y = new_y
            moved = True
        return moved

    def rotate(self, direction: float) -> bool:
        """Turn the view by ``direction`` rotation steps (negative turns left)."""
        angle = self.rot_speed * direction
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        p = self.player
        p.dir_x, p.dir_y = (
            p.dir_x * cos_a - p.dir_y * sin_a,
            p.dir_x * sin_a + p.dir_y * cos_a,
        )
        p.plane_x, p.plane_y = (
            p.plane_x * cos_a - p.plane_y * sin_a,
            p.plane_x * sin_a + p.plane_y * cos_a,
        )
        return True

    def step(self) -> int:
        """Apply one frame of input; return how many changes call for a redraw."""
        p = self.player
        moved = 0
        if p.move_y == 1:
            moved += self._move(p.dir_x, p.dir_y)
        if p.move_y == -1:
            moved += self._move(-p.dir_x, -p.dir_y)
        if p.move_x == -1:
            moved += self._move(p.dir_y, -p.dir_x)
        if p.move_x == 1:
            moved += self._move(-p.dir_y, p.dir_x)
        if p.rotate == 1:
            moved += self.rotate(1)
        if p.rotate == -1:
            moved += self.rotate(-1)
        if self.door_open:
            moved += 1
        return int(moved)

    def open_doors(self) -> None:
        """Open every closed door within reach along the player's row and column."""
        self.door_open = True
        x, y = int(self.player.x), int(self.player.y)
        for offset in range(-DOOR_RANGE, DOOR_RANGE + 1):
            if offset == 0:
                continue
            for cx, cy in ((x + offset, y), (x, y + offset)):
                if self.scene.tile(cx, cy) == "D":
                    self.scene.set_tile(cx, cy, "P")

    def close_doors(self) -> None:
        """Close every open door that is no longer within the player's reach."""
        px, py = int(self.player.x), int(self.player.y)
        for y, row in enumerate(self.scene.grid):
            for x, char in enumerate(row):
                if char != "P":
                    continue
                near_row = py == y and abs(px - x) <= DOOR_RANGE
                near_col = px == x and abs(py - y) <= DOOR_RANGE
                if not (near_row or near_col):
                    self.scene.set_tile(x, y, "D")

    @staticmethod
    def _as_key(key: int) -> Key | None:
        try:
            return Key(key)
        except ValueError:
            return None

    def key_down(self, key: int) -> None:
        """React to a key being pressed; unknown keys are ignored."""
        key = self._as_key(key)
        p = self.player
        if key is Key.ESCAPE:
            self.running = False
        elif key is Key.W:
            p.move_y = 1
        elif key is Key.A:
            p.move_x = -1
        elif key is Key.S:
            p.move_y = -1
        elif key is Key.D:
            p.move_x = 1
        elif key is Key.SPACE:
            self.open_doors()
        elif key is Key.LEFT:
            p.rotate -= 1
        elif key is Key.RIGHT:
            p.rotate += 1
        elif key is Key.SHIFT_L:
            self.move_speed = RUN_SPEED

    def key_up(self, key: int) -> None:
        """React to a key being released; unknown keys are ignored."""
        key = self._as_key(key)
        p = self.player
        if key in (Key.W, Key.S):
            p.move_y = 0
        elif key in (Key.A, Key.D):
            p.move_x = 0
        elif key in (Key.LEFT, Key.RIGHT):
            p.rotate = 0
        elif key is Key.SPACE:
            self.door_open = False
        elif key is Key.SHIFT_L:
            self.move_speed = WALK_SPEED