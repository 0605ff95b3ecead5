"""Ray casting, textured wall drawing and the minimap."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from cubcaster.game import Game
from cubcaster.image import Image

NORTH = "north"
SOUTH = "south"
EAST = "east"
WEST = "west"
DOOR = "door"

WHITE = 0xFFFFFF
BLACK = 0x000000
RED = 0xFF0000
GREEN = 0x00FF00
BLUE = 0x0000FF

MINIMAP_CELL = 10
MINIMAP_MARGIN = 10
ANIMATION_FRAMES = 6
ANIMATION_DELAY = 7

_SOLID = ("1", "D", "")


@dataclass(frozen=True)
class Ray:
    """Where one screen column's ray meets a wall and how tall it draws."""

    dir_x: float
    dir_y: float
    map_x: int
    map_y: int
    step_x: int
    step_y: int
    side: int
    perp_wall_dist: float
    line_height: int
    draw_start: int
    draw_end: int
    wall_x: float


def cast_ray(game: Game, column: int, width: int, height: int) -> Ray:
    """Cast the ray of a screen column through the map with a grid walk."""
    player = game.player
    camera_x = 2 * column / width - 1
    dir_x = player.dir_x + player.plane_x * camera_x
    dir_y = player.dir_y + player.plane_y * camera_x
    map_x, map_y = int(player.x), int(player.y)
    delta_x = math.inf if dir_x == 0 else abs(1 / dir_x)
    delta_y = math.inf if dir_y == 0 else abs(1 / dir_y)

    if dir_x < 0:
        step_x, side_x = -1, (player.x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1.0 - player.x) * delta_x
    if dir_y < 0:
        step_y, side_y = -1, (player.y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1.0 - player.y) * delta_y

    side = 0
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        # Leaving the grid stops the ray as a wall would.
        if game.scene.tile(map_x, map_y) in _SOLID:
            break

    perp = side_x - delta_x if side == 0 else side_y - delta_y
    line_height = int(height / perp) if perp > 0 else height
    draw_start = max(-(line_height // 2) + height // 2, 0)
    draw_end = line_height // 2 + height // 2
    if draw_end >= height:
        draw_end = height - 1
    if side == 0:
        wall_x = player.y + perp * dir_y
    else:
        wall_x = player.x + perp * dir_x
    return Ray(
        dir_x=dir_x,
        dir_y=dir_y,
        map_x=map_x,
        map_y=map_y,
        step_x=step_x,
        step_y=step_y,
        side=side,
        perp_wall_dist=perp,
        line_height=line_height,
        draw_start=draw_start,
        draw_end=draw_end,
        wall_x=wall_x,
    )


def _pack(color: tuple[int, int, int]) -> int:
    red, green, blue = color
    return (red << 16) + (green << 8) + blue


class Renderer:
    """Draws the 3D view and the minimap of a game into an :class:`Image`.

    ``textures`` maps NORTH, SOUTH, EAST, WEST and, for maps with doors,
    DOOR to images. Frames placed in ``animation`` replace the north and
    south faces of every other wall block.
    """

    def __init__(self, game: Game, textures: Mapping[str, Image], width: int, height: int) -> None:
        self.game = game
        self.textures = dict(textures)
        self.width = width
        self.height = height
        self.animation: list[Image] = []
        self.anim_frame = 0
        self._frame_count = 0

    @property
    def has_animation(self) -> bool:
        return bool(self.animation)

    def advance_animation(self) -> int:
        """Count one rendered frame; move to the next animation frame every few."""
        self._frame_count += 1
        if self._frame_count >= ANIMATION_DELAY:
            self._frame_count = 0
            frames = len(self.animation) or ANIMATION_FRAMES
            self.anim_frame = (self.anim_frame + 1) % frames
        return self.anim_frame

    def _texture_for(self, ray: Ray) -> Image:
        if self.game.scene.tile(ray.map_x, ray.map_y) == "D":
            return self.textures[DOOR]
        if ray.side == 0:
            return self.textures[EAST if ray.step_x > 0 else WEST]
        if self.has_animation and (ray.map_x + ray.map_y) % 2 == 0:
            return self.animation[self.anim_frame]
        return self.textures[SOUTH if ray.step_y > 0 else NORTH]

    def _draw_wall(self, image: Image, ray: Ray, column: int, texture: Image) -> None:
        if ray.line_height <= 0:
            return
        tex_x = int((ray.wall_x - math.floor(ray.wall_x)) * texture.width)
        step = texture.height / ray.line_height
        tex_pos = (ray.draw_start - self.height // 2 + ray.line_height // 2) * step
        mask = texture.height - 1
        src, dst = texture.pixels, image.pixels
        for y in range(ray.draw_start, ray.draw_end):
            tex_y = int(tex_pos) & mask
            tex_pos += step
            dst[y * image.width + column] = src[tex_y * texture.width + tex_x]

    def render_scene(self, image: Image) -> None:
        """Draw ceiling, floor and the textured walls seen by the player."""
        scene = self.game.scene
        half = self.height // 2
        image.fill_rect(0, 0, self.width, half, _pack(scene.ceiling_color))
        image.fill_rect(0, half, self.width, self.height - half, _pack(scene.floor_color))
        if self.has_animation:
            self.advance_animation()
        for column in range(self.width):
            ray = cast_ray(self.game, column, self.width, self.height)
            self._draw_wall(image, ray, column, self._texture_for(ray))

    def draw_minimap(self, image: Image) -> None:
        """Draw the map from above in the top-left corner, with the player in red."""
        colors = {"1": WHITE, "D": BLUE, "P": GREEN}
        for y, row in enumerate(self.game.scene.grid):
            for x, char in enumerate(row):
                image.fill_rect(
                    x * MINIMAP_CELL + MINIMAP_MARGIN,
                    y * MINIMAP_CELL + MINIMAP_MARGIN,
                    MINIMAP_CELL,
                    MINIMAP_CELL,
                    colors.get(char, BLACK),
                )
        player = self.game.player
        image.fill_rect(
            int(player.x) * MINIMAP_CELL + MINIMAP_MARGIN,
            int(player.y) * MINIMAP_CELL + MINIMAP_MARGIN,
            MINIMAP_CELL,
            MINIMAP_CELL,
            RED,
        )