"""The game window: texture loading, the event loop and the command entry point."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from cubcaster.game import Game, Key  # noqa: E402
from cubcaster.image import Image  # noqa: E402
from cubcaster.parser import parse_file  # noqa: E402
from cubcaster.render import DOOR, EAST, NORTH, SOUTH, WEST, Renderer  # noqa: E402
from cubcaster.scene import CubError, Scene  # noqa: E402
from cubcaster.xpm import XpmError, load_xpm  # noqa: E402

WINDOW_WIDTH = 1920
WINDOW_HEIGHT = 1080
WINDOW_TITLE = "SUPER JEU DE FOU"
ANIMATED_WALL = "./textures/brick.xpm"
ANIMATION_DIRECTORY = Path("./textures")
ANIMATION_FRAME_COUNT = 6
MOUSE_EDGE = 20
FRAMES_PER_SECOND = 60

_PYGAME_KEYS: Mapping[int, Key] = {
    pygame.K_ESCAPE: Key.ESCAPE,
    pygame.K_w: Key.W,
    pygame.K_a: Key.A,
    pygame.K_s: Key.S,
    pygame.K_d: Key.D,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_LSHIFT: Key.SHIFT_L,
}


def _load_texture(path: str | Path) -> Image:
    try:
        return load_xpm(path)
    except XpmError:
        raise CubError("Failed to load texture") from None


def load_textures(scene: Scene) -> dict[str, Image]:
    """Load the wall textures of a scene, and the door texture if declared."""
    sources = {
        NORTH: scene.north_texture,
        SOUTH: scene.south_texture,
        EAST: scene.east_texture,
        WEST: scene.west_texture,
    }
    if any(path is None for path in sources.values()):
        raise CubError("Failed to load textures")
    textures = {name: _load_texture(path) for name, path in sources.items()}
    if scene.door_texture is not None:
        textures[DOOR] = _load_texture(scene.door_texture)
    return textures


def load_animation(directory: str | Path) -> list[Image]:
    """Load the torch frames ``torch_0.xpm`` .. ``torch_5.xpm`` from a directory."""
    folder = Path(directory)
    try:
        return [
            load_xpm(folder / f"torch_{index}.xpm")
            for index in range(ANIMATION_FRAME_COUNT)
        ]
    except XpmError:
        raise CubError("Failed to load textures") from None


class App:
    """Shows a game in a window and feeds it keyboard and mouse input."""

    def __init__(self, game: Game, renderer: Renderer, width: int, height: int) -> None:
        self.game = game
        self.renderer = renderer
        self.width = width
        self.height = height
        self.image = Image(width, height)
        self.old_x = width // 2
        self.warp_to: int | None = None
        self._dirty = False

    def _redraw(self) -> None:
        self.game.close_doors()
        self.renderer.render_scene(self.image)
        self.renderer.draw_minimap(self.image)
        self._dirty = True

    def _tick(self) -> int:
        moved = self.game.step()
        if moved or self.renderer.has_animation:
            self._redraw()
        return moved

    def handle_mouse(self, x: int) -> bool:
        """Turn the view with horizontal mouse motion; return whether it turned.

        Near either window edge the pointer is sent to the opposite side;
        the requested position is left in ``warp_to``.
        """
        if x > self.width - MOUSE_EDGE:
            x = MOUSE_EDGE
            self.warp_to = x
        if x < MOUSE_EDGE:
            x = self.width - MOUSE_EDGE
            self.warp_to = x
        if x == self.old_x:
            return False
        self.game.rotate(-1 if x < self.old_x else 1)
        self.old_x = x
        player = self.game.player
        if player.move_y == 0 and player.move_x == 0 and player.rotate == 0:
            self._redraw()
        return True

    def _present(self, screen: pygame.Surface) -> None:
        frame = pygame.image.frombuffer(
            self.image.to_rgb_bytes(), (self.width, self.height), "RGB"
        )
        screen.blit(frame, (0, 0))
        pygame.display.flip()
        self._dirty = False

    def _handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.game.running = False
        elif event.type == pygame.KEYDOWN:
            key = _PYGAME_KEYS.get(event.key)
            if key is not None:
                self.game.key_down(key)
        elif event.type == pygame.KEYUP:
            key = _PYGAME_KEYS.get(event.key)
            if key is not None:
                self.game.key_up(key)
        elif event.type == pygame.MOUSEMOTION:
            self.handle_mouse(event.pos[0])
            if self.warp_to is not None:
                pygame.mouse.set_pos((self.warp_to, event.pos[1]))
                self.warp_to = None

    def run(self) -> None:
        """Open the window and run until the player quits."""
        pygame.init()
        try:
            screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(WINDOW_TITLE)
            clock = pygame.time.Clock()
            self.renderer.render_scene(self.image)
            self.renderer.draw_minimap(self.image)
            self._present(screen)
            while self.game.running:
                for event in pygame.event.get():
                    self._handle_event(event)
                    if not self.game.running:
                        break
                if not self.game.running:
                    break
                self._tick()
                if self._dirty:
                    self._present(screen)
                clock.tick(FRAMES_PER_SECOND)
        finally:
            pygame.quit()


def _error(message: str) -> int:
    sys.stderr.write(f"Error\n{message}\n")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Load the scene file named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        return _error("Need a map")
    try:
        scene, player = parse_file(args[0])
        textures = load_textures(scene)
        game = Game(scene, player)
        renderer = Renderer(game, textures, WINDOW_WIDTH, WINDOW_HEIGHT)
        if scene.south_texture == ANIMATED_WALL and scene.north_texture == ANIMATED_WALL:
            renderer.animation = load_animation(ANIMATION_DIRECTORY)
        app = App(game, renderer, WINDOW_WIDTH, WINDOW_HEIGHT)
        app.run()
    except CubError as exc:
        return _error(exc.message)
    except pygame.error:
        return _error("Failed to create window")
    return 0


if __name__ == "__main__":
    sys.exit(main())