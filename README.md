# cubcaster

A small first-person explorer that draws a grid map with raycasting. You describe
a level in a `.cub` file and walk through it in a 1920x1080 window. Walls are
textured from XPM images, doors open when you press space, and a minimap sits in
the top-left corner.

## Installing

```
pip install .
```

This installs `pygame`, which draws the window and reads the keyboard and mouse.

## Running

```
cubcaster maps/level.cub
```

The command takes exactly one argument, the path to a `.cub` file. When the
argument is missing, the file is not valid, a texture cannot be loaded or the
window cannot be opened, the program prints `Error` and a reason to standard
error and exits with status 1.

## The `.cub` format

Each texture and colour is declared once, and the map comes last:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
DOOR ./textures/door.xpm
F 120,120,120
C 40,60,200

111111
1000D1
10N001
111111
```

- The file name must end in `.cub`.
- `NO`, `SO`, `WE` and `EA` give the wall textures, each declared exactly once.
  Each texture file must exist and be a readable XPM image.
- `F` and `C` give the floor and ceiling colours as `R,G,B`, each declared
  exactly once, with each value from 0 to 255. The red value must not be 0:
  a colour whose red value is 0 is reported as a missing declaration.
- `DOOR` is needed only when the map has a `D` tile.
- The map starts at the first line that holds a `1` and no declaration.
  Tiles: `1` is a wall, `0` is floor, `D` is a door and a space is empty.
  Exactly one of `N`, `S`, `E` or `W` marks the player and the direction they
  face. Any other character is an error.
- Walls must close in the map on every side.

Texture heights should be powers of two, since texture rows are picked by
masking with the height.

When both the north and the south texture are exactly `./textures/brick.xpm`,
the torch frames `./textures/torch_0.xpm` to `./textures/torch_5.xpm` are loaded
as well. They replace the north and south faces of every other wall cell and
advance one frame every seven redraws.

## Controls

| Key          | Action                      |
|--------------|-----------------------------|
| W / S        | move forward / back         |
| A / D        | strafe left / right         |
| Left / Right | turn                        |
| Mouse        | turn                        |
| Left Shift   | run while held              |
| Space        | open doors within two tiles |
| Escape       | quit                        |

Space opens closed doors up to two tiles away along the player's row and column.
Open doors are drawn green on the minimap and can be walked through; they close
again once the player is no longer within two tiles of them along a row or
column. When the mouse pointer nears a window edge it is moved to the opposite
side so that turning can go on. Closing the window also quits.

## Using it as a library

The parts can also be used one by one:

```python
from cubcaster.parser import parse_file
from cubcaster.xpm import load_xpm
from cubcaster.colors import color_by_name

scene, player = parse_file("maps/level.cub")
texture = load_xpm("./textures/north.xpm")
print(hex(color_by_name("light sky")))  # 0x87cefa
```

- `cubcaster.parser` reads and checks a level (`parse_file`, `parse_content`,
  `check_walls`, `find_player`, ...) and raises `cubcaster.scene.CubError` when
  it is invalid.
- `cubcaster.scene` holds `Scene` (textures, colours, tile grid) and `Player`.
- `cubcaster.xpm` reads XPM images (`load_xpm`, `parse_xpm_text`,
  `parse_xpm_lines`) into `cubcaster.image.Image` pixel buffers and raises
  `XpmError` for data it cannot read. Colours may be `#hex` values or names
  from `cubcaster.colors`; unknown names read as black, and `None` as
  transparent.
- `cubcaster.game.Game` holds movement, turning, door and keyboard logic.
- `cubcaster.render.Renderer` draws the 3D view and the minimap into an `Image`;
  `cast_ray` casts a single screen column.
- `cubcaster.app` loads textures and runs the window (`App`, `main`).

## What it does not do

There are no enemies, weapons, sound or saved games, and the window size is
fixed at 1920x1080.

## Tests

```
pip install ".[test]"
pytest
```