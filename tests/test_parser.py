import pytest

from cubcaster.parser import (
    check_declarations,
    check_texture_files,
    check_textures_exist,
    check_walls,
    find_player,
    parse_color,
    parse_content,
    parse_file,
)
from cubcaster.scene import CubError, Scene

GRID = ["111111", "100N01", "1D0001", "111111"]


@pytest.fixture
def textures(tmp_path):
    paths = {}
    for name in ("north", "south", "west", "east", "door"):
        path = tmp_path / f"{name}.xpm"
        path.write_text("x")
        paths[name] = str(path)
    return paths


def _cub_text(tex, grid=GRID, door=True):
    lines = [
        f"NO {tex['north']}",
        f"SO {tex['south']}",
        f"WE {tex['west']}",
        f"EA {tex['east']}",
    ]
    if door:
        lines.append(f"DOOR {tex['door']}")
    lines += ["F 220,100,0", "C 225,30,0", ""] + list(grid)
    return "\n".join(lines) + "\n"


def _full_scene(tex):
    return Scene(
        north_texture=tex["north"],
        south_texture=tex["south"],
        west_texture=tex["west"],
        east_texture=tex["east"],
        door_texture=tex["door"],
        floor_color=(220, 100, 0),
        ceiling_color=(225, 30, 0),
        grid=list(GRID),
    )


def test_parse_color_values():
    assert parse_color("220,100,0") == (220, 100, 0)


def test_parse_color_skips_spaces_and_empty_parts():
    assert parse_color(" 1, 2,3") == (1, 2, 3)
    assert parse_color("1,,2,3") == (1, 2, 3)


def test_parse_color_too_few_parts():
    with pytest.raises(CubError, match="Invalid color format"):
        parse_color("1,2")


@pytest.mark.parametrize("text", ["256,0,0", "0,-1,0", "0,0,300"])
def test_parse_color_out_of_range(text):
    with pytest.raises(CubError, match="between 0 and 255"):
        parse_color(text)


def test_check_declarations_duplicate():
    lines = ["NO a", "NO b", "SO c", "WE d", "EA e", "F 1,1,1", "C 1,1,1"]
    with pytest.raises(CubError, match="exactly once"):
        check_declarations(lines)


def test_check_declarations_missing():
    with pytest.raises(CubError, match="exactly once"):
        check_declarations(["NO a", "SO c", "WE d", "EA e", "F 1,1,1"])


def test_parse_content_reads_declarations(textures):
    scene = parse_content(_cub_text(textures))
    assert scene.north_texture == textures["north"]
    assert scene.east_texture == textures["east"]
    assert scene.door_texture == textures["door"]
    assert scene.floor_color == (220, 100, 0)
    assert scene.ceiling_color == (225, 30, 0)
    assert scene.grid == GRID


def test_parse_content_drops_blank_lines_in_map(textures):
    text = _cub_text(textures, grid=["111111", "", "100N01", "111111"])
    assert parse_content(text).grid == ["111111", "100N01", "111111"]


def test_parse_content_keeps_text_after_prefix(textures):
    text = _cub_text(textures).replace(f"NO {textures['north']}", "   NO  spaced")
    assert parse_content(text).north_texture == " spaced"


def test_parse_content_without_map(textures):
    text = _cub_text(textures, grid=[])
    with pytest.raises(CubError, match="No map found in the file"):
        parse_content(text)


@pytest.mark.parametrize(
    "grid",
    [
        ["111111", "100N01", "100001", "110011"],
        ["111111", "100N00", "111111"],
        ["111111", "0100N1", "111111"],
        ["1111111", "10 0N01", "1111111"],
        ["111", "1N01", "111"],
    ],
)
def test_check_walls_rejects_open_maps(grid):
    with pytest.raises(CubError, match="surrounded by walls"):
        check_walls(grid)


def test_check_walls_rejects_empty_grid():
    with pytest.raises(CubError, match="surrounded by walls"):
        check_walls([])


def test_find_player_position_and_door():
    player, has_door = find_player(GRID)
    assert (player.x, player.y) == (3.5, 1.5)
    assert (player.dir_x, player.dir_y) == (0, -1)
    assert has_door is True


def test_find_player_without_door():
    _, has_door = find_player(["111", "1E1", "111"])
    assert has_door is False


def test_find_player_two_players():
    with pytest.raises(CubError, match="exactly one player"):
        find_player(["1111", "1NS1", "1111"])


def test_find_player_no_player():
    with pytest.raises(CubError, match="exactly one player"):
        find_player(["111", "101", "111"])


def test_find_player_invalid_character():
    with pytest.raises(CubError, match="Invalid character in map"):
        find_player(["111", "1NX1", "111"])


def test_textures_exist_zero_red_counts_as_missing(textures):
    scene = _full_scene(textures)
    scene.floor_color = (0, 100, 100)
    with pytest.raises(CubError, match="Missing texture or color declaration"):
        check_textures_exist(scene, False)


def test_textures_exist_missing_wall(textures):
    scene = _full_scene(textures)
    scene.west_texture = None
    with pytest.raises(CubError, match="Missing texture or color declaration"):
        check_textures_exist(scene, False)


def test_textures_exist_missing_door(textures):
    scene = _full_scene(textures)
    scene.door_texture = None
    with pytest.raises(CubError, match="Missing door texture declaration"):
        check_textures_exist(scene, True)


def test_texture_files_missing_north(textures, tmp_path):
    scene = _full_scene(textures)
    scene.north_texture = str(tmp_path / "absent.xpm")
    with pytest.raises(CubError, match="Cannot open north texture file"):
        check_texture_files(scene, False)


def test_texture_files_missing_door_only_when_used(textures, tmp_path):
    scene = _full_scene(textures)
    scene.door_texture = str(tmp_path / "absent.xpm")
    with pytest.raises(CubError, match="Cannot open door texture file"):
        check_texture_files(scene, True)


@pytest.mark.parametrize("name", ["map.txt", "cub", "map.cubx"])
def test_parse_file_bad_extension(tmp_path, name):
    with pytest.raises(CubError, match="Invalid file extension"):
        parse_file(tmp_path / name)


def test_parse_file_missing(tmp_path):
    with pytest.raises(CubError, match="Cannot open file"):
        parse_file(tmp_path / "absent.cub")


def test_parse_file_success(textures, tmp_path):
    path = tmp_path / "level.cub"
    path.write_text(_cub_text(textures))
    scene, player = parse_file(path)
    assert scene.grid == GRID
    assert scene.tile(1, 2) == "D"
    assert (player.x, player.y) == (3.5, 1.5)


def test_parse_file_door_needs_texture(textures, tmp_path):
    path = tmp_path / "level.cub"
    path.write_text(_cub_text(textures, door=False))
    with pytest.raises(CubError, match="Missing door texture declaration"):
        parse_file(path)