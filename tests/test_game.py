import math

import pytest

from cubcaster.game import Game, Key
from cubcaster.parser import find_player
from cubcaster.scene import Scene

ROOM = ["11111", "10001", "10N01", "10001", "11111"]


def make_game(grid):
    scene = Scene(grid=list(grid))
    player, _ = find_player(scene.grid)
    return Game(scene, player)


def test_idle_step_does_nothing():
    game = make_game(ROOM)
    assert game.step() == 0
    assert (game.player.x, game.player.y) == (2.5, 2.5)


def test_forward_moves_along_view():
    game = make_game(ROOM)
    game.key_down(Key.W)
    assert game.step() == 1
    assert game.player.y == pytest.approx(2.5 - game.move_speed)
    assert game.player.x == pytest.approx(2.5)


def test_backward_moves_against_view():
    game = make_game(ROOM)
    game.key_down(Key.S)
    game.step()
    assert game.player.y > 2.5
    assert game.player.x == pytest.approx(2.5)


def test_strafe_left_and_right_facing_north():
    game = make_game(ROOM)
    game.key_down(Key.A)
    game.step()
    assert game.player.x < 2.5
    game.key_up(Key.A)
    game.key_down(Key.D)
    game.step()
    game.step()
    assert game.player.x > 2.5
    assert game.player.y == pytest.approx(2.5)


def test_raw_keysym_is_accepted():
    game = make_game(ROOM)
    game.key_down(int(Key.W))
    assert game.player.move_y == 1
    game.key_up(int(Key.W))
    assert game.player.move_y == 0


def test_unknown_key_is_ignored():
    game = make_game(ROOM)
    game.key_down(0x1234)
    game.key_up(0x1234)
    assert game.step() == 0
    assert game.running


def test_walls_stop_the_player():
    game = make_game(ROOM)
    game.key_down(Key.W)
    for _ in range(200):
        game.step()
    assert 1.0 <= game.player.y < 1.0 + game.move_speed


def test_closed_door_blocks_and_open_door_lets_through():
    grid = ["11111", "10D01", "10N01", "10001", "11111"]
    game = make_game(grid)
    game.key_down(Key.W)
    for _ in range(100):
        game.step()
    assert game.player.y >= 2.0
    game.key_down(Key.SPACE)
    assert game.scene.tile(2, 1) == "P"
    for _ in range(100):
        game.step()
    assert game.player.y < 2.0


def test_open_doors_reaches_two_cells():
    game = make_game(["1111111", "1N0D0D1", "1111111"])
    game.open_doors()
    assert game.scene.grid[1] == "1N0P0D1"
    assert game.door_open


def test_close_doors_when_out_of_reach():
    game = make_game(["11111111", "1N0D0001", "11111111"])
    game.open_doors()
    game.player.x = 4.5
    game.close_doors()
    assert game.scene.tile(3, 1) == "P"
    game.player.x = 6.5
    game.close_doors()
    assert game.scene.tile(3, 1) == "D"


def test_close_doors_keeps_door_in_same_column():
    game = make_game(["111", "1D1", "101", "1N1", "111"])
    game.open_doors()
    assert game.scene.tile(1, 1) == "P"
    game.close_doors()
    assert game.scene.tile(1, 1) == "P"


def test_holding_space_counts_as_movement():
    game = make_game(ROOM)
    game.key_down(Key.SPACE)
    assert game.step() == 1
    game.key_up(Key.SPACE)
    assert not game.door_open
    assert game.step() == 0


def test_rotation_keeps_vectors_orthogonal():
    game = make_game(ROOM)
    for _ in range(25):
        game.rotate(1)
    p = game.player
    assert math.hypot(p.dir_x, p.dir_y) == pytest.approx(1.0)
    assert math.hypot(p.plane_x, p.plane_y) == pytest.approx(0.5)
    assert p.dir_x * p.plane_x + p.dir_y * p.plane_y == pytest.approx(0.0, abs=1e-12)


def test_rotation_is_reversible():
    game = make_game(ROOM)
    game.rotate(1)
    game.rotate(-1)
    p = game.player
    assert (p.dir_x, p.dir_y) == (pytest.approx(0.0, abs=1e-12), pytest.approx(-1.0))
    assert (p.plane_x, p.plane_y) == (pytest.approx(0.5), pytest.approx(0.0, abs=1e-12))


def test_turn_keys_rotate_on_step():
    game = make_game(ROOM)
    game.key_down(Key.LEFT)
    assert game.player.rotate == -1
    assert game.step() == 1
    assert game.player.dir_x != pytest.approx(0.0)
    game.key_up(Key.LEFT)
    assert game.player.rotate == 0


def test_both_turn_keys_pressed_twice_do_not_rotate():
    game = make_game(ROOM)
    game.key_down(Key.RIGHT)
    game.key_down(Key.RIGHT)
    assert game.player.rotate == 2
    assert game.step() == 0


def test_shift_switches_speed():
    game = make_game(ROOM)
    assert game.move_speed == 0.04
    game.key_down(Key.SHIFT_L)
    assert game.move_speed == 0.09
    game.key_up(Key.SHIFT_L)
    assert game.move_speed == 0.04


def test_escape_stops_the_game():
    game = make_game(ROOM)
    game.key_down(Key.ESCAPE)
    assert game.running is False