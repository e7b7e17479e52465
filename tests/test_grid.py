import numpy as np
import pytest

from falling_blocks.game import GameGrid, Piece, TetrominoType


WIDTH, HEIGHT = 10, 20


@pytest.fixture
def grid():
    return GameGrid(WIDTH, HEIGHT)


def _all_orientations():
    for kind in TetrominoType:
        piece = Piece.spawn(kind)
        for _ in range(4):
            yield piece
            piece = piece.rotated_cw()


def test_can_place_rejects_every_out_of_bounds_cell(grid):
    for piece in _all_orientations():
        for x in range(-4, WIDTH + 1):
            for y in range(-4, HEIGHT + 1):
                out = any(cx < 0 or cx >= WIDTH or cy >= HEIGHT for cx, cy in piece.cells_at(x, y))
                assert grid.can_place(piece, x, y) is (not out)


def test_cells_above_board_skip_occupancy_check(grid):
    grid.grid[0, :] = 1
    piece = Piece.spawn(TetrominoType.I)
    assert grid.can_place(piece, 3, -1)
    assert not grid.can_place(piece, 3, 0)


def test_can_place_rejects_occupied_cell(grid):
    grid.grid[19, 4] = 3
    piece = Piece.spawn(TetrominoType.O)
    assert not grid.can_place(piece, 4, 18)
    assert grid.can_place(piece, 5, 18)


def test_lock_writes_color_and_ignores_rows_above_board(grid):
    piece = Piece.spawn(TetrominoType.O)
    grid.lock(piece, 2, -1)
    assert grid.grid[0, 2] == grid.grid[0, 3] == piece.color
    assert int(np.count_nonzero(grid.grid)) == 2


def test_is_full(grid):
    grid.grid[5, :] = 2
    grid.grid[6, :-1] = 2
    assert grid.is_full(5)
    assert not grid.is_full(6)
    assert not grid.is_full(7)


def test_is_full_outside_board_is_false(grid):
    grid.grid[HEIGHT - 1, :] = 1
    assert not grid.is_full(-1)
    assert not grid.is_full(HEIGHT)


def test_single_full_bottom_row_is_cleared(grid):
    grid.grid[19, :] = 1
    assert grid.clear_and_compact() == 1
    assert not grid.grid[19].any()
    assert grid.grid.shape == (HEIGHT, WIDTH)


def test_consecutive_full_rows_are_all_cleared(grid):
    grid.grid[17:20, :] = 4
    grid.grid[16, 0] = 7
    assert grid.clear_and_compact() == 3
    assert grid.grid[19, 0] == 7
    assert int(np.count_nonzero(grid.grid)) == 1
    assert grid.grid.shape == (HEIGHT, WIDTH)


def test_separated_full_rows_keep_row_between(grid):
    grid.grid[19, :] = 1
    grid.grid[18, :5] = 2
    grid.grid[17, :] = 3
    assert grid.clear_and_compact() == 2
    assert grid.grid[19].tolist() == [2] * 5 + [0] * 5
    assert not grid.grid[:19].any()


def test_no_full_rows_leaves_board_untouched(grid):
    grid.grid[19, :-1] = 1
    before = grid.clone_state()
    assert grid.clear_and_compact() == 0
    assert np.array_equal(grid.grid, before)


def test_full_top_row_is_cleared(grid):
    grid.grid[0, :] = 5
    assert grid.clear_and_compact() == 1
    assert not grid.grid.any()


def test_lock_then_clear_removes_every_full_row(grid):
    grid.grid[19, :3] = 1
    grid.grid[19, 7:] = 1
    grid.lock(Piece.spawn(TetrominoType.I), 3, 19)
    assert grid.is_full(19)
    assert grid.clear_and_compact() == 1
    assert not any(grid.is_full(r) for r in range(HEIGHT))


def test_clone_state_is_a_copy(grid):
    snapshot = grid.clone_state()
    snapshot[0, 0] = 9
    assert grid.grid[0, 0] == 0


def test_max_height(grid):
    assert grid.get_max_height() == 0
    grid.grid[15, 2] = 1
    assert grid.get_max_height() == 5
