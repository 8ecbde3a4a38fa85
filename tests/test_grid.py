import numpy as np
import pytest

from falling_blocks.game import CATALOG, GameGrid, TetrominoType, clear_lines, collides

O = CATALOG[TetrominoType.O].shape
I = CATALOG[TetrominoType.I].shape
T = CATALOG[TetrominoType.T].shape


@pytest.fixture
def grid():
    return GameGrid(10, 20)


def test_empty_grid_accepts_in_bounds_shape(grid):
    assert not collides(O, 0, 0, grid)
    assert not collides(O, 8, 18, grid)


@pytest.mark.parametrize("x,y", [(-1, 0), (9, 0), (0, 19), (4, 25), (7, 5)])
def test_out_of_bounds_collides(grid, x, y):
    shape = I if (x, y) == (7, 5) else O
    assert collides(shape, x, y, grid)


def test_negative_rows_ignore_grid_but_respect_walls(grid):
    grid.grid[0, :] = 1
    # Entirely above the board: no grid check
    assert not collides(O, 4, -2, grid)
    # Lower row reaches the filled top row
    assert collides(O, 4, -1, grid)
    # Walls still apply above the board
    assert collides(O, -1, -5, grid)
    assert collides(O, 9, -5, grid)


def test_empty_sub_cells_do_not_collide(grid):
    # T's top-left sub-cell is empty; filling it on the board must not matter
    grid.grid[0, 0] = 1
    assert not collides(T, 0, 0, grid)
    grid.grid[0, 1] = 1
    assert collides(T, 0, 0, grid)


def test_collides_accepts_raw_matrix():
    cells = np.zeros((4, 4), dtype=np.int8)
    cells[3, 0] = 2
    assert collides(O, 0, 2, cells)
    assert not collides(O, 2, 2, cells)


def test_collides_is_pure(grid):
    grid.grid[10, 3] = 5
    before = grid.clone_state()
    collides(T, 2, 9, grid)
    assert np.array_equal(grid.grid, before)


def test_lock_skips_rows_above_board(grid):
    written = grid.lock(O, 3, -2, int(TetrominoType.O))
    assert written == 0
    assert not grid.grid.any()

    written = grid.lock(O, 3, -1, int(TetrominoType.O))
    assert written == 2
    assert grid.grid[0, 3] == grid.grid[0, 4] == int(TetrominoType.O)
    assert grid.grid[1:].sum() == 0


def test_clear_lines_no_full_rows_is_noop(grid):
    grid.grid[19, :9] = 1
    grid.grid[5, 2] = 3
    cells, lines = clear_lines(grid.grid)
    assert lines == 0
    assert np.array_equal(cells, grid.grid)


def test_clear_lines_consecutive_rows():
    cells = np.zeros((20, 10), dtype=np.int8)
    for r in range(20):
        cells[r, r % 10] = (r % 7) + 1  # marks every row distinctly
    cells[5:8, :] = 4
    original = cells.copy()

    out, lines = clear_lines(cells)

    assert lines == 3
    assert np.array_equal(cells, original)
    assert not out[:3].any()
    kept = [r for r in range(20) if r not in (5, 6, 7)]
    assert np.array_equal(out[3:], original[kept])


def test_clear_lines_single_and_separated_rows():
    cells = np.zeros((6, 4), dtype=np.int8)
    cells[1, :] = 1
    cells[2, 0] = 2
    cells[3, :] = 1
    cells[4, 3] = 3
    out, lines = clear_lines(cells)
    assert lines == 2
    assert out.tolist() == [
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [2, 0, 0, 0],
        [0, 0, 0, 3],
        [0, 0, 0, 0],
    ]


def test_clear_lines_all_rows_full():
    cells = np.ones((20, 10), dtype=np.int8)
    out, lines = clear_lines(cells)
    assert lines == 20
    assert out.shape == (20, 10)
    assert not out.any()


def test_grid_clear_lines_in_place_keeps_dimensions(grid):
    grid.grid[18:, :] = 2
    assert grid.filled_rows() == 2
    assert grid.clear_lines() == 2
    assert grid.grid.shape == (20, 10)
    assert not grid.grid.any()


def test_nested_list_shapes_are_accepted(grid):
    square = [[1, 1], [1, 1]]
    assert not collides(square, 0, 0, grid)
    assert collides(square, 9, 0, grid)
    assert grid.lock(square, 0, 18, int(TetrominoType.O)) == 4
    assert collides(square, 0, 18, grid.grid.tolist())
