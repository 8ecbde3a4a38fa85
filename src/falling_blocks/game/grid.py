from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from .pieces import Shape


class GameGrid:
    """Fixed-size cell matrix for the falling-block board.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are the `TetrominoType` of the piece that filled the cell,
    which doubles as its colour identity. Row 0 is the top.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return bool(self.grid[y, x] != 0)

    def lock(self, shape: Shape, x: int, y: int, value: int) -> int:
        """Write the occupied cells of `shape` anchored at (x, y).

        Cells whose absolute row is above the top edge are skipped.
        Returns the number of cells written.
        """
        shape = np.asarray(shape)
        written = 0
        rows, cols = shape.shape
        for r in range(rows):
            by = y + r
            if by < 0:
                continue
            for c in range(cols):
                if shape[r, c]:
                    self.grid[by, x + c] = value
                    written += 1
        return written

    def clear_lines(self) -> int:
        self.grid, lines = clear_lines(self.grid)
        return lines

    def filled_rows(self) -> int:
        return int(np.count_nonzero(np.all(self.grid != 0, axis=1)))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()


def _cells_of(grid: Union[GameGrid, np.ndarray]) -> np.ndarray:
    return grid.grid if isinstance(grid, GameGrid) else np.asarray(grid)


def collides(shape: Shape, x: int, y: int, grid: Union[GameGrid, np.ndarray]) -> bool:
    """True if `shape` anchored at (x, y) leaves the board or overlaps a filled cell.

    Sub-cells above the top edge (negative rows) are never tested against the
    grid, but still have to respect the side walls and the floor.
    """
    shape = np.asarray(shape)
    cells = _cells_of(grid)
    height, width = cells.shape
    rows, cols = shape.shape
    for r in range(rows):
        for c in range(cols):
            if not shape[r, c]:
                continue
            bx, by = x + c, y + r
            if bx < 0 or bx >= width or by >= height:
                return True
            if by >= 0 and cells[by, bx] != 0:
                return True
    return False


def clear_lines(cells: np.ndarray) -> Tuple[np.ndarray, int]:
    """Remove full rows, shifting everything above them down.

    Rows are scanned bottom-up; after a removal the same index is examined
    again, since the row above has moved into it. The input is not modified.
    """
    cells = np.asarray(cells)
    board = [row.copy() for row in cells]
    height = len(board)
    width = cells.shape[1]
    lines = 0
    row = height - 1
    while row >= 0:
        if np.all(board[row] != 0):
            del board[row]
            board.insert(0, np.zeros(width, dtype=cells.dtype))
            lines += 1
        else:
            row -= 1
    if lines == 0:
        return cells.copy(), 0
    return np.vstack(board), lines
