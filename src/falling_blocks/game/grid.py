from __future__ import annotations

import logging

import numpy as np

from .pieces import Piece


logger = logging.getLogger(__name__)


class GameGrid:
    """Fixed-size board of locked cells.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are the color handles of the pieces that were locked there.
    Row 0 is the top of the board; a piece anchor may sit above it (y < 0)
    while it is still entering the board.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_full(self, row: int) -> bool:
        if not 0 <= row < self.height:
            return False
        return bool(np.all(self.grid[row] != 0))

    def can_place(self, piece: Piece, x: int, y: int) -> bool:
        """Return True if every occupied cell of ``piece`` anchored at (x, y) is free.

        Cells above the board (y < 0) only have their column checked; the
        occupancy test applies from row 0 downwards.
        """
        for cx, cy in piece.cells_at(x, y):
            if cx < 0 or cx >= self.width or cy >= self.height:
                return False
            if cy >= 0 and self.grid[cy, cx] != 0:
                return False
        return True

    def lock(self, piece: Piece, x: int, y: int) -> None:
        """Write the piece's color into the board. Cells above row 0 are dropped."""
        value = piece.color
        for cx, cy in piece.cells_at(x, y):
            if cy >= 0:
                self.grid[cy, cx] = value

    def clear_and_compact(self) -> int:
        """Remove full rows scanning bottom-up and shift the rows above down.

        After a shift the same row index is checked again, since it now holds
        the row that was above it.
        """
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if self.is_full(row):
                cleared += 1
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0] = 0
            else:
                row -= 1
        if cleared:
            logger.debug("cleared %d row(s)", cleared)
        return cleared

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
