from __future__ import annotations

from typing import Sequence

import numpy as np

from .pieces import Mask, mask_cells


WIDTH = 10
HEIGHT = 20


class Board:
    """Fixed-size playfield.

    The grid uses 0 for empty cells and piece colors 1..7 for filled cells.
    Row 0 is the top. Rows above the board (y < 0) form the spawn buffer: they
    are never out of bounds for collision, and nothing is ever written there.
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        data = np.asarray(rows, dtype=np.int8)
        board = cls(width=data.shape[1], height=data.shape[0])
        board.grid[:, :] = data
        return board

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collision(self, mask: Mask, x: int, y: int) -> bool:
        for px, py in mask_cells(mask):
            bx = x + px
            by = y + py
            if bx < 0 or bx >= self.width or by >= self.height:
                return True
            if by >= 0 and self.grid[by, bx] != 0:
                return True
        return False

    def merge(self, mask: Mask, x: int, y: int, color: int) -> None:
        # Off-board cells are skipped; they show up transiently during search
        for px, py in mask_cells(mask):
            if self.is_inside(x + px, y + py):
                self.grid[y + py, x + px] = color

    def clear_lines(self) -> int:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def is_row_empty(self, row: int) -> bool:
        return not np.any(self.grid[row] != 0)

    def copy(self) -> "Board":
        new_board = Board(self.width, self.height)
        new_board.grid = self.grid.copy()
        return new_board

    def snapshot(self) -> np.ndarray:
        state = self.grid.copy()
        state.setflags(write=False)
        return state

    def __str__(self) -> str:
        return "\n".join("".join("#" if cell else "." for cell in row) for row in self.grid)
