"""
Shared helpers for tetris_ga tests.

- Board builders (empty, partially filled, pre-seeded spawn region)
- Agents with hand-picked weights
"""

import numpy as np
import pytest

from tetris_ga.ai.agent import Agent
from tetris_ga.game.grid import HEIGHT, WIDTH, Board


def board_with_rows(rows: dict, width: int = WIDTH, height: int = HEIGHT) -> Board:
    """Board whose listed rows are set from 0/1 strings, e.g. {19: "1111111110"}."""
    board = Board(width, height)
    for y, pattern in rows.items():
        board.grid[y] = np.array([int(c) for c in pattern], dtype=np.int8)
    return board


def well_board(depth: int = 4, well_column: int = WIDTH - 1) -> Board:
    """Bottom `depth` rows filled except one column."""
    board = Board()
    board.grid[HEIGHT - depth:, :] = 1
    board.grid[HEIGHT - depth:, well_column] = 0
    return board


def filled_cells(board: Board) -> list:
    """Sorted (x, y) coordinates of every non-empty cell."""
    ys, xs = np.nonzero(board.grid)
    return sorted((int(x), int(y)) for y, x in zip(ys, xs))


def blocked_spawn_board() -> Board:
    """Spawn region (rows 0-3, columns 3-6) filled, no full rows."""
    board = Board()
    board.grid[0:4, 3:7] = 1
    return board


@pytest.fixture
def zero_agent() -> Agent:
    return Agent(weights=(0.0, 0.0, 0.0, 0.0))


@pytest.fixture
def careful_agent() -> Agent:
    # Rewards lines, penalises height, holes and bumpiness
    return Agent(weights=(0.76, 0.51, 0.36, 0.18))


@pytest.fixture
def reckless_agent() -> Agent:
    # Prefers tall, jagged stacks; loses quickly
    return Agent(weights=(0.0, -1.0, 0.0, -1.0))
