"""Exhaustive single-piece placement search."""

from __future__ import annotations

from typing import NamedTuple, Optional

from tetris_ga.game.grid import Board
from tetris_ga.game.pieces import Mask, rotate_mask

from .agent import Agent
from .heuristics import evaluate


# Columns left of the wall let masks with empty left columns reach the edge
LEFTMOST_COLUMN = -4


class Move(NamedTuple):
    rotation: int
    x: int
    score: float
    y: int = 0


def drop_row(board: Board, mask: Mask, x: int) -> int:
    """Lowest collision-free row when dropping from row 0, or -1 if row 0 collides."""
    y = 0
    while not board.collision(mask, x, y):
        y += 1
    return y - 1


def simulate_drop(board: Board, mask: Mask, x: int, y: int, color: int) -> Board:
    result = board.copy()
    result.merge(mask, x, y, color)
    result.clear_lines()
    return result


def candidate_columns(board: Board) -> range:
    return range(LEFTMOST_COLUMN, board.width)


def compute_best_move(board: Board, mask: Mask, color: int, agent: Agent) -> Optional[Move]:
    """Best (rotation, column) for `mask` over every rotation and column.

    Rotations are counted from the mask as given. Candidates are visited in
    (rotation, column) ascending order and only a strictly higher score
    replaces the current best, so the first candidate wins ties. Returns None
    when no placement fits.
    """
    best: Optional[Move] = None
    current = mask
    for rotation in range(4):
        for x in candidate_columns(board):
            y = drop_row(board, current, x)
            if y < 0:
                continue
            after = simulate_drop(board, current, x, y, color)
            score = evaluate(after.grid, agent)
            if best is None or score > best.score:
                best = Move(rotation=rotation, x=x, score=score, y=y)
        current = rotate_mask(current)
    return best
