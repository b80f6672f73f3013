"""Board metrics and the linear evaluation used to rank placements."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .agent import Agent


@dataclass(frozen=True)
class BoardMetrics:
    aggregate_height: int
    holes: int
    bumpiness: int
    completed_lines: int


def column_heights(grid: np.ndarray) -> np.ndarray:
    """Height of each column: rows from the topmost filled cell to the floor, 0 if empty."""
    filled = np.asarray(grid) != 0
    height = filled.shape[0]
    top = np.argmax(filled, axis=0)
    return np.where(filled.any(axis=0), height - top, 0)


def aggregate_height(grid: np.ndarray) -> int:
    return int(column_heights(grid).sum())


def count_holes(grid: np.ndarray) -> int:
    filled = np.asarray(grid) != 0
    # A cell is covered once any cell above it (or itself) is filled
    covered = np.logical_or.accumulate(filled, axis=0)
    return int(np.count_nonzero(covered & ~filled))


def bumpiness(grid: np.ndarray) -> int:
    heights = column_heights(grid)
    return int(np.abs(np.diff(heights)).sum())


def completed_lines(grid: np.ndarray) -> int:
    return int(np.count_nonzero(np.all(np.asarray(grid) != 0, axis=1)))


def board_metrics(grid: np.ndarray) -> BoardMetrics:
    return BoardMetrics(
        aggregate_height=aggregate_height(grid),
        holes=count_holes(grid),
        bumpiness=bumpiness(grid),
        completed_lines=completed_lines(grid),
    )


def score_metrics(metrics: BoardMetrics, agent: Agent) -> float:
    return (
        agent.w_lines * metrics.completed_lines
        - agent.w_height * metrics.aggregate_height
        - agent.w_holes * metrics.holes
        - agent.w_bumpiness * metrics.bumpiness
    )


def evaluate(grid: np.ndarray, agent: Agent) -> float:
    return score_metrics(board_metrics(grid), agent)
