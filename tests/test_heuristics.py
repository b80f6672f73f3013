import numpy as np
import pytest

from tetris_ga.ai.agent import Agent
from tetris_ga.ai.heuristics import (
    BoardMetrics,
    aggregate_height,
    board_metrics,
    bumpiness,
    column_heights,
    completed_lines,
    count_holes,
    evaluate,
)
from tetris_ga.game.grid import Board


def _sample_grid() -> np.ndarray:
    board = Board()
    board.grid[17, 0] = 1
    board.grid[19, 1] = 4
    return board.grid


class TestMetrics:
    def test_empty_board_is_all_zero(self):
        assert board_metrics(Board().grid) == BoardMetrics(0, 0, 0, 0)

    def test_column_heights(self):
        heights = column_heights(_sample_grid())
        assert heights.tolist() == [3, 1, 0, 0, 0, 0, 0, 0, 0, 0]

    def test_sample_board(self):
        grid = _sample_grid()
        assert aggregate_height(grid) == 4
        assert count_holes(grid) == 2
        assert bumpiness(grid) == 3
        assert completed_lines(grid) == 0

    def test_board_with_full_row(self):
        board = Board()
        board.grid[19, :] = 2
        board.grid[17, 0] = 1
        metrics = board_metrics(board.grid)
        assert metrics == BoardMetrics(aggregate_height=12, holes=1, bumpiness=2, completed_lines=1)

    def test_holes_only_count_covered_cells(self):
        board = Board()
        board.grid[19, 3] = 1
        board.grid[10, 5] = 1
        board.grid[12, 5] = 1
        assert count_holes(board.grid) == 1 + 7

    def test_metrics_are_non_negative_ints(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            grid = (rng.random((20, 10)) < 0.4).astype(np.int8)
            m = board_metrics(grid)
            for value in (m.aggregate_height, m.holes, m.bumpiness, m.completed_lines):
                assert isinstance(value, int)
                assert value >= 0


class TestEvaluate:
    def test_linear_score(self):
        board = Board()
        board.grid[19, :] = 2
        board.grid[17, 0] = 1
        agent = Agent(weights=(1.0, 2.0, 3.0, 4.0))
        assert evaluate(board.grid, agent) == pytest.approx(1 - 24 - 3 - 8)

    def test_zero_weights(self):
        assert evaluate(_sample_grid(), Agent(weights=(0, 0, 0, 0))) == 0.0
