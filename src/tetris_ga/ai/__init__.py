"""Heuristic player for tetris_ga.

- Agent: four evaluation weights plus fitness
- heuristics: board metrics and the weighted linear score
- planner: exhaustive rotation x column placement search
"""

from .agent import Agent, crossover, random_agent
from .heuristics import BoardMetrics, board_metrics, evaluate
from .planner import Move, compute_best_move, drop_row, simulate_drop

__all__ = [
    "Agent",
    "crossover",
    "random_agent",
    "BoardMetrics",
    "board_metrics",
    "evaluate",
    "Move",
    "compute_best_move",
    "drop_row",
    "simulate_drop",
]
