"""tetris_ga: a heuristic Tetris player whose weights evolve across generations."""

__version__ = "0.1.0"
