"""Gymnasium environment for tetris_ga."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Human-mode session driven by input intents
register(
    id="TetrisSession-v0",
    entry_point="tetris_ga.env.tetris_env:TetrisSessionEnv",
)

__all__ = ["TetrisSession-v0"]
