from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_ga.game.core import GameConfig, GameSession, Intent, MaxScoreTracker
from tetris_ga.game.rules import ScoringRules
from tetris_ga.visualization.renderer import color_for_value, overlay_piece


class TetrisSessionEnv(gym.Env):
    """Human-mode game session behind the gymnasium API.

    Actions (5 total), one input intent per step followed by one fall tick:
      0: None
      1: Move Left
      2: Move Right
      3: Soft Drop
      4: Rotate
    Reward is the change in game score.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.render_mode = render_mode
        self.max_score = MaxScoreTracker()
        self.game = self._new_game(self.config.random_seed)

        h, w = self.config.height, self.config.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=7, shape=(h, w), dtype=np.int8),
                "piece": spaces.Box(low=0, high=1, shape=(4, 4), dtype=np.int8),
                "position": spaces.Box(low=-4, high=max(h, w), shape=(2,), dtype=np.int64),
            }
        )
        self.action_space = spaces.Discrete(len(Intent))

    def _new_game(self, seed: Optional[int]) -> GameSession:
        return GameSession(
            config=self.config,
            rules=self.rules,
            max_score=self.max_score,
            auto=False,
            rng=random.Random(seed),
        )

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.board.grid.astype(np.int8),
            "piece": np.asarray(self.game.mask, dtype=np.int8),
            "position": np.array([self.game.x, self.game.y], dtype=np.int64),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "level": self.game.level,
            "lines_cleared_total": self.game.lines_cleared_total,
            "max_score": self.max_score.value,
            "state": self.game.state.value,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = self._new_game(seed)
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        if not self.action_space.contains(int(action)):
            raise ValueError(f"Invalid action {action!r}")
        if self.game.finished:
            return self._get_obs(), 0.0, True, False, self._get_info()
        before = self.game.score
        self.game.apply(Intent(int(action)))
        self.game.tick()
        reward = float(self.game.score - before)
        return self._get_obs(), reward, self.game.finished, False, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            state = overlay_piece(self.game.snapshot())
            cell = 12
            h, w = state.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(state[y, x]))
            return img
        # windowed drawing lives in tetris_ga.visualization
        return None

    def close(self) -> None:
        pass
