from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from tetris_ga.ai.agent import Agent, random_agent
from tetris_ga.ai.planner import compute_best_move

from .grid import HEIGHT, WIDTH, Board
from .pieces import Mask, Piece, TetrominoType, random_kind, rotate_mask
from .rules import ScoringRules


logger = logging.getLogger(__name__)

# Horizontal shifts tried after a rotation collides: +1, -2, +3 (net +1, -1, +2)
MAX_KICK_OFFSET = 3


class Intent(IntEnum):
    NONE = 0
    MOVE_LEFT = 1
    MOVE_RIGHT = 2
    SOFT_DROP = 3
    ROTATE = 4


class SessionState(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    LINE_CLEARING = "line_clearing"
    FINISHED = "finished"


@dataclass
class GameConfig:
    width: int = WIDTH
    height: int = HEIGHT
    spawn_x: Optional[int] = None
    spawn_y: int = 0
    random_seed: Optional[int] = None
    # When a rotation finds no free kick, also undo the kick shifts
    kick_reverts_position: bool = True

    def spawn_column(self) -> int:
        return self.width // 2 - 2 if self.spawn_x is None else self.spawn_x

    def validate(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError("Board must be at least 4x4 to hold a piece")
        if not -4 < self.spawn_column() < self.width:
            raise ValueError(f"spawn_x {self.spawn_column()} is outside the board")
        if self.spawn_y < 0 or self.spawn_y >= self.height:
            raise ValueError(f"spawn_y {self.spawn_y} is outside the board")


class MaxScoreTracker:
    """Highest final score reported by any session. Safe to share across threads."""

    def __init__(self, initial: int = 0) -> None:
        self._value = int(initial)
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def report(self, score: int) -> int:
        with self._lock:
            if score > self._value:
                self._value = int(score)
            return self._value


@dataclass(frozen=True)
class SessionSnapshot:
    grid: np.ndarray
    mask: Mask
    x: int
    y: int
    color: int
    score: int
    level: int
    lines: int
    max_score: int
    finished: bool


class GameSession:
    """One game on one board, driven by the planner or by input intents."""

    def __init__(
        self,
        agent: Optional[Agent] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        max_score: Optional[MaxScoreTracker] = None,
        auto: bool = True,
        board: Optional[Board] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.config.validate()
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.auto = auto
        self.agent = agent if agent is not None else random_agent(self.rng)
        self.max_score = max_score if max_score is not None else MaxScoreTracker()
        if board is not None:
            self.board = board.copy()
        else:
            self.board = Board(self.config.width, self.config.height)
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.pieces_spawned = 0
        self.state = SessionState.SPAWNING
        self.piece = Piece(TetrominoType.I)
        self.mask: Mask = self.piece.mask
        self.x = 0
        self.y = 0
        self._planned = False
        self._spawn_piece()

    @property
    def finished(self) -> bool:
        return self.state is SessionState.FINISHED

    @property
    def color(self) -> int:
        return self.piece.color

    @property
    def fall_interval_ms(self) -> int:
        return self.rules.fall_interval_ms(self.level)

    def _collides(self, dx: int = 0, dy: int = 0) -> bool:
        return self.board.collision(self.mask, self.x + dx, self.y + dy)

    def _spawn_piece(self) -> None:
        self.state = SessionState.SPAWNING
        self.piece = Piece(random_kind(self.rng))
        self.mask = self.piece.mask
        self.x = self.config.spawn_column()
        self.y = self.config.spawn_y
        self.pieces_spawned += 1
        self._planned = False
        if self._collides():
            self._finish()
            return
        self.state = SessionState.FALLING

    def _finish(self) -> None:
        self.state = SessionState.FINISHED
        self.agent.fitness = self.score
        best = self.max_score.report(self.score)
        logger.debug(
            "Game over: score=%d lines=%d level=%d pieces=%d max=%d",
            self.score, self.lines_cleared_total, self.level, self.pieces_spawned, best,
        )
        logger.debug("Final board:\n%s", self.board)

    def _lock_piece(self) -> None:
        self.state = SessionState.LOCKING
        self.board.merge(self.mask, self.x, self.y, self.color)
        if not self.board.is_row_empty(0):
            self._finish()
            return
        self.state = SessionState.LINE_CLEARING
        lines = self.board.clear_lines()
        if lines > 0:
            self.lines_cleared_total += lines
            self.level = self.rules.level_for_lines(self.lines_cleared_total)
            self.score += self.rules.score_for_lines(lines, self.level)
        self._spawn_piece()

    def _rotate(self) -> bool:
        """Quarter turn with horizontal kicks. Returns False if the turn was undone."""
        old_piece, old_mask, old_x = self.piece, self.mask, self.x
        self.piece = old_piece.rotated()
        self.mask = rotate_mask(old_mask)
        offset = 1
        while self._collides():
            self.x += offset
            offset = -offset - 1 if offset > 0 else -offset + 1
            if abs(offset) > MAX_KICK_OFFSET:
                self.piece, self.mask = old_piece, old_mask
                if self.config.kick_reverts_position:
                    self.x = old_x
                return False
        return True

    def _steer_to_best_move(self) -> None:
        self._planned = True
        move = compute_best_move(self.board, self.mask, self.color, self.agent)
        if move is None:
            return
        for _ in range(move.rotation):
            self._rotate()
        while self.x < move.x and not self._collides(dx=1):
            self.x += 1
        while self.x > move.x and not self._collides(dx=-1):
            self.x -= 1
        while not self._collides(dy=1):
            self.y += 1

    def _fall(self) -> None:
        if not self._collides(dy=1):
            self.y += 1
        else:
            self._lock_piece()

    def tick(self) -> None:
        """Advance one fall step; in automatic mode plan and steer a fresh piece first."""
        if self.finished:
            return
        if self.auto and not self._planned:
            self._steer_to_best_move()
        self._fall()

    def apply(self, intent: Intent) -> bool:
        """Apply a human input intent. Returns True if the piece moved or turned."""
        if self.auto or self.finished:
            return False
        if intent == Intent.MOVE_LEFT:
            if not self._collides(dx=-1):
                self.x -= 1
                return True
        elif intent == Intent.MOVE_RIGHT:
            if not self._collides(dx=1):
                self.x += 1
                return True
        elif intent == Intent.SOFT_DROP:
            if not self._collides(dy=1):
                self.y += 1
                return True
        elif intent == Intent.ROTATE:
            return self._rotate()
        return False

    def end(self) -> None:
        """Stop the game early; the current score counts as the final score."""
        if not self.finished:
            self._finish()

    def run_to_completion(self, max_ticks: Optional[int] = None) -> int:
        ticks = 0
        while not self.finished:
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.tick()
            ticks += 1
        return self.score

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            grid=self.board.snapshot(),
            mask=self.mask,
            x=self.x,
            y=self.y,
            color=self.color,
            score=self.score,
            level=self.level,
            lines=self.lines_cleared_total,
            max_score=self.max_score.value,
            finished=self.finished,
        )
