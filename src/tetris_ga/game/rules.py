from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)
    overflow_points_per_line: int = 200
    lines_per_level: int = 10
    base_fall_ms: int = 1000
    fall_step_ms: int = 100
    min_fall_ms: int = 100

    def validate(self) -> None:
        if len(self.line_clear_scores) != 4:
            raise ValueError("line_clear_scores must list points for 1..4 lines")
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        if self.min_fall_ms <= 0 or self.base_fall_ms < self.min_fall_ms:
            raise ValueError("Fall interval must satisfy 0 < min_fall_ms <= base_fall_ms")
        if self.fall_step_ms < 0:
            raise ValueError("fall_step_ms must be non-negative")

    def base_score(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if lines <= 4:
            return self.line_clear_scores[lines - 1]
        return self.overflow_points_per_line * lines

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        return self.base_score(lines) * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def fall_interval_ms(self, level: int) -> int:
        return max(self.min_fall_ms, self.base_fall_ms - (level - 1) * self.fall_step_ms)
