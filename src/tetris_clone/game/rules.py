from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)

    def score_for_lines(self, lines: int) -> int:
        # Flat award per lock; nothing for 0 or more than 4 rows
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        return 0


@dataclass
class GravityRules:
    initial_interval_ms: int = 1000
    step_ms: int = 75
    min_interval_ms: int = 150
    locks_per_speed_up: int = 10

    def next_interval(self, interval_ms: int) -> int:
        """Interval after one speed-up step. Never raises the current value."""
        return min(interval_ms, max(self.min_interval_ms, interval_ms - self.step_ms))
