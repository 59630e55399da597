"""
Scoring System
==============

Score equals the number of blocks placed. Tracks the best score across
resets and the number of exact alignments.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    level: int
    is_perfect: bool

    def __repr__(self) -> str:
        if self.is_perfect:
            return f"ScoreEvent(perfect, level={self.level})"
        return f"ScoreEvent(level={self.level})"


class ScoreTracker:
    """
    Tracks game score.

    One point per placed block; the best score survives `reset()`.
    """

    POINTS_PER_BLOCK = 1

    def __init__(self):
        self._score: int = 0
        self._best_score: int = 0
        self._placements: int = 0
        self._perfect_drops: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def best_score(self) -> int:
        """Highest score reached since construction."""
        return self._best_score

    @property
    def placements(self) -> int:
        return self._placements

    @property
    def perfect_drops(self) -> int:
        """Number of drops aligned exactly with the block below."""
        return self._perfect_drops

    def apply_placement(self, level: int, is_perfect: bool) -> ScoreEvent:
        """
        Score a successful drop.

        Args:
            level: Level of the block just placed.
            is_perfect: True if nothing was trimmed.

        Returns:
            ScoreEvent describing the points awarded.
        """
        points = self.POINTS_PER_BLOCK
        self._score += points
        self._placements += 1
        if is_perfect:
            self._perfect_drops += 1
        self._best_score = max(self._best_score, self._score)
        return ScoreEvent(points=points, level=level, is_perfect=is_perfect)

    def reset(self) -> None:
        """Reset score to zero. Best score is kept."""
        self._score = 0
        self._placements = 0
        self._perfect_drops = 0
