"""Data models for focus area scoring."""

from dataclasses import dataclass, field
from fractions import Fraction

# Scores are reported on a 0..MAX_AREA_SCORE integer scale.
MAX_AREA_SCORE = 1000

AreaScoreTable = dict[str, int]


@dataclass
class AreaTotals:
    """Running totals for one focus area.

    ``total_score`` is kept as an exact fraction so that the final
    truncation is not affected by floating-point rounding.
    """

    total_tests: int = 0
    total_score: Fraction = field(default_factory=Fraction)

    def add_test(self) -> None:
        self.total_tests += 1

    def add_score(self, contribution: Fraction) -> None:
        self.total_score += contribution

    @property
    def score(self) -> int:
        """Area score in [0, MAX_AREA_SCORE], truncated towards zero."""
        if self.total_tests == 0:
            return 0
        return int(MAX_AREA_SCORE * self.total_score // self.total_tests)

    def to_dict(self) -> dict[str, float | int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_tests": self.total_tests,
            "total_score": round(float(self.total_score), 4),
            "score": self.score,
        }
