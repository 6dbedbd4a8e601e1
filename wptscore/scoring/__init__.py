"""Focus area scoring of runs against a reference run."""

from .aggregator import ScoreAggregator, score_contribution, score_run
from .models import MAX_AREA_SCORE, AreaScoreTable, AreaTotals
from .reporter import format_scores_console, format_scores_json

__all__ = [
    "MAX_AREA_SCORE",
    "AreaScoreTable",
    "AreaTotals",
    "ScoreAggregator",
    "format_scores_console",
    "format_scores_json",
    "score_contribution",
    "score_run",
]
