"""Raw and normalized test-run results."""

from .models import (
    PASS_STATUS,
    NormalizedRun,
    RawResultReport,
    RawSubtestResult,
    RawTestResult,
    SubtestScore,
    TestScore,
    status_score,
)
from .normalizer import normalize, parse_report
from .storage import load_json, load_run, load_runs, save_json, save_run

__all__ = [
    # Models
    "PASS_STATUS",
    "NormalizedRun",
    "RawResultReport",
    "RawSubtestResult",
    "RawTestResult",
    "SubtestScore",
    "TestScore",
    "status_score",
    # Normalizer
    "normalize",
    "parse_report",
    # Storage
    "load_json",
    "load_run",
    "load_runs",
    "save_json",
    "save_run",
]
