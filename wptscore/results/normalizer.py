"""Conversion of raw harness reports into normalized runs."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from wptscore.core.exceptions import MalformedInputError

from .models import (
    NormalizedRun,
    RawResultReport,
    SubtestScore,
    TestScore,
    status_score,
)

logger = logging.getLogger(__name__)


def _test_name_at(raw: Any, index: int) -> str | None:
    """Best-effort lookup of the test name of ``results[index]``."""
    try:
        name = raw["results"][index]["test"]
    except (KeyError, IndexError, TypeError):
        return None
    return name if isinstance(name, str) else None


def _malformed(
    exc: ValidationError, raw: Any, source: str | None
) -> MalformedInputError:
    error = exc.errors()[0]
    loc = error["loc"]

    test = None
    if len(loc) >= 2 and loc[0] == "results" and isinstance(loc[1], int):
        test = _test_name_at(raw, loc[1])

    field = ".".join(str(part) for part in loc) or None
    return MalformedInputError(error["msg"], field=field, test=test, source=source)


def parse_report(
    raw: RawResultReport | Mapping[str, Any],
    source: str | None = None,
) -> RawResultReport:
    """Validate a raw report.

    Args:
        raw: Report model or decoded JSON mapping.
        source: Where the report came from, for error messages.

    Raises:
        MalformedInputError: If required fields are missing or mistyped.
    """
    if isinstance(raw, RawResultReport):
        return raw
    try:
        return RawResultReport.model_validate(raw)
    except ValidationError as e:
        raise _malformed(e, raw, source) from e


def normalize(
    raw: RawResultReport | Mapping[str, Any],
    source: str | None = None,
) -> NormalizedRun:
    """Convert a raw report into a normalized run.

    Only the status ``PASS`` scores 1; any other label scores 0. A test name
    that appears more than once keeps the last entry.

    Args:
        raw: Report model or decoded JSON mapping.
        source: Where the report came from, for error messages.

    Returns:
        NormalizedRun with the report's run_info passed through.

    Raises:
        MalformedInputError: If required fields are missing or mistyped.
    """
    report = parse_report(raw, source=source)

    test_scores: dict[str, TestScore] = {}
    subtest_count = 0
    for result in report.results:
        if result.test in test_scores:
            logger.warning(
                "Duplicate test %s in report, keeping the last result", result.test
            )

        subtests = {
            subtest.name: SubtestScore(score=status_score(subtest.status))
            for subtest in result.subtests
        }
        subtest_count += len(subtests)
        test_scores[result.test] = TestScore(
            score=status_score(result.status),
            subtests=subtests,
        )

    logger.debug(
        "Normalized %d tests with %d subtests", len(test_scores), subtest_count
    )
    return NormalizedRun(run_info=report.run_info, test_scores=test_scores)
