"""Focus area score aggregation for a run against a reference run."""

import logging
from collections.abc import Mapping, Sequence
from fractions import Fraction

from wptscore.areas.registry import FocusAreaRegistry
from wptscore.core.exceptions import ScoringError
from wptscore.results.models import NormalizedRun, TestScore

from .models import AreaScoreTable, AreaTotals

logger = logging.getLogger(__name__)


def score_contribution(candidate: TestScore, reference: TestScore) -> Fraction:
    """
    Score one candidate test against its reference entry.

    Without reference subtests the candidate's own score counts. Otherwise
    the contribution is the mean, over the reference subtests, of the
    candidate's subtest scores; a reference subtest missing from the
    candidate counts as 0 and extra candidate subtests are ignored.

    Args:
        candidate: The candidate run's entry for the test.
        reference: The reference run's entry for the same test.

    Returns:
        Contribution in [0, 1].
    """
    if not reference.subtests:
        return Fraction(candidate.score)

    passed = 0
    for name in reference.subtests:
        subtest = candidate.subtests.get(name)
        if subtest is not None:
            passed += subtest.score
    return Fraction(passed, len(reference.subtests))


class ScoreAggregator:
    """
    Aggregates per-test results into per-area scores.

    The reference run defines which tests are scored. Each of them counts
    once towards every area it belongs to; tests missing from the candidate
    run still count but contribute 0. The final area score is:

        floor(1000 × Σ contribution / tests in area)

    and 0 for areas without tests.
    """

    def __init__(self, registry: FocusAreaRegistry) -> None:
        """
        Initialize the score aggregator.

        Args:
            registry: Focus areas to score. Every area gets an entry in the
                result, even without tests.
        """
        self.registry = registry

    def accumulate(
        self,
        candidate: NormalizedRun,
        reference: NormalizedRun,
        classification_map: Mapping[str, Sequence[str]],
    ) -> dict[str, AreaTotals]:
        """
        Compute per-area test counts and summed contributions.

        Args:
            candidate: Run being scored.
            reference: Run defining the tests to score.
            classification_map: Test name to area keys, as produced by
                classify(). Reference tests absent from the map belong to
                no area.

        Returns:
            AreaTotals for every area of the registry, in registration order.

        Raises:
            ScoringError: If the map names an area unknown to the registry.
        """
        totals = {key: AreaTotals() for key in self.registry.keys()}
        missing = 0

        for test_name, reference_test in reference.test_scores.items():
            areas = classification_map.get(test_name, ())
            for area in areas:
                if area not in totals:
                    raise ScoringError(
                        f"Test {test_name} is classified into unknown area {area}"
                    )
                totals[area].add_test()

            candidate_test = candidate.test_scores.get(test_name)
            if candidate_test is None:
                missing += 1
                continue

            contribution = score_contribution(candidate_test, reference_test)
            for area in areas:
                totals[area].add_score(contribution)

        logger.debug(
            "Scored %d reference tests (%d missing from candidate)",
            len(reference.test_scores),
            missing,
        )
        return totals

    def score_run(
        self,
        candidate: NormalizedRun,
        reference: NormalizedRun,
        classification_map: Mapping[str, Sequence[str]],
    ) -> AreaScoreTable:
        """
        Compute the score of every area for a candidate run.

        Args:
            candidate: Run being scored.
            reference: Run defining the tests to score.
            classification_map: Test name to area keys.

        Returns:
            Area key to score in [0, 1000].

        Raises:
            ScoringError: If the map names an area unknown to the registry.
        """
        totals = self.accumulate(candidate, reference, classification_map)
        return {key: area_totals.score for key, area_totals in totals.items()}


def score_run(
    candidate: NormalizedRun,
    reference: NormalizedRun,
    classification_map: Mapping[str, Sequence[str]],
    registry: FocusAreaRegistry,
) -> AreaScoreTable:
    """Score a candidate run against a reference run. See ScoreAggregator."""
    return ScoreAggregator(registry).score_run(
        candidate, reference, classification_map
    )
