"""Assignment of tests to focus areas."""

import logging

from wptscore.results.models import NormalizedRun

from .registry import FocusAreaRegistry

logger = logging.getLogger(__name__)

ClassificationMap = dict[str, list[str]]


def classify_test(test_name: str, registry: FocusAreaRegistry) -> list[str]:
    """Keys of the areas containing ``test_name``, in registration order."""
    return [area.key for area in registry if area.contains(test_name)]


def classify(run: NormalizedRun, registry: FocusAreaRegistry) -> ClassificationMap:
    """Classify every test of a run.

    Args:
        run: Run whose test names are classified.
        registry: Focus areas to classify into.

    Returns:
        Mapping of test name to the keys of its areas, in registration
        order. Tests matching no area map to an empty list.
    """
    classification = {
        test_name: classify_test(test_name, registry) for test_name in run.test_scores
    }

    unclassified = sum(1 for keys in classification.values() if not keys)
    logger.debug(
        "Classified %d tests into %d areas (%d unclassified)",
        len(classification),
        len(registry),
        unclassified,
    )
    return classification
