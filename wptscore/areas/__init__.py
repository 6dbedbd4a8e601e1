"""Focus areas: named, path-based slices of the test suite."""

from .classifier import ClassificationMap, classify, classify_test
from .models import AreaPredicate, FocusArea, PatternMatch, PrefixMatch
from .registry import (
    CSS2_NAMESPACE,
    CSS_PREFIX,
    FocusAreaRegistry,
    OrderedAreas,
    build_registry,
    default_registry,
)

__all__ = [
    # Models
    "AreaPredicate",
    "FocusArea",
    "PatternMatch",
    "PrefixMatch",
    # Registry
    "CSS2_NAMESPACE",
    "CSS_PREFIX",
    "FocusAreaRegistry",
    "OrderedAreas",
    "build_registry",
    "default_registry",
    # Classifier
    "ClassificationMap",
    "classify",
    "classify_test",
]
