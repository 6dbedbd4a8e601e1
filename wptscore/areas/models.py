"""Focus area and membership predicate types."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PrefixMatch:
    """Matches test names starting with a literal prefix."""

    prefix: str

    def matches(self, test_name: str) -> bool:
        return test_name.startswith(self.prefix)


@dataclass(frozen=True)
class PatternMatch:
    """Matches test names against a regular expression anchored at the start."""

    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, expression: str) -> "PatternMatch":
        return cls(re.compile(expression))

    def matches(self, test_name: str) -> bool:
        return self.pattern.match(test_name) is not None


AreaPredicate = PrefixMatch | PatternMatch


@dataclass(frozen=True)
class FocusArea:
    """A named slice of the test suite.

    Attributes:
        key: Unique identifier of the area.
        name: Display name.
        predicate: Membership rule applied to test names.
        order: Display sort key. Independent of registration order and not
            necessarily unique.
    """

    key: str
    name: str
    predicate: AreaPredicate
    order: int

    def contains(self, test_name: str) -> bool:
        """Check whether a test belongs to this area."""
        return self.predicate.matches(test_name)
