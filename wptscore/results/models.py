"""Data models for raw and normalized test-run results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# The only status that counts as a pass; every other label scores 0.
PASS_STATUS = "PASS"


def status_score(status: str) -> int:
    """Collapse a status label to a binary score."""
    return 1 if status == PASS_STATUS else 0


class RawSubtestResult(BaseModel):
    """One subtest outcome as reported by the test harness."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., description="Subtest name, unique within its test")
    status: str = Field(..., description="Status label, e.g. PASS, FAIL, TIMEOUT")


class RawTestResult(BaseModel):
    """One test outcome as reported by the test harness."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    test: str = Field(..., description="Test path, unique within a report")
    status: str = Field(..., description="Status label of the test itself")
    subtests: list[RawSubtestResult] = Field(
        ..., description="Subtest outcomes, possibly empty"
    )


class RawResultReport(BaseModel):
    """A complete raw report for one run."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    run_info: dict[str, Any] = Field(
        default_factory=dict, description="Run environment metadata, passed through"
    )
    results: list[RawTestResult] = Field(..., description="Per-test outcomes")


class SubtestScore(BaseModel):
    """Binary score of a subtest."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., description="1 for PASS, 0 otherwise", ge=0, le=1)


class TestScore(BaseModel):
    """Binary score of a test and of each of its subtests."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., description="1 for PASS, 0 otherwise", ge=0, le=1)
    subtests: dict[str, SubtestScore] = Field(
        default_factory=dict, description="Subtest name to score"
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "score": self.score,
            "subtests": {
                name: {"score": subtest.score}
                for name, subtest in self.subtests.items()
            },
        }


class NormalizedRun(BaseModel):
    """Compact scoring structure derived from one raw report."""

    model_config = ConfigDict(frozen=True)

    run_info: dict[str, Any] = Field(
        default_factory=dict, description="Run environment metadata"
    )
    test_scores: dict[str, TestScore] = Field(
        default_factory=dict, description="Test name to score"
    )

    def __len__(self) -> int:
        return len(self.test_scores)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_info": dict(self.run_info),
            "test_scores": {
                name: test_score.to_dict()
                for name, test_score in self.test_scores.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedRun":
        """Create from dictionary (inverse of to_dict).

        Raises:
            pydantic.ValidationError: If the data does not have the
                normalized run shape.
        """
        return cls.model_validate(data)
