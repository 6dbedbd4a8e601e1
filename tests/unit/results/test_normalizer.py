"""Unit tests for raw report normalization."""

import logging
from typing import Any

import pytest

from wptscore.core.exceptions import MalformedInputError
from wptscore.results import (
    NormalizedRun,
    RawResultReport,
    normalize,
    parse_report,
    status_score,
)


class TestStatusScore:
    """Tests for the binary status collapse."""

    def test_pass_scores_one(self) -> None:
        """Test that PASS scores 1."""
        assert status_score("PASS") == 1

    @pytest.mark.parametrize(
        "status", ["FAIL", "OK", "TIMEOUT", "ERROR", "CRASH", "pass", "", "PASS "]
    )
    def test_anything_else_scores_zero(self, status: str) -> None:
        """Test that every other label scores 0, case-sensitively."""
        assert status_score(status) == 0


class TestNormalize:
    """Tests for normalize()."""

    def test_scores(self, raw_report: dict[str, Any]) -> None:
        """Test top-level and subtest scores."""
        run = normalize(raw_report)

        flex = run.test_scores["/css/css-flexbox/a.html"]
        assert flex.score == 0
        assert flex.subtests["s1"].score == 1
        assert flex.subtests["s2"].score == 0

        floats = run.test_scores["/css/CSS2/floats/x.html"]
        assert floats.score == 1
        assert floats.subtests == {}

        assert run.test_scores["/dom/nodes/y.html"].score == 0

    def test_run_info_passes_through(self, raw_report: dict[str, Any]) -> None:
        """Test that run_info is kept unchanged."""
        run = normalize(raw_report)
        assert run.run_info == raw_report["run_info"]

    def test_all_pass(self) -> None:
        """Test that a fully passing report scores 1 everywhere."""
        report = {
            "run_info": {},
            "results": [
                {
                    "test": f"/t/{i}.html",
                    "status": "PASS",
                    "subtests": [{"name": f"s{j}", "status": "PASS"} for j in range(3)],
                }
                for i in range(4)
            ],
        }
        run = normalize(report)
        assert len(run) == 4
        for test_score in run.test_scores.values():
            assert test_score.score == 1
            assert all(sub.score == 1 for sub in test_score.subtests.values())

    def test_duplicate_test_last_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a repeated test name keeps the last entry."""
        report = {
            "results": [
                {"test": "/a.html", "status": "PASS", "subtests": []},
                {
                    "test": "/a.html",
                    "status": "FAIL",
                    "subtests": [{"name": "s", "status": "PASS"}],
                },
            ]
        }
        with caplog.at_level(logging.WARNING, logger="wptscore.results.normalizer"):
            run = normalize(report)

        assert len(run) == 1
        assert run.test_scores["/a.html"].score == 0
        assert run.test_scores["/a.html"].subtests["s"].score == 1
        assert "Duplicate test /a.html" in caplog.text

    def test_missing_run_info_defaults_to_empty(self) -> None:
        """Test that run_info is optional."""
        run = normalize({"results": []})
        assert run.run_info == {}
        assert run.test_scores == {}

    def test_extra_fields_are_ignored(self) -> None:
        """Test that harness fields beyond the required ones are accepted."""
        report = {
            "results": [
                {
                    "test": "/a.html",
                    "status": "PASS",
                    "message": None,
                    "duration": 12,
                    "subtests": [
                        {"name": "s", "status": "FAIL", "message": "assert_equals"}
                    ],
                }
            ],
            "time_start": 1,
        }
        run = normalize(report)
        assert run.test_scores["/a.html"].subtests["s"].score == 0

    def test_accepts_report_model(self, raw_report: dict[str, Any]) -> None:
        """Test that an already parsed report is accepted."""
        report = RawResultReport.model_validate(raw_report)
        assert normalize(report) == normalize(raw_report)

    def test_returns_normalized_run(self, raw_report: dict[str, Any]) -> None:
        """Test the result type."""
        assert isinstance(normalize(raw_report), NormalizedRun)


class TestMalformedInput:
    """Tests for missing required fields."""

    @pytest.mark.parametrize("field", ["test", "status", "subtests"])
    def test_missing_test_field(self, field: str) -> None:
        """Test that each required test field is enforced."""
        result = {"test": "/a.html", "status": "PASS", "subtests": []}
        del result[field]
        with pytest.raises(MalformedInputError) as exc_info:
            normalize({"results": [result]})
        assert exc_info.value.field is not None
        assert field in exc_info.value.field

    def test_missing_subtest_status(self) -> None:
        """Test that subtests need a status."""
        report = {
            "results": [
                {"test": "/a.html", "status": "PASS", "subtests": [{"name": "s"}]}
            ]
        }
        with pytest.raises(MalformedInputError) as exc_info:
            normalize(report)
        assert exc_info.value.test == "/a.html"

    def test_missing_results(self) -> None:
        """Test that the results list is required."""
        with pytest.raises(MalformedInputError, match="results"):
            normalize({"run_info": {}})

    def test_not_a_mapping(self) -> None:
        """Test that a non-object report is rejected."""
        with pytest.raises(MalformedInputError):
            normalize([])  # type: ignore[arg-type]

    def test_source_in_message(self) -> None:
        """Test that the source file is named in the error."""
        with pytest.raises(MalformedInputError, match="File: run.json"):
            parse_report({}, source="run.json")

    def test_validation_error_is_chained(self) -> None:
        """Test that the pydantic error is kept as the cause."""
        with pytest.raises(MalformedInputError) as exc_info:
            normalize({})
        assert exc_info.value.__cause__ is not None
