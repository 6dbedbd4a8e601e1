"""Shared pytest fixtures for wptscore tests."""

import json
import os
from pathlib import Path
from typing import Any

import pytest

from wptscore.areas import FocusAreaRegistry, build_registry
from wptscore.core.logging import reset_logging
from wptscore.core.settings import get_cached_settings
from wptscore.results import NormalizedRun


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch):  # type: ignore[misc]
    """Isolate tests from WPTSCORE_* variables, cached settings and logging."""
    for name in list(os.environ):
        if name.startswith("WPTSCORE_"):
            monkeypatch.delenv(name)
    get_cached_settings.cache_clear()
    yield
    reset_logging()
    get_cached_settings.cache_clear()


@pytest.fixture
def registry() -> FocusAreaRegistry:
    """Return the registry built from the default CSS2 focus folders."""
    return build_registry()


@pytest.fixture
def raw_report() -> dict[str, Any]:
    """Return a raw report with a mix of statuses and subtests."""
    return {
        "run_info": {"product": "servo", "os": "linux", "revision": "abc123"},
        "results": [
            {
                "test": "/css/css-flexbox/a.html",
                "status": "OK",
                "subtests": [
                    {"name": "s1", "status": "PASS"},
                    {"name": "s2", "status": "FAIL"},
                ],
            },
            {
                "test": "/css/CSS2/floats/x.html",
                "status": "PASS",
                "subtests": [],
            },
            {
                "test": "/dom/nodes/y.html",
                "status": "TIMEOUT",
                "subtests": [],
            },
        ],
    }


@pytest.fixture
def write_json(tmp_path: Path):  # type: ignore[misc]
    """Return a helper writing a JSON document under tmp_path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_run():  # type: ignore[misc]
    """Return a factory building a NormalizedRun from compact test data.

    Each test maps to its score, or to a ``(score, {subtest: score})`` pair.
    """

    def _make(tests: dict[str, Any], run_info: dict[str, Any] | None = None):
        test_scores = {}
        for name, value in tests.items():
            score, subtests = value if isinstance(value, tuple) else (value, {})
            test_scores[name] = {
                "score": score,
                "subtests": {sub: {"score": s} for sub, s in subtests.items()},
            }
        return NormalizedRun.from_dict(
            {"run_info": run_info or {}, "test_scores": test_scores}
        )

    return _make
