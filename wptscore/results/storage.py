"""Loading and saving run files."""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from wptscore.core.exceptions import MalformedInputError
from wptscore.merge import merge_all

from .models import NormalizedRun
from .normalizer import normalize

logger = logging.getLogger(__name__)


def load_json(path: Path) -> Any:
    """Load a JSON document.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def save_json(data: Any, path: Path) -> None:
    """Save a JSON document, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_run(path: Path) -> NormalizedRun:
    """Load one run file.

    The file may hold either a raw harness report (with a ``results`` list),
    which is normalized on load, or an already normalized run (with
    ``test_scores``).

    Args:
        path: Path to the run file.

    Returns:
        The normalized run.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        MalformedInputError: If the document is neither kind of run.
    """
    data = load_json(path)
    source = str(path)

    if not isinstance(data, dict):
        raise MalformedInputError("expected a JSON object", source=source)

    if "results" in data:
        logger.debug("Loading raw report from %s", path)
        return normalize(data, source=source)

    if "test_scores" in data:
        logger.debug("Loading normalized run from %s", path)
        try:
            return NormalizedRun.from_dict(data)
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise MalformedInputError(error["msg"], field=field, source=source) from e

    raise MalformedInputError(
        "expected a raw report ('results') or a normalized run ('test_scores')",
        source=source,
    )


def load_runs(paths: Sequence[Path]) -> NormalizedRun:
    """Load the shards of one run and combine them.

    Shards must cover disjoint tests: their ``test_scores`` are deep-merged,
    so a test present in two shards raises KeyOverlapError. The run_info of
    the first shard is kept.

    Raises:
        ValueError: If no paths are given.
        KeyOverlapError: If two shards score the same test.
    """
    if not paths:
        raise ValueError("At least one run file is required")

    runs = [load_run(path) for path in paths]
    if len(runs) == 1:
        return runs[0]

    merged = merge_all({"test_scores": run.to_dict()["test_scores"]} for run in runs)
    logger.debug("Combined %d shards into one run", len(runs))
    return NormalizedRun.from_dict(
        {
            "run_info": runs[0].run_info,
            "test_scores": merged.get("test_scores", {}),
        }
    )


def save_run(run: NormalizedRun, path: Path) -> None:
    """Save a normalized run in the format read by load_run."""
    save_json(run.to_dict(), path)
