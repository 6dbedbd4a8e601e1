"""Reporter for focus area score tables."""

import sys
from collections.abc import Mapping
from typing import Any

from wptscore.areas.registry import FocusAreaRegistry

from .models import MAX_AREA_SCORE, AreaScoreTable


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Score thresholds for coloring, on the 0..1000 scale
GOOD_SCORE = 900
POOR_SCORE = 500


def supports_color() -> bool:
    """Check if terminal supports color output."""
    if not hasattr(sys.stdout, "isatty"):
        return False
    return sys.stdout.isatty()


def _colorize(text: str, color: str, use_colors: bool = True) -> str:
    if not use_colors:
        return text
    return f"{color}{text}{Colors.RESET}"


def _score_color(score: int) -> str:
    if score >= GOOD_SCORE:
        return Colors.GREEN
    if score < POOR_SCORE:
        return Colors.RED
    return Colors.YELLOW


def format_scores_console(
    registry: FocusAreaRegistry,
    tables: Mapping[str, AreaScoreTable],
    use_colors: bool = True,
) -> str:
    """Format score tables for console output.

    One row per focus area in display order, one column per scored run.

    Args:
        registry: Focus areas the tables were computed for.
        tables: Run label to its area score table.
        use_colors: Whether to use ANSI colors.

    Returns:
        Formatted string for console output.
    """
    area_keys, area_names = registry.list_ordered_areas()
    labels = list(tables)

    lines: list[str] = []

    header = "WPT Focus Area Scores"
    lines.append(_colorize(header, Colors.BOLD, use_colors))
    lines.append("=" * len(header))
    lines.append("")

    name_width = max([len("Area")] + [len(area_names[key]) for key in area_keys])
    score_width = len(str(MAX_AREA_SCORE))
    widths = [max(score_width, len(label)) for label in labels]

    lines.append(
        "  ".join(
            ["Area".ljust(name_width)]
            + [label.rjust(width) for label, width in zip(labels, widths)]
        ).rstrip()
    )
    lines.append("  ".join(["-" * name_width] + ["-" * width for width in widths]))

    for key in area_keys:
        cells = [area_names[key].ljust(name_width)]
        for label, width in zip(labels, widths):
            score = tables[label].get(key, 0)
            cells.append(
                _colorize(str(score).rjust(width), _score_color(score), use_colors)
            )
        lines.append("  ".join(cells).rstrip())

    return "\n".join(lines)


def format_scores_json(
    registry: FocusAreaRegistry,
    tables: Mapping[str, AreaScoreTable],
) -> dict[str, Any]:
    """Format score tables as a JSON-serializable dictionary.

    Args:
        registry: Focus areas the tables were computed for.
        tables: Run label to its area score table.

    Returns:
        ``{"runs": [...], "areas": [{"key", "name", "order", "scores"}]}``
        with areas in display order.
    """
    area_keys, area_names = registry.list_ordered_areas()
    areas: list[dict[str, Any]] = []
    for key in area_keys:
        scores = {label: table.get(key, 0) for label, table in tables.items()}
        areas.append(
            {
                "key": key,
                "name": area_names[key],
                "order": registry[key].order,
                "scores": scores,
            }
        )
    return {"runs": list(tables), "areas": areas}
