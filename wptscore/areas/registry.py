"""Catalog of focus areas.

The catalog is built once and never changed. Classification walks the areas
in registration order; reports list them by their ``order`` field.
Per-folder CSS2 areas are registered last but numbered 1..n, so they sort
right after the combined CSS2 area.
"""

import re
from collections.abc import Iterable, Iterator, Sequence
from functools import lru_cache
from typing import NamedTuple

from wptscore.core.settings import DEFAULT_CSS2_FOCUS_FOLDERS

from .models import FocusArea, PatternMatch, PrefixMatch

CSS_PREFIX = "/css/"
CSS2_NAMESPACE = "/css/CSS2/"

# Fixed areas registered after the combined CSS2 area: (key, name, prefix, order)
PREFIX_AREAS: tuple[tuple[str, str, str, int], ...] = (
    ("cssom", "CSSOM", "/css/cssom/", 90),
    ("csspos", "CSS Position", "/css/css-position/", 91),
    ("cssflex", "CSS Flexbox", "/css/css-flexbox/", 92),
    ("css", "All CSS tests", CSS_PREFIX, 98),
    ("all", "All WPT tests", "", 99),
)


class OrderedAreas(NamedTuple):
    """Area keys in display order, with their display names."""

    area_keys: list[str]
    area_names: dict[str, str]


class FocusAreaRegistry:
    """Immutable, ordered collection of focus areas.

    Iterating yields areas in registration order, which is the order used
    for classification.
    """

    def __init__(self, areas: Iterable[FocusArea]) -> None:
        """
        Initialize the registry.

        Args:
            areas: Focus areas in registration order.

        Raises:
            ValueError: If two areas share a key.
        """
        self._areas: tuple[FocusArea, ...] = tuple(areas)
        self._by_key: dict[str, FocusArea] = {}
        for area in self._areas:
            if area.key in self._by_key:
                raise ValueError(f"Duplicate focus area key: {area.key}")
            self._by_key[area.key] = area

    def __iter__(self) -> Iterator[FocusArea]:
        return iter(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __repr__(self) -> str:
        return f"FocusAreaRegistry(keys={self.keys()!r})"

    def __getitem__(self, key: str) -> FocusArea:
        return self._by_key[key]

    def get(self, key: str) -> FocusArea | None:
        return self._by_key.get(key)

    def keys(self) -> list[str]:
        """Area keys in registration order."""
        return [area.key for area in self._areas]

    def list_ordered_areas(self) -> OrderedAreas:
        """List area keys sorted by display order.

        The sort is stable, so areas sharing an ``order`` value keep their
        registration order.
        """
        ordered = sorted(self._areas, key=lambda area: area.order)
        return OrderedAreas(
            area_keys=[area.key for area in ordered],
            area_names={area.key: area.name for area in self._areas},
        )


def css2_folder_pattern(folders: Sequence[str]) -> PatternMatch:
    """Build the combined pattern matching any of the CSS2 focus folders."""
    alternatives = "|".join(re.escape(folder) for folder in folders)
    return PatternMatch.compile(f"^{re.escape(CSS2_NAMESPACE)}({alternatives})/")


def build_registry(
    css2_folders: Sequence[str] = DEFAULT_CSS2_FOCUS_FOLDERS,
) -> FocusAreaRegistry:
    """Build the focus area catalog.

    Registration order: the combined CSS2 area, the fixed prefix areas, then
    one area per CSS2 folder (keyed by the folder name).

    Args:
        css2_folders: Folders under /css/CSS2/ forming the CSS2 focus area.

    Raises:
        ValueError: If no folders are given, or a folder name collides with
            another area key.
    """
    if not css2_folders:
        raise ValueError("At least one CSS2 focus folder is required")

    areas = [
        FocusArea(
            key="css2",
            name="CSS2 focus folders",
            predicate=css2_folder_pattern(css2_folders),
            order=0,
        )
    ]
    areas.extend(
        FocusArea(key=key, name=name, predicate=PrefixMatch(prefix), order=order)
        for key, name, prefix, order in PREFIX_AREAS
    )
    for idx, folder in enumerate(css2_folders):
        path = f"{CSS2_NAMESPACE}{folder}/"
        areas.append(
            FocusArea(
                key=folder,
                name=f"-- {path}",
                predicate=PrefixMatch(path),
                order=idx + 1,
            )
        )

    return FocusAreaRegistry(areas)


@lru_cache(maxsize=1)
def default_registry() -> FocusAreaRegistry:
    """The registry built from the default CSS2 focus folders."""
    return build_registry()
