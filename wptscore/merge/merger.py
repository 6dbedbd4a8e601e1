"""Strict deep merge of nested result structures.

Used to combine sharded partial results (for example one file per test
directory) into a single structure. The merge refuses anything it cannot
combine without losing data:

- arrays are never merged, at any depth (InvalidShapeError)
- a key holding a mapping on one side and a scalar on the other is a
  TypeConflictError
- scalar leaf keys present on both sides are a KeyOverlapError, even when
  the values are equal
"""

import copy
import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from wptscore.core.exceptions import (
    InvalidShapeError,
    KeyOverlapError,
    TypeConflictError,
)

logger = logging.getLogger(__name__)

Tree = MutableMapping[str, Any]

ARRAY_TYPES = (list, tuple)


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def check_no_arrays(tree: Mapping[str, Any], path: tuple[str, ...] = ()) -> None:
    """Raise InvalidShapeError if any value in ``tree`` is an array.

    Args:
        tree: Nested mapping to validate.
        path: Keys leading to ``tree``, used in error messages.

    Raises:
        InvalidShapeError: Naming the first offending key found.
    """
    for key, value in tree.items():
        if isinstance(value, ARRAY_TYPES):
            raise InvalidShapeError(key, path=(*path, key))
        if _is_mapping(value):
            check_no_arrays(value, (*path, key))


def _merge(first: Tree, second: Mapping[str, Any], path: tuple[str, ...]) -> Tree:
    for key, value in second.items():
        key_path = (*path, key)

        if _is_mapping(value):
            if key not in first:
                first[key] = value
            elif not _is_mapping(first[key]):
                raise TypeConflictError(key, path=key_path)
            else:
                first[key] = _merge(first[key], value, key_path)
            continue

        if isinstance(value, ARRAY_TYPES):
            raise InvalidShapeError(key, path=key_path)
        if key in first:
            if _is_mapping(first[key]):
                raise TypeConflictError(key, path=key_path)
            raise KeyOverlapError(key, path=key_path)
        first[key] = value

    return first


def merge(first: Tree, second: Mapping[str, Any]) -> Tree:
    """Merge ``second`` into ``first`` and return ``first``.

    Subtrees only present in ``second`` are adopted as-is (not copied), and
    ``first`` is modified in place. Both operands are checked for arrays
    before anything is changed; the other conflicts are detected while
    merging, so ``first`` may be partially updated when they are raised.

    Args:
        first: Structure merged into. Mutated.
        second: Structure merged from.

    Returns:
        ``first``, now holding every leaf of both operands.

    Raises:
        InvalidShapeError: An array appears anywhere in either operand.
        TypeConflictError: A key is a mapping on one side and a scalar on
            the other.
        KeyOverlapError: A scalar leaf key is present in both operands.
    """
    check_no_arrays(first)
    check_no_arrays(second)
    return _merge(first, second, ())


def merge_all(fragments: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge any number of fragments into a new structure.

    Fragments are deep-copied before merging, so none of them is modified.
    """
    result: dict[str, Any] = {}
    count = 0
    for fragment in fragments:
        merge(result, copy.deepcopy(fragment))
        count += 1

    logger.debug("Merged %d fragments into %d top-level keys", count, len(result))
    return result
