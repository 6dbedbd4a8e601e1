"""Conflict-safe deep merge of result fragments."""

from .merger import check_no_arrays, merge, merge_all

__all__ = [
    "check_no_arrays",
    "merge",
    "merge_all",
]
