"""Shared utilities for changelog_lint."""

from changelog_lint.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "stable_json_dump",
    "stable_json_dumps",
]
