"""Exceptions raised at the library boundary."""

from __future__ import annotations

from typing import Iterable


class ChangelogError(ValueError):
    """A changelog failed validation.

    ``errors`` holds every accumulated message in document order.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: tuple[str, ...] = tuple(errors)
        super().__init__("; ".join(self.errors) or "invalid changelog")


class ConfigError(ValueError):
    """Invalid lint configuration (bad key, bad value, unreadable file)."""
