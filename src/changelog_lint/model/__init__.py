"""Immutable values produced by a changelog parse.

Every span is an inclusive ``(start, end)`` pair of offsets into
``Changelog.source``; an empty span has ``end == start - 1``.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from changelog_lint.core.version import Version


class SectionName(str, Enum):
    """Canonical section headings, declared in their required order."""

    ADDED = "Added"
    IMPROVED = "Improved"
    CHANGED = "Changed"
    DEPRECATED = "Deprecated"
    REMOVED = "Removed"
    FIXED = "Fixed"
    SECURITY = "Security"


SECTION_ORDER: tuple[SectionName, ...] = tuple(SectionName)


@dataclass(frozen=True, slots=True)
class Offset:
    start: int
    end: int

    def text(self, source: str) -> str:
        return source[self.start:self.end + 1]

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True, slots=True)
class Item:
    """One bullet entry, with its trailing issue reference if present."""

    start: int
    end: int
    jira: str | None = None

    def to_dict(self) -> dict:
        d: dict = {"start": self.start, "end": self.end}
        if self.jira is not None:
            d["jira"] = self.jira
        return d


@dataclass(frozen=True, slots=True)
class Section:
    """``### <name>`` through the end of its bullet list."""

    start: int
    end: int
    header: Offset
    list: Offset
    items: tuple[Item, ...] = ()

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "header": self.header.to_dict(),
            "list": self.list.to_dict(),
            "items": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True, slots=True)
class ReleaseMeta:
    version: Version
    date: datetime.date

    def to_dict(self) -> dict:
        return {"version": self.version.to_dict(), "date": self.date.isoformat()}


@dataclass(frozen=True, slots=True)
class Release:
    start: int
    end: int
    header: Offset
    sections: tuple[SectionName, ...] = ()
    by_name: dict[SectionName, Section] = field(default_factory=dict)
    meta: ReleaseMeta | None = None

    @property
    def is_unreleased(self) -> bool:
        return self.meta is None

    def section(self, name: SectionName | str) -> Section | None:
        return self.by_name.get(SectionName(name))

    def items(self) -> list[Item]:
        return [item for name in self.sections for item in self.by_name[name].items]

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "header": self.header.to_dict(),
            "sections": [n.value for n in self.sections],
            "by_name": {n.value: self.by_name[n].to_dict() for n in self.sections},
            "meta": self.meta.to_dict() if self.meta is not None else None,
        }


@dataclass(frozen=True, slots=True)
class Changelog:
    source: str
    preamble: Offset
    releases: tuple[Release, ...]
    links: Offset

    def text(self, span: Offset | Item | Section | Release) -> str:
        return self.source[span.start:span.end + 1]

    def to_dict(self) -> dict:
        return {
            "preamble": self.preamble.to_dict(),
            "releases": [r.to_dict() for r in self.releases],
            "links": self.links.to_dict(),
        }
