"""
changelog_lint.api
==================

Programmatic entrypoints for using changelog_lint from release tooling.

Goals:
  - No argparse / CLI dependencies
  - Stable, JSON-friendly report dicts matching
    ``data/schemas/changelog_report.schema.json``
  - Span lookups for callers that edit the changelog themselves

Usage::

    from changelog_lint.api import check_file, find_release, release_notes

    report = check_file("CHANGELOG.md")
    if report["ok"]:
        ...
"""

from __future__ import annotations

import logging
from pathlib import Path

from changelog_lint.core.changelog import load_changelog, parse_changelog
from changelog_lint.core.config import LintConfig
from changelog_lint.core.lint import collect_warnings
from changelog_lint.core.version import VersionError, parse_major_minor
from changelog_lint.model import Changelog, Release

logger = logging.getLogger(__name__)

REPORT_SCHEMA_VERSION = "changelog_report_v1"
UNRELEASED = "Unreleased"


def read_changelog(path: str | Path) -> str:
    """Read *path* as UTF-8 without newline translation so offsets stay exact."""
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def _summary(changelog: Changelog | None) -> dict:
    if changelog is None:
        return {
            "releases": 0,
            "sections": 0,
            "items": 0,
            "unreleased": False,
            "latest_version": None,
        }
    releases = changelog.releases
    latest = next((r.meta for r in releases if r.meta is not None), None)
    return {
        "releases": len(releases),
        "sections": sum(len(r.sections) for r in releases),
        "items": sum(len(r.items()) for r in releases),
        "unreleased": bool(releases) and releases[0].is_unreleased,
        "latest_version": str(latest.version) if latest is not None else None,
    }


def check_text(
    text: str,
    *,
    config: LintConfig | None = None,
    path: str | Path | None = None,
) -> dict:
    """Validate changelog *text* and return a report dict."""
    config = config or LintConfig()
    result = parse_changelog(text)
    changelog = result.value if result.ok else None
    warnings = collect_warnings(changelog, config) if changelog is not None else []
    logger.debug(
        "checked %s: %d error(s), %d warning(s)",
        path or "<text>",
        len(result.errors),
        len(warnings),
    )
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "ok": result.ok,
        "path": Path(path).as_posix() if path is not None else None,
        "errors": list(result.errors),
        "warnings": warnings,
        "summary": _summary(changelog),
        "changelog": changelog.to_dict() if changelog is not None else None,
    }


def check_file(path: str | Path, *, config: LintConfig | None = None) -> dict:
    """Read and validate the changelog at *path*.

    Raises ``FileNotFoundError`` if *path* does not exist.
    """
    return check_text(read_changelog(path), config=config, path=path)


def find_release(changelog: Changelog, version: str) -> Release | None:
    """Look a release up by version text, or ``"Unreleased"``.

    A leading ``v`` on *version* is ignored.  A ``major.minor`` pair such as
    ``"5.6"`` selects the newest release of that line.
    """
    if version.lower() == UNRELEASED.lower():
        first = changelog.releases[0] if changelog.releases else None
        return first if first is not None and first.is_unreleased else None
    wanted = version[1:] if version.startswith("v") else version
    for release in changelog.releases:
        if release.meta is not None and str(release.meta.version) == wanted:
            return release
    try:
        line = parse_major_minor(wanted)
    except VersionError:
        return None
    candidates = [
        release
        for release in changelog.releases
        if release.meta is not None
        and (release.meta.version.major, release.meta.version.minor) == (line.major, line.minor)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda release: release.meta.version.precedence)


def release_notes(changelog: Changelog, version: str) -> str:
    """Return the verbatim text of one release, heading included.

    Raises ``LookupError`` if the release is not present.
    """
    release = find_release(changelog, version)
    if release is None:
        raise LookupError(f"No release {version} in changelog")
    return changelog.text(release)


def insertion_point(changelog: Changelog) -> int:
    """Offset at which the heading of the next dated release belongs.

    That is after the "Unreleased" release when there is one, otherwise
    before the newest release, otherwise where the links section starts.
    """
    releases = changelog.releases
    if not releases:
        return changelog.links.start
    if releases[0].is_unreleased:
        return releases[0].end + 1
    return releases[0].start


__all__ = [
    "REPORT_SCHEMA_VERSION",
    "check_file",
    "check_text",
    "find_release",
    "insertion_point",
    "load_changelog",
    "parse_changelog",
    "read_changelog",
    "release_notes",
]
