"""Optional, non-fatal checks on an already valid changelog."""

from __future__ import annotations

from changelog_lint.core.config import LintConfig
from changelog_lint.core.lines import LineIndex
from changelog_lint.core.version import compare_versions
from changelog_lint.model import Changelog


def _at(index: LineIndex, offset: int) -> str:
    line, column = index.position(offset)
    return f" (line: {line} column: {column})"


def collect_warnings(changelog: Changelog, config: LintConfig) -> list[str]:
    warnings: list[str] = []
    index = LineIndex(changelog.source)
    if config.require_unreleased:
        if not changelog.releases or not changelog.releases[0].is_unreleased:
            warnings.append('Missing "Unreleased" release')
    if config.require_version_order:
        dated = [r for r in changelog.releases if r.meta is not None]
        # Releases are listed newest first.
        for newer, older in zip(dated, dated[1:]):
            if compare_versions(newer.meta.version, older.meta.version) <= 0:
                warnings.append(
                    f'Release "{newer.meta.version}" is not newer than "{older.meta.version}"'
                    + _at(index, newer.start)
                )
    if config.require_issue_refs:
        for release in changelog.releases:
            for item in release.items():
                if item.jira is None:
                    warnings.append("Item has no issue reference" + _at(index, item.start))
    return warnings
