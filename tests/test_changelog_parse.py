"""Tests for the top-level document grammar and the span invariants of a parse."""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from changelog_lint import ChangelogError, load_changelog, parse_changelog
from changelog_lint.model import Offset, SectionName

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "changelogs"


def _read(name: str) -> str:
    with open(FIXTURES / name, encoding="utf-8", newline="") as fh:
        return fh.read()


# ── end-to-end ──────────────────────────────────────────────────────


class TestEndToEnd:
    TEXT = (
        "# Changelog\n"
        "\n"
        "## Unreleased\n"
        "\n"
        "### Fixed\n"
        "- Fixed a bug #TINY-6611\n"
        "\n"
        "## 5.6.2 - 2020-12-08\n"
        "\n"
        "### Fixed\n"
        "- Fixed another bug\n"
    )

    def test_two_releases(self) -> None:
        cl = load_changelog(self.TEXT)
        assert len(cl.releases) == 2

        unreleased, released = cl.releases
        assert unreleased.meta is None
        assert unreleased.is_unreleased

        assert released.meta is not None
        v = released.meta.version
        assert (v.major, v.minor, v.patch) == (5, 6, 2)
        assert released.meta.date == datetime.date(2020, 12, 8)

    def test_issue_reference_is_captured(self) -> None:
        cl = load_changelog(self.TEXT)
        (item,) = cl.releases[0].section("Fixed").items
        assert item.jira == "TINY-6611"
        (plain,) = cl.releases[1].section(SectionName.FIXED).items
        assert plain.jira is None

    def test_links_empty_at_end_of_text(self) -> None:
        cl = load_changelog(self.TEXT)
        assert cl.links.start == len(self.TEXT)
        assert cl.text(cl.links) == ""

    def test_release_spans(self) -> None:
        cl = load_changelog(self.TEXT)
        unreleased, released = cl.releases
        assert unreleased.start == self.TEXT.index("## Unreleased")
        assert released.start == unreleased.end + 1
        assert cl.text(released) == self.TEXT[self.TEXT.index("## 5.6.2"):]


# ── source identity and span invariants ─────────────────────────────


class TestSpans:
    def test_source_is_kept_verbatim(self) -> None:
        text = _read("valid.md")
        assert load_changelog(text).source == text

    def test_preamble_ends_before_first_release(self) -> None:
        text = _read("valid.md")
        cl = load_changelog(text)
        assert cl.preamble == Offset(0, text.index("## Unreleased") - 1)
        assert cl.text(cl.preamble).startswith("# Changelog\n")

    def test_links_cover_trailing_definitions(self) -> None:
        text = _read("valid.md")
        cl = load_changelog(text)
        assert cl.links == Offset(text.index("[5.6.1]: https"), len(text))
        assert cl.text(cl.links).startswith("[5.6.1]:")

    def test_spans_are_contiguous(self) -> None:
        text = _read("valid.md")
        cl = load_changelog(text)
        assert cl.releases[0].start == cl.preamble.end + 1
        for prev, nxt in zip(cl.releases, cl.releases[1:]):
            assert nxt.start == prev.end + 1
        assert cl.links.start == cl.releases[-1].end + 1

    def test_headers_round_trip(self) -> None:
        text = _read("valid.md")
        cl = load_changelog(text)
        headers = [cl.text(r.header).rstrip() for r in cl.releases]
        assert headers == ["## Unreleased", "## 5.6.2 - 2020-12-08", "## [5.6.1] - 2020-11-25"]

        released = cl.releases[1]
        assert released.sections == (SectionName.ADDED, SectionName.FIXED)
        added = released.section("Added")
        assert cl.text(added.header) == "### Added\n"
        assert cl.text(added).startswith("### Added\n- Added a `resize` option #TINY-6400\n")
        assert [cl.text(i).rstrip() for i in added.items] == [
            "- Added a `resize` option #TINY-6400",
            "- Added an undo level after paste",
        ]
        assert [i.jira for i in added.items] == ["TINY-6400", None]

    def test_items_lie_inside_their_section(self) -> None:
        cl = load_changelog(_read("valid.md"))
        for release in cl.releases:
            for name in release.sections:
                section = release.by_name[name]
                assert release.start <= section.start <= section.end <= release.end
                for item in section.items:
                    assert section.list.start <= item.start <= item.end <= section.list.end

    def test_crlf_document(self) -> None:
        text = "# Changelog\r\n\r\n## 1.0.0 - 2020-01-01\r\n\r\n### Added\r\n- a #AB-1\r\n"
        cl = load_changelog(text)
        (item,) = cl.releases[0].items()
        assert item.jira == "AB-1"
        assert cl.text(item) == "- a #AB-1\r\n"
        assert cl.text(cl.releases[0].header) == "## 1.0.0 - 2020-01-01\r\n"

    def test_lfcr_document(self) -> None:
        text = "# Changelog\n\r\n\r## 1.0.0 - 2020-01-01\n\r\n\r### Added\n\r- a\n\r"
        cl = load_changelog(text)
        (item,) = cl.releases[0].items()
        assert cl.text(item) == "- a\n\r"
        assert cl.text(cl.releases[0].header) == "## 1.0.0 - 2020-01-01\n\r"

    def test_lfcr_inside_preamble_keeps_later_positions(self) -> None:
        text = (
            "# Changelog\nintro\n\rmore\n\n"
            "## Unreleased\n### Fixed\n- a #AB-1\n\n"
            "## 1.0.0 - 2020-01-01\n### Added\n- b\n"
        )
        r = parse_changelog(text)
        assert r.ok, r.errors
        cl = r.unwrap()
        assert len(cl.releases) == 2
        (item,) = cl.releases[0].items()
        assert item.jira == "AB-1"
        assert cl.text(item).rstrip() == "- a #AB-1"
        assert cl.releases[1].start == text.index("## 1.0.0")

    def test_bracketed_version_header(self) -> None:
        cl = load_changelog(_read("valid.md"))
        assert str(cl.releases[2].meta.version) == "5.6.1"


# ── top-level grammar ───────────────────────────────────────────────


class TestTopLevel:
    def test_empty_input(self) -> None:
        r = parse_changelog("")
        assert not r.ok
        assert r.errors == ("No top level heading",)

    def test_heading_only(self) -> None:
        text = "# Changelog\n"
        cl = load_changelog(text)
        assert cl.releases == ()
        assert cl.preamble == Offset(0, len(text) - 1)
        assert cl.links == Offset(len(text), len(text))

    def test_preamble_paragraphs_without_releases(self) -> None:
        text = "# Changelog\n\nSome intro.\n"
        cl = load_changelog(text)
        assert cl.preamble.end == len(text) - 1

    @pytest.mark.parametrize("title", ["# Changelog", "# Change log", "# change-log", "# My CHANGELOG"])
    def test_title_variants(self, title: str) -> None:
        assert parse_changelog(title + "\n").ok

    def test_content_before_heading(self) -> None:
        r = parse_changelog("Some text\n\n# Changelog\n")
        assert r.errors == ("Unexpected content without heading (line: 1 column: 1)",)

    def test_additional_top_level_heading(self) -> None:
        r = parse_changelog("# Changelog\n\n# Other\n")
        assert r.errors == ("Unexpected additional top level headings (line: 3 column: 1)",)

    def test_first_heading_not_h1(self) -> None:
        r = parse_changelog("## Changelog\n")
        assert r.errors == ("First top-level heading is not a h1 (line: 1 column: 1)",)

    def test_title_missing_changelog(self) -> None:
        r = parse_changelog("# Release notes\n")
        assert r.errors == ('First top-level heading does not contain "Changelog" (line: 1 column: 1)',)

    def test_top_errors_stop_before_releases(self) -> None:
        r = parse_changelog("# Notes\n\n## bogus\n")
        assert r.errors == ('First top-level heading does not contain "Changelog" (line: 1 column: 1)',)

    def test_load_raises_with_every_error(self) -> None:
        with pytest.raises(ChangelogError) as exc_info:
            load_changelog(_read("invalid.md"))
        assert len(exc_info.value.errors) == 3
        assert "No top level heading" not in str(exc_info.value)
