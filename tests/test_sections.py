"""Section grammar: canonical order, repeats, and the bullet-list shape."""

from __future__ import annotations

from changelog_lint import parse_changelog
from changelog_lint.model import SectionName

# Body starts on line 5.
HEAD = "# Changelog\n\n## 1.0.0 - 2020-01-01\n\n"

ORDER = "Added, Improved, Changed, Deprecated, Removed, Fixed, Security"


def _errors(body: str) -> tuple[str, ...]:
    return parse_changelog(HEAD + body).errors


class TestSectionOrder:
    def test_canonical_subsequence_is_accepted(self) -> None:
        body = "### Added\n- a\n\n### Deprecated\n- b\n\n### Security\n- c\n"
        r = parse_changelog(HEAD + body)
        assert r.ok, r.errors
        assert r.value.releases[0].sections == (
            SectionName.ADDED,
            SectionName.DEPRECATED,
            SectionName.SECURITY,
        )

    def test_reverse_order_names_added(self) -> None:
        body = "### Fixed\n- a\n\n### Added\n- b\n"
        assert _errors(body) == (
            f'Expected heading "### Added" to be listed earlier as headings must be in the order {ORDER}'
            " (line: 8 column: 1)",
        )

    def test_release_with_order_error_yields_no_value(self) -> None:
        r = parse_changelog(HEAD + "### Fixed\n- a\n\n### Added\n- b\n")
        assert r.value is None

    def test_cursor_only_advances(self) -> None:
        body = "### Changed\n- a\n\n### Added\n- b\n\n### Improved\n- c\n"
        errors = _errors(body)
        assert len(errors) == 2
        assert errors[0].startswith('Expected heading "### Added" to be listed earlier')
        assert errors[1].startswith('Expected heading "### Improved" to be listed earlier')

    def test_unknown_heading_lists_remaining_names(self) -> None:
        body = "### Added\n- a\n\n### Bogus\n- b\n"
        assert _errors(body) == (
            'Expected heading to match one of: "### Added", "### Improved", "### Changed", '
            '"### Deprecated", "### Removed", "### Fixed", "### Security" (line: 8 column: 1)',
        )

    def test_unknown_heading_after_cursor(self) -> None:
        body = "### Fixed\n- a\n\n### Other\n- b\n"
        assert _errors(body) == (
            'Expected heading to match one of: "### Fixed", "### Security" (line: 8 column: 1)',
        )


class TestSectionRepeats:
    def test_repeat_is_reported(self) -> None:
        body = "### Fixed\n- a\n\n### Fixed\n- b\n"
        assert _errors(body) == ('Heading "### Fixed" is a repeat (line: 8 column: 1)',)

    def test_added_repeat_is_reported(self) -> None:
        body = "### Added\n- a\n\n### Added\n- b\n"
        assert _errors(body) == ('Heading "### Added" is a repeat (line: 8 column: 1)',)


class TestSectionShape:
    def test_wrong_level(self) -> None:
        errors = _errors("#### Fixed\n- a\n")
        assert "Expected heading to be level 3 (line: 5 column: 1)" in errors

    def test_subheadings(self) -> None:
        body = "### Fixed\n- a\n\n#### Detail\n- b\n"
        assert _errors(body) == ("Unexpected subheadings (line: 8 column: 1)",)

    def test_nothing_under_section(self) -> None:
        assert _errors("### Fixed\n") == (
            "Expected a bullet list under the section header but found nothing (line: 5 column: 1)",
        )

    def test_more_than_one_node(self) -> None:
        body = "### Fixed\n- a\n\nA trailing paragraph.\n"
        assert _errors(body) == (
            "Expected a bullet list but found more than one node (line: 8 column: 1)",
        )

    def test_non_list_node(self) -> None:
        assert _errors("### Fixed\nJust prose.\n") == (
            "Expected a bullet list but found a non-list node (line: 6 column: 1)",
        )

    def test_ordered_list(self) -> None:
        assert _errors("### Fixed\n1. first\n2. second\n") == (
            "Expected a bullet list but found an ordered list (line: 6 column: 1)",
        )

    def test_errors_accumulate_across_sections(self) -> None:
        body = "### Added\nprose\n\n### Fixed\n1. one\n"
        errors = _errors(body)
        assert errors == (
            "Expected a bullet list but found a non-list node (line: 6 column: 1)",
            "Expected a bullet list but found an ordered list (line: 9 column: 1)",
        )


class TestItems:
    def test_issue_reference_must_be_anchored_at_end(self) -> None:
        body = (
            "### Fixed\n"
            "- trailing #TINY-1234\n"
            "- trailing with spaces #AB-1   \n"
            "- #TINY-1234 at start\n"
            "- glued#TINY-1234\n"
            "- lowercase #tiny-1234\n"
            "- too long prefix #ABCDEFGHIJK-1\n"
        )
        r = parse_changelog(HEAD + body)
        assert r.ok, r.errors
        jiras = [i.jira for i in r.value.releases[0].items()]
        assert jiras == ["TINY-1234", "AB-1", None, None, None, None]

    def test_multiline_item_spans_its_lines(self) -> None:
        text = HEAD + "### Fixed\n- first line\n  continued #TINY-1\n- next\n"
        cl = parse_changelog(text).unwrap()
        first, second = cl.releases[0].items()
        assert cl.text(first) == "- first line\n  continued #TINY-1\n"
        assert first.jira == "TINY-1"
        assert cl.text(second) == "- next\n"
