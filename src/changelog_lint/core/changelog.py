"""Changelog grammar: items, sections, releases and the top-level document.

Expected shape::

    # Changelog
    <free preamble>

    ## Unreleased                 (first release only)
    ### Fixed
    - Something was fixed #TINY-1234

    ## 5.6.2 - 2020-12-08
    ### Added
    - ...

    [5.6.2]: https://...          (trailing link definitions)

Parsing is two-pass: the Markdown block stream is reduced to a heading tree,
then each level of the tree is validated against the grammar.  Grammar
violations accumulate; every sub-parser returns a :class:`Result`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from changelog_lint.core.blocks import Block, BlockKind, parse_blocks
from changelog_lint.core.headings import HeadingNode, HeadingTree, build_heading_tree
from changelog_lint.core.lines import LineIndex
from changelog_lint.core.result import Result, combine, failure, success
from changelog_lint.core.version import VersionError, parse_version
from changelog_lint.model import (
    SECTION_ORDER,
    Changelog,
    Item,
    Offset,
    Release,
    ReleaseMeta,
    Section,
    SectionName,
)

logger = logging.getLogger(__name__)

# ── grammar ──────────────────────────────────────────────────────────

_JIRA_RE = re.compile(r"\s+#(?P<jira>[A-Z]{2,10}-\d+)\s*$")
_SECTION_RES = tuple(re.compile(re.escape(f"### {name.value}")) for name in SECTION_ORDER)
_UNRELEASED_RE = re.compile(r"## (?P<lbkt>\[?)Unreleased(?P<rbkt>\]?)")
_RELEASE_RE = re.compile(
    r"## (?P<lbkt>\[?)(?P<version>\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.+-]*)?)(?P<rbkt>\]?)"
    r" - (?P<date>\d{4}-\d{2}-\d{2})"
)
_TITLE_RE = re.compile(r"Change[ -]?log", re.IGNORECASE)


class _Source:
    """The raw text plus its line index."""

    __slots__ = ("text", "index")

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = LineIndex(text)

    def column_range(self, block: Block) -> Offset:
        return Offset(self.index.offset(*block.start), self.index.offset(*block.end))

    def block_range(self, block: Block) -> Offset:
        return self.index.block_range(block.start_line, block.end_line)

    def extract_text(self, block: Block) -> str:
        return self.column_range(block).text(self.text)


def _pos(block: Block | None) -> str:
    if block is None:
        return ""
    line, column = block.start
    return f" (line: {line} column: {column})"


def _balanced(m: re.Match[str]) -> bool:
    return len(m.group("lbkt")) == len(m.group("rbkt"))


@dataclass
class Fragment:
    """The sections found under one release heading."""

    sections: list[SectionName] = field(default_factory=list)
    by_name: dict[SectionName, Section] = field(default_factory=dict)


# ── items ────────────────────────────────────────────────────────────


def parse_item(source: _Source, block: Block) -> Result[Item]:
    if block.kind is not BlockKind.ITEM:
        return failure(["Expected a list item" + _pos(block)])
    offset = source.block_range(block)
    m = _JIRA_RE.search(source.extract_text(block))
    return success(Item(start=offset.start, end=offset.end, jira=m.group("jira") if m else None))


def parse_list(source: _Source, block: Block) -> Result[list[Item]]:
    return combine(parse_item(source, child) for child in block.children)


# ── sections ─────────────────────────────────────────────────────────


def _section_index(text: str) -> int | None:
    for idx, section_re in enumerate(_SECTION_RES):
        if section_re.fullmatch(text):
            return idx
    return None


def parse_fragment(
    source: _Source, tree: HeadingTree, headings: list[HeadingNode]
) -> Result[Fragment]:
    """Validate the section headings under one release.

    The search cursor into the canonical order only ever advances; a heading
    whose canonical index is behind it is reported as out of order.
    """
    fragment = Fragment()
    errors: list[str] = []
    seen: set[int] = set()
    cursor = 0
    for heading in headings:
        header = heading.header
        where = _pos(header)

        if header.level != 3:
            errors.append("Expected heading to be level 3" + where)

        idx = _section_index(source.extract_text(header))
        if idx is None:
            expected = '", "### '.join(n.value for n in SECTION_ORDER[cursor:])
            errors.append(f'Expected heading to match one of: "### {expected}"{where}')
        elif idx in seen:
            errors.append(f'Heading "### {SECTION_ORDER[idx].value}" is a repeat{where}')
        elif idx < cursor:
            order = ", ".join(n.value for n in SECTION_ORDER)
            errors.append(
                f'Expected heading "### {SECTION_ORDER[idx].value}" to be listed earlier '
                f"as headings must be in the order {order}{where}"
            )
        else:
            cursor = idx
        if idx is not None:
            seen.add(idx)

        if heading.subheadings:
            errors.append("Unexpected subheadings" + _pos(tree.nodes[heading.subheadings[0]].header))

        content = heading.preamble
        if not content:
            errors.append("Expected a bullet list under the section header but found nothing" + where)
        elif len(content) > 1:
            errors.append("Expected a bullet list but found more than one node" + _pos(content[1]))
        elif content[0].kind is not BlockKind.LIST:
            errors.append("Expected a bullet list but found a non-list node" + _pos(content[0]))
        elif content[0].ordered:
            errors.append("Expected a bullet list but found an ordered list" + _pos(content[0]))
        else:
            items = parse_list(source, content[0])
            if not items.ok:
                errors.extend(items.errors)
            elif idx is not None and SECTION_ORDER[idx] not in fragment.by_name:
                name = SECTION_ORDER[idx]
                header_range = source.block_range(header)
                list_range = source.block_range(content[0])
                fragment.sections.append(name)
                fragment.by_name[name] = Section(
                    start=header_range.start,
                    end=list_range.end,
                    header=header_range,
                    list=list_range,
                    items=tuple(items.value or ()),
                )
    if errors:
        return failure(errors)
    return success(fragment)


# ── releases ─────────────────────────────────────────────────────────


def _parse_meta(m: re.Match[str], where: str, errors: list[str]) -> ReleaseMeta | None:
    version_text = m.group("version")
    date_text = m.group("date")
    try:
        version = parse_version(version_text)
    except VersionError:
        errors.append(f'Bad version in header "{version_text}"{where}')
        return None
    try:
        released = date.fromisoformat(date_text)
    except ValueError:
        errors.append(f'Bad date in header "{date_text}"{where}')
        return None
    return ReleaseMeta(version=version, date=released)


def parse_release(
    source: _Source, tree: HeadingTree, node: HeadingNode, first: bool
) -> Result[Release]:
    header_block = node.header
    where = _pos(header_block)
    text = source.extract_text(header_block)
    header = source.block_range(header_block)

    errors: list[str] = []
    meta: ReleaseMeta | None = None
    unreleased = _UNRELEASED_RE.fullmatch(text)
    released = _RELEASE_RE.fullmatch(text)
    if unreleased is not None and _balanced(unreleased):
        if not first:
            errors.append('Unexpected "Unreleased" header' + where)
    elif released is not None and _balanced(released):
        meta = _parse_meta(released, where, errors)
    else:
        alternative = '"Unreleased" or ' if first else ""
        errors.append(f'Unexpected header text to be {alternative}"<version> - <date>"{where}')

    if node.preamble:
        errors.append("Unexpected content under release header" + _pos(node.preamble[0]))

    fragment = parse_fragment(source, tree, tree.children(node))
    if not fragment.ok:
        return failure(errors + list(fragment.errors))
    if errors:
        return failure(errors)

    value = fragment.unwrap()
    end = value.by_name[value.sections[-1]].end if value.sections else header.end
    return success(
        Release(
            start=header.start,
            end=end,
            header=header,
            sections=tuple(value.sections),
            by_name=dict(value.by_name),
            meta=meta,
        )
    )


def parse_releases(source: _Source, tree: HeadingTree, nodes: list[HeadingNode]) -> Result[list[Release]]:
    return combine(parse_release(source, tree, node, i == 0) for i, node in enumerate(nodes))


# ── document ─────────────────────────────────────────────────────────


def parse_top(source: _Source, tree: HeadingTree) -> Result[Changelog]:
    errors: list[str] = []
    if tree.preamble:
        errors.append("Unexpected content without heading" + _pos(tree.preamble[0]))
    if not tree.top:
        errors.append("No top level heading")
        return failure(errors)

    tops = tree.children()
    if len(tops) > 1:
        errors.append("Unexpected additional top level headings" + _pos(tops[1].header))
    top = tops[0]
    if top.level != 1:
        errors.append("First top-level heading is not a h1" + _pos(top.header))
    if not _TITLE_RE.search(source.extract_text(top.header)):
        errors.append('First top-level heading does not contain "Changelog"' + _pos(top.header))
    if errors:
        return failure(errors)

    def assemble(releases: list[Release]) -> Changelog:
        if releases:
            end_of_preamble = releases[0].start - 1
        elif top.preamble:
            end_of_preamble = source.block_range(top.preamble[-1]).end
        else:
            end_of_preamble = source.block_range(top.header).end
        start_of_links = releases[-1].end + 1 if releases else end_of_preamble + 1
        return Changelog(
            source=source.text,
            preamble=Offset(0, end_of_preamble),
            releases=tuple(releases),
            links=Offset(start_of_links, len(source.text)),
        )

    return parse_releases(source, tree, tree.children(top)).map(assemble)


def parse_changelog(text: str) -> Result[Changelog]:
    """Parse *text*, returning the changelog or every error found."""
    source = _Source(text)
    tree = build_heading_tree(parse_blocks(source.index))
    result = parse_top(source, tree)
    if result.ok:
        logger.debug("parsed changelog with %d release(s)", len(result.value.releases))
    else:
        logger.debug("changelog rejected with %d error(s)", len(result.errors))
    return result


def load_changelog(text: str) -> Changelog:
    """Like :func:`parse_changelog` but raises ``ChangelogError`` on failure."""
    return parse_changelog(text).unwrap()
