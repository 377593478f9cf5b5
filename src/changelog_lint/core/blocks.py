"""Generic Markdown block tree, built on markdown-it-py.

markdown-it reports block positions as half-open, 0-based line ranges
(``token.map``).  The parser here needs CommonMark-style source positions:
1-based ``(line, column)`` pairs for the first and last character of a block.
The start column is the first non-indent character of the block's first line;
the end position is the last character of the block's last line, so a list
that absorbed a trailing blank line ends at ``(blank_line, 0)``.

markdown-it is fed the lines found by :class:`LineIndex`, re-joined with
``"\\n"``, so its line numbers agree with the index for every terminator
style, ``"\\n\\r"`` included.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from changelog_lint.core.lines import LineIndex

_CONTAINERS = frozenset({"bullet_list", "ordered_list", "list_item", "blockquote"})


class BlockKind(str, Enum):
    HEADING = "heading"
    LIST = "list"
    ITEM = "item"
    PARAGRAPH = "paragraph"
    OTHER = "other"


_KINDS = {
    "heading": BlockKind.HEADING,
    "bullet_list": BlockKind.LIST,
    "ordered_list": BlockKind.LIST,
    "list_item": BlockKind.ITEM,
    "paragraph": BlockKind.PARAGRAPH,
}


@dataclass(frozen=True, slots=True)
class Block:
    kind: BlockKind
    start: tuple[int, int]
    end: tuple[int, int]
    level: int = 0
    ordered: bool = False
    children: tuple[Block, ...] = ()
    type: str = ""

    @property
    def start_line(self) -> int:
        return self.start[0]

    @property
    def end_line(self) -> int:
        return self.end[0]


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _convert(node: SyntaxTreeNode, lines: list[str]) -> Block:
    first, last = node.map  # type: ignore[misc]
    start_line = first + 1
    end_line = max(last, start_line)
    kind = _KINDS.get(node.type, BlockKind.OTHER)
    children: tuple[Block, ...] = ()
    if node.type in _CONTAINERS:
        children = tuple(
            _convert(child, lines) for child in node.children if child.map is not None
        )
    return Block(
        kind=kind,
        start=(start_line, _indent(lines[first]) + 1),
        end=(end_line, len(lines[end_line - 1])),
        level=int(node.tag[1:]) if kind is BlockKind.HEADING else 0,
        ordered=node.type == "ordered_list",
        children=children,
        type=node.type,
    )


def parse_blocks(text: str | LineIndex) -> list[Block]:
    """Parse *text* and return its top-level blocks in document order."""
    index = text if isinstance(text, LineIndex) else LineIndex(text)
    lines = index.lines()
    md = MarkdownIt("commonmark")
    root = SyntaxTreeNode(md.parse("\n".join(lines)))
    return [_convert(node, lines) for node in root.children if node.map is not None]
