"""Reduce a flat block stream to a tree of headings.

Each heading owns the non-heading blocks that immediately follow it (its
*preamble*) and every strictly deeper heading up to the next heading of equal
or shallower level.  Levels need not be contiguous: an h1 may directly nest
an h3.  Nodes live in an arena and refer to their children by index.

The document itself is not a node: blocks before the first heading are the
tree's ``preamble`` and headings nested under nothing are its ``top``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from changelog_lint.core.blocks import Block, BlockKind


@dataclass(slots=True)
class HeadingNode:
    header: Block
    preamble: list[Block] = field(default_factory=list)
    subheadings: list[int] = field(default_factory=list)

    @property
    def level(self) -> int:
        return self.header.level


@dataclass(slots=True)
class HeadingTree:
    nodes: list[HeadingNode] = field(default_factory=list)
    preamble: list[Block] = field(default_factory=list)
    top: list[int] = field(default_factory=list)

    def children(self, node: HeadingNode | None = None) -> list[HeadingNode]:
        """Direct subheadings of *node*, or the top-level headings."""
        indices = self.top if node is None else node.subheadings
        return [self.nodes[i] for i in indices]


def build_heading_tree(blocks: Iterable[Block]) -> HeadingTree:
    tree = HeadingTree()
    stack: list[int] = []
    for block in blocks:
        if block.kind is BlockKind.HEADING:
            while stack and tree.nodes[stack[-1]].level >= block.level:
                stack.pop()
            tree.nodes.append(HeadingNode(header=block))
            index = len(tree.nodes) - 1
            (tree.nodes[stack[-1]].subheadings if stack else tree.top).append(index)
            stack.append(index)
        else:
            (tree.nodes[stack[-1]].preamble if stack else tree.preamble).append(block)
    return tree
