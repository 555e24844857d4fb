"""Immutable syntax tree exposing the tree-sitter ``Node`` surface."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class SourceLocation(BaseModel):
    """Structured source span from syntax tree nodes."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)


def source_location(node) -> SourceLocation:
    """Build a 1-based-line location from any node with tree-sitter points."""
    s, e = node.start_point, node.end_point
    return SourceLocation(
        start_line=s[0] + 1,
        start_col=s[1],
        end_line=e[0] + 1,
        end_col=e[1],
    )


class SyntaxNode(BaseModel):
    """A node of a Miac syntax tree.

    Mirrors the read-only part of ``tree_sitter.Node`` that the code
    generator relies on, so either kind of tree can be translated.
    Byte offsets and columns are in UTF-8 bytes, rows are 0-based.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    start_byte: int
    end_byte: int
    start_point: tuple[int, int]
    end_point: tuple[int, int]
    is_named: bool = True
    children: tuple[SyntaxNode, ...] = ()
    field_indices: dict[str, int] = {}

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [c for c in self.children if c.is_named]

    def child(self, index: int) -> Optional[SyntaxNode]:
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def child_by_field_name(self, name: str) -> Optional[SyntaxNode]:
        index = self.field_indices.get(name)
        if index is None:
            return None
        return self.children[index]


class SyntaxTree(BaseModel):
    """Result of a parse, holding the root node like a tree-sitter ``Tree``."""

    model_config = ConfigDict(frozen=True)

    root_node: SyntaxNode
