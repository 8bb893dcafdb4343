"""Document tree nodes.

Every node is a frozen dataclass. Blocks carry 1-based, inclusive source line
spans; inlines carry a ``[start, end)`` character range inside the owning
block's ``text``. ``Block.position`` maps such an offset back to a source
line and column.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, NamedTuple, Optional


class NodeKind(Enum):
    """Kinds of node a rule can subscribe to."""
    DOCUMENT = "document"

    # Blocks
    FRONT_MATTER = "front_matter"
    BLANK = "blank"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "code_block"
    HTML_BLOCK = "html_block"
    TABLE = "table"
    TABLE_ROW = "table_row"
    HR = "hr"

    # Inlines
    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    CODE_SPAN = "code_span"
    LINK = "link"
    IMAGE = "image"
    AUTOLINK = "autolink"
    INLINE_HTML = "inline_html"


# Blocks whose lines are not covered by any child block
LEAF_KINDS = frozenset({
    NodeKind.FRONT_MATTER,
    NodeKind.BLANK,
    NodeKind.HEADING,
    NodeKind.PARAGRAPH,
    NodeKind.CODE_BLOCK,
    NodeKind.HTML_BLOCK,
    NodeKind.TABLE_ROW,
    NodeKind.HR,
})


class Segment(NamedTuple):
    """Start of one source line inside a block's inline text."""
    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class Inline:
    """A span inside a leaf block's text."""
    kind: NodeKind
    start: int
    end: int
    children: tuple[Inline, ...] = ()
    text: str = ""
    destination: str = ""
    tag: str = ""

    def plain_text(self) -> str:
        """Concatenated literal text of this span and its descendants."""
        if not self.children:
            return self.text
        return "".join(child.plain_text() for child in self.children)


@dataclass(frozen=True)
class Block:
    """A structural, line-delimited unit of the document."""
    kind: NodeKind
    start_line: int
    end_line: int
    depth: int = 0
    children: tuple[Block, ...] = ()
    inlines: tuple[Inline, ...] = ()
    text: str = ""
    segments: tuple[Segment, ...] = ()
    column: int = 1
    level: int = 0          # heading level
    style: str = ""         # heading: atx|atx_closed|setext, code: fenced|indented, list: marker char, hr: literal
    marker: str = ""        # list item marker as written
    ordered: bool = False
    number: Optional[int] = None
    info: str = ""          # fence info string
    fence: str = ""         # opening fence run
    closed: bool = True
    header: bool = False    # table header row
    loose: bool = False     # list with blank lines between items
    tag: str = ""           # html block element name

    @property
    def is_leaf(self) -> bool:
        return self.kind in LEAF_KINDS

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def position(self, offset: int) -> tuple[int, int]:
        """Map an offset into ``text`` to a (line, column) source position."""
        if not self.segments:
            return self.start_line, self.column
        starts = [seg.offset for seg in self.segments]
        seg = self.segments[max(bisect_right(starts, offset) - 1, 0)]
        return seg.line, seg.column + (offset - seg.offset)

    def walk(self) -> Iterator[Block]:
        """Yield this block and its descendant blocks in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Document:
    """Root of a parsed markdown document."""
    lines: tuple[str, ...]
    children: tuple[Block, ...]
    front_matter: Optional[dict[str, Any]] = field(default=None, hash=False)
    ends_with_newline: bool = True

    kind = NodeKind.DOCUMENT

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def blocks(self) -> Iterator[Block]:
        """All blocks in pre-order."""
        for child in self.children:
            yield from child.walk()

    def headings(self) -> list[Block]:
        return [b for b in self.blocks() if b.kind == NodeKind.HEADING]

    def line(self, number: int) -> str:
        """Source line by 1-based number."""
        return self.lines[number - 1]
