"""Assembles block and inline parser output into a frozen ``Document``."""
import re

from ..frontmatter import split_front_matter
from .blocks import BlockParser, RawBlock, source_lines
from .inlines import InlineParser
from .nodes import Block, Document, NodeKind, Segment

# Leaf blocks whose text is parsed for inline spans
INLINE_KINDS = frozenset({NodeKind.HEADING, NodeKind.PARAGRAPH, NodeKind.TABLE_ROW})

# Only CR, LF and CRLF end a line; form feeds and Unicode separators are content
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class DocumentBuilder:
    """Pure text → tree composition. Holds no configuration."""

    def __init__(self, front_matter: bool = True):
        self.front_matter = front_matter
        self.blocks = BlockParser()
        self.inlines = InlineParser()

    def build(self, text: str) -> Document:
        lines = LINE_BREAK_RE.split(text)
        if lines[-1] == "":
            lines.pop()
        children: list[Block] = []
        first = 1
        data = None

        matter = split_front_matter(lines) if self.front_matter else None
        if matter is not None:
            children.append(Block(NodeKind.FRONT_MATTER, 1, matter.end_line))
            first = matter.end_line + 1
            data = matter.data

        raw = self.blocks.parse(source_lines(lines[first - 1:], first))
        children.extend(self._freeze(block) for block in raw)

        return Document(
            lines=tuple(lines),
            children=tuple(children),
            front_matter=data,
            ends_with_newline=not text or text.endswith(("\n", "\r")),
        )

    def _freeze(self, raw: RawBlock) -> Block:
        attrs = dict(raw.attrs)
        segments = []
        parts = []
        offset = 0
        for line in raw.content:
            segments.append(Segment(offset, line.number, line.column))
            parts.append(line.text)
            offset += len(line.text) + 1
        text = "\n".join(parts)

        if raw.kind == NodeKind.HTML_BLOCK:
            text = "\n".join(line.text for line in raw.lines)

        inlines = ()
        if raw.kind in INLINE_KINDS and attrs.get("style") != "delimiter":
            inlines = self.inlines.parse(text)

        return Block(
            kind=raw.kind,
            start_line=raw.start_line,
            end_line=raw.end_line,
            depth=raw.depth,
            children=tuple(self._freeze(child) for child in raw.children),
            inlines=inlines,
            text=text,
            segments=tuple(segments),
            column=attrs.get("column", raw.lines[0].column + raw.lines[0].indent),
            level=attrs.get("level", 0),
            style=attrs.get("style", ""),
            tag=attrs.get("tag", ""),
            marker=attrs.get("marker", ""),
            ordered=attrs.get("ordered", False),
            number=attrs.get("number"),
            info=attrs.get("info", ""),
            fence=attrs.get("fence", ""),
            closed=attrs.get("closed", True),
            header=attrs.get("header", False),
            loose=attrs.get("loose", False),
        )


def parse_document(text: str, front_matter: bool = True) -> Document:
    """Parse markdown text into a Document tree."""
    return DocumentBuilder(front_matter=front_matter).build(text)
