"""Helpers shared by rule modules."""
from typing import Iterator, Optional, Union

from ...parser.nodes import Block, Document, NodeKind

# Leaf blocks whose source lines are checked by line-oriented rules
LINE_KINDS = frozenset({
    NodeKind.BLANK,
    NodeKind.HEADING,
    NodeKind.PARAGRAPH,
    NodeKind.CODE_BLOCK,
    NodeKind.HTML_BLOCK,
    NodeKind.TABLE_ROW,
    NodeKind.HR,
})

DEFAULT_PUNCTUATION = (".", ",", ";", ":", "!", "?")


def source_lines(document: Document, block: Block) -> Iterator[tuple[int, str]]:
    for number in range(block.start_line, block.end_line + 1):
        yield number, document.line(number)


def heading_text(block: Block) -> str:
    return "".join(inline.plain_text() for inline in block.inlines).strip()


def siblings(
    document: Document,
) -> Iterator[tuple[Union[Document, Block], Optional[Block], Block, Optional[Block]]]:
    """Yield (parent, previous, block, next) for every block in the tree."""
    def walk(parent):
        children = parent.children
        for idx, block in enumerate(children):
            previous = children[idx - 1] if idx > 0 else None
            following = children[idx + 1] if idx + 1 < len(children) else None
            yield parent, previous, block, following
            yield from walk(block)
    yield from walk(document)


def needs_blank(neighbour: Optional[Block]) -> bool:
    """Whether a neighbouring sibling violates a 'surround with blank lines' rule."""
    return neighbour is not None and neighbour.kind not in (NodeKind.BLANK, NodeKind.FRONT_MATTER)
