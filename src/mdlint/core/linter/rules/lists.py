"""List rules."""
from typing import Generator

from ...parser.nodes import Block, Document, NodeKind
from ..models import Violation
from ..registry import ChoiceOption, IntegerOption, rule
from .common import needs_blank, siblings

BULLET_NAMES = {"*": "asterisk", "+": "plus", "-": "dash"}


@rule("MD004", "ul-style",
      kinds=[NodeKind.DOCUMENT], tags=["bullet", "ul"],
      options=[ChoiceOption("style", "consistent", choices=("consistent", "asterisk", "plus", "dash"))])
def ul_style(document, ctx) -> Generator[Violation, None, None]:
    """Unordered list style should be consistent."""
    expected = ctx.options["style"]
    for block in document.blocks():
        if block.kind != NodeKind.LIST or block.ordered:
            continue
        style = BULLET_NAMES[block.style]
        if expected == "consistent":
            expected = style
        if style != expected:
            for item in block.children:
                yield ctx.violation(
                    item.start_line,
                    f"Unordered list style should be {expected} (got {style})",
                    column=item.column,
                )


@rule("MD005", "list-indent",
      kinds=[NodeKind.LIST], tags=["bullet", "ul", "indentation"])
def list_indent(block, ctx) -> Generator[Violation, None, None]:
    """Inconsistent indentation for list items at the same level."""
    expected = block.children[0].column
    for item in block.children[1:]:
        if item.column != expected:
            yield ctx.violation(
                item.start_line,
                f"Inconsistent indentation for list items at the same level "
                f"(expected column {expected}, got {item.column})",
                column=item.column,
            )


def _unordered_nesting(ancestors) -> int:
    """Count enclosing unordered lists, or -1 if any other container intervenes."""
    nesting = 0
    for node in ancestors:
        if isinstance(node, Document) or node.kind == NodeKind.LIST_ITEM:
            continue
        if node.kind == NodeKind.LIST and not node.ordered:
            nesting += 1
        else:
            return -1
    return nesting


@rule("MD007", "ul-indent",
      kinds=[NodeKind.LIST], tags=["bullet", "ul", "indentation"],
      options=[IntegerOption("indent", 2, minimum=1, maximum=8)])
def ul_indent(block, ctx) -> Generator[Violation, None, None]:
    """
    Unordered list indentation.

    Only lists nested purely inside other unordered lists are checked; the
    expected marker column grows by ``indent`` per level.
    """
    if block.ordered:
        return
    nesting = _unordered_nesting(ctx.ancestors[:-1])
    if nesting < 0:
        return
    expected = nesting * ctx.options["indent"]
    for item in block.children:
        actual = item.column - 1
        if actual != expected:
            yield ctx.violation(
                item.start_line,
                f"Unordered list indentation (expected {expected} spaces, got {actual})",
                column=item.column,
            )


def _ordered_style(items: list[Block]) -> str:
    if len(items) > 1 and items[0].number == items[1].number == 1:
        return "one"
    return "ordered"


@rule("MD029", "ol-prefix",
      kinds=[NodeKind.LIST], tags=["ol"],
      options=[ChoiceOption("style", "one_or_ordered", choices=("one", "ordered", "one_or_ordered"))])
def ol_prefix(block, ctx) -> Generator[Violation, None, None]:
    """Ordered list item prefix."""
    if not block.ordered:
        return
    items = list(block.children)
    style = ctx.options["style"]
    if style == "one_or_ordered":
        style = _ordered_style(items)

    start = items[0].number if items[0].number in (0, 1) else 1
    for idx, item in enumerate(items):
        expected = 1 if style == "one" else start + idx
        if item.number != expected:
            yield ctx.violation(
                item.start_line,
                f"Ordered list item prefix (expected {expected}, got {item.number})",
                column=item.column,
            )


@rule("MD032", "blanks-around-lists",
      kinds=[NodeKind.DOCUMENT], tags=["bullet", "ul", "ol", "blank_lines"])
def blanks_around_lists(document, ctx) -> Generator[Violation, None, None]:
    """Lists should be surrounded by blank lines."""
    for parent, previous, block, following in siblings(document):
        if block.kind != NodeKind.LIST:
            continue
        if not (isinstance(parent, Document) or parent.kind == NodeKind.BLOCKQUOTE):
            continue
        if needs_blank(previous):
            yield ctx.violation(block.start_line, "List should be preceded by a blank line")
        if needs_blank(following):
            yield ctx.violation(block.end_line, "List should be followed by a blank line")
