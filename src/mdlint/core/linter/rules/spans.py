"""Emphasis and code span rules."""
from typing import Generator

from ...parser.nodes import NodeKind
from ..models import Violation
from ..registry import StringListOption, rule
from .common import DEFAULT_PUNCTUATION


@rule("MD036", "no-emphasis-as-header", "no-emphasis-as-heading",
      kinds=[NodeKind.PARAGRAPH], tags=["headers", "emphasis"],
      options=[StringListOption("punctuation", DEFAULT_PUNCTUATION)])
def no_emphasis_as_header(paragraph, ctx) -> Generator[Violation, None, None]:
    """
    Emphasis used instead of a header.

    Flags single-line paragraphs made entirely of one emphasised span that
    does not end in punctuation.
    """
    parent = ctx.parent
    if parent is not None and parent.kind == NodeKind.LIST_ITEM:
        return
    if paragraph.line_count != 1 or len(paragraph.inlines) != 1:
        return
    span = paragraph.inlines[0]
    if span.kind not in (NodeKind.EMPHASIS, NodeKind.STRONG):
        return
    text = span.plain_text().strip()
    if text and text[-1] not in ctx.options["punctuation"]:
        yield ctx.violation(paragraph.start_line, f"Emphasis used instead of a header: {text[:40]}")


@rule("MD038", "no-space-in-code",
      kinds=[NodeKind.CODE_SPAN], tags=["whitespace", "code"])
def no_space_in_code(node, ctx) -> Generator[Violation, None, None]:
    """
    Spaces inside code span elements.

    A single space of padding is allowed when the content starts or ends
    with a backtick, since that is the only way to write one.
    """
    inner = node.text
    stripped = inner.strip(' ')
    if not stripped or inner == stripped:
        return
    if inner == f" {stripped} " and (stripped.startswith('`') or stripped.endswith('`')):
        return
    yield ctx.violation_at(node, f"Spaces inside code span elements: `{inner}`")
