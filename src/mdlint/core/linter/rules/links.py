"""Link and image rules."""
import re
from typing import Generator

from ...parser.nodes import NodeKind
from ..models import Violation
from ..registry import rule

REVERSED_LINK_RE = re.compile(r'\(([^()\n]+)\)\[([^\]\n^][^\]\n]*)\](?!\()')
BARE_URL_RE = re.compile(r'(?<![<(\["\'=])\b(?:https?|ftp)://[^\s<>\])]+')
LINK_DEFINITION_RE = re.compile(r'^ {0,3}\[[^\]]+\]:\s')


@rule("MD011", "no-reversed-links",
      kinds=[NodeKind.TEXT], tags=["links"])
def no_reversed_links(node, ctx) -> Generator[Violation, None, None]:
    """Reversed link syntax."""
    for match in REVERSED_LINK_RE.finditer(node.text):
        yield ctx.violation_at(node, f"Reversed link syntax: {match.group()[:40]}", match.start())


@rule("MD034", "no-bare-urls",
      kinds=[NodeKind.TEXT], tags=["links", "url"])
def no_bare_urls(node, ctx) -> Generator[Violation, None, None]:
    """Bare URL used."""
    if ctx.parent is not None and ctx.parent.kind in (NodeKind.LINK, NodeKind.IMAGE):
        return
    for match in BARE_URL_RE.finditer(node.text):
        line, _column = ctx.block.position(node.start + match.start())
        if LINK_DEFINITION_RE.match(ctx.document.line(line)):
            continue  # reference definition target
        yield ctx.violation_at(node, f"Bare URL used: {match.group()[:60]}", match.start())


@rule("MD039", "no-space-in-links",
      kinds=[NodeKind.LINK], tags=["whitespace", "links"])
def no_space_in_links(node, ctx) -> Generator[Violation, None, None]:
    """Spaces inside link text."""
    label = node.text
    if label.strip() and label != label.strip():
        yield ctx.violation_at(node, f"Spaces inside link text: [{label}]")


@rule("MD042", "no-empty-links",
      kinds=[NodeKind.LINK], tags=["links"])
def no_empty_links(node, ctx) -> Generator[Violation, None, None]:
    """No empty links."""
    raw = ctx.block.text[node.start:node.end]
    if raw.endswith(')') and node.destination.strip() in ("", "#"):
        yield ctx.violation_at(node, f"No empty links: {raw[:40]}")


@rule("MD045", "no-alt-text",
      kinds=[NodeKind.IMAGE], tags=["accessibility", "images"])
def no_alt_text(node, ctx) -> Generator[Violation, None, None]:
    """Images should have alternate text (alt text)."""
    if not node.text.strip():
        yield ctx.violation_at(node, "Images should have alternate text (alt text)")
