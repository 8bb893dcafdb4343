"""Raw HTML rules."""
from typing import Generator

from ...parser.nodes import Block, NodeKind
from ..models import Violation
from ..registry import StringListOption, rule


@rule("MD033", "no-inline-html",
      kinds=[NodeKind.INLINE_HTML, NodeKind.HTML_BLOCK], tags=["html"],
      options=[StringListOption("allowed_elements", ())])
def no_inline_html(node, ctx) -> Generator[Violation, None, None]:
    """
    Inline HTML.

    Reported once per element, at its opening tag. Comments and closing
    tags are not reported.
    """
    allowed = {name.lower() for name in ctx.options["allowed_elements"]}

    if isinstance(node, Block):
        opening = node.text.lstrip()
        if not node.tag or opening.startswith('</') or node.tag in allowed:
            return
        yield ctx.violation(node.start_line, f"Inline HTML [Element: {node.tag}]", column=node.column)
        return

    if not node.tag or node.text.startswith('</') or node.tag in allowed:
        return
    yield ctx.violation_at(node, f"Inline HTML [Element: {node.tag}]")
