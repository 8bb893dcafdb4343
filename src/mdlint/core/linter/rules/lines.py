"""Line-oriented whitespace and length rules."""
import re
from typing import Generator

from ...parser.nodes import NodeKind
from ..models import Violation
from ..registry import BooleanOption, IntegerOption, rule
from .common import LINE_KINDS, source_lines

WHITESPACE_RE = re.compile(r'\s')


@rule("MD009", "no-trailing-spaces",
      kinds=LINE_KINDS, tags=["whitespace"],
      options=[IntegerOption("br_spaces", 2, minimum=0, maximum=8)])
def no_trailing_spaces(block, ctx) -> Generator[Violation, None, None]:
    """
    Trailing spaces.

    Inside a paragraph, exactly ``br_spaces`` trailing spaces are a hard
    line break and allowed, except on the paragraph's last line.
    Values below 2 disable that allowance.
    """
    br_spaces = ctx.options["br_spaces"]
    for number, line in source_lines(ctx.document, block):
        stripped = line.rstrip()
        trailing = len(line) - len(stripped)
        if not trailing:
            continue
        if (
            br_spaces >= 2
            and block.kind == NodeKind.PARAGRAPH
            and number < block.end_line
            and line[len(stripped):] == " " * br_spaces
        ):
            continue
        yield ctx.violation(number, f"Trailing spaces ({trailing} chars)", column=len(stripped) + 1)


@rule("MD010", "no-hard-tabs",
      kinds=LINE_KINDS, tags=["whitespace", "hard_tab"],
      options=[BooleanOption("code_blocks", True)])
def no_hard_tabs(block, ctx) -> Generator[Violation, None, None]:
    """Hard tabs."""
    if block.kind == NodeKind.CODE_BLOCK and not ctx.options["code_blocks"]:
        return
    for number, line in source_lines(ctx.document, block):
        column = line.find('\t')
        if column >= 0:
            yield ctx.violation(number, "Hard tabs", column=column + 1)


@rule("MD012", "no-multiple-blanks",
      kinds=[NodeKind.BLANK], tags=["whitespace", "blank_lines"],
      options=[IntegerOption("maximum", 1, minimum=1)])
def no_multiple_blanks(block, ctx) -> Generator[Violation, None, None]:
    """Multiple consecutive blank lines."""
    maximum = ctx.options["maximum"]
    if block.line_count > maximum:
        yield ctx.violation(
            block.start_line + maximum,
            f"Multiple consecutive blank lines ({block.line_count}, max {maximum})",
        )


@rule("MD013", "line-length",
      kinds=LINE_KINDS, tags=["line_length"],
      options=[
          IntegerOption("line_length", 80, minimum=1),
          BooleanOption("code_blocks", True),
          BooleanOption("tables", True),
          BooleanOption("headings", True),
      ])
def line_length(block, ctx) -> Generator[Violation, None, None]:
    """
    Line length.

    Lines whose overflow contains no whitespace (a long URL, say) are
    allowed, since they cannot be wrapped.
    """
    options = ctx.options
    if block.kind == NodeKind.CODE_BLOCK and not options["code_blocks"]:
        return
    if block.kind == NodeKind.TABLE_ROW and not options["tables"]:
        return
    if block.kind == NodeKind.HEADING and not options["headings"]:
        return

    limit = options["line_length"]
    for number, line in source_lines(ctx.document, block):
        if len(line) <= limit:
            continue
        if not WHITESPACE_RE.search(line, limit):
            continue
        yield ctx.violation(
            number,
            f"Line length {len(line)} exceeds {limit}",
            column=limit + 1,
        )


@rule("MD047", "single-trailing-newline",
      kinds=[NodeKind.DOCUMENT], tags=["blank_lines"])
def single_trailing_newline(document, ctx) -> Generator[Violation, None, None]:
    """File should end with a single newline character."""
    if document.lines and not document.ends_with_newline:
        yield ctx.violation(document.line_count, "File should end with a single newline character")
