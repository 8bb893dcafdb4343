"""Code block, block quote and thematic break rules."""
import re
from typing import Generator

from ...parser.nodes import NodeKind
from ..models import Violation
from ..registry import ChoiceOption, rule
from .common import needs_blank, siblings, source_lines

BLOCKQUOTE_SPACES_RE = re.compile(r'^ {0,3}(?:> ?)*>[ \t]{2,}\S')
HR_STYLES = ("consistent", "---", "***", "___", "- - -", "* * *", "_ _ _")


@rule("MD014", "commands-show-output",
      kinds=[NodeKind.CODE_BLOCK], tags=["code"])
def commands_show_output(block, ctx) -> Generator[Violation, None, None]:
    """Dollar signs used before commands without showing output."""
    lines = [line for line in block.text.split('\n') if line.strip()]
    if lines and all(line.lstrip().startswith('$ ') for line in lines):
        yield ctx.violation(block.start_line, "Dollar signs used before commands without showing output")


@rule("MD027", "no-multiple-space-blockquote",
      kinds=[NodeKind.BLOCKQUOTE], tags=["blockquote", "whitespace", "indentation"])
def no_multiple_space_blockquote(block, ctx) -> Generator[Violation, None, None]:
    """Multiple spaces after blockquote symbol."""
    if any(node.kind == NodeKind.BLOCKQUOTE for node in ctx.ancestors[:-1]):
        return  # the outermost quote checks every line
    for number, line in source_lines(ctx.document, block):
        if BLOCKQUOTE_SPACES_RE.match(line):
            yield ctx.violation(number, "Multiple spaces after blockquote symbol")


@rule("MD031", "blanks-around-fences",
      kinds=[NodeKind.DOCUMENT], tags=["code", "blank_lines"])
def blanks_around_fences(document, ctx) -> Generator[Violation, None, None]:
    """Fenced code blocks should be surrounded by blank lines."""
    for _parent, previous, block, following in siblings(document):
        if block.kind != NodeKind.CODE_BLOCK or block.style != "fenced":
            continue
        if needs_blank(previous):
            yield ctx.violation(block.start_line, "Fenced code block should be preceded by a blank line")
        if needs_blank(following):
            yield ctx.violation(block.end_line, "Fenced code block should be followed by a blank line")


@rule("MD035", "hr-style",
      kinds=[NodeKind.DOCUMENT], tags=["hr"],
      options=[ChoiceOption("style", "consistent", choices=HR_STYLES)])
def hr_style(document, ctx) -> Generator[Violation, None, None]:
    """Horizontal rule style."""
    expected = ctx.options["style"]
    for block in document.blocks():
        if block.kind != NodeKind.HR:
            continue
        if expected == "consistent":
            expected = block.style
        if block.style != expected:
            yield ctx.violation(block.start_line, f"Horizontal rule style should be {expected!r} (got {block.style!r})")


@rule("MD040", "fenced-code-language",
      kinds=[NodeKind.CODE_BLOCK], tags=["code", "language"])
def fenced_code_language(block, ctx) -> Generator[Violation, None, None]:
    """Fenced code blocks should have a language specified."""
    if block.style == "fenced" and not block.info:
        yield ctx.violation(block.start_line, "Fenced code blocks should have a language specified")


@rule("MD046", "code-block-style",
      kinds=[NodeKind.DOCUMENT], tags=["code"], default_enabled=False,
      options=[ChoiceOption("style", "fenced", choices=("consistent", "fenced", "indented"))])
def code_block_style(document, ctx) -> Generator[Violation, None, None]:
    """Code block style."""
    expected = ctx.options["style"]
    for block in document.blocks():
        if block.kind != NodeKind.CODE_BLOCK:
            continue
        if expected == "consistent":
            expected = block.style
        if block.style != expected:
            yield ctx.violation(block.start_line, f"Code block style should be {expected} (got {block.style})")
