"""Heading rules."""
import re
from typing import Generator

from ...parser.nodes import NodeKind
from ..models import Violation
from ..registry import BooleanOption, ChoiceOption, IntegerOption, StringListOption, rule
from .common import DEFAULT_PUNCTUATION, heading_text, needs_blank, siblings

MISSING_SPACE_ATX_RE = re.compile(r'^#{1,6}[^#\s]')
MULTIPLE_SPACE_ATX_RE = re.compile(r'^[ \t>]*#{1,6}[ \t]{2,}\S')


@rule("MD001", "header-increment", "heading-increment",
      kinds=[NodeKind.DOCUMENT], tags=["headers"])
def header_increment(document, ctx) -> Generator[Violation, None, None]:
    """
    Header levels should only increment by one level at a time.

    Going from an h1 straight to an h3 skips a level of the outline.
    """
    previous = None
    for heading in document.headings():
        if previous is not None and heading.level > previous + 1:
            yield ctx.violation(
                heading.start_line,
                f"Header levels should only increment by one level at a time "
                f"(expected h{previous + 1}, got h{heading.level})",
            )
        previous = heading.level


@rule("MD002", "first-header-h1",
      kinds=[NodeKind.DOCUMENT], tags=["headers"], default_enabled=False,
      options=[IntegerOption("level", 1, minimum=1, maximum=6)])
def first_header_h1(document, ctx) -> Generator[Violation, None, None]:
    """First header should be a top level header."""
    headings = document.headings()
    level = ctx.options["level"]
    if headings and headings[0].level != level:
        yield ctx.violation(
            headings[0].start_line,
            f"First header should be a level {level} header (got h{headings[0].level})",
        )


@rule("MD003", "header-style", "heading-style",
      kinds=[NodeKind.DOCUMENT], tags=["headers"],
      options=[ChoiceOption("style", "consistent",
                            choices=("consistent", "atx", "atx_closed", "setext", "setext_with_atx"))])
def header_style(document, ctx) -> Generator[Violation, None, None]:
    """
    Header style should be consistent.

    ``consistent`` takes the style of the first header in the document.
    ``setext_with_atx`` expects setext for h1/h2 and atx for deeper levels.
    """
    expected = ctx.options["style"]
    headings = document.headings()
    if expected == "consistent" and headings:
        expected = headings[0].style

    for heading in headings:
        wanted = expected
        if expected == "setext_with_atx":
            wanted = "setext" if heading.level <= 2 else "atx"
        if heading.style != wanted:
            yield ctx.violation(
                heading.start_line,
                f"Header style should be {wanted} (got {heading.style})",
            )


@rule("MD018", "no-missing-space-atx",
      kinds=[NodeKind.PARAGRAPH], tags=["headers", "atx", "spaces"])
def no_missing_space_atx(paragraph, ctx) -> Generator[Violation, None, None]:
    """No space after hash on atx style header."""
    for segment, line in zip(paragraph.segments, paragraph.text.split('\n')):
        if MISSING_SPACE_ATX_RE.match(line) and not line.startswith("#!"):
            yield ctx.violation(segment.line, f"No space after hash on atx style header: {line[:40]}")


@rule("MD019", "no-multiple-space-atx",
      kinds=[NodeKind.HEADING], tags=["headers", "atx", "spaces"])
def no_multiple_space_atx(heading, ctx) -> Generator[Violation, None, None]:
    """Multiple spaces after hash on atx style header."""
    if heading.style == "setext":
        return
    if MULTIPLE_SPACE_ATX_RE.match(ctx.document.line(heading.start_line)):
        yield ctx.violation(heading.start_line, "Multiple spaces after hash on atx style header")


@rule("MD022", "blanks-around-headers", "blanks-around-headings",
      kinds=[NodeKind.DOCUMENT], tags=["headers", "blank_lines"])
def blanks_around_headers(document, ctx) -> Generator[Violation, None, None]:
    """Headers should be surrounded by blank lines."""
    for _parent, previous, block, following in siblings(document):
        if block.kind != NodeKind.HEADING:
            continue
        if needs_blank(previous):
            yield ctx.violation(block.start_line, "Header should be preceded by a blank line")
        if needs_blank(following):
            yield ctx.violation(block.end_line, "Header should be followed by a blank line")


@rule("MD023", "header-start-left", "heading-start-left",
      kinds=[NodeKind.HEADING], tags=["headers", "spaces"])
def header_start_left(heading, ctx) -> Generator[Violation, None, None]:
    """Headers must start at the beginning of the line."""
    if heading.depth == 0 and heading.column > 1:
        yield ctx.violation(
            heading.start_line,
            f"Header is indented by {heading.column - 1} spaces",
            column=heading.column,
        )


@rule("MD024", "no-duplicate-header", "no-duplicate-heading",
      kinds=[NodeKind.DOCUMENT], tags=["headers"],
      options=[BooleanOption("allow_different_nesting", False)])
def no_duplicate_header(document, ctx) -> Generator[Violation, None, None]:
    """
    Multiple headers with the same content.

    With ``allow_different_nesting`` the same text may repeat under
    different parent headers (e.g. a "Changes" section per release).
    """
    nesting = ctx.options["allow_different_nesting"]
    seen: set = set()
    path: list[tuple[int, str]] = []

    for heading in document.headings():
        text = heading_text(heading)
        while path and path[-1][0] >= heading.level:
            path.pop()
        key = (tuple(t for _, t in path), text) if nesting else text
        if key in seen:
            yield ctx.violation(heading.start_line, f"Multiple headers with the same content: {text[:40]}")
        seen.add(key)
        path.append((heading.level, text))


@rule("MD025", "single-h1", "single-title",
      kinds=[NodeKind.DOCUMENT], tags=["headers"],
      options=[IntegerOption("level", 1, minimum=1, maximum=6)])
def single_h1(document, ctx) -> Generator[Violation, None, None]:
    """Multiple top level headers in the same document."""
    level = ctx.options["level"]
    top = [h for h in document.headings() if h.level == level]
    for heading in top[1:]:
        yield ctx.violation(heading.start_line, f"Multiple level {level} headers in the same document")


@rule("MD026", "no-trailing-punctuation",
      kinds=[NodeKind.HEADING], tags=["headers"],
      options=[StringListOption("punctuation", DEFAULT_PUNCTUATION)])
def no_trailing_punctuation(heading, ctx) -> Generator[Violation, None, None]:
    """Trailing punctuation in header."""
    text = heading_text(heading)
    if text and text[-1] in ctx.options["punctuation"]:
        yield ctx.violation(heading.start_line, f"Trailing punctuation in header: '{text[-1]}'")


@rule("MD041", "first-line-h1", "first-line-heading",
      kinds=[NodeKind.DOCUMENT], tags=["headers"], default_enabled=False,
      options=[
          IntegerOption("level", 1, minimum=1, maximum=6),
          BooleanOption("front_matter_title", True),
      ])
def first_line_h1(document, ctx) -> Generator[Violation, None, None]:
    """
    First line in file should be a top level header.

    A ``title`` key in the YAML front matter counts as the top level header
    unless ``front_matter_title`` is false.
    """
    if ctx.options["front_matter_title"] and document.front_matter and "title" in document.front_matter:
        return

    for block in document.children:
        if block.kind in (NodeKind.FRONT_MATTER, NodeKind.BLANK):
            continue
        if block.kind != NodeKind.HEADING or block.level != ctx.options["level"]:
            yield ctx.violation(block.start_line, "First line in file should be a top level header")
        return
