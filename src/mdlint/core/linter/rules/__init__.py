"""Built-in markdown style rules."""
from ..registry import RuleRegistry
from . import headings, html, lines, links, lists, spans, structure

# Registry of all available rules
RULES = (
    # Headings
    headings.header_increment,
    headings.first_header_h1,
    headings.header_style,
    headings.no_missing_space_atx,
    headings.no_multiple_space_atx,
    headings.blanks_around_headers,
    headings.header_start_left,
    headings.no_duplicate_header,
    headings.single_h1,
    headings.no_trailing_punctuation,
    headings.first_line_h1,

    # Lists
    lists.ul_style,
    lists.list_indent,
    lists.ul_indent,
    lists.ol_prefix,
    lists.blanks_around_lists,

    # Whitespace and line layout
    lines.no_trailing_spaces,
    lines.no_hard_tabs,
    lines.no_multiple_blanks,
    lines.line_length,
    lines.single_trailing_newline,

    # Code, block quotes, rules
    structure.commands_show_output,
    structure.no_multiple_space_blockquote,
    structure.blanks_around_fences,
    structure.hr_style,
    structure.fenced_code_language,
    structure.code_block_style,

    # Inline content
    html.no_inline_html,
    links.no_reversed_links,
    links.no_bare_urls,
    links.no_space_in_links,
    links.no_empty_links,
    links.no_alt_text,
    spans.no_emphasis_as_header,
    spans.no_space_in_code,
)


def build_registry() -> RuleRegistry:
    """Create the sealed registry of built-in rules."""
    return RuleRegistry(check.definition for check in RULES).seal()


__all__ = ["RULES", "build_registry"]
