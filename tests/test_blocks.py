"""Tests for the block-level tokenizer."""
from mdlint.core.parser import NodeKind, parse_document
from mdlint.core.parser.blocks import parse_blocks


SAMPLE = """---
title: Demo
---
# Title

Some *text* here
continued.

- one
- two

  para in two
> quote
> more

```python
code
```

| a | b |
|---|---|
| 1 | 2 |
<div>
hi
</div>

    indented
"""


def _leaf_lines(document) -> list[int]:
    covered = []
    for block in document.blocks():
        if block.is_leaf:
            covered.extend(range(block.start_line, block.end_line + 1))
    return covered


def test_top_level_blocks():
    doc = parse_document(SAMPLE)

    spans = [(b.kind, b.start_line, b.end_line) for b in doc.children]
    assert spans == [
        (NodeKind.FRONT_MATTER, 1, 3),
        (NodeKind.HEADING, 4, 4),
        (NodeKind.BLANK, 5, 5),
        (NodeKind.PARAGRAPH, 6, 7),
        (NodeKind.BLANK, 8, 8),
        (NodeKind.LIST, 9, 12),
        (NodeKind.BLOCKQUOTE, 13, 14),
        (NodeKind.BLANK, 15, 15),
        (NodeKind.CODE_BLOCK, 16, 18),
        (NodeKind.BLANK, 19, 19),
        (NodeKind.TABLE, 20, 22),
        (NodeKind.HTML_BLOCK, 23, 25),
        (NodeKind.BLANK, 26, 26),
        (NodeKind.CODE_BLOCK, 27, 27),
    ]


def test_every_line_covered_by_exactly_one_leaf():
    doc = parse_document(SAMPLE)
    assert sorted(_leaf_lines(doc)) == list(range(1, doc.line_count + 1))


def test_coverage_without_front_matter():
    doc = parse_document(SAMPLE, front_matter=False)
    assert sorted(_leaf_lines(doc)) == list(range(1, doc.line_count + 1))


def test_unterminated_fence_closes_at_end_of_document():
    doc = parse_document("# T\n\n```\ncode\nmore")

    fence = doc.children[-1]
    assert fence.kind == NodeKind.CODE_BLOCK
    assert fence.style == "fenced"
    assert fence.closed is False
    assert (fence.start_line, fence.end_line) == (3, 5)
    assert fence.text == "code\nmore"


def test_unterminated_fence_closes_at_end_of_container():
    doc = parse_document("> ```\n> code\n\nafter\n")

    quote = doc.children[0]
    assert quote.kind == NodeKind.BLOCKQUOTE
    fence = quote.children[0]
    assert fence.closed is False
    assert fence.end_line == 2
    assert doc.children[-1].kind == NodeKind.PARAGRAPH
    assert doc.children[-1].start_line == 4


def test_fence_info_string():
    doc = parse_document("~~~ python extra\nx = 1\n~~~\n")

    fence = doc.children[0]
    assert fence.info == "python extra"
    assert fence.fence == "~~~"
    assert fence.closed is True


def test_atx_headings():
    doc = parse_document("#  Title  #\n\n## Plain\n\n#hashtag\n")

    closed, _blank, plain, _blank2, para = doc.children
    assert closed.kind == NodeKind.HEADING
    assert (closed.level, closed.style, closed.text) == (1, "atx_closed", "Title")
    assert closed.segments[0].column == 4
    assert (plain.level, plain.style, plain.text) == (2, "atx", "Plain")
    assert para.kind == NodeKind.PARAGRAPH


def test_setext_headings():
    doc = parse_document("Title\n=====\n\nSub\n---\n")

    first, _blank, second = doc.children
    assert (first.kind, first.level, first.style) == (NodeKind.HEADING, 1, "setext")
    assert (first.start_line, first.end_line) == (1, 2)
    assert (second.level, second.style) == (2, "setext")


def test_thematic_break_is_not_a_list():
    doc = parse_document("* * *\n")
    assert doc.children[0].kind == NodeKind.HR
    assert doc.children[0].style == "* * *"


def test_ordered_list_items():
    doc = parse_document("1. a\n2. b\n3. c\n")

    lst = doc.children[0]
    assert lst.kind == NodeKind.LIST
    assert lst.ordered is True
    assert lst.number == 1
    assert [item.number for item in lst.children] == [1, 2, 3]
    assert lst.children[0].marker == "1."


def test_nested_list():
    doc = parse_document("- a\n  - b\n- c\n")

    outer = doc.children[0]
    assert len(outer.children) == 2
    first = outer.children[0]
    assert [child.kind for child in first.children] == [NodeKind.PARAGRAPH, NodeKind.LIST]
    nested = first.children[1]
    assert nested.depth == 2
    assert nested.children[0].column == 3


def test_loose_list():
    doc = parse_document("- a\n\n- b\n")

    lst = doc.children[0]
    assert lst.loose is True
    assert (lst.children[0].start_line, lst.children[0].end_line) == (1, 2)


def test_different_markers_start_new_lists():
    doc = parse_document("- a\n* b\n\n1. c\n1) d\n")

    kinds = [b.kind for b in doc.children]
    assert kinds == [NodeKind.LIST, NodeKind.LIST, NodeKind.BLANK, NodeKind.LIST, NodeKind.LIST]


def test_blockquote_lazy_continuation():
    doc = parse_document("> a\nb\n")

    quote = doc.children[0]
    assert (quote.start_line, quote.end_line) == (1, 2)
    assert quote.children[0].kind == NodeKind.PARAGRAPH
    assert quote.children[0].end_line == 2


def test_html_comment_block():
    doc = parse_document("<!-- a\nb -->\ntext\n")

    html, para = doc.children
    assert html.kind == NodeKind.HTML_BLOCK
    assert (html.start_line, html.end_line) == (1, 2)
    assert html.tag == ""
    assert para.start_line == 3


def test_html_block_tag_name():
    doc = parse_document("<DIV class=\"x\">\nhi\n</DIV>\n")
    assert doc.children[0].tag == "div"


def test_table_rows():
    doc = parse_document("| a | b |\n|---|---|\n| 1 | 2 |\n")

    table = doc.children[0]
    assert table.kind == NodeKind.TABLE
    header, delimiter, row = table.children
    assert header.header is True
    assert delimiter.style == "delimiter"
    assert delimiter.inlines == ()
    assert row.text == "| 1 | 2 |"


def test_table_needs_matching_delimiter():
    doc = parse_document("a | b\n--- | --- | ---\n")
    assert doc.children[0].kind == NodeKind.PARAGRAPH


def test_leading_tab_is_indented_code():
    blocks = parse_blocks(["\tcode"])
    assert blocks[0].kind == NodeKind.CODE_BLOCK
    assert blocks[0].attrs["style"] == "indented"
