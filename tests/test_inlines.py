"""Tests for the inline span parser."""
from mdlint.core.parser import NodeKind
from mdlint.core.parser.inlines import parse_inlines


def _kinds(nodes):
    return [node.kind for node in nodes]


def test_plain_text():
    nodes = parse_inlines("plain")
    assert len(nodes) == 1
    assert nodes[0].kind == NodeKind.TEXT
    assert (nodes[0].start, nodes[0].end, nodes[0].text) == (0, 5, "plain")


def test_emphasis():
    nodes = parse_inlines("a *b* c")

    assert _kinds(nodes) == [NodeKind.TEXT, NodeKind.EMPHASIS, NodeKind.TEXT]
    emphasis = nodes[1]
    assert (emphasis.start, emphasis.end) == (2, 5)
    assert emphasis.plain_text() == "b"


def test_strong():
    nodes = parse_inlines("**bold**")
    assert _kinds(nodes) == [NodeKind.STRONG]
    assert nodes[0].plain_text() == "bold"


def test_intraword_underscores_are_literal():
    nodes = parse_inlines("snake_case_word")
    assert _kinds(nodes) == [NodeKind.TEXT]
    assert nodes[0].text == "snake_case_word"


def test_unmatched_delimiter_is_text():
    nodes = parse_inlines("2 * 3")
    assert _kinds(nodes) == [NodeKind.TEXT]
    assert nodes[0].text == "2 * 3"


def test_code_span():
    nodes = parse_inlines("use `x = 1` now")

    code = nodes[1]
    assert code.kind == NodeKind.CODE_SPAN
    assert code.text == "x = 1"
    assert (code.start, code.end) == (4, 11)


def test_no_emphasis_inside_code_span():
    nodes = parse_inlines("`a*b*`")
    assert _kinds(nodes) == [NodeKind.CODE_SPAN]


def test_unclosed_backtick_is_text():
    nodes = parse_inlines("a `b")
    assert _kinds(nodes) == [NodeKind.TEXT]
    assert nodes[0].text == "a `b"


def test_inline_link():
    nodes = parse_inlines("see [the docs](http://x.org) now")

    assert _kinds(nodes) == [NodeKind.TEXT, NodeKind.LINK, NodeKind.TEXT]
    link = nodes[1]
    assert link.text == "the docs"
    assert link.destination == "http://x.org"
    assert _kinds(link.children) == [NodeKind.TEXT]


def test_image():
    nodes = parse_inlines("![alt](img.png)")

    assert _kinds(nodes) == [NodeKind.IMAGE]
    assert nodes[0].text == "alt"
    assert nodes[0].destination == "img.png"


def test_reference_link():
    nodes = parse_inlines("[a][ref]")

    assert _kinds(nodes) == [NodeKind.LINK]
    assert nodes[0].destination == ""
    assert nodes[0].end == 8


def test_bracket_without_target_is_text():
    nodes = parse_inlines("[not a link]")
    assert _kinds(nodes) == [NodeKind.TEXT]
    assert nodes[0].text == "[not a link]"


def test_emphasis_inside_link():
    nodes = parse_inlines("[*a*](u)")

    link = nodes[0]
    assert link.kind == NodeKind.LINK
    assert _kinds(link.children) == [NodeKind.EMPHASIS]


def test_autolink():
    nodes = parse_inlines("<https://example.com>")

    assert _kinds(nodes) == [NodeKind.AUTOLINK]
    assert nodes[0].destination == "https://example.com"


def test_inline_html():
    nodes = parse_inlines('a <span class="x">b</span>')

    assert _kinds(nodes) == [NodeKind.TEXT, NodeKind.INLINE_HTML, NodeKind.TEXT, NodeKind.INLINE_HTML]
    opening, closing = nodes[1], nodes[3]
    assert opening.tag == "span"
    assert opening.text == '<span class="x">'
    assert closing.text == "</span>"


def test_html_comment_has_no_tag():
    nodes = parse_inlines("x <!-- note --> y")

    comment = nodes[1]
    assert comment.kind == NodeKind.INLINE_HTML
    assert comment.tag == ""


def test_escaped_delimiters():
    nodes = parse_inlines("\\*not emphasis\\*")
    assert _kinds(nodes) == [NodeKind.TEXT]
