"""Block-level tokenizer.

Turns source lines into an ordered list of ``RawBlock`` objects. Runs of blank
lines become ``blank`` blocks, so the blocks returned for any line sequence
cover every line exactly once. Container blocks (block quotes, lists, list
items, tables) strip their prefixes and parse their content recursively.

Fenced code and HTML blocks switch off block-start detection until their
closing marker. Constructs left open at the end of their container are closed
there instead of raising.
"""
import re
from dataclasses import dataclass, field
from typing import Optional

from .nodes import NodeKind

ATX_RE = re.compile(r'^( {0,3})(#{1,6})(?=[ \t]|$)(.*)$')
ATX_CLOSING_RE = re.compile(r'(?:^|[ \t]+)#+[ \t]*$')
SETEXT_RE = re.compile(r'^ {0,3}(=+|-+)[ \t]*$')
HR_RE = re.compile(r'^ {0,3}((?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$')
FENCE_OPEN_RE = re.compile(r'^( {0,3})(`{3,}|~{3,})(.*)$')
FENCE_CLOSE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})[ \t]*$')
BLOCKQUOTE_RE = re.compile(r'^( {0,3})>( ?)')
BULLET_RE = re.compile(r'^( {0,3})([-+*])([ \t]+|$)(.*)$')
ORDERED_RE = re.compile(r'^( {0,3})(\d{1,9})([.)])([ \t]+|$)(.*)$')
TABLE_DELIMITER_RE = re.compile(
    r'^ {0,3}\|?[ \t]*:?-+:?[ \t]*(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$'
)

_ATTRIBUTE = r'(?:\s+[A-Za-z_:][\w.:-]*(?:\s*=\s*(?:[^\s"\'=<>`]+|\'[^\']*\'|"[^"]*"))?)'
_BLOCK_TAGS = (
    'address|article|aside|base|basefont|blockquote|body|caption|center|col|colgroup|dd|'
    'details|dialog|dir|div|dl|dt|fieldset|figcaption|figure|footer|form|frame|frameset|'
    'h1|h2|h3|h4|h5|h6|head|header|hr|html|iframe|legend|li|link|main|menu|menuitem|nav|'
    'noframes|ol|optgroup|option|p|param|search|section|summary|table|tbody|td|tfoot|th|'
    'thead|title|tr|track|ul'
)

# (start pattern, end pattern or None for "until blank line", may interrupt a paragraph)
HTML_BLOCK_RULES = [
    (re.compile(r'^ {0,3}<(?:script|pre|style|textarea)(?:\s|>|$)', re.IGNORECASE),
     re.compile(r'</(?:script|pre|style|textarea)>', re.IGNORECASE), True),
    (re.compile(r'^ {0,3}<!--'), re.compile(r'-->'), True),
    (re.compile(r'^ {0,3}<\?'), re.compile(r'\?>'), True),
    (re.compile(r'^ {0,3}<![A-Za-z]'), re.compile(r'>'), True),
    (re.compile(r'^ {0,3}<!\[CDATA\['), re.compile(r'\]\]>'), True),
    (re.compile(rf'^ {{0,3}}</?(?:{_BLOCK_TAGS})(?:\s|/?>|$)', re.IGNORECASE), None, True),
    (re.compile(
        rf'^ {{0,3}}(?:<[A-Za-z][A-Za-z0-9-]*{_ATTRIBUTE}*\s*/?>|</[A-Za-z][A-Za-z0-9-]*\s*>)[ \t]*$'
    ), None, False),
]


@dataclass
class Line:
    """One source line, possibly with container prefixes stripped."""
    number: int
    text: str
    column: int = 1  # 1-based source column of text[0]

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip(' '))

    def strip_columns(self, count: int) -> "Line":
        """Drop up to ``count`` leading characters, tracking the column."""
        count = min(count, len(self.text))
        return Line(self.number, self.text[count:], self.column + count)

    def lstripped(self) -> "Line":
        return self.strip_columns(self.indent)


@dataclass
class RawBlock:
    """Mutable block produced by the tokenizer, frozen later by the builder."""
    kind: NodeKind
    lines: list[Line]
    depth: int
    children: list["RawBlock"] = field(default_factory=list)
    content: list[Line] = field(default_factory=list)
    attrs: dict = field(default_factory=dict)

    @property
    def start_line(self) -> int:
        return self.lines[0].number

    @property
    def end_line(self) -> int:
        return self.lines[-1].number


def expand_indent(text: str, tab_size: int = 4) -> str:
    """Expand tabs in leading whitespace only."""
    stripped = text.lstrip(' \t')
    prefix = text[:len(text) - len(stripped)]
    return prefix.expandtabs(tab_size) + stripped


def source_lines(lines: list[str], first_number: int = 1) -> list[Line]:
    return [Line(first_number + i, expand_indent(text)) for i, text in enumerate(lines)]


def _html_rule(text: str):
    for start_re, end_re, interrupts in HTML_BLOCK_RULES:
        if start_re.match(text):
            return end_re, interrupts
    return None


def _is_hr(text: str) -> bool:
    return HR_RE.match(text) is not None


def _list_marker(text: str):
    """Return (indent, marker, ordered, number, spacing, rest) or None."""
    if _is_hr(text):
        return None
    m = BULLET_RE.match(text)
    if m:
        return len(m.group(1)), m.group(2), False, None, m.group(3), m.group(4)
    m = ORDERED_RE.match(text)
    if m:
        marker = m.group(2) + m.group(3)
        return len(m.group(1)), marker, True, int(m.group(2)), m.group(4), m.group(5)
    return None


def _list_type(marker: str, ordered: bool) -> str:
    """Items belong to the same list when they share this key."""
    return marker[-1] if ordered else marker


def _table_cells(text: str) -> list[str]:
    row = text.strip()
    if row.startswith('|'):
        row = row[1:]
    if row.endswith('|') and not row.endswith('\\|'):
        row = row[:-1]
    return re.split(r'(?<!\\)\|', row)


def interrupts_paragraph(text: str) -> bool:
    """Whether a line starts a block that may end a paragraph."""
    if not text.strip():
        return True
    if ATX_RE.match(text) or FENCE_OPEN_RE.match(text) or _is_hr(text):
        return True
    if BLOCKQUOTE_RE.match(text):
        return True
    rule = _html_rule(text)
    if rule is not None and rule[1]:
        return True
    marker = _list_marker(text)
    if marker is not None:
        _indent, _marker, ordered, number, _spacing, rest = marker
        # Empty items and ordered lists not starting at 1 cannot interrupt
        if rest.strip() and (not ordered or number == 1):
            return True
    return False


class BlockParser:
    """Stateful line scanner producing ``RawBlock`` trees."""

    def parse(self, lines: list[Line], depth: int = 0) -> list[RawBlock]:
        blocks: list[RawBlock] = []
        i = 0
        while i < len(lines):
            block, i = self._next_block(lines, i, depth)
            blocks.append(block)
        return blocks

    def _next_block(self, lines: list[Line], i: int, depth: int) -> tuple[RawBlock, int]:
        line = lines[i]
        text = line.text

        if line.is_blank:
            return self._blank(lines, i, depth)
        if line.indent >= 4:
            return self._indented_code(lines, i, depth)
        if FENCE_OPEN_RE.match(text) and self._valid_fence(text):
            return self._fenced_code(lines, i, depth)
        if _html_rule(text) is not None:
            return self._html_block(lines, i, depth)
        if ATX_RE.match(text):
            return self._atx_heading(lines, i, depth), i + 1
        if _is_hr(text):
            return RawBlock(NodeKind.HR, [line], depth, attrs={"style": text.strip()}), i + 1
        if BLOCKQUOTE_RE.match(text):
            return self._blockquote(lines, i, depth)
        if _list_marker(text) is not None:
            return self._list(lines, i, depth)
        if self._table_starts(lines, i):
            return self._table(lines, i, depth)
        return self._paragraph(lines, i, depth)

    # Leaf blocks

    def _blank(self, lines, i, depth):
        j = i
        while j < len(lines) and lines[j].is_blank:
            j += 1
        return RawBlock(NodeKind.BLANK, lines[i:j], depth), j

    def _indented_code(self, lines, i, depth):
        j = i
        last_text = i
        while j < len(lines) and (lines[j].is_blank or lines[j].indent >= 4):
            if not lines[j].is_blank:
                last_text = j
            j += 1
        block_lines = lines[i:last_text + 1]
        content = [ln.strip_columns(4) for ln in block_lines]
        block = RawBlock(
            NodeKind.CODE_BLOCK, block_lines, depth, content=content,
            attrs={"style": "indented"},
        )
        return block, last_text + 1

    @staticmethod
    def _valid_fence(text: str) -> bool:
        m = FENCE_OPEN_RE.match(text)
        return not (m.group(2)[0] == '`' and '`' in m.group(3))

    def _fenced_code(self, lines, i, depth):
        m = FENCE_OPEN_RE.match(lines[i].text)
        indent, fence, info = len(m.group(1)), m.group(2), m.group(3).strip()
        j = i + 1
        closed = False
        while j < len(lines):
            close = FENCE_CLOSE_RE.match(lines[j].text)
            if close and close.group(1)[0] == fence[0] and len(close.group(1)) >= len(fence):
                closed = True
                break
            j += 1
        end = j if closed else len(lines) - 1
        content = [ln.strip_columns(min(indent, ln.indent)) for ln in lines[i + 1:j]]
        block = RawBlock(
            NodeKind.CODE_BLOCK, lines[i:end + 1], depth, content=content,
            attrs={"style": "fenced", "fence": fence, "info": info, "closed": closed},
        )
        return block, end + 1

    def _html_block(self, lines, i, depth):
        end_re, _interrupts = _html_rule(lines[i].text)
        j = i
        if end_re is not None:
            while j < len(lines) and not end_re.search(lines[j].text):
                j += 1
            j = min(j, len(lines) - 1)
        else:
            while j + 1 < len(lines) and not lines[j + 1].is_blank:
                j += 1
        tag = re.match(r'^ {0,3}</?([A-Za-z][A-Za-z0-9-]*)', lines[i].text)
        block = RawBlock(
            NodeKind.HTML_BLOCK, lines[i:j + 1], depth,
            attrs={"tag": tag.group(1).lower() if tag else ""},
        )
        return block, j + 1

    def _atx_heading(self, lines, i, depth):
        line = lines[i]
        m = ATX_RE.match(line.text)
        indent, hashes, rest = len(m.group(1)), m.group(2), m.group(3)
        style = "atx"
        closing = ATX_CLOSING_RE.search(rest)
        if closing and rest[:closing.start()].strip():
            rest = rest[:closing.start()]
            style = "atx_closed"
        elif closing and not rest[:closing.start()].strip():
            rest = ""
        content_start = indent + len(hashes) + (len(rest) - len(rest.lstrip()))
        content = Line(line.number, rest.strip(), line.column + content_start)
        return RawBlock(
            NodeKind.HEADING, [line], depth, content=[content],
            attrs={"level": len(hashes), "style": style, "column": line.column + indent},
        )

    def _paragraph(self, lines, i, depth):
        j = i + 1
        while j < len(lines):
            text = lines[j].text
            if lines[j].is_blank:
                break
            setext = SETEXT_RE.match(text)
            if setext:
                content = [ln.lstripped() for ln in lines[i:j]]
                block = RawBlock(
                    NodeKind.HEADING, lines[i:j + 1], depth, content=content,
                    attrs={
                        "level": 1 if setext.group(1)[0] == '=' else 2,
                        "style": "setext",
                        "column": lines[i].column + lines[i].indent,
                    },
                )
                return block, j + 1
            if interrupts_paragraph(text):
                break
            j += 1
        content = [ln.lstripped() for ln in lines[i:j]]
        return RawBlock(NodeKind.PARAGRAPH, lines[i:j], depth, content=content), j

    # Containers

    def _blockquote(self, lines, i, depth):
        inner: list[Line] = []
        j = i
        in_fence = False
        while j < len(lines):
            line = lines[j]
            m = BLOCKQUOTE_RE.match(line.text)
            if m:
                stripped = line.strip_columns(m.end())
                if FENCE_OPEN_RE.match(stripped.text) or (in_fence and FENCE_CLOSE_RE.match(stripped.text)):
                    in_fence = not in_fence
                inner.append(stripped)
            elif self._lazy_continuation(inner, line, in_fence):
                inner.append(line.lstripped())
            else:
                break
            j += 1
        block = RawBlock(NodeKind.BLOCKQUOTE, lines[i:j], depth)
        block.children = self.parse(inner, depth + 1)
        return block, j

    @staticmethod
    def _lazy_continuation(inner: list[Line], line: Line, in_fence: bool) -> bool:
        if in_fence or not inner or inner[-1].is_blank or line.is_blank:
            return False
        last = inner[-1].text
        if ATX_RE.match(last) or _is_hr(last) or inner[-1].indent >= 4:
            return False
        return not interrupts_paragraph(line.text)

    def _list(self, lines, i, depth):
        first = _list_marker(lines[i].text)
        list_type = _list_type(first[1], first[2])
        items: list[RawBlock] = []
        loose = False
        j = i
        while j < len(lines):
            marker = _list_marker(lines[j].text)
            if marker is None or _list_type(marker[1], marker[2]) != list_type:
                break
            item, j, trailing_blank = self._list_item(lines, j, depth + 1, marker)
            items.append(item)
            loose = loose or trailing_blank
        block = RawBlock(
            NodeKind.LIST, [ln for item in items for ln in item.lines], depth,
            children=items,
            attrs={
                "ordered": first[2],
                "style": list_type,
                "number": first[3],
                "loose": loose,
            },
        )
        return block, j

    def _list_item(self, lines, i, depth, marker):
        indent, text, ordered, number, spacing, rest = marker
        line = lines[i]
        marker_end = indent + len(text)
        if not rest.strip():
            content_indent = marker_end + 1
        elif len(spacing) >= 5:
            content_indent = marker_end + 1
        else:
            content_indent = marker_end + len(spacing)
        inner = [line.strip_columns(content_indent) if rest.strip() else Line(line.number, "", line.column + marker_end)]
        in_fence = bool(FENCE_OPEN_RE.match(inner[0].text))
        trailing_blank = False
        j = i + 1
        while j < len(lines):
            current = lines[j]
            if current.is_blank:
                k = j
                while k < len(lines) and lines[k].is_blank:
                    k += 1
                if k == len(lines):
                    break
                nxt = lines[k]
                if nxt.indent >= content_indent:
                    inner.extend(Line(ln.number, "", ln.column) for ln in lines[j:k])
                    j = k
                    continue
                sibling = _list_marker(nxt.text)
                if sibling is not None and _list_type(sibling[1], sibling[2]) == _list_type(text, ordered):
                    inner.extend(Line(ln.number, "", ln.column) for ln in lines[j:k])
                    j = k
                    trailing_blank = True
                break
            if current.indent >= content_indent:
                stripped = current.strip_columns(content_indent)
                if FENCE_OPEN_RE.match(stripped.text) or (in_fence and FENCE_CLOSE_RE.match(stripped.text)):
                    in_fence = not in_fence
                inner.append(stripped)
            elif (
                _list_marker(current.text) is None
                and self._lazy_continuation(inner, current, in_fence)
            ):
                inner.append(current.lstripped())
            else:
                break
            j += 1
        item = RawBlock(
            NodeKind.LIST_ITEM, lines[i:j], depth,
            attrs={
                "marker": text,
                "ordered": ordered,
                "number": number,
                "column": line.column + indent,
            },
        )
        item.children = self.parse(inner, depth + 1)
        return item, j, trailing_blank

    def _table_starts(self, lines, i) -> bool:
        if i + 1 >= len(lines) or '|' not in lines[i].text:
            return False
        delimiter = lines[i + 1].text
        if not TABLE_DELIMITER_RE.match(delimiter) or '-' not in delimiter:
            return False
        return len(_table_cells(lines[i].text)) == len(_table_cells(delimiter))

    def _table(self, lines, i, depth):
        rows = [
            RawBlock(NodeKind.TABLE_ROW, [lines[i]], depth + 1,
                     content=[lines[i].lstripped()], attrs={"header": True}),
            RawBlock(NodeKind.TABLE_ROW, [lines[i + 1]], depth + 1, attrs={"style": "delimiter"}),
        ]
        j = i + 2
        while j < len(lines):
            text = lines[j].text
            if lines[j].is_blank or '|' not in text or interrupts_paragraph(text):
                break
            rows.append(RawBlock(NodeKind.TABLE_ROW, [lines[j]], depth + 1, content=[lines[j].lstripped()]))
            j += 1
        block = RawBlock(NodeKind.TABLE, lines[i:j], depth, children=rows)
        return block, j


def parse_blocks(lines: list[str], first_number: int = 1, parser: Optional[BlockParser] = None) -> list[RawBlock]:
    """Tokenize raw text lines (without line terminators) into blocks."""
    parser = parser or BlockParser()
    return parser.parse(source_lines(lines, first_number))
