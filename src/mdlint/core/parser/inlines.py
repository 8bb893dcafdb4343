"""Inline span parser.

Scans a leaf block's text left to right. Code spans, autolinks and raw HTML
are recognised on the spot; emphasis delimiters and link brackets are pushed
onto stacks and resolved afterwards, following the CommonMark flanking rules.
Anything left unmatched degrades to literal text.
"""
import re
import string
import unicodedata
from dataclasses import dataclass, field
from typing import Union

from .nodes import Inline, NodeKind

_ATTRIBUTE = r'(?:\s+[A-Za-z_:][\w.:-]*(?:\s*=\s*(?:[^\s"\'=<>`]+|\'[^\']*\'|"[^"]*"))?)'

AUTOLINK_RE = re.compile(r'<([A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*)>')
EMAIL_AUTOLINK_RE = re.compile(
    r'<([A-Za-z0-9.!#$%&\'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?'
    r'(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*)>'
)
HTML_OPEN_RE = re.compile(rf'<([A-Za-z][A-Za-z0-9-]*){_ATTRIBUTE}*\s*/?>')
HTML_CLOSE_RE = re.compile(r'</([A-Za-z][A-Za-z0-9-]*)\s*>')
HTML_OTHER_RE = re.compile(r'<!--.*?-->|<\?.*?\?>|<![A-Za-z]+\s[^>]*>|<!\[CDATA\[.*?\]\]>', re.DOTALL)
INLINE_LINK_RE = re.compile(
    r'\(\s*(<[^<>\n]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)'
    r'(?:\s+("(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|\((?:\\.|[^)\\])*\)))?\s*\)'
)
REFERENCE_LINK_RE = re.compile(r'\[((?:\\.|[^\[\]\\])*)\]')
BACKTICKS_RE = re.compile(r'`+')


def _is_punctuation(char: str) -> bool:
    return char in string.punctuation or unicodedata.category(char)[0] in ('P', 'S')


@dataclass
class _Span:
    kind: NodeKind
    start: int
    end: int
    children: list = field(default_factory=list)
    text: str = ""
    destination: str = ""
    tag: str = ""


@dataclass
class _Delimiter:
    char: str
    start: int
    count: int
    original: int
    can_open: bool
    can_close: bool


@dataclass
class _Bracket:
    start: int
    image: bool
    active: bool = True


_Item = Union[_Span, _Delimiter, _Bracket]


def _process_emphasis(items: list) -> None:
    """Resolve emphasis delimiters in ``items`` in place."""
    i = 0
    while i < len(items):
        closer = items[i]
        if not (isinstance(closer, _Delimiter) and closer.can_close and closer.count):
            i += 1
            continue

        opener_idx = None
        for j in range(i - 1, -1, -1):
            opener = items[j]
            if not (isinstance(opener, _Delimiter) and opener.char == closer.char
                    and opener.can_open and opener.count):
                continue
            # Rule of three
            if ((opener.can_close or closer.can_open)
                    and (opener.original + closer.original) % 3 == 0
                    and not (opener.original % 3 == 0 and closer.original % 3 == 0)):
                continue
            opener_idx = j
            break

        if opener_idx is None:
            i += 1
            continue

        opener = items[opener_idx]
        use = 2 if opener.count >= 2 and closer.count >= 2 else 1
        opener.count -= use
        span = _Span(
            NodeKind.STRONG if use == 2 else NodeKind.EMPHASIS,
            opener.start + opener.count,
            closer.start + use,
            children=items[opener_idx + 1:i],
        )
        closer.start += use
        closer.count -= use

        replacement = [opener] if opener.count else []
        replacement.append(span)
        if closer.count:
            replacement.append(closer)
        items[opener_idx:i + 1] = replacement
        i = opener_idx + len(replacement) - (1 if closer.count else 0)


class InlineParser:
    """Parses the text of one leaf block into a tuple of ``Inline`` nodes."""

    def parse(self, text: str) -> tuple[Inline, ...]:
        self.text = text
        self.items: list[_Item] = []
        self.brackets: list[_Bracket] = []
        self.text_start = 0

        pos = 0
        n = len(text)
        while pos < n:
            char = text[pos]
            if char == '\\' and pos + 1 < n and text[pos + 1] in string.punctuation:
                pos += 2
            elif char == '`':
                pos = self._code_span(pos)
            elif char == '<':
                pos = self._angle(pos)
            elif char in '*_':
                pos = self._delimiter_run(pos)
            elif char == '!' and pos + 1 < n and text[pos + 1] == '[':
                self._open_bracket(pos, image=True)
                pos += 2
                self.text_start = pos
            elif char == '[':
                self._open_bracket(pos, image=False)
                pos += 1
                self.text_start = pos
            elif char == ']':
                pos = self._close_bracket(pos)
            else:
                pos += 1

        self._flush(n)
        items = self._literal_brackets(self.items)
        _process_emphasis(items)
        return self._freeze(items)

    def _literal_brackets(self, items: list) -> list:
        """Turn unmatched ``[`` / ``![`` markers back into text."""
        out = []
        for item in items:
            if isinstance(item, _Bracket):
                end = item.start + (2 if item.image else 1)
                item = _Span(NodeKind.TEXT, item.start, end, text=self.text[item.start:end])
            out.append(item)
        return out

    def _flush(self, upto: int) -> None:
        if self.text_start < upto:
            self.items.append(_Span(
                NodeKind.TEXT, self.text_start, upto, text=self.text[self.text_start:upto]
            ))
        self.text_start = upto

    def _emit(self, span: _Span) -> int:
        self._flush(span.start)
        self.items.append(span)
        self.text_start = span.end
        return span.end

    def _code_span(self, pos: int) -> int:
        opening = BACKTICKS_RE.match(self.text, pos).group()
        for close in BACKTICKS_RE.finditer(self.text, pos + len(opening)):
            if len(close.group()) == len(opening):
                inner = self.text[pos + len(opening):close.start()].replace('\n', ' ')
                return self._emit(_Span(NodeKind.CODE_SPAN, pos, close.end(), text=inner))
        return pos + len(opening)

    def _angle(self, pos: int) -> int:
        for pattern in (AUTOLINK_RE, EMAIL_AUTOLINK_RE):
            m = pattern.match(self.text, pos)
            if m:
                return self._emit(_Span(
                    NodeKind.AUTOLINK, pos, m.end(), text=m.group(1), destination=m.group(1)
                ))
        for pattern in (HTML_OPEN_RE, HTML_CLOSE_RE, HTML_OTHER_RE):
            m = pattern.match(self.text, pos)
            if m:
                tag = m.group(1).lower() if pattern.groups else ""
                return self._emit(_Span(
                    NodeKind.INLINE_HTML, pos, m.end(), text=m.group(), tag=tag
                ))
        return pos + 1

    def _delimiter_run(self, pos: int) -> int:
        text = self.text
        char = text[pos]
        end = pos
        while end < len(text) and text[end] == char:
            end += 1

        before = text[pos - 1] if pos > 0 else ' '
        after = text[end] if end < len(text) else ' '
        left = not after.isspace() and (
            not _is_punctuation(after) or before.isspace() or _is_punctuation(before)
        )
        right = not before.isspace() and (
            not _is_punctuation(before) or after.isspace() or _is_punctuation(after)
        )
        if char == '*':
            can_open, can_close = left, right
        else:
            can_open = left and (not right or _is_punctuation(before))
            can_close = right and (not left or _is_punctuation(after))

        self._flush(pos)
        count = end - pos
        self.items.append(_Delimiter(char, pos, count, count, can_open, can_close))
        self.text_start = end
        return end

    def _open_bracket(self, pos: int, image: bool) -> None:
        self._flush(pos)
        bracket = _Bracket(pos, image)
        self.items.append(bracket)
        self.brackets.append(bracket)

    def _close_bracket(self, pos: int) -> int:
        if not self.brackets:
            return pos + 1
        opener = self.brackets[-1]
        if not opener.active:
            self.brackets.pop()
            return pos + 1

        label_start = opener.start + (2 if opener.image else 1)
        destination = ""
        m = INLINE_LINK_RE.match(self.text, pos + 1)
        if m:
            destination = m.group(1)
            if destination.startswith('<') and destination.endswith('>'):
                destination = destination[1:-1]
        else:
            m = REFERENCE_LINK_RE.match(self.text, pos + 1)
            if m is None:
                self.brackets.pop()
                return pos + 1

        self._flush(pos)
        idx = next(k for k, item in enumerate(self.items) if item is opener)
        inner = self._literal_brackets(self.items[idx + 1:])
        _process_emphasis(inner)
        span = _Span(
            NodeKind.IMAGE if opener.image else NodeKind.LINK,
            opener.start,
            m.end(),
            children=inner,
            text=self.text[label_start:pos],
            destination=destination,
        )
        self.items[idx:] = [span]
        self.brackets.pop()
        # No links inside links
        if not opener.image:
            for bracket in self.brackets:
                if not bracket.image:
                    bracket.active = False
        self.text_start = m.end()
        return m.end()

    def _freeze(self, items: list) -> tuple[Inline, ...]:
        nodes: list[Inline] = []
        for item in items:
            if isinstance(item, _Delimiter):
                if not item.count:
                    continue
                node = Inline(
                    NodeKind.TEXT, item.start, item.start + item.count,
                    text=self.text[item.start:item.start + item.count],
                )
            else:
                node = Inline(
                    item.kind, item.start, item.end,
                    children=self._freeze(item.children),
                    text=item.text,
                    destination=item.destination,
                    tag=item.tag,
                )
            if (node.kind == NodeKind.TEXT and nodes and nodes[-1].kind == NodeKind.TEXT
                    and nodes[-1].end == node.start):
                previous = nodes.pop()
                node = Inline(NodeKind.TEXT, previous.start, node.end, text=previous.text + node.text)
            nodes.append(node)
        return tuple(nodes)


def parse_inlines(text: str) -> tuple[Inline, ...]:
    return InlineParser().parse(text)
