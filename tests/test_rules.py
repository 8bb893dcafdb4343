"""Tests for the built-in rules."""
import pytest

from mdlint.core.linter.engine import lint_content
from mdlint.core.linter.models import RULE_FAULT
from mdlint.core.linter.rules import build_registry
from mdlint.core.linter.style import EnableRule, SetOption, Style, resolve

REGISTRY = build_registry()

LONG_PROSE = "word " * 19 + "word"


def _lines(text: str, rule_id: str, **options) -> list[int]:
    """Lines on which ``rule_id`` reports, with the rule enabled and options set."""
    directives = [EnableRule(rule_id)]
    directives.extend(SetOption(rule_id, name, value) for name, value in options.items())
    configuration = resolve(Style(directives=tuple(directives)), REGISTRY)

    result = lint_content(text, registry=REGISTRY, configuration=configuration)
    assert not [v for v in result.violations if v.rule == RULE_FAULT]
    return [v.line for v in result.violations if v.rule == rule_id]


CASES = [
    # Headings
    ("MD001", "# A\n\n### B\n", {}, [3]),
    ("MD001", "# A\n\n## B\n\n### C\n\n# D\n", {}, []),
    ("MD002", "## A\n", {}, [1]),
    ("MD002", "## A\n", {"level": 2}, []),
    ("MD003", "# A\n\nB\n---\n", {}, [3]),
    ("MD003", "# A #\n", {"style": "atx"}, [1]),
    ("MD003", "A\n=\n\n### B\n", {"style": "setext_with_atx"}, []),
    ("MD018", "#Heading\n", {}, [1]),
    ("MD018", "#!/bin/sh\n", {}, []),
    ("MD019", "##  Heading\n", {}, [1]),
    ("MD022", "# A\ntext\n# B\n", {}, [1, 3]),
    ("MD022", "# A\n\ntext\n", {}, []),
    ("MD023", "  # Indented\n", {}, [1]),
    ("MD024", "# A\n\n## B\n\n## B\n", {}, [5]),
    ("MD024", "# R1\n\n## Changes\n\n# R2\n\n## Changes\n", {}, [7]),
    ("MD024", "# R1\n\n## Changes\n\n# R2\n\n## Changes\n", {"allow_different_nesting": True}, []),
    ("MD025", "# A\n\n# B\n", {}, [3]),
    ("MD025", "# A\n\n## B\n", {}, []),
    ("MD026", "# Heading.\n", {}, [1]),
    ("MD026", "# Heading?\n", {"punctuation": [".", ","]}, []),
    ("MD041", "Text\n\n# H\n", {}, [1]),
    ("MD041", "---\ntitle: X\n---\nText\n", {}, []),
    ("MD041", "---\ntitle: X\n---\nText\n", {"front_matter_title": False}, [4]),

    # Lists
    ("MD004", "- a\n- b\n\n* c\n", {}, [4]),
    ("MD004", "- a\n", {"style": "asterisk"}, [1]),
    ("MD005", "- a\n - b\n", {}, [2]),
    ("MD007", "- a\n    - b\n", {}, [2]),
    ("MD007", "- a\n  - b\n", {}, []),
    ("MD007", "- a\n    - b\n", {"indent": 4}, []),
    ("MD029", "1. a\n3. b\n", {}, [2]),
    ("MD029", "1. a\n1. b\n1. c\n", {}, []),
    ("MD029", "1. a\n2. b\n", {}, []),
    ("MD029", "1. a\n2. b\n", {"style": "one"}, [2]),
    ("MD032", "Text\n- item\n", {}, [2]),
    ("MD032", "- a\n***\n", {}, [1]),
    ("MD032", "Text\n\n- item\n\nMore\n", {}, []),

    # Whitespace and line length
    ("MD009", "text  \nmore\n", {}, []),
    ("MD009", "text \nmore\n", {}, [1]),
    ("MD009", "text\nmore  \n", {}, [2]),
    ("MD009", "text  \nmore\n", {"br_spaces": 0}, [1]),
    ("MD009", "a\n   \nb\n", {}, [2]),
    ("MD010", "a\tb\n", {}, [1]),
    ("MD010", "```\na\tb\n```\n", {}, [2]),
    ("MD010", "```\na\tb\n```\n", {"code_blocks": False}, []),
    ("MD012", "a\n\n\nb\n", {}, [3]),
    ("MD012", "a\n\n\nb\n", {"maximum": 2}, []),
    ("MD013", LONG_PROSE + "\n", {}, [1]),
    ("MD013", LONG_PROSE + "\n", {"line_length": 100}, []),
    ("MD013", "see http://e.com/" + "a" * 100 + "\n", {}, []),
    ("MD013", "```\n" + LONG_PROSE + "\n```\n", {"code_blocks": False}, []),
    ("MD013", "# " + LONG_PROSE + "\n", {"headings": False}, []),
    ("MD047", "text", {}, [1]),
    ("MD047", "text\n", {}, []),

    # Code, block quotes, rules
    ("MD014", "```\n$ ls\n$ pwd\n```\n", {}, [1]),
    ("MD014", "```\n$ ls\nfile\n```\n", {}, []),
    ("MD027", ">  quote\n", {}, [1]),
    ("MD027", "> quote\n", {}, []),
    ("MD031", "Text\n```\ncode\n```\nMore\n", {}, [2, 4]),
    ("MD031", "Text\n\n```\ncode\n```\n", {}, []),
    ("MD035", "Text\n\n---\n\n***\n", {}, [5]),
    ("MD035", "Text\n\n***\n", {"style": "---"}, [3]),
    ("MD040", "```\ncode\n```\n", {}, [1]),
    ("MD040", "```py\ncode\n```\n", {}, []),
    ("MD046", "```\na\n```\n\n    b\n", {}, [5]),
    ("MD046", "```\na\n```\n\n    b\n", {"style": "consistent"}, [5]),

    # Inline content
    ("MD011", "(text)[http://x]\n", {}, [1]),
    ("MD033", "Text <span>x</span>\n", {}, [1]),
    ("MD033", "Text <span>x</span>\n", {"allowed_elements": ["span"]}, []),
    ("MD033", "<div>\nx\n</div>\n", {}, [1]),
    ("MD033", "<!-- c -->\n", {}, []),
    ("MD034", "Visit http://example.com now\n", {}, [1]),
    ("MD034", "<http://example.com>\n", {}, []),
    ("MD034", "[x](http://example.com)\n", {}, []),
    ("MD034", "[x]: http://example.com\n", {}, []),
    ("MD034", "`http://example.com`\n", {}, []),
    ("MD036", "**Heading-like**\n\nText.\n", {}, [1]),
    ("MD036", "**Note:**\n", {}, []),
    ("MD038", "` code `\n", {}, [1]),
    ("MD038", "`` `tick` ``\n", {}, []),
    ("MD038", "`code`\n", {}, []),
    ("MD039", "[ link ](http://x)\n", {}, [1]),
    ("MD039", "[link](http://x)\n", {}, []),
    ("MD042", "[empty]()\n", {}, [1]),
    ("MD042", "[x](#)\n", {}, [1]),
    ("MD042", "[x](http://y)\n", {}, []),
    ("MD045", "![](img.png)\n", {}, [1]),
    ("MD045", "![alt](img.png)\n", {}, []),
]


@pytest.mark.parametrize("rule_id, text, options, expected", CASES)
def test_rule(rule_id, text, options, expected):
    assert _lines(text, rule_id, **options) == expected


def test_every_builtin_rule_has_a_case():
    covered = {case[0] for case in CASES}
    assert covered == set(REGISTRY.ids())


def test_inline_violation_column():
    configuration = resolve(Style(), REGISTRY)
    result = lint_content("Visit http://example.com now\n", registry=REGISTRY, configuration=configuration)

    (violation,) = [v for v in result.violations if v.rule == "MD034"]
    assert violation.column == 7


def test_violations_inside_containers_use_source_lines():
    text = "> # Title\n>\n> Visit http://example.com\n"
    assert _lines(text, "MD034") == [3]
