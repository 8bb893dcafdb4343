"""Tests for result ordering and rendering."""
import io
import json

from rich.console import Console

from mdlint.core.linter.models import LintResult, Severity, Violation
from mdlint.core.linter.reporter import (
    format_violation,
    print_results,
    render_json,
    render_text,
    rules_json,
    rules_table,
    sort_key,
)
from mdlint.core.linter.rules import build_registry
from mdlint.core.linter.style import Style, resolve


def _result() -> LintResult:
    result = LintResult(path="doc.md")
    result.add_violation(Violation("MD001", 3, "Header levels should only increment by one level at a time"))
    result.add_violation(Violation("MD013", 1, "Line length 120 exceeds 80", column=81))
    result.add_violation(Violation("MD009", 1, "Trailing spaces (1 chars)", column=12))
    result.add_violation(Violation("rule-fault", 1, "Rule MD999 failed", severity=Severity.ERROR))
    return result


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, highlight=False, soft_wrap=True), buffer


def test_sort_key_orders_by_line_then_rule():
    ordered = sorted(_result().violations, key=sort_key)
    assert [(v.line, v.rule) for v in ordered] == [
        (1, "MD009"), (1, "MD013"), (1, "rule-fault"), (3, "MD001"),
    ]


def test_sort_key_uses_column_for_same_rule_and_line():
    late = Violation("MD034", 2, "Bare URL used: b", column=30)
    early = Violation("MD034", 2, "Bare URL used: a", column=4)
    assert sorted([late, early], key=sort_key) == [early, late]


def test_format_violation():
    line = format_violation("doc.md", Violation("MD001", 3, "Header levels should only increment"))
    assert line == "doc.md:3: [MD001] Header levels should only increment"


def test_render_text_is_sorted():
    lines = render_text([_result()])

    assert lines[0] == "doc.md:1: [MD009] Trailing spaces (1 chars)"
    assert lines[-1].startswith("doc.md:3: [MD001]")
    assert len(lines) == 4


def test_render_json():
    payload = json.loads(render_json([_result()], dropped=["other.md"]))

    result = payload["results"][0]
    assert result["path"] == "doc.md"
    assert result["total_violations"] == 4
    assert result["errors"] == 1
    assert result["warnings"] == 3
    assert payload["dropped"] == ["other.md"]
    by_rule = {v["rule"]: v for v in result["violations"]}
    assert by_rule["MD013"]["column"] == 81
    assert "column" not in by_rule["MD001"]
    assert by_rule["rule-fault"]["severity"] == "error"


def test_print_results_text():
    console, buffer = _console()
    print_results([_result()], "text", console=console, dropped=["other.md"])

    output = buffer.getvalue().splitlines()
    assert output[0] == "doc.md:1: [MD009] Trailing spaces (1 chars)"
    assert output[3] == "doc.md:3: [MD001] Header levels should only increment by one level at a time"
    assert "1 document(s) not linted" in output[4]


def test_print_results_json():
    console, buffer = _console()
    print_results([_result()], "json", console=console)

    payload = json.loads(buffer.getvalue())
    assert payload["results"][0]["path"] == "doc.md"


def test_rules_table():
    registry = build_registry()
    table = rules_table(registry, resolve(Style(), registry))

    assert table.row_count == len(registry)
    console, buffer = _console()
    console.print(table)
    assert "MD013" in buffer.getvalue()


def test_rules_json():
    registry = build_registry()
    payload = json.loads(rules_json(registry, resolve(Style(), registry)))

    rules = {entry["id"]: entry for entry in payload["rules"]}
    assert len(rules) == len(registry)
    assert rules["MD013"]["enabled"] is True
    assert rules["MD002"]["enabled"] is False
    assert rules["MD013"]["options"]["line_length"]["default"] == 80
    assert rules["MD033"]["aliases"] == ["no-inline-html"]
