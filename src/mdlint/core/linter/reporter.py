"""Ordering and rendering of lint results."""
import json
from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import LintResult, Severity, Violation

FORMATS = ("text", "json")


def sort_key(violation: Violation) -> tuple:
    """Stable output order: line, then rule id, then column."""
    return (violation.line, violation.rule, violation.column or 0, violation.message)


def format_violation(path: str, violation: Violation) -> str:
    return f"{path}:{violation.line}: [{violation.rule}] {violation.message}"


def render_text(results: Iterable[LintResult]) -> list[str]:
    lines = []
    for result in results:
        for violation in sorted(result.violations, key=sort_key):
            lines.append(format_violation(result.path, violation))
    return lines


def render_json(results: Iterable[LintResult], dropped: Optional[list[str]] = None) -> str:
    payload = {"results": [r.to_dict() for r in results]}
    if dropped:
        payload["dropped"] = dropped
    return json.dumps(payload, indent=2)


def print_results(
    results: list[LintResult],
    output_format: str = "text",
    console: Optional[Console] = None,
    dropped: Optional[list[str]] = None,
) -> None:
    """Write results to the console in the requested format."""
    console = console or Console(highlight=False, soft_wrap=True)

    if output_format == "json":
        console.print(render_json(results, dropped), markup=False, highlight=False, emoji=False)
        return

    for result in results:
        for violation in sorted(result.violations, key=sort_key):
            style = "red" if violation.severity == Severity.ERROR else None
            console.print(Text(format_violation(result.path, violation), style=style))

    if dropped:
        console.print(Text(f"{len(dropped)} document(s) not linted (cancelled)", style="yellow"))


def rules_table(registry, configuration=None) -> Table:
    """Rich table of registered rules and their state under a configuration."""
    table = Table(title="Markdown lint rules")
    table.add_column("Rule", style="bold")
    table.add_column("Alias")
    table.add_column("Enabled")
    table.add_column("Tags")
    table.add_column("Description")

    for definition in registry:
        enabled = (
            configuration.is_enabled(definition.id)
            if configuration is not None else definition.default_enabled
        )
        table.add_row(
            definition.id,
            ", ".join(definition.aliases),
            "yes" if enabled else "no",
            ", ".join(sorted(definition.tags)),
            definition.description,
        )
    return table


def rules_json(registry, configuration=None) -> str:
    rules = []
    for definition in registry:
        entry = {
            "id": definition.id,
            "aliases": list(definition.aliases),
            "description": definition.description,
            "tags": sorted(definition.tags),
            "default_enabled": definition.default_enabled,
            "options": {
                spec.name: {"type": spec.describe(), "default": spec.default}
                for spec in definition.options
            },
        }
        if configuration is not None:
            entry["enabled"] = configuration.is_enabled(definition.id)
            entry["options_resolved"] = dict(configuration.options(definition.id))
        rules.append(entry)
    return json.dumps({"rules": rules}, indent=2, default=list)
