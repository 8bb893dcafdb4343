"""Data models for the linter."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Reserved identifiers for diagnostics the engine emits on its own behalf
RULE_FAULT = "rule-fault"
DOCUMENT_FAULT = "document-fault"


class Severity(Enum):
    """Severity levels for violations."""
    WARNING = "warning"       # Style problem
    ERROR = "error"           # Engine fault or must-fix problem


@dataclass(frozen=True)
class Violation:
    """A single rule violation found in a document."""
    rule: str
    line: int
    message: str
    severity: Severity = Severity.WARNING
    column: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "rule": self.rule,
            "line": self.line,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass
class LintResult:
    """Complete lint result for one document."""
    path: str
    violations: list[Violation] = field(default_factory=list)
    evaluated_rules: frozenset[str] = frozenset()
    fault: Optional[str] = None
    warnings: int = 0
    errors: int = 0

    def add_violation(self, violation: Violation) -> None:
        """Add a violation and update counts."""
        self.violations.append(violation)

        if violation.severity == Severity.WARNING:
            self.warnings += 1
        elif violation.severity == Severity.ERROR:
            self.errors += 1

    @property
    def total_violations(self) -> int:
        return len(self.violations)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "total_violations": self.total_violations,
            "warnings": self.warnings,
            "errors": self.errors,
            "fault": self.fault,
            "evaluated_rules": sorted(self.evaluated_rules),
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass
class BatchResult:
    """Results for a multi-document run, in input order."""
    results: list[LintResult] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)

    @property
    def total_violations(self) -> int:
        return sum(r.total_violations for r in self.results)

    @property
    def faulted(self) -> list[LintResult]:
        return [r for r in self.results if r.fault is not None]

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "dropped": self.dropped,
        }
