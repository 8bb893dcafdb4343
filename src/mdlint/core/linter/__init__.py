"""Markdown style linter: rule registry, style resolution and evaluation."""
from .engine import (
    Evaluator,
    default_configuration,
    get_available_rules,
    lint_content,
    lint_file,
    lint_paths,
)
from .errors import (
    ConfigurationError,
    InvalidOption,
    MdlintError,
    StyleSyntaxError,
    UnknownRule,
    UnknownTag,
)
from .models import BatchResult, LintResult, Severity, Violation
from .rules import build_registry
from .style import RuleConfiguration, Style, load_style, resolve

__all__ = [
    "Evaluator",
    "default_configuration",
    "get_available_rules",
    "lint_content",
    "lint_file",
    "lint_paths",
    "ConfigurationError",
    "InvalidOption",
    "MdlintError",
    "StyleSyntaxError",
    "UnknownRule",
    "UnknownTag",
    "BatchResult",
    "LintResult",
    "Severity",
    "Violation",
    "build_registry",
    "RuleConfiguration",
    "Style",
    "load_style",
    "resolve",
]
