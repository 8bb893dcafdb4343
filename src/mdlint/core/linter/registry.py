"""Rule definitions, option schemas and the rule registry.

Rules are plain generator functions decorated with :func:`rule`, which
attaches a :class:`RuleDefinition`. A :class:`RuleRegistry` is built once at
startup from those definitions and sealed; it is then passed explicitly to the
resolver and the engine and never changes.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from ..parser.nodes import NodeKind
from .errors import InvalidOption, UnknownRule, UnknownTag
from .models import DOCUMENT_FAULT, RULE_FAULT, Severity


# Option schema variants

@dataclass(frozen=True)
class OptionSpec:
    """Declared option of a rule: a name, a default and a validator."""
    name: str
    default: Any
    description: str = ""

    kind = "option"

    def validate(self, rule_id: str, value: Any) -> Any:
        raise NotImplementedError

    def describe(self) -> str:
        return self.kind


@dataclass(frozen=True)
class BooleanOption(OptionSpec):
    kind = "boolean"

    def validate(self, rule_id: str, value: Any) -> Any:
        if not isinstance(value, bool):
            raise InvalidOption(rule_id, self.name, f"expected a boolean, got {value!r}")
        return value


@dataclass(frozen=True)
class IntegerOption(OptionSpec):
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    kind = "integer"

    def validate(self, rule_id: str, value: Any) -> Any:
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidOption(rule_id, self.name, f"expected an integer, got {value!r}")
        if self.minimum is not None and value < self.minimum:
            raise InvalidOption(rule_id, self.name, f"{value} is below the minimum {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            raise InvalidOption(rule_id, self.name, f"{value} is above the maximum {self.maximum}")
        return value

    def describe(self) -> str:
        low = "" if self.minimum is None else str(self.minimum)
        high = "" if self.maximum is None else str(self.maximum)
        return f"integer [{low}..{high}]" if low or high else "integer"


@dataclass(frozen=True)
class ChoiceOption(OptionSpec):
    choices: tuple[str, ...] = ()

    kind = "choice"

    def validate(self, rule_id: str, value: Any) -> Any:
        if not isinstance(value, str) or value not in self.choices:
            raise InvalidOption(
                rule_id, self.name,
                f"expected one of {', '.join(self.choices)}, got {value!r}",
            )
        return value

    def describe(self) -> str:
        return "one of " + "|".join(self.choices)


@dataclass(frozen=True)
class StringListOption(OptionSpec):
    kind = "string list"

    def validate(self, rule_id: str, value: Any) -> Any:
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise InvalidOption(rule_id, self.name, f"expected a list of strings, got {value!r}")
        return tuple(value)


# Rule definitions

CheckFunc = Callable[..., Iterator]


@dataclass(frozen=True)
class RuleDefinition:
    """Static description of one rule."""
    id: str
    aliases: tuple[str, ...]
    description: str
    kinds: frozenset[NodeKind]
    check: CheckFunc = field(compare=False, repr=False)
    tags: frozenset[str] = frozenset()
    options: tuple[OptionSpec, ...] = ()
    default_enabled: bool = True
    severity: Severity = Severity.WARNING

    @property
    def name(self) -> str:
        return self.aliases[0] if self.aliases else self.id

    def option(self, name: str) -> OptionSpec:
        for spec in self.options:
            if spec.name == name:
                return spec
        known = ", ".join(spec.name for spec in self.options) or "none"
        raise InvalidOption(self.id, name, f"unknown option (known: {known})")

    def defaults(self) -> dict[str, Any]:
        return {spec.name: spec.default for spec in self.options}


def rule(
    rule_id: str,
    *aliases: str,
    kinds,
    tags=(),
    options=(),
    default_enabled: bool = True,
    severity: Severity = Severity.WARNING,
):
    """Decorator attaching a RuleDefinition to a check function.

    The first line of the function's docstring becomes the description.
    """
    def decorate(func: CheckFunc) -> CheckFunc:
        func.definition = RuleDefinition(
            id=rule_id,
            aliases=tuple(aliases),
            description=(func.__doc__ or "No description").strip().split('\n')[0],
            kinds=frozenset(kinds),
            check=func,
            tags=frozenset(tags),
            options=tuple(options),
            default_enabled=default_enabled,
            severity=severity,
        )
        return func
    return decorate


class RuleRegistry:
    """Table of available rules keyed by identifier and alias."""

    def __init__(self, definitions=()):
        self._rules: dict[str, RuleDefinition] = {}
        self._names: dict[str, str] = {}
        self._sealed = False
        for definition in definitions:
            self.register(definition)

    def register(self, definition: RuleDefinition) -> None:
        if self._sealed:
            raise RuntimeError("Rule registry is sealed")
        for name in (definition.id, *definition.aliases):
            if name in (RULE_FAULT, DOCUMENT_FAULT):
                raise ValueError(f"Reserved rule identifier: {name}")
            if name in self._names:
                raise ValueError(f"Duplicate rule identifier: {name}")
        self._rules[definition.id] = definition
        for name in (definition.id, *definition.aliases):
            self._names[name] = definition.id

    def seal(self) -> "RuleRegistry":
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def ids(self) -> list[str]:
        return sorted(self._rules)

    def resolve_id(self, name: str) -> str:
        """Map an identifier or alias to the canonical identifier."""
        try:
            return self._names[name]
        except KeyError:
            raise UnknownRule(name) from None

    def get(self, name: str) -> RuleDefinition:
        return self._rules[self.resolve_id(name)]

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[RuleDefinition]:
        return iter(self._rules[rule_id] for rule_id in self.ids())

    def __len__(self) -> int:
        return len(self._rules)

    def tags(self) -> list[str]:
        return sorted({tag for definition in self._rules.values() for tag in definition.tags})

    def rules_for_tag(self, tag: str) -> list[str]:
        matched = [d.id for d in self if tag in d.tags]
        if not matched:
            raise UnknownTag(tag)
        return matched
