"""Style files and rule configuration resolution.

A style is a base directive plus an ordered list of overrides::

    all
    rule 'MD013', :line_length => 99999
    exclude_rule 'MD024'

Resolution is a fold: start from the base (every rule enabled for ``all``,
registry defaults otherwise) and apply each override in order, so later
overrides win. The result is an immutable :class:`RuleConfiguration`.
"""
import ast
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Union

import yaml

from .errors import ConfigurationError, StyleSyntaxError
from .registry import RuleRegistry

logger = logging.getLogger(__name__)


class Base(Enum):
    """Base directive of a style."""
    DEFAULT = "default"   # registry defaults only
    ALL = "all"           # every registered rule


@dataclass(frozen=True)
class EnableRule:
    rule: str


@dataclass(frozen=True)
class ExcludeRule:
    rule: str


@dataclass(frozen=True)
class SetOption:
    rule: str
    name: str
    value: Any


@dataclass(frozen=True)
class EnableTag:
    tag: str


@dataclass(frozen=True)
class ExcludeTag:
    tag: str


Directive = Union[EnableRule, ExcludeRule, SetOption, EnableTag, ExcludeTag]


@dataclass(frozen=True)
class Style:
    """Unresolved style: base plus ordered overrides."""
    base: Base = Base.DEFAULT
    directives: tuple = ()
    source: str = "<default>"


@dataclass(frozen=True)
class RuleSetting:
    """Resolved per-rule settings."""
    enabled: bool
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "options": dict(self.options)}


@dataclass(frozen=True)
class RuleConfiguration:
    """Immutable mapping of rule id to its resolved settings."""
    settings: Mapping[str, RuleSetting]

    def __getitem__(self, rule_id: str) -> RuleSetting:
        return self.settings[rule_id]

    def is_enabled(self, rule_id: str) -> bool:
        return self.settings[rule_id].enabled

    def options(self, rule_id: str) -> Mapping[str, Any]:
        return self.settings[rule_id].options

    @property
    def enabled_rules(self) -> list[str]:
        return sorted(rule_id for rule_id, s in self.settings.items() if s.enabled)

    def to_dict(self) -> dict:
        return {rule_id: self.settings[rule_id].to_dict() for rule_id in sorted(self.settings)}


def resolve(style: Style, registry: RuleRegistry) -> RuleConfiguration:
    """
    Fold a style into a RuleConfiguration.

    Raises:
        UnknownRule: a directive names an unregistered rule
        UnknownTag: a tag directive names a tag no rule carries
        InvalidOption: an option is unknown or its value fails the schema
    """
    enabled: dict[str, bool] = {}
    options: dict[str, dict[str, Any]] = {}
    for definition in registry:
        enabled[definition.id] = style.base == Base.ALL or definition.default_enabled
        options[definition.id] = definition.defaults()

    for directive in style.directives:
        if isinstance(directive, EnableRule):
            enabled[registry.resolve_id(directive.rule)] = True
        elif isinstance(directive, ExcludeRule):
            enabled[registry.resolve_id(directive.rule)] = False
        elif isinstance(directive, SetOption):
            definition = registry.get(directive.rule)
            spec = definition.option(directive.name)
            options[definition.id][spec.name] = spec.validate(definition.id, directive.value)
        elif isinstance(directive, EnableTag):
            for rule_id in registry.rules_for_tag(directive.tag):
                enabled[rule_id] = True
        elif isinstance(directive, ExcludeTag):
            for rule_id in registry.rules_for_tag(directive.tag):
                enabled[rule_id] = False
        else:
            raise ConfigurationError(f"Unsupported directive: {directive!r}")

    settings = {
        rule_id: RuleSetting(enabled[rule_id], MappingProxyType(dict(options[rule_id])))
        for rule_id in enabled
    }
    configuration = RuleConfiguration(MappingProxyType(settings))
    logger.debug(
        f"Resolved style {style.source}: {len(configuration.enabled_rules)}/{len(settings)} rules enabled"
    )
    return configuration


# Ruby-style style files (.mdl_style.rb)

_RULE_RE = re.compile(r"""^rule\s+(['"])([^'"]+)\1\s*(?:,\s*(.*))?$""")
_EXCLUDE_RULE_RE = re.compile(r"""^exclude_rule\s+(['"])([^'"]+)\1$""")
_TAG_RE = re.compile(r"""^(exclude_tag|tag)\s+(?::(\w+)|(['"])(\w+)\3)$""")
_HASH_OPTION_RE = re.compile(r'^:(\w+)\s*=>\s*')
_KEYWORD_OPTION_RE = re.compile(r'^(\w+):\s+')
_WORD_ARRAY_RE = re.compile(r'^%w[\[(]([^\])]*)[\])]')
_SYMBOL_RE = re.compile(r'^:(\w+)')
_NUMBER_RE = re.compile(r'^-?\d[\d_]*')
_STRING_RE = re.compile(r"""^('(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*")""")
_BARE_RE = re.compile(r'^(true|false|nil)\b')


def _strip_comment(line: str) -> str:
    """Drop a trailing ``#`` comment that is not inside a quoted string."""
    quote = None
    escaped = False
    for idx, char in enumerate(line):
        if escaped:
            escaped = False
        elif quote:
            if char == quote:
                quote = None
            elif char == "\\":
                escaped = True
        elif char in "'\"":
            quote = char
        elif char == '#':
            return line[:idx]
    return line


def _parse_value(text: str) -> tuple[Any, str]:
    """Parse one Ruby literal from the start of ``text``; return (value, rest)."""
    text = text.lstrip()
    if m := _WORD_ARRAY_RE.match(text):
        return m.group(1).split(), text[m.end():]
    if m := _SYMBOL_RE.match(text):
        return m.group(1), text[m.end():]
    if m := _STRING_RE.match(text):
        return ast.literal_eval(m.group(1)), text[m.end():]
    if m := _BARE_RE.match(text):
        return {"true": True, "false": False, "nil": None}[m.group(1)], text[m.end():]
    if m := _NUMBER_RE.match(text):
        return int(m.group().replace('_', '')), text[m.end():]
    if text.startswith('['):
        items = []
        rest = text[1:].lstrip()
        while not rest.startswith(']'):
            value, rest = _parse_value(rest)
            items.append(value)
            rest = rest.lstrip()
            if rest.startswith(','):
                rest = rest[1:].lstrip()
            elif not rest.startswith(']'):
                raise ValueError(f"expected ',' or ']' in array: {text!r}")
        return items, rest[1:]
    raise ValueError(f"unrecognised value: {text!r}")


def _parse_options(text: str) -> list[tuple[str, Any]]:
    pairs = []
    rest = text.strip()
    while rest:
        m = _HASH_OPTION_RE.match(rest) or _KEYWORD_OPTION_RE.match(rest)
        if m is None:
            raise ValueError(f"expected option key: {rest!r}")
        value, rest = _parse_value(rest[m.end():])
        pairs.append((m.group(1), value))
        rest = rest.strip()
        if rest.startswith(','):
            rest = rest[1:].strip()
        elif rest:
            raise ValueError(f"expected ',' between options: {rest!r}")
    return pairs


def parse_ruby_style(text: str, source: str = "<style>") -> Style:
    """
    Parse an ``.mdl_style.rb`` style file.

    Recognised directives: ``all``, ``rule 'ID'[, options]``,
    ``exclude_rule 'ID'``, ``tag :name``, ``exclude_tag :name``.

    Raises:
        StyleSyntaxError: a line is not a recognised directive
    """
    base = Base.DEFAULT
    directives: list[Directive] = []

    for number, raw in enumerate(text.splitlines(), 1):
        line = _strip_comment(raw).strip()
        if not line:
            continue

        if line == "all":
            base = Base.ALL
            continue

        try:
            if m := _RULE_RE.match(line):
                rule_id = m.group(2)
                directives.append(EnableRule(rule_id))
                for name, value in _parse_options(m.group(3) or ""):
                    directives.append(SetOption(rule_id, name, value))
            elif m := _EXCLUDE_RULE_RE.match(line):
                directives.append(ExcludeRule(m.group(2)))
            elif m := _TAG_RE.match(line):
                tag = m.group(2) or m.group(4)
                directives.append(ExcludeTag(tag) if m.group(1) == "exclude_tag" else EnableTag(tag))
            else:
                raise ValueError("unknown directive")
        except (ValueError, SyntaxError) as e:
            logger.debug(f"{source}:{number}: {e}")
            raise StyleSyntaxError(source, number, raw) from e

    return Style(base=base, directives=tuple(directives), source=source)


# YAML style files (.mdlint.yml)

def parse_yaml_style(text: str, source: str = "<style>") -> Style:
    """
    Parse a YAML style file.

    Shape::

        all: true
        rules:
          MD013: {line_length: 99999}
          MD024: false
        tags:
          html: false
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{source}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: style must be a mapping")

    unknown = set(data) - {"all", "rules", "tags"}
    if unknown:
        raise ConfigurationError(f"{source}: unknown keys: {', '.join(sorted(map(str, unknown)))}")

    base_value = data.get("all", False)
    if not isinstance(base_value, bool):
        raise ConfigurationError(f"{source}: 'all' must be true or false")
    base = Base.ALL if base_value else Base.DEFAULT

    # Sections apply in the order they appear in the file
    directives: list[Directive] = []
    for section, entries in data.items():
        if section == "all":
            continue
        if not isinstance(entries, dict) and entries is not None:
            raise ConfigurationError(f"{source}: '{section}' must be a mapping")
        if section == "tags":
            directives.extend(_yaml_tags(entries or {}, source))
        elif section == "rules":
            directives.extend(_yaml_rules(entries or {}, source))

    return Style(base=base, directives=tuple(directives), source=source)


def _yaml_tags(entries: dict, source: str) -> list[Directive]:
    directives: list[Directive] = []
    for tag, value in entries.items():
        if not isinstance(value, bool):
            raise ConfigurationError(f"{source}: tag {tag!r} must be true or false")
        directives.append(EnableTag(str(tag)) if value else ExcludeTag(str(tag)))
    return directives


def _yaml_rules(entries: dict, source: str) -> list[Directive]:
    directives: list[Directive] = []
    for rule_id, value in entries.items():
        rule_id = str(rule_id)
        if value is True or value is None:
            directives.append(EnableRule(rule_id))
        elif value is False:
            directives.append(ExcludeRule(rule_id))
        elif isinstance(value, dict):
            directives.append(EnableRule(rule_id))
            directives.extend(SetOption(rule_id, str(name), v) for name, v in value.items())
        else:
            raise ConfigurationError(
                f"{source}: rule {rule_id} must be true, false or a mapping of options"
            )
    return directives


def load_style(path: Path) -> Style:
    """Read a style file, choosing the reader by extension."""
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Cannot read style file {path}: {e}") from e

    if path.suffix in (".yml", ".yaml"):
        return parse_yaml_style(text, source=str(path))
    return parse_ruby_style(text, source=str(path))
