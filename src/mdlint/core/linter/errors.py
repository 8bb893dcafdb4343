"""Exception hierarchy for style resolution.

Configuration errors are fatal: they are raised before any document is
parsed. Problems inside a document or a single rule never raise out of the
engine; they are recorded as violations instead.
"""


class MdlintError(Exception):
    """Base class for all mdlint errors."""


class ConfigurationError(MdlintError):
    """The style could not be turned into a rule configuration."""


class UnknownRule(ConfigurationError):
    """A directive referenced a rule that is not registered."""

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Unknown rule: {rule_id}")


class UnknownTag(ConfigurationError):
    """A tag directive referenced a tag no registered rule carries."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Unknown tag: {tag}")


class InvalidOption(ConfigurationError):
    """An option value does not match the rule's declared schema."""

    def __init__(self, rule_id: str, option: str, reason: str):
        self.rule_id = rule_id
        self.option = option
        self.reason = reason
        super().__init__(f"Invalid option {option!r} for rule {rule_id}: {reason}")


class StyleSyntaxError(ConfigurationError):
    """A style file line could not be parsed."""

    def __init__(self, source: str, line: int, text: str):
        self.source = source
        self.line = line
        self.text = text
        super().__init__(f"{source}:{line}: cannot parse style directive: {text.strip()}")
