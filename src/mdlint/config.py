"""Configuration management with environment variable overrides."""
from dataclasses import dataclass, field
from pathlib import Path
import logging
import os

from mdlint import __version__
from mdlint.core.linter.errors import ConfigurationError
from mdlint.core.linter.reporter import FORMATS

logger = logging.getLogger(__name__)

# Searched in the working directory when no style is given explicitly
STYLE_FILENAMES = (".mdl_style.rb", ".mdlint.yml", ".mdlint.yaml")


@dataclass
class Config:
    """Configuration for the mdlint CLI and MCP server."""

    # Style file; None means search the working directory
    style_path: Path | None = None

    # Output
    output_format: str = "text"   # "text" or "json"

    # Batch linting
    workers: int = 4

    # Parsing
    front_matter: bool = True     # Treat a leading YAML block as metadata

    # Logging
    log_level: str = "WARNING"

    # Directory searched for style files
    search_dir: Path = field(default_factory=Path.cwd)

    # Versioning
    version: str = __version__

    @classmethod
    def load(cls) -> "Config":
        """Load config with environment variable overrides."""
        config = cls()

        if val := os.environ.get("MDLINT_STYLE"):
            config.style_path = Path(val).expanduser()

        if val := os.environ.get("MDLINT_FORMAT"):
            if val in FORMATS:
                config.output_format = val
            else:
                logger.warning(f"Ignoring MDLINT_FORMAT={val!r} (expected one of {', '.join(FORMATS)})")

        if val := os.environ.get("MDLINT_WORKERS"):
            try:
                config.workers = max(1, int(val))
            except ValueError:
                logger.warning(f"Ignoring MDLINT_WORKERS={val!r} (not an integer)")

        if val := os.environ.get("MDLINT_FRONT_MATTER"):
            config.front_matter = val.lower() in ("true", "1", "yes")

        if val := os.environ.get("MDLINT_LOG_LEVEL"):
            config.log_level = val.upper()

        return config

    def find_style(self, explicit: Path | None = None) -> Path | None:
        """
        Locate the style file to use.

        Order: explicit path, ``style_path`` (MDLINT_STYLE), then the first of
        STYLE_FILENAMES present in ``search_dir``. An explicit or configured
        path that does not exist is a configuration error.
        """
        for candidate in (explicit, self.style_path):
            if candidate is None:
                continue
            candidate = Path(candidate).expanduser()
            if not candidate.is_file():
                raise ConfigurationError(f"Style file not found: {candidate}")
            return candidate

        for name in STYLE_FILENAMES:
            candidate = self.search_dir / name
            if candidate.is_file():
                logger.debug(f"Using style file {candidate}")
                return candidate
        return None

    def rule_configuration(self, registry, explicit: Path | None = None):
        """Resolve the active style against a registry.

        Raises:
            ConfigurationError: if the style cannot be read or resolved
        """
        from mdlint.core.linter.style import Style, load_style, resolve

        path = self.find_style(explicit)
        style = load_style(path) if path is not None else Style()
        return resolve(style, registry)
