"""lint_markdown tool implementation."""
import asyncio
import logging
from pathlib import Path

from mdlint.config import Config
from mdlint.core.linter import engine
from mdlint.core.linter.errors import ConfigurationError
from mdlint.core.linter.rules import build_registry

logger = logging.getLogger(__name__)


def register(mcp, config: Config):
    """Register the lint tools with the MCP server."""
    registry = build_registry()

    def _configuration(style_path: str | None):
        explicit = Path(style_path).expanduser() if style_path else None
        return config.rule_configuration(registry, explicit)

    @mcp.tool()
    async def lint_markdown(
        path: str,
        style_path: str | None = None
    ) -> dict:
        """
        Lint a markdown file, or every .md/.markdown file below a directory.

        Rules and options come from the style file (style_path, MDLINT_STYLE,
        or .mdl_style.rb / .mdlint.yml in the server's working directory).
        With no style file the built-in defaults apply.

        Args:
            path: Markdown file or directory
            style_path: Optional style file overriding the configured one

        Returns:
            Dictionary with:
            - results (list): One entry per document with path, total_violations,
              warnings, errors, fault and violations (rule, line, column,
              message, severity)
            - dropped (list): Documents not linted
            - total_violations (int): Sum over all documents

        Example:
            {
                "path": "docs/",
                "style_path": "docs/.mdl_style.rb"
            }
        """
        target = Path(path).expanduser()
        if not target.exists():
            return {"error": f"Path not found: {target}"}

        try:
            configuration = _configuration(style_path)
        except ConfigurationError as e:
            return {"error": str(e)}

        logger.info(f"Linting {target} (style={style_path or config.style_path})")

        batch = await engine.lint_paths(
            [target],
            registry=registry,
            configuration=configuration,
            workers=config.workers,
            front_matter=config.front_matter,
        )

        logger.info(
            f"Lint complete: {batch.total_violations} violations "
            f"in {len(batch.results)} documents"
        )

        response = batch.to_dict()
        response["total_violations"] = batch.total_violations
        return response

    @mcp.tool()
    async def lint_markdown_text(
        content: str,
        style_path: str | None = None
    ) -> dict:
        """
        Lint markdown passed inline instead of read from disk.

        Args:
            content: Markdown source text
            style_path: Optional style file overriding the configured one

        Returns:
            A single document result (see lint_markdown), reported under the
            path "<text>".
        """
        try:
            configuration = _configuration(style_path)
        except ConfigurationError as e:
            return {"error": str(e)}

        result = await asyncio.to_thread(
            engine.lint_content,
            content,
            "<text>",
            registry=registry,
            configuration=configuration,
            front_matter=config.front_matter,
        )
        return result.to_dict()

    @mcp.tool()
    async def get_lint_rules() -> dict:
        """
        Get list of available lint rules with descriptions.

        Returns:
            Dictionary mapping rule ids to their descriptions.

        Example response:
            {
                "rules": {
                    "MD001": "Header levels should only increment by one level at a time.",
                    "MD013": "Line length.",
                    ...
                }
            }
        """
        return {"rules": engine.get_available_rules(registry)}
