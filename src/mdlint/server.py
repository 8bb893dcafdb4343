"""mdlint MCP server.

Exposes the linter over stdio as three tools: lint_markdown,
lint_markdown_text and get_lint_rules. Style discovery follows the same
order as the CLI, relative to the directory the server was started in.
"""
import logging
import sys

from mcp.server.fastmcp import FastMCP

from mdlint.config import Config
from mdlint.core.linter.errors import ConfigurationError
from mdlint.tools import lint

# Load configuration
config = Config.load()

# stdout carries JSON-RPC, so logs go to stderr only
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)

logger = logging.getLogger(__name__)

mcp = FastMCP("mdlint")


def _describe_style() -> str:
    try:
        style = config.find_style()
    except ConfigurationError as e:
        return f"unavailable ({e})"
    return str(style) if style else "built-in defaults"


def main():
    """Run the MCP server on stdio."""
    logger.info(f"mdlint v{config.version} starting (workers={config.workers})")
    logger.info(f"Style: {_describe_style()}")

    try:
        lint.register(mcp, config)
        logger.info("Tools registered: lint_markdown, lint_markdown_text, get_lint_rules")

        mcp.run(transport="stdio")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
