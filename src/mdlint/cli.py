"""CLI for mdlint.

Lints markdown files against a style and lists the available rules.
"""
import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path

from mdlint import __version__
from mdlint.config import Config
from mdlint.core.linter.errors import ConfigurationError
from mdlint.core.linter.reporter import FORMATS

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdlint",
        description="Check markdown files against a configurable style"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # lint command
    lint = subparsers.add_parser("lint", help="Lint markdown files or directories")
    lint.add_argument("paths", nargs="+", type=Path, help="Files or directories to lint")
    lint.add_argument(
        "-c", "--config", type=Path,
        help="Style file (.mdl_style.rb or .mdlint.yml)"
    )
    lint.add_argument(
        "-f", "--format", choices=FORMATS, default=None,
        help="Output format (default: text)"
    )
    lint.add_argument(
        "-w", "--workers", type=int, default=None,
        help="Documents linted concurrently (default: 4)"
    )
    lint.add_argument(
        "--no-front-matter", action="store_true",
        help="Treat a leading YAML block as ordinary markdown"
    )
    lint.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress to stderr (-vv for debug)"
    )

    # rules command
    rules = subparsers.add_parser("rules", help="List rules and their state")
    rules.add_argument(
        "-c", "--config", type=Path,
        help="Style file used to show enabled state"
    )
    rules.add_argument(
        "-f", "--format", choices=FORMATS, default=None,
        help="Output format (default: text)"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    config = Config.load()

    verbosity = getattr(args, "verbose", 0)
    level = {0: config.log_level, 1: "INFO"}.get(verbosity, "DEBUG")
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    try:
        if args.command == "lint":
            code = asyncio.run(lint_command(args, config))
        else:
            code = rules_command(args, config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = EXIT_ERROR

    sys.exit(code)


async def lint_command(args, config: Config) -> int:
    """Execute the lint command and return the exit code."""
    from mdlint.core.linter.engine import lint_paths
    from mdlint.core.linter.reporter import print_results
    from mdlint.core.linter.rules import build_registry

    registry = build_registry()
    configuration = config.rule_configuration(registry, args.config)

    workers = args.workers if args.workers is not None else config.workers
    output_format = args.format or config.output_format
    front_matter = config.front_matter and not args.no_front_matter

    # First Ctrl-C stops taking new documents; results so far are still reported
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, stop.set)

    try:
        batch = await lint_paths(
            args.paths,
            registry=registry,
            configuration=configuration,
            workers=workers,
            front_matter=front_matter,
            stop=stop,
        )
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)

    print_results(batch.results, output_format, dropped=batch.dropped)
    logger.info(f"Linted {len(batch.results)} documents, {batch.total_violations} violations")

    if batch.faulted or batch.dropped:
        return EXIT_ERROR
    if batch.total_violations:
        return EXIT_VIOLATIONS
    return EXIT_CLEAN


def rules_command(args, config: Config) -> int:
    """Execute the rules command."""
    from rich.console import Console

    from mdlint.core.linter.reporter import rules_json, rules_table
    from mdlint.core.linter.rules import build_registry

    registry = build_registry()
    configuration = config.rule_configuration(registry, args.config)

    console = Console(highlight=False, soft_wrap=True)
    if (args.format or config.output_format) == "json":
        console.print(rules_json(registry, configuration), markup=False, emoji=False)
    else:
        console.print(rules_table(registry, configuration))
    return EXIT_CLEAN


if __name__ == "__main__":
    main()
