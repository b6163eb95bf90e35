"""Command-line entry point for lexgen."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .codegen.cli_integration import add_codegen_args, handle_codegen_command
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lexgen",
        description="Generate Rust declarations from lexicon schema documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lexgen app.bsky.actor.profile.json
  lexgen lexicons/*.json -o src/lexicons.rs --prelude
  lexgen --options-override options.yaml --expand-records profile.json
  curl -s https://example.com/profile.json | lexgen --stdin
  lexgen --list-languages
        """.strip(),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    add_codegen_args(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Arguments without the program name. Defaults to ``sys.argv[1:]``.

    Returns:
        Process exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger.debug(f"Parsed arguments: {args}")

    try:
        return handle_codegen_command(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
