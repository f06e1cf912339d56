"""Entry point for ``python -m chatterbox``.

Parses a Chatterbox source file and prints either a console summary or
the rendered HTML tree.  Uses stdlib :mod:`argparse` for argument parsing.

Exit codes:
    0 -- The block parsed successfully.
    1 -- An error occurred (file not found, unreadable, settings error,
         invalid frontmatter).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from chatterbox.config import ConfigError, load_settings, resolve_default_config
from chatterbox.log import get_logger, setup_logging
from chatterbox.models.config import CHATTERBOX_MODES
from chatterbox.output import print_parse_result
from chatterbox.parser import ParseFailure, ParseSuccess, parse_chatterbox_file
from chatterbox.render import render_result, to_html

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="chatterbox",
        description="Parse a Chatterbox chat transcript and show or render it.",
    )
    parser.add_argument(
        "source_file",
        type=str,
        help="Path to the Chatterbox source file.",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        default=False,
        help="Print the rendered HTML tree instead of a summary.",
    )
    parser.add_argument(
        "--mode",
        choices=CHATTERBOX_MODES,
        default=None,
        help="Override the rendering mode from the configuration.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the chatterbox CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``
            when ``None``.

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        setup_logging("DEBUG" if args.verbose else settings.log_level)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    source_path = Path(args.source_file)
    if not source_path.is_file():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return 1

    try:
        result = parse_chatterbox_file(source_path, defaults=resolve_default_config(settings))
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if isinstance(result, ParseSuccess) and args.mode is not None:
        result = ParseSuccess(
            config=result.config.model_copy(update={"mode": args.mode}),
            entries=result.entries,
        )

    if args.html:
        tree = asyncio.run(
            render_result(
                result,
                source_path=str(source_path),
                markdown_fixes=settings.apply_markdown_fixes,
            )
        )
        sys.stdout.write(to_html(tree))
    else:
        print_parse_result(result, source=str(source_path))

    if isinstance(result, ParseFailure):
        logger.error("Frontmatter of %s is invalid", source_path)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
