#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/cli/__init__.py
"""Command-line interface for texbridge.

Usage::

    texbridge parse doc.tex --editor-json
    texbridge write tree.json --out doc.tex
    texbridge render doc.tex --macro 'RR=\\mathbb{R}'
    texbridge roundtrip doc.tex
    texbridge tokens doc.tex --rich

Every command reads a file path or ``-`` for stdin.
"""

from __future__ import annotations

import argparse
import logging
import sys

from texbridge.cli.builder import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_VALIDATION_ERROR,
    create_parser,
)
from texbridge.cli.commands import COMMAND_HANDLERS
from texbridge.exceptions import ParsingError, RenderingError, TexBridgeError, ValidationError
from texbridge.logging_utils import configure_logging
from texbridge.utils.io_utils import write_content

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging from the parsed arguments; ``--trace`` implies DEBUG."""
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _exit_code_for(error: TexBridgeError) -> int:
    if isinstance(error, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(error, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(error, RenderingError):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    handler = COMMAND_HANDLERS[parsed_args.command]
    try:
        output, exit_code = handler(parsed_args)
    except TexBridgeError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return _exit_code_for(e)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        if parsed_args.out:
            write_content(output, parsed_args.out)
        else:
            sys.stdout.write(output)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
