#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/cli/builder.py
"""Argument parser construction for the texbridge CLI."""

from __future__ import annotations

import argparse

from texbridge import __version__
from texbridge.options.html import HtmlPreviewOptions
from texbridge.options.latex import LatexParserOptions, LatexWriterOptions

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _create_common_parser() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--out", "-o", metavar="FILE", help="Write output to FILE instead of stdout")
    common.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    common.add_argument("--log-file", metavar="FILE", help="Also append log output to FILE")
    common.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    return common


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subparser per command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser; the chosen command is stored in ``command``

    """
    common = _create_common_parser()
    parser = argparse.ArgumentParser(
        prog="texbridge",
        description="Convert between LaTeX markup, Document trees and HTML previews.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    parse_cmd = subparsers.add_parser("parse", parents=[common], help="Parse markup into a JSON tree")
    parse_cmd.add_argument("input", help="LaTeX file, or - for stdin")
    parse_cmd.add_argument("--editor-json", action="store_true", help="Emit editor (ProseMirror-style) JSON")
    parse_cmd.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parse_cmd.add_argument("--encoding", default=None, help=LatexParserOptions.option_help("encoding"))
    parse_cmd.add_argument(
        "--no-parse-preamble",
        dest="parse_preamble",
        action="store_false",
        help=f"Do not {LatexParserOptions.option_help('parse_preamble').lower()}",
    )

    write_cmd = subparsers.add_parser("write", parents=[common], help="Write markup from a JSON tree")
    write_cmd.add_argument("input", help="JSON file, or - for stdin")
    write_cmd.add_argument("--editor-json", action="store_true", help="Read editor (ProseMirror-style) JSON")
    write_cmd.add_argument(
        "--no-preamble",
        dest="include_preamble",
        action="store_false",
        help="Write only the body blocks",
    )
    write_cmd.add_argument("--document-class", default=None, help=LatexWriterOptions.option_help("document_class"))

    render_cmd = subparsers.add_parser("render", parents=[common], help="Render markup to an HTML preview")
    render_cmd.add_argument("input", help="LaTeX file, or - for stdin")
    render_cmd.add_argument("--strict", action="store_true", help=HtmlPreviewOptions.option_help("strict_errors"))
    render_cmd.add_argument(
        "--macro",
        action="append",
        default=[],
        metavar="NAME=EXPANSION",
        help=HtmlPreviewOptions.option_help("macros"),
    )

    roundtrip_cmd = subparsers.add_parser(
        "roundtrip", parents=[common], help="Check that parse(write(parse(x))) equals parse(x)"
    )
    roundtrip_cmd.add_argument("input", help="LaTeX file, or - for stdin")

    tokens_cmd = subparsers.add_parser("tokens", parents=[common], help="List highlighting tokens")
    tokens_cmd.add_argument("input", help="LaTeX file, or - for stdin")
    tokens_cmd.add_argument(
        "--rich",
        action="store_true",
        help="Print the source coloured by token kind (automatically disabled when output is piped)",
    )
    tokens_cmd.add_argument("--force-rich", action="store_true", help="Use coloured output even when piped")

    return parser
