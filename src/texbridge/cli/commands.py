#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/cli/commands.py
"""Subcommand handlers for the texbridge CLI.

Each handler receives the parsed arguments and returns the text to emit
and the exit code. Library errors propagate to :func:`texbridge.cli.main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Union

from texbridge.api import parse, render, write
from texbridge.ast.nodes import Document
from texbridge.ast.serialization import (
    ast_to_json,
    document_to_editor_json,
    editor_json_to_document,
    json_to_ast,
)
from texbridge.cli.builder import EXIT_ERROR, EXIT_SUCCESS
from texbridge.cli.output import render_highlighted_source, should_use_rich_output
from texbridge.exceptions import SerializationError, ValidationError
from texbridge.highlight import tokenize
from texbridge.utils.encoding import read_text_with_encoding_detection

logger = logging.getLogger(__name__)

CommandResult = tuple[str, int]


def _read_source(name: str) -> Union[bytes, Path]:
    """Return stdin bytes for ``-``, otherwise the path to read."""
    if name == "-":
        return sys.stdin.buffer.read()
    return Path(name)


def _read_text(name: str, encoding: str = "utf-8") -> str:
    source = _read_source(name)
    data = source.read_bytes() if isinstance(source, Path) else source
    return read_text_with_encoding_detection(data, encoding=encoding)


def parse_macro_arguments(values: list[str]) -> dict[str, str]:
    """Turn ``NAME=EXPANSION`` strings into a macro mapping.

    Raises
    ------
    ValidationError
        If a value has no ``=`` or an empty name

    """
    macros = {}
    for value in values:
        name, separator, expansion = value.partition("=")
        if not separator or not name.strip():
            raise ValidationError(
                f"Invalid macro '{value}', expected NAME=EXPANSION", parameter_name="macro", parameter_value=value
            )
        macros[name.strip()] = expansion
    return macros


def handle_parse(args: argparse.Namespace) -> CommandResult:
    """Parse markup and emit the node JSON or editor JSON tree."""
    overrides = {"parse_preamble": args.parse_preamble}
    if args.encoding:
        overrides["encoding"] = args.encoding
    doc = parse(_read_source(args.input), **overrides)
    if args.editor_json:
        return json.dumps(document_to_editor_json(doc), indent=args.indent) + "\n", EXIT_SUCCESS
    return ast_to_json(doc, indent=args.indent) + "\n", EXIT_SUCCESS


def handle_write(args: argparse.Namespace) -> CommandResult:
    """Write markup from a node JSON or editor JSON tree."""
    text = _read_text(args.input)
    if args.editor_json:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Invalid JSON: {e}", original_error=e) from e
        doc = editor_json_to_document(data)
    else:
        node = json_to_ast(text)
        if not isinstance(node, Document):
            raise SerializationError(f"Expected a Document at the root, got {type(node).__name__}")
        doc = node
    return write(doc, include_preamble=args.include_preamble, document_class=args.document_class), EXIT_SUCCESS


def handle_render(args: argparse.Namespace) -> CommandResult:
    """Render markup to an HTML preview fragment."""
    macros = parse_macro_arguments(args.macro)
    html = render(_read_text(args.input), strict_errors=args.strict, macros=macros or None)
    return html + "\n", EXIT_SUCCESS


def handle_roundtrip(args: argparse.Namespace) -> CommandResult:
    """Check that writing and re-parsing a parsed document is stable."""
    first = parse(_read_source(args.input))
    second = parse(write(first))
    if first == second:
        return "OK\n", EXIT_SUCCESS
    logger.info(f"Round trip changed the tree: {len(first.children)} blocks became {len(second.children)}")
    return "MISMATCH\n", EXIT_ERROR


def handle_tokens(args: argparse.Namespace) -> CommandResult:
    """List highlighting tokens, one per line, or print the coloured source with --rich."""
    tokens = tokenize(_read_text(args.input))
    if should_use_rich_output(args):
        return render_highlighted_source(tokens), EXIT_SUCCESS
    lines = [f"{token.kind.value}\t{token.start}\t{token.text!r}\n" for token in tokens]
    return "".join(lines), EXIT_SUCCESS


COMMAND_HANDLERS: dict[str, Callable[[argparse.Namespace], CommandResult]] = {
    "parse": handle_parse,
    "write": handle_write,
    "render": handle_render,
    "roundtrip": handle_roundtrip,
    "tokens": handle_tokens,
}
