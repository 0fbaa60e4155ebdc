"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/texbridge/cli/output.py
import argparse
import sys
from typing import Iterable, TextIO

from rich.console import Console
from rich.text import Text

from texbridge.highlight import Token, TokenType

TOKEN_STYLES: dict[TokenType, str] = {
    TokenType.COMMENT: "dim green",
    TokenType.MATH_DELIMITER: "bold magenta",
    TokenType.MATH: "magenta",
    TokenType.ENVIRONMENT: "bold blue",
    TokenType.COMMAND: "cyan",
    TokenType.BRACKET: "yellow",
    TokenType.TEXT: "",
}


def should_use_rich_output(args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments
    stream : optional, default None
        Uses sys.stdout unless otherwise specified.

    Returns
    -------
    bool
        True if Rich output should be used

    Notes
    -----
    Rich output is used when:
    - The --rich flag is set
    - AND either --force-rich is set OR the stream is a TTY

    """
    if not getattr(args, "rich", False):
        return False

    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def render_highlighted_source(tokens: Iterable[Token], width: int | None = None) -> str:
    """Render tokens as styled terminal text.

    Parameters
    ----------
    tokens : iterable of Token
        Tokens covering the source
    width : int, optional
        Console width; defaults to the detected terminal width

    Returns
    -------
    str
        The source with ANSI styles applied per token kind

    """
    text = Text()
    for token in tokens:
        text.append(token.text, style=TOKEN_STYLES[token.kind])

    console = Console(force_terminal=True, color_system="standard", width=width)
    with console.capture() as capture:
        console.print(text, end="", soft_wrap=True, highlight=False)
    return capture.get()
