#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/parsers/__init__.py
"""Parsers turning LaTeX markup into Document trees.

``LatexParser`` handles block structure; ``parse_inline`` handles the
content of a single line (marks, links, math and line breaks).
"""

from texbridge.parsers.base import BaseParser
from texbridge.parsers.inline import format_run, parse_inline
from texbridge.parsers.latex import Cursor, LatexParser, ScanResult

__all__ = ["BaseParser", "Cursor", "LatexParser", "ScanResult", "format_run", "parse_inline"]
