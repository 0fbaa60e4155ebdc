#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/utils/__init__.py
"""Utility modules for the texbridge package.

This package contains helpers for scanning LaTeX source, decoding input
bytes and building HTML fragments.
"""

from texbridge.utils.html_utils import escape_html
from texbridge.utils.latex import (
    extract_body,
    extract_preamble_metadata,
    find_matching_brace,
    parse_column_spec,
    strip_comments,
)

__all__ = [
    "escape_html",
    "extract_body",
    "extract_preamble_metadata",
    "find_matching_brace",
    "parse_column_spec",
    "strip_comments",
]
