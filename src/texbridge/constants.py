#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the texbridge library.

This module centralizes the fixed vocabulary of the supported LaTeX subset
(sectioning commands, list and table environments, mark commands) together
with the defaults used by the option classes.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Supported LaTeX Vocabulary - Commands and environments the core understands
3. Parser Defaults
4. Writer Defaults
5. HTML Preview Defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Mark = Literal["bold", "italic", "underline", "code", "strike", "highlight"]
Alignment = Literal["left", "center", "right"]

# =============================================================================
# Supported LaTeX Vocabulary
# =============================================================================

# Declaration order doubles as nesting order when writing: the first mark
# is wrapped innermost.
MARK_ORDER: tuple[Mark, ...] = ("bold", "italic", "underline", "code", "strike", "highlight")

MARK_COMMANDS: dict[Mark, str] = {
    "bold": "textbf",
    "italic": "textit",
    "underline": "underline",
    "code": "texttt",
    "strike": "st",
    "highlight": "hl",
}

# Commands accepted on input, including aliases that are never written back
MARK_COMMAND_ALIASES: dict[str, Mark] = {
    "textbf": "bold",
    "textit": "italic",
    "emph": "italic",
    "underline": "underline",
    "texttt": "code",
    "st": "strike",
    "sout": "strike",
    "hl": "highlight",
}

LINK_COMMAND = "href"

HEADING_COMMANDS: tuple[str, ...] = ("section", "subsection", "subsubsection")

LIST_ENVIRONMENTS: dict[str, bool] = {
    "itemize": False,
    "enumerate": True,
}

QUOTE_ENVIRONMENTS: tuple[str, ...] = ("quote", "quotation")

TABLE_RULE_COMMANDS: tuple[str, ...] = ("hline", "toprule", "midrule", "bottomrule")

COLUMN_ALIGNMENTS: dict[str, Alignment] = {
    "l": "left",
    "c": "center",
    "r": "right",
    "p": "left",
    "m": "left",
    "b": "left",
    "X": "left",
}

DISPLAY_MATH_ENVIRONMENTS: tuple[str, ...] = ("equation", "equation*", "displaymath")

# Upper bound for a *{n}{..} column repeat
MAX_COLUMN_REPEAT = 64

# =============================================================================
# Parser Defaults
# =============================================================================

DEFAULT_LATEX_PARSE_PREAMBLE = True
DEFAULT_LATEX_STRICT_MODE = False
DEFAULT_LATEX_ENCODING = "utf-8"

# =============================================================================
# Writer Defaults
# =============================================================================

DEFAULT_LATEX_DOCUMENT_CLASS = "article"
DEFAULT_LATEX_INCLUDE_PREAMBLE = True
DEFAULT_LATEX_PACKAGES = ["amsmath", "hyperref", "soul", "xcolor"]
DEFAULT_LATEX_TABLE_PLACEMENT = "h"

# =============================================================================
# HTML Preview Defaults
# =============================================================================

DEFAULT_HTML_STRICT_ERRORS = False
DEFAULT_HTML_CONTAINER_CLASS = "latex-document"
DEFAULT_HTML_ERROR_CLASS = "latex-preview-error"
DEFAULT_MATH_ERROR_CLASS = "math-error"

BLOCK_LEVEL_TAGS: tuple[str, ...] = (
    "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "pre", "div", "table", "blockquote"
)

# =============================================================================
# Serialization
# =============================================================================

AST_SCHEMA_VERSION = 1
