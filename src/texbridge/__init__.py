"""texbridge - LaTeX subset conversion core for dual-view editors.

texbridge keeps one document model across three representations: LaTeX
markup text, a structured Document tree edited by a rich-text surface, and
an HTML preview fragment.

Key Features
------------
- Block parser for sections, lists, tables, quotes and paragraphs
- Inline parser for marks (bold, italic, underline, code, strike,
  highlight), links, inline/display math and line breaks
- Deterministic LaTeX writer that round-trips parser output
- HTML preview renderer with MathML math via latex2mathml
- Node JSON and editor (ProseMirror-style) JSON interchange
- Highlighting tokenizer for the plain-text editing surface

Requirements
------------
- Python 3.10+
- pylatexenc, latex2mathml, chardet, rich (CLI colour output)

Examples
--------
Parse, edit and write back:

    >>> from texbridge import parse, write
    >>> doc = parse(r"\\section{Intro}")
    >>> markup = write(doc)

Render a preview:

    >>> from texbridge import render
    >>> html = render(r"Hello $E=mc^2$.")

See Also
--------
texbridge.ast : Document tree nodes, visitors and serialization
texbridge.highlight : Source highlighting tokenizer

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "texbridge requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from texbridge.api import parse, render, write  # noqa: E402
from texbridge.ast.nodes import Document  # noqa: E402
from texbridge.exceptions import (  # noqa: E402
    InvalidOptionsError,
    MathRenderingError,
    ParsingError,
    RenderingError,
    SerializationError,
    TexBridgeError,
    ValidationError,
)
from texbridge.options import HtmlPreviewOptions, LatexParserOptions, LatexWriterOptions  # noqa: E402

__all__ = [
    "__version__",
    "parse",
    "write",
    "render",
    "Document",
    "HtmlPreviewOptions",
    "LatexParserOptions",
    "LatexWriterOptions",
    "TexBridgeError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "MathRenderingError",
    "SerializationError",
]
