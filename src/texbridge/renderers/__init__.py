#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/texbridge/renderers/__init__.py
"""Renderers for Document trees and LaTeX markup.

Available renderers:
- LatexRenderer: Write a Document tree back to LaTeX markup
- HtmlPreviewRenderer: Render LaTeX markup to an HTML preview fragment

The math helpers used by the preview (``typeset_math`` and
``expand_macros``) live in :mod:`texbridge.renderers.math`.

Examples
--------
Write a tree back to markup:

    >>> from texbridge.ast import Document, Heading, Text
    >>> from texbridge.renderers import LatexRenderer
    >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
    >>> markup = LatexRenderer().render_to_string(doc)

Render a preview with custom macros:

    >>> from texbridge.options import HtmlPreviewOptions
    >>> from texbridge.renderers import HtmlPreviewRenderer
    >>> renderer = HtmlPreviewRenderer(HtmlPreviewOptions(macros={"RR": r"\\mathbb{R}"}))
    >>> html = renderer.render_to_string(r"$x \\in \\RR$")

"""

from texbridge.renderers.base import BaseRenderer, InlineContentMixin
from texbridge.renderers.html import RENDER_STAGES, HtmlPreviewRenderer, RenderContext
from texbridge.renderers.latex import LatexRenderer
from texbridge.renderers.math import expand_macros, typeset_math

__all__ = [
    "BaseRenderer",
    "InlineContentMixin",
    "LatexRenderer",
    "HtmlPreviewRenderer",
    "RenderContext",
    "RENDER_STAGES",
    "expand_macros",
    "typeset_math",
]
