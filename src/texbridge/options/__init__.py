#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the texbridge parser, writer and preview renderer.

Each component takes a frozen dataclass of options; use
``options.create_updated(field=value)`` to derive a modified copy.
"""

from __future__ import annotations

from texbridge.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from texbridge.options.html import HtmlPreviewOptions, MathTypesetter
from texbridge.options.latex import LatexParserOptions, LatexWriterOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "HtmlPreviewOptions",
    "LatexParserOptions",
    "LatexWriterOptions",
    "MathTypesetter",
]
