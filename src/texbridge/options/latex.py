#  Copyright (c) 2025 Tom Villani, Ph.D.

# texbridge/options/latex.py
"""Configuration options for LaTeX parsing and writing.

This module defines options for converting between LaTeX markup and the
Document tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from texbridge.constants import (
    DEFAULT_LATEX_DOCUMENT_CLASS,
    DEFAULT_LATEX_ENCODING,
    DEFAULT_LATEX_INCLUDE_PREAMBLE,
    DEFAULT_LATEX_PACKAGES,
    DEFAULT_LATEX_PARSE_PREAMBLE,
    DEFAULT_LATEX_STRICT_MODE,
    DEFAULT_LATEX_TABLE_PLACEMENT,
)
from texbridge.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class LatexParserOptions(BaseParserOptions):
    r"""Configuration options for LaTeX-to-tree parsing.

    Parameters
    ----------
    parse_preamble : bool, default True
        Whether to read \title, \author and \date from the preamble into
        the document metadata.
    strict_mode : bool, default False
        Whether input that cannot be loaded (undecodable bytes, unreadable
        files) raises instead of being decoded with replacement characters.
        Malformed markup always degrades to paragraphs regardless.
    encoding : str, default "utf-8"
        Text encoding used when the input is bytes, a path or a binary stream.

    """

    parse_preamble: bool = field(
        default=DEFAULT_LATEX_PARSE_PREAMBLE,
        metadata={"help": "Read title/author/date from the preamble"},
    )
    strict_mode: bool = field(
        default=DEFAULT_LATEX_STRICT_MODE,
        metadata={"help": "Raise on undecodable input instead of replacing characters"},
    )
    encoding: str = field(
        default=DEFAULT_LATEX_ENCODING,
        metadata={"help": "Text encoding for reading LaTeX input"},
    )

    def __post_init__(self) -> None:
        """Validate options by calling parent validation."""
        super().__post_init__()
        if not self.encoding:
            raise ValueError("encoding must be a non-empty string")


@dataclass(frozen=True)
class LatexWriterOptions(BaseRendererOptions):
    r"""Configuration options for tree-to-LaTeX writing.

    Parameters
    ----------
    document_class : str, default "article"
        LaTeX document class used in the wrapper.
    include_preamble : bool, default True
        Whether to emit the full document wrapper. When False only the
        body blocks are written.
    packages : list[str], default ["amsmath", "hyperref", "soul", "xcolor"]
        Packages declared in the preamble. The defaults cover math,
        links, strike-through/highlight and colours.
    table_placement : str, default "h"
        Float placement specifier written after \begin{table}.

    """

    document_class: str = field(
        default=DEFAULT_LATEX_DOCUMENT_CLASS,
        metadata={"help": "LaTeX document class"},
    )
    include_preamble: bool = field(
        default=DEFAULT_LATEX_INCLUDE_PREAMBLE,
        metadata={"help": "Generate complete document with preamble"},
    )
    packages: list[str] = field(
        default_factory=lambda: DEFAULT_LATEX_PACKAGES.copy(),
        metadata={"help": "LaTeX packages to include in preamble"},
    )
    table_placement: str = field(
        default=DEFAULT_LATEX_TABLE_PLACEMENT,
        metadata={"help": "Float placement for table environments"},
    )

    def __post_init__(self) -> None:
        """Validate and defensively copy mutable fields."""
        super().__post_init__()

        if self.packages is not None:
            object.__setattr__(self, "packages", list(self.packages))

        if not self.document_class:
            raise ValueError("document_class must be a non-empty string")
