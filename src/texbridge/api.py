"""The exported API functions: parse, write and render."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/texbridge/api.py
import logging
from typing import Any, Mapping, Optional, TypeVar

from texbridge.ast.nodes import Document
from texbridge.options.base import BaseParserOptions, BaseRendererOptions
from texbridge.options.html import HtmlPreviewOptions
from texbridge.options.latex import LatexParserOptions, LatexWriterOptions
from texbridge.parsers.base import BaseParser, ParserInput
from texbridge.parsers.latex import LatexParser
from texbridge.renderers.html import HtmlPreviewRenderer
from texbridge.renderers.latex import LatexRenderer

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", BaseParserOptions, BaseRendererOptions)


def _merge_options(options: Optional[OptionsT], options_class: type[OptionsT], name: str, **overrides: Any) -> OptionsT:
    """Apply keyword overrides on top of an options object (or the defaults).

    ``None`` overrides are ignored so callers can pass optional keywords
    straight through.
    """
    BaseParser._validate_options_type(options, options_class, name)
    resolved = options if options is not None else options_class()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        logger.debug(f"Overriding {options_class.__name__} fields: {', '.join(sorted(updates))}")
        resolved = resolved.create_updated(**updates)
    return resolved


def parse(source: ParserInput, options: Optional[LatexParserOptions] = None, **kwargs: Any) -> Document:
    r"""Parse LaTeX markup into a Document tree.

    Parameters
    ----------
    source : str, bytes, Path or file-like
        Markup text, or bytes/path/stream to decode. A ``str`` is always
        treated as markup, never as a path.
    options : LatexParserOptions, optional
        Parser options
    kwargs : Any
        Individual parser options that override settings in ``options``

    Returns
    -------
    Document
        Parsed tree; never empty

    Raises
    ------
    ParsingError
        If bytes, a path or a stream cannot be read or decoded
    ValidationError
        If a keyword does not name a parser option

    Examples
    --------
        >>> from texbridge import parse
        >>> doc = parse("\\section{Intro}\n\nHello $E=mc^2$.")
        >>> [type(block).__name__ for block in doc.children]
        ['Heading', 'Paragraph']

    """
    resolved = _merge_options(options, LatexParserOptions, "latex", **kwargs)
    return LatexParser(resolved).parse(source)


def write(document: Document, options: Optional[LatexWriterOptions] = None, **kwargs: Any) -> str:
    """Write a Document tree back to LaTeX markup.

    Parameters
    ----------
    document : Document
        Tree to write
    options : LatexWriterOptions, optional
        Writer options
    kwargs : Any
        Individual writer options that override settings in ``options``

    Returns
    -------
    str
        LaTeX markup

    """
    resolved = _merge_options(options, LatexWriterOptions, "latex", **kwargs)
    return LatexRenderer(resolved).render_to_string(document)


def render(
    text: str,
    options: Optional[HtmlPreviewOptions] = None,
    *,
    strict_errors: Optional[bool] = None,
    macros: Optional[Mapping[str, str]] = None,
) -> str:
    r"""Render LaTeX markup to an HTML preview fragment.

    Parameters
    ----------
    text : str
        LaTeX markup
    options : HtmlPreviewOptions, optional
        Preview options
    strict_errors : bool, optional
        Overrides ``options.strict_errors``
    macros : Mapping[str, str], optional
        Overrides ``options.macros``

    Returns
    -------
    str
        HTML wrapped in the document container, or an error fragment

    Raises
    ------
    RenderingError
        Only when strict error handling is enabled

    Examples
    --------
        >>> from texbridge import render
        >>> html = render(r"$x \in \RR$", macros={r"\RR": r"\mathbb{R}"})

    """
    resolved = _merge_options(options, HtmlPreviewOptions, "html", strict_errors=strict_errors, macros=macros)
    return HtmlPreviewRenderer(resolved).render_to_string(text)
