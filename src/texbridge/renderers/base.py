#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/renderers/base.py
"""Base classes for renderers.

This module defines the abstract base class shared by the LaTeX writer and
the HTML preview renderer, plus the inline capture mixin used by visitor
based renderers.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Union

from texbridge.ast.nodes import Node
from texbridge.exceptions import InvalidOptionsError
from texbridge.options.base import BaseRendererOptions
from texbridge.utils.io_utils import write_content


class BaseRenderer(ABC):
    """Abstract base class for renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, source: Any) -> str:
        """Render the input to a string.

        Parameters
        ----------
        source : Any
            Renderer input (a Document for the writer, markup for the preview)

        Returns
        -------
        str
            Rendered output

        """
        raise NotImplementedError

    def render(self, source: Any, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the input and write it to a file or stream.

        Parameters
        ----------
        source : Any
            Renderer input
        output : str, Path, IO[bytes], or IO[str]
            Output destination

        """
        write_content(self.render_to_string(source), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Parameters
        ----------
        options : BaseRendererOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )


class InlineContentMixin:
    """Mixin providing inline content capture for visitor based renderers.

    The implementing class must have:
    - A `_output` attribute (list[str]) for accumulating output
    - Visitor methods that append to `_output`

    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to text.

        Parameters
        ----------
        content : list of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content

        """
        saved_output = self._output
        self._output = []
        try:
            for node in content:
                node.accept(self)
            return "".join(self._output)
        finally:
            self._output = saved_output
