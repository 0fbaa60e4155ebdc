#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/parsers/base.py
"""Base classes for document parsers.

This module defines the abstract base class that parsers inherit from. The
BaseParser provides option validation and input loading shared by every
parser that builds a Document tree.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from texbridge.ast import Document
from texbridge.exceptions import InvalidOptionsError, ParsingError
from texbridge.options.base import BaseParserOptions
from texbridge.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for document parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Notes
    -----
    The parse() method should handle all supported input types:
    - str: markup text
    - Path: file path to read
    - IO[bytes] or IO[str]: file-like object
    - bytes: raw document bytes

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input document into a Document tree.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            The input document to parse

        Returns
        -------
        Document
            Root of the parsed tree

        Raises
        ------
        ParsingError
            If the input cannot be loaded

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: ParserInput, encoding: str = "utf-8", strict: bool = False) -> str:
        """Load text from the supported input types.

        Unlike file-oriented converters, a ``str`` is always treated as markup
        text; pass a ``Path`` to read from disk.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Input data to load
        encoding : str, default "utf-8"
            Encoding tried first for byte input
        strict : bool, default False
            When True, byte input must decode with ``encoding``

        Returns
        -------
        str
            LaTeX content as string

        Raises
        ------
        ParsingError
            If the input cannot be read or decoded

        """
        try:
            if isinstance(input_data, str):
                return input_data
            if isinstance(input_data, bytes):
                return read_text_with_encoding_detection(input_data, encoding=encoding, strict=strict)
            if isinstance(input_data, Path):
                with open(input_data, "rb") as f:
                    return read_text_with_encoding_detection(f.read(), encoding=encoding, strict=strict)
            if hasattr(input_data, "read"):
                return normalize_stream_to_text(input_data, encoding=encoding, strict=strict)
        except OSError as e:
            raise ParsingError(f"Failed to read input: {e}", parsing_stage="input_loading", original_error=e) from e
        except (UnicodeDecodeError, LookupError) as e:
            raise ParsingError(
                f"Failed to decode input as {encoding}: {e}", parsing_stage="decoding", original_error=e
            ) from e
        except TypeError as e:
            raise ParsingError(str(e), parsing_stage="input_loading", original_error=e) from e

        raise ParsingError(f"Unsupported input type: {type(input_data).__name__}", parsing_stage="input_loading")
