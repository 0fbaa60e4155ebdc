#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the texbridge library.

The conversion core is deliberately forgiving: malformed markup degrades to
plain paragraphs and failed math degrades to an inline error marker. The
exceptions below cover the remaining cases, such as invalid options, input
that cannot be loaded, strict-mode preview failures and malformed JSON trees.

Exception Hierarchy
-------------------
- TexBridgeError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser or renderer)

  - ParsingError (input loading failures)

  - RenderingError (output generation failures)
    - MathRenderingError (a math expression could not be typeset)

  - SerializationError (malformed JSON trees)

"""

from typing import Any


class TexBridgeError(Exception):
    """Base exception class for all texbridge-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(TexBridgeError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    For example, passing ``HtmlPreviewOptions`` to the LaTeX parser.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(TexBridgeError):
    """Exception raised when parser input cannot be loaded.

    Malformed markup never raises; this covers unreadable files, undecodable
    bytes and unsupported input types.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderingError(TexBridgeError):
    """Exception raised when output rendering fails.

    The HTML preview only lets this escape when strict error handling is
    requested; otherwise failures are converted into an error fragment.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class MathRenderingError(RenderingError):
    """Exception raised when a math expression cannot be typeset.

    Parameters
    ----------
    expression : str
        The raw math expression that failed
    display_mode : bool
        Whether the expression was typeset in display mode
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The typesetter's exception

    """

    def __init__(
        self,
        expression: str,
        display_mode: bool,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the math rendering error."""
        if message is None:
            detail = f": {original_error}" if original_error else ""
            message = f"Failed to typeset math expression '{expression}'{detail}"
        super().__init__(message, rendering_stage="math", original_error=original_error)
        self.expression = expression
        self.display_mode = display_mode


class SerializationError(TexBridgeError, ValueError):
    """Exception raised when a serialized tree cannot be converted back.

    Subclasses ``ValueError`` so callers written against the plain JSON
    decoding contract keep working.

    Parameters
    ----------
    message : str
        Description of the problem
    original_error : Exception, optional
        The underlying exception

    """
