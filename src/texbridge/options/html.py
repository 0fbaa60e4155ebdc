#  Copyright (c) 2025 Tom Villani, Ph.D.

# texbridge/options/html.py
"""Configuration options for the HTML preview renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from texbridge.constants import DEFAULT_HTML_CONTAINER_CLASS, DEFAULT_HTML_STRICT_ERRORS
from texbridge.options.base import BaseRendererOptions

MathTypesetter = Callable[[str, bool], str]


@dataclass(frozen=True)
class HtmlPreviewOptions(BaseRendererOptions):
    r"""Configuration options for LaTeX-to-HTML preview rendering.

    Parameters
    ----------
    strict_errors : bool, default False
        When True, math typesetting failures and internal rendering errors
        propagate to the caller. When False the preview always returns
        HTML, with failures shown as inline error markers.
    macros : Mapping[str, str], default empty
        Custom math macros expanded before typesetting, e.g.
        ``{"\\RR": "\\mathbb{R}"}``. Keys may omit the leading backslash.
    typesetter : callable or None, default None
        Math typesetter ``(expression, display_mode) -> html``. ``None``
        selects the built-in MathML typesetter.
    container_class : str, default "latex-document"
        CSS class of the wrapping document container.

    """

    strict_errors: bool = field(
        default=DEFAULT_HTML_STRICT_ERRORS,
        metadata={"help": "Propagate rendering errors instead of returning an error fragment"},
    )
    macros: Mapping[str, str] = field(
        default_factory=dict,
        metadata={"help": "Custom math macros as NAME=EXPANSION"},
    )
    typesetter: Optional[MathTypesetter] = field(
        default=None,
        metadata={"help": "Callable used to typeset math expressions"},
    )
    container_class: str = field(
        default=DEFAULT_HTML_CONTAINER_CLASS,
        metadata={"help": "CSS class of the document container"},
    )

    def __post_init__(self) -> None:
        """Freeze the macro mapping and validate fields."""
        super().__post_init__()
        object.__setattr__(self, "macros", MappingProxyType(dict(self.macros or {})))

        if self.typesetter is not None and not callable(self.typesetter):
            raise ValueError("typesetter must be callable")
