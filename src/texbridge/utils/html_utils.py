#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/utils/html_utils.py
"""HTML-related utility helpers."""

from __future__ import annotations

from html import escape as _html_escape


def escape_html(text: str) -> str:
    """Escape HTML special characters, quotes included."""
    return _html_escape(text)


def escape_angle_brackets(text: str) -> str:
    """Escape only ``<`` and ``>``, leaving ``&`` and quotes untouched."""
    return text.replace("<", "&lt;").replace(">", "&gt;")


# Private-use stand-ins for angle brackets typed in the markup. They carry no
# "&", so the table stage can still split rows on it.
PROTECTED_LT = "\ue002"
PROTECTED_GT = "\ue003"


def protect_angle_brackets(text: str) -> str:
    """Replace ``<`` and ``>`` with their protected stand-ins."""
    return text.replace("<", PROTECTED_LT).replace(">", PROTECTED_GT)


def unprotect_angle_brackets(text: str) -> str:
    """Turn protected stand-ins back into literal ``<`` and ``>``."""
    return text.replace(PROTECTED_LT, "<").replace(PROTECTED_GT, ">")


def protected_to_entities(text: str) -> str:
    """Turn protected stand-ins into ``&lt;`` and ``&gt;`` entities."""
    return text.replace(PROTECTED_LT, "&lt;").replace(PROTECTED_GT, "&gt;")


def render_math_html(markup: str, *, inline: bool) -> str:
    """Wrap typeset math markup in a span (inline) or div (display).

    Parameters
    ----------
    markup : str
        Already typeset markup, e.g. MathML
    inline : bool
        If True, render as inline math (span), otherwise display math (div)

    Returns
    -------
    str
        HTML string with math content wrapped in the appropriate tag

    """
    tag = "span" if inline else "div"
    classes = "math math-inline" if inline else "math math-display"
    return f'<{tag} class="{classes}">{markup}</{tag}>'
