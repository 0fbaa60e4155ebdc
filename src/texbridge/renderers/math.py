#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/renderers/math.py
r"""Math expression typesetting for the HTML preview.

The default typesetter converts a LaTeX math expression to MathML with the
latex2mathml library and wraps it in a ``math-inline`` span or
``math-display`` div. Any callable with the same signature can replace it
through :class:`texbridge.options.html.HtmlPreviewOptions`.

Custom macros (``{"\\RR": "\\mathbb{R}"}``) are expanded textually before
typesetting.

"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from latex2mathml.converter import convert

from texbridge.exceptions import MathRenderingError
from texbridge.utils.html_utils import render_math_html

logger = logging.getLogger(__name__)

# Upper bound on nested expansion passes; a self-referencing macro stops here.
MAX_MACRO_EXPANSION_DEPTH = 16


def typeset_math(expression: str, display_mode: bool) -> str:
    """Typeset one math expression to HTML with embedded MathML.

    Parameters
    ----------
    expression : str
        Raw LaTeX math, without delimiters
    display_mode : bool
        True for display math, False for inline math

    Returns
    -------
    str
        ``<span class="math math-inline">...</span>`` or
        ``<div class="math math-display">...</div>``

    Raises
    ------
    MathRenderingError
        If latex2mathml cannot convert the expression

    """
    try:
        mathml = convert(expression, display="block" if display_mode else "inline")
    except Exception as e:
        raise MathRenderingError(expression, display_mode, original_error=e) from e
    return render_math_html(mathml, inline=not display_mode)


def _macro_pattern(names: list[str]) -> re.Pattern[str]:
    alternatives = []
    for name in sorted(names, key=len, reverse=True):
        escaped = re.escape("\\" + name)
        # Control words end at the first non-letter; control symbols are a single character.
        alternatives.append(escaped + r"(?![A-Za-z])" if name[-1:].isalpha() else escaped)
    return re.compile("|".join(alternatives))


def expand_macros(expression: str, macros: Mapping[str, str]) -> str:
    r"""Expand argument-free custom macros in a math expression.

    Parameters
    ----------
    expression : str
        Raw LaTeX math
    macros : Mapping[str, str]
        Macro name (with or without the leading backslash) to replacement

    Returns
    -------
    str
        Expression with every macro occurrence replaced. Longer names win,
        and a name only matches a whole control word, so ``\R`` does not
        match inside ``\RR``.

    Examples
    --------
    >>> expand_macros(r"x \in \RR", {r"\RR": r"\mathbb{R}"})
    'x \\in \\mathbb{R}'

    """
    table = {name.lstrip("\\"): value for name, value in macros.items() if name.lstrip("\\")}
    if not table or "\\" not in expression:
        return expression

    pattern = _macro_pattern(list(table))
    for _ in range(MAX_MACRO_EXPANSION_DEPTH):
        expanded = pattern.sub(lambda match: table[match.group(0)[1:]], expression)
        if expanded == expression:
            return expanded
        expression = expanded

    logger.warning("Macro expansion did not settle; a macro may refer to itself")
    return expression
