#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/utils/latex.py
"""Low-level helpers for scanning LaTeX source text.

These helpers are shared by the block parser, the HTML preview renderer and
the highlighting tokenizer. They operate on plain strings and never raise for
malformed input; callers receive ``None`` or ``-1`` sentinels instead.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pylatexenc.latexwalker import LatexGroupNode, LatexWalker, LatexWalkerError

from texbridge.constants import COLUMN_ALIGNMENTS, MAX_COLUMN_REPEAT, TABLE_RULE_COMMANDS, Alignment

logger = logging.getLogger(__name__)

BEGIN_DOCUMENT = r"\begin{document}"
END_DOCUMENT = r"\end{document}"

_TABLE_RULE_RE = re.compile(r"\\(?:" + "|".join(TABLE_RULE_COMMANDS) + r")(?![A-Za-z])|\\cline\s*\{[^{}]*\}")
_REPEAT_COLUMN_RE = re.compile(r"\*\s*\{\s*(\d+)\s*\}\s*\{([^{}]*)\}")
_BRACE_GROUP_RE = re.compile(r"\{[^{}]*\}")
_PREAMBLE_FIELDS = ("title", "author", "date")


def is_escaped(text: str, index: int) -> bool:
    """Return True when the character at ``index`` is preceded by an odd run of backslashes."""
    backslashes = 0
    position = index - 1
    while position >= 0 and text[position] == "\\":
        backslashes += 1
        position -= 1
    return backslashes % 2 == 1


def find_unescaped(text: str, char: str, start: int = 0) -> int:
    """Find the next occurrence of ``char`` that is not escaped by a backslash.

    Parameters
    ----------
    text : str
        Text to search
    char : str
        Single character or short delimiter to look for
    start : int, default 0
        Index to start searching from

    Returns
    -------
    int
        Index of the delimiter, or -1 when none exists

    """
    index = text.find(char, start)
    while index >= 0:
        if not is_escaped(text, index):
            return index
        index = text.find(char, index + 1)
    return -1


def strip_comments(text: str) -> str:
    r"""Remove ``%`` line comments, keeping ``\%`` escapes.

    Lines that held only a comment are dropped entirely so that they do not
    introduce paragraph breaks.

    Parameters
    ----------
    text : str
        LaTeX source

    Returns
    -------
    str
        Source without comments

    """
    lines = []
    for line in text.split("\n"):
        index = find_unescaped(line, "%")
        if index < 0:
            lines.append(line)
        elif line[:index].strip():
            lines.append(line[:index])
    return "\n".join(lines)


def _walker(text: str) -> LatexWalker:
    # "$" and "%" must not change where a group ends: math inside an argument
    # is handled after the argument is read and comments are stripped first.
    # Same-length blanks keep every offset valid.
    return LatexWalker(text.replace("$", " ").replace("%", " "), tolerant_parsing=False)


def read_group(text: str, start: int) -> Optional[tuple[str, int]]:
    """Read a brace-delimited argument starting at ``start``.

    Whitespace before the opening brace is skipped. The group is read with
    pylatexenc's :class:`~pylatexenc.latexwalker.LatexWalker`, so escaped
    braces (``\\{`` and ``\\}``) and nested groups are handled the way LaTeX
    reads them.

    Parameters
    ----------
    text : str
        Source text
    start : int
        Index where the argument may begin

    Returns
    -------
    tuple of (str, int) or None
        The argument content and the index just after the closing brace,
        or None when no complete group starts there

    """
    index = start
    while index < len(text) and text[index].isspace():
        index += 1
    if index >= len(text) or text[index] != "{":
        return None

    try:
        node, position, length = _walker(text).get_latex_expression(index)
    except (LatexWalkerError, RecursionError) as e:
        logger.debug(f"No complete brace group at offset {index}: {e}")
        return None

    end = position + length
    if not isinstance(node, LatexGroupNode) or position != index or text[end - 1 : end] != "}":
        return None
    return text[index + 1 : end - 1], end


def find_matching_brace(text: str, open_index: int) -> int:
    """Find the closing brace matching the opening brace at ``open_index``.

    Parameters
    ----------
    text : str
        Text to search
    open_index : int
        Index of an opening ``{``

    Returns
    -------
    int
        Index of the matching ``}``, or -1 if there is no group at
        ``open_index`` or it is unterminated

    """
    if open_index >= len(text) or text[open_index] != "{":
        return -1
    group = read_group(text, open_index)
    return -1 if group is None else group[1] - 1


def extract_body(text: str) -> tuple[str, Optional[str]]:
    r"""Split a full LaTeX document into its body and preamble.

    The body is the text strictly between the first ``\begin{document}`` and
    the last ``\end{document}``.

    Parameters
    ----------
    text : str
        LaTeX source, with or without a document wrapper

    Returns
    -------
    tuple of (str, str or None)
        The body and the preamble; when the wrapper is absent the input is
        returned unchanged with a ``None`` preamble

    """
    begin = text.find(BEGIN_DOCUMENT)
    end = text.rfind(END_DOCUMENT)
    if begin < 0 or end < begin + len(BEGIN_DOCUMENT):
        return text, None
    return text[begin + len(BEGIN_DOCUMENT) : end], text[:begin]


def extract_preamble_metadata(preamble: str) -> dict[str, Any]:
    r"""Extract ``\title``, ``\author`` and ``\date`` from a preamble.

    A ``\date{\today}`` value is ignored.

    Parameters
    ----------
    preamble : str
        Text before ``\begin{document}``

    Returns
    -------
    dict
        Metadata values keyed by field name

    """
    metadata: dict[str, Any] = {}
    for name in _PREAMBLE_FIELDS:
        match = re.search(r"\\" + name + r"(?![A-Za-z])\s*(?=\{)", preamble)
        if not match:
            continue
        group = read_group(preamble, match.end())
        if group is None:
            logger.debug(f"Unterminated \\{name} in preamble")
            continue
        value = group[0].strip()
        if not value or (name == "date" and value == r"\today"):
            continue
        metadata[name] = value
    return metadata


def split_unescaped(text: str, separator: str) -> list[str]:
    r"""Split on a single-character separator outside escapes and brace groups.

    Parameters
    ----------
    text : str
        Text to split, e.g. a table row
    separator : str
        Separator character, e.g. ``&``

    Returns
    -------
    list of str
        The pieces, untrimmed

    """
    pieces = []
    depth = 0
    last = 0
    for index, char in enumerate(text):
        if is_escaped(text, index):
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == separator and depth == 0:
            pieces.append(text[last:index])
            last = index + 1
    pieces.append(text[last:])
    return pieces


def strip_table_rules(text: str) -> str:
    r"""Remove ``\hline``, booktabs rules and ``\cline{..}`` markers."""
    return _TABLE_RULE_RE.sub("", text)


def split_table_rows(body: str) -> list[list[str]]:
    r"""Split a tabular body into rows of trimmed cell strings.

    Rows are separated by ``\\``; rule markers are removed; rows whose cells
    are all empty are skipped.

    Parameters
    ----------
    body : str
        Text between the column specification and ``\end{tabular}``

    Returns
    -------
    list of list of str
        Cell texts per row

    """
    rows = []
    for raw_row in re.split(r"\\\\(?:\s*\[[^\]]*\])?", strip_table_rules(body)):
        cells = [cell.strip() for cell in split_unescaped(raw_row, "&")]
        if any(cells):
            rows.append(cells)
    return rows


def _expand_repeat(match: re.Match[str]) -> str:
    digits, columns = match.group(1), match.group(2)
    count = int(digits) if len(digits) <= 4 else MAX_COLUMN_REPEAT + 1
    if count > MAX_COLUMN_REPEAT:
        logger.debug(f"Column repeat *{{{digits}}} capped at {MAX_COLUMN_REPEAT}")
        count = MAX_COLUMN_REPEAT
    return columns * count


def parse_column_spec(spec: str) -> list[Alignment]:
    r"""Derive per-column alignments from a tabular column specification.

    Separators are stripped and alignment letters (``l c r p m b X``) are
    counted, after expanding ``*{n}{..}`` repeats (``n`` is capped at
    ``MAX_COLUMN_REPEAT``) and removing width groups such as ``p{3cm}``.
    When no letters exist the count falls back to ``count("|") - 1`` with a
    minimum of one column.

    Parameters
    ----------
    spec : str
        Column specification, e.g. ``|l|c|r|``

    Returns
    -------
    list of Alignment
        One alignment per column

    Examples
    --------
    >>> parse_column_spec("|l|c|r|")
    ['left', 'center', 'right']
    >>> parse_column_spec("p{2cm}c")
    ['left', 'center']

    """
    expanded = _REPEAT_COLUMN_RE.sub(_expand_repeat, spec)
    previous = None
    while previous != expanded:
        previous = expanded
        expanded = _BRACE_GROUP_RE.sub("", expanded)

    alignments: list[Alignment] = [COLUMN_ALIGNMENTS[char] for char in expanded if char in COLUMN_ALIGNMENTS]
    if alignments:
        return alignments

    count = max(spec.count("|") - 1, 1)
    return ["left"] * count
