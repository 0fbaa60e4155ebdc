#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/parsers/inline.py
r"""Inline content parser.

Turns one run of paragraph, heading, list item or cell text into an ordered
list of inline nodes.

The scan happens in two layers:

1. A single left-to-right pass splits out math. ``$$...$$`` is checked
   before ``$...$``; an unmatched delimiter is literal text and ``\$`` is
   always literal.
2. The text between math spans goes through a formatting pass that
   recognizes the wrapping commands below, plus ``\\`` and ``\newline``
   as line breaks. Arguments are read with
   :func:`texbridge.utils.latex.read_group`, so nested braces inside an
   argument are handled. Everything else is copied from the source
   unchanged.

=============================  ===========
Command                        Mark
=============================  ===========
``\textbf{}``                  bold
``\textit{}``, ``\emph{}``     italic
``\underline{}``               underline
``\texttt{}``                  code
``\st{}``, ``\sout{}``         strike
``\hl{}``                      highlight
``\href{url}{}``               link
=============================  ===========

"""

from __future__ import annotations

import logging
import re
from typing import Optional

from texbridge.ast.nodes import InlineNode, LineBreak, MathDisplay, MathInline, Text
from texbridge.constants import LINK_COMMAND, MARK_COMMAND_ALIASES, Mark
from texbridge.utils.latex import find_unescaped, read_group

logger = logging.getLogger(__name__)

# Control word, control symbol, or a lone trailing backslash
_CONTROL_RE = re.compile(r"\\(?:[A-Za-z@]+|.)?", re.DOTALL)
_NEWLINE_RE = re.compile(r"\\newline(?![A-Za-z])")


def parse_inline(text: str) -> list[InlineNode]:
    r"""Parse one run of text into inline nodes.

    Parameters
    ----------
    text : str
        Text of a paragraph, heading argument, list item or table cell

    Returns
    -------
    list of InlineNode
        Ordered inline nodes; adjacent text with identical marks is merged

    Examples
    --------
    >>> parse_inline(r"Hello $E=mc^2$.")
    [Text(content='Hello ', ...), MathInline(content='E=mc^2'), Text(content='.', ...)]

    """
    nodes: list[InlineNode] = []
    pending: list[str] = []

    def flush() -> None:
        if pending:
            nodes.extend(format_run("".join(pending)))
            pending.clear()

    length = len(text)
    index = 0
    while index < length:
        char = text[index]

        if char == "\\":
            pending.append(text[index : index + 2])
            index += 2
            continue

        if text.startswith("$$", index):
            close = find_unescaped(text, "$$", index + 2)
            if close >= 0:
                flush()
                nodes.append(MathDisplay(content=text[index + 2 : close]))
                index = close + 2
            else:
                pending.append("$$")
                index += 2
            continue

        if char == "$":
            close = find_unescaped(text, "$", index + 1)
            if close >= 0:
                flush()
                nodes.append(MathInline(content=text[index + 1 : close]))
                index = close + 1
            else:
                pending.append("$")
                index += 1
            continue

        pending.append(char)
        index += 1

    flush()
    return nodes


def format_run(text: str) -> list[InlineNode]:
    r"""Apply the formatting pass to math-free text.

    Parameters
    ----------
    text : str
        Text containing no math spans

    Returns
    -------
    list of InlineNode
        Text and LineBreak nodes

    Examples
    --------
    >>> format_run(r"\textbf{a \textit{b}}")
    [Text(content='a ', marks=frozenset({'bold'}), ...), Text(content='b', marks=frozenset({'bold', 'italic'}), ...)]

    """
    if not text:
        return []
    scan = _FormattingScan()
    scan.scan(text, frozenset(), None)
    return _merge_text(scan.output)


class _FormattingScan:
    """Recursive left-to-right scan collecting Text and LineBreak nodes."""

    def __init__(self) -> None:
        self.output: list[InlineNode] = []
        self._strip_leading_space = False

    def scan(self, source: str, marks: frozenset[Mark], href: Optional[str]) -> None:
        literal_start = 0
        position = 0
        length = len(source)

        while position < length:
            char = source[position]

            if char == "\\":
                line_break = 2 if source.startswith("\\\\", position) else 0
                newline = _NEWLINE_RE.match(source, position)
                if line_break or newline:
                    self._emit_text(source[literal_start:position], marks, href)
                    self.output.append(LineBreak())
                    self._strip_leading_space = True
                    position = literal_start = newline.end() if newline else position + line_break
                    continue

                control = _CONTROL_RE.match(source, position)
                name = control.group(0)[1:] if control else ""
                end = control.end() if control else position + 1

                if name in MARK_COMMAND_ALIASES:
                    argument = read_group(source, end)
                    if argument is not None:
                        self._emit_text(source[literal_start:position], marks, href)
                        self.scan(argument[0], marks | {MARK_COMMAND_ALIASES[name]}, href)
                        position = literal_start = argument[1]
                        continue

                if name == LINK_COMMAND:
                    url = read_group(source, end)
                    label = read_group(source, url[1]) if url is not None else None
                    if label is not None:
                        self._emit_text(source[literal_start:position], marks, href)
                        self.scan(label[0], marks, url[0])
                        position = literal_start = label[1]
                        continue

                # Any other command stays literal, including escapes such as \{ and \%.
                position = end
                continue

            if char == "{":
                group = read_group(source, position)
                if group is not None:
                    self._emit_text(source[literal_start:position], marks, href)
                    self._emit_text("{", marks, href)
                    self.scan(group[0], marks, href)
                    self._emit_text("}", marks, href)
                    position = literal_start = group[1]
                    continue
                logger.debug(f"Unbalanced brace at offset {position} kept as text")

            position += 1

        self._emit_text(source[literal_start:], marks, href)

    def _emit_text(self, text: str, marks: frozenset[Mark], href: Optional[str]) -> None:
        if self._strip_leading_space:
            text = text.lstrip()
            if text:
                self._strip_leading_space = False
        if text:
            self.output.append(Text(content=text, marks=marks, href=href))


def _merge_text(nodes: list[InlineNode]) -> list[InlineNode]:
    merged: list[InlineNode] = []
    for node in nodes:
        previous = merged[-1] if merged else None
        if (
            isinstance(node, Text)
            and isinstance(previous, Text)
            and previous.marks == node.marks
            and previous.href == node.href
        ):
            merged[-1] = Text(content=previous.content + node.content, marks=node.marks, href=node.href)
        else:
            merged.append(node)
    return merged
