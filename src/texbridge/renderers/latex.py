#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/renderers/latex.py
r"""LaTeX writing from the Document tree.

This module provides the LatexRenderer class which converts a Document tree
back to LaTeX markup. Output is deterministic: the same tree always yields
the same text, and re-parsing the text yields an equal tree for trees the
parser produced.

Text content is written verbatim. It is already markup (the parser keeps
unrecognized commands and escapes such as ``\%`` in the text), so escaping it
again would double every escape on each round trip.

"""

from __future__ import annotations

import logging
import re
from typing import Any

from texbridge.ast.nodes import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
    BlockQuote,
    Document,
    Heading,
    LineBreak,
    List,
    ListItem,
    MathDisplay,
    MathInline,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    Text,
)
from texbridge.ast.visitors import NodeVisitor
from texbridge.constants import HEADING_COMMANDS, LINK_COMMAND, MARK_COMMANDS
from texbridge.options.latex import LatexWriterOptions
from texbridge.renderers.base import BaseRenderer, InlineContentMixin

logger = logging.getLogger(__name__)

_KNOWN_NODE_TYPES = BLOCK_NODE_TYPES + INLINE_NODE_TYPES + (ListItem, TableRow, TableCell, Document)
_PREAMBLE_METADATA = ("title", "author", "date")

_LINE_BREAK = "\\\\\n"
# A row separator inside a cell would end the row; a newline inside a
# heading would leave its argument unterminated.
_TABLE_LINE_BREAK = "\\newline "
_SAME_LINE_BREAK = "\\\\ "
# Text after a break must not open a source line with a block command, or
# re-parsing would end the paragraph there.
_BREAK_BEFORE_BLOCK_RE = re.compile(
    r"\\\\\n(?=[ \t]*\\(?:begin|end|" + "|".join(HEADING_COMMANDS) + r")(?![A-Za-z]))"
)


class LatexRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    r"""Render a Document tree to LaTeX markup.

    Parameters
    ----------
    options : LatexWriterOptions or None, default = None
        LaTeX writing options

    Examples
    --------
    Basic usage:

        >>> from texbridge.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
        >>> print(LatexRenderer().render_to_string(doc))
        \documentclass{article}
        \usepackage{amsmath}
        ...
        \begin{document}
        <BLANKLINE>
        \section{Title}
        <BLANKLINE>
        \end{document}

    """

    def __init__(self, options: LatexWriterOptions | None = None):
        """Initialize the LaTeX writer with options."""
        BaseRenderer._validate_options_type(options, LatexWriterOptions, "latex")
        options = options or LatexWriterOptions()
        BaseRenderer.__init__(self, options)
        self.options: LatexWriterOptions = options
        self._output: list[str] = []
        self._line_break = _LINE_BREAK

    def render_to_string(self, document: Document) -> str:
        """Render a Document tree to a LaTeX string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            LaTeX text

        """
        self._output = []
        self._line_break = _LINE_BREAK
        document.accept(self)
        return "".join(self._output)

    def _render_preamble(self, metadata: dict[str, Any]) -> None:
        self._output.append(f"\\documentclass{{{self.options.document_class}}}\n")
        for package in self.options.packages:
            self._output.append(f"\\usepackage{{{package}}}\n")
        for name in _PREAMBLE_METADATA:
            value = metadata.get(name)
            if value:
                self._output.append(f"\\{name}{{{value}}}\n")

    def _accept(self, node: Any) -> None:
        if not isinstance(node, _KNOWN_NODE_TYPES):
            logger.debug(f"Skipping unsupported node type {type(node).__name__}")
            return
        node.accept(self)

    def _inline(self, content: list[Any], line_break: str = _LINE_BREAK) -> str:
        known = []
        for node in content:
            if isinstance(node, INLINE_NODE_TYPES):
                known.append(node)
            else:
                logger.debug(f"Skipping unsupported inline node {type(node).__name__}")
        saved_break = self._line_break
        self._line_break = line_break
        try:
            text = self._render_inline_content(known)
        finally:
            self._line_break = saved_break
        if line_break == _LINE_BREAK:
            text = _BREAK_BEFORE_BLOCK_RE.sub(lambda _: _SAME_LINE_BREAK, text)
        return text

    def _cell_text(self, cell: TableCell) -> str:
        return self._inline(cell.paragraph.content, _TABLE_LINE_BREAK).strip()

    def visit_document(self, node: Document) -> None:
        """Render a Document node, including the wrapper when enabled.

        Parameters
        ----------
        node : Document
            Document to render

        """
        if self.options.include_preamble:
            self._render_preamble(node.metadata)
            self._output.append("\\begin{document}\n\n")

        for child in node.children:
            self._accept(child)

        if self.options.include_preamble:
            self._output.append("\\end{document}\n")

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node as a sectioning command."""
        command = HEADING_COMMANDS[node.level - 1]
        self._output.append(f"\\{command}{{{self._inline(node.content, _SAME_LINE_BREAK)}}}\n\n")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node.

        An empty paragraph is written as a single newline.
        """
        content = self._inline(node.content)
        if not content.strip():
            self._output.append("\n")
            return
        self._output.append(f"{content}\n\n")

    def visit_list(self, node: List) -> None:
        """Render a List node as itemize or enumerate."""
        env_name = "enumerate" if node.ordered else "itemize"
        self._output.append(f"\\begin{{{env_name}}}\n")
        for item in node.items:
            self._accept(item)
        self._output.append(f"\\end{{{env_name}}}\n\n")

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node as one indented item line."""
        self._output.append(f"  \\item {self._inline(node.paragraph.content)}\n")

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a centered tabular inside a table float.

        The first row's cell count fixes the column count; other rows are
        padded with empty cells or truncated to it.

        Parameters
        ----------
        node : Table
            Table to render

        """
        column_count = node.column_count
        if column_count == 0:
            logger.debug("Skipping table without columns")
            return

        placement = f"[{self.options.table_placement}]" if self.options.table_placement else ""
        self._output.append(f"\\begin{{table}}{placement}\n")
        self._output.append("\\centering\n")
        self._output.append(f"\\begin{{tabular}}{{{'|c' * column_count}|}}\n")
        self._output.append("\\hline\n")

        for row in node.rows:
            cells = [self._cell_text(cell) for cell in row.cells[:column_count]]
            cells.extend([""] * (column_count - len(cells)))
            self._output.append(" & ".join(cells) + " \\\\\n")
            self._output.append("\\hline\n")

        self._output.append("\\end{tabular}\n")
        if node.caption:
            self._output.append(f"\\caption{{{node.caption}}}\n")
        self._output.append("\\end{table}\n\n")

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node on its own (cells joined by ``&``)."""
        self._output.append(" & ".join(self._cell_text(cell) for cell in node.cells))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node on its own."""
        self._output.append(self._inline(node.paragraph.content, _TABLE_LINE_BREAK))

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node as a quote environment."""
        self._output.append("\\begin{quote}\n")
        for child in node.children:
            self._accept(child)
        self._output.append("\\end{quote}\n\n")

    def visit_text(self, node: Text) -> None:
        """Render a Text node, wrapping marks innermost first and the link outermost."""
        text = node.content
        for mark in node.ordered_marks():
            text = f"\\{MARK_COMMANDS[mark]}{{{text}}}"
        if node.href is not None:
            text = f"\\{LINK_COMMAND}{{{node.href}}}{{{text}}}"
        self._output.append(text)

    def visit_math_inline(self, node: MathInline) -> None:
        """Render a MathInline node as ``$...$``."""
        self._output.append(f"${node.content}$")

    def visit_math_display(self, node: MathDisplay) -> None:
        """Render a MathDisplay node as ``$$...$$``."""
        self._output.append(f"$${node.content}$$")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node."""
        self._output.append(self._line_break)
