#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/ast/nodes.py
"""Node classes for the Document tree.

This module defines the closed set of node classes shared by the LaTeX
parser, the LaTeX writer and the editor JSON bridge. Each node supports the
visitor pattern through ``accept``.

Node Hierarchy
--------------
Block-level nodes represent structural document elements:
    - Document (root), Heading, Paragraph, BlockQuote
    - List, ListItem
    - Table, TableRow, TableCell

Inline nodes represent the text inside a block:
    - Text (with marks and an optional link target)
    - MathInline, MathDisplay
    - LineBreak

Math nodes keep the raw expression only; rendering is a pure function of
that text and never stored on the node.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from texbridge.constants import MARK_ORDER, Mark


class Node(ABC):
    """Base class for all tree nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and rendering.

    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Text run with an optional set of marks.

    Parameters
    ----------
    content : str
        Text content. It is LaTeX source: commands the parser does not
        recognize are kept here verbatim.
    marks : frozenset of Mark, default = empty
        Active formatting marks
    href : str or None, default = None
        Link target when the run carries the link mark

    """

    content: str
    marks: frozenset[Mark] = field(default_factory=frozenset)
    href: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalize marks to a frozenset and reject unknown mark names."""
        marks = frozenset(self.marks)
        unknown = marks.difference(MARK_ORDER)
        if unknown:
            raise ValueError(f"Unknown mark(s): {', '.join(sorted(unknown))}")
        self.marks = marks

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_text method

        Returns
        -------
        Any
            Result from visitor.visit_text(self)

        """
        return visitor.visit_text(self)

    def ordered_marks(self) -> list[Mark]:
        """Return the active marks in declaration order."""
        return [mark for mark in MARK_ORDER if mark in self.marks]


@dataclass
class MathInline(Node):
    """Inline math node (``$...$``).

    Parameters
    ----------
    content : str
        Raw math expression without delimiters

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline math.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_math_inline method

        Returns
        -------
        Any
            Result from visitor.visit_math_inline(self)

        """
        return visitor.visit_math_inline(self)


@dataclass
class MathDisplay(Node):
    """Display math node (``$$...$$``).

    Display math lives in inline content, matching how the markup places
    ``$$`` spans inside running paragraph text.

    Parameters
    ----------
    content : str
        Raw math expression without delimiters

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this display math.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_math_display method

        Returns
        -------
        Any
            Result from visitor.visit_math_display(self)

        """
        return visitor.visit_math_display(self)


@dataclass
class LineBreak(Node):
    r"""Hard line break (``\\``)."""

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_line_break method

        Returns
        -------
        Any
            Result from visitor.visit_line_break(self)

        """
        return visitor.visit_line_break(self)


InlineNode = Union[Text, MathInline, MathDisplay, LineBreak]
INLINE_NODE_TYPES: tuple[type, ...] = (Text, MathInline, MathDisplay, LineBreak)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Heading(Node):
    """Heading node (section, subsection, subsubsection).

    Parameters
    ----------
    level : int
        Heading level (1-3)
    content : list of InlineNode, default = empty list
        Inline nodes representing heading text

    """

    level: int
    content: list[InlineNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 3."""
        if not 1 <= self.level <= 3:
            raise ValueError(f"Heading level must be 1-3, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_heading method

        Returns
        -------
        Any
            Result from visitor.visit_heading(self)

        """
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    An empty ``content`` list is the empty paragraph, which keeps a caret
    position available in an otherwise empty document.

    Parameters
    ----------
    content : list of InlineNode, default = empty list
        Inline nodes representing paragraph content

    """

    content: list[InlineNode] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_paragraph method

        Returns
        -------
        Any
            Result from visitor.visit_paragraph(self)

        """
        return visitor.visit_paragraph(self)


@dataclass
class ListItem(Node):
    """List item holding exactly one paragraph.

    Parameters
    ----------
    paragraph : Paragraph, default = empty paragraph
        The item's content

    """

    paragraph: Paragraph = field(default_factory=Paragraph)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_list_item method

        Returns
        -------
        Any
            Result from visitor.visit_list_item(self)

        """
        return visitor.visit_list_item(self)


@dataclass
class List(Node):
    """Bulleted (itemize) or numbered (enumerate) list.

    Parameters
    ----------
    ordered : bool, default = False
        True for enumerate, False for itemize
    items : list of ListItem, default = empty list
        List items

    """

    ordered: bool = False
    items: list[ListItem] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_list method

        Returns
        -------
        Any
            Result from visitor.visit_list(self)

        """
        return visitor.visit_list(self)


@dataclass
class TableCell(Node):
    """Table cell holding exactly one paragraph.

    Parameters
    ----------
    paragraph : Paragraph, default = empty paragraph
        Cell content
    is_header : bool, default = False
        True for header cells, False for data cells

    """

    paragraph: Paragraph = field(default_factory=Paragraph)
    is_header: bool = False

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table cell.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_table_cell method

        Returns
        -------
        Any
            Result from visitor.visit_table_cell(self)

        """
        return visitor.visit_table_cell(self)


@dataclass
class TableRow(Node):
    """Table row node containing cells.

    Parameters
    ----------
    cells : list of TableCell, default = empty list
        Cells in this row

    """

    cells: list[TableCell] = field(default_factory=list)

    @property
    def is_header(self) -> bool:
        """Whether every cell in the row is a header cell."""
        return bool(self.cells) and all(cell.is_header for cell in self.cells)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table row.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_table_row method

        Returns
        -------
        Any
            Result from visitor.visit_table_row(self)

        """
        return visitor.visit_table_row(self)


@dataclass
class Table(Node):
    """Table node.

    The first row is the header row; all rows have the same number of cells.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        All rows, header first
    caption : str or None, default = None
        Optional caption (raw LaTeX)

    """

    rows: list[TableRow] = field(default_factory=list)
    caption: Optional[str] = None

    @property
    def column_count(self) -> int:
        """Number of columns, taken from the first row."""
        return len(self.rows[0].cells) if self.rows else 0

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_table method

        Returns
        -------
        Any
            Result from visitor.visit_table(self)

        """
        return visitor.visit_table(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block nodes.

    Parameters
    ----------
    children : list of BlockNode, default = empty list
        Block-level content

    """

    children: list[BlockNode] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_block_quote method

        Returns
        -------
        Any
            Result from visitor.visit_block_quote(self)

        """
        return visitor.visit_block_quote(self)


BlockNode = Union[Heading, Paragraph, List, Table, BlockQuote]
BLOCK_NODE_TYPES: tuple[type, ...] = (Heading, Paragraph, List, Table, BlockQuote)


@dataclass
class Document(Node):
    """Root document node containing all block nodes.

    Parameters
    ----------
    children : list of BlockNode, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (title, author, date from the preamble)

    """

    children: list[BlockNode] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_document method

        Returns
        -------
        Any
            Result from visitor.visit_document(self)

        """
        return visitor.visit_document(self)


def get_node_children(node: Node) -> list[Node]:
    """Get the direct children of a node in document order.

    Parameters
    ----------
    node : Node
        Node to inspect

    Returns
    -------
    list of Node
        Child nodes (empty for leaves)

    """
    if isinstance(node, (Document, BlockQuote)):
        return list(node.children)
    if isinstance(node, (Heading, Paragraph)):
        return list(node.content)
    if isinstance(node, List):
        return list(node.items)
    if isinstance(node, (ListItem, TableCell)):
        return [node.paragraph]
    if isinstance(node, Table):
        return list(node.rows)
    if isinstance(node, TableRow):
        return list(node.cells)
    return []


def extract_text(nodes: Node | list[Any]) -> str:
    """Concatenate the plain text of a node or list of nodes.

    Math is included with its dollar delimiters and line breaks become
    newlines, so the result reads like the source.

    Parameters
    ----------
    nodes : Node or list
        Node(s) to flatten

    Returns
    -------
    str
        Flattened text

    """
    if isinstance(nodes, list):
        return "".join(extract_text(node) for node in nodes)
    if isinstance(nodes, Text):
        return nodes.content
    if isinstance(nodes, MathInline):
        return f"${nodes.content}$"
    if isinstance(nodes, MathDisplay):
        return f"$${nodes.content}$$"
    if isinstance(nodes, LineBreak):
        return "\n"
    return extract_text(get_node_children(nodes))
