#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/ast/visitors.py
"""Visitor pattern implementation for Document tree traversal.

This module provides the visitor base class used by the LaTeX writer and a
validating visitor that checks the structural invariants of a tree built by
hand or decoded from JSON.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
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
    Node,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    Text,
)


class NodeVisitor(ABC):
    """Abstract base class for Document tree visitors.

    Subclasses implement one ``visit_*`` method per node class. Nodes call
    back into the visitor through ``Node.accept``.

    Examples
    --------
    Counting math expressions:

        >>> class MathCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_math_inline(self, node):
        ...         self.count += 1
        ...     # remaining visit_* methods recurse into children

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node.

        Parameters
        ----------
        node : Document
            The document node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        pass

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""
        pass

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""
        pass

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""
        pass

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_math_inline(self, node: MathInline) -> Any:
        """Visit a MathInline node."""
        pass

    @abstractmethod
    def visit_math_display(self, node: MathDisplay) -> Any:
        """Visit a MathDisplay node."""
        pass

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""
        pass

    def generic_visit(self, node: Node) -> Any:
        """Fallback visitor for unhandled node types.

        Parameters
        ----------
        node : Node
            The node to visit

        Returns
        -------
        Any
            Result of processing (default: None)

        """
        return None


class ValidationVisitor(NodeVisitor):
    """Visitor that validates Document tree structure.

    Checked invariants:
    - block containers hold only block nodes and never bare inline nodes
    - headings, paragraphs and cells hold only inline nodes
    - list items and cells wrap exactly one Paragraph
    - every table row has the same number of cells as the first row
    - header cells appear only in the first row

    Parameters
    ----------
    strict : bool, default = True
        Whether to raise ``ValueError`` on the first failure

    """

    def __init__(self, strict: bool = True):
        """Initialize the validator."""
        self.strict = strict
        self.errors: list[str] = []

    def _add_error(self, message: str) -> None:
        self.errors.append(message)
        if self.strict:
            raise ValueError(message)

    def _validate_blocks(self, children: list[Any], context: str) -> None:
        for child in children:
            if not isinstance(child, BLOCK_NODE_TYPES):
                self._add_error(f"{context} can only contain block nodes, found {type(child).__name__}")
            else:
                child.accept(self)

    def _validate_inlines(self, children: list[Any], context: str) -> None:
        for child in children:
            if not isinstance(child, INLINE_NODE_TYPES):
                self._add_error(f"{context} can only contain inline nodes, found {type(child).__name__}")
            else:
                child.accept(self)

    def visit_document(self, node: Document) -> None:
        """Validate a Document node."""
        self._validate_blocks(node.children, "Document")

    def visit_heading(self, node: Heading) -> None:
        """Validate a Heading node."""
        if not 1 <= node.level <= 3:
            self._add_error(f"Heading level must be 1-3, got {node.level}")
        self._validate_inlines(node.content, "Heading")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Validate a Paragraph node."""
        self._validate_inlines(node.content, "Paragraph")

    def visit_list(self, node: List) -> None:
        """Validate a List node."""
        for item in node.items:
            if not isinstance(item, ListItem):
                self._add_error(f"List can only contain ListItem nodes, found {type(item).__name__}")
            else:
                item.accept(self)

    def visit_list_item(self, node: ListItem) -> None:
        """Validate a ListItem node."""
        if not isinstance(node.paragraph, Paragraph):
            self._add_error("ListItem must wrap a Paragraph")
            return
        node.paragraph.accept(self)

    def visit_table(self, node: Table) -> None:
        """Validate a Table node."""
        if not node.rows:
            return
        expected_cols = node.column_count
        for index, row in enumerate(node.rows):
            if not isinstance(row, TableRow):
                self._add_error(f"Table can only contain TableRow nodes, found {type(row).__name__}")
                continue
            if len(row.cells) != expected_cols:
                self._add_error(f"Table row {index} has {len(row.cells)} cells, expected {expected_cols}")
            if index > 0 and any(cell.is_header for cell in row.cells):
                self._add_error(f"Table row {index} contains header cells")
            row.accept(self)

    def visit_table_row(self, node: TableRow) -> None:
        """Validate a TableRow node."""
        for cell in node.cells:
            if not isinstance(cell, TableCell):
                self._add_error(f"TableRow can only contain TableCell nodes, found {type(cell).__name__}")
            else:
                cell.accept(self)

    def visit_table_cell(self, node: TableCell) -> None:
        """Validate a TableCell node."""
        if not isinstance(node.paragraph, Paragraph):
            self._add_error("TableCell must wrap a Paragraph")
            return
        node.paragraph.accept(self)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Validate a BlockQuote node."""
        self._validate_blocks(node.children, "BlockQuote")

    def visit_text(self, node: Text) -> None:
        """Validate a Text node."""
        if node.href is not None and not isinstance(node.href, str):
            self._add_error("Text href must be a string")

    def visit_math_inline(self, node: MathInline) -> None:
        """Validate a MathInline node."""
        pass

    def visit_math_display(self, node: MathDisplay) -> None:
        """Validate a MathDisplay node."""
        pass

    def visit_line_break(self, node: LineBreak) -> None:
        """Validate a LineBreak node."""
        pass
