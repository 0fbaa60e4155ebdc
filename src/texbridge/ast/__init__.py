#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/ast/__init__.py
"""Document tree module.

The Document tree is the structured representation shared by the LaTeX
parser, the LaTeX writer and the rich-text editing surface.

- nodes: node classes representing document structure
- visitors: visitor pattern implementation for tree traversal
- serialization: node JSON and editor JSON conversion

Examples
--------
    >>> from texbridge.ast import Document, Heading, Paragraph, Text
    >>> from texbridge.renderers.latex import LatexRenderer
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")]),
    ...     Paragraph(content=[Text(content="Hello world", marks=frozenset({"bold"}))])
    ... ])
    >>> latex = LatexRenderer().render_to_string(doc)

"""

from texbridge.ast.nodes import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
    BlockNode,
    BlockQuote,
    Document,
    Heading,
    InlineNode,
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
    extract_text,
    get_node_children,
)
from texbridge.ast.serialization import (
    ast_to_dict,
    ast_to_json,
    dict_to_ast,
    document_to_editor_json,
    editor_json_to_document,
    json_to_ast,
)
from texbridge.ast.visitors import NodeVisitor, ValidationVisitor

__all__ = [
    # Nodes
    "Node",
    "Document",
    "Heading",
    "Paragraph",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "BlockQuote",
    "Text",
    "MathInline",
    "MathDisplay",
    "LineBreak",
    "BlockNode",
    "InlineNode",
    "BLOCK_NODE_TYPES",
    "INLINE_NODE_TYPES",
    "extract_text",
    "get_node_children",
    # Visitors
    "NodeVisitor",
    "ValidationVisitor",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "document_to_editor_json",
    "editor_json_to_document",
]
