#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/ast/serialization.py
"""JSON serialization and deserialization for Document trees.

Two shapes are supported:

Node JSON
    A lossless, versioned mapping of every node class to a dict keyed by
    ``node_type``. ``Document -> JSON -> Document`` yields an equal tree.

Editor JSON
    The ProseMirror-style dict tree used by the rich-text editing surface
    (``{"type": "doc", "content": [...]}``). Marks are a list of
    ``{"type": ...}`` dicts and links carry ``attrs.href``.

Examples
--------
Serialize a tree to JSON:

    >>> from texbridge.ast import Document, Heading, Text
    >>> from texbridge.ast.serialization import ast_to_json
    >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
    >>> json_str = ast_to_json(doc, indent=2)

Convert a tree for the editing surface:

    >>> editor = document_to_editor_json(doc)
    >>> editor["content"][0]["type"]
    'heading'

"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from texbridge.ast.nodes import (
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
)
from texbridge.constants import AST_SCHEMA_VERSION, MARK_ORDER
from texbridge.exceptions import SerializationError

logger = logging.getLogger(__name__)


# ============================================================================
# Node JSON
# ============================================================================


def _serialize_children_node(node: Document | BlockQuote, node_type: str) -> dict[str, Any]:
    return {"node_type": node_type, "children": [ast_to_dict(child) for child in node.children]}


def _serialize_document(node: Document) -> dict[str, Any]:
    result = _serialize_children_node(node, "Document")
    result["metadata"] = dict(node.metadata)
    return result


def _serialize_inline_content_node(node: Heading | Paragraph, node_type: str) -> dict[str, Any]:
    return {"node_type": node_type, "content": [ast_to_dict(child) for child in node.content]}


def _serialize_heading(node: Heading) -> dict[str, Any]:
    result = _serialize_inline_content_node(node, "Heading")
    result["level"] = node.level
    return result


def _serialize_list(node: List) -> dict[str, Any]:
    return {
        "node_type": "List",
        "ordered": node.ordered,
        "items": [ast_to_dict(item) for item in node.items],
    }


def _serialize_list_item(node: ListItem) -> dict[str, Any]:
    return {"node_type": "ListItem", "paragraph": ast_to_dict(node.paragraph)}


def _serialize_table(node: Table) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "Table", "rows": [ast_to_dict(row) for row in node.rows]}
    if node.caption is not None:
        result["caption"] = node.caption
    return result


def _serialize_table_row(node: TableRow) -> dict[str, Any]:
    return {"node_type": "TableRow", "cells": [ast_to_dict(cell) for cell in node.cells]}


def _serialize_table_cell(node: TableCell) -> dict[str, Any]:
    return {"node_type": "TableCell", "is_header": node.is_header, "paragraph": ast_to_dict(node.paragraph)}


def _serialize_text(node: Text) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "Text", "content": node.content}
    if node.marks:
        result["marks"] = node.ordered_marks()
    if node.href is not None:
        result["href"] = node.href
    return result


def _serialize_math_node(node: MathInline | MathDisplay, node_type: str) -> dict[str, Any]:
    return {"node_type": node_type, "content": node.content}


# Dispatch table mapping node types to their serialization functions
_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Document: _serialize_document,
    BlockQuote: lambda n: _serialize_children_node(n, "BlockQuote"),
    Heading: _serialize_heading,
    Paragraph: lambda n: _serialize_inline_content_node(n, "Paragraph"),
    List: _serialize_list,
    ListItem: _serialize_list_item,
    Table: _serialize_table,
    TableRow: _serialize_table_row,
    TableCell: _serialize_table_cell,
    Text: _serialize_text,
    MathInline: lambda n: _serialize_math_node(n, "MathInline"),
    MathDisplay: lambda n: _serialize_math_node(n, "MathDisplay"),
    LineBreak: lambda n: {"node_type": "LineBreak"},
}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to a dictionary representation.

    Parameters
    ----------
    node : Node
        The node to convert

    Returns
    -------
    dict
        Dictionary representation of the node

    Raises
    ------
    SerializationError
        If the node class is not part of the Document tree

    Examples
    --------
    >>> ast_to_dict(Text(content="Hello", marks=frozenset({"bold"})))
    {'node_type': 'Text', 'content': 'Hello', 'marks': ['bold']}

    """
    serializer = _SERIALIZATION_DISPATCH.get(type(node))
    if serializer:
        return serializer(node)

    raise SerializationError(f"Unknown node type for serialization: {type(node).__name__}")


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError as e:
        raise SerializationError(f"{data.get('node_type', 'Node')} is missing required field '{key}'") from e


def _deserialize_list(children_data: list[dict[str, Any]], strict_mode: bool) -> list[Any]:
    nodes = []
    for child in children_data:
        node = _deserialize_node(child, strict_mode)
        if node is not None:
            nodes.append(node)
    return nodes


def _deserialize_paragraph_field(data: dict[str, Any], strict_mode: bool) -> Paragraph:
    paragraph = _deserialize_node(_require(data, "paragraph"), strict_mode)
    if not isinstance(paragraph, Paragraph):
        raise SerializationError(f"{data['node_type']}.paragraph must be a Paragraph")
    return paragraph


def _deserialize_text(data: dict[str, Any], strict_mode: bool) -> Text:
    try:
        return Text(
            content=_require(data, "content"),
            marks=frozenset(data.get("marks", ())),
            href=data.get("href"),
        )
    except ValueError as e:
        if isinstance(e, SerializationError):
            raise
        raise SerializationError(str(e), original_error=e) from e


def _deserialize_heading(data: dict[str, Any], strict_mode: bool) -> Heading:
    try:
        return Heading(level=_require(data, "level"), content=_deserialize_list(data.get("content", []), strict_mode))
    except ValueError as e:
        if isinstance(e, SerializationError):
            raise
        raise SerializationError(str(e), original_error=e) from e


# Dispatch table mapping node type strings to deserializer functions
_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any], bool], Any]] = {
    "Document": lambda d, s: Document(
        children=_deserialize_list(d.get("children", []), s), metadata=dict(d.get("metadata", {}))
    ),
    "BlockQuote": lambda d, s: BlockQuote(children=_deserialize_list(d.get("children", []), s)),
    "Heading": _deserialize_heading,
    "Paragraph": lambda d, s: Paragraph(content=_deserialize_list(d.get("content", []), s)),
    "List": lambda d, s: List(ordered=bool(d.get("ordered", False)), items=_deserialize_list(d.get("items", []), s)),
    "ListItem": lambda d, s: ListItem(paragraph=_deserialize_paragraph_field(d, s)),
    "Table": lambda d, s: Table(rows=_deserialize_list(d.get("rows", []), s), caption=d.get("caption")),
    "TableRow": lambda d, s: TableRow(cells=_deserialize_list(d.get("cells", []), s)),
    "TableCell": lambda d, s: TableCell(
        paragraph=_deserialize_paragraph_field(d, s), is_header=bool(d.get("is_header", False))
    ),
    "Text": _deserialize_text,
    "MathInline": lambda d, s: MathInline(content=_require(d, "content")),
    "MathDisplay": lambda d, s: MathDisplay(content=_require(d, "content")),
    "LineBreak": lambda d, s: LineBreak(),
}


def _deserialize_node(data: dict[str, Any], strict_mode: bool) -> Optional[Node]:
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a node dictionary, got {type(data).__name__}")

    node_type = data.get("node_type")
    if not node_type:
        raise SerializationError("Dictionary must contain 'node_type' field")

    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)
    if not deserializer:
        if strict_mode:
            raise SerializationError(f"Unknown node type: {node_type}")
        logger.warning(f"Unknown node type '{node_type}', skipping")
        return None

    return deserializer(data, strict_mode)


def dict_to_ast(data: dict[str, Any], strict_mode: bool = True) -> Node:
    """Convert a dictionary representation back to a node.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node
    strict_mode : bool, default True
        If True, raise on unknown node types.
        If False, skip unknown nested nodes (useful for forward compatibility).

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    SerializationError
        If a required field is missing, the root node type is unknown, or an
        unknown nested node type is found in strict mode

    """
    node = _deserialize_node(data, strict_mode)
    if node is None:
        raise SerializationError(f"Unknown node type: {data.get('node_type')}")
    return node


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a node to a JSON string with schema versioning.

    Parameters
    ----------
    node : Node
        The node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON string of the form ``{"schema_version": 1, "node_type": ...}``

    """
    versioned_dict = {"schema_version": AST_SCHEMA_VERSION, **ast_to_dict(node)}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str, validate_schema: bool = True, strict_mode: bool = True) -> Node:
    """Deserialize a JSON string to a node.

    JSON without a ``schema_version`` field is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON string representation
    validate_schema : bool, default True
        If True, reject unsupported schema versions
    strict_mode : bool, default True
        If True, raise on unknown node types; otherwise skip them

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    SerializationError
        If the JSON is malformed or describes an invalid tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}", original_error=e) from e
    if not isinstance(data, dict):
        raise SerializationError("JSON root must be an object")

    schema_version = data.pop("schema_version", AST_SCHEMA_VERSION)
    if validate_schema:
        if not isinstance(schema_version, int):
            raise SerializationError(f"Schema version must be an integer, got {type(schema_version).__name__}")
        if schema_version != AST_SCHEMA_VERSION:
            raise SerializationError(
                f"Unsupported schema version: {schema_version}. "
                f"This version of texbridge supports schema version {AST_SCHEMA_VERSION} only."
            )

    return dict_to_ast(data, strict_mode=strict_mode)


# ============================================================================
# Editor JSON
# ============================================================================

_LIST_TYPES = {"bulletList": False, "orderedList": True}


def _editor_marks(node: Text) -> list[dict[str, Any]]:
    marks: list[dict[str, Any]] = [{"type": mark} for mark in node.ordered_marks()]
    if node.href is not None:
        marks.append({"type": "link", "attrs": {"href": node.href}})
    return marks


def _inline_to_editor(node: InlineNode) -> Optional[dict[str, Any]]:
    if isinstance(node, Text):
        if not node.content:
            return None
        result: dict[str, Any] = {"type": "text", "text": node.content}
        marks = _editor_marks(node)
        if marks:
            result["marks"] = marks
        return result
    if isinstance(node, MathInline):
        return {"type": "inlineMath", "attrs": {"latex": node.content}}
    if isinstance(node, MathDisplay):
        return {"type": "blockMath", "attrs": {"latex": node.content}}
    if isinstance(node, LineBreak):
        return {"type": "hardBreak"}
    logger.debug(f"Skipping unsupported inline node {type(node).__name__}")
    return None


def _inlines_to_editor(nodes: list[InlineNode]) -> list[dict[str, Any]]:
    return [converted for converted in (_inline_to_editor(node) for node in nodes) if converted is not None]


def _paragraph_to_editor(node: Paragraph) -> dict[str, Any]:
    result: dict[str, Any] = {"type": "paragraph"}
    content = _inlines_to_editor(node.content)
    if content:
        result["content"] = content
    return result


def _block_to_editor(node: BlockNode) -> Optional[dict[str, Any]]:
    if isinstance(node, Heading):
        result: dict[str, Any] = {"type": "heading", "attrs": {"level": node.level}}
        content = _inlines_to_editor(node.content)
        if content:
            result["content"] = content
        return result
    if isinstance(node, Paragraph):
        return _paragraph_to_editor(node)
    if isinstance(node, List):
        return {
            "type": "orderedList" if node.ordered else "bulletList",
            "content": [
                {"type": "listItem", "content": [_paragraph_to_editor(item.paragraph)]} for item in node.items
            ],
        }
    if isinstance(node, Table):
        result = {
            "type": "table",
            "content": [
                {
                    "type": "tableRow",
                    "content": [
                        {
                            "type": "tableHeader" if cell.is_header else "tableCell",
                            "content": [_paragraph_to_editor(cell.paragraph)],
                        }
                        for cell in row.cells
                    ],
                }
                for row in node.rows
            ],
        }
        if node.caption is not None:
            result["attrs"] = {"caption": node.caption}
        return result
    if isinstance(node, BlockQuote):
        return {"type": "blockquote", "content": _blocks_to_editor(node.children)}
    logger.debug(f"Skipping unsupported block node {type(node).__name__}")
    return None


def _blocks_to_editor(nodes: list[BlockNode]) -> list[dict[str, Any]]:
    return [converted for converted in (_block_to_editor(node) for node in nodes) if converted is not None]


def document_to_editor_json(doc: Document) -> dict[str, Any]:
    """Convert a Document to the editor's ProseMirror-style JSON.

    Parameters
    ----------
    doc : Document
        Tree to convert

    Returns
    -------
    dict
        ``{"type": "doc", "content": [...]}``; document metadata, when
        present, is carried in ``attrs.metadata``

    """
    result: dict[str, Any] = {"type": "doc", "content": _blocks_to_editor(doc.children)}
    if doc.metadata:
        result["attrs"] = {"metadata": dict(doc.metadata)}
    return result


def _editor_children(data: dict[str, Any], key: str = "content") -> list[dict[str, Any]]:
    """Return the object entries of a content or marks list, skipping anything else."""
    value = data.get(key) or []
    if not isinstance(value, list):
        logger.debug(f"Skipping editor '{key}' that is not a list: {type(value).__name__}")
        return []
    children = []
    for child in value:
        if isinstance(child, dict):
            children.append(child)
        else:
            logger.debug(f"Skipping editor {key} entry that is not an object: {child!r}")
    return children


def _editor_attrs(data: dict[str, Any]) -> dict[str, Any]:
    attrs = data.get("attrs")
    return attrs if isinstance(attrs, dict) else {}


def _editor_text(data: dict[str, Any]) -> Optional[Text]:
    text = data.get("text", "")
    if not isinstance(text, str):
        logger.debug(f"Skipping editor text node with non-string text {text!r}")
        return None
    if not text:
        return None
    marks = set()
    href = None
    for mark in _editor_children(data, "marks"):
        mark_type = mark.get("type")
        if mark_type in MARK_ORDER:
            marks.add(mark_type)
        elif mark_type == "link":
            href = _editor_attrs(mark).get("href", "")
        else:
            logger.debug(f"Skipping unknown editor mark '{mark_type}'")
    return Text(content=text, marks=frozenset(marks), href=href)


def _editor_inline(data: dict[str, Any]) -> Optional[InlineNode]:
    node_type = data.get("type")
    attrs = _editor_attrs(data)
    if node_type == "text":
        return _editor_text(data)
    if node_type == "inlineMath":
        return MathInline(content=attrs.get("latex", ""))
    if node_type == "blockMath":
        return MathDisplay(content=attrs.get("latex", ""))
    if node_type == "hardBreak":
        return LineBreak()
    logger.debug(f"Skipping unknown editor inline node '{node_type}'")
    return None


def _editor_inlines(content: list[dict[str, Any]]) -> list[InlineNode]:
    return [node for node in (_editor_inline(child) for child in content) if node is not None]


def _is_editor_inline(data: dict[str, Any]) -> bool:
    return data.get("type") in ("text", "inlineMath", "blockMath", "hardBreak")


def _editor_flatten_paragraph(content: list[dict[str, Any]]) -> Paragraph:
    """Collapse the block content of a list item or cell into one paragraph.

    Multiple text blocks are joined with a single space.
    """
    pieces: list[list[InlineNode]] = []
    for child in content:
        child_type = child.get("type")
        if child_type in ("paragraph", "heading"):
            pieces.append(_editor_inlines(_editor_children(child)))
        elif _is_editor_inline(child):
            pieces.append(_editor_inlines([child]))
        else:
            logger.debug(f"Dropping nested '{child_type}' inside a single-paragraph container")

    inlines: list[InlineNode] = []
    for piece in pieces:
        if not piece:
            continue
        if inlines:
            inlines.append(Text(content=" "))
        inlines.extend(piece)
    return Paragraph(content=inlines)


def _editor_table(data: dict[str, Any]) -> Table:
    rows: list[TableRow] = []
    for row_data in _editor_children(data):
        if row_data.get("type") != "tableRow":
            logger.debug(f"Skipping unknown editor table child '{row_data.get('type')}'")
            continue
        cells = []
        for cell_data in _editor_children(row_data):
            cell_type = cell_data.get("type")
            if cell_type not in ("tableCell", "tableHeader"):
                logger.debug(f"Skipping unknown editor table cell '{cell_type}'")
                continue
            cells.append(
                TableCell(
                    paragraph=_editor_flatten_paragraph(_editor_children(cell_data)),
                    is_header=cell_type == "tableHeader",
                )
            )
        rows.append(TableRow(cells=cells))

    if rows:
        width = len(rows[0].cells)
        for row in rows[1:]:
            if len(row.cells) > width:
                del row.cells[width:]
            while len(row.cells) < width:
                row.cells.append(TableCell())

    caption = _editor_attrs(data).get("caption")
    return Table(rows=rows, caption=caption)


def _editor_block(data: dict[str, Any]) -> Optional[BlockNode]:
    node_type = data.get("type")
    attrs = _editor_attrs(data)
    content = _editor_children(data)

    if node_type == "heading":
        level = attrs.get("level", 1)
        if not isinstance(level, int) or not 1 <= level <= 3:
            logger.debug(f"Clamping editor heading level {level!r}")
            level = min(max(level, 1), 3) if isinstance(level, int) else 1
        return Heading(level=level, content=_editor_inlines(content))
    if node_type == "paragraph":
        return Paragraph(content=_editor_inlines(content))
    if node_type in _LIST_TYPES:
        items = [
            ListItem(paragraph=_editor_flatten_paragraph(_editor_children(item)))
            for item in content
            if item.get("type") == "listItem"
        ]
        return List(ordered=_LIST_TYPES[node_type], items=items)
    if node_type == "table":
        return _editor_table(data)
    if node_type == "blockquote":
        return BlockQuote(children=_editor_blocks(content) or [Paragraph()])

    logger.debug(f"Skipping unknown editor node '{node_type}'")
    return None


def _editor_blocks(content: list[dict[str, Any]]) -> list[BlockNode]:
    """Convert editor block content, wrapping runs of bare inline nodes in paragraphs."""
    blocks: list[BlockNode] = []
    pending: list[dict[str, Any]] = []

    def flush() -> None:
        if pending:
            blocks.append(Paragraph(content=_editor_inlines(pending)))
            pending.clear()

    for child in content:
        if _is_editor_inline(child):
            pending.append(child)
            continue
        flush()
        block = _editor_block(child)
        if block is not None:
            blocks.append(block)
    flush()
    return blocks


def editor_json_to_document(data: dict[str, Any]) -> Document:
    """Convert the editor's ProseMirror-style JSON to a Document.

    Parameters
    ----------
    data : dict
        Editor tree with ``type == "doc"``

    Returns
    -------
    Document
        Tree with at least one block; an empty editor document becomes a
        single empty paragraph

    Raises
    ------
    SerializationError
        If ``data`` is not an editor document

    """
    if not isinstance(data, dict) or data.get("type") != "doc":
        raise SerializationError("Editor JSON root must be an object with type 'doc'")

    children = _editor_blocks(_editor_children(data))
    metadata = _editor_attrs(data).get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    return Document(children=children or [Paragraph()], metadata=metadata)


__all__ = [
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "document_to_editor_json",
    "editor_json_to_document",
]
