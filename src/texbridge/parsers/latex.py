#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/parsers/latex.py
r"""LaTeX to Document tree parser.

This module converts the supported LaTeX subset into a Document tree. The
scan is line oriented: blank lines end paragraphs, and sectioning commands
and a small set of environments are recognized at the start of a trimmed
line. Everything else is paragraph text, passed through the inline parser.

Malformed markup never raises. An environment without its end marker (or a
table without a tabular block or rows) degrades: its begin line is kept as
paragraph text and scanning continues on the next line.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from texbridge.ast import (
    BlockNode,
    BlockQuote,
    Document,
    Heading,
    List,
    ListItem,
    Paragraph,
    Table,
    TableCell,
    TableRow,
)
from texbridge.constants import HEADING_COMMANDS, LIST_ENVIRONMENTS, QUOTE_ENVIRONMENTS
from texbridge.options.latex import LatexParserOptions
from texbridge.parsers.base import BaseParser, ParserInput
from texbridge.parsers.inline import parse_inline
from texbridge.utils.latex import (
    extract_body,
    extract_preamble_metadata,
    parse_column_spec,
    read_group,
    split_table_rows,
    strip_comments,
)

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^\\(" + "|".join(HEADING_COMMANDS) + r")\*?\s*(?=\{)")
_BEGIN_RE = re.compile(r"^\\begin\s*\{([^{}]*)\}")
_ITEM_BOUNDARY_RE = re.compile(r"\\begin\s*\{[^{}]*\}|\\end\s*\{[^{}]*\}|\\item(?![A-Za-z])")
_TABULAR_BEGIN_RE = re.compile(r"\\begin\s*\{tabular\}")
_CAPTION_RE = re.compile(r"\\caption\s*(?:\[[^\]]*\])?\s*(?=\{)")
_OPTIONAL_ARG_RE = re.compile(r"^\s*\[[^\]]*\]")

_TABLE_ENVIRONMENTS = ("table", "tabular")


@dataclass(frozen=True)
class Cursor:
    """Immutable position in the trimmed line sequence.

    Sub-scans take a cursor and return a new one, so a failed sub-scan leaves
    the caller's position untouched.

    Parameters
    ----------
    lines : tuple of str
        Trimmed source lines
    index : int, default 0
        Index of the current line

    """

    lines: tuple[str, ...]
    index: int = 0

    @classmethod
    def from_text(cls, text: str) -> Cursor:
        """Create a cursor over the trimmed lines of ``text``."""
        return cls(tuple(line.strip() for line in text.split("\n")))

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.lines)

    @property
    def current(self) -> str:
        return self.lines[self.index]

    def advance(self, count: int = 1) -> Cursor:
        return Cursor(self.lines, self.index + count)

    def seek(self, index: int) -> Cursor:
        return Cursor(self.lines, index)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a successful block sub-scan.

    Parameters
    ----------
    block : BlockNode
        The parsed block
    cursor : Cursor
        Position of the first line after the block
    trailing : str
        Text following the block's closing marker on the same line

    """

    block: BlockNode
    cursor: Cursor
    trailing: str = ""


@dataclass(frozen=True)
class _EnvironmentSpan:
    inner: str
    cursor: Cursor
    trailing: str


class LatexParser(BaseParser):
    r"""Convert the supported LaTeX subset to a Document tree.

    Supported constructs
    --------------------
    Sectioning:
        - \section, \subsection, \subsubsection (starred forms too)

    Lists:
        - itemize and enumerate, one paragraph per \item

    Tables:
        - table (with optional \caption) wrapping tabular, or bare tabular

    Quotes:
        - quote and quotation, parsed recursively

    Inline content:
        - $...$, $$...$$, \\ and the formatting commands handled by
          :mod:`texbridge.parsers.inline`

    Parameters
    ----------
    options : LatexParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
        >>> parser = LatexParser()
        >>> doc = parser.parse("\\section{Intro}\n\nHello $E=mc^2$.")
        >>> [type(node).__name__ for node in doc.children]
        ['Heading', 'Paragraph']

    """

    def __init__(self, options: LatexParserOptions | None = None):
        """Initialize the LaTeX parser."""
        BaseParser._validate_options_type(options, LatexParserOptions, "latex")
        options = options or LatexParserOptions()
        super().__init__(options)
        self.options: LatexParserOptions = options

    def parse(self, input_data: ParserInput) -> Document:
        """Parse LaTeX input into a Document tree.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            LaTeX markup, or a path or stream to read it from

        Returns
        -------
        Document
            Tree with at least one block

        Raises
        ------
        ParsingError
            If the input cannot be loaded or decoded

        """
        content = self._load_text_content(
            input_data, encoding=self.options.encoding, strict=self.options.strict_mode
        )
        content = strip_comments(content)
        body, preamble = extract_body(content)

        metadata = {}
        if preamble is not None and self.options.parse_preamble:
            metadata = extract_preamble_metadata(preamble)

        children = self.parse_blocks(body)
        if not children:
            children = [Paragraph()]
        return Document(children=children, metadata=metadata)

    def parse_blocks(self, text: str) -> list[BlockNode]:
        """Parse a document body (no preamble, no comments) into blocks.

        Parameters
        ----------
        text : str
            Body text

        Returns
        -------
        list of BlockNode
            Parsed blocks, possibly empty

        """
        blocks: list[BlockNode] = []
        buffer: list[str] = []

        def flush() -> None:
            if buffer:
                blocks.append(Paragraph(content=parse_inline(" ".join(buffer))))
                buffer.clear()

        cursor = Cursor.from_text(text)
        while not cursor.at_end:
            line = cursor.current
            if not line:
                flush()
                cursor = cursor.advance()
                continue

            result = self._scan_block(cursor)
            if result is None:
                buffer.append(line)
                cursor = cursor.advance()
                continue

            flush()
            blocks.append(result.block)
            trailing = result.trailing.strip()
            if trailing:
                buffer.append(trailing)
            cursor = result.cursor

        flush()
        return blocks

    def _scan_block(self, cursor: Cursor) -> Optional[ScanResult]:
        line = cursor.current
        heading = _HEADING_RE.match(line)
        if heading:
            return self._scan_heading(cursor, heading)

        begin = _BEGIN_RE.match(line)
        if not begin:
            return None

        name = begin.group(1).strip()
        if name in LIST_ENVIRONMENTS:
            result = self._scan_list(cursor, name)
        elif name in _TABLE_ENVIRONMENTS:
            result = self._scan_table(cursor, name)
        elif name in QUOTE_ENVIRONMENTS:
            result = self._scan_quote(cursor, name)
        else:
            return None

        if result is None:
            logger.debug(f"Malformed {name} environment at line {cursor.index + 1}, keeping it as text")
        return result

    def _scan_heading(self, cursor: Cursor, match: re.Match[str]) -> Optional[ScanResult]:
        group = read_group(cursor.current, match.end())
        if group is None:
            logger.debug(f"Unterminated \\{match.group(1)} at line {cursor.index + 1}, keeping it as text")
            return None
        title, end = group
        level = HEADING_COMMANDS.index(match.group(1)) + 1
        return ScanResult(
            Heading(level=level, content=parse_inline(title.strip())),
            cursor.advance(),
            cursor.current[end:],
        )

    def _find_environment(self, cursor: Cursor, name: str) -> Optional[_EnvironmentSpan]:
        """Locate the end marker matching the ``\\begin{name}`` on the current line.

        Same-name environments are counted so nested blocks close correctly.
        """
        marker = re.compile(r"\\(begin|end)\s*\{" + re.escape(name) + r"\}")
        first = marker.match(cursor.current)
        if first is None:
            return None

        depth = 0
        pieces: list[str] = []
        for index in range(cursor.index, len(cursor.lines)):
            line = cursor.lines[index]
            start = first.end() if index == cursor.index else 0
            for found in marker.finditer(line, first.start() if index == cursor.index else 0):
                depth += 1 if found.group(1) == "begin" else -1
                if depth == 0:
                    pieces.append(line[start : found.start()])
                    return _EnvironmentSpan(
                        inner="\n".join(pieces),
                        cursor=cursor.seek(index + 1),
                        trailing=line[found.end() :],
                    )
            pieces.append(line[start:])
        return None

    def _scan_list(self, cursor: Cursor, name: str) -> Optional[ScanResult]:
        span = self._find_environment(cursor, name)
        if span is None:
            return None

        items = [ListItem(paragraph=Paragraph(content=parse_inline(text))) for text in _split_items(span.inner)]
        return ScanResult(List(ordered=LIST_ENVIRONMENTS[name], items=items), span.cursor, span.trailing)

    def _scan_table(self, cursor: Cursor, name: str) -> Optional[ScanResult]:
        span = self._find_environment(cursor, name)
        if span is None:
            return None

        caption = None
        if name == "tabular":
            tabular_inner = span.inner
        else:
            tabular_span = self._find_tabular(span.inner)
            if tabular_span is None:
                return None
            tabular_inner, remainder = tabular_span
            caption = _find_caption(remainder)

        table = self._build_table(tabular_inner, caption)
        if table is None:
            return None
        return ScanResult(table, span.cursor, span.trailing)

    def _find_tabular(self, text: str) -> Optional[tuple[str, str]]:
        """Return the tabular inner text and the rest of the table environment."""
        begin = _TABULAR_BEGIN_RE.search(text)
        if begin is None:
            return None
        end = text.find(r"\end{tabular}", begin.end())
        if end < 0:
            return None
        remainder = text[: begin.start()] + text[end + len(r"\end{tabular}") :]
        return text[begin.end() : end], remainder

    def _build_table(self, tabular_inner: str, caption: Optional[str]) -> Optional[Table]:
        optional = _OPTIONAL_ARG_RE.match(tabular_inner)
        group = read_group(tabular_inner, optional.end() if optional else 0)
        if group is None:
            return None
        spec, end = group
        body = tabular_inner[end:]

        rows = split_table_rows(body)
        if not rows:
            return None

        width = max([len(parse_column_spec(spec))] + [len(cells) for cells in rows])
        table_rows = []
        for row_index, cells in enumerate(rows):
            padded = cells + [""] * (width - len(cells))
            table_rows.append(
                TableRow(
                    cells=[
                        TableCell(paragraph=Paragraph(content=parse_inline(text)), is_header=row_index == 0)
                        for text in padded
                    ]
                )
            )
        return Table(rows=table_rows, caption=caption)

    def _scan_quote(self, cursor: Cursor, name: str) -> Optional[ScanResult]:
        span = self._find_environment(cursor, name)
        if span is None:
            return None
        children = self.parse_blocks(span.inner) or [Paragraph()]
        return ScanResult(BlockQuote(children=children), span.cursor, span.trailing)


def _split_items(body: str) -> list[str]:
    r"""Split a list body on top-level ``\item`` markers.

    Text before the first marker is ignored. Continuation lines are joined
    with a single space.
    """
    depth = 0
    starts: list[tuple[int, int]] = []
    for match in _ITEM_BOUNDARY_RE.finditer(body):
        token = match.group(0)
        if token.startswith("\\begin"):
            depth += 1
        elif token.startswith("\\end"):
            depth = max(depth - 1, 0)
        elif depth == 0:
            starts.append((match.start(), match.end()))

    items = []
    for position, (_, content_start) in enumerate(starts):
        content_end = starts[position + 1][0] if position + 1 < len(starts) else len(body)
        lines = [line.strip() for line in body[content_start:content_end].split("\n")]
        items.append(" ".join(line for line in lines if line))
    return items


def _find_caption(text: str) -> Optional[str]:
    match = _CAPTION_RE.search(text)
    if match is None:
        return None
    group = read_group(text, match.end())
    if group is None:
        return None
    return group[0].strip()
