#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end tests across parsing, writing and preview rendering."""

import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from texbridge import parse, render, write
from texbridge.ast import (
    Document,
    Heading,
    LineBreak,
    List,
    ListItem,
    MathInline,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    Text,
    ValidationVisitor,
    extract_text,
)

_words = st.from_regex(r"[a-z]{1,8}", fullmatch=True)
_math = st.sampled_from(["x", "x^2", "a+b", "E=mc^2", r"\alpha", r"\frac{1}{2}", "n_1"])
_mark_commands = st.sampled_from(["textbf", "textit", "emph", "underline", "texttt", "st", "hl"])


@st.composite
def inline_markup(draw) -> str:
    """A run of words, marked words, math and links separated by spaces."""
    pieces = []
    for _ in range(draw(st.integers(min_value=1, max_value=6))):
        kind = draw(st.sampled_from(["word", "mark", "nested", "math", "display", "link"]))
        word = draw(_words)
        if kind == "mark":
            pieces.append(f"\\{draw(_mark_commands)}{{{word}}}")
        elif kind == "nested":
            outer, inner = draw(st.lists(_mark_commands, min_size=2, max_size=2, unique=True))
            pieces.append(f"\\{outer}{{\\{inner}{{{word}}}}}")
        elif kind == "math":
            pieces.append(f"${draw(_math)}$")
        elif kind == "display":
            pieces.append(f"$${draw(_math)}$$")
        elif kind == "link":
            pieces.append(f"\\href{{https://example.com/{draw(_words)}}}{{{word}}}")
        else:
            pieces.append(word)
    return " ".join(pieces)


@st.composite
def block_markup(draw) -> str:
    """One block of any supported kind."""
    kind = draw(st.sampled_from(["paragraph", "section", "list", "table", "tabular", "quote"]))
    if kind == "section":
        command = draw(st.sampled_from(["section", "subsection", "subsubsection"]))
        return f"\\{command}{{{draw(inline_markup())}}}"
    if kind == "list":
        environment = draw(st.sampled_from(["itemize", "enumerate"]))
        items = draw(st.lists(inline_markup(), min_size=1, max_size=4))
        body = "\n".join(f"\\item {item}" for item in items)
        return f"\\begin{{{environment}}}\n{body}\n\\end{{{environment}}}"
    if kind in ("table", "tabular"):
        columns = draw(st.integers(min_value=1, max_value=3))
        rows = draw(st.lists(st.lists(_words, min_size=columns, max_size=columns), min_size=1, max_size=3))
        body = "\n".join(" & ".join(row) + r" \\" for row in rows)
        tabular = f"\\begin{{tabular}}{{{'l' * columns}}}\n\\hline\n{body}\n\\hline\n\\end{{tabular}}"
        if kind == "tabular":
            return tabular
        caption = draw(st.one_of(st.none(), _words))
        caption_line = f"\n\\caption{{{caption}}}" if caption else ""
        return f"\\begin{{table}}[h]\n\\centering\n{tabular}{caption_line}\n\\end{{table}}"
    if kind == "quote":
        paragraphs = draw(st.lists(inline_markup(), min_size=1, max_size=2))
        return "\\begin{quote}\n" + "\n\n".join(paragraphs) + "\n\\end{quote}"
    return draw(inline_markup())


@st.composite
def document_markup(draw) -> str:
    """A body made of blank-line separated blocks."""
    return "\n\n".join(draw(st.lists(block_markup(), min_size=1, max_size=6)))


@pytest.mark.integration
class TestScenarios:
    """Concrete end-to-end scenarios."""

    def test_heading_and_math_paragraph(self):
        """Test a section followed by a paragraph with inline math."""
        doc = parse("\\section{Intro}\n\nHello $E=mc^2$.")
        assert doc.children == [
            Heading(level=1, content=[Text(content="Intro")]),
            Paragraph(content=[Text(content="Hello "), MathInline(content="E=mc^2"), Text(content=".")]),
        ]

    def test_itemize_round_trip(self):
        """Test that an itemize block is written back as an equivalent itemize block."""
        doc = parse("\\begin{itemize}\n\\item A\n\\item B\n\\end{itemize}")
        assert doc.children == [
            List(
                ordered=False,
                items=[
                    ListItem(paragraph=Paragraph(content=[Text(content="A")])),
                    ListItem(paragraph=Paragraph(content=[Text(content="B")])),
                ],
            )
        ]
        markup = write(doc)
        assert "\\begin{itemize}\n  \\item A\n  \\item B\n\\end{itemize}\n" in markup
        assert parse(markup) == doc

    def test_table_round_trip(self):
        """Test that a 2x2 table keeps one header row and one data row."""
        source = (
            "\\begin{table}\n\\begin{tabular}{|c|c|}\n\\hline\n"
            "A & B \\\\\n\\hline\n1 & 2 \\\\\n\\end{tabular}\n\\end{table}"
        )
        doc = parse(parse_and_write(source))
        (table,) = doc.children
        assert isinstance(table, Table)
        assert [[cell.is_header for cell in row.cells] for row in table.rows] == [[True, True], [False, False]]
        assert [[extract_text(cell) for cell in row.cells] for row in table.rows] == [["A", "B"], ["1", "2"]]

    def test_display_math_render(self):
        """Test that display math is typeset as a block without a paragraph around it."""
        html = render(r"$$\int_0^1 x dx$$")
        assert html.startswith('<div class="latex-document"><div class="math math-display"><math')
        assert html.endswith("</math></div></div>")
        assert "<p>" not in html

    def test_bare_tabular_render(self):
        """Test that a tabular without a table float renders without a caption."""
        html = render("\\begin{tabular}{|c|c|}\n\\hline\nA & B \\\\\n\\hline\n\\end{tabular}")
        rows = re.findall(r"<tr>(.*?)</tr>", html)
        assert len(rows) == 1
        assert rows[0].count("<th") == 2
        assert "latex-table-caption" not in html

    def test_empty_input(self):
        """Test that empty input gives one empty paragraph and a minimal document."""
        doc = parse("")
        assert doc.children == [Paragraph()]
        markup = write(doc)
        assert markup.endswith("\\begin{document}\n\n\n\\end{document}\n")
        assert parse(markup) == doc

    def test_sample_document_round_trip(self, sample_document):
        """Test that the sample document survives a full round trip with its metadata."""
        doc = parse(sample_document)
        again = parse(write(doc))
        assert again == doc
        assert again.metadata == {"title": "Field Notes", "author": "A. Author"}

    @pytest.mark.parametrize("source", ["a \\\\ \\section{b}", "x \\\\ \\begin{itemize}"])
    def test_line_break_before_block_command_round_trip(self, source):
        """Test that a block command after a paragraph line break stays in the paragraph."""
        doc = parse(source)
        assert len(doc.children) == 1
        assert parse(write(doc)) == doc

    def test_cell_line_break_round_trip(self):
        """Test that a line break inside a table cell is read back as a line break."""
        cell = TableCell(
            paragraph=Paragraph(content=[Text(content="a"), LineBreak(), Text(content="b")]), is_header=True
        )
        doc = Document(children=[Table(rows=[TableRow(cells=[cell])])])
        (table,) = parse(write(doc)).children
        assert table.rows[0].cells[0] == cell


def parse_and_write(source: str) -> str:
    return write(parse(source))


@pytest.mark.integration
@pytest.mark.fuzzing
class TestRoundTripProperties:
    """Property-based round-trip tests over generated markup."""

    @given(document_markup())
    @settings(deadline=None)
    def test_round_trip_is_stable(self, source):
        """Test that writing a parsed tree and parsing it again gives the same tree."""
        doc = parse(source)
        assert parse(write(doc)) == doc

    @given(document_markup())
    @settings(deadline=None)
    def test_parsed_trees_are_valid(self, source):
        """Test that parser output passes strict validation."""
        parse(source).accept(ValidationVisitor(strict=True))

    @given(st.text(alphabet="ab \n\\{}$&%[]_^" + "itembgnd", max_size=300))
    @settings(deadline=None)
    def test_arbitrary_text(self, source):
        """Test that any text parses to a non-empty tree of rectangular tables."""
        doc = parse(source)
        assert doc.children
        for block in doc.children:
            if isinstance(block, Table):
                widths = {len(row.cells) for row in block.rows}
                assert len(widths) == 1

    @given(document_markup())
    @settings(deadline=None, max_examples=25)
    def test_render_never_raises(self, source):
        """Test that generated documents render with the real typesetter."""
        html = render(source)
        assert html.startswith('<div class="latex-document">')

    @given(_words)
    def test_mark_nesting_survives(self, word):
        """Test that bold and italic together are recovered after writing."""
        doc = Document(children=[Paragraph(content=[Text(content=word, marks=frozenset({"bold", "italic"}))])])
        (paragraph,) = parse(write(doc)).children
        assert paragraph.content == [Text(content=word, marks=frozenset({"bold", "italic"}))]
