#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the LaTeX writer."""

import pytest

from texbridge.ast import (
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
from texbridge.exceptions import InvalidOptionsError
from texbridge.options import LatexParserOptions, LatexWriterOptions
from texbridge.renderers.latex import LatexRenderer


def _body(*blocks) -> str:
    """Write blocks without the document wrapper."""
    renderer = LatexRenderer(LatexWriterOptions(include_preamble=False))
    return renderer.render_to_string(Document(children=list(blocks)))


def _paragraph(*nodes) -> Paragraph:
    return Paragraph(content=list(nodes))


def _cell(text: str, is_header: bool = False) -> TableCell:
    return TableCell(paragraph=_paragraph(Text(content=text)), is_header=is_header)


@pytest.mark.unit
class TestDocumentWrapper:
    """Tests for the preamble and document environment."""

    def test_default_preamble(self):
        """Test the default class, packages and document environment."""
        output = LatexRenderer().render_to_string(Document(children=[_paragraph(Text(content="Hi"))]))
        assert output == (
            "\\documentclass{article}\n"
            "\\usepackage{amsmath}\n"
            "\\usepackage{hyperref}\n"
            "\\usepackage{soul}\n"
            "\\usepackage{xcolor}\n"
            "\\begin{document}\n\n"
            "Hi\n\n"
            "\\end{document}\n"
        )

    def test_metadata_written_to_preamble(self):
        """Test that title, author and date are written after the packages."""
        doc = Document(children=[Paragraph()], metadata={"title": "T", "date": "2024", "other": "x"})
        output = LatexRenderer(LatexWriterOptions(packages=[])).render_to_string(doc)
        assert output.startswith("\\documentclass{article}\n\\title{T}\n\\date{2024}\n\\begin{document}")
        assert "other" not in output

    def test_custom_document_class(self):
        """Test that the document class option is used."""
        output = LatexRenderer(LatexWriterOptions(document_class="report")).render_to_string(Document())
        assert output.startswith("\\documentclass{report}\n")

    def test_without_preamble(self):
        """Test that only the body is written when the preamble is off."""
        assert _body(Heading(level=1, content=[Text(content="Title")])) == "\\section{Title}\n\n"

    def test_output_is_deterministic(self):
        """Test that writing the same tree twice gives the same text."""
        doc = Document(children=[_paragraph(Text(content="x", marks=frozenset({"bold", "italic", "code"})))])
        renderer = LatexRenderer()
        assert renderer.render_to_string(doc) == renderer.render_to_string(doc)


@pytest.mark.unit
class TestBlocks:
    """Tests for block nodes."""

    @pytest.mark.parametrize("level,command", [(1, "section"), (2, "subsection"), (3, "subsubsection")])
    def test_heading_levels(self, level, command):
        """Test that levels map to sectioning commands."""
        assert _body(Heading(level=level, content=[Text(content="H")])) == f"\\{command}{{H}}\n\n"

    def test_empty_paragraph_is_single_newline(self):
        """Test that an empty paragraph writes one newline."""
        assert _body(Paragraph()) == "\n"

    def test_lists(self):
        """Test itemize and enumerate output."""
        items = [ListItem(paragraph=_paragraph(Text(content="one"))), ListItem(paragraph=_paragraph())]
        assert _body(List(ordered=False, items=items)) == (
            "\\begin{itemize}\n  \\item one\n  \\item \n\\end{itemize}\n\n"
        )
        assert _body(List(ordered=True, items=items[:1])).startswith("\\begin{enumerate}\n")

    def test_table(self):
        """Test the table float layout with rules and caption."""
        table = Table(
            rows=[
                TableRow(cells=[_cell("A", True), _cell("B", True)]),
                TableRow(cells=[_cell("1"), _cell("2")]),
            ],
            caption="Values",
        )
        assert _body(table) == (
            "\\begin{table}[h]\n"
            "\\centering\n"
            "\\begin{tabular}{|c|c|}\n"
            "\\hline\n"
            "A & B \\\\\n"
            "\\hline\n"
            "1 & 2 \\\\\n"
            "\\hline\n"
            "\\end{tabular}\n"
            "\\caption{Values}\n"
            "\\end{table}\n\n"
        )

    def test_table_rows_normalized_to_first_row(self):
        """Test that short rows are padded and long rows truncated."""
        table = Table(
            rows=[
                TableRow(cells=[_cell("A", True), _cell("B", True)]),
                TableRow(cells=[_cell("1")]),
                TableRow(cells=[_cell("x"), _cell("y"), _cell("z")]),
            ]
        )
        output = _body(table)
        assert "1 &  \\\\\n" in output
        assert "x & y \\\\\n" in output
        assert "z" not in output

    def test_table_placement_option(self):
        """Test that an empty placement omits the optional argument."""
        table = Table(rows=[TableRow(cells=[_cell("A", True)])])
        renderer = LatexRenderer(LatexWriterOptions(include_preamble=False, table_placement=""))
        assert renderer.render_to_string(Document(children=[table])).startswith("\\begin{table}\n")

    def test_empty_table_skipped(self):
        """Test that a table without rows writes nothing."""
        assert _body(Table()) == ""

    def test_block_quote(self):
        """Test that quotes wrap their child blocks."""
        quote = BlockQuote(children=[_paragraph(Text(content="q"))])
        assert _body(quote) == "\\begin{quote}\nq\n\n\\end{quote}\n\n"


@pytest.mark.unit
class TestInline:
    """Tests for inline nodes."""

    def test_marks_wrapped_innermost_first(self):
        """Test that the first declared mark is the innermost command."""
        node = Text(content="x", marks=frozenset({"italic", "bold", "highlight"}))
        assert _body(_paragraph(node)) == "\\hl{\\textit{\\textbf{x}}}\n\n"

    @pytest.mark.parametrize(
        "mark,command",
        [
            ("bold", "textbf"),
            ("italic", "textit"),
            ("underline", "underline"),
            ("code", "texttt"),
            ("strike", "st"),
            ("highlight", "hl"),
        ],
    )
    def test_each_mark(self, mark, command):
        """Test the command written for each mark."""
        assert _body(_paragraph(Text(content="x", marks=frozenset({mark})))) == f"\\{command}{{x}}\n\n"

    def test_link_outermost(self):
        """Test that the link wraps the marked text."""
        node = Text(content="x", marks=frozenset({"bold"}), href="https://example.org")
        assert _body(_paragraph(node)) == "\\href{https://example.org}{\\textbf{x}}\n\n"

    def test_math(self):
        """Test inline and display math delimiters."""
        paragraph = _paragraph(Text(content="a "), MathInline(content="x"), MathDisplay(content="y"))
        assert _body(paragraph) == "a $x$$$y$$\n\n"

    def test_text_not_escaped(self):
        """Test that text is written verbatim."""
        assert _body(_paragraph(Text(content=r"50\% of R\&D"))) == "50\\% of R\\&D\n\n"

    def test_line_break_in_paragraph(self):
        """Test that a paragraph line break ends the source line."""
        assert _body(_paragraph(Text(content="a"), LineBreak(), Text(content="b"))) == "a\\\\\nb\n\n"

    @pytest.mark.parametrize("following", [r"\section{b}", r"\subsection*{b}", r"\begin{itemize}", r"\end{quote}"])
    def test_line_break_before_block_command_stays_on_line(self, following):
        """Test that text starting with a block command is not moved to the start of a line."""
        paragraph = _paragraph(Text(content="a "), LineBreak(), Text(content=following))
        assert _body(paragraph) == f"a \\\\ {following}\n\n"

    def test_line_break_before_other_commands_ends_line(self):
        """Test that ordinary commands after a break still start a new line."""
        item = ListItem(paragraph=_paragraph(Text(content="a"), LineBreak(), Text(content=r"\sectionmark x")))
        output = _body(List(ordered=False, items=[item]))
        assert output == "\\begin{itemize}\n  \\item a\\\\\n\\sectionmark x\n\\end{itemize}\n\n"

    def test_line_break_in_heading_and_cell(self):
        """Test that headings and cells use single-line break forms."""
        heading = Heading(level=1, content=[Text(content="a"), LineBreak(), Text(content="b")])
        assert _body(heading) == "\\section{a\\\\ b}\n\n"

        cell = TableCell(paragraph=_paragraph(Text(content="a"), LineBreak(), Text(content="b")), is_header=True)
        output = _body(Table(rows=[TableRow(cells=[cell])]))
        assert "a\\newline b \\\\\n" in output

    def test_unsupported_nodes_skipped(self):
        """Test that foreign objects in the tree are ignored."""
        doc = Document(children=[object(), _paragraph(Text(content="ok"), object())])
        renderer = LatexRenderer(LatexWriterOptions(include_preamble=False))
        assert renderer.render_to_string(doc) == "ok\n\n"


@pytest.mark.unit
class TestWriterOptions:
    """Tests for writer option handling."""

    def test_wrong_options_class(self):
        """Test that parser options are rejected by the writer."""
        with pytest.raises(InvalidOptionsError):
            LatexRenderer(LatexParserOptions())

    def test_empty_document_class_rejected(self):
        """Test option validation."""
        with pytest.raises(ValueError):
            LatexWriterOptions(document_class="")

    def test_packages_copied(self):
        """Test that the package list is not shared with the caller."""
        packages = ["amsmath"]
        options = LatexWriterOptions(packages=packages)
        packages.append("tikz")
        assert options.packages == ["amsmath"]
