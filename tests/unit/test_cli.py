#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the texbridge command-line interface."""

import argparse
import io
import json
import logging
import re

import pytest

from texbridge.ast import Document, Paragraph, Text, ast_to_json
from texbridge.cli import main
from texbridge.cli.builder import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from texbridge.cli.commands import parse_macro_arguments
from texbridge.cli.output import TOKEN_STYLES, render_highlighted_source, should_use_rich_output
from texbridge.exceptions import ValidationError
from texbridge.highlight import TokenType, tokenize


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the handler changes made by the CLI's logging setup."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.mark.cli
class TestParseCommand:
    """Tests for the parse subcommand."""

    def test_node_json(self, sample_file, capsys):
        """Test that parse prints versioned node JSON."""
        assert main(["parse", str(sample_file)]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["schema_version"] == 1
        assert data["node_type"] == "Document"
        assert data["metadata"]["title"] == "Field Notes"

    def test_editor_json(self, sample_file, capsys):
        """Test that --editor-json prints the editor tree."""
        assert main(["parse", str(sample_file), "--editor-json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "doc"
        assert data["content"]

    def test_no_parse_preamble(self, sample_file, capsys):
        """Test that metadata is skipped on request."""
        main(["parse", str(sample_file), "--no-parse-preamble"])
        assert json.loads(capsys.readouterr().out).get("metadata", {}) == {}

    def test_missing_file(self, tmp_path, capsys):
        """Test that an unreadable input is a parsing failure."""
        assert main(["parse", str(tmp_path / "missing.tex")]) == EXIT_PARSING_ERROR
        assert capsys.readouterr().err.startswith("Error:")

    def test_output_file(self, sample_file, tmp_path, capsys):
        """Test that --out writes to a file instead of stdout."""
        target = tmp_path / "tree.json"
        assert main(["parse", str(sample_file), "--out", str(target)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == ""
        assert json.loads(target.read_text(encoding="utf-8"))["node_type"] == "Document"


@pytest.mark.cli
class TestWriteCommand:
    """Tests for the write subcommand."""

    def test_write_from_node_json(self, write_file, capsys):
        """Test writing a full document from node JSON."""
        doc = Document(children=[Paragraph(content=[Text(content="Hi")])])
        path = write_file("tree.json", ast_to_json(doc))
        assert main(["write", str(path)]) == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert output.startswith("\\documentclass{article}\n")
        assert "Hi\n\n\\end{document}\n" in output

    def test_write_without_preamble(self, write_file, capsys):
        """Test that --no-preamble writes only the body."""
        doc = Document(children=[Paragraph(content=[Text(content="Hi")])])
        path = write_file("tree.json", ast_to_json(doc))
        assert main(["write", str(path), "--no-preamble"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Hi\n\n"

    def test_write_from_editor_json(self, write_file, capsys):
        """Test reading the editor tree format."""
        editor = {"type": "doc", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Hi"}]}]}
        path = write_file("editor.json", json.dumps(editor))
        assert main(["write", str(path), "--editor-json", "--no-preamble"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Hi\n\n"

    def test_invalid_json(self, write_file, capsys):
        """Test that malformed JSON is a general error."""
        path = write_file("bad.json", "{not json")
        assert main(["write", str(path)]) == EXIT_ERROR
        assert "Invalid JSON" in capsys.readouterr().err

    def test_root_must_be_document(self, write_file, capsys):
        """Test that a JSON tree whose root is not a Document is rejected."""
        path = write_file("para.json", ast_to_json(Paragraph(content=[Text(content="x")])))
        assert main(["write", str(path)]) == EXIT_ERROR
        assert "Expected a Document" in capsys.readouterr().err


@pytest.mark.cli
class TestRenderCommand:
    """Tests for the render subcommand."""

    def test_render(self, write_file, capsys):
        """Test rendering a heading."""
        path = write_file("doc.tex", r"\section{Intro}")
        assert main(["render", str(path)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == '<div class="latex-document"><h1>Intro</h1></div>\n'

    def test_macro(self, write_file, capsys):
        """Test that --macro definitions are expanded before typesetting."""
        path = write_file("doc.tex", r"$\RR$")
        assert main(["render", str(path), "--macro", r"RR=\mathbb{R}"]) == EXIT_SUCCESS
        assert "<math" in capsys.readouterr().out

    def test_invalid_macro(self, write_file, capsys):
        """Test that a macro without '=' is a validation failure."""
        path = write_file("doc.tex", "x")
        assert main(["render", str(path), "--macro", "RR"]) == EXIT_VALIDATION_ERROR
        assert "NAME=EXPANSION" in capsys.readouterr().err

    def test_strict_math_failure(self, write_file, capsys):
        """Test that --strict turns a typesetting failure into an exit code."""
        path = write_file("doc.tex", "$x^2^3$")
        assert main(["render", str(path), "--strict"]) == EXIT_RENDERING_ERROR

    def test_lenient_math_failure(self, write_file, capsys):
        """Test that the default mode still renders with an error marker."""
        path = write_file("doc.tex", "$x^2^3$")
        assert main(["render", str(path)]) == EXIT_SUCCESS
        assert "math-error" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        """Test that a missing file is a file error."""
        assert main(["render", str(tmp_path / "missing.tex")]) == EXIT_FILE_ERROR


@pytest.mark.cli
class TestOtherCommands:
    """Tests for roundtrip, tokens and shared options."""

    def test_roundtrip(self, sample_file, capsys):
        """Test that the sample document is stable."""
        assert main(["roundtrip", str(sample_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "OK\n"

    def test_roundtrip_missing_file(self, tmp_path):
        """Test that roundtrip reports unreadable input as a parsing failure."""
        assert main(["roundtrip", str(tmp_path / "missing.tex")]) == EXIT_PARSING_ERROR

    def test_tokens(self, write_file, capsys):
        """Test the tab-separated token listing."""
        path = write_file("doc.tex", r"\emph{x}")
        assert main(["tokens", str(path)]) == EXIT_SUCCESS
        assert capsys.readouterr().out.splitlines() == [
            "command\t0\t'\\\\emph'",
            "bracket\t5\t'{'",
            "text\t6\t'x'",
            "bracket\t7\t'}'",
        ]

    def test_tokens_rich_forced(self, write_file, capsys):
        """Test that --force-rich prints the styled source instead of the listing."""
        path = write_file("doc.tex", r"\emph{x} $y$")
        assert main(["tokens", str(path), "--rich", "--force-rich"]) == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "\x1b[" in output
        assert re.sub(r"\x1b\[[0-9;]*m", "", output) == r"\emph{x} $y$"

    def test_tokens_rich_piped(self, write_file, capsys):
        """Test that --rich falls back to the listing when stdout is not a terminal."""
        path = write_file("doc.tex", "x")
        assert main(["tokens", str(path), "--rich"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "text\t0\t'x'\n"

    def test_tokens_missing_file(self, tmp_path):
        """Test that tokens reports a missing file as a file error."""
        assert main(["tokens", str(tmp_path / "missing.tex")]) == EXIT_FILE_ERROR

    def test_log_file(self, write_file, tmp_path, capsys):
        """Test that --log-file receives log output."""
        path = write_file("doc.tex", "x")
        log_path = tmp_path / "run.log"
        assert main(["render", str(path), "--log-level", "info", "--log-file", str(log_path)]) == EXIT_SUCCESS
        assert "Logging to file" in log_path.read_text(encoding="utf-8")

    def test_command_required(self, capsys):
        """Test that argparse exits when no command is given."""
        with pytest.raises(SystemExit):
            main([])


@pytest.mark.cli
class TestMacroArguments:
    """Tests for NAME=EXPANSION parsing."""

    def test_valid(self):
        """Test names are stripped and expansions kept verbatim."""
        assert parse_macro_arguments([r" RR =\mathbb{R}", "E="]) == {"RR": r"\mathbb{R}", "E": ""}

    @pytest.mark.parametrize("value", ["RR", "=x", " =x"])
    def test_invalid(self, value):
        """Test values without a separator or name."""
        with pytest.raises(ValidationError):
            parse_macro_arguments([value])


@pytest.mark.cli
class TestRichOutput:
    """Tests for the rich output helpers."""

    class _Terminal(io.StringIO):
        def isatty(self):
            return True

    def test_rich_flag_required(self):
        """Test that rich output is off without --rich."""
        args = argparse.Namespace(rich=False, force_rich=True)
        assert not should_use_rich_output(args, stream=self._Terminal())

    def test_terminal_enables_rich(self):
        """Test that a terminal stream enables rich output."""
        args = argparse.Namespace(rich=True, force_rich=False)
        assert should_use_rich_output(args, stream=self._Terminal())
        assert not should_use_rich_output(args, stream=io.StringIO())

    def test_force_rich(self):
        """Test that --force-rich ignores the stream."""
        args = argparse.Namespace(rich=True, force_rich=True)
        assert should_use_rich_output(args, stream=io.StringIO())

    def test_highlighted_source_styles_by_kind(self):
        """Test that command and text tokens get different styles."""
        output = render_highlighted_source(tokenize(r"\cmd word"), width=80)
        assert TOKEN_STYLES[TokenType.COMMAND] == "cyan"
        assert "\x1b[36m\\cmd" in output
        assert output.endswith("word")
