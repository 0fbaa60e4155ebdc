#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the source highlighting tokenizer."""

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from texbridge.highlight import LatexLexer, Token, TokenType, tokenize


def kinds(text: str) -> list[tuple[str, str]]:
    return [(token.kind.value, token.text) for token in tokenize(text)]


@pytest.mark.unit
class TestTokenize:
    """Tests for token classification."""

    def test_command_brackets_and_math(self):
        """Test a mixed line of markup."""
        assert kinds(r"\emph{x} $y$") == [
            ("command", r"\emph"),
            ("bracket", "{"),
            ("text", "x"),
            ("bracket", "}"),
            ("text", " "),
            ("math_delimiter", "$"),
            ("math", "y"),
            ("math_delimiter", "$"),
        ]

    def test_environment_markers(self):
        """Test that begin and end markers are single environment tokens."""
        assert kinds("\\begin{itemize}\n\\end{itemize}") == [
            ("environment", r"\begin{itemize}"),
            ("text", "\n"),
            ("environment", r"\end{itemize}"),
        ]

    def test_comment_runs_to_end_of_line(self):
        """Test that a comment stops before the newline."""
        assert kinds("a % note\nb") == [("text", "a "), ("comment", "% note"), ("text", "\nb")]

    def test_display_math_delimiters(self):
        """Test that $$ is one delimiter token."""
        assert kinds("$$a+b$$") == [("math_delimiter", "$$"), ("math", "a+b"), ("math_delimiter", "$$")]

    def test_escapes_inside_and_outside_math(self):
        """Test that escaped dollars never toggle math mode."""
        assert kinds(r"\$ $a\$b$") == [
            ("command", r"\$"),
            ("text", " "),
            ("math_delimiter", "$"),
            ("math", r"a\$b"),
            ("math_delimiter", "$"),
        ]

    def test_optional_argument_brackets(self):
        """Test square brackets are bracket tokens."""
        assert [kind for kind, _ in kinds(r"\item[x]")] == ["command", "bracket", "text", "bracket"]

    def test_trailing_backslash(self):
        """Test that a lone backslash at the end is a command token."""
        assert kinds("a\\") == [("text", "a"), ("command", "\\")]

    def test_token_offsets(self):
        """Test token start and end offsets."""
        tokens = tokenize(r"ab\cd")
        assert tokens == [Token(TokenType.TEXT, "ab", 0), Token(TokenType.COMMAND, r"\cd", 2)]
        assert tokens[1].end == 5

    def test_lexer_reports_math_state(self):
        """Test that an unterminated math span leaves the lexer in math mode."""
        lexer = LatexLexer("$x")
        lexer.tokenize()
        assert lexer.in_math is True

    def test_empty_input(self):
        """Test that empty text has no tokens."""
        assert tokenize("") == []

    def test_unmatched_pattern_advances_one_character(self):
        """Test that a pattern with no match still consumes input instead of stalling."""
        lexer = LatexLexer("ab")
        lexer.text_pattern = re.compile("z")
        assert lexer.tokenize() == [Token(TokenType.TEXT, "a", 0), Token(TokenType.TEXT, "b", 1)]


@pytest.mark.unit
@pytest.mark.fuzzing
class TestTokenizeProperties:
    """Property-based tests for the tokenizer."""

    @given(st.text(max_size=300))
    def test_tokens_cover_input_exactly(self, text):
        """Test that tokens are contiguous and reproduce the input."""
        tokens = tokenize(text)
        assert "".join(token.text for token in tokens) == text
        position = 0
        for token in tokens:
            assert token.start == position
            assert token.text
            position = token.end
