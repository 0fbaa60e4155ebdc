#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/highlight.py
r"""Source highlighting tokenizer for LaTeX markup.

The plain-text editing surface colours markup by token kind. The lexer here
classifies every character of the input exactly once, so joining the token
texts reproduces the input.

Math mode toggles on each unescaped ``$`` or ``$$`` delimiter; inside math
everything except delimiters and comments is a single ``math`` run.

Examples
--------
    >>> [t.kind.value for t in tokenize(r"\emph{x} $y$")]
    ['command', 'bracket', 'text', 'bracket', 'text', 'math_delimiter', 'math', 'math_delimiter']

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Token kinds produced by the highlighting lexer."""

    COMMENT = "comment"
    MATH_DELIMITER = "math_delimiter"
    MATH = "math"
    ENVIRONMENT = "environment"
    COMMAND = "command"
    BRACKET = "bracket"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    """A classified slice of the source.

    Parameters
    ----------
    kind : TokenType
        Token kind
    text : str
        Exact source text of the token
    start : int
        Offset of the token in the source

    """

    kind: TokenType
    text: str
    start: int

    @property
    def end(self) -> int:
        """Offset just past the token."""
        return self.start + len(self.text)


class LatexLexer:
    """Tokenizer for LaTeX markup.

    Parameters
    ----------
    content : str
        Markup to tokenize

    """

    def __init__(self, content: str):
        """Initialize the lexer with content."""
        self.content = content
        self.position = 0
        self.in_math = False
        self.tokens: list[Token] = []

        self.comment_pattern = re.compile(r"%[^\n]*")
        self.environment_pattern = re.compile(r"\\(?:begin|end)\s*\{[^{}\n]*\}")
        # Control words, control symbols (\%, \\, \{) and a trailing lone backslash
        self.command_pattern = re.compile(r"\\(?:[A-Za-z@]+|.)?", re.DOTALL)
        self.math_pattern = re.compile(r"(?:[^%$\\]|\\.)+|\\", re.DOTALL)
        self.text_pattern = re.compile(r"[^%$\\{}\[\]]+")

    def tokenize(self) -> list[Token]:
        """Tokenize the whole content.

        Returns
        -------
        list[Token]
            Tokens in source order

        """
        while self.position < len(self.content):
            self.tokens.append(self._next_token())
        return self.tokens

    def _emit(self, kind: TokenType, length: int) -> Token:
        token = Token(kind, self.content[self.position : self.position + length], self.position)
        self.position += length
        return token

    def _match_length(self, pattern: re.Pattern[str]) -> int:
        """Length of the match at the current position; a single character when nothing matches."""
        match = pattern.match(self.content, self.position)
        return len(match.group(0)) if match else 1

    def _next_token(self) -> Token:
        content = self.content
        char = content[self.position]

        if char == "%":
            return self._emit(TokenType.COMMENT, self._match_length(self.comment_pattern))

        if char == "$":
            self.in_math = not self.in_math
            return self._emit(TokenType.MATH_DELIMITER, 2 if content.startswith("$$", self.position) else 1)

        if self.in_math:
            return self._emit(TokenType.MATH, self._match_length(self.math_pattern))

        if char == "\\":
            match = self.environment_pattern.match(content, self.position)
            if match:
                return self._emit(TokenType.ENVIRONMENT, len(match.group(0)))
            return self._emit(TokenType.COMMAND, self._match_length(self.command_pattern))

        if char in "{}[]":
            return self._emit(TokenType.BRACKET, 1)

        return self._emit(TokenType.TEXT, self._match_length(self.text_pattern))


def tokenize(text: str) -> list[Token]:
    """Classify markup text into highlighting tokens.

    Parameters
    ----------
    text : str
        LaTeX markup

    Returns
    -------
    list[Token]
        Tokens covering the input exactly once, in order

    """
    return LatexLexer(text).tokenize()
