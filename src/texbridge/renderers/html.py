#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/renderers/html.py
r"""HTML preview rendering for LaTeX markup.

The preview renderer works on the markup text directly rather than on the
Document tree. It runs a fixed sequence of named text transforms
(:data:`RENDER_STAGES`); each stage receives the output of the previous one
together with a per-call :class:`RenderContext`.

Finished fragments that later stages must not touch (verbatim blocks and
typeset math) are moved into the context's stash and replaced by
placeholders, then put back by the ``restore`` stage.

Examples
--------
    >>> from texbridge.renderers.html import HtmlPreviewRenderer
    >>> html = HtmlPreviewRenderer().render_to_string(r"\section{Intro}")
    >>> html
    '<div class="latex-document"><h1>Intro</h1></div>'

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from texbridge.constants import (
    BLOCK_LEVEL_TAGS,
    DEFAULT_HTML_ERROR_CLASS,
    DEFAULT_MATH_ERROR_CLASS,
    DISPLAY_MATH_ENVIRONMENTS,
    HEADING_COMMANDS,
    LIST_ENVIRONMENTS,
    MARK_COMMAND_ALIASES,
    QUOTE_ENVIRONMENTS,
    Mark,
)
from texbridge.exceptions import MathRenderingError, RenderingError, TexBridgeError
from texbridge.options.html import HtmlPreviewOptions, MathTypesetter
from texbridge.renderers.base import BaseRenderer
from texbridge.renderers.math import expand_macros, typeset_math
from texbridge.utils.html_utils import (
    PROTECTED_GT,
    PROTECTED_LT,
    escape_angle_brackets,
    escape_html,
    protect_angle_brackets,
    protected_to_entities,
    unprotect_angle_brackets,
)
from texbridge.utils.latex import (
    extract_body,
    extract_preamble_metadata,
    is_escaped,
    parse_column_spec,
    read_group,
    split_table_rows,
    strip_comments,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_OPEN = "\ue000"
_PLACEHOLDER_CLOSE = "\ue001"
_PLACEHOLDER_RE = re.compile(_PLACEHOLDER_OPEN + r"(\d+)" + _PLACEHOLDER_CLOSE)
# Characters with an internal meaning here; they are removed from the input.
_RESERVED_CHARS = dict.fromkeys(map(ord, (_PLACEHOLDER_OPEN, _PLACEHOLDER_CLOSE, PROTECTED_LT, PROTECTED_GT)))

_MARK_TAGS: dict[Mark, str] = {
    "bold": "strong",
    "italic": "em",
    "underline": "u",
    "code": "code",
    "strike": "s",
    "highlight": "mark",
}

_VERBATIM_RE = re.compile(r"(\\begin\{verbatim\}.*?\\end\{verbatim\})", re.DOTALL)
_VERBATIM_BODY_RE = re.compile(r"\\begin\{verbatim\}(.*?)\\end\{verbatim\}", re.DOTALL)

_BLOCK_ENVIRONMENTS = tuple(LIST_ENVIRONMENTS) + QUOTE_ENVIRONMENTS + ("center",)
_BLOCK_ENVIRONMENT_NAMES = "|".join(_BLOCK_ENVIRONMENTS)
# Matches an environment whose body holds no other block environment, so
# repeated substitution resolves nesting from the inside out.
_INNERMOST_ENVIRONMENT_RE = re.compile(
    r"\\begin\{(" + _BLOCK_ENVIRONMENT_NAMES + r")\}"
    r"((?:(?!\\begin\{(?:" + _BLOCK_ENVIRONMENT_NAMES + r")\}).)*?)"
    r"\\end\{\1\}",
    re.DOTALL,
)
_ITEM_RE = re.compile(r"\\item(?![A-Za-z])(?:\s*\[[^\]]*\])?")

_TABLE_ENV_RE = re.compile(r"\\begin\{table\*?\}(.*?)\\end\{table\*?\}", re.DOTALL)
_TABULAR_BEGIN_RE = re.compile(r"\\begin\{tabular\}(?:\s*\[[^\]]*\])?")
_TABULAR_END = r"\end{tabular}"
_CAPTION_RE = re.compile(r"\\caption(?:\s*\[[^\]]*\])?\s*(?=\{)")

_MATH_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (
        re.compile(
            r"\\begin\{("
            + "|".join(re.escape(name) for name in DISPLAY_MATH_ENVIRONMENTS)
            + r")\}(?P<math>.*?)\\end\{\1\}",
            re.DOTALL,
        ),
        True,
    ),
    (re.compile(r"(?<!\\)\$\$(?P<math>.+?)(?<!\\)\$\$", re.DOTALL), True),
    (re.compile(r"(?<!\\)\\\[(?P<math>.*?)(?<!\\)\\\]", re.DOTALL), True),
    (re.compile(r"(?<!\\)\$(?P<math>[^$\n]+?)(?<!\\)\$"), False),
    (re.compile(r"(?<!\\)\\\((?P<math>.*?)(?<!\\)\\\)", re.DOTALL), False),
)

_LINE_BREAK_RE = re.compile(r"\\\\(?:\s*\[[^\]]*\])?|\\newline(?![A-Za-z])")
_ESCAPED_CHAR_RE = re.compile(r"\\([&%$#_{}])")
_TILDE_RE = re.compile(r"(?<!\\)~")

_BLOCK_START_RE = re.compile(r"^<(" + "|".join(BLOCK_LEVEL_TAGS) + r")\b")
_BLOCK_TAG_OR_BLANK_RE = re.compile(
    r"(?P<tag><(?P<close>/?)(?:" + "|".join(BLOCK_LEVEL_TAGS) + r")\b[^>]*>)|(?P<blank>\n\s*\n)"
)


@dataclass
class RenderContext:
    """Per-call state shared by the render stages.

    Parameters
    ----------
    options : HtmlPreviewOptions
        Options of the renderer that started this call
    typesetter : callable
        Math typesetter ``(expression, display_mode) -> html``
    stash : list of str
        Finished HTML fragments, addressed by placeholder index
    metadata : dict
        Preamble metadata (title, author, date)

    """

    options: HtmlPreviewOptions
    typesetter: MathTypesetter
    stash: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def stash_fragment(self, html: str) -> str:
        """Store a finished fragment and return its placeholder."""
        self.stash.append(html)
        return f"{_PLACEHOLDER_OPEN}{len(self.stash) - 1}{_PLACEHOLDER_CLOSE}"

    def restore(self, text: str) -> str:
        """Replace every placeholder in ``text`` with its stashed fragment."""

        def replace(match: re.Match[str]) -> str:
            index = int(match.group(1))
            return self.stash[index] if index < len(self.stash) else match.group(0)

        return _PLACEHOLDER_RE.sub(replace, text)


def _block(html: str) -> str:
    """Surround a block-level fragment with blank lines so it forms its own chunk."""
    return f"\n\n{html}\n\n"


def _replace_commands(
    text: str,
    names: tuple[str, ...],
    render: Callable[[str, list[str]], str],
    arity: int = 1,
) -> str:
    r"""Replace ``\name{arg}...`` occurrences with rendered HTML.

    Arguments are matched with brace balancing. Occurrences are processed
    right to left, so a command nested in another command's argument is
    replaced before the outer one reads it.

    Parameters
    ----------
    text : str
        Text to transform
    names : tuple of str
        Command names without the backslash
    render : callable
        ``(command_name, arguments) -> html``
    arity : int, default 1
        Number of brace arguments to read

    Returns
    -------
    str
        Transformed text; commands with missing or unterminated arguments
        are left unchanged

    """
    pattern = re.compile(r"\\(" + "|".join(re.escape(name) for name in names) + r")(?![A-Za-z])\*?")
    for match in reversed(list(pattern.finditer(text))):
        if is_escaped(text, match.start()):
            continue
        arguments = []
        end = match.end()
        for _ in range(arity):
            group = read_group(text, end)
            if group is None:
                break
            arguments.append(group[0])
            end = group[1]
        if len(arguments) < arity:
            continue
        text = text[: match.start()] + render(match.group(1), arguments) + text[end:]
    return text


# =============================================================================
# Stages
# =============================================================================


def prepare_stage(text: str, ctx: RenderContext) -> str:
    """Strip comments outside verbatim blocks, capture metadata and extract the body."""
    text = text.translate(_RESERVED_CHARS)
    segments = _VERBATIM_RE.split(text)
    # Odd indices hold the captured verbatim blocks.
    text = "".join(segment if index % 2 else strip_comments(segment) for index, segment in enumerate(segments))
    body, preamble = extract_body(text)
    if preamble is not None:
        ctx.metadata.update(extract_preamble_metadata(preamble))
    return body


def verbatim_stage(text: str, ctx: RenderContext) -> str:
    """Render verbatim environments as escaped preformatted blocks."""

    def replace(match: re.Match[str]) -> str:
        code = escape_html(match.group(1).strip("\n"))
        return _block(ctx.stash_fragment(f"<pre><code>{code}</code></pre>"))

    return _VERBATIM_BODY_RE.sub(replace, text)


def escape_stage(text: str, ctx: RenderContext) -> str:
    """Protect angle brackets in the remaining markup.

    They become entities in the restore stage; entities here would add an
    ``&`` that the tables stage would read as a column separator.
    """
    return protect_angle_brackets(text)


def title_stage(text: str, ctx: RenderContext) -> str:
    r"""Replace ``\maketitle`` with a title block built from the preamble metadata."""
    parts = []
    for name, tag in (("title", "h1"), ("author", "div"), ("date", "div")):
        value = ctx.metadata.get(name)
        if value:
            parts.append(f'<{tag} class="latex-{name}">{escape_angle_brackets(value)}</{tag}>')
    title_block = _block(f'<div class="latex-title-block">{"".join(parts)}</div>') if parts else ""
    return re.sub(r"\\maketitle(?![A-Za-z])", lambda _: title_block, text)


def sections_stage(text: str, ctx: RenderContext) -> str:
    """Replace sectioning commands, starred or not, with heading tags."""

    def render(name: str, arguments: list[str]) -> str:
        tag = f"h{HEADING_COMMANDS.index(name) + 1}"
        return _block(f"<{tag}>{arguments[0].strip()}</{tag}>")

    return _replace_commands(text, HEADING_COMMANDS, render)


def _render_list(name: str, body: str) -> str:
    tag = "ol" if LIST_ENVIRONMENTS[name] else "ul"
    # Text before the first item is dropped.
    items = _ITEM_RE.split(body)[1:]
    rendered = "".join(f"<li>{item.strip()}</li>\n" for item in items)
    return f"<{tag}>\n{rendered}</{tag}>"


def environments_stage(text: str, ctx: RenderContext) -> str:
    """Replace list, quote and center environments, innermost first."""

    def replace(match: re.Match[str]) -> str:
        name, body = match.group(1), match.group(2)
        if name in LIST_ENVIRONMENTS:
            return _block(_render_list(name, body))
        if name in QUOTE_ENVIRONMENTS:
            return _block(f"<blockquote>{body.strip()}</blockquote>")
        return _block(f'<div style="text-align: center;">{body.strip()}</div>')

    previous = None
    while previous != text:
        previous = text
        text = _INNERMOST_ENVIRONMENT_RE.sub(replace, text)
    return text


def _render_tabular(spec: str, body: str, caption: Optional[str]) -> str:
    rows = split_table_rows(body)
    alignments = parse_column_spec(spec)
    width = max([len(alignments)] + [len(cells) for cells in rows])
    alignments = alignments + ["left"] * (width - len(alignments))

    lines = ['<div class="latex-table"><table>']
    for row_index, cells in enumerate(rows):
        tag = "th" if row_index == 0 else "td"
        padded = cells + [""] * (width - len(cells))
        rendered = "".join(
            f'<{tag} style="text-align: {alignment};">{cell}</{tag}>' for cell, alignment in zip(padded, alignments)
        )
        lines.append(f"<tr>{rendered}</tr>")
    lines.append("</table>")
    if caption:
        lines.append(f'<div class="latex-table-caption">{caption}</div>')
    lines.append("</div>")
    return _block("\n".join(lines))


def _find_tabular(text: str, start: int = 0) -> Optional[tuple[int, int, str, str]]:
    """Locate a complete tabular environment at or after ``start``.

    Returns ``(begin, end, column_spec, body)`` or None.
    """
    begin = _TABULAR_BEGIN_RE.search(text, start)
    while begin is not None:
        group = read_group(text, begin.end())
        end = text.find(_TABULAR_END, begin.end())
        if group is not None and end >= group[1]:
            spec, body_start = group
            return begin.start(), end + len(_TABULAR_END), spec, text[body_start:end]
        begin = _TABULAR_BEGIN_RE.search(text, begin.end())
    return None


def tables_stage(text: str, ctx: RenderContext) -> str:
    """Replace table environments and bare tabulars with HTML tables."""

    def replace_table(match: re.Match[str]) -> str:
        inner = match.group(1)
        found = _find_tabular(inner)
        if found is None:
            logger.debug("Table environment without a complete tabular left unchanged")
            return match.group(0)
        begin, end, spec, body = found
        caption = None
        rest = inner[:begin] + inner[end:]
        caption_match = _CAPTION_RE.search(rest)
        if caption_match:
            group = read_group(rest, caption_match.end())
            caption = group[0].strip() if group else None
        return _render_tabular(spec, body, caption)

    text = _TABLE_ENV_RE.sub(replace_table, text)

    found = _find_tabular(text)
    while found is not None:
        begin, end, spec, body = found
        html = _render_tabular(spec, body, None)
        text = text[:begin] + html + text[end:]
        position = begin + len(html)
        found = _find_tabular(text, position)
    return text


def _math_error(raw: str, error: MathRenderingError, ctx: RenderContext) -> str:
    if ctx.options.strict_errors:
        raise error
    logger.warning(error.message)
    return ctx.stash_fragment(f'<span class="{DEFAULT_MATH_ERROR_CLASS}" style="color: red;">{escape_html(raw)}</span>')


def _typeset(expression: str, display_mode: bool, ctx: RenderContext) -> str:
    raw = unprotect_angle_brackets(expression).strip()
    try:
        html = ctx.typesetter(expand_macros(raw, ctx.options.macros), display_mode)
    except MathRenderingError as e:
        return _math_error(raw, e, ctx)
    except Exception as e:
        return _math_error(raw, MathRenderingError(raw, display_mode, original_error=e), ctx)
    return ctx.stash_fragment(html)


def math_stage(text: str, ctx: RenderContext) -> str:
    """Typeset display and inline math, stashing the results."""
    for pattern, display_mode in _MATH_PATTERNS:

        def replace(match: re.Match[str], display_mode: bool = display_mode) -> str:
            return _typeset(match.group("math"), display_mode, ctx)

        text = pattern.sub(replace, text)
    return text


def formatting_stage(text: str, ctx: RenderContext) -> str:
    """Replace formatting commands, links, line breaks and character escapes."""

    def render_mark(name: str, arguments: list[str]) -> str:
        tag = _MARK_TAGS[MARK_COMMAND_ALIASES[name]]
        return f"<{tag}>{arguments[0]}</{tag}>"

    text = _replace_commands(text, tuple(MARK_COMMAND_ALIASES), render_mark)
    text = _replace_commands(
        text,
        ("href",),
        lambda _, args: f'<a href="{args[0].strip().replace(chr(34), "&quot;")}">{args[1]}</a>',
        arity=2,
    )
    text = _replace_commands(
        text,
        ("url",),
        lambda _, args: f'<a href="{args[0].strip().replace(chr(34), "&quot;")}">{args[0].strip()}</a>',
    )
    text = _LINE_BREAK_RE.sub("<br>", text)
    text = _ESCAPED_CHAR_RE.sub(lambda match: "&amp;" if match.group(1) == "&" else match.group(1), text)
    return _TILDE_RE.sub("&nbsp;", text)


def _split_top_level(text: str) -> list[str]:
    """Split on blank lines that are not inside a block-level tag."""
    chunks = []
    depth = 0
    last = 0
    for match in _BLOCK_TAG_OR_BLANK_RE.finditer(text):
        if match.group("tag"):
            depth = max(depth - 1, 0) if match.group("close") else depth + 1
        elif depth == 0:
            chunks.append(text[last : match.start()])
            last = match.end()
    chunks.append(text[last:])
    return chunks


def paragraphs_stage(text: str, ctx: RenderContext) -> str:
    """Wrap blank-line separated chunks in paragraphs unless they are blocks."""
    paragraphs = []
    for chunk in _split_top_level(text):
        chunk = chunk.strip()
        if not chunk:
            continue
        if _BLOCK_START_RE.match(ctx.restore(chunk)):
            paragraphs.append(chunk)
        else:
            paragraphs.append(f"<p>{chunk}</p>")
    return "\n".join(paragraphs)


def restore_stage(text: str, ctx: RenderContext) -> str:
    """Put stashed fragments back and turn protected angle brackets into entities."""
    return protected_to_entities(ctx.restore(text))


def container_stage(text: str, ctx: RenderContext) -> str:
    """Wrap the result in the document container."""
    return f'<div class="{ctx.options.container_class}">{text}</div>'


RenderStage = Callable[[str, RenderContext], str]

RENDER_STAGES: tuple[tuple[str, RenderStage], ...] = (
    ("prepare", prepare_stage),
    ("verbatim", verbatim_stage),
    ("escape", escape_stage),
    ("title", title_stage),
    ("sections", sections_stage),
    ("environments", environments_stage),
    ("tables", tables_stage),
    ("math", math_stage),
    ("formatting", formatting_stage),
    ("paragraphs", paragraphs_stage),
    ("restore", restore_stage),
    ("container", container_stage),
)


class HtmlPreviewRenderer(BaseRenderer):
    r"""Render LaTeX markup to an HTML preview fragment.

    Parameters
    ----------
    options : HtmlPreviewOptions or None, default = None
        Preview options (error handling, macros, typesetter)

    Notes
    -----
    In the default mode the renderer never raises for string input: math
    that fails to typeset becomes an inline error marker, and any other
    failure returns an error fragment in place of the document. With
    ``strict_errors=True`` the error propagates instead.

    Examples
    --------
        >>> renderer = HtmlPreviewRenderer(HtmlPreviewOptions(macros={r"\RR": r"\mathbb{R}"}))
        >>> html = renderer.render_to_string(r"Let $x \in \RR$.")

    """

    def __init__(self, options: HtmlPreviewOptions | None = None):
        """Initialize the preview renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlPreviewOptions, "html")
        options = options or HtmlPreviewOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlPreviewOptions = options

    def render_to_string(self, text: str) -> str:
        """Render markup text to an HTML fragment.

        Parameters
        ----------
        text : str
            LaTeX markup, a full document or a bare body

        Returns
        -------
        str
            HTML wrapped in the document container, or an error fragment

        Raises
        ------
        MathRenderingError
            In strict mode, when a math expression cannot be typeset
        RenderingError
            In strict mode, when any stage fails

        """
        if not isinstance(text, str):
            raise TypeError(f"Expected markup text, got {type(text).__name__}")

        ctx = RenderContext(options=self.options, typesetter=self.options.typesetter or typeset_math)
        stage_name = None
        try:
            for stage_name, stage in RENDER_STAGES:
                text = stage(text, ctx)
        except Exception as e:
            if self.options.strict_errors:
                if isinstance(e, TexBridgeError):
                    raise
                raise RenderingError(
                    f"Rendering failed in stage '{stage_name}': {e}", rendering_stage=stage_name, original_error=e
                ) from e
            logger.warning(f"Rendering failed in stage '{stage_name}': {e}")
            return self._render_error(e)
        return text

    @staticmethod
    def _render_error(error: Exception) -> str:
        message = error.message if isinstance(error, TexBridgeError) else str(error)
        return (
            f'<div class="{DEFAULT_HTML_ERROR_CLASS}">'
            f"<strong>LaTeX Rendering Error:</strong><br>{escape_html(message)}</div>"
        )
