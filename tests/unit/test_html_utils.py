#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the HTML escaping helpers."""

import pytest

from texbridge.utils.html_utils import (
    PROTECTED_GT,
    PROTECTED_LT,
    escape_angle_brackets,
    escape_html,
    protect_angle_brackets,
    protected_to_entities,
    render_math_html,
    unprotect_angle_brackets,
)


@pytest.mark.unit
class TestEscaping:
    """Tests for entity escaping."""

    def test_escape_html(self):
        """Test that markup characters and quotes are all escaped."""
        assert escape_html('<a href="x">&') == "&lt;a href=&quot;x&quot;&gt;&amp;"

    def test_escape_angle_brackets_only(self):
        """Test that ampersands and quotes are left alone."""
        assert escape_angle_brackets('<b> & "q"') == '&lt;b&gt; & "q"'


@pytest.mark.unit
class TestProtectedBrackets:
    """Tests for the angle bracket stand-ins."""

    def test_protected_text_has_no_markup_characters(self):
        """Test that protection removes angle brackets without adding an ampersand."""
        protected = protect_angle_brackets("x > y & a<b")
        assert protected == f"x {PROTECTED_GT} y & a{PROTECTED_LT}b"
        assert protected.count("&") == 1

    def test_unprotect_and_entities(self):
        """Test both ways out of the protected form."""
        protected = protect_angle_brackets("a<b>")
        assert unprotect_angle_brackets(protected) == "a<b>"
        assert protected_to_entities(protected) == "a&lt;b&gt;"


@pytest.mark.unit
def test_render_math_html():
    """Test the inline and display wrappers."""
    assert render_math_html("m", inline=True) == '<span class="math math-inline">m</span>'
    assert render_math_html("m", inline=False) == '<div class="math math-display">m</div>'
