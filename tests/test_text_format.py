"""Unit tests for list-marker normalization."""

from src.parsing.text_format import escape_for_markdown, normalize_list_markers


class TestNormalizeListMarkers:
    """Test asterisk bullets become glyphs at line starts only."""

    def test_simple_item(self):
        assert normalize_list_markers("* item") == "• item"

    def test_indentation_preserved(self):
        assert normalize_list_markers("  * nested") == "  • nested"

    def test_every_line(self):
        text = "intro\n* one\n* two"
        assert normalize_list_markers(text) == "intro\n• one\n• two"

    def test_tab_after_marker_kept(self):
        assert normalize_list_markers("*\tx") == "•\tx"

    def test_marker_needs_whitespace(self):
        assert normalize_list_markers("*three") == "*three"

    def test_bold_untouched(self):
        assert normalize_list_markers("**bold** text") == "**bold** text"

    def test_mid_line_asterisk_untouched(self):
        assert normalize_list_markers("a * b") == "a * b"

    def test_non_breaking_space_indent(self):
        assert normalize_list_markers("\u00a0* item") == "\u00a0• item"

    def test_lone_marker_line_kept(self):
        assert normalize_list_markers("*\nnext") == "*\nnext"


class TestEscapeForMarkdown:
    """Test escaping of segment content before Markdown rendering."""

    def test_dollars_become_entities(self):
        assert escape_for_markdown("It costs $5 and $10") == "It costs &#36;5 and &#36;10"

    def test_html_is_escaped(self):
        assert escape_for_markdown("<b>hi</b> & bye") == "&lt;b&gt;hi&lt;/b&gt; &amp; bye"

    def test_quotes_and_markdown_untouched(self):
        assert escape_for_markdown('**"bold"**') == '**"bold"**'
