"""Unit tests for span extraction and overlap resolution."""

from src.parsing.models import ClaimedSpan, ContentSegment, SegmentKind, Span
from src.parsing.spans import (
    exclude_overlapping,
    extract_code_spans,
    extract_math_spans,
    resolve_claims,
    uncovered_ranges,
)


class TestExtractCodeSpans:
    """Test fenced code detection."""

    def test_fence_with_language(self):
        text = "a ```py\nprint(1)\n``` b"
        spans = extract_code_spans(text)

        assert len(spans) == 1
        span, language, content = spans[0]
        assert text[span.start:span.end] == "```py\nprint(1)\n```"
        assert language == "py"
        assert content == "print(1)\n"

    def test_language_is_trimmed(self):
        [(_, language, content)] = extract_code_spans("```  python  \nx = 1```")
        assert language == "python"
        assert content == "x = 1"

    def test_blank_tag_means_no_language(self):
        [(_, language, content)] = extract_code_spans("```   \ncode```")
        assert language is None
        assert content == "code"

    def test_no_line_break_means_whole_interior_is_content(self):
        [(_, language, content)] = extract_code_spans("```print(1)```")
        assert language is None
        assert content == "print(1)"

    def test_unterminated_fence_is_not_code(self):
        assert extract_code_spans("```py\nprint(1)") == []

    def test_first_closing_fence_ends_block(self):
        spans = extract_code_spans("```a```b```c```")
        assert [content for _, _, content in spans] == ["a", "c"]

    def test_tag_line_cannot_contain_fence(self):
        spans = extract_code_spans("```x```\ny```")
        assert len(spans) == 1
        span, language, content = spans[0]
        assert (span.start, span.end) == (0, 7)
        assert language is None
        assert content == "x"


class TestExtractMathSpans:
    """Test block and inline math detection."""

    def test_block_and_inline(self):
        spans = extract_math_spans("$$ x^2 $$ and $y$")

        assert [(is_block, content) for _, is_block, content in spans] == [
            (True, "x^2"),
            (False, "y"),
        ]

    def test_block_may_span_lines(self):
        [(_, is_block, content)] = extract_math_spans("$$\na\nb\n$$")
        assert is_block
        assert content == "a\nb"

    def test_excluded_ranges_are_skipped(self):
        text = "```$x$ $$y$$```"
        code = [span for span, _, _ in extract_code_spans(text)]
        assert extract_math_spans(text, code) == []

    def test_dollars_in_code_do_not_pair_with_later_math(self):
        text = "```sh\necho $$\n```\nformula: $$E=mc^2$$"
        code = [span for span, _, _ in extract_code_spans(text)]

        [(span, is_block, content)] = extract_math_spans(text, code)

        assert is_block
        assert content == "E=mc^2"
        assert text[span.start:span.end] == "$$E=mc^2$$"

    def test_currency_is_not_math(self):
        assert extract_math_spans("It costs $5 and $10") == []

    def test_whitespace_inside_delimiters_disqualifies(self):
        assert extract_math_spans("$ x $") == []
        assert extract_math_spans("$x $") == []

    def test_escaped_dollar_does_not_terminate(self):
        [(_, _, content)] = extract_math_spans(r"$a \$ b$")
        assert content == r"a \$ b"

    def test_escaped_dollar_does_not_open(self):
        assert extract_math_spans(r"price \$5 or \$6") == []

    def test_block_takes_priority_over_inline(self):
        spans = extract_math_spans("$$a$$")
        assert len(spans) == 1
        assert spans[0][1] is True

    def test_inline_is_leftmost_shortest(self):
        [(span, _, content)] = extract_math_spans("$a$b$")
        assert (span.start, span.end) == (0, 3)
        assert content == "a"

    def test_inline_stays_on_one_line(self):
        assert extract_math_spans("$a\nb$") == []

    def test_empty_dollar_pair_is_not_inline_math(self):
        assert extract_math_spans("$$") == []


class TestOverlapResolution:
    """Test the interval-exclusion helpers."""

    def test_exclude_overlapping(self):
        candidates = [(Span(0, 3), "a"), (Span(5, 8), "b")]

        assert exclude_overlapping(candidates, [Span(2, 6)]) == []
        assert exclude_overlapping(candidates, [Span(3, 5)]) == candidates

    def test_uncovered_ranges(self):
        assert uncovered_ranges(10, [Span(6, 8), Span(0, 2)]) == [Span(2, 6), Span(8, 10)]
        assert uncovered_ranges(4, []) == [Span(0, 4)]
        assert uncovered_ranges(4, [Span(0, 4)]) == []

    def test_span_overlap_is_exclusive_of_end(self):
        assert not Span(0, 3).overlaps(Span(3, 5))
        assert Span(0, 4).overlaps(Span(3, 5))

    def test_resolve_claims_prefers_code(self):
        code = ClaimedSpan(Span(0, 10), ContentSegment(SegmentKind.CODE, "x"))
        inline = ClaimedSpan(Span(5, 8), ContentSegment(SegmentKind.INLINE_MATH, "y"))
        later = ClaimedSpan(Span(12, 15), ContentSegment(SegmentKind.INLINE_MATH, "z"))

        assert resolve_claims([later, inline, code]) == [code, later]

    def test_resolve_claims_block_over_inline(self):
        block = ClaimedSpan(Span(4, 9), ContentSegment(SegmentKind.BLOCK_MATH, "b"))
        inline = ClaimedSpan(Span(0, 5), ContentSegment(SegmentKind.INLINE_MATH, "i"))

        assert resolve_claims([inline, block]) == [block]
