"""
Directive scanner tests

Tests raw inline directives, placeholder tokens and block marker lines
at the lexical level.
"""

import pytest

from hidemark.lib.scanner import (
    attributes_scan,
    blockCloser_is,
    blockOpener_match,
    blockRegion_find,
    inline_find,
    placeholder_find,
    tokens_iterate,
)
from hidemark.models.directives import AttributeDialect, DirectiveMode


class TestInline:
    """Test raw inline directive recognition"""

    def test_span_offsets(self):
        """Span covers opener through closing marker"""
        text = "a :::hide{x=1} s::: b"
        span = inline_find(text)
        assert span.mode is DirectiveMode.INLINE
        assert span.action == "hide"
        assert (span.start, span.end) == (2, 19)
        assert span.attributes_raw == "{x=1}"
        assert span.payload == "s"
        assert span.dialect is AttributeDialect.ORIGINAL
        assert text[span.end:] == " b"

    def test_one_trailing_space_stripped(self):
        """A single space before the closing marker is not payload"""
        assert inline_find(":::hide secret :::").payload == "secret"

    def test_payload_spans_newlines(self):
        """Payload is the shortest run to the first closing marker"""
        span = inline_find("x :::hide one\ntwo::: y ::: z")
        assert span.payload == "one\ntwo"

    def test_separator_required(self):
        """Action must be followed by a space or tab"""
        assert inline_find(":::hidesecret:::") is None
        assert inline_find(":::hide\nsecret:::") is None

    def test_unclosed_brace(self):
        """An attribute blob not closed on its line is no directive"""
        assert inline_find(":::hide{a=1 secret:::") is None

    def test_no_closer(self):
        """Opener without closing marker is no directive"""
        assert inline_find("a :::hide never closed") is None

    def test_foreign_action_recognized(self):
        """Scanner reports any action; callers decide"""
        assert inline_find(":::note keep:::").action == "note"


class TestPlaceholder:
    """Test placeholder token recognition"""

    def test_block_with_attributes(self):
        """Block placeholder with canonical attributes"""
        span = placeholder_find("see [hide-block{level:high}] here")
        assert span.mode is DirectiveMode.BLOCK
        assert span.action == "hide"
        assert span.attributes_raw == "{level:high}"
        assert span.is_placeholder
        assert span.dialect is AttributeDialect.CANONICAL

    def test_inline_bare(self):
        """Inline placeholder without attributes"""
        span = placeholder_find("x [hide-inline] y")
        assert span.mode is DirectiveMode.INLINE
        assert (span.start, span.end) == (2, 15)

    @pytest.mark.parametrize("text", [
        "[hide-inlinex]",
        "[hide-other]",
        "[hide-inline{a:1]",
        "[hide inline]",
        "plain [link](url)",
    ])
    def test_not_a_token(self, text):
        """Near misses are not tokens"""
        assert placeholder_find(text) is None

    def test_blob_across_lines(self):
        """Placeholder attributes may continue on the next line"""
        text = "a [hide-inline{level:high,\ntype:x}] b"
        span = placeholder_find(text)
        assert (span.start, span.end) == (2, len(text) - 2)
        assert span.attributes_raw == "{level:high,\ntype:x}"

    def test_raw_blob_stays_on_its_line(self):
        """A raw directive blob across lines is still rejected"""
        assert inline_find(":::hide{a=1\nb=2} x:::") is None


class TestTokensIterate:
    """Test combined left-to-right scanning"""

    def test_document_order(self):
        """Raw directives and placeholders come out in text order"""
        text = "[hide-inline] then :::hide raw::: and [hide-block]"
        spans = list(tokens_iterate(text))
        assert [(s.mode.value, s.is_placeholder) for s in spans] == [
            ("inline", True),
            ("inline", False),
            ("block", True),
        ]

    def test_non_overlapping(self):
        """A placeholder inside a payload belongs to the payload"""
        spans = list(tokens_iterate(":::hide see [hide-inline]::: after"))
        assert len(spans) == 1
        assert spans[0].payload == "see [hide-inline]"

    def test_placeholders_disabled(self):
        """Placeholder tokens can be left out"""
        spans = list(tokens_iterate("[hide-inline] :::hide x:::", placeholders=False))
        assert len(spans) == 1
        assert not spans[0].is_placeholder


class TestBlockMarkers:
    """Test block opener and closer lines"""

    def test_opener_with_attributes(self):
        """Opener line with surrounding whitespace"""
        opener = blockOpener_match("  :::hide{level=high}  ")
        assert opener.action == "hide"
        assert opener.attributes_raw == "{level=high}"

    @pytest.mark.parametrize("line", [":::hide secret:::", ":::", "text :::hide", ":::hide{a=1} x", "", None])
    def test_not_an_opener(self, line):
        """Only a whole-line marker opens a block"""
        assert blockOpener_match(line) is None

    def test_closer(self):
        """Closer is ::: alone, whitespace ignored"""
        assert blockCloser_is(" ::: ")
        assert not blockCloser_is("::: x")
        assert not blockCloser_is("")

    def test_attributes_scan(self):
        """Blob end, absent blob and unclosed blob"""
        assert attributes_scan("{a=1} x", 0) == 5
        assert attributes_scan("abc", 1) == 1
        assert attributes_scan("{a=1\n}", 0) is None


class TestBlockRegion:
    """Test block region search over lines"""

    def test_terminated(self):
        """Region runs from opener to matching closer"""
        lines = ["intro", ":::hide", "a", "b", ":::", "outro"]
        region = blockRegion_find(lines, "hide")
        assert (region.start_line, region.end_line) == (1, 4)
        assert list(region.interior) == [2, 3]

    def test_nested(self):
        """Inner openers push the outer closer further down"""
        lines = [":::hide", "a", ":::note", "b", ":::", "c", ":::"]
        region = blockRegion_find(lines, "hide")
        assert region.end_line == 6

    def test_unterminated(self):
        """Missing closer gives an unterminated region"""
        region = blockRegion_find([":::hide", "a"], "hide")
        assert not region.is_terminated
        assert list(region.interior) == []

    def test_other_action_skipped(self):
        """Only the requested action starts a region"""
        assert blockRegion_find([":::note", "a", ":::"], "hide") is None
