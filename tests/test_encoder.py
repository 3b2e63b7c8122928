"""
Directive encoder tests

Tests inline and block encoding, idempotence, pass-through of foreign
actions, label persistence and fail-open handling of unterminated blocks.
"""

import time

import pytest

from hidemark.config import AppSettings
from hidemark.lib.encoder import DirectiveEncoder, content_encode


@pytest.fixture
def encoder():
    return DirectiveEncoder(AppSettings())


class TestInlineEncode:
    """Test inline directive encoding"""

    def test_simple(self, encoder):
        """Payload is dropped, surrounding text kept"""
        assert encoder.inline_encode("This is :::hide secret::: content") == "This is [hide-inline] content"

    def test_with_attributes(self, encoder):
        """Author attributes are re-emitted in canonical form"""
        result = encoder.inline_encode("This is :::hide{level=high;type=sensitive} secret::: content")
        assert result == "This is [hide-inline{level:high,type:sensitive}] content"

    def test_several_on_one_line(self, encoder):
        """Every directive is encoded, in place"""
        result = encoder.inline_encode("a :::hide one::: b :::hide two::: c")
        assert result == "a [hide-inline] b [hide-inline] c"

    def test_payload_across_lines(self, encoder):
        """A payload may continue on the next line"""
        assert encoder.inline_encode("a :::hide one\ntwo::: b") == "a [hide-inline] b"

    def test_payload_never_persisted(self, encoder):
        """No fragment of the payload survives"""
        result = encoder.inline_encode("Code :::hide{level=high} 4711-swordfish::: here")
        assert "4711" not in result
        assert "swordfish" not in result

    def test_empty(self, encoder):
        """Empty text stays empty"""
        assert encoder.inline_encode("") == ""

    def test_malformed_attributes_dropped(self, encoder):
        """Pairs that do not parse are left out of the token"""
        result = encoder.inline_encode(":::hide{level=high;oops;=x} s:::")
        assert result == "[hide-inline{level:high}]"


class TestBlockEncode:
    """Test block directive encoding"""

    def test_simple(self, encoder):
        """Whole region collapses to one token"""
        assert encoder.block_encode(":::hide\nSecret line 1\nSecret line 2\n:::") == "[hide-block]"

    def test_surrounding_lines_kept(self, encoder):
        """Lines outside the region are untouched"""
        text = "before\n:::hide{level=high}\nsecret\n:::\nafter"
        assert encoder.block_encode(text) == "before\n[hide-block{level:high}]\nafter"

    def test_two_regions(self, encoder):
        """Each region gets its own token"""
        text = ":::hide\na\n:::\nmiddle\n:::hide\nb\n:::"
        assert encoder.block_encode(text) == "[hide-block]\nmiddle\n[hide-block]"

    def test_nested(self, encoder):
        """The outer region ends at its own closer"""
        text = ":::hide\nouter\n:::hide\ninner\n:::\nstill outer\n:::\nafter"
        assert encoder.block_encode(text) == "[hide-block]\nafter"

    def test_unterminated_left_as_text(self, encoder):
        """An opener without closer leaves everything from it on as is"""
        text = "before\n:::hide\nSecret\nno closer"
        assert encoder.block_encode(text) == text

    def test_unterminated_after_complete_region(self, encoder):
        """Complete regions before an unterminated one are still encoded"""
        text = ":::hide\na\n:::\n:::hide\nb"
        assert encoder.block_encode(text) == "[hide-block]\n:::hide\nb"

    def test_inline_form_is_not_a_block(self, encoder):
        """An inline directive on its own line is not a block opener"""
        text = ":::hide secret:::"
        assert encoder.block_encode(text) == text


class TestContentEncode:
    """Test full note encoding"""

    def test_mixed_inline_and_block(self):
        """Blocks and inline directives in one note"""
        text = "Start :::hide inline::: middle\n:::hide{foo=bar}\nblock content\n:::\nend"
        expected = "Start [hide-inline] middle\n[hide-block{foo:bar}]\nend"
        assert content_encode(text, AppSettings()) == expected

    def test_block_body_not_read_as_inline(self, encoder):
        """Inline directives inside a block vanish with it"""
        text = ":::hide\nsee :::hide x::: here\n:::"
        assert encoder.content_encode(text) == "[hide-block]"

    @pytest.mark.parametrize("text", [
        "This is :::hide secret::: content",
        "a :::hide{level=high;text=Psst} b::: c\n:::hide{x=1}\ny\n:::",
        "no directives at all",
        "",
    ])
    def test_idempotent(self, encoder, text):
        """Encoding encoded text changes nothing"""
        once = encoder.content_encode(text)
        assert encoder.content_encode(once) == once

    def test_existing_placeholders_untouched(self, encoder):
        """Tokens already present pass through verbatim"""
        text = "x [hide-inline{level:high}] y [hide-block]"
        assert encoder.content_encode(text) == text

    @pytest.mark.parametrize("text", [
        "a :::note keep::: b",
        ":::note\nx\n:::",
        "[note-inline{a:1}]",
    ])
    def test_foreign_action_passes_through(self, encoder, text):
        """Directives with another action are not hidden content"""
        assert encoder.content_encode(text) == text


class TestLabels:
    """Test display label handling"""

    @pytest.fixture
    def persisting(self):
        return DirectiveEncoder(AppSettings(persist_label=True))

    def test_label_only_gives_bare_token(self, encoder):
        """Reserved keys alone leave no attributes to persist"""
        assert encoder.inline_encode("a :::hide{text=Hi} x::: b") == "a [hide-inline] b"

    def test_label_dropped_by_default(self, encoder):
        """Only data attributes are persisted"""
        result = encoder.content_encode(":::hide{text=Spoiler;level=high} x:::")
        assert result == "[hide-inline{level:high}]"

    def test_block_label_dropped_by_default(self, encoder):
        """Block openers drop their label too"""
        assert encoder.content_encode(":::hide{text=Members only}\nx\n:::") == "[hide-block]"

    def test_label_persisted_on_request(self, persisting):
        """persist_label=True re-emits the label as the last pair"""
        result = persisting.content_encode(":::hide{text=Spoiler;level=high} x:::")
        assert result == "[hide-inline{level:high,placeholder:Spoiler}]"

    def test_placeholder_key_preferred(self, persisting):
        """placeholder wins over text"""
        result = persisting.content_encode(":::hide{text=A;placeholder=B} x:::")
        assert result == "[hide-inline{placeholder:B}]"

    def test_block_label_persisted(self, persisting):
        """Block openers carry labels when persisted"""
        result = persisting.content_encode(":::hide{text=Members only}\nx\n:::")
        assert result == "[hide-block{placeholder:Members only}]"


class TestSettings:
    """Test encoder configuration"""

    def test_reserved_characters_dropped(self, encoder):
        """Values that would corrupt the token are dropped"""
        result = encoder.content_encode(":::hide{url=http://x;level=high} x:::")
        assert result == "[hide-inline{level:high}]"

    def test_custom_action(self):
        """The hidden-content action word is configurable"""
        encoder = DirectiveEncoder(AppSettings(directive_action="spoiler"))
        assert encoder.content_encode("a :::spoiler s::: b") == "a [spoiler-inline] b"
        assert encoder.content_encode("a :::hide s::: b") == "a :::hide s::: b"


class TestLargeInput:
    """Test encoding cost on input full of unclosed attribute blobs"""

    def test_unclosed_blobs_encode_linearly(self, encoder):
        """Thousands of unclosed '{' candidates are left as text quickly"""
        text = ":::hide{" * 4000
        started = time.perf_counter()
        assert encoder.content_encode(text) == text
        assert time.perf_counter() - started < 2.0
