"""
Syntax highlighting lexer tests
"""

from pygments.token import Generic, Keyword, Literal, Name, Punctuation

from hidemark.lib.lexer import HidemarkLexer, get_lexer, source_highlight


def tokens(source):
    return [(token, value) for token, value in get_lexer().get_tokens(source) if value.strip()]


class TestLexer:
    """Test token classification"""

    def test_metadata(self):
        """Lexer name and aliases"""
        assert HidemarkLexer.name == "Hidemark"
        assert "hm" in HidemarkLexer.aliases

    def test_inline_directive(self):
        """Action, attributes and payload are told apart"""
        result = tokens("a :::hide{level=high} secret::: b\n")
        assert (Name.Tag, "hide") in result
        assert (Name.Attribute, "level") in result
        assert (Literal.String, "high") in result
        assert (Generic.Emph, "secret") in result

    def test_placeholder(self):
        """Placeholder mode and canonical attributes"""
        result = tokens("x [hide-inline{level:high}] y\n")
        assert (Keyword, "hide") in result
        assert (Name.Decorator, "inline") in result
        assert (Name.Attribute, "level") in result

    def test_block_lines(self):
        """Opener and closer lines"""
        result = tokens(":::hide\nsecret\n:::\n")
        assert (Keyword.Declaration, "hide") in result
        assert result.count((Punctuation, ":::")) == 2


class TestHighlight:
    """Test standalone HTML output"""

    def test_full_document(self):
        """Output is a complete HTML page with the title"""
        html = source_highlight(":::hide secret:::\n", title="note.md")
        assert "<html" in html
        assert "note.md" in html
        assert "secret" in html
