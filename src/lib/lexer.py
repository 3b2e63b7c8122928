"""
Custom Pygments lexer for hidemark syntax highlighting

Highlights hidden-content directives and placeholder tokens when an author
previews a note's source.

Token types:
- Keyword.Declaration: Action word of a block opener line (e.g., :::hide)
- Name.Tag: Action word of an inline directive
- Generic.Emph: Hidden inline payload
- Name.Decorator: Placeholder mode (inline/block)
- Name.Attribute / Literal.String: Attribute keys and values
- Punctuation: ::: markers, braces, brackets and separators
"""

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import RegexLexer, bygroups, using, this
from pygments.token import (
    Text,
    Punctuation,
    Name,
    Keyword,
    Literal,
    Operator,
    Generic,
)


class HidemarkLexer(RegexLexer):
    """
    Lexer for hidemark directive markup

    Example:
        Intro :::hide{level=high} secret::: and [hide-inline{level:high}]

    Tokens:
        ::: → Punctuation
        hide → Name.Tag
        level → Name.Attribute
        high → Literal.String
        secret → Generic.Emph
    """

    name = 'Hidemark'
    aliases = ['hidemark', 'hm']
    filenames = ['*.hm']

    tokens = {
        'root': [
            # Block opener alone on its line
            (r'^([ \t]*)(:::)(\w+)(\{[^}\n]*\})?([ \t]*)$',
             bygroups(Text, Punctuation, Keyword.Declaration, using(this, state='attrs'), Text)),

            # Block closer alone on its line
            (r'^([ \t]*)(:::)([ \t]*)$', bygroups(Text, Punctuation, Text)),

            # Inline directive opener, payload follows
            (r'(:::)(\w+)(\{[^}\n]*\})?([ \t]+)',
             bygroups(Punctuation, Name.Tag, using(this, state='attrs'), Text), 'payload'),

            # Placeholder tokens
            (r'(\[)(\w+)(-)(inline|block)(\{[^}]*\})?(\])',
             bygroups(Punctuation, Keyword, Punctuation, Name.Decorator,
                      using(this, state='attrs'), Punctuation)),

            # Everything else is text
            (r'[^:\[\n]+', Text),
            (r'\n', Text),
            (r'.', Text),
        ],

        'payload': [
            # Closing marker pops back to root
            (r'[ \t]?:::', Punctuation, '#pop'),
            (r'[^:]+', Generic.Emph),
            (r':', Generic.Emph),
        ],

        'attrs': [
            (r'[{}]', Punctuation),
            (r'([^\s;,=:{}]+)(\s*)([=:])(\s*)([^;,{}]*)',
             bygroups(Name.Attribute, Text, Operator, Text, Literal.String)),
            (r'[;,]', Punctuation),
            (r'\s+', Text),
            (r'[^{};,]+', Text),
        ],
    }


def get_lexer() -> HidemarkLexer:
    """
    Get the HidemarkLexer instance

    Returns:
        HidemarkLexer instance ready for use with Pygments
    """
    return HidemarkLexer()


def source_highlight(source: str, title: str = "", style: str = "default") -> str:
    """
    Render note source as a standalone highlighted HTML document

    Args:
        source: Note text (raw directives and/or placeholders)
        title: HTML document title
        style: Pygments style name

    Returns:
        Complete HTML document
    """
    formatter = HtmlFormatter(style=style, noclasses=True, full=True, title=title)
    return highlight(source, get_lexer(), formatter)
