"""
hidemark - Hidden-content directives for plain text notes

Encoding, block scanning, placeholder resolution and search filtering.
"""

__version__ = "1.0.0"

from .attributes import attributes_extract, attributes_serialize, label_split
from .encoder import DirectiveEncoder, content_encode
from .blocks import BlockDirectiveScanner
from .resolver import PlaceholderResolver, document_resolve
from .search import SearchFilter, content_matches
from .document import document_segment
from .render import HtmlRenderer, RendererRegistry
from .lexer import HidemarkLexer, source_highlight
from .log import LOG, state_connectToLogger

__all__ = [
    "attributes_extract",
    "attributes_serialize",
    "label_split",
    "DirectiveEncoder",
    "content_encode",
    "BlockDirectiveScanner",
    "PlaceholderResolver",
    "document_resolve",
    "SearchFilter",
    "content_matches",
    "document_segment",
    "HtmlRenderer",
    "RendererRegistry",
    "HidemarkLexer",
    "source_highlight",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
