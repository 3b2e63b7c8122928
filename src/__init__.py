"""
hidemark - Hidden-content directives for plain text notes

Marks parts of a note as hidden, persists them as payload-free placeholders
and resolves them back to hidden nodes for display.
"""

__version__ = "1.0.0"

from .lib import (
    DirectiveEncoder,
    BlockDirectiveScanner,
    PlaceholderResolver,
    SearchFilter,
    attributes_extract,
    content_encode,
    content_matches,
    document_resolve,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "DirectiveEncoder",
    "BlockDirectiveScanner",
    "PlaceholderResolver",
    "SearchFilter",
    "attributes_extract",
    "content_encode",
    "content_matches",
    "document_resolve",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
