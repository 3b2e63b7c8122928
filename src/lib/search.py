"""
Search filter excluding hidden content from keyword matching

Stored content carries placeholder tokens where hidden regions were. A
keyword search must only ever match visible text, so the tokens are
stripped before any keyword is tested; otherwise a query for "hide-inline"
would match every note that hides something.

Keywords come from content.contains("...") clauses anywhere in the
predicate strings. Every keyword from every predicate must be present
(plain, case-sensitive substring containment); all other predicate syntax
belongs to an external evaluator and is ignored here.

Example:
    >>> SearchFilter().content_matches(
    ...     "This is [hide-inline] message", ['content.contains("hide-inline")'])
    False
"""

import re
from typing import List, Optional, Sequence

from .log import LOG
from .scanner import BlobBounds, placeholder_find

_contains = re.compile(r'content\.contains\("([^"]+)"\)')


class SearchFilter:
    """
    Keyword filter over placeholder-bearing content
    """

    def __init__(self, settings=None):
        """
        Initialize filter

        Args:
            settings: AppSettings instance (defaults to the appsettings singleton)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings

    def keywords_extract(self, predicates: Optional[Sequence[str]]) -> List[str]:
        """
        Collect the keywords of every content.contains("...") clause

        Args:
            predicates: Predicate strings, e.g.
                ['creator_id == 1 && content.contains("hello")', 'pinned']

        Returns:
            Keywords in order of appearance across all predicates
        """
        keywords: List[str] = []
        for predicate in predicates or []:
            keywords.extend(_contains.findall(predicate or ""))
        return keywords

    def placeholders_strip(self, content: str) -> str:
        """
        Remove every hidden-content placeholder token from content

        Only tokens of the configured action are removed, with or without
        attributes, inline and block alike. An attribute blob may span
        lines. The text around the tokens is kept as is.

        Example:
            "Public [hide-inline] content [hide-block{level:high}]"
            -> "Public  content "
        """
        if not content:
            return ""

        parts: List[str] = []
        bounds = BlobBounds(content)
        pos = 0
        span = placeholder_find(content, pos, bounds)
        while span:
            if self.settings.action_is(span.action):
                parts.append(content[pos:span.start])
                pos = span.end
            span = placeholder_find(content, span.end, bounds)
        parts.append(content[pos:])
        return ''.join(parts)

    def content_matches(self, content: str, predicates: Optional[Sequence[str]]) -> bool:
        """
        Check if visible content satisfies every content.contains keyword

        Args:
            content: Stored content, possibly with placeholder tokens
            predicates: Predicate strings (may be empty)

        Returns:
            True when no keyword is requested or all keywords occur in the
            content with placeholders removed, False otherwise
        """
        keywords = self.keywords_extract(predicates)
        if not keywords:
            return True

        visible = self.placeholders_strip(content)
        missing = [keyword for keyword in keywords if keyword not in visible]
        if missing:
            LOG(f"Search keywords not in visible content: {missing}", level=3)
            return False
        return True


def content_matches(content: str, predicates: Optional[Sequence[str]], settings=None) -> bool:
    """Match content against predicates with a fresh SearchFilter"""
    return SearchFilter(settings).content_matches(content, predicates)
