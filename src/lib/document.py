"""
Minimal line segmenter

Turns raw note text into a flat sequence of content units: one paragraph
(holding a single text node) per non-blank line, and one lineBreak unit
per blank line. This is the unit shape the block scanner expects, and is
enough for the command line tool; a real markdown parser can feed richer
trees to the resolver instead.

Example:
    >>> [n.type for n in document_segment("a\\n\\n:::hide\\nb\\n:::")]
    ['paragraph', 'lineBreak', 'paragraph', 'paragraph', 'paragraph']
"""

from typing import List

from ..models.nodes import ContentNode, NodeType, paragraph_make, text_make


def document_segment(text: str) -> List[ContentNode]:
    """
    Segment text into line units

    Args:
        text: Raw note body

    Returns:
        Content units in document order ([] for empty text)
    """
    if not text:
        return []

    units: List[ContentNode] = []
    for line in text.split('\n'):
        if line.strip():
            units.append(paragraph_make([text_make(line)]))
        else:
            units.append(ContentNode(type=NodeType.LINE_BREAK))

    while units and units[-1].type == NodeType.LINE_BREAK:
        units.pop()
    return units
