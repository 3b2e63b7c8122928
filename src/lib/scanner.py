"""
Lexer for hidden-content directives and placeholder tokens

Locates the three token shapes the pipeline understands:

    :::hide{level=high} secret :::       raw inline directive
    [hide-inline{level:high}]            canonical placeholder token
    :::hide{level=high} / :::            block opener / closer lines

Scanning is done position by position with small anchored matches rather
than one monolithic expression, so an attribute blob is bounded by its
first '}' and a payload by the first ':::' after it. Raw directive blobs
must close on their own line; placeholder blobs may span lines.
Nothing here knows about the configured action word: every action is
recognized, and callers decide what to do with non-hide actions.

Finders that walk one text left to right share a BlobBounds, so the
search for a closing '}' never re-reads text already known to hold none.
This keeps scanning linear on input full of unclosed '{' candidates.

Example:
    >>> [s.mode.value for s in tokens_iterate("a :::hide x::: b [hide-block]")]
    ['inline', 'block']
"""

import re
from typing import Iterator, List, Optional

from ..models.directives import BlockOpener, BlockRegion, DirectiveMode, DirectiveSpan

MARKER = ":::"

_word = re.compile(r'\w+')
_spacing = re.compile(r'[ \t]+')
_mode = re.compile(r'-(inline|block)')


class _NextIndex:
    """
    Next occurrence of one character at or after a position

    Remembers the last answer: every query inside the range already
    searched is answered without reading the text again.
    """

    def __init__(self, text: str, char: str):
        self.text = text
        self.char = char
        self.start = 1
        self.found = 0

    def at(self, pos: int) -> int:
        """Position of the next occurrence, len(text) when there is none"""
        if self.start <= pos <= self.found:
            return self.found
        found = self.text.find(self.char, pos)
        self.start = pos
        self.found = found if found != -1 else len(self.text)
        return self.found


class BlobBounds:
    """
    Closing-brace and newline lookup for one text

    Args:
        text: Text being scanned; one instance per text and per finder
    """

    def __init__(self, text: str):
        self.text = text
        self.close = _NextIndex(text, '}')
        self.newline = _NextIndex(text, '\n')

    def blob_end(self, pos: int, multiline: bool = False) -> Optional[int]:
        """
        End of the blob whose '{' is at pos

        Returns:
            Position after the closing '}', None when the blob is not
            closed (on the same line unless multiline)
        """
        close = self.close.at(pos)
        if close >= len(self.text):
            return None
        if not multiline and self.newline.at(pos) < close:
            return None
        return close + 1


def attributes_scan(
    text: str, pos: int, bounds: Optional[BlobBounds] = None, multiline: bool = False
) -> Optional[int]:
    """
    Scan an optional attribute blob starting at pos

    Args:
        text: Text being scanned
        pos: Position right after the action word (or placeholder mode)
        bounds: Shared lookup for text (a fresh one is made when omitted)
        multiline: Allow the blob to continue past a newline

    Returns:
        Position after the closing '}' (or pos itself when no blob starts
        here), None when a '{' is opened but never closed
    """
    if pos >= len(text) or text[pos] != '{':
        return pos
    if bounds is None:
        bounds = BlobBounds(text)
    return bounds.blob_end(pos, multiline)


def inline_matchAt(text: str, pos: int, bounds: Optional[BlobBounds] = None) -> Optional[DirectiveSpan]:
    """
    Try to read a raw inline directive starting exactly at pos

    Grammar: ':::' action [ '{' attrs '}' ] [ \\t]+ payload [ ' ' | '\\t' ] ':::'
    where payload is the shortest run (newlines allowed) up to the first
    closing marker.
    """
    if not text.startswith(MARKER, pos):
        return None

    action_match = _word.match(text, pos + len(MARKER))
    if not action_match:
        return None

    attrs_end = attributes_scan(text, action_match.end(), bounds)
    if attrs_end is None:
        return None

    spacing = _spacing.match(text, attrs_end)
    if not spacing:
        return None

    payload_start = spacing.end()
    closer = text.find(MARKER, payload_start)
    if closer == -1:
        return None

    payload = text[payload_start:closer]
    if payload.endswith((' ', '\t')):
        payload = payload[:-1]

    return DirectiveSpan(
        mode=DirectiveMode.INLINE,
        action=action_match.group(0),
        start=pos,
        end=closer + len(MARKER),
        attributes_raw=text[action_match.end():attrs_end],
        payload=payload,
    )


def inline_find(text: str, pos: int = 0, bounds: Optional[BlobBounds] = None) -> Optional[DirectiveSpan]:
    """
    Find the next raw inline directive at or after pos

    Pass the same bounds to successive calls on one text scanned left to
    right.

    Returns:
        DirectiveSpan of the leftmost directive, None if there is none
    """
    if bounds is None:
        bounds = BlobBounds(text)
    candidate = text.find(MARKER, pos)
    while candidate != -1:
        span = inline_matchAt(text, candidate, bounds)
        if span:
            return span
        candidate = text.find(MARKER, candidate + 1)
    return None


def placeholder_matchAt(text: str, pos: int, bounds: Optional[BlobBounds] = None) -> Optional[DirectiveSpan]:
    """
    Try to read a placeholder token starting exactly at pos

    Grammar: '[' action '-' ('inline' | 'block') [ '{' attrs '}' ] ']'
    where attrs may span lines.
    """
    if pos >= len(text) or text[pos] != '[':
        return None

    action_match = _word.match(text, pos + 1)
    if not action_match:
        return None

    mode_match = _mode.match(text, action_match.end())
    if not mode_match:
        return None

    attrs_end = attributes_scan(text, mode_match.end(), bounds, multiline=True)
    if attrs_end is None or attrs_end >= len(text) or text[attrs_end] != ']':
        return None

    return DirectiveSpan(
        mode=DirectiveMode(mode_match.group(1)),
        action=action_match.group(0),
        start=pos,
        end=attrs_end + 1,
        attributes_raw=text[mode_match.end():attrs_end],
        is_placeholder=True,
    )


def placeholder_find(text: str, pos: int = 0, bounds: Optional[BlobBounds] = None) -> Optional[DirectiveSpan]:
    """
    Find the next placeholder token at or after pos

    Pass the same bounds to successive calls on one text scanned left to
    right.

    Returns:
        DirectiveSpan of the leftmost token, None if there is none
    """
    if bounds is None:
        bounds = BlobBounds(text)
    candidate = text.find('[', pos)
    while candidate != -1:
        span = placeholder_matchAt(text, candidate, bounds)
        if span:
            return span
        candidate = text.find('[', candidate + 1)
    return None


def tokens_iterate(text: str, placeholders: bool = True) -> Iterator[DirectiveSpan]:
    """
    Yield raw directives and placeholder tokens left to right

    Spans never overlap: after a span is yielded, scanning resumes at its
    end. When a raw directive and a placeholder compete, the one starting
    first wins.

    Args:
        text: Text to scan
        placeholders: Also yield placeholder tokens

    Yields:
        DirectiveSpan for each token, in document order
    """
    pos = 0
    inline_bounds = BlobBounds(text)
    token_bounds = BlobBounds(text)
    next_inline = inline_find(text, pos, inline_bounds)
    next_token = placeholder_find(text, pos, token_bounds) if placeholders else None

    while next_inline or next_token:
        if next_token and (not next_inline or next_token.start < next_inline.start):
            span = next_token
        else:
            span = next_inline

        yield span
        pos = span.end

        if next_inline and next_inline.start < pos:
            next_inline = inline_find(text, pos, inline_bounds)
        if next_token and next_token.start < pos:
            next_token = placeholder_find(text, pos, token_bounds)


def blockOpener_match(line: Optional[str]) -> Optional[BlockOpener]:
    """
    Check if a line (or unit text) is exactly a block opener

    The trimmed text must be ':::' action with an optional attribute blob
    and nothing else.

    Example:
        blockOpener_match(":::hide{level=high}")  -> BlockOpener("hide", "{level=high}")
        blockOpener_match(":::hide secret:::")    -> None
    """
    if not line:
        return None

    stripped = line.strip()
    if not stripped.startswith(MARKER):
        return None

    action_match = _word.match(stripped, len(MARKER))
    if not action_match:
        return None

    attrs_end = attributes_scan(stripped, action_match.end())
    if attrs_end != len(stripped):
        return None

    return BlockOpener(action=action_match.group(0), attributes_raw=stripped[action_match.end():])


def blockCloser_is(line: Optional[str]) -> bool:
    """Check if a line (or unit text) is exactly the ':::' closer"""
    return bool(line) and line.strip() == MARKER


def blockRegion_find(lines: List[str], action: str, start: int = 0) -> Optional[BlockRegion]:
    """
    Find the next block directive region in a list of lines

    Only an opener carrying the given action starts a region. Inside a
    region, every opener-shaped line (any action) opens a nested level and
    every closer closes one; the region ends when the outer level closes.

    Args:
        lines: Text split into lines
        action: Action word that starts a region
        start: First line index to consider

    Returns:
        BlockRegion for the first opener found. Its end_line is None when
        the opener is never closed. None when there is no opener.
    """
    for index in range(start, len(lines)):
        opener = blockOpener_match(lines[index])
        if not opener or opener.action != action:
            continue

        depth = 1
        for inner in range(index + 1, len(lines)):
            if blockOpener_match(lines[inner]):
                depth += 1
            elif blockCloser_is(lines[inner]):
                depth -= 1
                if depth == 0:
                    return BlockRegion(
                        action=opener.action,
                        attributes_raw=opener.attributes_raw,
                        start_line=index,
                        end_line=inner,
                    )

        return BlockRegion(
            action=opener.action,
            attributes_raw=opener.attributes_raw,
            start_line=index,
            end_line=None,
        )

    return None
