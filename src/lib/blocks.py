"""
Block directive scanner for structured content

Text-level block encoding discards what a block encloses. When the input is
a sequence of content units (one per paragraph or line), the enclosed units
must survive as real child nodes instead, so the scanner walks the sibling
sequence as a small state machine:

    SCANNING   --opener unit (':::hide' / ':::hide{attrs}')-->   COLLECTING
    COLLECTING --unit whose last text is ':::' at depth 0-->     SCANNING

While collecting, every unit is suppressed from the surrounding sequence and
kept in an accumulator; the closer emits one HiddenBlockNode owning them.
Opener-shaped units seen while collecting open a nested level, so the outer
block always ends at its own closer.

A scanner holds the state of exactly one sibling sequence. Create one per
sequence (the resolver does) and never share it between documents.

Example:
    >>> scanner = BlockDirectiveScanner()
    >>> [scanner.unit_feed(u).kind.value for u in units]
    ['unchanged', 'removed', 'removed', 'replaced']
"""

from typing import List, Optional, Tuple

from ..models.directives import AttributeDialect, BlockOpener
from ..models.nodes import ContentNode, HiddenBlockNode, NodeType, paragraph_make, text_make
from ..models.resolution import BlockScanState, Resolution, ScanPhase
from .attributes import attributes_decode, label_split
from .log import LOG
from .scanner import blockCloser_is, blockOpener_match


class BlockDirectiveScanner:
    """
    State machine collecting the units enclosed by a block directive
    """

    def __init__(self, settings=None):
        """
        Initialize scanner in the SCANNING state

        Args:
            settings: AppSettings instance (defaults to the appsettings singleton)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.state = BlockScanState()

    @property
    def is_collecting(self) -> bool:
        return self.state.is_collecting

    def state_reset(self) -> None:
        """Discard any in-progress block and return to SCANNING"""
        self.state.reset()

    def transition_log(self, message: str) -> None:
        LOG(message, level=1 if self.settings.debug_mode else 3)

    def opener_find(
        self, node: ContentNode
    ) -> Optional[Tuple[BlockOpener, Optional[ContentNode], ContentNode]]:
        """
        Check if a unit ends with a block opener marker

        The marker must be the last line of the unit's last text child.
        Anything before it (earlier children, earlier lines of the same
        text) is returned as leading content.

        Args:
            node: Content unit (paragraph or bare text node)

        Returns:
            (opener, leading unit or None, marker-only unit), or None
        """
        if node.is_text:
            last = node
            leading: List[ContentNode] = []
        elif node.type == NodeType.PARAGRAPH and node.children and node.children[-1].is_text:
            last = node.children[-1]
            leading = list(node.children[:-1])
        else:
            return None

        head, _, marker = (last.value or "").rstrip().rpartition('\n')
        opener = blockOpener_match(marker)
        if not opener:
            return None

        if head.strip():
            leading.append(text_make(head))
        while leading and leading[-1].type == NodeType.LINE_BREAK:
            leading.pop()

        if node.is_text:
            return opener, (leading[0] if leading else None), text_make(marker)
        return opener, (paragraph_make(leading) if leading else None), paragraph_make([text_make(marker)])

    def closer_strip(self, node: ContentNode) -> Tuple[bool, Optional[ContentNode]]:
        """
        Find and remove the ':::' closer at the end of a unit

        Descends through the last child of containers, so a closer that ends
        a nested paragraph is found too. The unit is copied before being
        modified.

        Args:
            node: Content unit

        Returns:
            (found, residual) where residual is the unit without the closer,
            or None when nothing but the closer was left
        """
        if node.is_text:
            value = (node.value or "").rstrip()
            if blockCloser_is(value):
                return True, None
            head, newline, last = value.rpartition('\n')
            if newline and blockCloser_is(last):
                return True, (text_make(head) if head.strip() else None)
            return False, None

        if not node.children:
            return False, None

        found, residual = self.closer_strip(node.children[-1])
        if not found:
            return False, None

        stripped = node.clone()
        if residual is None:
            stripped.children.pop()
        else:
            stripped.children[-1] = residual
        while stripped.children and stripped.children[-1].type == NodeType.LINE_BREAK:
            stripped.children.pop()

        return True, (stripped if stripped.children else None)

    def block_make(self) -> HiddenBlockNode:
        """Build the hidden block from the remembered opener and accumulator"""
        attributes = attributes_decode(self.state.attributes_raw, AttributeDialect.ORIGINAL)
        extracted = label_split(attributes, self.settings.reserved_label_keys)
        return HiddenBlockNode(
            children=list(self.state.accumulator),
            attributes=extracted.attributes,
            label=extracted.label,
        )

    def unit_feed(self, node: ContentNode) -> Resolution:
        """
        Advance the state machine by one content unit

        Args:
            node: Next unit of the sibling sequence

        Returns:
            UNCHANGED for units outside any block, REMOVED for units taken
            into the accumulator (and for a bare opener), REPLACED with the
            leading paragraph for an opener that had content before it, and
            REPLACED with the finished HiddenBlockNode at the closer
        """
        state = self.state

        if state.phase is ScanPhase.SCANNING:
            found = self.opener_find(node)
            if not found:
                return Resolution.unchanged(node)

            opener, leading, marker_unit = found
            if not self.settings.action_is(opener.action):
                return Resolution.unchanged(node)

            state.phase = ScanPhase.COLLECTING
            state.depth = 1
            state.attributes_raw = opener.attributes_raw
            state.opener = marker_unit
            state.accumulator = []
            self.transition_log(f"SCANNING -> COLLECTING ({opener.action}{opener.attributes_raw})")

            if leading is not None:
                return Resolution.replaced([leading])
            return Resolution.removed()

        if self.opener_find(node):
            state.depth += 1
            state.accumulator.append(node)
            return Resolution.removed()

        found, residual = self.closer_strip(node)
        if not found:
            state.accumulator.append(node)
            return Resolution.removed()

        state.depth -= 1
        if state.depth > 0:
            state.accumulator.append(node)
            return Resolution.removed()

        if residual is not None:
            state.accumulator.append(residual)

        block = self.block_make()
        self.transition_log(f"COLLECTING -> SCANNING ({len(block.children)} unit(s) hidden)")
        state.reset()
        return Resolution.replaced([block])

    def scan_finish(self) -> List[ContentNode]:
        """
        End the sequence; fail open if a block is still being collected

        Returns:
            The opener unit followed by every accumulated unit, in original
            order, when the block was never closed; otherwise []
        """
        if not self.state.is_collecting:
            return []

        LOG("Unterminated block directive, restoring collected content", level=2)
        restored: List[ContentNode] = []
        if self.state.opener is not None:
            restored.append(self.state.opener)
        restored.extend(self.state.accumulator)
        self.state.reset()
        return restored
