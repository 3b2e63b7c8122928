"""
Placeholder resolver: content node tree -> tree with hidden nodes

Rewrites a generic content tree so every hidden region becomes a dedicated
node kind a renderer can dispatch on:

- raw inline directives in text (':::hide{...} secret:::', the author's own
  view) become HiddenInlineNode carrying the payload
- placeholder tokens in text ('[hide-inline{...}]', '[hide-block{...}]',
  every other viewer) become HiddenInlineNode / HiddenBlockNode with an
  empty payload: it was dropped before the content was stored
- block directives spanning several units become one HiddenBlockNode that
  owns the enclosed units (see BlockDirectiveScanner)
- a complete block directive inside one text node becomes a HiddenBlockNode
  owning the enclosed lines as a text child

Everything else is returned unchanged; input nodes are never modified.

Each PlaceholderResolver owns the block scanner of exactly one sibling
sequence, and each nested sequence gets a resolver of its own, so two
documents (or two branches of one document) never share scan state.

Example:
    >>> nodes = document_resolve([paragraph_make([text_make("a :::hide b::: c")])])
    >>> [child.type for child in nodes[0].children]
    ['text', 'hiddenInline', 'text']
"""

import dataclasses
from typing import List, Optional

from ..models.directives import DirectiveMode, DirectiveSpan
from ..models.nodes import ContentNode, HiddenBlockNode, HiddenInlineNode, NodeType, text_make
from ..models.resolution import Resolution
from .attributes import attributes_decode, label_split
from .blocks import BlockDirectiveScanner
from .log import LOG
from .scanner import blockRegion_find, tokens_iterate

# Containers whose children are inline content: block directives are not
# scanned for among their children
INLINE_PARENTS = {
    NodeType.PARAGRAPH.value,
    "heading",
    "emphasis",
    "strong",
    "delete",
    "link",
    "tableCell",
}


class PlaceholderResolver:
    """
    Resolver for one sibling sequence of a content tree
    """

    def __init__(self, settings=None, block_scan: bool = True):
        """
        Initialize resolver

        Args:
            settings: AppSettings instance (defaults to the appsettings singleton)
            block_scan: Run the block scanner over this sequence; False for
                        the inline children of paragraphs and similar
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.block_scan = block_scan
        self.scanner = BlockDirectiveScanner(settings)

    def nested(self, parent_type: Optional[str] = None) -> 'PlaceholderResolver':
        """Create a resolver for a child sequence, with scan state of its own"""
        return PlaceholderResolver(self.settings, block_scan=parent_type not in INLINE_PARENTS)

    def span_resolve(self, text: str, span: DirectiveSpan) -> Optional[ContentNode]:
        """
        Project one scanned span to a hidden node

        Returns:
            HiddenInlineNode / HiddenBlockNode, or None for a span whose
            action is not the configured one (it stays plain text)
        """
        if not self.settings.action_is(span.action):
            return None

        attributes = attributes_decode(span.attributes_raw, span.dialect)
        extracted = label_split(attributes, self.settings.reserved_label_keys)

        if span.mode is DirectiveMode.INLINE:
            return HiddenInlineNode(
                attributes=extracted.attributes,
                payload_text="" if span.is_placeholder else span.payload,
                label=extracted.label,
            )
        return HiddenBlockNode(attributes=extracted.attributes, label=extracted.label)

    def inline_split(self, text: str) -> List[ContentNode]:
        """
        Split text around raw directives and placeholder tokens

        Plain fragments become text nodes, adjacent fragments (including
        foreign-action spans) are merged, and left-to-right order is kept.
        """
        nodes: List[ContentNode] = []
        buffer: List[str] = []
        pos = 0

        for span in tokens_iterate(text):
            hidden = self.span_resolve(text, span)
            buffer.append(text[pos:span.start])
            if hidden is None:
                buffer.append(text[span.start:span.end])
            else:
                if ''.join(buffer):
                    nodes.append(text_make(''.join(buffer)))
                buffer = []
                nodes.append(hidden)
            pos = span.end

        buffer.append(text[pos:])
        if ''.join(buffer):
            nodes.append(text_make(''.join(buffer)))
        return nodes

    def text_resolve(self, node: ContentNode) -> Resolution:
        """
        Resolve directives and placeholders inside one text node

        Complete block directives on their own lines are taken out first,
        then the remaining fragments are split around inline tokens.

        Args:
            node: Text node

        Returns:
            UNCHANGED when nothing hidden was found, otherwise REPLACED with
            the fragments and hidden nodes in original order
        """
        value = node.value or ""
        lines = value.split('\n')
        offsets = [0]
        for line in lines:
            offsets.append(offsets[-1] + len(line) + 1)

        nodes: List[ContentNode] = []
        pos = 0
        line_index = 0
        found = False

        while line_index < len(lines):
            region = blockRegion_find(lines, self.settings.directive_action, line_index)
            if region is None or not region.is_terminated:
                break

            start = offsets[region.start_line]
            end = offsets[region.end_line] + len(lines[region.end_line])
            nodes.extend(self.inline_split(value[pos:start]))

            block = self.span_resolve(
                value,
                DirectiveSpan(
                    mode=DirectiveMode.BLOCK,
                    action=region.action,
                    start=start,
                    end=end,
                    attributes_raw=region.attributes_raw,
                ),
            )
            interior = '\n'.join(lines[i] for i in region.interior)
            if interior:
                block.children = self.nested(NodeType.HIDDEN_BLOCK.value).nodes_resolve([text_make(interior)])
            nodes.append(block)

            found = True
            pos = end
            line_index = region.end_line + 1

        nodes.extend(self.inline_split(value[pos:]))

        if not found and not any(not n.is_text for n in nodes):
            return Resolution.unchanged(node)
        return Resolution.replaced(nodes)

    def container_resolve(self, node: ContentNode) -> Resolution:
        """Resolve the children of a container with a nested resolver"""
        if not node.children:
            return Resolution.unchanged(node)

        children = self.nested(node.type).nodes_resolve(node.children)
        if len(children) == len(node.children) and all(a is b for a, b in zip(children, node.children)):
            return Resolution.unchanged(node)
        return Resolution.replaced([dataclasses.replace(node, children=children)])

    def resolution_finish(self, resolution: Resolution) -> Resolution:
        """Resolve the content of nodes emitted by the block scanner"""
        finished: List[ContentNode] = []
        for node in resolution.nodes_get():
            if isinstance(node, HiddenBlockNode):
                node.children = self.nested(node.type).nodes_resolve(node.children)
                finished.append(node)
            elif node.is_text:
                finished.extend(self.text_resolve(node).nodes_get())
            else:
                finished.extend(self.container_resolve(node).nodes_get())
        return Resolution(kind=resolution.kind, nodes=finished)

    def node_resolve(self, node: ContentNode) -> Resolution:
        """
        Resolve one node of this resolver's sequence

        Nodes must be fed in document order: block directives spanning
        several nodes are tracked across calls.

        Args:
            node: Next node of the sequence

        Returns:
            Resolution saying whether to keep, replace or drop the node
        """
        if self.block_scan:
            resolution = self.scanner.unit_feed(node)
            if not resolution.is_unchanged:
                return self.resolution_finish(resolution)

        if isinstance(node, (HiddenInlineNode, HiddenBlockNode)):
            return Resolution.unchanged(node)
        if node.is_text:
            return self.text_resolve(node)
        return self.container_resolve(node)

    def sequence_finish(self) -> List[ContentNode]:
        """
        End the sequence

        Only the block directive fails open: the restored opener unit and
        the units after it are still resolved, so inline directives and
        placeholders among them become hidden nodes, and complete blocks
        after the unterminated opener are still found.

        Returns:
            Resolved units of an unterminated block, or []
        """
        finished: List[ContentNode] = []
        restored = self.scanner.scan_finish()
        while restored:
            opener, rest = restored[0], restored[1:]
            finished.extend(self.resolution_finish(Resolution.replaced([opener])).nodes_get())
            for node in rest:
                finished.extend(self.node_resolve(node).nodes_get())
            restored = self.scanner.scan_finish()
        return finished

    def nodes_resolve(self, nodes: List[ContentNode]) -> List[ContentNode]:
        """
        Resolve a whole sibling sequence

        Args:
            nodes: Sibling nodes in document order

        Returns:
            New sibling list with hidden nodes in place
        """
        result: List[ContentNode] = []
        for node in nodes:
            result.extend(self.node_resolve(node).nodes_get())
        result.extend(self.sequence_finish())
        return result


def document_resolve(nodes: List[ContentNode], settings=None) -> List[ContentNode]:
    """
    Resolve a document's top-level nodes with a fresh resolver

    Example:
        >>> resolved = document_resolve(document_segment(":::hide\\nsecret\\n:::"))
        >>> resolved[0].type
        'hiddenBlock'
    """
    resolver = PlaceholderResolver(settings)
    resolved = resolver.nodes_resolve(nodes)
    LOG(f"Resolved {len(nodes)} top-level node(s) into {len(resolved)}", level=3)
    return resolved
