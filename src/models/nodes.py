"""
Content node tree models

The tree is a generic, mdast-like structure of typed nodes. Only text,
paragraph and line-break nodes carry meaning for the directive pipeline;
every other type is opaque and passed through untouched. The two hidden
node kinds are produced by the resolver and consumed by renderers.
"""

import copy
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


class NodeType(str, Enum):
    """Node types the directive pipeline understands"""
    TEXT = "text"
    PARAGRAPH = "paragraph"
    LINE_BREAK = "lineBreak"
    HIDDEN_INLINE = "hiddenInline"
    HIDDEN_BLOCK = "hiddenBlock"


@dataclass
class ContentNode:
    """
    A node in the content tree

    Attributes:
        type: Node type, a NodeType value or any foreign type string
              (always stored as a plain string)
        value: Literal text for leaf nodes (text, code, ...)
        children: Child nodes for containers
        data: Opaque extra fields of foreign nodes (kept on round-trip)
    """
    type: str
    value: Optional[str] = None
    children: List['ContentNode'] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.type, Enum):
            self.type = self.type.value

    @property
    def is_text(self) -> bool:
        return self.type == NodeType.TEXT

    def clone(self) -> 'ContentNode':
        """Deep copy, used before modifying a captured unit"""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to an mdast-like JSON-serializable dict"""
        result: Dict[str, Any] = {"type": self.type}
        if self.value is not None:
            result["value"] = self.value
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        result.update(self.data)
        return result

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'ContentNode':
        """
        Build a node tree from an mdast-like dict

        Hidden node kinds are restored to their dedicated classes; any other
        type becomes a plain ContentNode with unknown keys kept in data.
        """
        node_type = raw.get("type", "")
        children = [cls.from_dict(child) for child in raw.get("children", [])]

        if node_type == NodeType.HIDDEN_INLINE:
            return HiddenInlineNode(
                attributes=dict(raw.get("attributes", {})),
                payload_text=raw.get("payload", ""),
                label=raw.get("label", ""),
            )
        if node_type == NodeType.HIDDEN_BLOCK:
            return HiddenBlockNode(
                children=children,
                attributes=dict(raw.get("attributes", {})),
                label=raw.get("label", ""),
            )

        data = {k: v for k, v in raw.items() if k not in ("type", "value", "children")}
        return cls(type=node_type, value=raw.get("value"), children=children, data=data)


@dataclass
class HiddenInlineNode(ContentNode):
    """
    Hidden run of inline text

    payload_text is empty when the node was resolved from a persisted
    placeholder: the payload was never transmitted to this viewer.
    """
    type: str = NodeType.HIDDEN_INLINE
    attributes: Dict[str, str] = field(default_factory=dict)
    payload_text: str = ""
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": NodeType.HIDDEN_INLINE.value,
            "attributes": dict(self.attributes),
            "payload": self.payload_text,
            "label": self.label,
        }


@dataclass
class HiddenBlockNode(ContentNode):
    """
    Hidden block owning the captured content units as children

    children is empty when the node was resolved from a persisted placeholder.
    """
    type: str = NodeType.HIDDEN_BLOCK
    attributes: Dict[str, str] = field(default_factory=dict)
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": NodeType.HIDDEN_BLOCK.value,
            "attributes": dict(self.attributes),
            "label": self.label,
            "children": [child.to_dict() for child in self.children],
        }


def text_make(value: str) -> ContentNode:
    """Create a text node"""
    return ContentNode(type=NodeType.TEXT, value=value)


def paragraph_make(children: List[ContentNode]) -> ContentNode:
    """Create a paragraph node"""
    return ContentNode(type=NodeType.PARAGRAPH, children=children)


@dataclass
class RenderSpec:
    """
    Specification for rendering one node type

    Attributes:
        node_type: Node type string the handler is registered for
        description: Human-readable description
        handler: Rendering function (node, renderer) -> str
        aliases: Alternative node type names sharing the handler
    """
    node_type: str
    description: str
    handler: Callable[[ContentNode, Any], str]
    aliases: List[str] = field(default_factory=list)
