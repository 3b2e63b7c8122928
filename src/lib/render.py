"""
HTML projection of resolved content trees

Hidden nodes project to element properties a toggleable front end can pick
up:

    HiddenInlineNode -> <span data-hidden-inline="true" data-placeholder=...>
    HiddenBlockNode  -> <div data-hidden-block="true" data-placeholder=...>

Rendering dispatches on node type through a RendererRegistry, so foreign
node kinds can be given handlers without touching this module. With
reveal=False (the default, what any viewer without access gets) neither
the inline payload nor the block children are emitted; only the label is.
"""

import html
from typing import Callable, Dict, List, Optional

from ..models.nodes import (
    ContentNode,
    HiddenBlockNode,
    HiddenInlineNode,
    NodeType,
    RenderSpec,
)


class RendererRegistry:
    """
    Registry of node render specifications

    Maps node type strings to RenderSpec objects. Unknown types fall back to
    rendering their children (or their escaped value) in a tagged div.
    """

    def __init__(self) -> None:
        """Initialize the registry and register the built-in node types"""
        self.specs: Dict[str, RenderSpec] = {}
        self.coreNodes_register()
        self.hiddenNodes_register()

    def register(self, spec: RenderSpec) -> None:
        """Register a render specification"""
        self.specs[spec.node_type] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def get(self, node_type: str) -> Optional[Callable[[ContentNode, 'HtmlRenderer'], str]]:
        """
        Get the render handler for a node type

        Returns:
            Handler function or None if the type is not registered
        """
        spec = self.specs.get(node_type)
        return spec.handler if spec else None

    def coreNodes_register(self) -> None:
        """Register text, paragraph and line break"""

        def text_handler(node: ContentNode, renderer: 'HtmlRenderer') -> str:
            return html.escape(node.value or "")

        def paragraph_handler(node: ContentNode, renderer: 'HtmlRenderer') -> str:
            return f"<p>{renderer.nodes_render(node.children)}</p>"

        def lineBreak_handler(node: ContentNode, renderer: 'HtmlRenderer') -> str:
            return "<br>"

        self.register(RenderSpec(
            node_type=NodeType.TEXT.value,
            description="Escaped literal text",
            handler=text_handler,
        ))
        self.register(RenderSpec(
            node_type=NodeType.PARAGRAPH.value,
            description="Paragraph wrapping inline children",
            handler=paragraph_handler,
        ))
        self.register(RenderSpec(
            node_type=NodeType.LINE_BREAK.value,
            description="Blank line between units",
            handler=lineBreak_handler,
            aliases=["break"],
        ))

    def hiddenNodes_register(self) -> None:
        """Register the hidden inline and hidden block node kinds"""

        def hiddenInline_handler(node: ContentNode, renderer: 'HtmlRenderer') -> str:
            properties = renderer.hiddenInline_properties(node)
            body = f'<span class="hidden-label">{html.escape(properties["data-placeholder"])}</span>'
            if renderer.reveal and properties.get("data-content"):
                body += f'<span class="hidden-payload">{html.escape(properties["data-content"])}</span>'
            return f"<span{properties_format(properties)}>{body}</span>"

        def hiddenBlock_handler(node: ContentNode, renderer: 'HtmlRenderer') -> str:
            properties = renderer.hiddenBlock_properties(node)
            body = f'<span class="hidden-label">{html.escape(properties["data-placeholder"])}</span>'
            if renderer.reveal and node.children:
                body += f'<div class="hidden-payload">{renderer.nodes_render(node.children)}</div>'
            return f"<div{properties_format(properties)}>{body}</div>"

        self.register(RenderSpec(
            node_type=NodeType.HIDDEN_INLINE.value,
            description="Hidden inline run, payload only when revealed",
            handler=hiddenInline_handler,
        ))
        self.register(RenderSpec(
            node_type=NodeType.HIDDEN_BLOCK.value,
            description="Hidden block, children only when revealed",
            handler=hiddenBlock_handler,
        ))


def properties_format(properties: Dict[str, str]) -> str:
    """Format element properties as an HTML attribute string"""
    return ''.join(f' {key}="{html.escape(value, quote=True)}"' for key, value in properties.items())


class HtmlRenderer:
    """
    Renders a resolved content tree to an HTML fragment
    """

    def __init__(self, reveal: bool = False, settings=None, registry: Optional[RendererRegistry] = None):
        """
        Initialize renderer

        Args:
            reveal: Emit hidden payloads (privileged or interacting viewer)
            settings: AppSettings instance (defaults to the appsettings singleton)
            registry: RendererRegistry (defaults to a new built-in registry)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.reveal = reveal
        self.settings = settings
        self.registry = registry or RendererRegistry()

    def hiddenInline_properties(self, node: HiddenInlineNode) -> Dict[str, str]:
        """
        Element properties for a hidden inline node

        Example:
            HiddenInlineNode(attributes={"level": "high"}, payload_text="s")
            -> {"data-level": "high", "data-hidden-inline": "true",
                "data-placeholder": "Content hidden", "data-content": "s"}   (reveal=True)
        """
        properties = {f"data-{key}": value for key, value in node.attributes.items()}
        properties["data-hidden-inline"] = "true"
        properties["data-placeholder"] = node.label or self.settings.inline_label_default
        if self.reveal:
            properties["data-content"] = node.payload_text
        else:
            properties.pop("data-content", None)
        return properties

    def hiddenBlock_properties(self, node: HiddenBlockNode) -> Dict[str, str]:
        """Element properties for a hidden block node"""
        properties = {f"data-{key}": value for key, value in node.attributes.items()}
        properties["data-hidden-block"] = "true"
        properties["data-placeholder"] = node.label or self.settings.block_label_default
        return properties

    def node_render(self, node: ContentNode) -> str:
        """Render one node through its registered handler"""
        handler = self.registry.get(node.type)
        if handler:
            return handler(node, self)

        inner = self.nodes_render(node.children) if node.children else html.escape(node.value or "")
        return f'<div class="node-{html.escape(node.type)}">{inner}</div>'

    def nodes_render(self, nodes: List[ContentNode]) -> str:
        """Render a sibling sequence"""
        return ''.join(self.node_render(node) for node in nodes)
