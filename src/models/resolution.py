"""
Resolver-specific data models

Type-safe structures for tree rewriting results and block scanner state.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional

from .nodes import ContentNode


class ResolutionKind(Enum):
    """How a visited node is rewritten"""
    UNCHANGED = "unchanged"
    REPLACED = "replaced"
    REMOVED = "removed"


@dataclass
class Resolution:
    """
    Result of resolving one content node

    Replaces the node | list | null return shape with an explicit variant:
    UNCHANGED carries the original node, REPLACED carries zero or more
    replacement nodes, REMOVED carries nothing (the node was consumed, e.g.
    collected into an open hidden block).

    Example:
        Resolution.unchanged(node).nodes_get()   -> [node]
        Resolution.replaced([a, b]).nodes_get()  -> [a, b]
        Resolution.removed().nodes_get()         -> []
    """
    kind: ResolutionKind
    nodes: List[ContentNode] = field(default_factory=list)

    @classmethod
    def unchanged(cls, node: ContentNode) -> 'Resolution':
        return cls(kind=ResolutionKind.UNCHANGED, nodes=[node])

    @classmethod
    def replaced(cls, nodes: List[ContentNode]) -> 'Resolution':
        return cls(kind=ResolutionKind.REPLACED, nodes=list(nodes))

    @classmethod
    def removed(cls) -> 'Resolution':
        return cls(kind=ResolutionKind.REMOVED)

    @property
    def is_unchanged(self) -> bool:
        return self.kind is ResolutionKind.UNCHANGED

    def nodes_get(self) -> List[ContentNode]:
        """Nodes to splice in place of the visited node"""
        return list(self.nodes)


class ScanPhase(Enum):
    """Block scanner states"""
    SCANNING = "scanning"
    COLLECTING = "collecting"


@dataclass
class BlockScanState:
    """
    Mutable state of one block scan over one sibling sequence

    Attributes:
        phase: SCANNING or COLLECTING
        depth: Open block count while collecting (1 = only the outer block)
        attributes_raw: Attribute blob remembered from the opener
        opener: The opener unit (marker part only), re-emitted on fail-open
        accumulator: Units collected since the opener
    """
    phase: ScanPhase = ScanPhase.SCANNING
    depth: int = 0
    attributes_raw: str = ""
    opener: Optional[ContentNode] = None
    accumulator: List[ContentNode] = field(default_factory=list)

    @property
    def is_collecting(self) -> bool:
        return self.phase is ScanPhase.COLLECTING

    def reset(self) -> None:
        """Return to the initial SCANNING state"""
        self.phase = ScanPhase.SCANNING
        self.depth = 0
        self.attributes_raw = ""
        self.opener = None
        self.accumulator = []
