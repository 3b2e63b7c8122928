"""
Models package for hidemark

Contains data structures and type definitions for the directive pipeline.
"""

from .state import ProgramState, pipeline
from .directives import (
    AttributeDialect,
    AttributeSet,
    BlockOpener,
    BlockRegion,
    DirectiveMode,
    DirectiveSpan,
    ExtractedLabel,
)
from .nodes import ContentNode, HiddenBlockNode, HiddenInlineNode, NodeType, RenderSpec
from .resolution import BlockScanState, Resolution, ResolutionKind, ScanPhase

__all__ = [
    "ProgramState",
    "pipeline",
    "AttributeDialect",
    "AttributeSet",
    "BlockOpener",
    "BlockRegion",
    "DirectiveMode",
    "DirectiveSpan",
    "ExtractedLabel",
    "ContentNode",
    "HiddenBlockNode",
    "HiddenInlineNode",
    "NodeType",
    "RenderSpec",
    "BlockScanState",
    "Resolution",
    "ResolutionKind",
    "ScanPhase",
]
