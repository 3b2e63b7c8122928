"""
Directive grammar models

Defines the attribute dialects, directive modes and the transient span
structures produced while scanning text for hidden-content directives.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Optional


AttributeSet = Dict[str, str]


class AttributeDialect(Enum):
    """
    Serialization dialects for attribute blobs

    ORIGINAL is what authors type inside a directive ({level=high;type=x}),
    CANONICAL is what placeholders carry ({level:high,type:x}).
    """
    ORIGINAL = (";", "=")
    CANONICAL = (",", ":")

    @property
    def separator(self) -> str:
        return self.value[0]

    @property
    def keyValueSeparator(self) -> str:
        return self.value[1]


class DirectiveMode(str, Enum):
    """Shape of a hidden region"""
    INLINE = "inline"
    BLOCK = "block"


@dataclass
class ExtractedLabel:
    """
    Result of pulling the reserved label keys out of an attribute mapping

    Attributes:
        label: Display text override ("" when no reserved key was present)
        attributes: Remaining data attributes, insertion order preserved

    Example:
        {"text": "Spoiler", "level": "high"}
        -> ExtractedLabel(label="Spoiler", attributes={"level": "high"})
    """
    label: str
    attributes: AttributeSet


@dataclass
class DirectiveSpan:
    """
    One recognized directive or placeholder occurrence in a string

    Spans are transient: the encoder projects them to placeholder text and
    the resolver projects them to hidden nodes, neither keeps them.

    Attributes:
        mode: INLINE or BLOCK
        action: Action word (only the configured action is acted upon)
        start: Offset of the first character of the span
        end: Offset one past the last character of the span
        attributes_raw: Attribute blob including braces ("" when absent)
        payload: Hidden text of a raw inline directive ("" for placeholders)
        is_placeholder: True when recognized from a canonical token

    Example:
        In "a :::hide{x=1} s::: b":
        DirectiveSpan(mode=INLINE, action="hide", start=2, end=19,
                      attributes_raw="{x=1}", payload="s")
    """
    mode: DirectiveMode
    action: str
    start: int
    end: int
    attributes_raw: str = ""
    payload: str = ""
    is_placeholder: bool = False

    @property
    def dialect(self) -> AttributeDialect:
        """Dialect the attribute blob was written in"""
        if self.is_placeholder:
            return AttributeDialect.CANONICAL
        return AttributeDialect.ORIGINAL


@dataclass
class BlockRegion:
    """
    A block directive region found in line-oriented text

    Attributes:
        action: Action word from the opener line
        attributes_raw: Attribute blob from the opener line ("" when absent)
        start_line: Index of the opener line
        end_line: Index of the matching closer line (inclusive),
                  None when the opener is never closed
    """
    action: str
    attributes_raw: str
    start_line: int
    end_line: Optional[int]

    @property
    def is_terminated(self) -> bool:
        return self.end_line is not None

    @property
    def interior(self) -> range:
        """Line indices strictly between opener and closer"""
        if self.end_line is None:
            return range(0)
        return range(self.start_line + 1, self.end_line)


@dataclass
class BlockOpener:
    """
    A block opener marker recognized on one line or text unit

    Attributes:
        action: Action word (e.g., "hide")
        attributes_raw: Attribute blob including braces ("" when absent)
    """
    action: str
    attributes_raw: str = field(default="")
