"""
Attribute blob extraction and serialization

Directives and placeholders carry an optional attribute blob in braces.
Authors write the ORIGINAL dialect, placeholders persist the CANONICAL one:

    {level=high;type=sensitive}   ->   {level:high,type:sensitive}

Extraction never fails outward: malformed pairs are dropped one by one and
an unexpected failure degrades to an empty mapping plus a diagnostic.

Example:
    >>> attributes_extract("{a=1;b=2}", ";", "=")
    {'a': '1', 'b': '2'}
    >>> attributes_serialize({'a': '1', 'b': '2'})
    'a:1,b:2'
"""

from typing import Dict, List, Optional

from ..models.directives import AttributeDialect, AttributeSet, ExtractedLabel
from .log import LOG


def attributes_extract(
    blob: Optional[str], separator: str = ",", keyValueSeparator: str = ":"
) -> AttributeSet:
    """
    Parse an attribute blob into a key -> value mapping

    Strips one leading '{' and one trailing '}' when present, splits on
    separator, then splits each piece on the first keyValueSeparator. Pieces
    that do not yield a non-empty key and a non-empty value after trimming
    are dropped. Later duplicates overwrite earlier ones.

    Args:
        blob: Attribute text, with or without braces; None/"" allowed
        separator: Pair separator (";" or ",")
        keyValueSeparator: Key/value separator ("=" or ":")

    Returns:
        Attribute mapping in insertion order, {} on empty or failed input
    """
    if not blob:
        return {}

    try:
        text = blob.strip()
        if text.startswith("{"):
            text = text[1:]
        if text.endswith("}"):
            text = text[:-1]

        attributes: AttributeSet = {}
        for piece in text.split(separator):
            key, found, value = piece.partition(keyValueSeparator)
            key = key.strip()
            value = value.strip()
            if not found or not key or not value:
                if piece.strip():
                    LOG(f"Dropping malformed attribute pair '{piece.strip()}'", level=3)
                continue
            attributes[key] = value
        return attributes
    except Exception as e:
        LOG(f"Error extracting attributes from {blob!r}: {e}", level=1)
        return {}


def attributes_decode(blob: Optional[str], dialect: AttributeDialect) -> AttributeSet:
    """Extract attributes using the separators of a dialect"""
    return attributes_extract(blob, dialect.separator, dialect.keyValueSeparator)


def attributes_serialize(
    attributes: AttributeSet,
    dialect: AttributeDialect = AttributeDialect.CANONICAL,
    forbidden: Optional[str] = None,
) -> str:
    """
    Serialize attributes to a blob body (without braces)

    Pairs whose key or value contains a forbidden character are dropped:
    the grammar has no escaping, so such a pair would corrupt the token.

    Args:
        attributes: Mapping to serialize
        dialect: Target dialect (CANONICAL for placeholders)
        forbidden: Characters not allowed in keys/values
                   (defaults to appsettings.forbidden_value_chars)

    Returns:
        Serialized body (e.g., "level:high,type:sensitive"), "" when empty
    """
    return dialect.separator.join(
        f"{key}{dialect.keyValueSeparator}{value}"
        for key, value in attributes_sanitize(attributes, forbidden).items()
    )


def attributes_sanitize(attributes: AttributeSet, forbidden: Optional[str] = None) -> AttributeSet:
    """Drop pairs that cannot be serialized without escaping"""
    if forbidden is None:
        from ..config import appsettings
        forbidden = appsettings.forbidden_value_chars

    clean: AttributeSet = {}
    for key, value in attributes.items():
        if any(ch in forbidden for ch in key + value):
            LOG(f"Dropping attribute '{key}': reserved character in key or value", level=2)
            continue
        clean[key] = value
    return clean


def label_split(attributes: AttributeSet, reserved: Optional[List[str]] = None) -> ExtractedLabel:
    """
    Pull the reserved label keys out of an attribute mapping

    'placeholder' is preferred over 'text' when both are present. Both keys
    are removed from the returned attributes either way.

    Args:
        attributes: Mapping possibly containing reserved keys
        reserved: Reserved keys in preference order
                  (defaults to appsettings.reserved_label_keys)

    Returns:
        ExtractedLabel with label text and remaining data attributes
    """
    if reserved is None:
        from ..config import appsettings
        reserved = appsettings.reserved_label_keys

    label = ""
    for key in reserved:
        if attributes.get(key):
            label = attributes[key]
            break

    rest: Dict[str, str] = {k: v for k, v in attributes.items() if k not in reserved}
    return ExtractedLabel(label=label, attributes=rest)
