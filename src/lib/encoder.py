"""
Directive encoder: raw author text -> canonical placeholder text

Collapses every hidden region to a payload-free placeholder token, which is
the form that gets persisted, transmitted to other viewers and indexed for
search:

    "This is :::hide{level=high;type=sensitive} secret::: content"
    -> "This is [hide-inline{level:high,type:sensitive}] content"

    ":::hide\\nSecret line 1\\nSecret line 2\\n:::"
    -> "[hide-block]"

Encoding is idempotent: placeholder tokens already present in the input are
recognized and passed through untouched, and directives with an action
other than the configured one are left verbatim.
"""

from typing import List, Optional

from ..models.directives import AttributeDialect, AttributeSet, DirectiveMode, DirectiveSpan
from .attributes import attributes_decode, attributes_sanitize, label_split
from .log import LOG
from .scanner import blockRegion_find, tokens_iterate


class DirectiveEncoder:
    """
    Encoder for hidden-content directives

    Stateless apart from its settings; one instance may be shared freely.
    """

    def __init__(self, settings=None):
        """
        Initialize encoder

        Args:
            settings: AppSettings instance (defaults to the appsettings singleton)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings

    def attributes_canonicalize(self, attributes_raw: str) -> AttributeSet:
        """
        Convert an author attribute blob to the attributes a placeholder carries

        Decodes the ORIGINAL dialect, pulls out the display label, drops
        unserializable pairs and, when persist_label is set, re-appends the
        label under the 'placeholder' key.

        Args:
            attributes_raw: Blob as written in the directive (e.g., "{a=1;text=Hi}")

        Returns:
            Attributes ready for token_make (e.g., {"a": "1", "placeholder": "Hi"})
        """
        decoded = attributes_decode(attributes_raw, AttributeDialect.ORIGINAL)
        extracted = label_split(decoded, self.settings.reserved_label_keys)

        attributes = attributes_sanitize(extracted.attributes, self.settings.forbidden_value_chars)
        if self.settings.persist_label and extracted.label:
            attributes.update(
                attributes_sanitize({"placeholder": extracted.label}, self.settings.forbidden_value_chars)
            )
        return attributes

    def span_encode(self, text: str, span: DirectiveSpan) -> str:
        """
        Encode one scanned span

        Placeholders and foreign actions are returned exactly as they appear
        in text; hidden directives become a token without their payload.
        """
        original = text[span.start:span.end]
        if span.is_placeholder or not self.settings.action_is(span.action):
            return original
        return self.settings.token_make(span.mode.value, self.attributes_canonicalize(span.attributes_raw))

    def inline_encode(self, text: str) -> str:
        """
        Replace every raw inline directive with an inline placeholder

        Text outside directives is kept exactly, in its original position.

        Args:
            text: Author text

        Returns:
            Text with inline directives encoded

        Example:
            >>> DirectiveEncoder().inline_encode("This is :::hide secret::: content")
            'This is [hide-inline] content'
        """
        if not text:
            return text

        parts: List[str] = []
        pos = 0
        encoded = 0
        for span in tokens_iterate(text):
            parts.append(text[pos:span.start])
            parts.append(self.span_encode(text, span))
            pos = span.end
            encoded += 0 if span.is_placeholder else 1
        parts.append(text[pos:])

        if encoded:
            LOG(f"Encoded {encoded} inline directive(s)", level=3)
        return ''.join(parts)

    def block_encode(self, text: str) -> str:
        """
        Collapse every block directive region to one block placeholder

        An opener line (':::hide' or ':::hide{attrs}' alone) through its
        matching closer line (':::' alone) becomes a single token line; the
        enclosed lines are discarded. An opener that is never closed leaves
        itself and everything after it unencoded.

        Args:
            text: Author text

        Returns:
            Text with block directives encoded

        Example:
            >>> DirectiveEncoder().block_encode(":::hide\\nSecret\\n:::")
            '[hide-block]'
        """
        if not text:
            return text

        lines = text.split('\n')
        result: List[str] = []
        index = 0

        while index < len(lines):
            region = blockRegion_find(lines, self.settings.directive_action, index)
            if region is None:
                result.extend(lines[index:])
                break

            if not region.is_terminated:
                LOG(f"Unterminated block directive at line {region.start_line + 1}, left as text", level=2)
                result.extend(lines[index:])
                break

            result.extend(lines[index:region.start_line])
            result.append(
                self.settings.token_make(
                    DirectiveMode.BLOCK.value, self.attributes_canonicalize(region.attributes_raw)
                )
            )
            index = region.end_line + 1

        return '\n'.join(result)

    def content_encode(self, text: str) -> str:
        """
        Encode a complete note body: block directives first, then inline ones

        Block regions must go first so their enclosed lines are never read
        as inline payloads.

        Example:
            >>> DirectiveEncoder().content_encode(
            ...     "Start :::hide inline::: middle\\n:::hide{foo=bar}\\nblock content\\n:::\\nend")
            'Start [hide-inline] middle\\n[hide-block{foo:bar}]\\nend'
        """
        return self.inline_encode(self.block_encode(text))


def content_encode(text: str, settings: Optional[object] = None) -> str:
    """Encode text with a fresh DirectiveEncoder"""
    return DirectiveEncoder(settings).content_encode(text)
