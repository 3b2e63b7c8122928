"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use HIDEMARK_ prefix (e.g., HIDEMARK_PERSIST_LABEL=false).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use HIDEMARK_ prefix.

    Examples:
        HIDEMARK_DIRECTIVE_ACTION=hide
        HIDEMARK_PERSIST_LABEL=false
        HIDEMARK_BLOCK_LABEL_DEFAULT="Members only"
    """

    model_config = SettingsConfigDict(
        env_prefix="HIDEMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Grammar configuration
    directive_action: str = Field(
        default="hide",
        description="The only directive action treated as hidden content; other actions pass through",
    )

    reserved_label_keys: List[str] = Field(
        default=["placeholder", "text"],
        description="Attribute keys consumed as the display label, in order of preference",
    )

    forbidden_value_chars: str = Field(
        default=",:;={}[]",
        description="Characters that may not appear in a key or value serialized into a placeholder",
    )

    # Encoding configuration
    persist_label: bool = Field(
        default=False,
        description="Opt in to re-emitting the display label as a placeholder:<label> pair in persisted tokens",
    )

    # Presentation defaults
    inline_label_default: str = Field(
        default="Content hidden",
        description="Label shown for a hidden inline run without an explicit label",
    )

    block_label_default: str = Field(
        default="Hidden Content",
        description="Label shown for a hidden block without an explicit label",
    )

    # Diagnostics
    debug_mode: bool = Field(
        default=False,
        description="Log block scanner state transitions",
    )

    def token_make(self, mode: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """
        Generate a placeholder token for a hidden region.

        Attributes are serialized in the CANONICAL dialect through
        attributes_serialize, in insertion order; pairs holding a forbidden
        character are dropped.

        Args:
            mode: "inline" or "block"
            attributes: Canonical attributes to embed, may be empty

        Returns:
            Placeholder token (e.g., "[hide-inline{level:high}]")

        Example:
            >>> settings = AppSettings()
            >>> settings.token_make("block")
            '[hide-block]'
            >>> settings.token_make("inline", {"level": "high", "type": "sensitive"})
            '[hide-inline{level:high,type:sensitive}]'
        """
        from ..lib.attributes import attributes_serialize
        from ..models.directives import AttributeDialect

        body = attributes_serialize(attributes or {}, AttributeDialect.CANONICAL, self.forbidden_value_chars)
        if body:
            return f"[{self.directive_action}-{mode}{{{body}}}]"
        return f"[{self.directive_action}-{mode}]"

    def action_is(self, action: Optional[str]) -> bool:
        """Check if an action word names the hidden-content directive"""
        return action == self.directive_action


# Singleton instance - import this in your code
appsettings = AppSettings()
