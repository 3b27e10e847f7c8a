"""Design tokens and layout vocabulary.

This module defines the closed vocabulary of the layout grammar and the
fixed design values. Colours are semantic and not user-configurable.

Key definitions:
- DeclarationType: Rhetorical role of a section (a-e).
- GridPattern: Structural template of a section.
- SlotType: Typographic role of a slot.
- ColorToken: Semantic colour names.
- TOKENS: Frozen design values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class DeclarationType(str, Enum):
    """Rhetorical role of a layout section."""

    FOCUS_OPENING = "a"
    EXPLANATION = "b"
    ENUMERATION = "c"
    EMPHASIS = "d"
    CLOSURE = "e"


class GridPattern(str, Enum):
    """Column/alignment template applied to a section."""

    CENTERED = "a"
    TWO_COLUMN = "b"
    TWO_COLUMN_MIRRORED = "b-mirror"


class SlotType(str, Enum):
    """Typographic role of a slot."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    META = "meta"
    LIST = "list"
    QUOTE = "quote"


class ColorToken(str, Enum):
    """Semantic colour names. Each has exactly one value in TOKENS."""

    BASE = "base"
    STRUCTURE = "structure"
    CONTEXT = "context"
    INTENT = "intent"
    ACTION = "action"
    FINAL = "final"
    TEXT_MAIN = "text-main"
    TEXT_SOFT = "text-soft"
    TEXT_MUTED = "text-muted"


@dataclass(frozen=True)
class Spacing:
    section_padding_y: str
    section_padding_x: str
    section_gap: str
    slot_gap: str


@dataclass(frozen=True)
class Typography:
    line_max: str


@dataclass(frozen=True)
class DesignTokens:
    """Immutable design values.

    Attributes:
        colors: Hex value for every ColorToken.
        spacing: Section and slot spacing.
        typography: Text measure.
    """

    colors: Mapping[ColorToken, str]
    spacing: Spacing
    typography: Typography


TOKENS = DesignTokens(
    colors=MappingProxyType(
        {
            ColorToken.BASE: "#0B2839",
            ColorToken.STRUCTURE: "#10475E",
            ColorToken.CONTEXT: "#3D717E",
            ColorToken.INTENT: "#D68631",
            ColorToken.ACTION: "#964405",
            ColorToken.FINAL: "#5A3211",
            ColorToken.TEXT_MAIN: "#F3F6F8",
            ColorToken.TEXT_SOFT: "#C7D3DB",
            ColorToken.TEXT_MUTED: "#A9BAC6",
        }
    ),
    spacing=Spacing(
        section_padding_y="4rem",
        section_padding_x="3rem",
        section_gap="2rem",
        slot_gap="1.5rem",
    ),
    typography=Typography(line_max="75ch"),
)


def tokens_to_css_variables(tokens: DesignTokens = TOKENS) -> str:
    """Render design tokens as a ``:root`` block of CSS custom properties."""
    color_vars = "\n".join(
        f"  --{token.value}: {tokens.colors[token]};" for token in ColorToken
    )
    spacing = tokens.spacing
    return (
        ":root {\n"
        f"{color_vars}\n"
        "\n"
        f"  --line-max: {tokens.typography.line_max};\n"
        f"  --section-padding-y: {spacing.section_padding_y};\n"
        f"  --section-padding-x: {spacing.section_padding_x};\n"
        f"  --section-gap: {spacing.section_gap};\n"
        f"  --slot-gap: {spacing.slot_gap};\n"
        "}"
    )


def is_valid_color_token(name: str) -> bool:
    """Return True if ``name`` is one of the semantic colour names."""
    return name in {token.value for token in ColorToken}
