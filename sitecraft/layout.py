"""Layout renderer for sitecraft.

Renders a validated PageLayout into an HTML fragment that can be used as
a page body. Each section becomes a ``<section>`` tagged with its
declaration and grid, and each slot is rendered according to its type:

    primary    -> <h2>
    secondary  -> <p>
    meta       -> <p>
    quote      -> <blockquote>, wrapped in quotation marks
    list       -> <ul>, one item per comma-separated entry

All text is escaped with escape_html. Rendering is deterministic.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from markupsafe import Markup

from .errors import LayoutValidationError
from .grammar import PageLayout, Section, Slot, layout_from_dict, validate_page_layout
from .html_utils import escape_html, split_list_items
from .tokens import SlotType


@dataclass(frozen=True)
class RenderedLayout:
    """A rendered layout fragment.

    Attributes:
        html: The ``<main>`` fragment.
        data_attributes: Summary attributes (currently ``sectionCount``).
    """

    html: Markup
    data_attributes: dict[str, str] = field(default_factory=dict)


def render_slot(slot: Slot) -> str:
    """Render a single slot to HTML.

    Args:
        slot: Slot to render.

    Returns:
        HTML for the slot.
    """
    content = escape_html(slot.content)
    slot_type = slot.type
    if slot_type is SlotType.PRIMARY:
        return f'<h2 class="slot slot--primary">{content}</h2>'
    if slot_type is SlotType.SECONDARY:
        return f'<p class="slot slot--secondary">{content}</p>'
    if slot_type is SlotType.META:
        return f'<p class="slot slot--meta">{content}</p>'
    if slot_type is SlotType.QUOTE:
        return f'<blockquote class="slot slot--quote">"{content}"</blockquote>'
    if slot_type is SlotType.LIST:
        items = "\n        ".join(
            f"<li>{escape_html(item)}</li>" for item in split_list_items(slot.content)
        )
        return (
            '<div class="slot slot--list">\n'
            "      <ul>\n"
            f"        {items}\n"
            "      </ul>\n"
            "    </div>"
        )
    raise AssertionError(f"Unhandled slot type: {slot_type!r}")


def render_section(section: Section) -> str:
    slots_html = "\n      ".join(render_slot(slot) for slot in section.slots)
    return (
        f'<section class="section" data-decl="{escape_html(section.decl.value)}" '
        f'data-grid="{escape_html(section.grid.value)}">\n'
        '    <div class="slot-group">\n'
        f"      {slots_html}\n"
        "    </div>\n"
        "  </section>"
    )


def render_page_layout(layout: PageLayout | Mapping[str, Any]) -> RenderedLayout:
    """Validate and render a page layout.

    Args:
        layout: A PageLayout, or its raw mapping form.

    Returns:
        RenderedLayout with the HTML fragment and summary attributes.

    Raises:
        LayoutValidationError: Listing every grammar violation.
    """
    if isinstance(layout, Mapping):
        layout = layout_from_dict(layout)

    validation = validate_page_layout(layout)
    if not validation.valid:
        raise LayoutValidationError(validation.errors)

    sections_html = "\n\n  ".join(render_section(section) for section in layout.sections)
    html = f'<main id="main" class="surface">\n  {sections_html}\n</main>'
    return RenderedLayout(
        html=Markup(html),
        data_attributes={"sectionCount": str(len(layout.sections))},
    )
