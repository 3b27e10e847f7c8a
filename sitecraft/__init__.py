"""sitecraft static site toolchain.

This package validates typed site content, moves it through a publication
workflow, migrates it across schema versions and renders it into static
HTML. Page bodies can be composed from a fixed layout grammar.

The core (schema, publishing, migrations, renderer, grammar, layout) is
pure: it performs no I/O and never logs. The build, server and cli
modules connect it to the filesystem and the terminal.
"""

from .diff import ContentDiff, diff_site_content
from .errors import (
    ContentValidationError,
    InvalidTransitionError,
    LayoutValidationError,
    MigrationPathNotFoundError,
    SitecraftError,
)
from .grammar import PageLayout, Section, Slot, validate_page_layout, validate_section
from .layout import RenderedLayout, render_page_layout
from .migrations import (
    Migration,
    MigrationEngine,
    MigrationRegistry,
    migrate_content,
    register_migration,
)
from .models import (
    ContentState,
    Locale,
    Page,
    RenderedArtifact,
    SemanticVersion,
    SeoMetadata,
    SiteContent,
)
from .publishing import can_transition, get_allowed_transitions, transition_state
from .renderer import render_site_content
from .schema import is_valid_site_content, validate_site_content
from .starters import create_contact_page, create_empty_site_content, create_home_page
from .tokens import ColorToken, DeclarationType, GridPattern, SlotType

__all__ = [
    "__version__",
    "ColorToken",
    "ContentDiff",
    "ContentState",
    "ContentValidationError",
    "DeclarationType",
    "GridPattern",
    "InvalidTransitionError",
    "LayoutValidationError",
    "Locale",
    "Migration",
    "MigrationEngine",
    "MigrationPathNotFoundError",
    "MigrationRegistry",
    "Page",
    "PageLayout",
    "RenderedArtifact",
    "RenderedLayout",
    "Section",
    "SemanticVersion",
    "SeoMetadata",
    "SiteContent",
    "SitecraftError",
    "Slot",
    "SlotType",
    "can_transition",
    "create_contact_page",
    "create_empty_site_content",
    "create_home_page",
    "diff_site_content",
    "get_allowed_transitions",
    "is_valid_site_content",
    "migrate_content",
    "register_migration",
    "render_page_layout",
    "render_site_content",
    "transition_state",
    "validate_page_layout",
    "validate_section",
    "validate_site_content",
]
__version__ = "0.1.0"
