"""Starter content helpers.

Convenience constructors for new sites. They produce content that passes
validation as-is; nothing requires using them.
"""

from __future__ import annotations

from .migrations import CURRENT_VERSION
from .models import ContentState, Locale, Page, SeoMetadata, SiteContent


def create_home_page() -> Page:
    return Page(slug="home", title="Home", body="")


def create_contact_page() -> Page:
    return Page(slug="contact", title="Contact", body="")


def create_empty_site_content(
    content_id: str, locale: Locale | str, created_at: str
) -> SiteContent:
    """Create a minimal draft site with a single home page.

    Args:
        content_id: Aggregate identifier.
        locale: Content locale.
        created_at: ISO-8601 creation timestamp, also used as updated_at.

    Returns:
        A draft SiteContent at version 1.0.0 with placeholder SEO fields.
    """
    return SiteContent(
        id=content_id,
        created_at=created_at,
        updated_at=created_at,
        version=CURRENT_VERSION,
        locale=Locale(locale),
        pages=(create_home_page(),),
        seo=SeoMetadata(title="Untitled", description="No description"),
        state=ContentState.DRAFT,
    )
