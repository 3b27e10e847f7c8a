"""Domain model for sitecraft.

This module defines the vocabulary shared by every other module: the
site content aggregate, its pages and SEO metadata, semantic versions,
and the rendered artifact produced by the renderer.

All types are immutable. Updating an aggregate means building a new one
with ``dataclasses.replace``.

Key classes:
- SemanticVersion: Ordered major/minor/patch triple.
- ContentState: Publication lifecycle states.
- Locale: Supported content locales.
- Page: A single page of the site.
- SeoMetadata: Site-wide SEO fields.
- SiteContent: The root aggregate.
- RenderedArtifact: One rendered output file.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A semantic version, ordered lexicographically on (major, minor, patch).

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
    """

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a dotted version string such as ``"1.2.0"``.

        Args:
            text: Version string with exactly three numeric components.

        Returns:
            The parsed SemanticVersion.

        Raises:
            ValueError: If the string is not a well-formed version.
        """
        parts = str(text).strip().split(".")
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid semantic version: {text!r}")
        major, minor, patch = (int(p) for p in parts)
        return cls(major, minor, patch)

    def to_dict(self) -> dict[str, int]:
        return {"major": self.major, "minor": self.minor, "patch": self.patch}


class ContentState(str, Enum):
    """Publication lifecycle state of a SiteContent aggregate."""

    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Locale(str, Enum):
    """Supported content locales."""

    PT_BR = "pt-BR"
    EN = "en"


@dataclass(frozen=True)
class Page:
    """A single page of the site.

    Attributes:
        slug: URL-friendly identifier, used to derive the output path.
        title: Human-readable page title.
        body: Page markup. Treated as opaque, trusted HTML.
    """

    slug: str
    title: str
    body: str

    def to_dict(self) -> dict[str, str]:
        return {"slug": self.slug, "title": self.title, "body": self.body}


@dataclass(frozen=True)
class SeoMetadata:
    """Site-wide SEO metadata.

    Attributes:
        title: SEO title.
        description: Meta description applied to every page.
        noindex: When True, pages ask crawlers not to index them.
    """

    title: str
    description: str
    noindex: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "description": self.description}
        if self.noindex is not None:
            data["noindex"] = self.noindex
        return data


@dataclass(frozen=True)
class SiteContent:
    """The root aggregate: everything needed to render a site.

    Timestamps are ISO-8601 strings, kept as received from the source.

    Attributes:
        id: Aggregate identifier.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
        version: Schema version the content is recorded at.
        locale: Content locale, used as the document language.
        pages: Ordered, non-empty tuple of pages.
        seo: Site-wide SEO metadata.
        state: Publication state.
    """

    id: str
    created_at: str
    updated_at: str
    version: SemanticVersion
    locale: Locale
    pages: tuple[Page, ...]
    seo: SeoMetadata
    state: ContentState

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the aggregate (camelCase keys, plain values)."""
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version.to_dict(),
            "locale": self.locale.value,
            "pages": [page.to_dict() for page in self.pages],
            "seo": self.seo.to_dict(),
            "state": self.state.value,
        }


@dataclass(frozen=True)
class RenderedArtifact:
    """A single rendered output file.

    Attributes:
        path: Output path relative to the site root (e.g. ``index.html``).
        content: Complete HTML document text.
    """

    path: str
    content: str
