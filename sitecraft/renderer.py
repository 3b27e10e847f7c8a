"""Content renderer for sitecraft.

Transforms a validated SiteContent into static HTML artifacts, one per
page, in page order. Rendering is a pure function of its input: no I/O
beyond loading templates, no mutation, and identical input always yields
byte-identical output.

The renderer does not validate. Callers validate (and migrate) first.

Key functions:
- render_site_content: Render every page of an aggregate.
- page_path: Derive the output path for a slug.

Key classes:
- ContentRenderer: Renderer bound to a DocumentTemplates instance.
"""

from __future__ import annotations

from .models import Page, RenderedArtifact, SiteContent
from .templates import DocumentTemplates

HOME_SLUG = "home"


def page_path(slug: str) -> str:
    """Derive the output path for a page slug.

    Args:
        slug: Page slug.

    Returns:
        ``index.html`` for the home slug, ``{slug}.html`` otherwise.

    Examples:
        >>> page_path("home")
        'index.html'

        >>> page_path("about")
        'about.html'
    """
    return "index.html" if slug == HOME_SLUG else f"{slug}.html"


class ContentRenderer:
    """Renders SiteContent aggregates into artifacts.

    Attributes:
        templates: Document template engine.
        stylesheet: Optional stylesheet href linked from every document.
    """

    def __init__(
        self,
        templates: DocumentTemplates | None = None,
        stylesheet: str | None = None,
    ):
        self.templates = templates or DocumentTemplates()
        self.stylesheet = stylesheet

    def render(self, content: SiteContent) -> list[RenderedArtifact]:
        """Render every page of ``content``.

        Args:
            content: Validated, current-version aggregate.

        Returns:
            One artifact per page, in page order.
        """
        return [self.render_page(content, page) for page in content.pages]

    def render_page(self, content: SiteContent, page: Page) -> RenderedArtifact:
        html = self.templates.render_document(
            locale=content.locale.value,
            title=page.title,
            description=content.seo.description,
            noindex=content.seo.noindex is True,
            body=page.body,
            stylesheet=self.stylesheet,
        )
        return RenderedArtifact(path=page_path(page.slug), content=html)


def render_site_content(
    content: SiteContent, stylesheet: str | None = None
) -> list[RenderedArtifact]:
    """Render a validated aggregate with the bundled document template."""
    return ContentRenderer(stylesheet=stylesheet).render(content)
