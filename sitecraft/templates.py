"""Document template engine for sitecraft.

This module uses Jinja2 to render the HTML document shell around each
page. The bundled ``document.html.jinja`` can be overridden by placing a
template with the same name in a project templates directory.

All text goes through the ``entities`` filter, which applies
``escape_html`` and marks the result safe, so output is identical to
escaping by hand and stable across calls.

Key class:
- DocumentTemplates: Loads and renders document templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .html_utils import escape_html

__all__ = ["DOCUMENT_TEMPLATE", "DocumentTemplates", "entities"]

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "_templates"
DOCUMENT_TEMPLATE = "document.html.jinja"


def entities(value: Any) -> Markup:
    """Jinja filter: escape ``value`` with escape_html and mark it safe."""
    return Markup(escape_html(str(value)))


class DocumentTemplates:
    """Template engine for page documents.

    Attributes:
        search_paths: Directories searched for templates, first match wins.
        env: Jinja2 environment.
    """

    def __init__(self, template_dir: Path | None = None):
        """Initialize the template engine.

        Args:
            template_dir: Optional project directory whose templates take
                precedence over the bundled ones.
        """
        self.search_paths: list[Path] = []
        if template_dir is not None:
            self.search_paths.append(template_dir)
        self.search_paths.append(BUNDLED_TEMPLATES_DIR)
        self.env = Environment(
            loader=FileSystemLoader([str(path) for path in self.search_paths]),
            autoescape=select_autoescape(["html", "jinja"]),
            enable_async=False,
        )
        self.env.filters["entities"] = entities

    def render_document(
        self,
        *,
        locale: str,
        title: str,
        description: str,
        noindex: bool,
        body: str,
        stylesheet: str | None = None,
    ) -> str:
        """Render a complete HTML document.

        Args:
            locale: Value for the ``lang`` attribute.
            title: Page title, escaped in ``<title>`` and ``<h1>``.
            description: Meta description, escaped.
            noindex: Whether to emit the robots noindex meta tag.
            body: Trusted page markup, inserted verbatim.
            stylesheet: Optional stylesheet href.

        Returns:
            Rendered HTML document.
        """
        template = self.env.get_template(DOCUMENT_TEMPLATE)
        return template.render(
            locale=locale,
            title=title,
            description=description,
            noindex=noindex,
            body=body,
            stylesheet=stylesheet,
        )
