"""Site building functionality for sitecraft.

This module connects the pure core to the filesystem. It loads project
configuration and the content file, validates and migrates the content,
splices rendered layouts into page bodies, renders every page and writes
the artifacts to the output directory.

Key functions:
- build_site: Main function to build the entire site.
- load_config: Loads project configuration from sitecraft.yaml.
- load_content: Loads and validates a content file (YAML or JSON).
- load_layout: Loads a page layout file.
- write_content: Writes an aggregate back to a content file.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import mistune
import yaml

from .css import generate_css
from .errors import SitecraftError
from .grammar import PageLayout, layout_from_dict
from .layout import render_page_layout
from .migrations import CURRENT_VERSION, MigrationEngine, default_migration_registry
from .models import ContentState, RenderedArtifact, SemanticVersion, SiteContent
from .renderer import ContentRenderer
from .schema import validate_site_content
from .templates import DocumentTemplates

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "sitecraft.yaml"
STYLESHEET_NAME = "styles.css"
YAML_SUFFIXES = (".yaml", ".yml")


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


DEFAULT_CONFIG = {
    "content": "content.yaml",
    "output_dir": "output",
    "target_version": str(CURRENT_VERSION),
    "body_format": "html",
    "layouts": {},
    "templates_dir": "templates",
    "stylesheet": True,
    "port": 4000,
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        content: The aggregate as rendered (migrated, layouts spliced in).
        artifacts: Rendered artifacts, in page order.
        output_dir: Directory where the site was built.
    """

    content: SiteContent
    artifacts: list[RenderedArtifact]
    output_dir: Path


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from sitecraft.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


def read_document(path: Path) -> Any:
    """Read a YAML or JSON document, chosen by file suffix.

    Raises:
        BuildError: If the file is missing or cannot be parsed.
    """
    if not path.exists():
        raise BuildError(path, "File not found")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildError(path, f"Could not read file: {exc}", exc) from exc
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise BuildError(path, f"Could not parse file: {exc}", exc) from exc


def load_content(path: Path) -> SiteContent:
    """Load a content file and validate it.

    Args:
        path: Path to a ``.yaml``, ``.yml`` or ``.json`` content file.

    Returns:
        The validated aggregate.

    Raises:
        BuildError: If the file cannot be read or fails validation.
    """
    data = read_document(path)
    try:
        return validate_site_content(data)
    except SitecraftError as exc:
        raise BuildError(path, str(exc), exc) from exc


def write_content(path: Path, content: SiteContent) -> None:
    """Serialise an aggregate to ``path`` as YAML or JSON, by suffix."""
    data = content.to_dict()
    if path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def load_layout(path: Path) -> PageLayout:
    """Load a page layout file.

    Raises:
        BuildError: If the file cannot be read or is malformed.
    """
    data = read_document(path)
    try:
        return layout_from_dict(data)
    except SitecraftError as exc:
        raise BuildError(path, str(exc), exc) from exc


def markdown_to_html(text: str) -> str:
    """Convert a Markdown page body to HTML."""
    markdown = mistune.create_markdown(
        escape=False, hard_wrap=True, plugins=["strikethrough", "table", "url"]
    )
    return markdown(text)


def prepare_content(
    content: SiteContent,
    config: dict[str, Any],
    project_root: Path,
    engine: MigrationEngine | None = None,
) -> SiteContent:
    """Bring content to the configured version and resolve page bodies.

    Steps, in order: migrate to ``target_version``, convert Markdown bodies
    when ``body_format`` is ``markdown``, then replace the body of every
    page listed under ``layouts`` with its rendered layout.

    Raises:
        BuildError: If migration fails or a layout is invalid.
    """
    engine = engine or MigrationEngine(default_migration_registry)
    content_path = project_root / config["content"]
    try:
        target = SemanticVersion.parse(config["target_version"])
        content = engine.migrate(content, target)
    except (ValueError, SitecraftError) as exc:
        raise BuildError(content_path, str(exc), exc) from exc

    pages = content.pages
    if str(config.get("body_format", "html")).lower() == "markdown":
        pages = tuple(replace(page, body=markdown_to_html(page.body)) for page in pages)

    layouts = config.get("layouts") or {}
    if layouts:
        known = {page.slug for page in pages}
        for slug in layouts:
            if slug not in known:
                logger.warning("Layout configured for unknown page slug %r", slug)
        resolved = []
        for page in pages:
            layout_file = layouts.get(page.slug)
            if layout_file:
                layout_path = project_root / layout_file
                layout = load_layout(layout_path)
                try:
                    rendered = render_page_layout(layout)
                except SitecraftError as exc:
                    raise BuildError(layout_path, str(exc), exc) from exc
                page = replace(page, body=str(rendered.html))
            resolved.append(page)
        pages = tuple(resolved)

    return replace(content, pages=pages)


def build_site(
    project_root: Path,
    clean_output: bool = True,
    output_dir_override: Path | None = None,
    engine: MigrationEngine | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional path to write the build output instead of config output_dir.
        engine: Optional migration engine; defaults to the default registry.

    Returns:
        BuildResult containing the rendered content, artifacts and output directory.
    """
    config = load_config(project_root)
    output_dir = output_dir_override or (project_root / config.get("output_dir", "output"))

    content_path = project_root / config["content"]
    content = load_content(content_path)
    if content.state is not ContentState.PUBLISHED:
        logger.warning(
            "Building %s content from %s; it is not published", content.state.value, content_path
        )
    content = prepare_content(content, config, project_root, engine)

    template_dir = project_root / str(config.get("templates_dir") or "templates")
    templates = DocumentTemplates(template_dir if template_dir.is_dir() else None)
    stylesheet = STYLESHEET_NAME if config.get("stylesheet") else None
    artifacts = ContentRenderer(templates, stylesheet=stylesheet).render(content)

    targets = [_artifact_target(output_dir, artifact) for artifact in artifacts]
    if clean_output:
        _ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
    for target, artifact in zip(targets, artifacts):
        _write_artifact(target, artifact)
    if stylesheet:
        (output_dir / stylesheet).write_text(generate_css(), encoding="utf-8")
    logger.info("Wrote %d artifacts to %s", len(artifacts), output_dir)
    return BuildResult(content=content, artifacts=artifacts, output_dir=output_dir)


def _ensure_clean_dir(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def _artifact_target(output_dir: Path, artifact: RenderedArtifact) -> Path:
    """Return where ``artifact`` is written below ``output_dir``.

    Raises:
        BuildError: If the artifact path resolves outside ``output_dir``.
    """
    target = output_dir / artifact.path
    if not target.resolve().is_relative_to(output_dir.resolve()):
        raise BuildError(target, "Artifact path escapes output directory")
    return target


def _write_artifact(target: Path, artifact: RenderedArtifact) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(artifact.content)
