"""Command-line interface for sitecraft.

This module defines the CLI commands using Click framework.

Commands:
- new: Scaffold a new project with starter content.
- validate: Validate a content file and report authoring issues.
- transition: Move content to another publication state.
- migrate: Migrate content to another schema version.
- diff: Show changed top-level fields between two content files.
- layout: Validate and render a page layout file.
- css: Print the generated stylesheet.
- build: Build the site into the output directory.
- serve: Run the preview server with live reload.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .build import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    BuildError,
    load_config,
    load_content,
    load_layout,
    write_content,
)
from .css import generate_css
from .diff import diff_site_content
from .errors import SitecraftError
from .layout import render_page_layout
from .lint import has_errors, lint_site_content
from .migrations import migrate_content
from .models import ContentState, Locale, SemanticVersion
from .publishing import advance, get_allowed_transitions
from .starters import create_empty_site_content


def _content_path(file: str | None) -> Path:
    if file:
        return Path(file)
    project_root = Path.cwd()
    return project_root / load_config(project_root)["content"]


def _fail(title: str, path: Path | None, message: str) -> None:
    click.echo(click.style(title, fg="red", bold=True), err=True)
    if path is not None:
        click.echo(click.style(f"  File: {path}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="sitecraft")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """sitecraft static site toolchain."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("directory")
@click.option(
    "--locale",
    type=click.Choice([locale.value for locale in Locale]),
    help="Content locale (prompted when omitted)",
)
@click.option("--id", "content_id", help="Content id (random UUID when omitted)")
def new(directory: str, locale: str | None, content_id: str | None):
    """Scaffold a new project."""
    target = Path(directory).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    if locale is None:
        locale = questionary.select(
            "Content locale:",
            choices=[locale.value for locale in Locale],
            style=_questionary_style(),
        ).ask()
        if locale is None:
            raise click.Abort()

    created_at = datetime.now(timezone.utc).isoformat()
    content = create_empty_site_content(content_id or str(uuid.uuid4()), locale, created_at)
    target.mkdir(parents=True, exist_ok=True)
    config = {
        "content": DEFAULT_CONFIG["content"],
        "output_dir": DEFAULT_CONFIG["output_dir"],
        "target_version": DEFAULT_CONFIG["target_version"],
        "body_format": DEFAULT_CONFIG["body_format"],
    }
    (target / CONFIG_FILENAME).write_text(
        yaml.safe_dump(config, sort_keys=False), encoding="utf-8"
    )
    write_content(target / DEFAULT_CONFIG["content"], content)
    click.echo(f"New site created at {target}")


@cli.command()
@click.argument("file", required=False)
def validate(file: str | None):
    """Validate a content file and report authoring issues."""
    path = _content_path(file)
    try:
        content = load_content(path)
    except BuildError as exc:
        _fail("Invalid content:", exc.source_path, exc.message)
    issues = lint_site_content(content)
    for issue in issues:
        color = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(f"{issue.severity}: {issue.field}: {issue.message}", fg=color))
    if has_errors(issues):
        raise SystemExit(1)
    click.echo(f"{path} is valid ({len(content.pages)} pages, state {content.state.value})")


@cli.command()
@click.argument("state", type=click.Choice([state.value for state in ContentState]))
@click.argument("file", required=False)
def transition(state: str, file: str | None):
    """Move content to another publication state."""
    path = _content_path(file)
    try:
        content = load_content(path)
        updated = advance(content, state)
    except BuildError as exc:
        _fail("Invalid content:", exc.source_path, exc.message)
    except SitecraftError as exc:
        allowed = ", ".join(s.value for s in get_allowed_transitions(content.state)) or "none"
        _fail("Transition failed:", path, f"{exc} (allowed: {allowed})")
    write_content(path, updated)
    click.echo(f"{content.state.value} -> {updated.state.value}")


@cli.command()
@click.argument("version")
@click.argument("file", required=False)
def migrate(version: str, file: str | None):
    """Migrate content to another schema version."""
    path = _content_path(file)
    try:
        target = SemanticVersion.parse(version)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="VERSION") from exc
    try:
        content = load_content(path)
        migrated = migrate_content(content, target)
    except BuildError as exc:
        _fail("Invalid content:", exc.source_path, exc.message)
    except SitecraftError as exc:
        _fail("Migration failed:", path, str(exc))
    if migrated is content:
        click.echo(f"Already at version {target}")
        return
    write_content(path, migrated)
    click.echo(f"Migrated {content.version} -> {migrated.version}")


@cli.command()
@click.argument("before", type=click.Path(exists=True, dir_okay=False))
@click.argument("after", type=click.Path(exists=True, dir_okay=False))
def diff(before: str, after: str):
    """Show changed top-level fields between two content files."""
    try:
        old = load_content(Path(before))
        new_content = load_content(Path(after))
    except BuildError as exc:
        _fail("Invalid content:", exc.source_path, exc.message)
    changes = diff_site_content(old, new_content)
    if not changes:
        click.echo("No differences")
        return
    for change in changes:
        click.echo(click.style(change.field, bold=True))
        click.echo(click.style(f"  - {json.dumps(change.before, ensure_ascii=False)}", fg="red"))
        click.echo(click.style(f"  + {json.dumps(change.after, ensure_ascii=False)}", fg="green"))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def layout(file: str):
    """Validate and render a page layout file."""
    path = Path(file)
    try:
        rendered = render_page_layout(load_layout(path))
    except BuildError as exc:
        _fail("Invalid layout:", exc.source_path, exc.message)
    except SitecraftError as exc:
        _fail("Invalid layout:", path, str(exc))
    click.echo(rendered.html)


@cli.command()
def css():
    """Print the generated stylesheet."""
    click.echo(generate_css(), nl=False)


@cli.command()
def build():
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import build_site

    try:
        result = build_site(project_root)
    except BuildError as exc:
        try:
            rel_path = exc.source_path.relative_to(project_root)
        except ValueError:
            rel_path = exc.source_path
        _fail("Build failed:", rel_path, exc.message)
    click.echo(f"Built {len(result.artifacts)} pages into {result.output_dir}")


@cli.command()
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to run the preview server (overrides sitecraft.yaml)",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (overrides sitecraft.yaml ws_port)",
)
def serve(port: int | None, ws_port: int | None):
    """Run the preview server with live reload."""
    project_root = Path.cwd()
    from .server import PreviewServer

    server = PreviewServer(project_root, http_port=port, ws_port=ws_port)
    server.start()


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
