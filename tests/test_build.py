import json
from dataclasses import replace
from pathlib import Path

import pytest
import yaml

from sitecraft.build import (
    BuildError,
    BuildResult,
    build_site,
    load_config,
    load_content,
    load_layout,
    markdown_to_html,
    write_content,
)
from sitecraft.lint import ERROR, WARNING, has_errors, lint_site_content
from sitecraft.migrations import Migration, MigrationEngine, MigrationRegistry
from sitecraft.models import ContentState, Page, SemanticVersion, SeoMetadata
from sitecraft.starters import create_empty_site_content

LAYOUT = {
    "sections": [
        {"decl": "a", "grid": "a", "slots": [{"type": "primary", "content": "Welcome"}]},
        {"decl": "c", "grid": "b", "slots": [{"type": "list", "content": "fast, small"}]},
    ]
}


def create_project(tmp_path: Path, config: str = "", pages=None, state="published") -> Path:
    project = tmp_path
    content = create_empty_site_content("site-1", "en", "2024-01-01T00:00:00Z")
    content = replace(
        content,
        state=ContentState(state),
        pages=tuple(pages or (Page("home", "Home", "<p>Hello</p>"), Page("about", "About", "Us"))),
        seo=SeoMetadata(title="Test site", description="A test site"),
    )
    write_content(project / "content.yaml", content)
    (project / "sitecraft.yaml").write_text(config, encoding="utf-8")
    return project


def test_load_config_defaults(tmp_path):
    config = load_config(tmp_path)
    assert config["content"] == "content.yaml"
    assert config["output_dir"] == "output"
    assert config["target_version"] == "1.0.0"
    assert config["stylesheet"] is True


def test_load_config_merges_yaml(tmp_path):
    (tmp_path / "sitecraft.yaml").write_text("output_dir: public\nport: 5000\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config["output_dir"] == "public"
    assert config["port"] == 5000
    assert config["content"] == "content.yaml"


def test_load_config_ignores_non_mapping(tmp_path):
    (tmp_path / "sitecraft.yaml").write_text("- a\n- b\n", encoding="utf-8")
    assert load_config(tmp_path)["output_dir"] == "output"


def test_write_and_load_content_yaml_and_json(tmp_path):
    content = create_empty_site_content("id", "pt-BR", "2024-01-01T00:00:00Z")
    for name in ("content.yaml", "content.json"):
        path = tmp_path / name
        write_content(path, content)
        assert load_content(path) == content
    assert json.loads((tmp_path / "content.json").read_text())["createdAt"] == "2024-01-01T00:00:00Z"


def test_load_content_wraps_validation_errors(tmp_path):
    path = tmp_path / "content.json"
    path.write_text(json.dumps({"id": ""}), encoding="utf-8")
    with pytest.raises(BuildError) as excinfo:
        load_content(path)
    assert excinfo.value.source_path == path
    assert "id must be a non-empty string" in excinfo.value.message


def test_load_content_reports_parse_errors(tmp_path):
    path = tmp_path / "content.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(BuildError, match="Could not parse"):
        load_content(path)


def test_load_content_missing_file(tmp_path):
    with pytest.raises(BuildError, match="File not found"):
        load_content(tmp_path / "nope.yaml")


def test_load_content_wraps_decode_errors(tmp_path):
    path = tmp_path / "content.yaml"
    path.write_bytes(b"id: \xff\xfe\n")
    with pytest.raises(BuildError, match="Could not read file") as excinfo:
        load_content(path)
    assert isinstance(excinfo.value.original_error, UnicodeDecodeError)


def test_load_content_wraps_directory_paths(tmp_path):
    path = tmp_path / "content.yaml"
    path.mkdir()
    with pytest.raises(BuildError, match="Could not read file"):
        load_content(path)


def test_build_site_reports_undecodable_content(tmp_path):
    project = create_project(tmp_path)
    (project / "content.yaml").write_bytes(b"id: \xff\xfe\n")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path == project / "content.yaml"


def test_load_layout(tmp_path):
    path = tmp_path / "home.yaml"
    path.write_text(yaml.safe_dump(LAYOUT), encoding="utf-8")
    layout = load_layout(path)
    assert len(layout.sections) == 2


def test_markdown_to_html():
    html = markdown_to_html("# Title\n\nSome *text*")
    assert "<h1>Title</h1>" in html
    assert "<em>text</em>" in html


def test_build_site_writes_artifacts(tmp_path):
    project = create_project(tmp_path)
    result = build_site(project)
    assert isinstance(result, BuildResult)
    assert result.output_dir == project / "output"
    index = (project / "output" / "index.html").read_text(encoding="utf-8")
    assert "<p>Hello</p>" in index
    assert '<link rel="stylesheet" href="styles.css" />' in index
    assert (project / "output" / "about.html").exists()
    assert ":root {" in (project / "output" / "styles.css").read_text(encoding="utf-8")
    assert [a.path for a in result.artifacts] == ["index.html", "about.html"]


def test_build_site_cleans_output(tmp_path):
    project = create_project(tmp_path)
    stale = project / "output" / "stale.html"
    stale.parent.mkdir()
    stale.write_text("old", encoding="utf-8")
    build_site(project)
    assert not stale.exists()


def test_build_site_without_stylesheet(tmp_path):
    project = create_project(tmp_path, "stylesheet: false\n")
    build_site(project)
    assert not (project / "output" / "styles.css").exists()
    assert "stylesheet" not in (project / "output" / "index.html").read_text(encoding="utf-8")


def test_build_site_markdown_bodies(tmp_path):
    project = create_project(
        tmp_path, "body_format: markdown\n", pages=[Page("home", "Home", "Hello **world**")]
    )
    result = build_site(project)
    assert "<strong>world</strong>" in result.artifacts[0].content


def test_build_site_splices_layouts(tmp_path):
    project = create_project(tmp_path, "layouts:\n  home: layouts/home.yaml\n")
    (project / "layouts").mkdir()
    (project / "layouts" / "home.yaml").write_text(yaml.safe_dump(LAYOUT), encoding="utf-8")
    result = build_site(project)
    home = result.artifacts[0].content
    assert 'data-decl="a"' in home
    assert "<li>small</li>" in home
    assert "<p>Hello</p>" not in home
    assert result.artifacts[1].content.count("<section") == 0


def test_build_site_rejects_invalid_layout(tmp_path):
    project = create_project(tmp_path, "layouts:\n  home: home.json\n")
    bad = {"sections": [{"decl": "a", "grid": "b", "slots": []}]}
    (project / "home.json").write_text(json.dumps(bad), encoding="utf-8")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path == project / "home.json"
    assert 'does not allow grid "b"' in excinfo.value.message


def test_build_site_migrates_to_target_version(tmp_path):
    project = create_project(tmp_path, "target_version: 1.1.0\n")
    target = SemanticVersion(1, 1, 0)
    registry = MigrationRegistry(
        [Migration(SemanticVersion(1, 0, 0), target, lambda c: replace(c, version=target))]
    )
    result = build_site(project, engine=MigrationEngine(registry))
    assert result.content.version == target


def test_build_site_without_migration_path_fails(tmp_path):
    project = create_project(tmp_path, "target_version: 9.0.0\n")
    with pytest.raises(BuildError, match="No migration path"):
        build_site(project, engine=MigrationEngine(MigrationRegistry()))


def test_build_site_warns_for_unpublished_content(tmp_path, caplog):
    project = create_project(tmp_path, state="draft")
    with caplog.at_level("WARNING", logger="sitecraft.build"):
        build_site(project)
    assert "not published" in caplog.text


def test_build_site_refuses_paths_outside_output(tmp_path):
    project = create_project(
        tmp_path, pages=[Page("home", "Home", ""), Page("../escaped", "Escaped", "")]
    )
    kept = project / "output" / "kept.html"
    kept.parent.mkdir()
    kept.write_text("old", encoding="utf-8")
    with pytest.raises(BuildError, match="escapes output directory") as excinfo:
        build_site(project)
    assert excinfo.value.source_path == project / "output" / "../escaped.html"
    assert not (project / "escaped.html").exists()
    # nothing was cleaned or written
    assert kept.exists()
    assert not (project / "output" / "index.html").exists()


def test_build_site_allows_nested_artifact_paths(tmp_path):
    project = create_project(tmp_path, pages=[Page("docs/intro", "Intro", "")])
    build_site(project)
    assert (project / "output" / "docs" / "intro.html").exists()


def test_build_site_output_override(tmp_path):
    project = create_project(tmp_path)
    out = tmp_path / "elsewhere"
    result = build_site(project, output_dir_override=out)
    assert result.output_dir == out
    assert (out / "index.html").exists()


# --- Lint ---


def test_lint_reports_slug_and_duplicate_errors():
    content = create_empty_site_content("id", "en", "2024-01-01T00:00:00Z")
    content = replace(
        content,
        pages=(Page("home", "Home", ""), Page("Bad Slug", "X", ""), Page("home", "Again", "")),
    )
    issues = lint_site_content(content)
    errors = [i for i in issues if i.severity == ERROR]
    assert [i.field for i in errors] == ["pages[1].slug", "pages"]
    assert "home" in errors[1].message
    assert has_errors(issues)


def test_lint_seo_length_warnings():
    content = create_empty_site_content("id", "en", "2024-01-01T00:00:00Z")
    issues = lint_site_content(content)
    assert {i.field for i in issues} == {"seo.title", "seo.description"}
    assert all(i.severity == WARNING for i in issues)
    assert not has_errors(issues)

    good = replace(content, seo=SeoMetadata(title="t" * 40, description="d" * 140))
    assert lint_site_content(good) == []


def test_lint_rejects_trailing_newline_in_slug():
    content = create_empty_site_content("id", "en", "2024-01-01T00:00:00Z")
    content = replace(content, pages=(Page("home\n", "Home", ""),))
    issues = lint_site_content(content)
    assert [i.field for i in issues if i.severity == ERROR] == ["pages[0].slug"]
