"""Test configuration and fixtures."""

import json
from pathlib import Path

import pytest

from codekit.catalog import DirectoryBackend, TemplateCatalog
from codekit.core.agents import AgentResolver
from codekit.core.commands import CommandResolver
from codekit.core.registry import clear_registry, get_registry_snapshot, restore_registry_snapshot
from codekit.core.skills import SkillResolver
from codekit.core.specs import CLAUDE_SPEC
from codekit.core.store import ResourceStore
from codekit.frontmatter import serialize_markdown_with_frontmatter
from codekit.logger import set_verbose
from codekit.settings import CatalogMode, Settings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "git: tests that run the real git binary")


def render_markdown(frontmatter: dict, body: str = "Body text.") -> str:
    return serialize_markdown_with_frontmatter(frontmatter, body) + "\n"


@pytest.fixture
def write_markdown():
    """Write a markdown file with a YAML header, creating parent directories."""

    def _write(path: Path, frontmatter: dict, body: str = "Body text.") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_markdown(frontmatter, body))
        return path

    return _write


@pytest.fixture
def write_index():
    """Write an index.json for one kind of a catalog directory."""

    def _write(kind_dir: Path, resources: list[dict], version: str = "1.0.0") -> Path:
        kind_dir.mkdir(parents=True, exist_ok=True)
        path = kind_dir / "index.json"
        path.write_text(json.dumps({"version": version, "resources": resources}, indent=2))
        return path

    return _write


@pytest.fixture
def catalog_dir(tmp_path: Path, write_markdown, write_index) -> Path:
    """A small catalog with every kind, dependencies and one broken template per kind."""
    root = tmp_path / "templates"

    agents = root / "agents"
    write_index(
        agents,
        [
            {
                "name": "typescript-expert",
                "path": "typescript-expert.md",
                "category": "typescript",
                "description": "TypeScript help",
                "dependencies": ["nodejs-expert"],
            },
            {"name": "nodejs-expert", "path": "nodejs-expert.md", "category": "nodejs"},
            {
                "name": "react-expert",
                "path": "react-expert.md",
                "dependencies": ["typescript-expert", "missing-expert"],
            },
            {"name": "broken-agent", "path": "broken-agent.md"},
        ],
    )
    write_markdown(
        agents / "typescript-expert.md",
        {"name": "typescript-expert", "description": "TypeScript help", "category": "typescript"},
        "When in doubt, delegate to nodejs-expert.",
    )
    write_markdown(
        agents / "nodejs-expert.md",
        {"name": "nodejs-expert", "description": "Node.js help", "category": "nodejs"},
    )
    write_markdown(
        agents / "react-expert.md",
        {"name": "react-expert", "description": "React help"},
    )
    write_markdown(agents / "broken-agent.md", {"description": "Has no name"})

    commands = root / "commands"
    write_index(
        commands,
        [
            {"name": "git/commit", "path": "git/commit.md", "category": "git"},
            {"name": "review", "path": "review.md"},
        ],
    )
    write_markdown(
        commands / "git" / "commit.md",
        {"description": "Write a commit", "argument-hint": "[message]"},
    )
    write_markdown(commands / "review.md", {"description": "Review the diff"})

    skills = root / "skills"
    write_index(
        skills,
        [
            {"name": "code-review", "path": "code-review", "category": "quality"},
            {"name": "claude-helper", "path": "claude-helper"},
        ],
    )
    write_markdown(
        skills / "code-review" / "SKILL.md",
        {"name": "code-review", "description": "Review code with a checklist"},
    )
    (skills / "code-review" / "references").mkdir(parents=True)
    (skills / "code-review" / "references" / "checklist.md").write_text("- tests\n")
    (skills / "code-review" / "scripts").mkdir()
    (skills / "code-review" / "scripts" / "run.sh").write_text("#!/bin/sh\necho review\n")
    write_markdown(
        skills / "claude-helper" / "SKILL.md",
        {"name": "claude-helper", "description": "Uses a reserved word"},
    )

    return root


@pytest.fixture
def settings(tmp_path: Path, catalog_dir: Path) -> Settings:
    """Settings with project, home and sources under tmp_path."""
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()
    return Settings(
        project_root=project,
        home=home,
        templates_dir=catalog_dir,
        sources_dir=tmp_path / "sources",
        catalog_mode=CatalogMode.DIRECTORY,
    )


@pytest.fixture
def catalog(settings: Settings) -> TemplateCatalog:
    return TemplateCatalog(DirectoryBackend(settings.templates_dir))


@pytest.fixture
def store(settings: Settings) -> ResourceStore:
    return ResourceStore(CLAUDE_SPEC, settings.project_root, settings.home)


@pytest.fixture
def agents(catalog: TemplateCatalog, store: ResourceStore) -> AgentResolver:
    return AgentResolver(catalog, store)


@pytest.fixture
def commands(catalog: TemplateCatalog, store: ResourceStore) -> CommandResolver:
    return CommandResolver(catalog, store)


@pytest.fixture
def skills(catalog: TemplateCatalog, store: ResourceStore) -> SkillResolver:
    return SkillResolver(catalog, store)


@pytest.fixture
def cli_env(settings: Settings, monkeypatch) -> Settings:
    """Point the CLI at the test settings through the environment."""
    monkeypatch.setenv("HOME", str(settings.home))
    monkeypatch.setenv("CODEKIT_TEMPLATES_DIR", str(settings.templates_dir))
    monkeypatch.setenv("CODEKIT_SOURCES_DIR", str(settings.sources_dir))
    monkeypatch.setenv("CODEKIT_CATALOG", "directory")
    monkeypatch.chdir(settings.project_root)
    return settings


@pytest.fixture(autouse=True)
def isolated_registry():
    """Give every test a fresh resolver registry."""
    snapshot = get_registry_snapshot()
    clear_registry()
    yield
    restore_registry_snapshot(snapshot)


@pytest.fixture(autouse=True)
def quiet_logger():
    yield
    set_verbose(False)

