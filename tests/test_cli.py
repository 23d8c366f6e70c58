"""Tests for the codekit CLI."""

import json

import pytest
from typer.testing import CliRunner

from codekit import __version__
from codekit.cli.common import handle_errors
from codekit.cli.main import app
from codekit.settings import Settings

runner = CliRunner()


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "agents" in result.output
        assert "sources" in result.output

    def test_invalid_catalog_mode_is_reported(self, cli_env: Settings, monkeypatch):
        monkeypatch.setenv("CODEKIT_CATALOG", "zip")

        result = runner.invoke(app, ["agents", "list"])

        assert result.exit_code == 1
        assert "Invalid CODEKIT_CATALOG" in result.output

    def test_handle_errors_leaves_other_exceptions_alone(self):
        with pytest.raises(ValueError):
            with handle_errors():
                raise ValueError("not a codekit error")


class TestResourceCommands:
    """agents / skills / commands subcommands."""

    def test_add_and_remove_agent(self, cli_env: Settings):
        result = runner.invoke(app, ["agents", "add", "nodejs-expert"])

        assert result.exit_code == 0, result.output
        assert "Installed" in result.output
        target = cli_env.project_root / ".claude" / "agents" / "nodejs-expert.md"
        assert target.is_file()

        result = runner.invoke(app, ["agents", "remove", "nodejs-expert"])

        assert result.exit_code == 0, result.output
        assert not target.exists()

    def test_add_reports_dependencies(self, cli_env: Settings):
        result = runner.invoke(app, ["agents", "add", "typescript-expert"])
        assert result.exit_code == 0, result.output
        assert "nodejs-expert" in result.output

    def test_add_unknown_exits_nonzero_with_suggestion(self, cli_env: Settings):
        result = runner.invoke(app, ["agents", "add", "typescrpit"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "typescript-expert" in result.output

    def test_failed_dependency_exits_nonzero(self, cli_env: Settings):
        """The parent stays installed, but the command reports the failure."""
        result = runner.invoke(app, ["agents", "add", "react-expert"])

        assert result.exit_code == 1
        assert "missing-expert" in result.output
        agents_dir = cli_env.project_root / ".claude" / "agents"
        assert (agents_dir / "react-expert.md").is_file()
        assert (agents_dir / "typescript-expert.md").is_file()

    def test_add_several_continues_after_failure(self, cli_env: Settings):
        result = runner.invoke(app, ["agents", "add", "nope", "nodejs-expert"])
        assert result.exit_code == 1
        assert (cli_env.project_root / ".claude" / "agents" / "nodejs-expert.md").is_file()

    def test_add_existing_fails(self, cli_env: Settings):
        runner.invoke(app, ["agents", "add", "nodejs-expert"])
        result = runner.invoke(app, ["agents", "add", "nodejs-expert"])
        assert result.exit_code == 1
        assert "already installed" in result.output

    def test_add_dry_run(self, cli_env: Settings):
        result = runner.invoke(app, ["skills", "add", "code-review", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "Would install" in result.output
        assert not (cli_env.project_root / ".claude").exists()

    def test_skill_add_and_remove_keep_gemini_mirror_in_step(self, cli_env: Settings):
        result = runner.invoke(app, ["skills", "add", "code-review"])
        assert result.exit_code == 0, result.output
        assert "Mirrored to" in result.output
        mirror = cli_env.project_root / ".agent" / "skills" / "code-review"
        assert (mirror / "SKILL.md").is_file()

        result = runner.invoke(app, ["skills", "remove", "code-review"])
        assert result.exit_code == 0, result.output
        assert not mirror.exists()

    def test_add_global(self, cli_env: Settings):
        result = runner.invoke(app, ["commands", "add", "git/commit", "--global"])
        assert result.exit_code == 0, result.output
        assert (cli_env.home / ".claude" / "commands" / "git" / "commit.md").is_file()

    def test_remove_missing_fails(self, cli_env: Settings):
        result = runner.invoke(app, ["skills", "remove", "code-review"])
        assert result.exit_code == 1
        assert "not installed" in result.output

    def test_list_json(self, cli_env: Settings):
        runner.invoke(app, ["agents", "add", "nodejs-expert"])

        result = runner.invoke(app, ["agents", "list", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [r["name"] for r in data["project"]] == ["nodejs-expert"]
        assert data["global"] == []

    def test_list_table(self, cli_env: Settings):
        result = runner.invoke(app, ["skills", "list"])
        assert result.exit_code == 0, result.output
        assert "code-review" in result.output

    def test_invalid_catalog_mode_env(self, cli_env: Settings, monkeypatch):
        monkeypatch.setenv("CODEKIT_CATALOG", "zip")
        result = runner.invoke(app, ["agents", "list"])
        assert result.exit_code == 1
        assert "CODEKIT_CATALOG" in result.output


class TestSourceCommands:
    """sources subcommands (no git needed)."""

    def test_add_list_remove(self, cli_env: Settings):
        result = runner.invoke(app, ["sources", "add", "git@host/repo.git"])
        assert result.exit_code == 0, result.output
        assert "repo" in result.output

        result = runner.invoke(app, ["sources", "list", "--json"])
        data = json.loads(result.stdout)
        assert data[0]["name"] == "repo"
        assert data[0]["cloned"] is False

        result = runner.invoke(app, ["sources", "remove", "repo"])
        assert result.exit_code == 0, result.output

    def test_duplicate_source_fails(self, cli_env: Settings):
        runner.invoke(app, ["sources", "add", "git@host/repo.git"])
        result = runner.invoke(app, ["sources", "add", "git@host/repo.git"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_sync_without_sources_fails(self, cli_env: Settings):
        result = runner.invoke(app, ["sources", "sync"])
        assert result.exit_code == 1
        assert "No sources configured" in result.output

    def test_sync_json(self, cli_env: Settings, write_markdown):
        runner.invoke(app, ["sources", "add", "https://example.com/repo.git"])
        clone = cli_env.sources_dir / "repo"
        (clone / ".git").mkdir(parents=True)
        (clone / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        write_markdown(clone / "skills" / "foo" / "SKILL.md", {"name": "foo", "description": "Foo"})

        result = runner.invoke(app, ["sources", "sync", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "added": ["foo"],
            "updated": [],
            "skipped": [],
            "failed": [],
            "total": 1,
        }

    def test_sync_with_uncloned_source_exits_nonzero(self, cli_env: Settings):
        runner.invoke(app, ["sources", "add", "https://example.com/repo.git"])
        result = runner.invoke(app, ["sources", "sync"])
        assert result.exit_code == 1
        assert "Skipped sources" in result.output

    def test_sync_with_failed_copy_exits_nonzero(self, cli_env: Settings, write_markdown):
        runner.invoke(app, ["sources", "add", "https://example.com/repo.git"])
        clone = cli_env.sources_dir / "repo"
        (clone / ".git").mkdir(parents=True)
        (clone / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        write_markdown(clone / "skills" / "foo" / "SKILL.md", {"name": "foo", "description": "Foo"})
        (clone / "skills" / "foo" / "link.md").symlink_to(clone / "missing.md")

        result = runner.invoke(app, ["sources", "sync"])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "foo" in result.output
