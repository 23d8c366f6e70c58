"""Tests for codekit.core.skills module."""

import shutil
from pathlib import Path

import pytest

from codekit.core.agents import AgentResolver
from codekit.core.skills import SkillResolver, list_skill_files
from codekit.core.specs import GEMINI_SPEC
from codekit.core.store import TEMP_PREFIX, ResourceStore
from codekit.exceptions import InvalidTemplateError, ResourceExistsError


class TestSkillInstall:
    """Skills install as whole directories."""

    def test_add_copies_manifest_and_auxiliary_files(self, skills: SkillResolver, settings):
        result = skills.add("code-review")

        skill_dir = settings.project_root / ".claude" / "skills" / "code-review"
        assert result.path == skill_dir
        assert (skill_dir / "SKILL.md").is_file()
        assert (skill_dir / "references" / "checklist.md").read_text() == "- tests\n"
        assert (skill_dir / "scripts" / "run.sh").is_file()

    def test_no_staging_leftovers(self, skills: SkillResolver, settings):
        skills.add("code-review")
        skills_dir = settings.project_root / ".claude" / "skills"
        assert [p.name for p in skills_dir.iterdir()] == ["code-review"]

    def test_existing_directory_blocks_add(self, skills: SkillResolver, settings):
        skill_dir = settings.project_root / ".claude" / "skills" / "code-review"
        skill_dir.mkdir(parents=True)
        (skill_dir / "mine.md").write_text("keep me")

        with pytest.raises(ResourceExistsError):
            skills.add("code-review")

        assert [p.name for p in skill_dir.iterdir()] == ["mine.md"]

    def test_force_replaces_whole_directory(self, skills: SkillResolver, settings):
        skill_dir = settings.project_root / ".claude" / "skills" / "code-review"
        skill_dir.mkdir(parents=True)
        (skill_dir / "stale.md").write_text("old")

        skills.add("code-review", force=True)

        assert not (skill_dir / "stale.md").exists()
        assert (skill_dir / "SKILL.md").is_file()

    def test_reserved_name_is_invalid(self, skills: SkillResolver, settings):
        with pytest.raises(InvalidTemplateError, match="reserved"):
            skills.add("claude-helper")

        assert not (settings.project_root / ".claude").exists()

    def test_dry_run(self, skills: SkillResolver, settings):
        result = skills.add("code-review", dry_run=True)

        assert result.path == settings.project_root / ".claude" / "skills" / "code-review"
        assert not result.path.exists()


class TestSkillListAndRemove:
    """Listing and removal of installed skills."""

    def test_installed_skill_lists_files(self, skills: SkillResolver):
        skills.add("code-review")

        installed = skills.list().project

        assert [s.name for s in installed] == ["code-review"]
        assert installed[0].files == ["references/checklist.md", "scripts/run.sh"]

    def test_bundled_skill_lists_files(self, skills: SkillResolver):
        bundled = {s.name: s for s in skills.list().bundled}
        assert bundled["code-review"].files == ["references/checklist.md", "scripts/run.sh"]
        assert bundled["code-review"].category == "quality"

    def test_directories_without_manifest_are_skipped(self, skills: SkillResolver, settings):
        skills_dir = settings.project_root / ".claude" / "skills"
        (skills_dir / "not-a-skill").mkdir(parents=True)
        (skills_dir / "not-a-skill" / "README.md").write_text("hi")
        (skills_dir / f"{TEMP_PREFIX}abc").mkdir()

        assert skills.list().project == []

    def test_skill_without_name_uses_directory(self, skills: SkillResolver, settings, write_markdown):
        skill_dir = settings.project_root / ".claude" / "skills" / "hand-made"
        write_markdown(skill_dir / "SKILL.md", {"description": "No name field"})

        assert skills.is_installed("hand-made")

    def test_remove_deletes_auxiliary_files(self, skills: SkillResolver, settings):
        result = skills.add("code-review")

        skills.remove("code-review")

        assert not result.path.exists()
        assert list((settings.project_root / ".claude" / "skills").iterdir()) == []


def test_list_skill_files(tmp_path: Path):
    (tmp_path / "SKILL.md").write_text("x")
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "c.txt").write_text("x")
    (tmp_path / "a.md").write_text("x")
    assert list_skill_files(tmp_path) == ["a.md", "b/c.txt"]


@pytest.fixture
def mirrored_skills(catalog, store, settings) -> SkillResolver:
    mirror = ResourceStore(GEMINI_SPEC, settings.project_root, settings.home)
    return SkillResolver(catalog, store, [mirror])


class TestGeminiMirror:
    """Installed skills are copied to the Gemini Antigravity directory, best effort."""

    def test_add_mirrors_to_project_agent_dir(self, mirrored_skills: SkillResolver, settings):
        result = mirrored_skills.add("code-review")

        mirror_dir = settings.project_root / ".agent" / "skills" / "code-review"
        assert result.mirrored == [mirror_dir]
        assert (mirror_dir / "SKILL.md").read_text() == (result.path / "SKILL.md").read_text()
        assert (mirror_dir / "references" / "checklist.md").read_text() == "- tests\n"

    def test_global_add_mirrors_under_gemini_home(self, mirrored_skills: SkillResolver, settings):
        mirrored_skills.add("code-review", global_install=True)

        assert (settings.home / ".claude" / "skills" / "code-review" / "SKILL.md").is_file()
        assert (settings.home / ".gemini" / "antigravity" / "skills" / "code-review" / "SKILL.md").is_file()

    def test_existing_mirror_kept_without_force(self, mirrored_skills: SkillResolver, settings):
        mirror_dir = settings.project_root / ".agent" / "skills" / "code-review"
        mirror_dir.mkdir(parents=True)
        (mirror_dir / "mine.md").write_text("keep me")

        result = mirrored_skills.add("code-review")
        assert result.mirrored == []
        assert [p.name for p in mirror_dir.iterdir()] == ["mine.md"]

        mirrored_skills.add("code-review", force=True)
        assert (mirror_dir / "SKILL.md").is_file()
        assert not (mirror_dir / "mine.md").exists()

    def test_mirror_failure_does_not_fail_install(self, mirrored_skills: SkillResolver, settings, capsys):
        (settings.project_root / ".agent").write_text("not a directory")

        result = mirrored_skills.add("code-review")

        assert (result.path / "SKILL.md").is_file()
        assert result.mirrored == []
        assert "Failed to mirror" in capsys.readouterr().err

    def test_dry_run_writes_no_mirror(self, mirrored_skills: SkillResolver, settings):
        result = mirrored_skills.add("code-review", dry_run=True)

        mirror_dir = settings.project_root / ".agent" / "skills" / "code-review"
        assert result.mirrored == [mirror_dir]
        assert not (settings.project_root / ".agent").exists()

    def test_remove_deletes_mirror(self, mirrored_skills: SkillResolver, settings):
        mirrored_skills.add("code-review")
        mirrored_skills.remove("code-review")

        assert not (settings.project_root / ".agent" / "skills" / "code-review").exists()
        assert not (settings.project_root / ".claude" / "skills" / "code-review").exists()

    def test_remove_without_mirror_succeeds(self, mirrored_skills: SkillResolver, settings):
        mirrored_skills.add("code-review")
        shutil.rmtree(settings.project_root / ".agent")

        result = mirrored_skills.remove("code-review")
        assert not result.path.exists()

    def test_agents_are_not_mirrored(self, catalog, store, settings):
        mirror = ResourceStore(GEMINI_SPEC, settings.project_root, settings.home)
        assert AgentResolver(catalog, store, [mirror]).mirrors == []
