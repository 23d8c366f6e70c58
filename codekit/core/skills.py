"""Skill resolver.

A skill is a directory holding a ``SKILL.md`` manifest plus any number of
auxiliary files (references, scripts, assets). Installs are staged in a
temporary sibling directory and renamed into place in one step.
"""

import shutil
from pathlib import Path
from typing import Sequence

from codekit import logger
from codekit.catalog import ManifestEntry, TemplateCatalog
from codekit.constants import SKILL_MARKER
from codekit.core.resolver import ResourceResolver
from codekit.core.resource import Resource, ResourceScope
from codekit.core.specs import SKILL_SPEC
from codekit.core.store import TEMP_PREFIX, ResourceStore
from codekit.exceptions import FrontmatterError


def list_skill_files(skill_dir: Path) -> list[str]:
    """List every file in a skill directory except its manifest.

    Returns:
        Sorted posix paths relative to the skill directory
    """
    files = []
    for path in skill_dir.rglob("*"):
        if not path.is_file():
            continue
        relative = path.relative_to(skill_dir).as_posix()
        if relative != SKILL_MARKER:
            files.append(relative)
    return sorted(files)


class SkillResolver(ResourceResolver):
    """Resolver for directory-shaped skills."""

    def __init__(
        self,
        catalog: TemplateCatalog,
        store: ResourceStore,
        mirrors: Sequence[ResourceStore] = (),
    ) -> None:
        super().__init__(SKILL_SPEC, catalog, store, mirrors)

    def _template_file(self, entry: ManifestEntry) -> str:
        return f"{entry.path}/{SKILL_MARKER}"

    def _load_bundled(self, entry: ManifestEntry) -> Resource:
        content = self.catalog.load_template(self.kind, self._template_file(entry))
        path = self.catalog.template_path(self.kind, entry.path) or Path(entry.path)
        skill = self.parse_file(content, path, entry.path, ResourceScope.BUNDLED)
        skill.catalog_category = entry.category
        skill.files = self.catalog.list_auxiliary_files(self.kind, entry.path)
        return skill

    def _scan_scope(self, root: Path, scope: ResourceScope) -> list[Resource]:
        """Scan immediate child directories that hold a SKILL.md."""
        if not root.is_dir():
            return []

        skills = []
        for skill_dir in sorted(root.iterdir()):
            if skill_dir.name.startswith(TEMP_PREFIX) or not self.spec.is_valid_resource(skill_dir):
                continue
            skill_file = skill_dir / SKILL_MARKER
            try:
                content = skill_file.read_text(encoding="utf-8")
                skill = self.parse_file(content, skill_dir, skill_dir.name, scope)
            except (OSError, UnicodeDecodeError, FrontmatterError):
                logger.debug(f"Skipping {skill_dir}: no valid {SKILL_MARKER} found")
                continue
            skill.files = list_skill_files(skill_dir)
            skills.append(skill)
        return skills

    def _target_path(
        self, entry: ManifestEntry, global_install: bool, store: ResourceStore | None = None
    ) -> Path:
        store = store or self.store
        return store.resource_dir(self.kind, global_install) / entry.name

    def _install(
        self, entry: ManifestEntry, target: Path, content: str, store: ResourceStore | None = None
    ) -> None:
        """Stage the manifest and auxiliary files, then swap the directory in."""
        store = store or self.store
        staged = store.staging_dir(target)
        try:
            store.write_file(staged / SKILL_MARKER, content)
            for relative in self.catalog.list_auxiliary_files(self.kind, entry.path):
                data = self.catalog.load_template_bytes(self.kind, f"{entry.path}/{relative}")
                store.write_file(staged / relative, data)
            store.replace_dir(staged, target)
        except BaseException:
            shutil.rmtree(staged, ignore_errors=True)
            raise
