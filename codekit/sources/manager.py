"""External skill sources.

A source is a git repository that publishes skills. The pipeline is:

1. ``add_source`` records the repository in sources.toml
2. ``pull`` clones it (shallow) or fast-forwards the existing clone
3. ``sync_all`` scans the clone for SKILL.md directories, copies each
   skill into the catalog's skills tree and rebuilds the skills index.
   Hand-written index entries (no ``source``) survive every sync.
"""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from codekit import logger
from codekit.catalog import Manifest, ManifestEntry
from codekit.constants import (
    MANIFEST_FILENAME,
    SKILL_MARKER,
    SKILLS_SUBDIR,
    SYNC_EXCLUDED_DIRS,
    SYNC_EXCLUDED_EXTENSIONS,
    SYNC_EXCLUDED_FILES,
)
from codekit.core.store import TEMP_PREFIX
from codekit.exceptions import (
    CodekitError,
    DuplicateSourceError,
    FrontmatterError,
    SourceNotClonedError,
    SourceNotFoundError,
)
from codekit.frontmatter import parse_markdown_with_frontmatter, validate_skill_frontmatter
from codekit.settings import Settings
from codekit.sources import git
from codekit.sources.config import SourceConfig, SourcesConfig


@dataclass
class ScannedSkill:
    """A skill found in a source clone, before it is copied into the catalog."""

    name: str
    description: str
    dir_path: Path
    source_name: str
    tags: list[str] | None = None
    category: str | None = None

    def to_manifest_entry(self) -> ManifestEntry:
        display_name = " ".join(word.capitalize() for word in self.name.split("-"))
        return ManifestEntry(
            name=self.name,
            path=self.name,
            description=self.description,
            display_name=display_name,
            category=self.category,
            tags=self.tags,
            dependencies=[],
            source=self.source_name,
        )


@dataclass
class PullResult:
    """Result of pulling one or more sources."""

    pulled: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)  # (source, error)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class SyncResult:
    """Result of syncing sources into the catalog."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # sources that are not cloned
    failed: list[tuple[str, str]] = field(default_factory=list)  # (skill, error)
    total: int = 0

    @property
    def ok(self) -> bool:
        return not self.skipped and not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": self.added,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": [{"name": name, "error": error} for name, error in self.failed],
            "total": self.total,
        }


@dataclass
class SourceStatus:
    """A configured source with its clone state."""

    source: SourceConfig
    skills: int
    cloned: bool

    def to_dict(self) -> dict[str, Any]:
        return {**self.source.to_dict(), "skills": self.skills, "cloned": self.cloned}


def derive_source_name(url: str) -> str:
    """Derive a source name from a repository URL.

    Examples:
        https://github.com/org/skills.git -> skills
        git@github.com:org/skills.git -> skills
        git@host:repo -> repo
    """
    tail = url.rstrip("/")
    if tail.endswith(".git"):
        tail = tail[: -len(".git")]
    tail = tail.replace(":", "/").split("/")[-1]
    return tail or "unknown"


def parse_tags(frontmatter: dict[str, Any]) -> list[str] | None:
    """Read tags from ``metadata.tags``, falling back to top-level ``tags``.

    Tags may be a comma-separated string or a list.
    """
    metadata = frontmatter.get("metadata")
    tags = metadata.get("tags") if isinstance(metadata, dict) else None
    if tags is None:
        tags = frontmatter.get("tags")

    if isinstance(tags, str):
        return [t.strip() for t in tags.split(",") if t.strip()]
    if isinstance(tags, list):
        return [str(t) for t in tags]
    return None


def copy_filtered(src: Path, dest: Path) -> None:
    """Copy a skill directory, leaving out repository-only files."""
    for entry in sorted(src.iterdir()):
        if entry.is_dir():
            if entry.name in SYNC_EXCLUDED_DIRS:
                continue
            (dest / entry.name).mkdir(parents=True, exist_ok=True)
            copy_filtered(entry, dest / entry.name)
            continue
        if entry.name in SYNC_EXCLUDED_FILES or entry.suffix in SYNC_EXCLUDED_EXTENSIONS:
            continue
        shutil.copy2(entry, dest / entry.name)


class SourceManager:
    """Manage external skill sources and sync them into the catalog."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def sources_dir(self) -> Path:
        return self._settings.sources_dir

    @property
    def skills_root(self) -> Path:
        """The catalog's on-disk skills tree that sync writes into."""
        return self._settings.templates_dir / SKILLS_SUBDIR

    @property
    def index_path(self) -> Path:
        return self.skills_root / MANIFEST_FILENAME

    def clone_dir(self, source: SourceConfig) -> Path:
        return self.sources_dir / source.name

    def is_cloned(self, source: SourceConfig) -> bool:
        return git.is_cloned(self.clone_dir(source))

    # --- Configuration ---

    def load_config(self) -> SourcesConfig:
        return SourcesConfig.load(self._settings.sources_config_path)

    def save_config(self, config: SourcesConfig) -> None:
        config.save()

    def add_source(
        self,
        url: str,
        *,
        name: str | None = None,
        branch: str = "main",
        skills_dir: str = "skills",
    ) -> SourceConfig:
        """Register a new source.

        Raises:
            DuplicateSourceError: If a source with the same name exists
        """
        config = self.load_config()
        name = name or derive_source_name(url)
        if config.get(name) is not None:
            raise DuplicateSourceError(f'Source "{name}" already exists')

        source = SourceConfig(name=name, url=url, branch=branch or "main", skills_dir=skills_dir or "skills")
        config.sources.append(source)
        self.save_config(config)
        logger.debug(f"Added source {name} ({url})")
        return source

    def remove_source(self, name: str, *, delete_clone: bool = False) -> SourceConfig:
        """Unregister a source, optionally deleting its clone.

        Deleting the clone is best effort.

        Raises:
            SourceNotFoundError: If no source has this name
        """
        config = self.load_config()
        source = config.get(name)
        if source is None:
            raise SourceNotFoundError(f'Source "{name}" not found')

        config.sources.remove(source)
        self.save_config(config)

        if delete_clone:
            clone = self.clone_dir(source)
            try:
                shutil.rmtree(clone)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warn(f"Could not delete {clone}: {e}")
        return source

    def _select_sources(self, config: SourcesConfig, filter_name: str | None) -> list[SourceConfig]:
        if filter_name:
            source = config.get(filter_name)
            if source is None:
                raise SourceNotFoundError(f'Source "{filter_name}" not found')
            return [source]
        if not config.sources:
            raise SourceNotFoundError("No sources configured")
        return list(config.sources)

    # --- Pull ---

    def pull(self, source: SourceConfig) -> None:
        """Clone a source, or fast-forward its existing clone.

        Raises:
            GitCommandError: If git fails; the message carries git's stderr
        """
        target = self.clone_dir(source)
        if git.is_cloned(target):
            logger.debug(f"Pulling {source.name}")
            git.pull(target)
        else:
            logger.debug(f"Cloning {source.name} from {source.url}")
            self.sources_dir.mkdir(parents=True, exist_ok=True)
            git.clone(source.url, target, source.branch)

    def pull_all(self, filter_name: str | None = None) -> PullResult:
        """Pull every source (or one named source) in order.

        A failing source is logged and recorded; the rest are still pulled.

        Raises:
            SourceNotFoundError: If the named source is unknown or none are configured
        """
        sources = self._select_sources(self.load_config(), filter_name)
        result = PullResult()
        for source in sources:
            try:
                self.pull(source)
            except CodekitError as e:
                logger.warn(f"Failed to pull {source.name}: {e}")
                result.failed.append((source.name, str(e)))
                continue
            result.pulled.append(source.name)
        return result

    # --- Scan ---

    def scan_source_skills(self, source: SourceConfig) -> list[ScannedSkill]:
        """Find skill directories in a source clone.

        A directory holding SKILL.md is one skill and is not searched
        further. Directories whose path (relative to the skills dir) starts
        with an exclude prefix are skipped with everything below them.
        """
        base = self.clone_dir(source) / source.skills_dir
        skills: list[ScannedSkill] = []
        if base.is_dir():
            self._walk_for_skills(base, base, source, skills)
        return skills

    def _is_excluded(self, directory: Path, base: Path, source: SourceConfig) -> bool:
        if directory == base:
            return False
        relative = directory.relative_to(base).as_posix()
        return any(prefix and relative.startswith(prefix) for prefix in source.exclude)

    def _walk_for_skills(
        self,
        directory: Path,
        base: Path,
        source: SourceConfig,
        skills: list[ScannedSkill],
    ) -> None:
        if self._is_excluded(directory, base, source):
            logger.debug(f"Skipping excluded: {directory.relative_to(base).as_posix()}")
            return

        skill_file = directory / SKILL_MARKER
        if skill_file.is_file():
            skill = self._read_skill(skill_file, source)
            if skill is not None:
                skills.append(skill)
            return

        try:
            children = sorted(p for p in directory.iterdir() if p.is_dir())
        except OSError as e:
            logger.debug(f"Cannot read {directory}: {e}")
            return
        for child in children:
            if child.name == ".git":
                continue
            self._walk_for_skills(child, base, source, skills)

    def _read_skill(self, skill_file: Path, source: SourceConfig) -> ScannedSkill | None:
        try:
            parsed = parse_markdown_with_frontmatter(skill_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            logger.debug(f"Failed to parse {skill_file}: {e}")
            return None

        frontmatter = parsed.frontmatter
        name = str(frontmatter.get("name") or skill_file.parent.name)
        # The name becomes a directory under the catalog, so it must pass the skill rules
        validation = validate_skill_frontmatter({**frontmatter, "name": name})
        if not validation.valid:
            logger.warn(f"Skipping skill at {skill_file.parent}: {'; '.join(validation.errors)}")
            return None

        return ScannedSkill(
            name=name,
            description=str(frontmatter.get("description") or ""),
            dir_path=skill_file.parent,
            source_name=source.name,
            tags=parse_tags(frontmatter),
            category=source.category_mapping.get(name) or source.default_category,
        )

    # --- Sync ---

    def sync_all(self, *, filter_name: str | None = None, dry_run: bool = False) -> SyncResult:
        """Copy skills from cloned sources into the catalog and rebuild its index.

        Sources that are not cloned yet are reported in ``skipped``. With
        ``dry_run`` the result is computed but nothing is written or deleted.

        Raises:
            SourceNotFoundError: If the named source is unknown or none are configured
            SourceNotClonedError: If the single named source is not cloned
        """
        config = self.load_config()
        sources = self._select_sources(config, filter_name)
        result = SyncResult()

        scanned: dict[str, ScannedSkill] = {}
        scanned_sources: set[str] = set()
        for source in sources:
            if not self.is_cloned(source):
                if filter_name:
                    raise SourceNotClonedError(
                        f"Source \"{source.name}\" not cloned yet. Run 'codekit sources pull' first."
                    )
                logger.warn(
                    f"Source \"{source.name}\" not cloned yet. Run 'codekit sources pull' first."
                )
                result.skipped.append(source.name)
                continue

            skills = self.scan_source_skills(source)
            logger.debug(f"Found {len(skills)} skills in {source.name}")
            scanned_sources.add(source.name)
            for skill in skills:
                if skill.name in scanned:
                    logger.warn(
                        f'Skill "{skill.name}" from {source.name} replaces the one from '
                        f"{scanned[skill.name].source_name}"
                    )
                    del scanned[skill.name]
                scanned[skill.name] = skill

        result.total = len(scanned)

        copied: list[ScannedSkill] = []
        for skill in scanned.values():
            exists = (self.skills_root / skill.name / SKILL_MARKER).exists()
            if not dry_run:
                try:
                    self.copy_skill(skill)
                except OSError as e:
                    logger.warn(f'Failed to copy skill "{skill.name}": {e}')
                    result.failed.append((skill.name, str(e)))
                    continue
            copied.append(skill)
            (result.updated if exists else result.added).append(skill.name)

        if dry_run:
            return result

        self.update_index(
            copied,
            scanned_sources,
            config.names,
            retained={name for name, _ in result.failed},
        )
        return result

    def copy_skill(self, skill: ScannedSkill) -> Path:
        """Replace the catalog copy of a skill with the one from its clone.

        The copy is staged next to the target, so a failed copy leaves the
        previous version in place.
        """
        target = self.skills_root / skill.name
        self.skills_root.mkdir(parents=True, exist_ok=True)
        staged = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX, dir=self.skills_root))
        try:
            copy_filtered(skill.dir_path, staged)
            staged.chmod(0o755)
            if target.exists():
                shutil.rmtree(target)
            os.replace(staged, target)
        except BaseException:
            shutil.rmtree(staged, ignore_errors=True)
            raise
        return target

    def load_index(self) -> Manifest:
        try:
            return Manifest.from_dict(json.loads(self.index_path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return Manifest()
        except (OSError, ValueError) as e:
            logger.warn(f"Ignoring unreadable skills index {self.index_path}: {e}")
            return Manifest()

    def update_index(
        self,
        scanned: list[ScannedSkill],
        scanned_sources: set[str],
        configured_sources: set[str],
        retained: set[str] | frozenset[str] = frozenset(),
    ) -> Manifest:
        """Merge scanned skills into the skills index.

        Kept: entries without a source (unless a scanned skill takes the
        name), entries from configured sources not scanned in this run, and
        the ``retained`` names (skills whose copy failed and whose previous
        version is still on disk). Dropped: other entries from sources
        scanned now, and entries from sources that are no longer configured.
        """
        current = self.load_index()
        scanned_names = {skill.name for skill in scanned}

        # A filtered sync only rescans the named sources; the other configured
        # sources keep their entries from earlier runs until they are synced.
        def keep(entry: ManifestEntry) -> bool:
            if entry.name in scanned_names:
                return False
            if entry.name in retained:
                return True
            if entry.source is None:
                return True
            return entry.source in configured_sources and entry.source not in scanned_sources

        merged = Manifest(
            version=current.version,
            resources=[e for e in current.resources if keep(e)]
            + [skill.to_manifest_entry() for skill in scanned],
        )
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(json.dumps(merged.to_dict(), indent=2) + "\n", encoding="utf-8")
        return merged

    # --- Status ---

    def list_sources(self) -> list[SourceStatus]:
        statuses = []
        for source in self.load_config().sources:
            cloned = self.is_cloned(source)
            skills = len(self.scan_source_skills(source)) if cloned else 0
            statuses.append(SourceStatus(source=source, skills=skills, cloned=cloned))
        return statuses
