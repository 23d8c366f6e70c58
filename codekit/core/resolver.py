"""Generic resource resolver.

Composes the template catalog and the resource store into list, add,
remove and lookup operations for one resource kind. Single-file kinds
(agents, commands) use the defaults here; directory-shaped skills override
the hooks marked below.

Mirror stores get a best-effort copy of each install and lose it again on
remove. A mirror that cannot be written is reported and otherwise ignored.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from codekit import logger
from codekit.catalog import ManifestEntry, TemplateCatalog
from codekit.core.resource import (
    Resource,
    ResourceKind,
    ResourceListResult,
    ResourceScope,
    ResourceSpec,
)
from codekit.core.store import TEMP_PREFIX, ResourceStore
from codekit.exceptions import (
    CodekitError,
    FrontmatterError,
    InvalidTemplateError,
    ResourceExistsError,
    ResourceNotInstalledError,
    TemplateNotFoundError,
)
from codekit.frontmatter import ValidationResult, parse_markdown_with_frontmatter

SIMILARITY_THRESHOLD = 0.3
SKIPPED_FILENAMES = {"index.md"}


@dataclass
class InstallResult:
    """Result of an add operation."""

    name: str
    path: Path
    dry_run: bool = False
    overwritten: bool = False
    dependencies_installed: list[str] = field(default_factory=list)
    dependencies_failed: list[tuple[str, str]] = field(default_factory=list)  # (name, error)
    mirrored: list[Path] = field(default_factory=list)


@dataclass
class RemoveResult:
    """Result of a remove operation."""

    name: str
    path: Path
    dry_run: bool = False


def similarity_score(a: str, b: str) -> float:
    """Rough similarity between two lowercase names.

    Exact match scores 1.0 and substring containment 0.8; otherwise the
    share of distinct characters the two names have in common.
    """
    if a == b:
        return 1.0
    if a in b or b in a:
        return 0.8
    a_chars, b_chars = set(a), set(b)
    if not a_chars or not b_chars:
        return 0.0
    return len(a_chars & b_chars) / max(len(a_chars), len(b_chars))


class ResourceResolver:
    """List, add and remove resources of one kind across all scopes."""

    def __init__(
        self,
        spec: ResourceSpec,
        catalog: TemplateCatalog,
        store: ResourceStore,
        mirrors: Sequence[ResourceStore] = (),
    ) -> None:
        self._spec = spec
        self._catalog = catalog
        self._store = store
        self._mirrors = [m for m in mirrors if m.tool.supports_resource(spec.kind)]

    @property
    def kind(self) -> ResourceKind:
        return self._spec.kind

    @property
    def spec(self) -> ResourceSpec:
        return self._spec

    @property
    def catalog(self) -> TemplateCatalog:
        return self._catalog

    @property
    def store(self) -> ResourceStore:
        return self._store

    @property
    def mirrors(self) -> list[ResourceStore]:
        return list(self._mirrors)

    # --- Parsing and validation ---

    def parse_file(
        self,
        content: str,
        path: Path,
        relative_path: str,
        scope: ResourceScope,
    ) -> Resource:
        """Parse a resource file into a Resource.

        Raises:
            FrontmatterError: If the header block is missing or malformed
        """
        parsed = parse_markdown_with_frontmatter(content)
        return Resource(
            kind=self.kind,
            frontmatter=parsed.frontmatter,
            content=parsed.content,
            path=path,
            relative_path=relative_path,
            scope=scope,
        )

    def validate_resource(self, resource: Resource) -> ValidationResult:
        return self._spec.validate(resource.frontmatter)

    # --- Listing ---

    def list(self, *, global_only: bool = False, category: str | None = None) -> ResourceListResult:
        """List bundled, project and global resources.

        The three scans share no state, so they run concurrently and are
        joined before returning.

        Args:
            global_only: Skip the project scope
            category: Only keep resources in this category

        Returns:
            ResourceListResult with one list per scope
        """
        with ThreadPoolExecutor(max_workers=3) as executor:
            bundled = executor.submit(self._list_bundled)
            project = None
            if not global_only:
                project = executor.submit(
                    self._scan_scope,
                    self._store.resource_dir(self.kind, global_install=False),
                    ResourceScope.PROJECT,
                )
            global_ = executor.submit(
                self._scan_scope,
                self._store.resource_dir(self.kind, global_install=True),
                ResourceScope.GLOBAL,
            )
            result = ResourceListResult(
                bundled=bundled.result(),
                project=project.result() if project else [],
                global_=global_.result(),
            )

        if category:
            result.bundled = [r for r in result.bundled if r.category == category]
            result.project = [r for r in result.project if r.category == category]
            result.global_ = [r for r in result.global_ if r.category == category]

        return result

    def _template_file(self, entry: ManifestEntry) -> str:
        """Catalog path of the file holding an entry's header block."""
        return entry.path

    def _load_bundled(self, entry: ManifestEntry) -> Resource:
        """Load one catalog entry as a Resource. Override point for skills."""
        template_file = self._template_file(entry)
        content = self._catalog.load_template(self.kind, template_file)
        path = self._catalog.template_path(self.kind, template_file) or Path(template_file)
        resource = self.parse_file(content, path, entry.path, ResourceScope.BUNDLED)
        resource.catalog_category = entry.category
        return resource

    def _list_bundled(self) -> list[Resource]:
        resources = []
        for entry in self._catalog.list_available(self.kind):
            try:
                resources.append(self._load_bundled(entry))
            except CodekitError as e:
                logger.debug(f"Failed to load bundled template {entry.name}: {e}")
        return resources

    def _scan_scope(self, root: Path, scope: ResourceScope) -> list[Resource]:
        """Walk a scope directory for resource files. Override point for skills."""
        if not root.is_dir():
            return []

        resources = []
        for path in sorted(root.rglob(f"*{self._spec.file_extension}")):
            if not self._spec.is_valid_resource(path) or path.name in SKIPPED_FILENAMES:
                continue
            if path.name.startswith(TEMP_PREFIX):
                continue
            relative_path = path.relative_to(root).as_posix()
            try:
                content = path.read_text(encoding="utf-8")
                resources.append(self.parse_file(content, path, relative_path, scope))
            except (OSError, UnicodeDecodeError, FrontmatterError) as e:
                logger.debug(f"Failed to parse {path}: {e}")
        return resources

    def list_installed(self, *, global_install: bool = False) -> list[Resource]:
        """Installed resources, project scope first (global only if requested)."""
        installed = []
        if not global_install:
            installed.extend(
                self._scan_scope(
                    self._store.resource_dir(self.kind, global_install=False),
                    ResourceScope.PROJECT,
                )
            )
        installed.extend(
            self._scan_scope(
                self._store.resource_dir(self.kind, global_install=True),
                ResourceScope.GLOBAL,
            )
        )
        return installed

    def find_installed(self, name: str, *, global_install: bool = False) -> Resource | None:
        """Find an installed resource by its identity."""
        for resource in self.list_installed(global_install=global_install):
            if resource.name == name:
                return resource
        return None

    def is_installed(self, name: str, *, global_install: bool = False) -> bool:
        return self.find_installed(name, global_install=global_install) is not None

    # --- Install hooks ---

    def _target_path(
        self, entry: ManifestEntry, global_install: bool, store: ResourceStore | None = None
    ) -> Path:
        """Where an entry is installed. Override point for skills."""
        store = store or self._store
        return store.resource_dir(self.kind, global_install) / entry.path

    def _install(
        self, entry: ManifestEntry, target: Path, content: str, store: ResourceStore | None = None
    ) -> None:
        """Write an entry to its target. Override point for skills."""
        (store or self._store).write_file(target, content)

    def _delete(self, resource: Resource) -> None:
        """Delete an installed resource. Override point for skills."""
        self._store.delete(resource.path)

    def _mirror(
        self,
        entry: ManifestEntry,
        content: str,
        global_install: bool,
        force: bool,
        dry_run: bool,
    ) -> list[Path]:
        """Copy an install into every mirror store, best effort.

        An existing mirror copy is only replaced with force.

        Returns:
            Mirror paths written (or that would be written on a dry run)
        """
        mirrored = []
        for mirror in self._mirrors:
            target = self._target_path(entry, global_install, mirror)
            try:
                if mirror.exists(target) and not force:
                    logger.debug(f"Keeping existing mirror at {target}")
                    continue
                if not dry_run:
                    self._install(entry, target, content, mirror)
                    logger.debug(f'Mirrored "{entry.name}" to {target}')
            except (OSError, CodekitError) as e:
                logger.warn(f'Failed to mirror "{entry.name}" to {mirror.tool.name}: {e}')
                continue
            mirrored.append(target)
        return mirrored

    def _unmirror(self, resource: Resource, global_install: bool) -> None:
        """Delete the mirror copies of a removed resource. Errors are ignored."""
        relative = resource.path.relative_to(self._store.resource_dir(self.kind, global_install))
        for mirror in self._mirrors:
            root = mirror.resource_dir(self.kind, global_install)
            target = root / relative
            try:
                if mirror.exists(target):
                    mirror.delete(target)
                    mirror.prune_empty_parents(target, root)
                    logger.debug(f"Removed mirror at {target}")
            except OSError as e:
                logger.debug(f"Could not remove mirror at {target}: {e}")

    # --- Add / remove ---

    def add(
        self,
        name: str,
        *,
        global_install: bool = False,
        force: bool = False,
        dry_run: bool = False,
        skip_deps: bool = False,
        quiet: bool = False,
    ) -> InstallResult:
        """Install a template from the catalog, then its dependencies.

        Dependencies are installed depth-first, one at a time, so each
        "already installed" check sees the earlier installs. A dependency
        that fails is reported and skipped; the parent stays installed.

        Args:
            name: Catalog name of the template
            global_install: Install under the home directory instead of the project
            force: Overwrite an existing installation
            dry_run: Run every check but write nothing
            skip_deps: Do not install declared dependencies
            quiet: Suppress progress messages

        Returns:
            InstallResult with the target path and dependency outcomes

        Raises:
            TemplateNotFoundError: If the name is not in the catalog
            ResourceExistsError: If already installed and force is not set
            InvalidTemplateError: If the template's header block is invalid
        """
        options = dict(global_install=global_install, force=force, dry_run=dry_run)
        result, entry = self._add_one(name, quiet=quiet, **options)

        if skip_deps or not entry.dependencies:
            return result

        visited = {name}
        pending = list(reversed(entry.dependencies))
        while pending:
            dep = pending.pop()
            if dep in visited:
                continue
            visited.add(dep)

            try:
                _, dep_entry = self._add_one(dep, quiet=True, **options)
            except CodekitError as e:
                logger.warn(f'Dependency "{dep}" could not be installed: {e}')
                result.dependencies_failed.append((dep, str(e)))
                continue

            result.dependencies_installed.append(dep)
            pending.extend(reversed(dep_entry.dependencies))

        return result

    def _add_one(
        self,
        name: str,
        *,
        global_install: bool,
        force: bool,
        dry_run: bool,
        quiet: bool,
    ) -> tuple[InstallResult, ManifestEntry]:
        entry = self._catalog.find(self.kind, name)
        if entry is None:
            suggestions = self.find_similar(name)
            hint = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
            raise TemplateNotFoundError(
                f'{self.kind.singular.capitalize()} "{name}" not found.{hint}',
                suggestions=suggestions,
            )

        target = self._target_path(entry, global_install)
        overwritten = self._store.exists(target)
        if overwritten and not force:
            raise ResourceExistsError(f'"{name}" is already installed at {target}')

        template_file = self._template_file(entry)
        content = self._catalog.load_template(self.kind, template_file)
        try:
            resource = self.parse_file(content, target, entry.path, ResourceScope.BUNDLED)
        except FrontmatterError as e:
            raise InvalidTemplateError(f"Invalid template: {e}", errors=[str(e)]) from e
        validation = self.validate_resource(resource)
        if not validation.valid:
            raise InvalidTemplateError(
                f"Invalid template: {', '.join(validation.errors)}",
                errors=validation.errors,
            )

        result = InstallResult(name=name, path=target, dry_run=dry_run, overwritten=overwritten)
        if dry_run:
            logger.debug(f'Would install "{name}" to {target}')
            result.mirrored = self._mirror(entry, content, global_install, force, dry_run=True)
            return result, entry

        if overwritten and not quiet:
            logger.warn(f"Overwriting existing {self.kind.singular} at {target}")

        self._install(entry, target, content)
        logger.debug(f'Installed "{name}" to {target}')
        result.mirrored = self._mirror(entry, content, global_install, force, dry_run=False)
        return result, entry

    def remove(
        self,
        name: str,
        *,
        global_install: bool = False,
        dry_run: bool = False,
        quiet: bool = False,
    ) -> RemoveResult:
        """Remove an installed resource.

        Looks in the project and global scopes (global only if requested)
        and removes the first match, then prunes empty parent directories.

        Raises:
            ResourceNotInstalledError: If no installed resource has this name
        """
        resource = self.find_installed(name, global_install=global_install)
        if resource is None:
            raise ResourceNotInstalledError(f'"{name}" is not installed')

        if dry_run:
            logger.debug(f'Would remove "{name}" from {resource.path}')
            return RemoveResult(name=name, path=resource.path, dry_run=True)

        global_scope = resource.scope is ResourceScope.GLOBAL
        self._delete(resource)
        root = self._store.resource_dir(self.kind, global_scope)
        self._store.prune_empty_parents(resource.path, root)
        self._unmirror(resource, global_scope)

        if not quiet:
            logger.debug(f'Removed "{name}" from {resource.path}')
        return RemoveResult(name=name, path=resource.path)

    # --- Suggestions ---

    def find_similar(self, name: str, limit: int = 3) -> list[str]:
        """Suggest catalog names close to a misspelled one."""
        needle = name.lower()
        scored = [
            (similarity_score(needle, entry.name.lower()), entry.name)
            for entry in self._catalog.list_available(self.kind)
        ]
        scored = [item for item in scored if item[0] > SIMILARITY_THRESHOLD]
        scored.sort(key=lambda item: item[0], reverse=True)
        return [entry_name for _, entry_name in scored[:limit]]
