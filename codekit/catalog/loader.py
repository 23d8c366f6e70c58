"""Template catalog: lookup of bundled resource templates.

The catalog reads through a single CatalogBackend chosen once at startup,
so callers behave identically whether templates come from the templates/
directory or from the embedded dataset.
"""

import json
from pathlib import Path

from codekit import logger
from codekit.catalog.backends import CatalogBackend, DirectoryBackend, EmbeddedBackend
from codekit.catalog.manifest import Manifest, ManifestEntry
from codekit.constants import EMBEDDED_DATASET_FILENAME, MANIFEST_FILENAME, SKILL_MARKER
from codekit.core.resource import ResourceKind
from codekit.exceptions import TemplateNotFoundError
from codekit.settings import PACKAGE_DIR, CatalogMode, Settings

EMBEDDED_DATASET_PATH = PACKAGE_DIR / EMBEDDED_DATASET_FILENAME


class TemplateCatalog:
    """Read-only lookup of bundled templates and their manifests.

    Manifests are read on every call, so changes written by the source
    synchronizer are visible on the next lookup.
    """

    def __init__(self, backend: CatalogBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> CatalogBackend:
        return self._backend

    @staticmethod
    def _key(kind: ResourceKind, relative_path: str) -> str:
        return f"{kind.value}/{relative_path.strip('/')}"

    def load_manifest(self, kind: ResourceKind) -> Manifest:
        """Load the index for a resource kind.

        A missing or unreadable index yields an empty manifest so a freshly
        initialized catalog is usable immediately.
        """
        key = self._key(kind, MANIFEST_FILENAME)
        try:
            return Manifest.from_dict(json.loads(self._backend.read_text(key)))
        except (OSError, ValueError) as e:
            logger.debug(f"No usable manifest at {key}: {e}")
            return Manifest()

    def list_available(self, kind: ResourceKind) -> list[ManifestEntry]:
        return self.load_manifest(kind).resources

    def load_template(self, kind: ResourceKind, relative_path: str) -> str:
        """Load a template file's text.

        Raises:
            TemplateNotFoundError: If the file is not in the catalog
        """
        key = self._key(kind, relative_path)
        try:
            return self._backend.read_text(key)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateNotFoundError(f"Template not found: {key}") from e

    def load_template_bytes(self, kind: ResourceKind, relative_path: str) -> bytes:
        """Load a template file's raw bytes (auxiliary skill files).

        Raises:
            TemplateNotFoundError: If the file is not in the catalog
        """
        key = self._key(kind, relative_path)
        try:
            return self._backend.read_bytes(key)
        except OSError as e:
            raise TemplateNotFoundError(f"Template not found: {key}") from e

    def has_template(self, kind: ResourceKind, relative_path: str) -> bool:
        return self._backend.exists(self._key(kind, relative_path))

    def find(self, kind: ResourceKind, name: str) -> ManifestEntry | None:
        """Find a template by name."""
        return self.load_manifest(kind).find(name)

    def search(self, kind: ResourceKind, query: str) -> list[ManifestEntry]:
        """Find templates whose name, description, display name or tags match."""
        needle = query.lower()

        def matches(entry: ManifestEntry) -> bool:
            haystacks = [entry.name, entry.description, entry.display_name or ""]
            haystacks.extend(entry.tags or [])
            return any(needle in value.lower() for value in haystacks)

        return [entry for entry in self.list_available(kind) if matches(entry)]

    def list_by_category(self, kind: ResourceKind, category: str) -> list[ManifestEntry]:
        return [entry for entry in self.list_available(kind) if entry.category == category]

    def categories(self, kind: ResourceKind) -> list[str]:
        """Get all unique categories for a resource kind, sorted."""
        return sorted({entry.category for entry in self.list_available(kind) if entry.category})

    def list_auxiliary_files(self, kind: ResourceKind, resource_name: str) -> list[str]:
        """List files under a directory template, except its manifest.

        Returns:
            Sorted posix paths relative to the resource directory
        """
        prefix = self._key(kind, resource_name) + "/"
        return sorted(
            key[len(prefix):]
            for key in self._backend.list_keys(prefix)
            if key[len(prefix):] != SKILL_MARKER
        )

    def template_path(self, kind: ResourceKind, relative_path: str) -> Path | None:
        """Filesystem path of a template, or None for the embedded backend."""
        root = self._backend.root
        if root is None:
            return None
        return root / kind.value / relative_path


def detect_catalog_mode(dataset_path: Path = EMBEDDED_DATASET_PATH) -> CatalogMode:
    """Pick the catalog backend for this process.

    The embedded dataset is used when it ships with the package; otherwise
    templates are read from the directory tree.
    """
    if dataset_path.is_file():
        return CatalogMode.EMBEDDED
    return CatalogMode.DIRECTORY


def create_catalog(settings: Settings, dataset_path: Path = EMBEDDED_DATASET_PATH) -> TemplateCatalog:
    """Build the catalog for the configured (or detected) mode."""
    mode = settings.catalog_mode or detect_catalog_mode(dataset_path)
    if mode is CatalogMode.EMBEDDED:
        logger.debug(f"Using embedded catalog from {dataset_path}")
        return TemplateCatalog(EmbeddedBackend.from_file(dataset_path))
    logger.debug(f"Using catalog directory {settings.templates_dir}")
    return TemplateCatalog(DirectoryBackend(settings.templates_dir))
