"""Template catalog for codekit.

- TemplateCatalog: manifest and template lookup
- DirectoryBackend / EmbeddedBackend: the two storage backends
- build_embedded_dataset / write_embedded_dataset: the packaged dataset
- create_catalog / detect_catalog_mode: one-time backend selection
"""

from codekit.catalog.backends import CatalogBackend, DirectoryBackend, EmbeddedBackend
from codekit.catalog.dataset import build_embedded_dataset, load_embedded_dataset, write_embedded_dataset
from codekit.catalog.loader import TemplateCatalog, create_catalog, detect_catalog_mode
from codekit.catalog.manifest import Manifest, ManifestEntry

__all__ = [
    "CatalogBackend",
    "DirectoryBackend",
    "EmbeddedBackend",
    "build_embedded_dataset",
    "load_embedded_dataset",
    "write_embedded_dataset",
    "TemplateCatalog",
    "create_catalog",
    "detect_catalog_mode",
    "Manifest",
    "ManifestEntry",
]
