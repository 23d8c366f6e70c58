"""Runtime settings for codekit.

Settings are resolved once per invocation and passed down explicitly, so
tests can build isolated settings pointing at temporary directories.

Environment variables:
    CODEKIT_TEMPLATES_DIR: catalog directory (defaults to the packaged templates/)
    CODEKIT_SOURCES_DIR: clones and sources.toml (defaults to ~/.codekit/sources)
    CODEKIT_CATALOG: "directory" or "embedded" to force a catalog backend
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from codekit.constants import SOURCES_CONFIG_FILENAME
from codekit.exceptions import SettingsError

PACKAGE_DIR = Path(__file__).parent
DEFAULT_TEMPLATES_DIR = PACKAGE_DIR / "templates"


class CatalogMode(Enum):
    """Backend used to read the template catalog."""

    DIRECTORY = "directory"
    EMBEDDED = "embedded"


@dataclass
class Settings:
    """Paths and modes for one codekit invocation."""

    project_root: Path = field(default_factory=Path.cwd)
    home: Path = field(default_factory=Path.home)
    templates_dir: Path = DEFAULT_TEMPLATES_DIR
    sources_dir: Path | None = None
    catalog_mode: CatalogMode | None = None  # None means detect at startup

    def __post_init__(self) -> None:
        if self.sources_dir is None:
            self.sources_dir = self.home / ".codekit" / "sources"

    @property
    def sources_config_path(self) -> Path:
        return self.sources_dir / SOURCES_CONFIG_FILENAME

    @classmethod
    def from_env(cls, project_root: Path | None = None) -> "Settings":
        """Build settings from the environment.

        Raises:
            SettingsError: If CODEKIT_CATALOG holds an unknown mode
        """
        templates_dir = os.environ.get("CODEKIT_TEMPLATES_DIR")
        sources_dir = os.environ.get("CODEKIT_SOURCES_DIR")
        mode = os.environ.get("CODEKIT_CATALOG", "").strip().lower()

        catalog_mode = None
        if mode:
            try:
                catalog_mode = CatalogMode(mode)
            except ValueError:
                raise SettingsError(
                    f"Invalid CODEKIT_CATALOG '{mode}'. Must be 'directory' or 'embedded'"
                ) from None

        return cls(
            project_root=project_root or Path.cwd(),
            templates_dir=Path(templates_dir).expanduser() if templates_dir else DEFAULT_TEMPLATES_DIR,
            sources_dir=Path(sources_dir).expanduser() if sources_dir else None,
            catalog_mode=catalog_mode,
        )
