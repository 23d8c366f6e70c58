"""Storage backends for the template catalog.

Keys are posix paths relative to the catalog root, e.g.
``skills/code-review/SKILL.md`` or ``agents/index.json``.
"""

from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable

from codekit.catalog.dataset import load_embedded_dataset


@runtime_checkable
class CatalogBackend(Protocol):
    """Read-only key to content storage behind the catalog."""

    @property
    def root(self) -> Path | None:
        """Directory on disk, or None when the content is embedded."""
        ...

    def exists(self, key: str) -> bool:
        ...

    def read_text(self, key: str) -> str:
        """Read a key as text.

        Raises:
            FileNotFoundError: If the key does not exist
        """
        ...

    def read_bytes(self, key: str) -> bytes:
        ...

    def list_keys(self, prefix: str) -> list[str]:
        """List every file key under a directory prefix (ending with '/')."""
        ...


class DirectoryBackend:
    """Catalog backed by a live templates/ directory tree."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path | None:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root.joinpath(*key.split("/"))

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def read_text(self, key: str) -> str:
        return self._path(key).read_text(encoding="utf-8")

    def read_bytes(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def list_keys(self, prefix: str) -> list[str]:
        base = self._path(prefix.rstrip("/"))
        if not base.is_dir():
            return []
        return sorted(
            f"{prefix}{path.relative_to(base).as_posix()}"
            for path in base.rglob("*")
            if path.is_file()
        )


class EmbeddedBackend:
    """Catalog backed by a precomputed, order-preserving key to content map.

    Values are str for text files and bytes for binary ones.
    """

    def __init__(self, entries: Mapping[str, str | bytes]) -> None:
        self._entries = dict(entries)

    @property
    def root(self) -> Path | None:
        return None

    def exists(self, key: str) -> bool:
        return key in self._entries

    def _get(self, key: str) -> str | bytes:
        try:
            return self._entries[key]
        except KeyError:
            raise FileNotFoundError(key) from None

    def read_text(self, key: str) -> str:
        value = self._get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def read_bytes(self, key: str) -> bytes:
        value = self._get(key)
        if isinstance(value, bytes):
            return value
        return value.encode("utf-8")

    def list_keys(self, prefix: str) -> list[str]:
        return [key for key in self._entries if key.startswith(prefix)]

    @classmethod
    def from_file(cls, path: Path) -> "EmbeddedBackend":
        """Load a dataset written by write_embedded_dataset()."""
        return cls(load_embedded_dataset(path))

