"""Catalog index records (index.json per resource kind)."""

from dataclasses import dataclass, field
from typing import Any

from codekit.constants import DEFAULT_MANIFEST_VERSION

_KNOWN_KEYS = {
    "name",
    "path",
    "description",
    "displayName",
    "category",
    "tags",
    "dependencies",
    "source",
}


@dataclass
class ManifestEntry:
    """A catalog record for one installable template.

    Example:
        {
          "name": "typescript-expert",
          "path": "typescript-expert.md",
          "displayName": "TypeScript Expert",
          "category": "typescript",
          "description": "Type system help",
          "dependencies": ["nodejs-expert"]
        }

    Entries written by the source synchronizer carry ``source``; entries
    without it are manually curated.
    """

    name: str
    path: str
    description: str = ""
    display_name: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    dependencies: list[str] = field(default_factory=list)
    source: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ManifestEntry":
        """Create a ManifestEntry from a JSON dict entry.

        Raises:
            ValueError: If the entry is not an object or has no name
        """
        if not isinstance(data, dict):
            raise ValueError(f"Manifest entry must be an object, got {type(data).__name__}")
        if not data.get("name"):
            raise ValueError("Manifest entry missing required 'name' field")
        name = str(data["name"])
        tags = data.get("tags")
        return cls(
            name=name,
            path=str(data.get("path") or name),
            description=str(data.get("description") or ""),
            display_name=data.get("displayName"),
            category=data.get("category"),
            tags=[str(t) for t in tags] if tags else None,
            dependencies=[str(d) for d in data.get("dependencies") or []],
            source=data.get("source"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        result: dict[str, Any] = {"name": self.name, "path": self.path}
        if self.display_name:
            result["displayName"] = self.display_name
        if self.category:
            result["category"] = self.category
        result["description"] = self.description
        result["dependencies"] = list(self.dependencies)
        if self.tags:
            result["tags"] = list(self.tags)
        if self.source:
            result["source"] = self.source
        result.update(self.extra)
        return result


@dataclass
class Manifest:
    """The catalog index for one resource kind."""

    version: str = DEFAULT_MANIFEST_VERSION
    resources: list[ManifestEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Manifest":
        """Create a Manifest from parsed index.json content.

        Raises:
            ValueError: If the document is not a manifest
        """
        if not isinstance(data, dict):
            raise ValueError("Manifest must be a JSON object")
        resources = data.get("resources") or []
        if not isinstance(resources, list):
            raise ValueError("Manifest 'resources' must be a list")
        return cls(
            version=str(data.get("version") or DEFAULT_MANIFEST_VERSION),
            resources=[ManifestEntry.from_dict(entry) for entry in resources],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "resources": [entry.to_dict() for entry in self.resources],
        }

    def find(self, name: str) -> ManifestEntry | None:
        for entry in self.resources:
            if entry.name == name:
                return entry
        return None
