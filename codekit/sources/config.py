"""Configuration management for sources.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomli_w

from codekit.exceptions import ConfigParseError


@dataclass
class SourceConfig:
    """An external git repository that publishes skills.

    Example:
        [[sources]]
        name = "anthropic-skills"
        url = "https://github.com/anthropics/skills.git"
        branch = "main"
        skills_dir = "skills"
        exclude = ["internal/"]
        default_category = "community"

        [sources.category_mapping]
        pdf = "documents"
    """

    name: str
    url: str
    branch: str = "main"
    skills_dir: str = "skills"
    exclude: list[str] = field(default_factory=list)
    category_mapping: dict[str, str] = field(default_factory=dict)
    default_category: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceConfig":
        """Create a SourceConfig from a TOML table.

        Raises:
            ConfigParseError: If a required field is missing or mistyped
        """
        for key in ("name", "url"):
            if not isinstance(data.get(key), str) or not data[key]:
                raise ConfigParseError(f"Source entry missing required '{key}' field")

        exclude = data.get("exclude", [])
        if not isinstance(exclude, list):
            raise ConfigParseError(f"Source '{data['name']}' has non-list 'exclude'")
        mapping = data.get("category_mapping", {})
        if not isinstance(mapping, dict):
            raise ConfigParseError(f"Source '{data['name']}' has non-table 'category_mapping'")

        return cls(
            name=data["name"],
            url=data["url"],
            branch=data.get("branch") or "main",
            skills_dir=data.get("skills_dir") or "skills",
            exclude=[str(e) for e in exclude],
            category_mapping={str(k): str(v) for k, v in mapping.items()},
            default_category=data.get("default_category"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dict."""
        result: dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "branch": self.branch,
            "skills_dir": self.skills_dir,
            "exclude": list(self.exclude),
        }
        if self.default_category:
            result["default_category"] = self.default_category
        result["category_mapping"] = dict(self.category_mapping)
        return result


@dataclass
class SourcesConfig:
    """The persisted list of sources."""

    path: Path
    sources: list[SourceConfig] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "SourcesConfig":
        """Load sources.toml.

        A missing file is an empty source list.

        Raises:
            ConfigParseError: If the file cannot be parsed
        """
        if not path.exists():
            return cls(path=path)

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

        entries = data.get("sources", [])
        if not isinstance(entries, list):
            raise ConfigParseError(f"Failed to parse {path}: 'sources' must be an array of tables")

        sources = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ConfigParseError(
                    f"Source entry must be a table, got {type(entry).__name__}"
                )
            sources.append(SourceConfig.from_dict(entry))
        return cls(path=path, sources=sources)

    def save(self) -> None:
        """Save the source list, creating the parent directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"sources": [source.to_dict() for source in self.sources]}
        with open(self.path, "wb") as f:
            tomli_w.dump(data, f)

    def get(self, name: str) -> SourceConfig | None:
        for source in self.sources:
            if source.name == name:
                return source
        return None

    @property
    def names(self) -> set[str]:
        return {source.name for source in self.sources}
