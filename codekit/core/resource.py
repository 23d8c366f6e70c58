"""Resource kind definitions and specifications.

This module defines the core abstractions for resources (agents, skills,
commands) that codekit installs from its catalog.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from codekit.frontmatter import ValidationResult


class ResourceKind(Enum):
    """Resource kinds supported by codekit.

    The value doubles as the subtree name in the catalog and in every
    scope root.
    """

    AGENT = "agents"
    SKILL = "skills"
    COMMAND = "commands"

    @property
    def singular(self) -> str:
        return self.value[:-1]


class ResourceScope(Enum):
    """Where a resource was read from."""

    BUNDLED = "bundled"
    PROJECT = "project"
    GLOBAL = "global"


@dataclass(frozen=True)
class ResourceSpec:
    """Specification for a resource kind.

    Defines how a kind is laid out on disk and how its header block is
    validated.
    """

    kind: ResourceKind
    is_directory: bool  # True for skills (directories), False for single files
    file_extension: str  # e.g., ".md"
    marker_file: str | None  # e.g., "SKILL.md" for directory resources
    validator: Callable[[dict[str, Any]], ValidationResult]

    def validate(self, frontmatter: dict[str, Any]) -> ValidationResult:
        """Validate a header block against this kind's rules."""
        return self.validator(frontmatter)

    def is_valid_resource(self, path: Path) -> bool:
        """Check if a path is a valid resource of this kind.

        Args:
            path: Path to check

        Returns:
            True if the path is a valid resource
        """
        if self.is_directory:
            if not path.is_dir():
                return False
            return (path / self.marker_file).exists()
        return path.is_file() and path.suffix == self.file_extension


@dataclass
class Resource:
    """A parsed resource from the catalog or an installed scope."""

    kind: ResourceKind
    frontmatter: dict[str, Any]
    content: str
    path: Path
    relative_path: str
    scope: ResourceScope
    files: list[str] = field(default_factory=list)
    catalog_category: str | None = None

    @property
    def name(self) -> str:
        """Identity within the kind.

        Commands are identified by their path under the commands root
        (``git/commit``); agents and skills by their header ``name``. A
        skill without one falls back to its directory name.
        """
        if self.kind is ResourceKind.COMMAND:
            return str(PurePosixPath(self.relative_path).with_suffix(""))
        name = self.frontmatter.get("name")
        if not name and self.kind is ResourceKind.SKILL:
            return PurePosixPath(self.relative_path).name
        return str(name or "")

    @property
    def description(self) -> str:
        return str(self.frontmatter.get("description") or "")

    @property
    def category(self) -> str | None:
        value = self.frontmatter.get("category")
        if value:
            return str(value)
        return self.catalog_category

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "scope": self.scope.value,
            "path": str(self.path),
            "frontmatter": self.frontmatter,
        }
        if self.files:
            data["files"] = self.files
        return data


@dataclass
class ResourceListResult:
    """Resources of one kind grouped by scope."""

    bundled: list[Resource] = field(default_factory=list)
    project: list[Resource] = field(default_factory=list)
    global_: list[Resource] = field(default_factory=list)

    @property
    def installed(self) -> list[Resource]:
        return self.project + self.global_

    def to_dict(self) -> dict[str, Any]:
        return {
            "bundled": [r.to_dict() for r in self.bundled],
            "project": [r.to_dict() for r in self.project],
            "global": [r.to_dict() for r in self.global_],
        }
