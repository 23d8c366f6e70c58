"""Tool specification definitions.

This module defines how a host tool (Claude Code, or a tool that mirrors
its skills) lays out installed resources in a project and in the user's
home directory.
"""

from dataclasses import dataclass
from pathlib import Path

from codekit.core.resource import ResourceKind


@dataclass(frozen=True)
class ToolResourceConfig:
    """Configuration for how a tool stores a specific resource kind."""

    subdir: str  # e.g., "skills", "agents", "commands"


@dataclass(frozen=True)
class ToolSpec:
    """Specification for the tool that reads installed resources.

    Defines where each resource kind lives under a scope root.
    """

    name: str  # e.g., "claude"
    config_dir: str  # e.g., ".claude"
    resource_configs: dict[ResourceKind, ToolResourceConfig]
    global_config_dir: str | None = None  # under home; defaults to config_dir

    def supports_resource(self, kind: ResourceKind) -> bool:
        """Check if this tool supports a resource kind.

        Args:
            kind: The resource kind to check

        Returns:
            True if the tool supports this kind
        """
        return kind in self.resource_configs

    def get_resource_dir(self, scope_root: Path, kind: ResourceKind, global_install: bool = False) -> Path:
        """Get the directory for a resource kind under a scope root.

        Args:
            scope_root: Project root or home directory
            kind: The resource kind
            global_install: scope_root is the home directory

        Returns:
            Path to the resource directory

        Raises:
            ValueError: If the tool doesn't support this resource kind
        """
        if kind not in self.resource_configs:
            raise ValueError(
                f"Tool '{self.name}' does not support resource kind '{kind.value}'"
            )
        config = self.resource_configs[kind]
        config_dir = self.config_dir
        if global_install and self.global_config_dir:
            config_dir = self.global_config_dir
        return scope_root / config_dir / config.subdir
