"""Core abstractions for codekit.

- ResourceKind / ResourceScope: what a resource is and where it was found
- ResourceSpec / Resource: per-kind rules and parsed resource instances
- ToolSpec / ToolResourceConfig: how Claude Code lays out installed resources

Resolvers live in their own modules (codekit.core.resolver, agents,
commands, skills) and are shared through codekit.core.registry.
"""

from codekit.core.resource import (
    Resource,
    ResourceKind,
    ResourceListResult,
    ResourceScope,
    ResourceSpec,
)
from codekit.core.specs import (
    AGENT_SPEC,
    CLAUDE_SPEC,
    COMMAND_SPEC,
    SKILL_SPEC,
    get_resource_spec,
)
from codekit.core.tool import ToolResourceConfig, ToolSpec

__all__ = [
    "Resource",
    "ResourceKind",
    "ResourceListResult",
    "ResourceScope",
    "ResourceSpec",
    "AGENT_SPEC",
    "CLAUDE_SPEC",
    "COMMAND_SPEC",
    "SKILL_SPEC",
    "get_resource_spec",
    "ToolResourceConfig",
    "ToolSpec",
]
