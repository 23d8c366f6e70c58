"""Built-in resource and tool specifications.

- AGENT_SPEC, SKILL_SPEC, COMMAND_SPEC: one per resource kind
- CLAUDE_SPEC: Claude Code layout of installed resources
- GEMINI_SPEC: Gemini Antigravity layout; skills are mirrored there
"""

from codekit.constants import (
    AGENTS_SUBDIR,
    COMMANDS_SUBDIR,
    GEMINI_DIR_NAME,
    GEMINI_GLOBAL_DIR_NAME,
    SKILL_MARKER,
    SKILLS_SUBDIR,
    TOOL_DIR_NAME,
)
from codekit.core.resource import ResourceKind, ResourceSpec
from codekit.core.tool import ToolResourceConfig, ToolSpec
from codekit.frontmatter import (
    validate_agent_frontmatter,
    validate_command_frontmatter,
    validate_skill_frontmatter,
)

AGENT_SPEC = ResourceSpec(
    kind=ResourceKind.AGENT,
    is_directory=False,
    file_extension=".md",
    marker_file=None,
    validator=validate_agent_frontmatter,
)

SKILL_SPEC = ResourceSpec(
    kind=ResourceKind.SKILL,
    is_directory=True,
    file_extension=".md",
    marker_file=SKILL_MARKER,
    validator=validate_skill_frontmatter,
)

COMMAND_SPEC = ResourceSpec(
    kind=ResourceKind.COMMAND,
    is_directory=False,
    file_extension=".md",
    marker_file=None,
    validator=validate_command_frontmatter,
)

RESOURCE_SPECS: dict[ResourceKind, ResourceSpec] = {
    ResourceKind.AGENT: AGENT_SPEC,
    ResourceKind.SKILL: SKILL_SPEC,
    ResourceKind.COMMAND: COMMAND_SPEC,
}


CLAUDE_SPEC = ToolSpec(
    name="claude",
    config_dir=TOOL_DIR_NAME,
    resource_configs={
        ResourceKind.AGENT: ToolResourceConfig(subdir=AGENTS_SUBDIR),
        ResourceKind.SKILL: ToolResourceConfig(subdir=SKILLS_SUBDIR),
        ResourceKind.COMMAND: ToolResourceConfig(subdir=COMMANDS_SUBDIR),
    },
)

GEMINI_SPEC = ToolSpec(
    name="gemini",
    config_dir=GEMINI_DIR_NAME,
    global_config_dir=GEMINI_GLOBAL_DIR_NAME,
    resource_configs={
        ResourceKind.SKILL: ToolResourceConfig(subdir=SKILLS_SUBDIR),
    },
)

# Tools that receive a best-effort copy of every install
MIRROR_SPECS: tuple[ToolSpec, ...] = (GEMINI_SPEC,)


def get_resource_spec(kind: ResourceKind) -> ResourceSpec:
    """Get the specification for a resource kind."""
    return RESOURCE_SPECS[kind]
