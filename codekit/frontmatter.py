"""Header block (YAML frontmatter) parsing and per-kind validation.

Resource files start with a ``---`` delimited YAML block followed by a
free-text body::

    ---
    name: typescript-expert
    description: TypeScript type system help
    ---
    Body text here

Unknown keys are kept as-is so kinds can carry extension fields.
"""

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from codekit.exceptions import FrontmatterError

FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n(.*))?$", re.DOTALL)

SKILL_NAME_MAX_LENGTH = 64
SKILL_DESCRIPTION_MAX_LENGTH = 1024
SKILL_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
RESERVED_WORDS = ("anthropic", "claude")


@dataclass
class ParsedMarkdown:
    """A markdown document split into header block and body."""

    frontmatter: dict[str, Any]
    content: str


@dataclass
class ValidationResult:
    """Outcome of validating a header block."""

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def parse_markdown_with_frontmatter(markdown: str) -> ParsedMarkdown:
    """Split a markdown document into its YAML header and body.

    Args:
        markdown: Full file content

    Returns:
        ParsedMarkdown with the header mapping and the stripped body

    Raises:
        FrontmatterError: If the header block is missing or not a YAML mapping
    """
    text = markdown.replace("\r\n", "\n")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        raise FrontmatterError("Invalid markdown: missing YAML frontmatter")

    yaml_content, body = match.group(1), match.group(2) or ""

    try:
        frontmatter = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Failed to parse YAML frontmatter: {e}") from e

    if frontmatter is None:
        frontmatter = {}
    if not isinstance(frontmatter, dict):
        raise FrontmatterError("YAML frontmatter must be a mapping")

    return ParsedMarkdown(frontmatter=frontmatter, content=body.strip())


def serialize_markdown_with_frontmatter(frontmatter: dict[str, Any], content: str) -> str:
    """Render a header mapping and body back into a markdown document."""
    yaml_content = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True).strip()
    return f"---\n{yaml_content}\n---\n\n{content}"


def _require_string(frontmatter: dict[str, Any], key: str, result: ValidationResult) -> str | None:
    value = frontmatter.get(key)
    if not value or not isinstance(value, str):
        result.errors.append(f"Missing required field: {key}")
        return None
    return value


def validate_agent_frontmatter(frontmatter: dict[str, Any]) -> ValidationResult:
    """Agents need a name and a description."""
    result = ValidationResult()
    _require_string(frontmatter, "name", result)
    _require_string(frontmatter, "description", result)
    return result


def validate_command_frontmatter(frontmatter: dict[str, Any]) -> ValidationResult:
    """Commands are identified by path, so only a description is required."""
    result = ValidationResult()
    _require_string(frontmatter, "description", result)
    return result


def validate_skill_frontmatter(frontmatter: dict[str, Any]) -> ValidationResult:
    """Skills have stricter naming rules than the other kinds.

    The name must be at most 64 characters, use only lowercase letters,
    digits and hyphens, and avoid the reserved words. The description is
    limited to 1024 characters.
    """
    result = ValidationResult()

    name = _require_string(frontmatter, "name", result)
    if name is not None:
        if len(name) > SKILL_NAME_MAX_LENGTH:
            result.errors.append(f"name must be {SKILL_NAME_MAX_LENGTH} characters or less")
        if not SKILL_NAME_PATTERN.match(name):
            result.errors.append("name must contain only lowercase letters, numbers, and hyphens")
        if any(word in name for word in RESERVED_WORDS):
            reserved = ", ".join(f"'{word}'" for word in RESERVED_WORDS)
            result.errors.append(f"name cannot contain reserved words: {reserved}")

    description = _require_string(frontmatter, "description", result)
    if description is not None and len(description) > SKILL_DESCRIPTION_MAX_LENGTH:
        result.errors.append(
            f"description must be {SKILL_DESCRIPTION_MAX_LENGTH} characters or less"
        )

    return result
