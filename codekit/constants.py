"""Centralized constants for the codekit package."""

# Tool directory name - used for .claude/ paths
TOOL_DIR_NAME = ".claude"

# Gemini Antigravity reads mirrored skills from these directories
GEMINI_DIR_NAME = ".agent"
GEMINI_GLOBAL_DIR_NAME = ".gemini/antigravity"

# Subdirectory names for different resource kinds
AGENTS_SUBDIR = "agents"
SKILLS_SUBDIR = "skills"
COMMANDS_SUBDIR = "commands"

# File that identifies a skill directory
SKILL_MARKER = "SKILL.md"

# Catalog index file, one per resource kind
MANIFEST_FILENAME = "index.json"
DEFAULT_MANIFEST_VERSION = "1.0.0"

# Persisted list of external skill sources
SOURCES_CONFIG_FILENAME = "sources.toml"

# Packaged catalog dataset used instead of the templates/ tree when present
EMBEDDED_DATASET_FILENAME = "_templates.json"

# Files and directories never copied out of a synced source
SYNC_EXCLUDED_FILES = frozenset({"AGENTS.md", "README.md", "metadata.json"})
SYNC_EXCLUDED_DIRS = frozenset({"agents"})
SYNC_EXCLUDED_EXTENSIONS = frozenset({".zip"})
