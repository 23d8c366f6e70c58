"""Shared exception classes for codekit."""


class CodekitError(Exception):
    """Base exception for codekit errors."""


class TemplateNotFoundError(CodekitError):
    """Raised when a template is not in the catalog."""

    def __init__(self, message: str, suggestions: list[str] | None = None) -> None:
        super().__init__(message)
        self.suggestions = suggestions or []


class ResourceExistsError(CodekitError):
    """Raised when the resource already exists at the install target."""


class ResourceNotInstalledError(CodekitError):
    """Raised when removing a resource that is not installed."""


class InvalidTemplateError(CodekitError):
    """Raised when a template's header block fails validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class FrontmatterError(CodekitError):
    """Raised when a markdown file has a missing or malformed header block."""


class SourceNotFoundError(CodekitError):
    """Raised when a source name is not configured."""


class DuplicateSourceError(CodekitError):
    """Raised when adding a source whose name already exists."""


class SourceNotClonedError(CodekitError):
    """Raised when syncing a source that has not been pulled yet."""


class GitCommandError(CodekitError):
    """Raised when a git subprocess exits non-zero."""

    def __init__(self, message: str, stderr: str = "", returncode: int | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class ConfigParseError(CodekitError):
    """Raised when sources.toml cannot be parsed."""


class SettingsError(CodekitError):
    """Raised when an environment variable holds an invalid setting."""
