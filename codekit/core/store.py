"""Filesystem operations for installed resources.

The store knows where each kind lives in the project and global scopes and
performs the writes and deletes for one resource at a time. Writes go to a
temporary sibling first and are renamed into place, so an interrupted
install never leaves a half-written file behind.
"""

import os
import shutil
import tempfile
from pathlib import Path

from codekit import logger
from codekit.core.resource import ResourceKind
from codekit.core.tool import ToolSpec

TEMP_PREFIX = ".codekit-"


class ResourceStore:
    """Locate, write and delete installed resources by scope."""

    def __init__(self, tool: ToolSpec, project_root: Path, home: Path) -> None:
        self._tool = tool
        self._project_root = project_root
        self._home = home

    @property
    def tool(self) -> ToolSpec:
        return self._tool

    def resource_dir(self, kind: ResourceKind, global_install: bool = False) -> Path:
        """Get the directory holding a kind in the project or global scope."""
        scope_root = self._home if global_install else self._project_root
        return self._tool.get_resource_dir(scope_root, kind, global_install)

    def exists(self, path: Path) -> bool:
        return path.exists() or path.is_symlink()

    def write_file(self, path: Path, content: str | bytes) -> None:
        """Write a file atomically, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def staging_dir(self, target: Path) -> Path:
        """Create an empty temporary directory next to a target directory."""
        target.parent.mkdir(parents=True, exist_ok=True)
        staged = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX, dir=target.parent))
        staged.chmod(0o755)
        return staged

    def replace_dir(self, staged: Path, target: Path) -> None:
        """Move a staged directory into place, replacing any existing one."""
        if self.exists(target):
            self.delete(target)
        os.replace(staged, target)

    def delete(self, path: Path) -> None:
        """Delete a file or a whole directory.

        Directories are renamed aside before removal so a partially deleted
        tree never sits at the resource's own path.
        """
        if path.is_dir() and not path.is_symlink():
            graveyard = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX, dir=path.parent))
            os.replace(path, graveyard / path.name)
            shutil.rmtree(graveyard)
        else:
            path.unlink()

    def prune_empty_parents(self, path: Path, stop_at: Path) -> None:
        """Remove now-empty parent directories up to (not including) stop_at.

        Best effort: cleanup errors are ignored.
        """
        current = path.parent
        try:
            while current != stop_at and stop_at in current.parents:
                if any(current.iterdir()):
                    break
                current.rmdir()
                current = current.parent
        except OSError as e:
            logger.debug(f"Could not clean up {current}: {e}")
