"""Git subprocess integration for cloning and updating sources."""

import subprocess
from pathlib import Path

from codekit import logger
from codekit.exceptions import GitCommandError


def run_git(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
    """Run a git command and capture its output.

    No timeout is imposed; a slow clone runs until git finishes or the user
    interrupts it, which kills the child. Whatever it wrote stays on disk.

    Raises:
        GitCommandError: If git is missing or exits non-zero.
            The message carries git's stderr verbatim.
    """
    command = ["git", *args]
    logger.debug(f"Running {' '.join(command)}")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise GitCommandError("git is not installed or not on PATH") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitCommandError(
            f"git {args[0]} failed: {stderr}",
            stderr=result.stderr,
            returncode=result.returncode,
        )
    return result


def clone(url: str, dest: Path, branch: str | None = None) -> None:
    """Shallow-clone a repository into dest."""
    args = ["clone", "--depth", "1"]
    if branch:
        args.extend(["--branch", branch])
    args.extend([url, str(dest)])
    run_git(args)


def pull(repo_dir: Path) -> None:
    """Fast-forward an existing clone."""
    run_git(["pull", "--ff-only"], cwd=repo_dir)


def is_cloned(repo_dir: Path) -> bool:
    return (repo_dir / ".git" / "HEAD").exists()
