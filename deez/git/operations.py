# DEEZ Git Operations
# Git command execution for fetching remote roots

import subprocess
from pathlib import Path
from typing import Optional

GIT = "git"


class GitError(Exception):
    """A git invocation failed or git is not installed."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.message = message
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)

    @classmethod
    def from_process(cls, result: subprocess.CompletedProcess) -> "GitError":
        subcommand = result.args[1] if len(result.args) > 1 else GIT
        return cls(
            f"'git {subcommand}' exited with status {result.returncode}",
            returncode=result.returncode,
            stderr=(result.stderr or "").strip(),
        )


def _run_git(
    *args: str,
    cwd: Optional[Path] = None,
    check: bool = True,
    capture_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Run git with the given arguments.

    With capture_output off, git writes straight to the terminal, and
    the error carries no stderr.

    Raises:
        GitError: If git is missing, or exits non-zero while check is set.
    """
    try:
        result = subprocess.run(
            [GIT, *args],
            cwd=cwd,
            check=False,
            capture_output=capture_output,
            text=True,
        )
    except FileNotFoundError as e:
        raise GitError("Did not find the 'git' executable. Is Git installed and in PATH?") from e

    if check and result.returncode != 0:
        raise GitError.from_process(result)
    return result


def clone_repo(url: str, dest: Path, *, quiet: bool = True) -> None:
    """
    Shallow-clone url into dest, which must not exist or be empty.

    Only the tip of the default branch is fetched, without tags.

    Args:
        url: Anything `git clone` accepts.
        dest: Destination directory.
        quiet: Hide git's progress output.

    Raises:
        GitError: If git is missing or the clone fails.
    """
    options = ["--single-branch", "--depth=1", "--no-tags"]
    if quiet:
        options.append("--quiet")

    _run_git("clone", *options, url, str(dest), capture_output=quiet)


def get_head_commit(path: Path) -> Optional[str]:
    """Get the commit checked out at path, or None outside a repository."""
    try:
        return _run_git("rev-parse", "HEAD", cwd=path).stdout.strip() or None
    except GitError:
        return None
