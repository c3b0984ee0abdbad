# DEEZ Path Utilities
# Safe file operations with atomic writes

import os
import shutil
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_real_dir(path: Path) -> bool:
    """Check if path is a directory and not a symlink to one."""
    return path.is_dir() and not path.is_symlink()


def safe_copy(source: Path, dest: Path, *, preserve_metadata: bool = True) -> None:
    """
    Atomically copy file content to dest.

    Symlinks at source are followed. A symlink at dest is replaced by
    a regular file instead of having its target overwritten. Uses a
    temporary file and atomic rename to prevent partial copies.

    Args:
        source: Source file.
        dest: Destination file.
        preserve_metadata: Whether to preserve file metadata (default True).

    Raises:
        FileNotFoundError: If source doesn't exist.
        IsADirectoryError: If source or dest is a directory.
    """
    if not source.exists():
        raise FileNotFoundError(f"Source does not exist: {source}")
    if source.is_dir():
        raise IsADirectoryError(f"Source is a directory: {source}")
    if is_real_dir(dest):
        raise IsADirectoryError(f"Destination is a directory: {dest}")

    ensure_dir(dest.parent)

    # Temp file in the same directory for atomic rename
    temp_dest = dest.with_name(f".{dest.name}.tmp.{os.getpid()}")
    try:
        if preserve_metadata:
            shutil.copy2(source, temp_dest)
        else:
            shutil.copyfile(source, temp_dest)
        # Replaces a symlink entry itself, not its target
        os.replace(temp_dest, dest)
    except OSError:
        # Cleanup on failure
        if temp_dest.exists():
            temp_dest.unlink()
        raise


def create_symlink(target: Path, dest: Path) -> None:
    """
    Create or replace a symlink at dest pointing to target.

    Args:
        target: Absolute path the link points to.
        dest: Path of the link to create.

    Raises:
        IsADirectoryError: If dest is a directory.
    """
    if is_real_dir(dest):
        raise IsADirectoryError(f"Destination is a directory: {dest}")

    ensure_dir(dest.parent)

    # `exists()` is False for broken links, so check both
    if dest.is_symlink() or dest.exists():
        dest.unlink()

    os.symlink(target, dest)


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Delete a file or symlink. Directories are never removed.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
        IsADirectoryError: If path is a directory.
    """
    if not path.is_symlink() and not path.exists():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    if is_real_dir(path):
        raise IsADirectoryError(f"Path is a directory: {path}")

    path.unlink()
    return True


def prune_empty_parents(path: Path, stop: Path) -> list[Path]:
    """
    Remove empty parent directories of path, up to but excluding stop.

    Args:
        path: Path whose parents are candidates for removal.
        stop: Directory at which to stop (never removed).

    Returns:
        List of removed directories, innermost first.
    """
    removed: list[Path] = []

    for parent in path.parents:
        if parent == stop or stop not in parent.parents:
            break
        try:
            parent.rmdir()
        except OSError:
            # Not empty (or not removable), nothing above can be empty
            break
        removed.append(parent)

    return removed
