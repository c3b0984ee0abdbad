# DEEZ Hashing Utilities
# Content comparison for status detection

import hashlib
from pathlib import Path

CHUNK_SIZE = 65536


def file_hash(path: Path, *, algorithm: str = "sha256") -> str | None:
    """
    Hex digest of a file's content, symlinks followed.

    Returns None when path is not a regular file (missing, directory,
    dangling link).
    """
    if not path.is_file():
        return None

    hasher = hashlib.new(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def files_equal(path1: Path, path2: Path) -> bool:
    """
    Compare two files byte for byte.

    Sizes are compared first so that most modified files are detected
    without reading them.

    Raises:
        OSError: If either file cannot be read.
    """
    if path1.stat().st_size != path2.stat().st_size:
        return False
    return file_hash(path1) == file_hash(path2)
