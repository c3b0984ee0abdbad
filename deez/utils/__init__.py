# DEEZ Utilities Module
# Helper functions for paths, content hashing and platform detection

from deez.utils.hashing import (
    file_hash,
    files_equal,
)
from deez.utils.paths import (
    create_symlink,
    ensure_dir,
    is_real_dir,
    prune_empty_parents,
    safe_copy,
    safe_delete,
)
from deez.utils.platform import (
    default_shell,
    get_current_platform,
    get_home_directory,
    is_windows,
)

__all__ = [
    # Platform
    "get_current_platform",
    "get_home_directory",
    "is_windows",
    "default_shell",
    # Paths
    "ensure_dir",
    "is_real_dir",
    "safe_copy",
    "create_symlink",
    "safe_delete",
    "prune_empty_parents",
    # Hashing
    "file_hash",
    "files_equal",
]
