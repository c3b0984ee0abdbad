# DEEZ Git Module
# Git operations for remote roots

from deez.git.operations import (
    GitError,
    clone_repo,
    get_head_commit,
)

__all__ = [
    "GitError",
    "clone_repo",
    "get_head_commit",
]
