"""DEEZ - Dotfiles synchronization between a config root and Home.

Copies, links, compares and cleans the files of a config root (a local
directory or a remote git repository) against the user's Home directory,
running pre/post hooks around each command.
"""

__version__ = "0.4.0"

__all__ = [
    "__version__",
    "Command",
    "SyncEngine",
    "RootResolver",
    "DeezError",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("Command", "SyncEngine", "RootResolver"):
        from deez import sync

        return getattr(sync, name)
    if name == "DeezError":
        from deez.errors import DeezError

        return DeezError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
