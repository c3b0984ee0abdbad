# DEEZ Root Resolution
# Locate the config root: remote clone, explicit path, or marker search

import atexit
import functools
import os
import shutil
import signal
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from deez.errors import RemoteFetchFailed, RootNotFound
from deez.git import GitError, clone_repo, get_head_commit
from deez.sync.walk import MARKER_FILE

ROOT_ENV = "DEEZ_ROOT"

REMOTE_PREFIXES = ("git:", "ssh://", "git@", "https://", "http://")
GITHUB_SHORTHAND = "gh:"
GITHUB_SSH = "git@github.com:"


@dataclass(frozen=True)
class ConfigRoot:
    """
    A resolved root directory.

    Attributes:
        path: Absolute path of the root.
        trusted: Whether the marker file is present at its top level.
        remote: Locator the root was cloned from, if any.
        revision: Commit checked out for remote roots.
    """

    path: Path
    trusted: bool
    remote: Optional[str] = None
    revision: Optional[str] = None

    @property
    def is_remote(self) -> bool:
        return self.remote is not None


def is_config_root(path: Path) -> bool:
    """Check if a directory carries the marker file."""
    return (path / MARKER_FILE).is_file()


def expand_shorthand(locator: str) -> str:
    """Rewrite `gh:<owner>/<repo>` into an SSH GitHub locator."""
    if locator.startswith(GITHUB_SHORTHAND):
        return GITHUB_SSH + locator[len(GITHUB_SHORTHAND) :]
    return locator


def is_remote_locator(arg: str) -> bool:
    """Check if a root argument designates a remote repository."""
    return expand_shorthand(arg).startswith(REMOTE_PREFIXES)


def split_sub_root(locator: str) -> tuple[str, Optional[str]]:
    """
    Split an optional `[sub/dir]` suffix off a remote locator.

    Examples:
        >>> split_sub_root("gh:user/dots[home/linux]")
        ('gh:user/dots', 'home/linux')
        >>> split_sub_root("gh:user/dots")
        ('gh:user/dots', None)
    """
    locator = locator.strip()
    if not locator.endswith("]"):
        return locator, None

    start = locator.rfind("[")
    if start == -1:
        return locator, None

    sub_root = locator[start + 1 : -1].strip().lstrip("/").strip()
    return locator[:start].strip(), sub_root or None


def clone_url(locator: str) -> str:
    """Get the URL handed to git for a remote locator."""
    url = expand_shorthand(locator)
    if url.startswith("git:"):
        url = url[len("git:") :]
    return url


@contextmanager
def sigterm_as_exit() -> Iterator[None]:
    """
    Turn SIGTERM into SystemExit for the duration of the context.

    Lets `finally` clauses run when the process is terminated. Only the
    main thread can install signal handlers; elsewhere this does nothing.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum, frame):
        raise SystemExit(128 + signum)

    previous = signal.getsignal(signal.SIGTERM)
    signal.signal(signal.SIGTERM, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, signal.SIG_DFL if previous is None else previous)


def find_marked_root(start: Path) -> Optional[Path]:
    """
    Search start and its ancestors for a directory with the marker file.

    Args:
        start: Directory to start from.

    Returns:
        The closest marked directory, or None.
    """
    for candidate in (start, *start.parents):
        if is_config_root(candidate):
            return candidate
    return None


class RootResolver:
    """
    Resolves the root argument of a command.

    Order for a missing argument: marker in the working directory, marker
    in an ancestor, `DEEZ_ROOT`, the configured default root, and
    finally the working directory itself, untrusted.
    """

    def __init__(
        self,
        cwd: Optional[Path] = None,
        *,
        default_root: Optional[str] = None,
        verbose: bool = False,
        environ: Optional[dict[str, str]] = None,
    ):
        """
        Initialize resolver.

        Args:
            cwd: Working directory (defaults to the process's).
            default_root: Root from the configuration file.
            verbose: Let git print its progress when cloning.
            environ: Environment to read `DEEZ_ROOT` from (defaults to os.environ).
        """
        self.cwd = (cwd or Path.cwd()).absolute()
        self.default_root = default_root
        self.verbose = verbose
        self.environ = os.environ if environ is None else environ

    @contextmanager
    def resolve(self, arg: Optional[str] = None) -> Iterator[ConfigRoot]:
        """
        Resolve a root for the duration of a command.

        Remote roots live in a temporary directory that is removed when
        the context exits, whether normally or through an exception.

        Args:
            arg: Root argument, path or remote locator.

        Yields:
            The resolved ConfigRoot.

        Raises:
            RootNotFound: If a path does not exist or is not a directory.
            RemoteFetchFailed: If cloning fails.
        """
        if arg and is_remote_locator(arg):
            with self._clone(arg) as root:
                yield root
            return

        if arg:
            yield self._local_root(arg)
        else:
            yield self.search()

    def search(self) -> ConfigRoot:
        """Find a root without an explicit argument."""
        marked = find_marked_root(self.cwd)
        if marked is not None:
            return ConfigRoot(path=marked, trusted=True)

        env_root = self.environ.get(ROOT_ENV)
        if env_root:
            return self._local_root(env_root)

        if self.default_root:
            return self._local_root(self.default_root)

        return ConfigRoot(path=self.cwd, trusted=False)

    def configured_root(self) -> ConfigRoot:
        """
        Get the root named by `DEEZ_ROOT` or the configuration file.

        Raises:
            RootNotFound: If neither is set, or the path is unusable.
        """
        configured = self.environ.get(ROOT_ENV) or self.default_root
        if not configured:
            raise RootNotFound(f"No root configured. Set {ROOT_ENV} or 'root' in the configuration file.")
        return self._local_root(configured)

    def _local_root(self, arg: str) -> ConfigRoot:
        path = Path(arg).expanduser()
        if not path.is_absolute():
            path = self.cwd / path

        if not path.exists():
            raise RootNotFound(f"Root '{arg}' does not exist.")
        if not path.is_dir():
            raise RootNotFound(f"Root '{arg}' is not a directory.")

        path = path.resolve()
        return ConfigRoot(path=path, trusted=is_config_root(path))

    @contextmanager
    def _clone(self, arg: str) -> Iterator[ConfigRoot]:
        locator, sub_root = split_sub_root(arg)
        url = clone_url(locator)

        with sigterm_as_exit():
            temp_dir = Path(tempfile.mkdtemp(prefix="deez-"))
            # Also covers exits that bypass the finally clause
            cleanup = functools.partial(shutil.rmtree, temp_dir, ignore_errors=True)
            atexit.register(cleanup)

            try:
                clone_dir = temp_dir / "repo"
                try:
                    clone_repo(url, clone_dir, quiet=not self.verbose)
                except GitError as e:
                    detail = f": {e.stderr}" if e.stderr else ""
                    raise RemoteFetchFailed(f"Could not clone '{url}'{detail}", stderr=e.stderr) from e

                path = clone_dir.resolve()
                if sub_root:
                    clone_path = path
                    path = (clone_path / sub_root).resolve()
                    if path != clone_path and clone_path not in path.parents:
                        raise RootNotFound(f"Sub-root '{sub_root}' is outside the repository.")
                    if not path.is_dir():
                        raise RootNotFound(f"Sub-root '{sub_root}' does not exist in '{url}'.")

                yield ConfigRoot(
                    path=path,
                    trusted=is_config_root(path),
                    remote=url,
                    revision=get_head_commit(clone_dir),
                )
            finally:
                cleanup()
                atexit.unregister(cleanup)
