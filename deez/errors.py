# DEEZ Errors
# Exception hierarchy and exit codes for fatal conditions

from pathlib import Path
from typing import Optional

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DECLINED = 2


class DeezError(Exception):
    """Base class for all fatal errors of a command."""

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RootNotFound(DeezError):
    """The root argument does not exist, is not a directory, or is unusable."""


class ConfirmationDeclined(DeezError):
    """The user declined to use an untrusted root."""

    exit_code = EXIT_DECLINED

    def __init__(self, message: str = "Aborting."):
        super().__init__(message)


class RemoteFetchFailed(DeezError):
    """Cloning a remote root failed."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        super().__init__(message)


class IoFailure(DeezError):
    """A filesystem operation failed for a specific entry."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class PathTypeClash(IoFailure):
    """A directory exists where a file is expected, or the reverse."""


class HookFailed(DeezError):
    """A hook could not be executed or exited with a non-zero status."""

    def __init__(self, message: str, hook: str = "", returncode: Optional[int] = None):
        self.hook = hook
        self.returncode = returncode
        super().__init__(message)


class DiffEngineError(DeezError):
    """The diff library failed to produce a diff."""


class ConfigError(DeezError):
    """The configuration file is unreadable or invalid."""
