# DEEZ Platform Utilities
# Operating system family and Home directory detection

import os
import platform
from pathlib import Path

from deez.errors import RootNotFound

# Platform name mapping: system name -> DEEZ_OS value
_PLATFORM_MAP: dict[str, str] = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}


def get_current_platform() -> str:
    """
    Get the current platform identifier.

    Returns:
        Platform string: "macos", "linux", "windows", or the lowercased
        system name for anything else.
    """
    system = platform.system()
    return _PLATFORM_MAP.get(system, system.lower())


def is_windows() -> bool:
    """Check if running on Windows."""
    return get_current_platform() == "windows"


def get_home_directory() -> Path:
    """
    Get the user's Home directory.

    Reads `HOME`, then `USERPROFILE`, then falls back to the platform
    default.

    Returns:
        Home directory path.

    Raises:
        RootNotFound: If no Home directory can be determined.
    """
    for var in ("HOME", "USERPROFILE"):
        value = os.environ.get(var)
        if value:
            return Path(value)

    try:
        return Path.home()
    except RuntimeError as e:
        raise RootNotFound(f"Could not read Home directory from environment: {e}") from e


def default_shell() -> list[str]:
    """Get the interpreter prefix used to run hook scripts."""
    if is_windows():
        return ["cmd", "/C"]
    return ["sh", "-c"]
