# DEEZ Output Module
# Rich console output and diff rendering

from deez.output.diff import FileDiff, render_diff
from deez.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
    "FileDiff",
    "render_diff",
]
