# DEEZ Commands
# The closed set of commands sharing the sync pipeline

from enum import Enum


class Command(str, Enum):
    """Commands that run through the root/hooks/walk pipeline."""

    SYNC = "sync"
    RSYNC = "rsync"
    LINK = "link"
    STATUS = "status"
    DIFF = "diff"
    CLEAN = "clean"

    @property
    def mutates(self) -> bool:
        """Check if this command writes to the filesystem."""
        return self in (Command.SYNC, Command.RSYNC, Command.LINK, Command.CLEAN)

    @property
    def accepts_remote(self) -> bool:
        """Check if this command can run against a temporary remote clone."""
        return self not in (Command.RSYNC, Command.LINK)

    @property
    def verb(self) -> str:
        """Past-tense verb used in summaries."""
        if self in (Command.SYNC, Command.RSYNC):
            return "Synced"
        if self == Command.LINK:
            return "Linked"
        if self == Command.CLEAN:
            return "Removed"
        return "Checked"


ALIASES: dict[str, Command] = {
    "s": Command.SYNC,
    "rs": Command.RSYNC,
    "l": Command.LINK,
    "st": Command.STATUS,
    "df": Command.DIFF,
    "c": Command.CLEAN,
}

PHASES = ("pre", "post")

# Every hook stem, e.g. "pre-sync", in listing order
HOOK_NAMES: tuple[str, ...] = tuple(f"{phase}-{command.value}" for command in Command for phase in PHASES)
