# DEEZ Status
# Classification of entries as in sync, modified or missing

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from deez.errors import IoFailure, PathTypeClash
from deez.sync.walk import RelativeEntry
from deez.utils.hashing import files_equal


class SyncStatus(str, Enum):
    """Status of an entry, valued by its display symbol."""

    IN_SYNC = "S"
    MODIFIED = "M"
    MISSING = "!"

    @property
    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class EntryStatus:
    """Classification result for one entry."""

    entry: RelativeEntry
    status: SyncStatus
    target_is_symlink: bool = False

    @property
    def path(self) -> str:
        return self.entry.path


def _same_link(source: Path, target: Path) -> bool:
    if not (source.is_symlink() and target.is_symlink()):
        return False
    return os.readlink(source) == os.readlink(target)


def classify(entry: RelativeEntry, source_root: Path, target_root: Path) -> EntryStatus:
    """
    Compare an entry on the source side with the target side.

    Content is compared after following symlinks on both sides. Two
    symlinks with identical link text are in sync even when dangling.

    Args:
        entry: Entry to classify.
        source_root: Side considered authoritative (the root, usually).
        target_root: Side being checked (Home, usually).

    Returns:
        EntryStatus for the entry.

    Raises:
        PathTypeClash: If a directory is found on either side.
        IoFailure: If the source is unreadable or a dangling symlink.
    """
    source = entry.join(source_root)
    target = entry.join(target_root)

    try:
        target_is_symlink = target.is_symlink()

        if _same_link(source, target):
            return EntryStatus(entry, SyncStatus.IN_SYNC, target_is_symlink)

        # exists() follows links, so dangling targets count as missing
        if not target.exists():
            return EntryStatus(entry, SyncStatus.MISSING, target_is_symlink)

        if target.is_dir():
            raise PathTypeClash(f"'{target}' is a directory, expected a file.", path=target)
        if source.is_dir():
            raise PathTypeClash(f"'{source}' is a directory, expected a file.", path=source)
        if not source.exists():
            raise IoFailure(f"'{source}' is a dangling symlink.", path=source)

        if files_equal(source, target):
            return EntryStatus(entry, SyncStatus.IN_SYNC, target_is_symlink)
        return EntryStatus(entry, SyncStatus.MODIFIED, target_is_symlink)
    except OSError as e:
        raise IoFailure(f"Could not compare '{entry.path}': {e}", path=source) from e


@dataclass
class StatusReport:
    """Classification of every eligible entry of a root."""

    entries: list[EntryStatus] = field(default_factory=list)

    def count(self, status: SyncStatus) -> int:
        return sum(1 for entry in self.entries if entry.status == status)

    @property
    def in_sync(self) -> int:
        return self.count(SyncStatus.IN_SYNC)

    @property
    def modified(self) -> int:
        return self.count(SyncStatus.MODIFIED)

    @property
    def missing(self) -> int:
        return self.count(SyncStatus.MISSING)

    @property
    def total(self) -> int:
        return len(self.entries)


class StateClassifier:
    """Classifies entries between a source and a target directory."""

    def __init__(self, source_root: Path, target_root: Path):
        self.source_root = source_root
        self.target_root = target_root

    def classify(self, entry: RelativeEntry) -> EntryStatus:
        return classify(entry, self.source_root, self.target_root)

    def report(self, entries: Iterable[RelativeEntry]) -> StatusReport:
        """Classify all entries, preserving their order."""
        return StatusReport(entries=[self.classify(entry) for entry in entries])
