# DEEZ Walker
# Ignore-aware enumeration of the files under a root

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pathspec import GitIgnoreSpec
from pathspec.pattern import Pattern

from deez.errors import IoFailure
from deez.sync.commands import HOOK_NAMES

MARKER_FILE = ".deez"
IGNORE_FILES = (".ignore", ".gitignore")
VCS_DIRS = (".git",)


class EntryKind(str, Enum):
    """Kind of a tracked entry. Directories are structural, never entries."""

    FILE = "file"
    SYMLINK = "symlink"


@dataclass(frozen=True, order=True)
class RelativeEntry:
    """
    A file path relative to a root.

    The path uses `/` separators on every platform and contains no `.`
    or `..` segments. Entries sort by path.
    """

    path: str
    kind: EntryKind = field(default=EntryKind.FILE, compare=False)

    @property
    def is_symlink(self) -> bool:
        return self.kind == EntryKind.SYMLINK

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(self.path.split("/"))

    def join(self, base: Path) -> Path:
        """Resolve this entry against a base directory (root or Home)."""
        return base.joinpath(*self.parts)

    def __str__(self) -> str:
        return self.path


def file_prefix(name: str) -> str:
    """
    Get the part of a file name before its first extension.

    A leading dot does not start an extension: `.bashrc` stays whole,
    `post-sync.001.sh` gives `post-sync`.
    """
    index = name.find(".", 1)
    if index == -1:
        return name
    return name[:index]


def is_hook_file(name: str) -> bool:
    """Check if a file name at the root designates a hook script."""
    return file_prefix(name) in HOOK_NAMES


@dataclass(frozen=True)
class IgnoreRules:
    """
    Patterns of one ignore source, anchored at a directory of the root.

    Each pattern is paired with whether it only matches the contents of
    a directory (`foo/**`), never the directory itself.
    """

    base: str
    patterns: tuple[tuple[Pattern, bool], ...]

    @classmethod
    def from_lines(cls, base: str, lines: Iterable[str]) -> "IgnoreRules":
        patterns = []
        for line in lines:
            for pattern in GitIgnoreSpec.from_lines([line]).patterns:
                if pattern.include is not None:
                    patterns.append((pattern, line.strip().endswith("/**")))
        return cls(base=base, patterns=tuple(patterns))

    def decide(self, rel_path: str, is_dir: bool) -> bool | None:
        """
        Apply these rules to a root-relative path.

        Returns:
            True if ignored, False if re-included by a negation,
            None if no pattern matches.
        """
        if self.base:
            prefix = self.base + "/"
            if not rel_path.startswith(prefix):
                return None
            rel_path = rel_path[len(prefix) :]

        decision = None
        # Last matching pattern wins, as in gitignore
        for pattern, contents_only in self.patterns:
            candidate = rel_path + "/" if is_dir and not contents_only else rel_path
            if pattern.match_file(candidate) is not None:
                decision = pattern.include
        return decision


class IgnoreFilter:
    """
    Decides whether a root-relative path is eligible for synchronization.

    Always excluded:
    - version-control directories at the root (`.git/`);
    - ignore files at the root (`.ignore`, `.gitignore`), whose rules
      are still honored, as are those of ignore files at any depth;
    - the marker file, at any depth;
    - hook scripts at the root.
    """

    def __init__(self, root: Path, extra_patterns: Iterable[str] = ()):
        """
        Initialize filter.

        Args:
            root: Root directory.
            extra_patterns: Additional root-relative gitignore patterns,
                            applied before any ignore file.
        """
        self.root = root
        extra = [p for p in extra_patterns if p]
        self._base_rules: tuple[IgnoreRules, ...] = (IgnoreRules.from_lines("", extra),) if extra else ()

    @property
    def base_rules(self) -> tuple[IgnoreRules, ...]:
        return self._base_rules

    def rules_for_dir(self, rel_dir: str, inherited: tuple[IgnoreRules, ...]) -> tuple[IgnoreRules, ...]:
        """
        Extend inherited rules with the ignore files found in a directory.

        Args:
            rel_dir: Directory relative to root ("" for the root itself).
            inherited: Rules active in the parent directory.

        Returns:
            Rules active for the entries of rel_dir.
        """
        directory = self.root.joinpath(*rel_dir.split("/")) if rel_dir else self.root
        rules = list(inherited)

        for name in IGNORE_FILES:
            ignore_file = directory / name
            if not ignore_file.is_file():
                continue
            try:
                lines = ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as e:
                raise IoFailure(f"Could not read ignore file '{ignore_file}': {e}", path=ignore_file) from e
            rules.append(IgnoreRules.from_lines(rel_dir, lines))

        return tuple(rules)

    def is_excluded(self, rel_path: str, is_dir: bool) -> bool:
        """Check the built-in exclusions (independent of ignore files)."""
        at_root = "/" not in rel_path
        name = rel_path.rsplit("/", 1)[-1]

        if is_dir:
            return at_root and name in VCS_DIRS

        if name == MARKER_FILE:
            return True

        return at_root and (name in IGNORE_FILES or is_hook_file(name))

    @staticmethod
    def is_ignored(rel_path: str, is_dir: bool, rules: tuple[IgnoreRules, ...]) -> bool:
        """Check a path against ignore rules, deeper rules overriding shallower ones."""
        ignored = False
        for rule in rules:
            decision = rule.decide(rel_path, is_dir)
            if decision is not None:
                ignored = decision
        return ignored


class Walker:
    """
    Lazy, finite, restartable enumeration of eligible entries under a root.

    Each iteration walks the tree again. Entries come out in
    lexicographic order of their relative path.
    """

    def __init__(self, root: Path, ignore_filter: IgnoreFilter | None = None):
        self.root = root
        self.filter = ignore_filter or IgnoreFilter(root)

    def __iter__(self) -> Iterator[RelativeEntry]:
        return self._walk("", self.filter.base_rules)

    def _walk(self, rel_dir: str, inherited: tuple[IgnoreRules, ...]) -> Iterator[RelativeEntry]:
        rules = self.filter.rules_for_dir(rel_dir, inherited)
        directory = self.root.joinpath(*rel_dir.split("/")) if rel_dir else self.root

        try:
            with os.scandir(directory) as it:
                children = [(entry.name, entry.is_dir(follow_symlinks=False), entry.is_symlink()) for entry in it]
        except OSError as e:
            raise IoFailure(f"Could not read directory '{directory}': {e}", path=directory) from e

        # Sorting directories as `name/` keeps the whole walk in path order
        children.sort(key=lambda child: child[0] + "/" if child[1] else child[0])

        for name, is_dir, is_symlink in children:
            rel_path = f"{rel_dir}/{name}" if rel_dir else name

            if self.filter.is_excluded(rel_path, is_dir):
                continue
            if self.filter.is_ignored(rel_path, is_dir, rules):
                continue

            if is_dir:
                yield from self._walk(rel_path, rules)
            else:
                kind = EntryKind.SYMLINK if is_symlink else EntryKind.FILE
                yield RelativeEntry(rel_path, kind)
