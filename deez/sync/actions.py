# DEEZ Sync Actions
# Planning and execution of filesystem actions per command

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from deez.errors import IoFailure, PathTypeClash
from deez.sync.commands import Command
from deez.sync.walk import RelativeEntry
from deez.utils.paths import create_symlink, prune_empty_parents, safe_copy, safe_delete


class ActionType(str, Enum):
    """Types of filesystem actions."""

    COPY_FILE = "copy_file"
    CREATE_SYMLINK = "create_symlink"
    REMOVE_ENTRY = "remove_entry"


@dataclass(frozen=True)
class Action:
    """
    A single filesystem action on one entry.

    For COPY_FILE, source is copied to dest. For CREATE_SYMLINK, dest
    becomes a link to source. For REMOVE_ENTRY, dest is removed and
    source is unused.
    """

    action_type: ActionType
    entry: RelativeEntry
    dest: Path
    source: Optional[Path] = None

    @property
    def path(self) -> str:
        return self.entry.path

    def describe(self) -> str:
        """Get a one-line description for verbose output."""
        if self.action_type == ActionType.COPY_FILE:
            return f"{self.source} -> {self.dest}"
        if self.action_type == ActionType.CREATE_SYMLINK:
            return f"{self.dest} -> {self.source}"
        return f"{self.dest}"


@dataclass(frozen=True)
class SkippedEntry:
    """An entry the planner deliberately left alone."""

    entry: RelativeEntry
    reason: str


@dataclass
class Plan:
    """Ordered actions, at most one per relative path."""

    actions: list[Action] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)
    _paths: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def add(self, action: Action) -> None:
        """
        Append an action.

        Raises:
            ValueError: If the entry already has an action in this plan.
        """
        if action.path in self._paths:
            raise ValueError(f"Duplicate action for '{action.path}'")
        self._paths.add(action.path)
        self.actions.append(action)

    def skip(self, entry: RelativeEntry, reason: str) -> None:
        self.skipped.append(SkippedEntry(entry, reason))

    def sort(self) -> None:
        self.actions.sort(key=lambda action: action.path)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


class Planner:
    """
    Turns eligible entries into a plan for a mutating command.

    | Command | Action                          |
    |---------|---------------------------------|
    | sync    | copy root file to Home          |
    | rsync   | copy Home file back to the root |
    | link    | symlink Home path to root file  |
    | clean   | remove the Home path            |
    """

    def __init__(self, root: Path, home: Path):
        self.root = root
        self.home = home
        self._planners: dict[Command, Callable[[RelativeEntry, Plan], None]] = {
            Command.SYNC: self._plan_sync,
            Command.RSYNC: self._plan_rsync,
            Command.LINK: self._plan_link,
            Command.CLEAN: self._plan_clean,
        }

    def plan(self, command: Command, entries: Iterable[RelativeEntry]) -> Plan:
        """
        Build the plan of a command.

        Args:
            command: A mutating command.
            entries: Eligible entries of the root.

        Returns:
            Plan sorted by relative path.

        Raises:
            ValueError: If command does not produce actions.
        """
        planner = self._planners.get(command)
        if planner is None:
            raise ValueError(f"Command '{command.value}' does not produce actions")

        plan = Plan()
        for entry in entries:
            planner(entry, plan)
        plan.sort()
        return plan

    def _plan_sync(self, entry: RelativeEntry, plan: Plan) -> None:
        plan.add(Action(ActionType.COPY_FILE, entry, dest=entry.join(self.home), source=entry.join(self.root)))

    def _plan_rsync(self, entry: RelativeEntry, plan: Plan) -> None:
        root_path = entry.join(self.root)
        home_path = entry.join(self.home)

        if entry.is_symlink:
            plan.skip(entry, "symlink in root")
            return

        if home_path.is_symlink():
            if not home_path.exists():
                plan.skip(entry, "dangling symlink in Home")
                return
            # Created by link: copying it back would copy the file onto itself
            if home_path.resolve() == root_path.resolve():
                plan.skip(entry, "linked to root")
                return
        elif not home_path.exists():
            plan.skip(entry, "missing in Home")
            return

        plan.add(Action(ActionType.COPY_FILE, entry, dest=root_path, source=home_path))

    def _plan_link(self, entry: RelativeEntry, plan: Plan) -> None:
        plan.add(Action(ActionType.CREATE_SYMLINK, entry, dest=entry.join(self.home), source=entry.join(self.root)))

    def _plan_clean(self, entry: RelativeEntry, plan: Plan) -> None:
        home_path = entry.join(self.home)
        if not home_path.is_symlink() and not home_path.exists():
            plan.skip(entry, "missing in Home")
            return
        plan.add(Action(ActionType.REMOVE_ENTRY, entry, dest=home_path))


@dataclass
class ExecutionResult:
    """What an executor actually did."""

    applied: list[Action] = field(default_factory=list)
    pruned: list[Path] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.applied)


class Executor:
    """
    Applies a plan, entry by entry.

    The first failure aborts the run. Actions already applied stay in
    place.
    """

    def __init__(
        self,
        home: Path,
        *,
        prune_empty_dirs: bool = True,
        on_action: Optional[Callable[[Action], None]] = None,
    ):
        """
        Initialize executor.

        Args:
            home: Home directory, the boundary for pruning.
            prune_empty_dirs: Remove directories left empty by REMOVE_ENTRY.
            on_action: Callback invoked after each applied action.
        """
        self.home = home
        self.prune_empty_dirs = prune_empty_dirs
        self.on_action = on_action

    def execute(self, plan: Plan) -> ExecutionResult:
        """
        Apply every action of a plan in order.

        Raises:
            PathTypeClash: If a directory is in the way of a file, or the reverse.
            IoFailure: On any other filesystem error.
        """
        result = ExecutionResult()

        for action in plan:
            result.pruned.extend(self.apply(action))
            result.applied.append(action)
            if self.on_action:
                self.on_action(action)

        return result

    def apply(self, action: Action) -> list[Path]:
        """
        Apply a single action.

        Returns:
            Directories pruned as a consequence of the action.
        """
        try:
            if action.action_type == ActionType.COPY_FILE:
                safe_copy(action.source, action.dest)
            elif action.action_type == ActionType.CREATE_SYMLINK:
                create_symlink(action.source, action.dest)
            elif action.action_type == ActionType.REMOVE_ENTRY:
                safe_delete(action.dest, missing_ok=True)
                if self.prune_empty_dirs:
                    return prune_empty_parents(action.dest, self.home)
            else:
                raise ValueError(f"Unknown action type: {action.action_type}")
        except (IsADirectoryError, NotADirectoryError, FileExistsError) as e:
            raise PathTypeClash(
                f"'{action.path}': a file and a directory clash at '{e.filename or action.dest}'.",
                path=action.dest,
            ) from e
        except OSError as e:
            raise IoFailure(f"'{action.path}': {e.strerror or e}", path=action.dest) from e

        return []
