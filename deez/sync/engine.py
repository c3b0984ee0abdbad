# DEEZ Sync Engine
# Runs a command through the hooks/walk/plan/execute pipeline

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from deez.config.schema import DeezConfig
from deez.errors import ConfirmationDeclined, IoFailure, RootNotFound
from deez.output.diff import FileDiff, render_diff
from deez.sync.actions import Action, Executor, Planner, SkippedEntry
from deez.sync.commands import Command
from deez.sync.hooks import Hook, HookContext, HookRunner
from deez.sync.root import ConfigRoot
from deez.sync.status import StateClassifier, StatusReport, SyncStatus
from deez.sync.walk import IgnoreFilter, RelativeEntry, Walker


@dataclass
class CommandResult:
    """Result of a complete command run."""

    command: Command
    root: ConfigRoot
    entry_count: int = 0
    applied: list[Action] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)
    pruned: list[Path] = field(default_factory=list)
    report: Optional[StatusReport] = None
    diffs: list[FileDiff] = field(default_factory=list)
    hooks: list[Hook] = field(default_factory=list)
    hooks_run: int = 0

    @property
    def found_nothing(self) -> bool:
        """Check if the root holds no eligible entry."""
        return self.entry_count == 0

    @property
    def files_changed(self) -> int:
        return len(self.applied)


class SyncEngine:
    """
    Command pipeline.

    Confirmation for untrusted roots, pre hooks, the command handler,
    the report of read-only commands, then post hooks. Every command
    variant has exactly one handler.
    """

    def __init__(
        self,
        root: ConfigRoot,
        home: Path,
        config: Optional[DeezConfig] = None,
        *,
        verbose: bool = False,
        on_action: Optional[Callable[[Action], None]] = None,
        on_hook: Optional[Callable[[Hook], None]] = None,
    ):
        """
        Initialize sync engine.

        Args:
            root: Resolved root.
            home: Home directory.
            config: DEEZ configuration (defaults if not provided).
            verbose: Verbose mode, forwarded to hooks.
            on_action: Callback invoked after each applied action.
            on_hook: Callback invoked before each hook starts.
        """
        self.root = root
        self.home = home
        self.config = config or DeezConfig()
        self.verbose = verbose
        self.on_action = on_action

        self.walker = Walker(root.path, IgnoreFilter(root.path, self.config.ignore))
        self.hook_runner = HookRunner(root.path, shell=self.config.hooks.shell, on_hook=on_hook)

        self._handlers: dict[Command, Callable[[CommandResult, Iterable[RelativeEntry], bool], None]] = {
            Command.SYNC: self._execute,
            Command.RSYNC: self._execute,
            Command.LINK: self._execute,
            Command.CLEAN: self._execute,
            Command.STATUS: self._status,
            Command.DIFF: self._diff,
        }

    def run(
        self,
        command: Command,
        *,
        reverse: bool = False,
        confirm: Optional[Callable[[ConfigRoot], bool]] = None,
        report: Optional[Callable[[CommandResult], None]] = None,
    ) -> CommandResult:
        """
        Run a command.

        Args:
            command: Command to run.
            reverse: Swap the sides of the diff.
            confirm: Asked before mutating an untrusted root; a missing
                     callback counts as a refusal.
            report: Invoked with the result of a read-only command, before
                    its post hooks.

        Returns:
            CommandResult with details of what was done.

        Raises:
            ConfirmationDeclined: If the root is untrusted and not confirmed.
            RootNotFound: If the command cannot use a remote root.
            HookFailed: If a hook fails.
            IoFailure: If a filesystem operation fails.
        """
        if self.root.is_remote and not command.accepts_remote:
            raise RootNotFound(f"'{command.value}' cannot use a remote root.")

        if command.mutates and not self.root.trusted:
            if confirm is None or not confirm(self.root):
                raise ConfirmationDeclined()

        result = CommandResult(command=command, root=self.root)
        context = HookContext.create(self.root.path, self.home, verbose=self.verbose)

        result.hooks_run += self.hook_runner.run(command, "pre", context)

        self._handlers[command](result, self._counted(result), reverse)

        if report and not command.mutates:
            report(result)

        result.hooks_run += self.hook_runner.run(command, "post", context)

        return result

    def _counted(self, result: CommandResult) -> Iterator[RelativeEntry]:
        """Walk the root lazily, counting entries into the result."""
        for entry in self.walker:
            result.entry_count += 1
            yield entry

    def _execute(self, result: CommandResult, entries: Iterable[RelativeEntry], reverse: bool) -> None:
        plan = Planner(self.root.path, self.home).plan(result.command, entries)
        result.skipped = plan.skipped

        executor = Executor(
            self.home,
            prune_empty_dirs=self.config.clean.prune_empty_dirs,
            on_action=self.on_action,
        )
        execution = executor.execute(plan)
        result.applied = execution.applied
        result.pruned = execution.pruned

    def _status(self, result: CommandResult, entries: Iterable[RelativeEntry], reverse: bool) -> None:
        result.report = StateClassifier(self.root.path, self.home).report(entries)
        result.hooks = self.hook_runner.list_all()

    def _diff(self, result: CommandResult, entries: Iterable[RelativeEntry], reverse: bool) -> None:
        # Root is the original side, Home the new one
        result.report = StateClassifier(self.root.path, self.home).report(entries)

        for status in result.report.entries:
            if status.status == SyncStatus.IN_SYNC:
                continue
            if status.status == SyncStatus.MISSING:
                result.diffs.append(FileDiff(path=status.path, missing=True))
                continue

            before = _read_bytes(status.entry.join(self.root.path))
            after = _read_bytes(status.entry.join(self.home))
            from_label, to_label = f"root/{status.path}", f"home/{status.path}"
            if reverse:
                before, after = after, before
                from_label, to_label = to_label, from_label

            lines = render_diff(
                before,
                after,
                from_label=from_label,
                to_label=to_label,
                context_lines=self.config.diff.context_lines,
            )
            result.diffs.append(FileDiff(path=status.path, lines=lines))


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise IoFailure(f"Could not read '{path}': {e}", path=path) from e
