# DEEZ Console Output
# Rich-based console output for user-friendly display

from typing import TYPE_CHECKING

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.prompt import Confirm

from deez.output.diff import FileDiff
from deez.sync.actions import Action, ActionType, SkippedEntry
from deez.sync.commands import Command
from deez.sync.hooks import Hook
from deez.sync.root import ConfigRoot
from deez.sync.status import StatusReport, SyncStatus
from deez.sync.walk import MARKER_FILE

if TYPE_CHECKING:
    from deez.sync.engine import CommandResult

STATUS_STYLES = {
    SyncStatus.IN_SYNC: "green",
    SyncStatus.MODIFIED: "yellow",
    SyncStatus.MISSING: "red",
}

ACTION_ICONS = {
    ActionType.COPY_FILE: "[green]+[/green]",
    ActionType.CREATE_SYMLINK: "[cyan]@[/cyan]",
    ActionType.REMOVE_ENTRY: "[red]-[/red]",
}


class Console:
    """
    Console output manager using Rich.

    Regular output goes to stdout, diagnostics and prompts to stderr.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, pager: bool = False):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            pager: Page diff output when stdout is a terminal.
        """
        self.verbose = verbose
        self.pager = pager
        self._console = RichConsole(no_color=not colored, highlight=False, soft_wrap=True)
        self._err_console = RichConsole(stderr=True, no_color=not colored, highlight=False, soft_wrap=True)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._err_console.print(f"[red]error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._err_console.print(f"[yellow]warning:[/yellow] {escape(message)}")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(escape(message))

    def print_verbose(self, message: str) -> None:
        """Print message in verbose mode only."""
        if self.verbose:
            self._console.print(f"[dim]{escape(message)}[/dim]")

    def print_root(self, root: ConfigRoot) -> None:
        """Print the resolved root in verbose mode."""
        if root.is_remote:
            revision = f" @ {root.revision[:12]}" if root.revision else ""
            self.print_verbose(f"root: {root.path} (from {root.remote}{revision})")
        else:
            self.print_verbose(f"root: {root.path}")

    def print_action(self, action: Action) -> None:
        """Print an applied action in verbose mode."""
        if self.verbose:
            icon = ACTION_ICONS.get(action.action_type, "?")
            self._console.print(f"{icon} {escape(action.describe())}")

    def print_hook(self, hook: Hook) -> None:
        """Print a hook as it starts, in verbose mode."""
        self.print_verbose(f"hook: {hook.name}")

    def print_skipped(self, skipped: list[SkippedEntry]) -> None:
        """Print entries left alone by the planner, in verbose mode."""
        for item in skipped:
            self.print_verbose(f"skip: {item.entry.path} ({item.reason})")

    def print_status(self, report: StatusReport, hooks: list[Hook]) -> None:
        """
        Print per-file status, hooks and totals.

        Args:
            report: Classified entries.
            hooks: Every hook of the root, in run order.
        """
        if report.entries:
            self._console.print("[bold]Files[/bold]")
            for entry in report.entries:
                style = STATUS_STYLES[entry.status]
                link = "@" if entry.target_is_symlink else ""
                self._console.print(f"  [{style}]{entry.status.symbol}[/{style}]  {escape(entry.path)}{link}")

        if hooks:
            self._console.print("[bold]Hooks[/bold]")
            for hook in hooks:
                self._console.print(f"  {escape(hook.name)}")

        self._console.print(f"{report.in_sync} in sync, {report.modified} modified, {report.missing} missing.")

    def print_diffs(self, diffs: list[FileDiff]) -> None:
        """Print diffs, through the pager if enabled and on a terminal."""
        if not diffs:
            self._console.print("Home is in sync.")
            return

        if self.pager and self._console.is_terminal:
            with self._console.pager(styles=True):
                self._print_diffs(diffs)
        else:
            self._print_diffs(diffs)

    def _print_diffs(self, diffs: list[FileDiff]) -> None:
        for index, diff in enumerate(diffs):
            if index:
                self._console.print()
            self._console.print(f"[bold]{escape(diff.path)}[/bold]")

            if diff.missing:
                self._console.print("[red]! File does not exist in Home.[/red]")
                self._console.print("[red]! Skipping...[/red]")
                continue

            for line in diff.lines:
                self._console.print(self._style_diff_line(line))

    @staticmethod
    def _style_diff_line(line: str) -> str:
        text = escape(line)
        if line.startswith(("+++", "---")):
            return f"[bold]{text}[/bold]"
        if line.startswith("+"):
            return f"[green]{text}[/green]"
        if line.startswith("-"):
            return f"[red]{text}[/red]"
        if line.startswith("@@"):
            return f"[cyan]{text}[/cyan]"
        return text

    def print_result(self, result: "CommandResult") -> None:
        """Print the output of a read-only command."""
        if result.found_nothing:
            self._console.print(f"No config files found in '{escape(str(result.root.path))}'.")

        if result.command == Command.DIFF:
            self.print_diffs(result.diffs)
        elif result.report is not None:
            self.print_status(result.report, result.hooks)

    def print_summary(self, result: "CommandResult") -> None:
        """Print the summary of a mutating command."""
        if result.found_nothing:
            self._console.print(f"No config files found in '{escape(str(result.root.path))}'.")

        self._console.print(f"{result.command.verb} {result.files_changed} file(s).")

        if result.hooks_run:
            self._console.print(f"Ran {result.hooks_run} hook(s).")

    def confirm_root(self, root: ConfigRoot) -> bool:
        """
        Ask whether to use a root without the marker file.

        Args:
            root: The untrusted root.

        Returns:
            True if the user agreed.
        """
        self._err_console.print(
            f"[yellow]warning:[/yellow] '{escape(str(root.path))}' is not a config root "
            f"(no {MARKER_FILE} file at its top level)."
        )
        try:
            return Confirm.ask("Proceed?", default=False, console=self._err_console)
        except EOFError:
            return False


def create_console(*, verbose: bool = False, colored: bool = True, pager: bool = False) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.
        pager: Page diff output when stdout is a terminal.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored, pager=pager)
