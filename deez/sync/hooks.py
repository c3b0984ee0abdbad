# DEEZ Hooks
# Discovery and execution of pre/post command scripts

import os
import shlex
import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from deez.errors import HookFailed, IoFailure
from deez.sync.commands import PHASES, Command
from deez.sync.walk import file_prefix
from deez.utils.platform import default_shell, get_current_platform

ENV_ROOT = "DEEZ_ROOT"
ENV_HOME = "DEEZ_HOME"
ENV_VERBOSE = "DEEZ_VERBOSE"
ENV_OS = "DEEZ_OS"

CMD_SHELLS = ("cmd", "cmd.exe")


def is_cmd_shell(shell: Sequence[str]) -> bool:
    """Check if a shell prefix runs the Windows command interpreter."""
    program = shell[0].replace("\\", "/").rsplit("/", 1)[-1]
    return program.lower() in CMD_SHELLS


@dataclass(frozen=True)
class HookContext:
    """
    Values exposed to hooks, built once per invocation.

    Attributes:
        root: Absolute root path.
        home: Absolute Home path.
        verbose: Whether verbose mode is on.
        os_id: Operating system family ("linux", "macos", "windows").
    """

    root: Path
    home: Path
    verbose: bool = False
    os_id: str = ""

    @classmethod
    def create(cls, root: Path, home: Path, *, verbose: bool = False) -> "HookContext":
        return cls(
            root=root.resolve(),
            home=home.resolve(),
            verbose=verbose,
            os_id=get_current_platform(),
        )

    def to_env(self, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        """
        Project the context onto a subprocess environment.

        Args:
            base: Environment to extend (defaults to os.environ).

        Returns:
            New environment mapping. DEEZ_VERBOSE is only set in verbose mode.
        """
        env = dict(os.environ if base is None else base)
        env[ENV_ROOT] = str(self.root)
        env[ENV_HOME] = str(self.home)
        env[ENV_OS] = self.os_id
        if self.verbose:
            env[ENV_VERBOSE] = "true"
        else:
            env.pop(ENV_VERBOSE, None)
        return env


@dataclass(frozen=True)
class Hook:
    """A hook script found at the root."""

    name: str
    path: Path
    command: Command
    phase: str


class HookRunner:
    """Finds and runs the hooks of a root, sequentially."""

    def __init__(
        self,
        root: Path,
        *,
        shell: Optional[Sequence[str]] = None,
        on_hook: Optional[Callable[[Hook], None]] = None,
    ):
        """
        Initialize runner.

        Args:
            root: Root directory holding the hooks.
            shell: Interpreter prefix, e.g. ["sh", "-c"].
            on_hook: Callback invoked before each hook starts.
        """
        self.root = root
        self.shell = list(shell) if shell else default_shell()
        self.on_hook = on_hook

    def discover(self, command: Command, phase: str) -> list[Hook]:
        """
        Find the hooks of one phase of a command, in run order.

        Matches `<phase>-<command>` with any suffix after the first dot,
        sorted by file name.
        """
        stem = f"{phase}-{command.value}"

        try:
            names = sorted(child.name for child in self.root.iterdir() if child.is_file())
        except OSError as e:
            raise IoFailure(f"Could not list hooks in '{self.root}': {e}", path=self.root) from e

        return [
            Hook(name=name, path=self.root / name, command=command, phase=phase)
            for name in names
            if file_prefix(name) == stem
        ]

    def list_all(self) -> list[Hook]:
        """List every hook of the root, grouped by command then phase."""
        hooks: list[Hook] = []
        for command in Command:
            for phase in PHASES:
                hooks.extend(self.discover(command, phase))
        return hooks

    def build_command(self, hook: Hook) -> list[str]:
        """
        Get the argument vector that runs a hook through the shell.

        The script path is a single shell word: POSIX-quoted for sh-like
        shells (Git Bash included), left to subprocess for cmd, which
        wraps arguments holding spaces in double quotes.
        """
        script = str(hook.path)
        if not is_cmd_shell(self.shell):
            script = shlex.quote(script)
        return [*self.shell, script]

    def run_hook(self, hook: Hook, context: HookContext) -> None:
        """
        Run one hook with the root as working directory.

        Raises:
            HookFailed: If the hook cannot start or exits non-zero.
        """
        if self.on_hook:
            self.on_hook(hook)

        try:
            result = subprocess.run(
                self.build_command(hook),
                cwd=context.root,
                env=context.to_env(),
                check=False,
            )
        except OSError as e:
            raise HookFailed(f"Could not run hook '{hook.name}': {e}", hook=hook.name) from e

        if result.returncode != 0:
            raise HookFailed(
                f"Hook '{hook.name}' failed with exit code {result.returncode}.",
                hook=hook.name,
                returncode=result.returncode,
            )

    def run(self, command: Command, phase: str, context: HookContext) -> int:
        """
        Run all hooks of a phase. The first failure stops the sequence.

        Returns:
            Number of hooks run.
        """
        hooks = self.discover(command, phase)
        for hook in hooks:
            self.run_hook(hook, context)
        return len(hooks)


def run_in_root(args: Sequence[str], context: HookContext) -> int:
    """
    Run an arbitrary command in the root, with the hook environment.

    Args:
        args: Command and its arguments.
        context: Hook context; its root is the working directory.

    Returns:
        The command's exit code.

    Raises:
        IoFailure: If the command cannot be started.
    """
    if not args:
        raise ValueError("No command given")

    try:
        result = subprocess.run(list(args), cwd=context.root, env=context.to_env(), check=False)
    except OSError as e:
        raise IoFailure(f"Could not run '{args[0]}': {e}", path=context.root) from e

    return result.returncode
