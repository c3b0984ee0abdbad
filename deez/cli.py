"""Click-based CLI for DEEZ - dotfiles synchronization between a root and Home."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
import yaml

from deez import __version__
from deez.config import ensure_config_exists, get_config_path, load_config, validate_config_file
from deez.errors import EXIT_FAILURE, DeezError
from deez.output.console import create_console
from deez.sync import ALIASES, Command, RootResolver, SyncEngine
from deez.sync.hooks import HookContext, run_in_root
from deez.utils.platform import get_home_directory


@dataclass
class CliState:
    """Options given to the top-level group."""

    verbose: bool = False
    colored: bool = True
    config_path: Optional[Path] = None


class AliasedGroup(click.Group):
    """Group that also accepts the short command aliases (s, rs, l, st, df, c)."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        alias = ALIASES.get(cmd_name)
        if alias is not None:
            cmd_name = alias.value
        return super().get_command(ctx, cmd_name)


root_argument = click.argument("root", required=False, metavar="[ROOT]")
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Show each file and hook as it is processed")


@click.group(cls=AliasedGroup, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="deez")
@click.option("--verbose", "-v", is_flag=True, help="Show each file and hook as it is processed")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.config/deez/config.yaml or $DEEZ_CONFIG)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, no_color: bool, config_path: Optional[Path]) -> None:
    """DEEZ - Sync config files between a root and Home.

    ROOT is a directory or a remote git repository (git:, ssh://, git@,
    https://, http:// or gh:<owner>/<repo>), optionally followed by
    [sub/dir]. Without ROOT, the closest directory holding a .deez file
    is used.

    \b
    Commands: sync|s, rsync|rs, link|l, status|st, diff|df, clean|c
    """
    ctx.obj = CliState(verbose=verbose, colored=not no_color, config_path=config_path)


def _run_pipeline(ctx: click.Context, command: Command, root: Optional[str], *, verbose: bool, reverse: bool = False) -> None:
    """Resolve the root and run a command through the engine, mapping errors to exit codes."""
    state: CliState = ctx.obj
    console = create_console(verbose=verbose or state.verbose, colored=state.colored)

    try:
        config = load_config(state.config_path)
        verbose = verbose or state.verbose or config.verbose
        console = create_console(
            verbose=verbose,
            colored=state.colored and config.output.colored,
            pager=config.output.pager,
        )

        home = get_home_directory()
        resolver = RootResolver(default_root=config.root, verbose=verbose)

        with resolver.resolve(root) as config_root:
            console.print_root(config_root)
            engine = SyncEngine(
                config_root,
                home,
                config,
                verbose=verbose,
                on_action=console.print_action,
                on_hook=console.print_hook,
            )
            result = engine.run(
                command,
                reverse=reverse,
                confirm=console.confirm_root,
                report=console.print_result,
            )

        console.print_skipped(result.skipped)
        if command.mutates:
            console.print_summary(result)
    except DeezError as e:
        console.print_error(e.message)
        ctx.exit(e.exit_code)


@cli.command()
@root_argument
@verbose_option
@click.pass_context
def sync(ctx: click.Context, root: Optional[str], verbose: bool) -> None:
    """Copy the files of ROOT into Home."""
    _run_pipeline(ctx, Command.SYNC, root, verbose=verbose)


@cli.command()
@root_argument
@verbose_option
@click.pass_context
def rsync(ctx: click.Context, root: Optional[str], verbose: bool) -> None:
    """Copy the files of ROOT back from Home into ROOT."""
    _run_pipeline(ctx, Command.RSYNC, root, verbose=verbose)


@cli.command()
@root_argument
@verbose_option
@click.pass_context
def link(ctx: click.Context, root: Optional[str], verbose: bool) -> None:
    """Symlink the files of ROOT into Home."""
    _run_pipeline(ctx, Command.LINK, root, verbose=verbose)


@cli.command()
@root_argument
@verbose_option
@click.pass_context
def status(ctx: click.Context, root: Optional[str], verbose: bool) -> None:
    """Show which files of ROOT are in sync (S), modified (M) or missing (!) in Home."""
    _run_pipeline(ctx, Command.STATUS, root, verbose=verbose)


@cli.command()
@root_argument
@click.option("--reversed", "-r", "reverse", is_flag=True, help="Show changes from Home to ROOT")
@verbose_option
@click.pass_context
def diff(ctx: click.Context, root: Optional[str], reverse: bool, verbose: bool) -> None:
    """Show the differences between ROOT and Home."""
    _run_pipeline(ctx, Command.DIFF, root, verbose=verbose, reverse=reverse)


@cli.command()
@root_argument
@verbose_option
@click.pass_context
def clean(ctx: click.Context, root: Optional[str], verbose: bool) -> None:
    """Remove the files of ROOT from Home."""
    _run_pipeline(ctx, Command.CLEAN, root, verbose=verbose)


@cli.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.argument("args", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Run a command inside the configured root.

    The root comes from $DEEZ_ROOT, then the 'root' configuration key.
    The exit code of the command is forwarded.

    \b
    Example:
        deez run git pull
    """
    state: CliState = ctx.obj
    console = create_console(verbose=state.verbose, colored=state.colored)

    try:
        config = load_config(state.config_path)
        verbose = state.verbose or config.verbose
        config_root = RootResolver(default_root=config.root).configured_root()
        context = HookContext.create(config_root.path, get_home_directory(), verbose=verbose)
        returncode = run_in_root(args, context)
    except DeezError as e:
        console.print_error(e.message)
        ctx.exit(e.exit_code)
        return

    ctx.exit(returncode)


@cli.group("config")
def config_group() -> None:
    """Manage the DEEZ configuration file."""
    pass


@config_group.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a default configuration file."""
    state: CliState = ctx.obj
    console = create_console(colored=state.colored)

    path, created = ensure_config_exists(state.config_path, force=force)
    if created:
        console.print_info(f"Created configuration: {path}")
    else:
        console.print_warning(f"Configuration already exists: {path} (use --force to overwrite)")


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration."""
    state: CliState = ctx.obj
    console = create_console(colored=state.colored)

    try:
        config = load_config(state.config_path)
    except DeezError as e:
        console.print_error(e.message)
        ctx.exit(e.exit_code)
        return

    path = state.config_path or get_config_path()
    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    console.print(f"# {source}", markup=False)
    data = config.model_dump(mode="json")
    console.print(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip(), markup=False)


@config_group.command("check")
@click.argument("file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def config_check(ctx: click.Context, file: Optional[Path]) -> None:
    """Validate a configuration file.

    \b
    Example:
        deez config check ~/.config/deez/config.yaml
    """
    state: CliState = ctx.obj
    console = create_console(colored=state.colored)

    path = file or state.config_path or get_config_path()
    valid, errors = validate_config_file(path)

    if valid:
        console.print_info(f"Configuration is valid: {path}")
        return

    for error in errors:
        console.print_error(error)
    ctx.exit(EXIT_FAILURE)


if __name__ == "__main__":
    cli()
