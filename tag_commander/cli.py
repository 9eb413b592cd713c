"""Command-line interface for tag-commander."""

from __future__ import annotations

import os
from pathlib import Path

import click

from tag_commander import __version__
from tag_commander.config import Config, load_config
from tag_commander.utils.output import (
    error,
    set_color,
    set_pager,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self.pager: bool | None = None  # None = auto


pass_context = click.make_pass_decorator(Context, ensure=True)


def _load_config(config_path: Path | None, root: Path | None) -> tuple[Config, list[str]]:
    """Load the config file and apply a ``--root`` override.

    Warnings about the configured root are dropped when ``--root`` replaces it.
    """
    config, warnings = load_config(config_path)
    if root is None:
        return config, warnings

    config.root = root.expanduser().resolve()
    return config, [w for w in warnings if not w.startswith("Root ")]


def _resolve_help_target(
    ctx: click.Context, names: tuple[str, ...]
) -> click.Command | None:
    """Walk ``names`` down the command tree. Returns None for an unknown name."""
    command: click.Command = cli
    for name in names:
        if not isinstance(command, click.Group):
            break
        sub = command.get_command(ctx, name)
        if sub is None:
            error(f"Unknown command: {name}")
            return None
        command = sub
    return command


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    help="Config file (default: ~/.config/tag-commander/config.toml)",
)
@click.option(
    "--root",
    "-R",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to index and search (overrides paths.root)",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, help="Report indexing progress")
@click.option("--debug", is_flag=True, help="Log every index change (implies --verbose)")
@click.option("--quiet", "-q", is_flag=True, help="Only print results and errors")
@click.option("--pager/--no-pager", default=None, help="Page long result tables (default: auto)")
@click.version_option(version=__version__, prog_name="tag-commander")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    root: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
    pager: bool | None,
) -> None:
    """tag-commander: Search a tagged file collection.

    Files below a root directory are indexed into a local SQLite database
    together with their tags, and can then be searched with a small query
    language:

    \b
      kick snare            files tagged kick AND snare
      kick | snare          files tagged kick OR snare
      -kick                 files NOT tagged kick
      inpath:res/audio/     files whose path matches the pattern

    The root directory comes from --root or paths.root in the config file
    (~/.config/tag-commander/config.toml unless --config is given).

    \b
    Examples:
      tag-commander -R . rebuild-index
      tag-commander -R . tags add res/audio/kick01.wav -t kick
      tag-commander -R . search "kick -acoustic | snare"
    """
    app_ctx = ctx.ensure_object(Context)
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet
    app_ctx.pager = pager

    set_verbosity(verbose=verbose, debug=debug)
    set_pager(pager)

    color_forced_off = no_color or "NO_COLOR" in os.environ
    if color_forced_off:
        set_color(False)

    try:
        app_ctx.config, warnings = _load_config(config, root)
    except Exception as e:
        error(str(e))
        ctx.exit(1)
        return

    if not color_forced_off and not app_ctx.config.colored_output:
        set_color(False)

    if not quiet:
        for message in warnings:
            warning(message)


@cli.command("help")
@click.argument("command", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Show help for a command, e.g. ``help tags add``."""
    target = _resolve_help_target(ctx, command)
    if target is None:
        ctx.exit(1)
        return
    click.echo(target.get_help(ctx))


def register_commands() -> None:
    """Add every command found in ``tag_commander.commands`` to the group."""
    from tag_commander.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


register_commands()
