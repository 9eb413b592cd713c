"""Initialize configuration file for tag-commander."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import click

from tag_commander.cli import Context, pass_context
from tag_commander.config import Config, get_default_config_path, save_config
from tag_commander.utils.output import error, info, success


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("tag_commander").joinpath("config.example.toml").read_text()


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/tag-commander/config.toml)",
)
@click.option(
    "--root",
    "root_dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Write a minimal config with this root directory instead of the example",
)
@pass_context
def cli(ctx: Context, force: bool, output: Path | None, root_dir: Path | None) -> None:
    """Create a new configuration file.

    Without --root, the documented example configuration is written.

    \b
    Examples:
      tag-commander init-config
      tag-commander init-config --root ~/samples
      tag-commander init-config --output ./my-config.toml --force
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        if root_dir is not None:
            save_config(Config(root=root_dir.expanduser().resolve()), config_path)
        else:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(_load_example_config())
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1)

    success(f"Created config file: {config_path}")
    info("Edit this file to customize your settings.")
