"""Tag editing commands."""

from __future__ import annotations

from pathlib import Path

import click

from tag_commander.index.builder import relative_path

# Shared options for tag editing
_PATHS_ARGUMENT = click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=False, path_type=Path),
)
_TAG_OPTION = click.option(
    "--tag",
    "-t",
    "tag_names",
    multiple=True,
    required=True,
    help="Tag name (repeatable)",
)


def to_index_path(path: Path, root: Path) -> str:
    """Convert a command-line path to the root-relative form stored in the index.

    Relative paths are resolved against the current directory when it is
    inside the root, and against the root otherwise.

    Raises:
        click.BadParameter: If the path is outside the root.
    """
    if path.is_absolute():
        absolute = path.resolve()
    else:
        cwd = Path.cwd().resolve()
        base = cwd if cwd.is_relative_to(root) else root
        absolute = (base / path).resolve()
    try:
        return relative_path(absolute, root)
    except ValueError:
        raise click.BadParameter(f"{path} is not inside {root}", param_hint="PATHS") from None


@click.group("tags")
def cli() -> None:
    """Tag editing commands.

    Add tags to indexed files, remove them, and list all tags in use.
    """
    pass


# Import submodules to register their commands with the cli group
from tag_commander.commands.tags import add as _add  # noqa: E402, F401
from tag_commander.commands.tags import list_tags as _list_tags  # noqa: E402, F401
from tag_commander.commands.tags import remove as _remove  # noqa: E402, F401
