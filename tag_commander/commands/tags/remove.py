"""Remove tags from indexed files."""

from __future__ import annotations

from pathlib import Path

from tag_commander.cli import Context, pass_context
from tag_commander.commands import EXIT_INDEX_ERROR, EXIT_PARSE_ERROR, EXIT_SUCCESS, require_root
from tag_commander.commands.tags import _PATHS_ARGUMENT, _TAG_OPTION, cli, to_index_path
from tag_commander.exceptions import FileNotIndexedError, InvalidTermError
from tag_commander.index.session import get_index_session
from tag_commander.index.tagging import remove_tags
from tag_commander.utils.output import error, success


@cli.command("remove")
@_PATHS_ARGUMENT
@_TAG_OPTION
@pass_context
def remove(ctx: Context, paths: tuple[Path, ...], tag_names: tuple[str, ...]) -> None:
    """Remove tags from files.

    \b
    Examples:
      tag-commander tags remove res/audio/kick01.wav -t 909
    """
    root = require_root(ctx.config)
    index_paths = [to_index_path(p, root) for p in paths]

    try:
        with get_index_session(root) as session:
            removed = remove_tags(session, index_paths, tag_names)
    except InvalidTermError as e:
        error(str(e))
        raise SystemExit(EXIT_PARSE_ERROR)
    except FileNotIndexedError as e:
        error(str(e))
        raise SystemExit(EXIT_INDEX_ERROR)

    if not ctx.quiet:
        success(f"Removed {removed} tag(s)")
    raise SystemExit(EXIT_SUCCESS)
