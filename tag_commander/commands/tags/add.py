"""Add tags to indexed files."""

from __future__ import annotations

from pathlib import Path

from tag_commander.cli import Context, pass_context
from tag_commander.commands import EXIT_INDEX_ERROR, EXIT_PARSE_ERROR, EXIT_SUCCESS, require_root
from tag_commander.commands.tags import _PATHS_ARGUMENT, _TAG_OPTION, cli, to_index_path
from tag_commander.exceptions import FileNotIndexedError, InvalidTermError
from tag_commander.index.session import get_index_session
from tag_commander.index.tagging import add_tags
from tag_commander.utils.output import error, success


@cli.command("add")
@_PATHS_ARGUMENT
@_TAG_OPTION
@pass_context
def add(ctx: Context, paths: tuple[Path, ...], tag_names: tuple[str, ...]) -> None:
    """Add tags to files.

    \b
    Examples:
      tag-commander tags add res/audio/kick01.wav -t kick -t 909
    """
    root = require_root(ctx.config)
    index_paths = [to_index_path(p, root) for p in paths]

    try:
        with get_index_session(root) as session:
            added = add_tags(session, index_paths, tag_names)
    except InvalidTermError as e:
        error(str(e))
        raise SystemExit(EXIT_PARSE_ERROR)
    except FileNotIndexedError as e:
        error(str(e), hint="Run 'tag-commander rebuild-index' first")
        raise SystemExit(EXIT_INDEX_ERROR)

    if not ctx.quiet:
        success(f"Added {added} tag(s)")
    raise SystemExit(EXIT_SUCCESS)
