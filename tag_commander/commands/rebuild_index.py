"""Rebuild the file index from the root directory."""

from __future__ import annotations

import click

from tag_commander.cli import Context, pass_context
from tag_commander.commands import EXIT_INDEX_ERROR, EXIT_SUCCESS, require_root
from tag_commander.index.builder import build_index
from tag_commander.index.models import IndexedFile
from tag_commander.index.session import get_index_session
from tag_commander.utils.output import create_progress, error, info, success


@click.command("rebuild-index")
@click.option(
    "--prune",
    is_flag=True,
    default=False,
    help="Forget files that no longer exist, including their tags",
)
@pass_context
def cli(ctx: Context, prune: bool) -> None:
    """Rescan the root directory and update the index.

    New files are added. Files that disappeared keep their tags and are
    reported as missing, so that restoring them restores their tags;
    use --prune to drop them instead.

    \b
    Examples:
      tag-commander rebuild-index
      tag-commander -v rebuild-index --prune
    """
    root = require_root(ctx.config)

    try:
        with get_index_session(root) as session:
            if not ctx.quiet:
                info(f"Indexing {root}...")
            with create_progress() as progress:
                task = progress.add_task("Scanning files...", total=None)
                count = build_index(root, session, prune=prune)
                progress.update(task, completed=count, total=count)
            if not ctx.quiet:
                total = session.query(IndexedFile).count()
                missing = total - count
                msg = f"Index rebuilt with {count} files"
                if missing:
                    msg += f" ({missing} missing)"
                success(msg)
    except Exception as e:
        error(f"Index error: {e}")
        raise SystemExit(EXIT_INDEX_ERROR)

    raise SystemExit(EXIT_SUCCESS)
