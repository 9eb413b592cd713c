"""Keep the index current while files change."""

from __future__ import annotations

import time

import click

from tag_commander.cli import Context, pass_context
from tag_commander.commands import EXIT_INDEX_ERROR, EXIT_SUCCESS, require_root
from tag_commander.index.builder import apply_changes, build_index
from tag_commander.index.session import get_index_session
from tag_commander.index.watcher import IndexWatcher
from tag_commander.utils.output import error, info, verbose


@click.command("watch")
@click.option(
    "--interval",
    "-i",
    type=click.FloatRange(min=0.1),
    default=2.0,
    show_default=True,
    help="Seconds between index updates",
)
@pass_context
def cli(ctx: Context, interval: float) -> None:
    """Watch the root directory and update the index on changes.

    The index is rescanned once at startup. Afterwards created, deleted
    and moved files are applied as they happen; moved files keep their
    tags. Stop with Ctrl+C.

    \b
    Examples:
      tag-commander watch
      tag-commander -v watch --interval 5
    """
    root = require_root(ctx.config)

    try:
        with get_index_session(root) as session:
            count = build_index(root, session)
            if not ctx.quiet:
                info(f"Indexed {count} files, watching {root} (Ctrl+C to stop)")

            with IndexWatcher(root) as watcher:
                try:
                    while True:
                        time.sleep(interval)
                        applied = apply_changes(session, watcher.drain())
                        if applied:
                            verbose(f"Applied {applied} change(s)")
                except KeyboardInterrupt:
                    if not ctx.quiet:
                        info("Stopped watching")
    except Exception as e:
        error(f"Index error: {e}")
        raise SystemExit(EXIT_INDEX_ERROR)

    raise SystemExit(EXIT_SUCCESS)
