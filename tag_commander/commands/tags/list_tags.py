"""List tags in use."""

from __future__ import annotations

import json

import click

from tag_commander.cli import Context, pass_context
from tag_commander.commands import EXIT_SUCCESS, require_root
from tag_commander.commands.tags import cli
from tag_commander.index.session import get_index_session
from tag_commander.index.tagging import list_tags
from tag_commander.utils.output import console, create_table, info


@cli.command("list")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@pass_context
def list_cmd(ctx: Context, output_format: str) -> None:
    """List all tags with the number of files carrying them."""
    root = require_root(ctx.config)

    with get_index_session(root) as session:
        rows = list_tags(session)

    if output_format == "json":
        click.echo(json.dumps([{"tag": tag, "files": count} for tag, count in rows], indent=2))
        raise SystemExit(EXIT_SUCCESS)

    if not rows:
        info("No tags yet")
        raise SystemExit(EXIT_SUCCESS)

    table = create_table(show_header=True, header_style="bold")
    table.add_column("Tag", style="tag")
    table.add_column("Files", justify="right")
    for tag, count in rows:
        table.add_row(tag, str(count))
    console.print(table)
    raise SystemExit(EXIT_SUCCESS)
