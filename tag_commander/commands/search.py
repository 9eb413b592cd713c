"""Search indexed files by tag and path."""

from __future__ import annotations

import io
import json

import click
from rich.console import Console

from tag_commander.cli import Context, pass_context
from tag_commander.commands import (
    EXIT_INDEX_ERROR,
    EXIT_NO_RESULTS,
    EXIT_PARSE_ERROR,
    EXIT_SUCCESS,
    require_root,
)
from tag_commander.exceptions import QueryError, QuerySyntaxError
from tag_commander.index.builder import build_index
from tag_commander.index.models import IndexedFile, IndexState
from tag_commander.index.session import get_index_session
from tag_commander.index.tagging import tags_by_file
from tag_commander.query.compiler import PathMatch, compile_expression, render_predicate
from tag_commander.query.execute import count_tagged, execute_search
from tag_commander.query.parser import parse_query
from tag_commander.query.traversal import contains_path_term, tag_names
from tag_commander.utils.output import (
    THEME,
    console,
    create_progress,
    create_table,
    error,
    error_console,
    info,
    pager_print,
    warning,
)


def _show_syntax_error(e: QuerySyntaxError) -> None:
    """Print the query with a caret under the offending position."""
    error(f"Invalid search query: {e.reason}")
    error_console.print(f"  {e.query}", markup=False, highlight=False)
    error_console.print(f"  {' ' * e.position}^", markup=False, highlight=False)


@click.command("search")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "paths", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Limit number of results (default: search.default_limit from config)",
)
@click.option(
    "--path-match",
    "-m",
    type=click.Choice([m.value for m in PathMatch]),
    default=None,
    help="How inpath: patterns match (default: search.path_match from config)",
)
@click.option(
    "--explain",
    is_flag=True,
    default=False,
    help="Print the parsed query and the generated SQL predicate",
)
@click.option(
    "--rescan",
    is_flag=True,
    default=False,
    help="Rescan the root directory before searching",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    output_format: str,
    limit: int | None,
    path_match: str | None,
    explain: bool,
    rescan: bool,
) -> None:
    """Search indexed files by tag and path.

    QUERY is joined with spaces. Terms next to each other must all match,
    "|" separates alternatives, "-" negates a single term.

    \b
    Syntax examples:
      tag-commander search kick
      tag-commander search "kick snare"
      tag-commander search "kick -acoustic"
      tag-commander search -- -acoustic
      tag-commander search "kick | snare"
      tag-commander search "a b -e inpath:1 | d e inpath:0"
      tag-commander search -m prefix inpath:res/audio/

    \b
    Output formats:
      --format table   Rich table (default)
      --format paths   One file path per line (for piping)
      --format json    JSON array of file objects
    """
    config = ctx.config
    root = require_root(config)

    query_string = " ".join(query)

    try:
        expr = parse_query(query_string)
    except QuerySyntaxError as e:
        _show_syntax_error(e)
        raise SystemExit(EXIT_PARSE_ERROR)
    except QueryError as e:
        error(f"Invalid search query: {e}")
        raise SystemExit(EXIT_PARSE_ERROR)

    match_mode = PathMatch(path_match) if path_match is not None else config.path_match
    if limit is None:
        limit = config.default_limit

    if explain:
        console.print(repr(expr), markup=False, soft_wrap=True)
        console.print(
            render_predicate(compile_expression(expr, match_mode)), markup=False, soft_wrap=True
        )

    try:
        with get_index_session(root) as session:
            if rescan or session.get(IndexState, 1) is None:
                info("Building index...")
                with create_progress() as progress:
                    task = progress.add_task("Scanning files...", total=None)
                    count = build_index(root, session)
                    progress.update(task, completed=count, total=count)
                info(f"Index built with {count} files")

            if not ctx.quiet:
                for name in sorted(tag_names(expr)):
                    if count_tagged(session, name) == 0:
                        warning(f"No files are tagged '{name}'")

            files = execute_search(session, expr, path_match=match_mode, limit=limit)

            if not files:
                info(f"No results for: {query_string}")
                if contains_path_term(expr) and match_mode is PathMatch.EXACT:
                    info("inpath: matches whole paths; try --path-match prefix")
                raise SystemExit(EXIT_NO_RESULTS)

            tags = tags_by_file(session, [f.id for f in files])

            if output_format == "table":
                _print_table(files, query_string, tags)
            elif output_format == "paths":
                _print_paths(files)
            elif output_format == "json":
                _print_json(files, tags)

    except Exception as e:
        error(f"Index error: {e}")
        raise SystemExit(EXIT_INDEX_ERROR)

    raise SystemExit(EXIT_SUCCESS)


def _print_table(
    files: list[IndexedFile],
    query_string: str,
    tags: dict[int, list[str]],
) -> None:
    """Print results as a Rich table, using pager when appropriate."""
    info(f"Search: {query_string} ({len(files)} results)")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("Path", style="path", no_wrap=True)
    table.add_column("Tags", style="tag")
    table.add_column("Present", justify="center")

    for f in files:
        table.add_row(f.path, ", ".join(tags.get(f.id, [])), "" if f.present else "missing")

    # Render to buffer so we can route through pager
    buf = io.StringIO()
    render_console = Console(
        file=buf,
        theme=THEME,
        force_terminal=not console.no_color,
        width=1000,
        no_color=console.no_color,
    )
    render_console.print(table)
    pager_print(buf.getvalue(), header_lines=3)


def _print_paths(files: list[IndexedFile]) -> None:
    """Print one file path per line."""
    for f in files:
        click.echo(f.path)


def _print_json(files: list[IndexedFile], tags: dict[int, list[str]]) -> None:
    """Print results as JSON array."""
    results = [
        {
            "id": f.id,
            "path": f.path,
            "tags": tags.get(f.id, []),
            "present": f.present,
        }
        for f in files
    ]
    click.echo(json.dumps(results, indent=2))
