"""
CLI interface for directory bookmarks.

Usage:
    hop add proj ~/src/project -c work
    hop to proj
    hop list -c work
"""

import json
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
import typer
from typing_extensions import Annotated

from .api import Hopper
from .config import load_or_create_config
from .errors import HopError, InvalidArguments
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .shell import spawn_shell
from .types import Bookmark, local_timestamp


# Configure quiet mode by default
# Set HOP_VERBOSE=1 to enable debug mode via environment
if os.environ.get("HOP_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from . import __version__
        print(f"hop {__version__}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_file_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _file_callback(value: Optional[Path]):
    global _file_override
    _file_override = value


def _get_file_override() -> Optional[Path]:
    return _file_override


app = typer.Typer(
    name="hop",
    help="Bookmark directories and jump back to them.",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode=None,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


# -----------------------------------------------------------------------------
# Output Formatting
#
# Colors follow one rule: green for success, yellow for warnings, cyan for
# information and paths, red for errors (on stderr).
# --json replaces the human format for commands that list bookmarks.
# -----------------------------------------------------------------------------

def _success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def _warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def _info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)


def _error(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)


def _format_entry(bookmark: Bookmark, detail: str) -> str:
    """'name detail' with the name in green and the detail in cyan."""
    return (typer.style(bookmark.name, fg=typer.colors.GREEN)
            + " " + typer.style(detail, fg=typer.colors.CYAN))


STATS_ROW = "{:<25} {:<15} {:<7} {:<20} {}"


def _format_stats(bookmarks: list[Bookmark]) -> str:
    """Fixed-width table: name, category, count, last access, path."""
    lines = [
        STATS_ROW.format("Bookmark", "Category", "Count", "Last Access", "Path"),
        STATS_ROW.format("-" * 25, "-" * 15, "-" * 7, "-" * 20, "----"),
    ]
    for b in bookmarks:
        lines.append(STATS_ROW.format(
            b.name, b.category, b.access_count, local_timestamp(b.last_accessed), b.path,
        ))
    return "\n".join(lines)


def _echo_json(bookmarks: list[Bookmark]) -> None:
    typer.echo(json.dumps([b.to_dict() for b in bookmarks], indent=2))


@contextmanager
def _reporting_errors():
    """Turn expected failures into 'Error: ...' and exit code 1."""
    try:
        yield
    except HopError as e:
        _error(str(e))
        raise typer.Exit(1)


def _get_hopper() -> Hopper:
    """Load config and open the bookmark file, handling errors gracefully."""
    try:
        config = load_or_create_config()
    except (OSError, ValueError) as e:
        _error(f"Could not load configuration: {e}")
        raise typer.Exit(1)
    try:
        configure_ops_log(config.path)
    except OSError:
        pass  # Never block normal operation over the ops log
    return Hopper(_get_file_override(), config=config)


def _pick_category(positional: Optional[str], option: Optional[str]) -> Optional[str]:
    if positional and option and positional != option:
        raise InvalidArguments(
            f"Category given twice ('{positional}' and '{option}'). Use one or the other."
        )
    return option or positional


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output bookmark listings as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    bookmark_file: Annotated[Optional[Path], typer.Option(
        "--file", "-f",
        envvar="HOP_BOOKMARK_FILE",
        help="Path to the bookmark file (default: ~/.hop_bookmarks.txt)",
        callback=_file_callback,
        is_eager=True,
    )] = None,
):
    """Bookmark directories and jump back to them."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# -----------------------------------------------------------------------------
# Common Options
# -----------------------------------------------------------------------------

CategoryOption = Annotated[
    Optional[str],
    typer.Option(
        "--category", "-c",
        help="Category label"
    )
]


LimitOption = Annotated[
    Optional[int],
    typer.Option(
        "--limit", "-n",
        min=1,
        help="Maximum bookmarks to show (default: 10)"
    )
]


# -----------------------------------------------------------------------------
# Bookmark Management
# -----------------------------------------------------------------------------

@app.command()
def add(
    name: Annotated[str, typer.Argument(help="Bookmark name")],
    path: Annotated[Optional[str], typer.Argument(
        help="Directory to bookmark (default: current directory)"
    )] = None,
    category_arg: Annotated[Optional[str], typer.Argument(
        metavar="[CATEGORY]", help="Category label (default: general)"
    )] = None,
    category: CategoryOption = None,
):
    """
    Add a bookmark for a directory.

    \b
    Examples:
        hop add proj                     # current directory, category 'general'
        hop add proj ~/src/project       # explicit path
        hop add proj ~/src/project work  # path and category
        hop add proj . -c work
    """
    hp = _get_hopper()
    with _reporting_errors():
        bookmark = hp.add(name, path, _pick_category(category_arg, category))
    _success(f"Bookmark '{bookmark.name}' added under category "
             f"'{bookmark.category}' for path {bookmark.path}")


@app.command("set")
def set_cmd(
    name: Annotated[str, typer.Argument(help="Bookmark name")],
    category_arg: Annotated[Optional[str], typer.Argument(
        metavar="[CATEGORY]", help="Category label (default: general)"
    )] = None,
    category: CategoryOption = None,
):
    """Bookmark the current directory."""
    hp = _get_hopper()
    with _reporting_errors():
        bookmark = hp.set_here(name, _pick_category(category_arg, category))
    _success(f"Current location set as bookmark '{bookmark.name}' under category "
             f"'{bookmark.category}' at {bookmark.path}")


@app.command()
def rename(
    old: Annotated[str, typer.Argument(help="Current bookmark name")],
    new: Annotated[Optional[str], typer.Argument(help="New bookmark name")] = None,
    category: CategoryOption = None,
):
    """
    Rename a bookmark and/or change its category.

    \b
    Examples:
        hop rename proj project1
        hop rename proj -c archive
        hop rename proj project1 -c archive
    """
    hp = _get_hopper()
    with _reporting_errors():
        bookmark = hp.rename(old, new, category)
    if bookmark.name != old:
        _success(f"Bookmark '{old}' renamed to '{bookmark.name}'.")
    if category:
        _success(f"Category for bookmark '{bookmark.name}' changed to '{bookmark.category}'.")


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="Bookmark to remove")],
):
    """Remove a bookmark."""
    hp = _get_hopper()
    with _reporting_errors():
        hp.remove(name)
    _warning(f"Bookmark '{name}' removed.")


@app.command()
def clear(
    yes: Annotated[bool, typer.Option(
        "--yes", "-y",
        help="Don't ask for confirmation"
    )] = False,
):
    """Remove ALL bookmarks (asks for confirmation)."""
    hp = _get_hopper()
    if not yes:
        _warning(f"This action will delete ALL bookmarks permanently from {hp.path}!")
        confirmation = typer.prompt(
            "Are you sure you want to proceed? Type 'yes' to confirm",
            default="",
            show_default=False,
        )
        if confirmation != "yes":
            _success("Operation canceled. No bookmarks were cleared.")
            return
    with _reporting_errors():
        removed = hp.clear()
    typer.secho(f"All bookmarks cleared ({removed} removed).", fg=typer.colors.RED)


# -----------------------------------------------------------------------------
# Navigation
# -----------------------------------------------------------------------------

@app.command()
def to(
    name: Annotated[str, typer.Argument(help="Bookmark to jump to")],
    print_only: Annotated[bool, typer.Option(
        "--print", "-p",
        help="Print the path instead of starting a new shell"
    )] = False,
):
    """
    Jump to a bookmark.

    Starts a new shell in the bookmarked directory; type 'exit' or press
    Ctrl+D to return. With -p the path is printed instead, for use as
    cd "$(hop to <name> -p)". Either way the access is recorded.
    """
    hp = _get_hopper()
    with _reporting_errors():
        bookmark = hp.navigate(name)

    if print_only:
        if _get_json_output():
            typer.echo(json.dumps(bookmark.to_dict(), indent=2))
        else:
            typer.echo(bookmark.path)
        return

    _info(f"Changing directory to '{bookmark.path}' and starting a new shell...")
    _info("Type 'exit' or press Ctrl+D to return to the previous shell.")
    try:
        status = spawn_shell(bookmark.path, hp.config.shell or None)
    except (OSError, ValueError) as e:
        _error(f"Failed to start a shell in '{bookmark.path}': {e}")
        raise typer.Exit(1)
    raise typer.Exit(status)


# -----------------------------------------------------------------------------
# Listing and Information
# -----------------------------------------------------------------------------

@app.command("list")
def list_cmd(
    word: Annotated[Optional[str], typer.Argument(
        help="Only bookmarks whose name contains this text"
    )] = None,
    category: CategoryOption = None,
):
    """
    List bookmarks, optionally filtered by name or category.

    \b
    Examples:
        hop list              # everything
        hop list proj         # names containing 'proj'
        hop list -c work      # category 'work'
    """
    hp = _get_hopper()
    bookmarks = hp.list_bookmarks(word=word, category=category)
    if _get_json_output():
        _echo_json(bookmarks)
        return
    if not bookmarks:
        if word or category:
            _warning("No bookmarks found matching your criteria.")
        else:
            _warning("No bookmarks found.")
        return
    for b in bookmarks:
        typer.echo(_format_entry(b, b.path))


@app.command()
def stats():
    """Show every bookmark with its category, access count and last access."""
    hp = _get_hopper()
    bookmarks = hp.stats()
    if _get_json_output():
        _echo_json(bookmarks)
        return
    if not bookmarks:
        _warning("No bookmarks found.")
        return
    typer.echo(_format_stats(bookmarks))


@app.command()
def recent(limit: LimitOption = None):
    """Show the most recently accessed bookmarks."""
    hp = _get_hopper()
    limit = limit or hp.config.limit
    with _reporting_errors():
        bookmarks = hp.recent(limit)
    if _get_json_output():
        _echo_json(bookmarks)
        return
    if not bookmarks:
        _warning("No bookmarks with access times found.")
        return
    _info(f"Recently Accessed Bookmarks (Top {limit}):")
    for b in bookmarks:
        typer.echo(_format_entry(b, f"-> Last Accessed: {local_timestamp(b.last_accessed)}"))


@app.command()
def frequent(limit: LimitOption = None):
    """Show the most frequently accessed bookmarks."""
    hp = _get_hopper()
    limit = limit or hp.config.limit
    with _reporting_errors():
        bookmarks = hp.frequent(limit)
    if _get_json_output():
        _echo_json(bookmarks)
        return
    if not bookmarks:
        _warning("No bookmarks found.")
        return
    _info(f"Frequently Accessed Bookmarks (Top {limit}):")
    for b in bookmarks:
        typer.echo(_format_entry(b, f"-> Access Count: {b.access_count}"))


@app.command("help")
def help_cmd(ctx: typer.Context):
    """Show this help."""
    typer.echo(ctx.parent.get_help())


# -----------------------------------------------------------------------------

def main():
    try:
        status = app(standalone_mode=False)
    except click.exceptions.UsageError as e:
        # Unknown commands and bad arguments exit 1, like other failures
        e.show()
        raise SystemExit(1)
    except click.exceptions.Abort as e:
        if isinstance(e.__context__, KeyboardInterrupt):
            raise SystemExit(130)  # Standard exit code for Ctrl+C
        typer.echo("Aborted!", err=True)
        raise SystemExit(1)
    except click.exceptions.ClickException as e:
        e.show()
        raise SystemExit(e.exit_code)
    except KeyboardInterrupt:
        raise SystemExit(130)
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(
            e,
            context=" ".join(["hop", *sys.argv[1:]]),
            bookmark_file=_get_file_override(),
        )
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)
    raise SystemExit(status if isinstance(status, int) else 0)


if __name__ == "__main__":
    main()
