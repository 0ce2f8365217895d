"""splicefs command line tool."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from splicefs.cli import __version__
from splicefs.cli.utils.context import CLIContext
from splicefs.cli.utils.output import OutputFormat, OutputFormatter
from splicefs.core.config import get_settings
from splicefs.core.exceptions import SplicefsError
from splicefs.infrastructure.filesystem import FileSession
from splicefs.infrastructure.logging import setup_logging

app = typer.Typer(
    name="splicefs",
    help="splicefs - list directory trees and copy, slice and create files",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
)

console = Console()


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"splicefs v{__version__}")
        raise typer.Exit()


def _fail(cli_ctx: CLIContext, error: SplicefsError):
    cli_ctx.formatter.print_error(error.message, code=error.code)
    if cli_ctx.debug and error.details:
        cli_ctx.formatter.print_detail(error.details, title="Error Details")
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug output",
    ),
    output_format: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
):
    """
    splicefs file and directory tool
    """
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging(settings)

    ctx.obj = CLIContext(
        debug=debug,
        formatter=OutputFormatter(output_format, console=console),
        console=console,
        session=FileSession(settings=settings),
    )


@app.command("files")
def files_command(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to list"),
    extensions: Optional[str] = typer.Option(
        None, "--ext", "-e", help='Comma separated extensions, e.g. "txt,md" ("*" for all)'
    ),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subdirectories"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Show progress while reading"),
):
    """
    List files, optionally filtered by extension.

    Example:
        splicefs files ./docs --ext "txt, pdf" -r
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        listing = cli_ctx.session.readfiles(directory, extensions, recursive, verbose)
    except SplicefsError as e:
        _fail(cli_ctx, e)

    if not listing.exists:
        cli_ctx.formatter.print_warning(f"Directory '{listing.root_dir}' does not exist")
        raise typer.Exit(1)

    cli_ctx.formatter.print_list(
        [entry.to_dict() for entry in listing],
        columns=["index", "name", "directory", "extension"],
        title=f"Files in {listing.root_dir}",
    )


@app.command("info")
def info_command(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to list"),
    number: int = typer.Argument(..., help="1-based file number in the listing"),
    extensions: Optional[str] = typer.Option(None, "--ext", "-e", help="Comma separated extensions"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subdirectories"),
):
    """
    Show details and a fresh stat of one listed file.

    Example:
        splicefs info ./docs 3 --ext txt
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        listing = cli_ctx.session.readfiles(directory, extensions, recursive)
        info = listing.getfile(number)
    except SplicefsError as e:
        _fail(cli_ctx, e)

    cli_ctx.formatter.print_detail(info.to_dict(), title=info.full_path)


@app.command("dirs")
def dirs_command(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to list"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subdirectories"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Show progress while reading"),
):
    """
    List directories with their depth.
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        listing = cli_ctx.session.readdirs(directory, recursive, verbose)
    except SplicefsError as e:
        _fail(cli_ctx, e)

    if not listing.exists:
        cli_ctx.formatter.print_warning(f"Directory '{listing.root_dir}' does not exist")
        raise typer.Exit(1)

    cli_ctx.formatter.print_list(
        [entry.to_dict() for entry in listing],
        columns=["index", "full_path", "depth"],
        title=f"Directories in {listing.root_dir}",
    )


@app.command("tree")
def tree_command(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to list"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subdirectories"),
):
    """
    List directories and files, including symbolic links.
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        listing = cli_ctx.session.dirlist(directory, recursive)
    except SplicefsError as e:
        _fail(cli_ctx, e)

    if not listing.exists:
        cli_ctx.formatter.print_warning(f"Directory '{listing.root_dir}' does not exist")
        raise typer.Exit(1)

    formatter = cli_ctx.formatter
    if formatter.format != OutputFormat.TABLE:
        formatter.print_detail(listing.to_dict())
        return

    formatter.print_list(
        [entry.to_dict() for entry in listing.dirs],
        columns=["full_path", "kind", "depth"],
        title="Directories",
    )
    formatter.print_list(
        [entry.to_dict() for entry in listing.files],
        columns=["full_path", "kind"],
        title="Files",
    )


@app.command("cat")
def cat_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to print"),
    offset: int = typer.Option(0, "--offset", help="First byte to print"),
    length: Optional[int] = typer.Option(None, "--length", "-n", help="Number of bytes to print"),
):
    """
    Print a file, or a byte range of it.
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        data = cli_ctx.session.content(path, offset, length)
    except SplicefsError as e:
        _fail(cli_ctx, e)
    typer.echo(data, nl=False)


@app.command("copy")
def copy_command(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="File to copy"),
    destination: Path = typer.Argument(..., help="Destination file"),
    no_overwrite: bool = typer.Option(
        False, "--no-overwrite", "-n", help="Leave an existing destination untouched"
    ),
):
    """
    Copy a file.
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        copied = cli_ctx.session.copy(source, destination, no_overwrite)
    except SplicefsError as e:
        _fail(cli_ctx, e)

    if copied:
        cli_ctx.formatter.print_success(f"Copied '{source}' to '{destination}'")
    else:
        cli_ctx.formatter.print_warning(f"'{destination}' exists, not overwritten")


@app.command("mkdir")
def mkdir_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Directory to create"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Octal permission bits, e.g. 755"),
):
    """
    Create a directory and its missing parents.
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        permissions = int(mode, 8) if mode else None
    except ValueError:
        cli_ctx.formatter.print_error(f"Invalid mode '{mode}'")
        raise typer.Exit(1)

    try:
        created = cli_ctx.session.makedir(path, permissions)
    except SplicefsError as e:
        _fail(cli_ctx, e)

    if created:
        cli_ctx.formatter.print_success(f"Created {', '.join(created)}")
    else:
        cli_ctx.formatter.print_warning(f"'{path}' already exists")


if __name__ == "__main__":
    app()
