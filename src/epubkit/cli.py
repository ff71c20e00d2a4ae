"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epubkit.commands.build import execute_build
from epubkit.commands.inspect import execute_inspect, execute_toc
from epubkit.errors import EpubError

app = typer.Typer(
    name="epubkit",
    help="Inspect EPUB archives and build new ones from HTML.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Inspect EPUB archives and build new ones from HTML."""
    configure_logging(verbose)


@app.command()
def inspect(
    source: Annotated[
        str,
        typer.Argument(help="Path or http(s) URL of the EPUB"),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the normalized fields as JSON"),
    ] = False,
    manifest: Annotated[
        bool,
        typer.Option("--manifest", "-m", help="Also list every manifest item"),
    ] = False,
) -> None:
    """Show an EPUB's metadata, identifier and reading order."""
    try:
        execute_inspect(source, as_json=as_json, show_manifest=manifest, console=console)
    except EpubError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def toc(
    source: Annotated[
        str,
        typer.Argument(help="Path or http(s) URL of the EPUB"),
    ],
) -> None:
    """Print the table of contents (NCX as HTML, or the EPUB 3 nav document)."""
    try:
        execute_toc(source, console=console)
    except EpubError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def build(
    options_path: Annotated[
        Path,
        typer.Argument(
            help="JSON file with the book options",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path,
        typer.Argument(help="Where to write the .epub"),
    ],
) -> None:
    """Generate an EPUB from a JSON options file."""
    try:
        execute_build(options_path, output, console=console)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
