"""Inspect and toc command implementations."""

import asyncio
import json

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from epubkit.config import ParserConfig
from epubkit.core.epub_parser import EpubSource, open_epub
from epubkit.models.epub import EpubDescriptor


def load_epub(
    source: EpubSource, console: Console, quiet: bool = False
) -> EpubDescriptor:
    """Open an EPUB, showing a spinner unless ``quiet``."""
    config = ParserConfig.from_env()
    if quiet:
        return asyncio.run(open_epub(source, config=config))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Parsing EPUB...", total=None)
        return asyncio.run(open_epub(source, config=config))


def first_meta(descriptor: EpubDescriptor, *keys: str) -> str | None:
    """First ``simple_meta`` value under any of ``keys``."""
    for entry in descriptor.easy.simple_meta:
        for key in keys:
            if entry.get(key):
                return entry[key]
    return None


def display_summary(descriptor: EpubDescriptor, console: Console) -> None:
    """Show the book info panel."""
    easy = descriptor.easy
    dc = descriptor.raw.json_.prefixes.dc
    title = first_meta(descriptor, f"{dc}title", "dc:title", "title") or "Unknown Title"
    creator = first_meta(descriptor, f"{dc}creator", "dc:creator", "creator")

    primary = easy.primary_id
    identifier = primary.value or "[dim]unresolved[/]"
    if primary.scheme:
        identifier += f" ({primary.scheme})"

    info_lines = [
        f"[bold]{title}[/]",
        f"[dim]Author:[/] {creator or 'Unknown'}",
        f"[dim]EPUB version:[/] {easy.epub_version or '?'}"
        + (" (nav document)" if easy.is_epub3 and easy.nav_map_html is None else ""),
        f"[dim]Identifier:[/] {identifier}",
        f"[dim]MD5:[/] {easy.md5}",
        f"[dim]Package:[/] {descriptor.paths.opf_path}",
    ]
    cover = easy.epub2_cover_url
    if cover is None and easy.epub3_cover_id in easy.item_hash_by_id:
        cover = descriptor.paths.content_root + easy.item_hash_by_id[easy.epub3_cover_id].href
    if cover:
        info_lines.append(f"[dim]Cover:[/] {cover}")

    console.print(Panel("\n".join(info_lines), title="Book Info", border_style="green"))


def display_spine(descriptor: EpubDescriptor, console: Console) -> None:
    """Show the reading order."""
    table = Table(title="Spine", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("idref", style="white")
    table.add_column("href", style="white")
    table.add_column("Linear", justify="center")

    for i, entry in enumerate(descriptor.easy.spine_order):
        item = descriptor.easy.item_hash_by_id.get(entry.idref)
        table.add_row(
            str(i + 1),
            entry.idref,
            item.href if item else "[red]missing[/]",
            "[green]yes[/]" if entry.is_linear else "[dim]no[/]",
        )
    console.print(table)


def display_manifest(descriptor: EpubDescriptor, console: Console) -> None:
    """Show every manifest item."""
    table = Table(title="Manifest", show_header=True, header_style="bold cyan")
    table.add_column("id", style="white")
    table.add_column("href", style="white")
    table.add_column("Media type", style="dim")
    table.add_column("Properties", style="yellow")

    for item in descriptor.easy.item_hash_by_id.values():
        table.add_row(item.id, item.href, item.media_type or "", item.properties or "")
    console.print(table)


def execute_inspect(
    source: EpubSource,
    as_json: bool,
    show_manifest: bool,
    console: Console,
) -> None:
    """Execute the inspect command."""
    descriptor = load_epub(source, console, quiet=as_json)

    if as_json:
        data = descriptor.model_dump(include={"easy", "paths"}, mode="json")
        console.print_json(json.dumps(data))
        return

    console.print()
    display_summary(descriptor, console)
    console.print()
    display_spine(descriptor, console)
    if show_manifest:
        console.print()
        display_manifest(descriptor, console)


def execute_toc(source: EpubSource, console: Console) -> None:
    """Print the table of contents markup."""
    descriptor = load_epub(source, console, quiet=True)
    easy = descriptor.easy
    markup = easy.nav_map_html if easy.nav_map_html is not None else easy.epub3_nav_html
    # Plain output so the markup can be piped
    console.print(markup or "", markup=False, highlight=False, soft_wrap=True)
