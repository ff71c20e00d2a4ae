"""Build command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from epubkit.core.epub_builder import EpubBuilder
from epubkit.models.build import EpubOptions


def load_options(options_path: Path) -> EpubOptions:
    """Read generation options from a JSON file.

    Relative cover and font paths are resolved against the file's folder.
    """
    options = EpubOptions.model_validate_json(options_path.read_text(encoding="utf-8"))
    base = options_path.parent

    def resolve(path: str) -> str:
        p = Path(path)
        return str(p if p.is_absolute() else base / p)

    return options.model_copy(
        update={
            "cover": resolve(options.cover) if options.cover else None,
            "fonts": [resolve(font) for font in options.fonts],
        }
    )


def execute_build(options_path: Path, output: Path, console: Console) -> Path:
    """Execute the build command."""
    options = load_options(options_path)
    builder = EpubBuilder(options)
    written = builder.write(output)

    summary_lines = [
        f"[green]Wrote {written}[/]",
        "",
        f"[dim]Title:[/] {options.title}",
        f"[dim]Chapters:[/] {len(builder.chapters)}",
        f"[dim]EPUB version:[/] {options.version}",
    ]
    console.print(Panel("\n".join(summary_lines), title="Complete", border_style="green"))
    return written
