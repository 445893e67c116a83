"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from epub_reader.core.content_processor import ContentProcessor
from epub_reader.core.epub_parser import BookSession, EpubParser
from epub_reader.core.position import PositionCodec
from epub_reader.errors import EpubError
from epub_reader.models.book import TOCNode
from epub_reader.models.settings import ParserSettings

app = typer.Typer(
    name="epub-reader",
    help="Inspect EPUB files: metadata, table of contents, chapters and assets.",
    add_completion=False,
)

console = Console()

# Position subcommand group
position_app = typer.Typer(help="Reading position tokens")
app.add_typer(position_app, name="position")

BookArgument = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


class State:
    settings: ParserSettings = ParserSettings()


@app.callback()
def main(
    settings_file: Annotated[
        Optional[Path],
        typer.Option(
            "--settings",
            help="JSON file overriding parser settings",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Inspect EPUB files: metadata, table of contents, chapters and assets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    if settings_file is None:
        State.settings = ParserSettings()
        return
    try:
        State.settings = ParserSettings.from_file(settings_file)
    except ValueError as e:
        console.print(f"[red]Invalid settings file: {escape(str(e))}[/]")
        raise typer.Exit(1)


def open_book(book_path: Path) -> BookSession:
    """Parse ``book_path`` or exit with the fatal error printed."""
    try:
        return EpubParser.from_path(book_path, State.settings).parse()
    except EpubError as e:
        console.print(f"[red]Error reading file: {escape(e.message)}[/]")
        raise typer.Exit(1)


@app.command()
def info(book_path: BookArgument) -> None:
    """Display book metadata and the chapter list."""
    session = open_book(book_path)
    book = session.book

    info_lines = [
        f"[bold]{escape(book.title)}[/]",
        "",
        f"[dim]Author:[/] {escape(book.author)}",
        f"[dim]Language:[/] {escape(book.language or 'Unknown')}",
        f"[dim]Chapters:[/] {len(book.chapters)}",
        f"[dim]Cover:[/] {'yes' if session.cover() is not None else 'no'}",
    ]
    if book.description:
        info_lines.extend(["", escape(book.description)])

    # Show warnings if any
    if book.warnings:
        info_lines.append("")
        for warning in book.warnings:
            info_lines.append(f"[yellow]! {escape(warning)}[/]")

    console.print()
    console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))

    console.print()
    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("File", style="dim")
    table.add_column("Position", style="green")

    for chapter in book.chapters:
        table.add_row(
            str(chapter.index),
            escape(chapter.title),
            escape(chapter.href),
            session.position(chapter.index),
        )

    console.print(table)
    console.print()


@app.command()
def toc(book_path: BookArgument) -> None:
    """Display the table of contents as a tree."""
    session = open_book(book_path)

    if not session.book.toc:
        console.print("[dim]No table of contents[/]")
        return

    tree = Tree(f"[bold]{escape(session.book.title)}[/]")

    def add_nodes(parent: Tree, nodes: tuple[TOCNode, ...] | list[TOCNode]) -> None:
        for node in nodes:
            index = session.find_chapter(node.href)
            target = f"[dim]{escape(node.href)}[/]" if index is None else f"[green]#{index}[/]"
            branch = parent.add(f"{escape(node.title or 'Untitled')}  {target}")
            add_nodes(branch, node.children)

    add_nodes(tree, session.book.toc)
    console.print(tree)


@app.command()
def chapter(
    book_path: BookArgument,
    index: Annotated[int, typer.Argument(help="Chapter index (0-based)", min=0)],
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown, text, html, or raw",
        ),
    ] = "markdown",
) -> None:
    """Print one chapter."""
    if output_format not in ("markdown", "text", "html", "raw"):
        console.print(
            f"[red]Invalid format: {output_format}. Use markdown, text, html, or raw.[/]"
        )
        raise typer.Exit(1)

    session = open_book(book_path)
    selected = session.chapter(index)
    if selected is None:
        console.print(f"[red]No chapter {index}; the book has {len(session.chapters)}[/]")
        raise typer.Exit(1)

    if output_format == "raw":
        content = selected.content
    else:
        processor = ContentProcessor(State.settings)
        content = processor.process(selected.content, output_format)  # type: ignore

    console.print(f"[bold]{escape(selected.title)}[/]", highlight=False)
    console.print(content, markup=False, highlight=False)


@app.command()
def resource(
    book_path: BookArgument,
    href: Annotated[str, typer.Argument(help="Asset href as written in the chapter")],
    chapter_index: Annotated[
        int,
        typer.Option("--chapter", "-c", help="Chapter the href appears in", min=0),
    ] = 0,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the asset here (default: print size)"),
    ] = None,
) -> None:
    """Resolve an asset reference and extract it."""
    session = open_book(book_path)
    data = session.resource(href, chapter_index)
    if data is None:
        console.print(f"[red]Resource not found: {escape(href)}[/]")
        raise typer.Exit(1)

    if output is None:
        console.print(f"[green]{escape(href)}[/]: {len(data):,} bytes")
    else:
        output.write_bytes(data)
        console.print(f"[green]Wrote {len(data):,} bytes to {escape(str(output))}[/]")


@position_app.command("encode")
def position_encode(
    index: Annotated[int, typer.Argument(help="Chapter index (0-based)", min=0)],
) -> None:
    """Print the position token for a chapter index."""
    console.print(PositionCodec.encode(index), markup=False, highlight=False)


@position_app.command("decode")
def position_decode(
    token: Annotated[str, typer.Argument(help="Position token, e.g. pos(/6/4)")],
) -> None:
    """Print the chapter index stored in a position token."""
    console.print(str(PositionCodec.decode(token)), highlight=False)


if __name__ == "__main__":
    app()
