"""
Javadoc MCP CLI - Java API Documentation for LLM Clients

A command-line tool for:
1. Building a searchable index from an extracted Javadoc tree
2. Serving the index to LLM clients over MCP (stdio)
3. Querying the index directly from the terminal
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from javadoc_mcp import __version__, config
from javadoc_mcp.formatters import format_class_markdown
from javadoc_mcp.indexer import (
    DocumentationIndexer,
    IndexBuilder,
    SearchEngine,
    load_snapshot,
    load_task_categories,
    open_document_store,
)
from javadoc_mcp.schemas import EntityKind

app = typer.Typer(
    name="javadoc-mcp",
    help="Java API documentation search and MCP server",
    add_completion=False,
)

console = Console()

# MCP uses stdout; everything the serve command prints goes to stderr
err_console = Console(stderr=True)


def _load_engine(index_path: Path) -> SearchEngine:
    if not index_path.exists():
        console.print(f"[red]Error: Index not found: {index_path}[/red]")
        console.print("Run [cyan]javadoc-mcp build-index[/cyan] first.")
        raise typer.Exit(1)
    return SearchEngine(load_snapshot(index_path), config.search_settings())


def _preview(text: Optional[str], length: int = 80) -> str:
    if not text:
        return ""
    text = " ".join(text.split())
    return text if len(text) <= length else text[:length - 3] + "..."


@app.command("build-index")
def build_index(
    javadoc: Path = typer.Option(..., "--javadoc", "-j", help="Extracted Javadoc directory (contains type-search-index.js)"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Index file to write (default: $JAVADOC_MCP_INDEX_PATH or data/index.json)",
    ),
    categories: Optional[Path] = typer.Option(
        None,
        "--categories",
        "-c",
        help="JSON file mapping task labels to class FQNs",
    ),
    enrich: bool = typer.Option(
        False,
        "--enrich",
        "-e",
        help="Parse every class page to index descriptions and return types (slower)",
    ),
):
    """
    Build the JSON index from a Javadoc directory.

    Example:
        javadoc-mcp build-index --javadoc ./javadoc --categories categories.json --enrich
    """
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    output = output or config.index_path()

    try:
        console.print(Panel.fit(
            f"[bold cyan]Building Javadoc index[/bold cyan]\n\n"
            f"Javadoc: [cyan]{javadoc}[/cyan]\n"
            f"Output: [cyan]{output}[/cyan]\n"
            f"Enrich: [yellow]{enrich}[/yellow]",
            border_style="cyan",
        ))

        task_categories = load_task_categories(categories) if categories else None

        builder = IndexBuilder(javadoc)
        with console.status("[bold green]Parsing documentation..."):
            snapshot = builder.build(categories=task_categories, enrich=enrich)
        builder.save(snapshot, output)

        stats = SearchEngine(snapshot).get_stats()

        summary_table = Table(show_header=True, header_style="bold cyan")
        summary_table.add_column("Metric")
        summary_table.add_column("Value", justify="right")
        summary_table.add_row("Version", snapshot.version or "unknown")
        summary_table.add_row("Classes", str(stats.entity_count))
        summary_table.add_row("Methods", str(stats.method_count))
        summary_table.add_row("Packages", str(stats.package_count))
        summary_table.add_row("Task categories", str(stats.category_count))

        console.print("\n[bold green]✅ Index built[/bold green]\n")
        console.print(summary_table)
        console.print(f"\n📄 Index: [cyan]{output}[/cyan]")

    except (FileNotFoundError, ValueError) as e:
        console.print(f"\n[red]❌ Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="JSON index (default: $JAVADOC_MCP_INDEX_PATH or data/index.json)"),
    docs_path: Optional[Path] = typer.Option(None, "--docs-path", "-d", help="Javadoc directory or zip archive (default: $JAVADOC_MCP_DOCS_PATH)"),
    cache_size: Optional[int] = typer.Option(None, "--cache-size", help="Parsed class pages kept in memory (default: 50)"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Log file (default: stderr)"),
):
    """
    Start the Javadoc MCP server (stdio mode).

    Tools:
    - search_class, get_class_doc, search_method
    - find_package, search_package, get_index_overview
    """
    from javadoc_mcp.mcp_servers.docs_server import JavadocMCPServer, configure_logging

    index_path = index_path or config.index_path()
    docs_path = docs_path or config.docs_path()

    configure_logging(log_file or config.log_file())

    try:
        if docs_path is None:
            err_console.print("[red]Error: --docs-path or JAVADOC_MCP_DOCS_PATH is required[/red]")
            raise typer.Exit(1)
        if not index_path.exists():
            err_console.print(f"[red]Error: Index not found: {index_path}[/red]")
            raise typer.Exit(1)

        err_console.print("\n[bold cyan]🔌 Starting Javadoc MCP Server[/bold cyan]")
        err_console.print(f"Index: [cyan]{index_path}[/cyan]")
        err_console.print(f"Docs: [cyan]{docs_path}[/cyan]")
        err_console.print("\n[dim]Server starting in stdio mode...[/dim]")

        server = JavadocMCPServer(
            index_path,
            docs_path,
            cache_size=cache_size or config.cache_size(),
            settings=config.search_settings(),
        )
        asyncio.run(server.run())

    except KeyboardInterrupt:
        err_console.print("\n\n[yellow]Server stopped by user[/yellow]")
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"\n[red]❌ Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("search-class")
def search_class(
    query: str = typer.Argument(..., help="Class name or description text"),
    kind: Optional[EntityKind] = typer.Option(None, "--kind", "-k", help="Filter by kind"),
    package: Optional[str] = typer.Option(None, "--package", "-p", help="Exact package filter"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Maximum number of results"),
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="JSON index"),
):
    """Search classes by name or description."""
    engine = _load_engine(index_path or config.index_path())
    results = engine.search_classes(query, kind=kind, package=package, limit=limit)

    if not results:
        console.print(f"[yellow]No classes match '{query}'[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Class")
    table.add_column("Kind")
    table.add_column("Package")
    table.add_column("Score", justify="right")
    table.add_column("Description")
    for result in results:
        table.add_row(
            result.name,
            result.kind.value,
            result.package,
            f"{result.relevance_score:.3f}",
            _preview(result.description),
        )
    console.print(table)


@app.command("search-method")
def search_method(
    method_name: str = typer.Argument(..., help="Method name"),
    class_name: Optional[str] = typer.Option(None, "--class", "-c", help="Class name contains"),
    return_type: Optional[str] = typer.Option(None, "--returns", "-r", help="Return type contains"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Maximum number of results"),
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="JSON index"),
):
    """Search methods across all classes."""
    engine = _load_engine(index_path or config.index_path())
    results = engine.search_methods(method_name, class_name=class_name, return_type=return_type, limit=limit)

    if not results:
        console.print(f"[yellow]No methods match '{method_name}'[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Signature")
    table.add_column("Class")
    table.add_column("Returns")
    table.add_column("Score", justify="right")
    for result in results:
        table.add_row(
            result.signature,
            result.class_name,
            result.return_type or "",
            f"{result.relevance_score:.3f}",
        )
    console.print(table)


@app.command("find-package")
def find_package(
    task: str = typer.Argument(..., help="Development task (e.g., 'validation')"),
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="JSON index"),
):
    """Find packages for a development task."""
    engine = _load_engine(index_path or config.index_path())
    results = engine.find_packages_by_task(task)

    if not results:
        console.print(f"[yellow]No task category matches '{task}'[/yellow]")
        if engine.categories_by_task:
            console.print(f"Known categories: {', '.join(sorted(engine.categories_by_task))}")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Package")
    table.add_column("Key classes")
    table.add_column("Score", justify="right")
    for result in results:
        table.add_row(
            result.name,
            ", ".join(name.rsplit(".", 1)[-1] for name in result.key_classes),
            f"{result.relevance_score:.2f}",
        )
    console.print(table)


@app.command("class-doc")
def class_doc(
    class_name: str = typer.Argument(..., help="Fully-qualified or simple class name"),
    docs_path: Optional[Path] = typer.Option(None, "--docs-path", "-d", help="Javadoc directory or zip archive"),
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="JSON index"),
    raw: bool = typer.Option(False, "--raw", help="Print Markdown source instead of rendering it"),
):
    """Show the full documentation of a class."""
    index_path = index_path or config.index_path()
    docs_path = docs_path or config.docs_path()

    if docs_path is None:
        console.print("[red]Error: --docs-path or JAVADOC_MCP_DOCS_PATH is required[/red]")
        raise typer.Exit(1)

    try:
        indexer = DocumentationIndexer(index_path, open_document_store(docs_path), settings=config.search_settings())
        indexer.initialize()
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    doc = indexer.get_class_doc(class_name)
    if doc is None:
        console.print(f"[red]Class not found: {class_name}[/red]")
        raise typer.Exit(1)

    markdown = format_class_markdown(doc)
    if raw:
        console.print(markdown, markup=False, highlight=False)
    else:
        console.print(Markdown(markdown))


@app.command()
def stats(
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="JSON index"),
):
    """Show index statistics."""
    index_path = index_path or config.index_path()
    engine = _load_engine(index_path)
    index_stats = engine.get_stats()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Version", engine.version or "unknown")
    table.add_row("Classes", str(index_stats.entity_count))
    table.add_row("Class keys (with aliases)", str(index_stats.entity_count_with_aliases))
    table.add_row("Method names", str(index_stats.method_name_count))
    table.add_row("Methods (with overloads)", str(index_stats.method_count))
    table.add_row("Packages", str(index_stats.package_count))
    table.add_row("Task categories", str(index_stats.category_count))

    console.print(Panel.fit(f"[bold]Index:[/bold] {index_path}", border_style="cyan"))
    console.print(table)


@app.command()
def version(
    index_path: Optional[Path] = typer.Option(None, "--index-path", "-i", help="Also show the documented library version"),
):
    """Show the javadoc-mcp version."""
    console.print(f"javadoc-mcp {__version__}")
    if index_path:
        engine = _load_engine(index_path)
        console.print(f"Documentation version: {engine.version or 'unknown'}")


def main():
    """Entry point for the javadoc-mcp console script."""
    app()


if __name__ == "__main__":
    main()
