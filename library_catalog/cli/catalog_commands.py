"""Catalog CLI commands."""

from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from library_catalog.core.errors import BookValidationError
from library_catalog.core.services import BookCatalog, DbManageService, DbSessionService
from library_catalog.runtime.context import get_config
from library_catalog.runtime.init_db import init_db as create_tables

console = Console()


def init_db() -> None:
    """🗄️ Create the catalog tables in the configured database."""
    create_tables()
    console.print("[green]✓[/green] Database tables created")


def load_seed_file(path: Path) -> list[dict]:
    """Read a YAML list of book mappings."""
    try:
        loaded = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if loaded is None:
        return []
    if not isinstance(loaded, list) or not all(isinstance(item, dict) for item in loaded):
        raise ValueError("Seed file must contain a list of book mappings")
    return loaded


def seed(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML list of books"),
) -> None:
    """🌱 Load books from a YAML file, skipping entries that fail validation."""
    try:
        entries = load_seed_file(file)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    database_service = DbSessionService(get_config())
    DbManageService(database_service.engine).create_all()

    table = Table(title=f"Seeded from {file.name}")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Status")

    created = skipped = 0
    try:
        with database_service.session_scope() as session:
            catalog = BookCatalog(session)
            for entry in entries:
                try:
                    book = catalog.create(entry)
                except BookValidationError as e:
                    skipped += 1
                    table.add_row(
                        escape(str(entry.get("title") or "-")),
                        escape(str(entry.get("author") or "-")),
                        f"[red]skipped: {escape(e.message)}[/red]",
                    )
                    continue
                created += 1
                table.add_row(escape(book.title), escape(book.author), "[green]created[/green]")
    finally:
        database_service.dispose()

    console.print(table)
    console.print(f"[green]{created} created[/green], [yellow]{skipped} skipped[/yellow]")


def serve(
    host: str = typer.Option(None, help="Bind host (defaults to config app.host)"),
    port: int = typer.Option(None, help="Bind port (defaults to config app.port)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """🚀 Run the web application with uvicorn."""
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    console.print(f"[blue]Starting Library Catalog on http://{host}:{port}/books[/blue]")
    uvicorn.run(
        "library_catalog.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        access_log=False,
    )
