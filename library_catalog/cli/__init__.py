"""Main CLI application module."""

import typer

from library_catalog.api.utils.app_startup import configure_logging

from .catalog_commands import init_db, seed, serve

app = typer.Typer(
    name="library-catalog",
    help="📚 Library Catalog CLI - database and server commands",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("init-db")(init_db)
app.command("seed")(seed)
app.command("serve")(serve)


def main() -> None:
    """Main entry point for the CLI."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
