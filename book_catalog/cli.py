"""Command line interface for running and maintaining the book catalog."""

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from book_catalog.core.covers import resolve_cover_url
from book_catalog.core.errors import CatalogError
from book_catalog.core.services import BookService, DbManageService, DbSessionService
from book_catalog.runtime.context import get_config

console = Console()

app = typer.Typer(
    help="📚 Book catalog service",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def get_database_service() -> DbSessionService:
    """Create a database service and make sure the schema exists."""
    try:
        database_service = DbSessionService()
        DbManageService(database_service.engine).create_all()
        return database_service
    except Exception as e:
        console.print(f"[red]❌ Failed to open the book store: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind (defaults to config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on (defaults to config)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "book_catalog.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,  # We handle access logging in middleware
    )


@app.command("init-db")
def init_db(
    reset: bool = typer.Option(False, "--reset", help="Drop existing tables first"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Create the book tables."""
    database_service = DbSessionService()
    manager = DbManageService(database_service.engine)

    if reset:
        if not force and not Confirm.ask("Drop every stored book?"):
            console.print("[yellow]Reset cancelled[/yellow]")
            return
        manager.drop_all()

    manager.create_all()
    console.print("[green]✅ Database initialized[/green]")


@app.command("seed")
def seed() -> None:
    """Insert the starter catalog into an empty store."""
    database_service = get_database_service()

    try:
        with database_service.session_scope() as session:
            count = BookService(session).seed_if_empty()
    except CatalogError as e:
        console.print(f"[yellow]{e.message}[/yellow]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Seeded {count} books[/green]")


@app.command("list")
def list_books(
    resolve: bool = typer.Option(False, "--resolve", "-r", help="Show resolved cover URLs"),
) -> None:
    """List stored books, newest first."""
    database_service = get_database_service()
    base_url = get_config().catalog.public_base_url

    try:
        with database_service.session_scope() as session:
            books = BookService(session).list_books()
    except CatalogError as e:
        console.print(f"[red]❌ Failed to list books: {e.message}[/red]")
        raise typer.Exit(code=1) from e

    if not books:
        console.print("[yellow]No books found[/yellow]")
        return

    table = Table(title="Books")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Author", style="blue")
    table.add_column("Genre", style="magenta")
    table.add_column("Year", style="yellow")
    table.add_column("Cover")

    for book in books:
        cover = book.cover or ""
        if resolve:
            cover = resolve_cover_url(cover, base_url)
        if cover.startswith("data:"):
            cover = "(inline image)"
        table.add_row(book.id, book.title, book.author, book.genre, str(book.year), cover)

    console.print(table)
    console.print(f"\n[green]Found {len(books)} books[/green]")


@app.command("resolve-cover")
def resolve_cover(
    cover: str = typer.Argument(..., help="Stored cover value"),
    base_url: str | None = typer.Option(None, "--base-url", "-b", help="Static file base URL (defaults to config)"),
) -> None:
    """Print the URL a client would display for a stored cover value."""
    typer.echo(resolve_cover_url(cover, base_url or get_config().catalog.public_base_url))


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
