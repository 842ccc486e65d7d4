"""CLI module for application management."""

import asyncio
import selectors
import sys
from collections.abc import Coroutine
from typing import Any

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from k8s_practice import PACKAGE_NAME, get_app_version
from k8s_practice.config.settings import get_settings
from k8s_practice.db.session import Database, describe_db_error
from k8s_practice.items.models import Item

console = Console()
error_console = Console(stderr=True)

app = typer.Typer(
    name=PACKAGE_NAME,
    help="K8s Practice Application - CLI management tool",
    no_args_is_help=True,
)


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run an async coroutine synchronously.

    On Windows, psycopg3 requires SelectorEventLoop instead of ProactorEventLoop.
    """
    if sys.platform == "win32":
        selector = selectors.SelectSelector()
        loop = asyncio.SelectorEventLoop(selector)
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()
    else:
        return asyncio.run(coro)


def handle_db_error(e: SQLAlchemyError) -> None:
    """Handle database errors with user-friendly message."""
    error_console.print("[red]Error: Unable to connect to database.[/red]")
    error_console.print(f"[dim]Details: {describe_db_error(e)}[/dim]")
    raise typer.Exit(1) from None


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server (host and port default to HOST and PORT)."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "k8s_practice.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command()
def version() -> None:
    """Show the application version."""
    typer.echo(f"{PACKAGE_NAME} version {get_app_version()}")


@app.command("init-db")
def init_db() -> None:
    """Create the items table if it does not exist."""
    settings = get_settings()
    if not settings.db_enabled:
        error_console.print(
            "[red]Error: Database is not enabled (set DB_ENABLED=true).[/red]"
        )
        raise typer.Exit(1)

    async def _init() -> None:
        database = Database.from_settings(settings)
        try:
            await database.create_schema()
        except SQLAlchemyError as e:
            handle_db_error(e)
        finally:
            await database.dispose()

    run_async(_init())
    console.print(
        f"[bold green]Table '{Item.__tablename__}' is ready on "
        f"{settings.db_host}:{settings.db_port}/{settings.db_name}[/bold green]"
    )


if __name__ == "__main__":
    app()
