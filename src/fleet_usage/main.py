import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.panel import Panel

from fleet_usage import __version__
from fleet_usage.config import config
from fleet_usage.db.sqlite import Database
from fleet_usage.fleet_app import FleetApp
from fleet_usage.utils.logging import setup_logging

# Create CLI app
app = typer.Typer(
    name="fleet-usage",
    help="Tracks which driver is using which automobile",
    add_completion=False
)

console = Console()
logger = logging.getLogger(__name__)


def print_welcome_message(fleet_app: FleetApp) -> None:
    """Print a welcome message."""
    message = """
[bold cyan]Fleet Usage Service[/bold cyan]

[italic]Who is driving what, and since when[/italic]

Storage: {backend}
Version: {version}
    """.format(backend=fleet_app.backend, version=__version__)

    console.print(Panel(message, title="Welcome", expand=False))


@app.callback()
def callback():
    """Fleet Usage Service."""
    setup_logging()


@app.command()
def start(
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Port for the HTTP API"
    ),
    host: Optional[str] = typer.Option(
        None, "--host", help="Interface the HTTP API binds to"
    ),
    storage: Optional[str] = typer.Option(
        None, "--storage", "-s", help="Storage backend: memory or sqlite"
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", "-d", help="Directory holding the SQLite database"
    ),
):
    """Start the HTTP service."""
    # Override config with command line arguments
    if port:
        config.api.http_port = port

    if host:
        config.api.host = host

    if storage:
        config.storage.backend = storage.lower()

    if data_dir:
        config.storage.data_dir = str(data_dir)

    try:
        fleet_app = FleetApp()
    except ValueError as e:
        print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    print_welcome_message(fleet_app)

    print("[bold]Configuration:[/bold]")
    print(f"  Listening on: {config.api.host}:{config.api.http_port}")
    if fleet_app.backend == "sqlite":
        print(f"  Database: {config.db_file()}")
    print("")

    try:
        asyncio.run(_run_fleet_app(fleet_app))
    except KeyboardInterrupt:
        print("\nShutting down...")
    except Exception as e:
        logger.error(f"Error running fleet application: {e}", exc_info=True)
        print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command("init-db")
def init_db(
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", "-d", help="Directory holding the SQLite database"
    ),
):
    """Create the SQLite schema without starting the service."""
    if data_dir:
        config.storage.data_dir = str(data_dir)

    path = asyncio.run(_init_db())
    print(f"[bold green]Database ready:[/bold green] {path}")


async def _run_fleet_app(fleet_app: FleetApp) -> None:
    """Run the application until it is stopped."""
    await fleet_app.start()
    await fleet_app.wait_for_stop()


async def _init_db() -> Path:
    db = Database()
    await db.initialize()
    await db.close()
    return db.path


if __name__ == "__main__":
    app()
