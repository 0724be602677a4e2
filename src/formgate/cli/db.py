"""Database management CLI commands."""

import asyncio

import typer
from rich.console import Console

from formgate.database import close_db, ensure_schema, get_engine
from formgate.logging import setup_logging

console = Console()
app = typer.Typer(help="Database management commands")


@app.command("init")
def init():
    """Create the form tables if they do not exist yet."""
    setup_logging()

    async def _init():
        try:
            await ensure_schema(get_engine())
        finally:
            await close_db()

    console.print("[dim]Creating tables...[/dim]")
    asyncio.run(_init())
    console.print("[green]Tables ready![/green]")
