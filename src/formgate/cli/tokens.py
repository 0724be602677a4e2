"""Form token CLI commands."""

import asyncio

import typer
from rich.console import Console

from formgate.database import close_db, ensure_schema, get_engine, get_session_context
from formgate.services import forms
from formgate.services.errors import FormError

console = Console()
app = typer.Typer(help="Form token commands")


@app.command("create")
def create_token(
    guild_id: str = typer.Argument(..., help="Guild ID the token is issued in"),
    user_id: str = typer.Argument(..., help="User ID the token is issued for"),
):
    """Issue a single-use form token."""

    async def _create() -> str:
        try:
            await ensure_schema(get_engine())
            async with get_session_context() as session:
                form_token = await forms.create_token(session, guild_id, user_id)
                return form_token.token
        finally:
            await close_db()

    try:
        token = asyncio.run(_create())
    except FormError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    console.print(f"[green]Token:[/green] {token}")
