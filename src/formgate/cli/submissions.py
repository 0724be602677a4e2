"""Form submission CLI commands."""

import asyncio
from datetime import UTC, datetime

import typer
from rich.console import Console
from rich.table import Table

from formgate.database import close_db, ensure_schema, get_engine, get_session_context
from formgate.models import FormSubmission, SubmissionStatus
from formgate.services import forms
from formgate.services.errors import FormError

console = Console()
app = typer.Typer(help="Form submission commands")


@app.command("list")
def list_submissions(
    status: SubmissionStatus = typer.Option(SubmissionStatus.PENDING, "--status", "-s", help="Status to show"),
):
    """List the most recent submissions with a status."""

    async def _list() -> list[FormSubmission]:
        try:
            await ensure_schema(get_engine())
            async with get_session_context() as session:
                return await forms.list_submissions(session, status.value)
        finally:
            await close_db()

    submissions = asyncio.run(_list())

    table = Table(title=f"Submissions ({status.value})")
    table.add_column("ID", style="cyan")
    table.add_column("Guild", style="dim")
    table.add_column("User", style="dim")
    table.add_column("Nick", style="green")
    table.add_column("Idade")
    table.add_column("Logged", style="magenta")
    table.add_column("Created", style="dim")

    for submission in submissions:
        created = datetime.fromtimestamp(submission.created_at / 1000, UTC).strftime("%Y-%m-%d %H:%M")
        logged = "[green]Yes[/green]" if submission.logged else "No"
        table.add_row(
            str(submission.id),
            submission.guild_id,
            submission.user_id,
            submission.nick,
            str(submission.idade),
            logged,
            created,
        )

    console.print(table)


@app.command("decide")
def decide(
    submission_id: int = typer.Argument(..., help="Submission ID"),
    decision: str = typer.Argument(..., help="approved or rejected"),
):
    """Approve or reject a pending submission."""

    async def _decide() -> bool:
        try:
            await ensure_schema(get_engine())
            async with get_session_context() as session:
                return await forms.decide(session, submission_id, decision)
        finally:
            await close_db()

    try:
        changed = asyncio.run(_decide())
    except FormError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    if changed:
        console.print(f"[green]Submission {submission_id} {decision}[/green]")
    else:
        console.print(f"[yellow]Submission {submission_id} is not pending; nothing changed[/yellow]")
