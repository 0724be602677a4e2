"""CLI commands using Typer."""

import typer

from formgate.cli.db import app as db_app
from formgate.cli.submissions import app as submissions_app
from formgate.cli.tokens import app as tokens_app

app = typer.Typer(name="formgate", help="Form Gateway CLI")

# Register sub-apps
app.add_typer(db_app, name="db")
app.add_typer(tokens_app, name="tokens")
app.add_typer(submissions_app, name="submissions")


@app.command()
def version():
    """Show version information."""
    from formgate import __version__

    typer.echo(f"Form Gateway v{__version__}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
):
    """Run the API server."""
    import uvicorn

    from formgate.logging import get_uvicorn_log_config

    uvicorn.run(
        "formgate.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=get_uvicorn_log_config(),
    )


if __name__ == "__main__":
    app()
