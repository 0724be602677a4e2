"""CLI command tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from formgate import __version__
from formgate.cli import app
from formgate.models import FormSubmission
from formgate.services.errors import ValidationError

runner = CliRunner()


@asynccontextmanager
async def fake_session_context():
    yield MagicMock()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_tokens_create():
    form_token = MagicMock(token="ABCDEFGHJKLMNPQRSTUVWXYZ")
    with (
        patch("formgate.cli.tokens.ensure_schema", new_callable=AsyncMock),
        patch("formgate.cli.tokens.get_engine"),
        patch("formgate.cli.tokens.close_db", new_callable=AsyncMock),
        patch("formgate.cli.tokens.get_session_context", fake_session_context),
        patch("formgate.cli.tokens.forms.create_token", new_callable=AsyncMock) as create_token,
    ):
        create_token.return_value = form_token
        result = runner.invoke(app, ["tokens", "create", "g1", "u1"])

    assert result.exit_code == 0
    assert "ABCDEFGHJKLMNPQRSTUVWXYZ" in result.stdout
    assert create_token.await_args.args[1:] == ("g1", "u1")


def test_tokens_create_rejects_blank_ids():
    with (
        patch("formgate.cli.tokens.ensure_schema", new_callable=AsyncMock),
        patch("formgate.cli.tokens.get_engine"),
        patch("formgate.cli.tokens.close_db", new_callable=AsyncMock),
        patch("formgate.cli.tokens.get_session_context", fake_session_context),
        patch("formgate.cli.tokens.forms.create_token", new_callable=AsyncMock) as create_token,
    ):
        create_token.side_effect = ValidationError("guildId/userId required")
        result = runner.invoke(app, ["tokens", "create", " ", "u1"])

    assert result.exit_code == 1
    assert "guildId/userId required" in result.stdout


def test_submissions_list():
    submission = FormSubmission(
        id=3,
        guild_id="g1",
        user_id="u1",
        nick="Ana",
        idade=21,
        motivo="x",
        link_bonde="http://x",
        created_at=1_700_000_000_000,
    )
    with (
        patch("formgate.cli.submissions.ensure_schema", new_callable=AsyncMock),
        patch("formgate.cli.submissions.get_engine"),
        patch("formgate.cli.submissions.close_db", new_callable=AsyncMock),
        patch("formgate.cli.submissions.get_session_context", fake_session_context),
        patch("formgate.cli.submissions.forms.list_submissions", new_callable=AsyncMock) as list_submissions,
    ):
        list_submissions.return_value = [submission]
        result = runner.invoke(app, ["submissions", "list", "--status", "pending"])

    assert result.exit_code == 0
    assert "Ana" in result.stdout
    assert list_submissions.await_args.args[1] == "pending"


def test_submissions_decide_not_pending():
    with (
        patch("formgate.cli.submissions.ensure_schema", new_callable=AsyncMock),
        patch("formgate.cli.submissions.get_engine"),
        patch("formgate.cli.submissions.close_db", new_callable=AsyncMock),
        patch("formgate.cli.submissions.get_session_context", fake_session_context),
        patch("formgate.cli.submissions.forms.decide", new_callable=AsyncMock) as decide,
    ):
        decide.return_value = False
        result = runner.invoke(app, ["submissions", "decide", "3", "approved"])

    assert result.exit_code == 0
    assert "not pending" in result.stdout
