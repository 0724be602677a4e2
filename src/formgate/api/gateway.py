"""Form gateway endpoint.

A single POST endpoint shared by the web form and the Discord bot. The JSON
body names an ``action``; each action validates its own fields and runs one
database operation.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from formgate.api.deps import AdminAuth, EngineDep, SessionDep
from formgate.database import ensure_schema
from formgate.schemas import (
    ErrorResponse,
    OkResponse,
    SubmissionCreated,
    SubmissionList,
    SubmissionRead,
    TokenCreated,
)
from formgate.services import forms
from formgate.services.errors import FormError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

ActionHandler = Callable[[AsyncSession, dict[str, Any]], Awaitable[dict[str, Any]]]


async def read_body(request: Request) -> dict[str, Any]:
    """Parse the JSON body, treating anything unparseable as an empty object."""
    raw = await request.body()
    try:
        body = json.loads(raw or b"{}")
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _items(submissions: list) -> dict[str, Any]:
    items = [SubmissionRead.model_validate(submission) for submission in submissions]
    return SubmissionList(items=items).model_dump(by_alias=True)


async def create_token_action(session: AsyncSession, body: dict[str, Any]) -> dict[str, Any]:
    form_token = await forms.create_token(session, body.get("guildId"), body.get("userId"))
    return TokenCreated(token=form_token.token).model_dump()


async def submit_action(session: AsyncSession, body: dict[str, Any]) -> dict[str, Any]:
    submission = await forms.submit(
        session,
        token=body.get("token"),
        nick=body.get("nick"),
        idade=body.get("idade"),
        motivo=body.get("motivo"),
        link_bonde=body.get("linkBonde"),
        discord_tag=body.get("discordTag"),
    )
    return SubmissionCreated(id=submission.id).model_dump()


async def list_action(session: AsyncSession, body: dict[str, Any]) -> dict[str, Any]:
    return _items(await forms.list_submissions(session, body.get("status")))


async def decide_action(session: AsyncSession, body: dict[str, Any]) -> dict[str, Any]:
    await forms.decide(session, body.get("id"), body.get("decision"))
    return OkResponse().model_dump()


async def poll_for_logs_action(session: AsyncSession, body: dict[str, Any]) -> dict[str, Any]:
    return _items(await forms.poll_for_logs(session, body.get("guildId")))


async def mark_logged_action(session: AsyncSession, body: dict[str, Any]) -> dict[str, Any]:
    await forms.mark_logged(session, body.get("id"))
    return OkResponse().model_dump()


ACTIONS: dict[str, ActionHandler] = {
    "createToken": create_token_action,
    "submit": submit_action,
    "list": list_action,
    "decide": decide_action,
    "pollForLogs": poll_for_logs_action,
    "markLogged": mark_logged_action,
}


@router.options("")
async def preflight() -> Response:
    """Pre-flight requests always succeed with an empty body."""
    return Response(status_code=status.HTTP_200_OK)


@router.post("")
async def gateway(request: Request, _admin: AdminAuth, engine: EngineDep, session: SessionDep):
    """Authenticate, make sure the tables exist, then run the requested action."""
    try:
        await ensure_schema(engine)
        body = await read_body(request)

        action = body.get("action")
        handler = ACTIONS.get(action) if isinstance(action, str) else None
        if handler is None:
            raise ValidationError("Unknown action")

        return await handler(session, body)
    except FormError:
        raise
    except Exception as e:
        logger.exception(f"Gateway action failed: {e!r}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(e) or "Internal error").model_dump(),
        )
