"""Form token and submission operations.

Every operation validates its raw inputs before it touches the database and
then runs a single statement (``submit`` runs the token consumption and the
insert in one transaction).
"""

import logging
import math
import secrets
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select, update

from formgate.constants import LIST_LIMIT, MAX_INT, POLL_LIMIT, TOKEN_ALPHABET, TOKEN_LENGTH
from formgate.models import DECISIONS, FormSubmission, FormToken, SubmissionStatus
from formgate.services.errors import TokenNotFoundError, TokenUsedError, ValidationError

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """Generate a random form token (24 chars, no ambiguous characters)."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def coerce_text(value: Any) -> str:
    """Coerce a loosely typed form value to stripped text.

    Falsy values (missing, null, empty, 0) become an empty string. True
    becomes "true" and integral floats lose their ".0", the way JSON clients
    print them.
    """
    if not value:
        return ""
    if isinstance(value, bool):
        return "true"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def coerce_number(value: Any) -> float | None:
    """Coerce a number or numeric string to a finite float.

    Returns None for anything else, including booleans, blank strings,
    NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, int | float):
        return None

    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def coerce_int(value: Any) -> int | None:
    """Like coerce_number, but only accepts integral values that fit an INT column."""
    number = coerce_number(value)
    if number is None or not number.is_integer() or abs(number) > MAX_INT:
        return None
    return int(number)


async def create_token(session: AsyncSession, guild_id: Any, user_id: Any) -> FormToken:
    """Issue a new unused token for a guild/user pair."""
    guild_id = coerce_text(guild_id)
    user_id = coerce_text(user_id)
    if not guild_id or not user_id:
        raise ValidationError("guildId/userId required")

    form_token = FormToken(token=generate_token(), guild_id=guild_id, user_id=user_id, used=False)
    session.add(form_token)
    await session.commit()

    logger.info(f"Issued form token {form_token.token[:4]}... for user {user_id} in guild {guild_id}")
    return form_token


async def submit(
    session: AsyncSession,
    *,
    token: Any,
    nick: Any,
    idade: Any,
    motivo: Any,
    link_bonde: Any,
    discord_tag: Any = None,
) -> FormSubmission:
    """Consume a token and record the submission it unlocks.

    The token is claimed with a conditional UPDATE, so two concurrent
    submissions with the same token cannot both succeed. The claim and the
    insert share a transaction: if the insert fails the token stays unused.

    Raises:
        ValidationError: a required field is missing or malformed
        TokenNotFoundError: the token does not exist
        TokenUsedError: the token was already consumed
    """
    token = coerce_text(token)
    nick = coerce_text(nick)
    age = coerce_int(idade)
    motivo = coerce_text(motivo)
    link_bonde = coerce_text(link_bonde)
    discord_tag = coerce_text(discord_tag) or None

    if not token or not nick or age is None or not motivo or not link_bonde:
        raise ValidationError("Invalid fields")

    claim = (
        update(FormToken)
        .where(col(FormToken.token) == token, col(FormToken.used).is_(False))
        .values(used=True)
        .returning(col(FormToken.guild_id), col(FormToken.user_id))
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(claim)
    claimed = result.first()

    if claimed is None:
        owner = await session.scalar(select(FormToken.user_id).where(FormToken.token == token))
        await session.rollback()
        if owner is None:
            raise TokenNotFoundError("Invalid token")
        logger.warning(f"Rejected reuse of form token {token[:4]}... for user {owner}")
        raise TokenUsedError("Token already used")

    guild_id, user_id = claimed
    submission = FormSubmission(
        guild_id=guild_id,
        user_id=user_id,
        discord_tag=discord_tag,
        nick=nick,
        idade=age,
        motivo=motivo,
        link_bonde=link_bonde,
        status=SubmissionStatus.PENDING.value,
        logged=False,
    )
    session.add(submission)
    await session.commit()

    logger.info(f"Submission {submission.id} received from user {user_id} in guild {guild_id}")
    return submission


async def list_submissions(session: AsyncSession, status: Any = None) -> list[FormSubmission]:
    """List submissions with the given status, newest first (default: pending)."""
    status = str(status or SubmissionStatus.PENDING.value)

    stmt = (
        select(FormSubmission)
        .where(FormSubmission.status == status)
        .order_by(col(FormSubmission.id).desc())
        .limit(LIST_LIMIT)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def decide(session: AsyncSession, submission_id: Any, decision: Any) -> bool:
    """Approve or reject a pending submission.

    Decided submissions are terminal: deciding one again (or deciding an id
    that does not exist) changes nothing. Returns whether a row changed.
    """
    submission_id = coerce_int(submission_id)
    decision = coerce_text(decision)
    if submission_id is None or decision not in DECISIONS:
        raise ValidationError("Invalid id/decision")

    stmt = (
        update(FormSubmission)
        .where(
            col(FormSubmission.id) == submission_id,
            col(FormSubmission.status) == SubmissionStatus.PENDING.value,
        )
        .values(status=decision)
    )
    result = await session.execute(stmt)
    await session.commit()

    changed = result.rowcount > 0
    if changed:
        logger.info(f"Submission {submission_id} {decision}")
    else:
        logger.info(f"Submission {submission_id} not pending; {decision} ignored")
    return changed


async def poll_for_logs(session: AsyncSession, guild_id: Any) -> list[FormSubmission]:
    """Pending submissions of a guild the bot has not logged yet, oldest first."""
    guild_id = coerce_text(guild_id)
    if not guild_id:
        raise ValidationError("guildId required")

    stmt = (
        select(FormSubmission)
        .where(
            FormSubmission.guild_id == guild_id,
            FormSubmission.status == SubmissionStatus.PENDING.value,
            col(FormSubmission.logged).is_(False),
        )
        .order_by(col(FormSubmission.id).asc())
        .limit(POLL_LIMIT)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def mark_logged(session: AsyncSession, submission_id: Any) -> None:
    """Flag a submission as logged by the bot. Safe to repeat."""
    submission_id = coerce_int(submission_id)
    if submission_id is None:
        raise ValidationError("Invalid id")

    stmt = update(FormSubmission).where(col(FormSubmission.id) == submission_id).values(logged=True)
    await session.execute(stmt)
    await session.commit()
