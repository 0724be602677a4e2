"""Form submission model."""

from enum import Enum

from sqlalchemy import BigInteger, Column, String, false
from sqlmodel import Field, SQLModel

from formgate.models.base import now_ms


class SubmissionStatus(str, Enum):
    """Moderation status of a submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Statuses a pending submission may move to
DECISIONS = frozenset({SubmissionStatus.APPROVED.value, SubmissionStatus.REJECTED.value})


class FormSubmission(SQLModel, table=True):
    """A submitted form awaiting (or carrying) a moderation decision."""

    __tablename__ = "form_submissions"

    id: int | None = Field(default=None, primary_key=True)

    # Copied from the consumed token
    guild_id: str = Field(index=True, sa_column_kwargs={"name": "guildid"})
    user_id: str = Field(sa_column_kwargs={"name": "userid"})

    # Form fields
    discord_tag: str | None = Field(default=None, sa_column_kwargs={"name": "discordtag"})
    nick: str
    idade: int
    motivo: str
    link_bonde: str = Field(sa_column_kwargs={"name": "linkbonde"})

    status: str = Field(
        default=SubmissionStatus.PENDING.value,
        sa_column=Column(
            String(20),
            nullable=False,
            index=True,
            default=SubmissionStatus.PENDING.value,
            server_default=SubmissionStatus.PENDING.value,
        ),
    )
    created_at: int = Field(
        default_factory=now_ms,
        sa_type=BigInteger,  # type: ignore[call-overload]
        sa_column_kwargs={"name": "createdat"},
        description="Milliseconds since the epoch",
    )
    # Set once the bot has posted the submission to its log channel
    logged: bool = Field(default=False, sa_column_kwargs={"server_default": false()})
