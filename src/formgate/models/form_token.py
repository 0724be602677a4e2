"""Single-use form token model."""

from sqlalchemy import BigInteger, false
from sqlmodel import Field, SQLModel

from formgate.models.base import now_ms


class FormToken(SQLModel, table=True):
    """Credential that unlocks exactly one form submission.

    ``used`` only ever moves from False to True.
    """

    __tablename__ = "form_tokens"

    token: str = Field(primary_key=True, max_length=64)
    guild_id: str = Field(sa_column_kwargs={"name": "guildid"}, description="Guild the token was issued in")
    user_id: str = Field(sa_column_kwargs={"name": "userid"}, description="User the token was issued for")
    used: bool = Field(default=False, sa_column_kwargs={"server_default": false()})
    created_at: int = Field(
        default_factory=now_ms,
        sa_type=BigInteger,  # type: ignore[call-overload]
        sa_column_kwargs={"name": "createdat"},
        description="Milliseconds since the epoch",
    )
