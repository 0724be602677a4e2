"""Gateway response schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from formgate.schemas.common import OkResponse


class SubmissionRead(BaseModel):
    """Submission as seen by the bot and the moderation tools."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    guild_id: str
    user_id: str
    discord_tag: str | None
    nick: str
    idade: int
    motivo: str
    link_bonde: str
    status: str
    created_at: int
    logged: bool


class TokenCreated(OkResponse):
    """Result of createToken."""

    token: str


class SubmissionCreated(OkResponse):
    """Result of submit."""

    id: int


class SubmissionList(OkResponse):
    """Result of list and pollForLogs."""

    items: list[SubmissionRead]
