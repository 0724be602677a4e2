"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error body returned by the gateway."""

    error: str


class OkResponse(BaseModel):
    """Acknowledgement for actions without a payload."""

    ok: bool = True
