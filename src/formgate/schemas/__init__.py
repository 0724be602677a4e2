"""Pydantic schemas for API requests/responses."""

from formgate.schemas.common import ErrorResponse, OkResponse
from formgate.schemas.forms import (
    SubmissionCreated,
    SubmissionList,
    SubmissionRead,
    TokenCreated,
)

__all__ = [
    "ErrorResponse",
    "OkResponse",
    "SubmissionCreated",
    "SubmissionList",
    "SubmissionRead",
    "TokenCreated",
]
