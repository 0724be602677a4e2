"""SQLModel database models."""

from formgate.models.base import now_ms
from formgate.models.form_submission import DECISIONS, FormSubmission, SubmissionStatus
from formgate.models.form_token import FormToken

__all__ = [
    "DECISIONS",
    "FormSubmission",
    "FormToken",
    "SubmissionStatus",
    "now_ms",
]
