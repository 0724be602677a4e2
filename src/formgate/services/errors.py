"""Errors raised by the gateway services.

Each error carries the HTTP status the gateway answers with; the message is
returned to the caller verbatim as ``{"error": message}``.
"""


class FormError(Exception):
    """Base class for expected gateway failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FormError):
    """Missing or malformed action input."""

    status_code = 400


class ConfigurationError(FormError):
    """The server is missing required configuration."""

    status_code = 401


class AuthenticationError(FormError):
    """Missing or wrong bearer credential."""

    status_code = 401


class TokenNotFoundError(FormError):
    """The referenced form token does not exist."""

    status_code = 404


class TokenUsedError(FormError):
    """The referenced form token was already consumed."""

    status_code = 410
