"""Admin API key verification."""

import secrets

from formgate.services.errors import AuthenticationError, ConfigurationError

BEARER_PREFIX = "Bearer "


def extract_bearer(authorization: str | None) -> str:
    """Return the credential from an ``Authorization: Bearer`` header, or ''."""
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    return ""


def verify_admin_key(authorization: str | None, admin_api_key: str) -> None:
    """Check the request credential against the configured admin key.

    Raises:
        ConfigurationError: no admin key is configured (fail closed)
        AuthenticationError: credential missing or wrong
    """
    if not admin_api_key:
        raise ConfigurationError("ADMIN_API_KEY is not configured")

    credential = extract_bearer(authorization)
    if not secrets.compare_digest(credential.encode(), admin_api_key.encode()):
        raise AuthenticationError("Unauthorized")
