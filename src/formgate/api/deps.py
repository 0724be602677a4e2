"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from formgate.config import Settings, get_settings
from formgate.database import get_engine, get_session
from formgate.services.auth import verify_admin_key

# Type aliases for injected resources
SessionDep = Annotated[AsyncSession, Depends(get_session)]
EngineDep = Annotated[AsyncEngine, Depends(get_engine)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


async def require_admin_key(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries the configured admin key."""
    verify_admin_key(authorization, settings.admin_api_key)


AdminAuth = Annotated[None, Depends(require_admin_key)]
