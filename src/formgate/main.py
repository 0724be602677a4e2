"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from formgate.api.middleware import CORSHeadersMiddleware, RequestIDMiddleware, RequestLoggingMiddleware
from formgate.api.router import api_router
from formgate.config import settings
from formgate.database import close_db
from formgate.schemas import ErrorResponse
from formgate.services.errors import FormError

logger = logging.getLogger(__name__)

GATEWAY_PATH = "/api/app"

# Initialize Sentry for error tracking
if settings.sentry_dsn:
    import sentry_sdk

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
    )
    logger.info("Sentry initialized")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: tables are created by the first gateway request
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title="Form Gateway",
    description="Token-gated form submissions for a Discord bot",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug_enabled else None,
    redoc_url="/api/redoc" if settings.debug_enabled else None,
    openapi_url="/api/openapi.json" if settings.debug_enabled else None,
)


@app.exception_handler(FormError)
async def form_error_handler(_request: Request, exc: FormError) -> JSONResponse:
    """Render expected gateway failures as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=exc.message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def gateway_method_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """The gateway answers every method but POST and OPTIONS with "Use POST"."""
    if exc.status_code == 405 and request.url.path.rstrip("/") == GATEWAY_PATH:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error="Use POST").model_dump(),
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


app.add_middleware(RequestLoggingMiddleware)  # type: ignore[arg-type]

# Request ID middleware for log correlation
app.add_middleware(RequestIDMiddleware)  # type: ignore[arg-type]

# CORS headers on every response, pre-flights included
app.add_middleware(CORSHeadersMiddleware, allow_origin=settings.allowed_origins)  # type: ignore[arg-type]

app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    from formgate.logging import get_uvicorn_log_config

    uvicorn.run(
        "formgate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=get_uvicorn_log_config(),
    )
