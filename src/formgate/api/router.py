"""Main API router that aggregates all route modules."""

from fastapi import APIRouter

from formgate.api import gateway, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

# The form and the bot both call /api/app
api_router.include_router(gateway.router, prefix="/app", tags=["gateway"])
