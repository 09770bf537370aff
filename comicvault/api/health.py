"""
Health check endpoints.

Liveness, plus a readiness probe that checks the database and reports which
catalogs are configured.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from comicvault.config import settings
from comicvault.db.database import get_session
from comicvault.models.catalog import CatalogProvider

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    catalogs: list[CatalogProvider] = Field(default_factory=list)


def configured_catalogs() -> list[CatalogProvider]:
    """Catalogs that can be searched with the current settings."""
    return [
        provider
        for provider in CatalogProvider
        if provider is not CatalogProvider.COMIC_VINE or settings.comic_vine_api_key
    ]


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running. Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 if the database is unavailable.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")

    return HealthResponse(status="ready", database="connected", catalogs=configured_catalogs())
