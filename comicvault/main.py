import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from comicvault.api import (
    auth_router,
    catalog_router,
    collections_router,
    covers_router,
    health_router,
    issues_router,
)
from comicvault.config import settings
from comicvault.db.database import init_db
from comicvault.models.failure import KnownError, create_known_failure, create_unknown_failure
from comicvault.services.session_registry import log_session_event, session_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    Path(settings.cover_storage_dir).mkdir(parents=True, exist_ok=True)
    unsubscribe = session_registry.subscribe(log_session_event)
    await init_db()
    yield
    unsubscribe()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("comicvault"),
    lifespan=lifespan,
)


def failed_action(request: Request) -> str | None:
    """Name of the operation a request performs, e.g. "import catalog series"."""
    route = request.scope.get("route")
    name = getattr(route, "name", None) or getattr(request.scope.get("endpoint"), "__name__", None)
    return name.replace("_", " ") if name else None


@app.exception_handler(KnownError)
async def known_error_handler(request: Request, exc: KnownError) -> JSONResponse:
    action = failed_action(request)
    if exc.status_code >= 500:
        logger.error("%s failed: %s (%s)", action, exc.message, exc.detail)
    body = create_known_failure(exc, action=action)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
    action = failed_action(request)
    logger.exception("Unhandled error during %s", action)
    body = create_unknown_failure(exc, action=action)
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(collections_router)
app.include_router(covers_router)
app.include_router(health_router)
app.include_router(issues_router)

# The directory is created at startup
app.mount(
    settings.cover_public_base_url,
    StaticFiles(directory=settings.cover_storage_dir, check_dir=False),
    name="covers",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
