from comicvault.api.auth import router as auth_router
from comicvault.api.catalog import router as catalog_router
from comicvault.api.collections import router as collections_router
from comicvault.api.covers import router as covers_router
from comicvault.api.health import router as health_router
from comicvault.api.issues import router as issues_router

__all__ = [
    "auth_router",
    "catalog_router",
    "collections_router",
    "covers_router",
    "health_router",
    "issues_router",
]
