"""
Cover upload endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from comicvault.api.dependencies import CurrentSession
from comicvault.services.cover_storage import MAX_COVER_BYTES, CoverStorage, get_cover_storage

router = APIRouter(prefix="/covers", tags=["covers"])


class CoverUploadResponse(BaseModel):
    """Response model for an uploaded cover."""

    url: str


@router.post("", response_model=CoverUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_cover(
    file: Annotated[UploadFile, File(description="Cover image")],
    user: CurrentSession,
    storage: Annotated[CoverStorage, Depends(get_cover_storage)],
) -> CoverUploadResponse:
    """
    Store a cover image and return its public URL.

    Use the URL as cover_url when creating or editing a collection.
    """
    # One byte past the limit is enough to reject an oversized upload
    content = await file.read(MAX_COVER_BYTES + 1)
    url = await run_in_threadpool(storage.save, user.user_id, file.filename or "", content)
    return CoverUploadResponse(url=url)
