"""Blob download endpoint for API v1."""

from __future__ import annotations

import mimetypes

from fastapi import APIRouter, Header, HTTPException, status
from fastapi.responses import FileResponse

from app.api.v1._authz import authorize_or_raise
from app.core.exceptions import StorageError
from app.services.storage_service import StorageService

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{key:path}")
def download_file(key: str, authorization: str | None = Header(default=None, alias="Authorization")) -> FileResponse:
    authorize_or_raise(authorization, scopes=["company.read"])
    try:
        path = StorageService().path(key)
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    media_type, _ = mimetypes.guess_type(path.name)
    return FileResponse(path, media_type=media_type or "application/octet-stream")
