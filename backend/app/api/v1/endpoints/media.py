"""
Media endpoints - upload to object storage and signed access URLs.
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Literal, Optional

from app.core.config import settings
from app.core.database import get_db
from app.models.media import MediaFolder
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.media import MediaResponse, MediaUploadMetadata, PresignedUrlResponse
from app.schemas.response import ApiResponse
from app.services.media_service import MediaService, UploadedFile
from app.services.storage_service import storage_service

router = APIRouter()


def get_media_service(db: AsyncSession = Depends(get_db)) -> MediaService:
    return MediaService(db, storage_service)


@router.post("/upload", status_code=201)
async def upload_media(
    file: UploadFile = File(...),
    folder: MediaFolder = Form(MediaFolder.GENERAL),
    alt_text: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated"),
    is_public: bool = Form(True),
    service: MediaService = Depends(get_media_service),
    current_user: User = Depends(get_current_user)
):
    """Upload a media file (multipart/form-data)"""
    metadata = MediaUploadMetadata(
        folder=folder,
        alt_text=alt_text,
        title=title,
        description=description,
        tags=[tag.strip() for tag in (tags or "").split(",") if tag.strip()],
        is_public=is_public,
    )
    uploaded = UploadedFile(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        content=await file.read(),
    )

    media = await service.upload_media(uploaded, metadata, str(current_user.id))
    return ApiResponse.success(MediaResponse.model_validate(media))


@router.get("/{media_id}/presigned-url")
async def get_presigned_url(
    media_id: str,
    operation: Literal["get", "put"] = Query("get"),
    expires_in: Optional[int] = Query(None, ge=1, le=7 * 24 * 3600),
    service: MediaService = Depends(get_media_service),
    current_user: User = Depends(get_current_user)
):
    """Time-limited URL for direct download (get) or upload (put)"""
    url = await service.generate_presigned_url(media_id, operation, expires_in)
    return ApiResponse.success(PresignedUrlResponse(
        url=url,
        operation=operation,
        expires_in=expires_in or settings.STORAGE_URL_EXPIRY,
    ))
