"""
Media Service
=============

Validates uploads against the per-type rules below, stores the object
through StorageService and records a Media row.

Object keys look like:
    <folder>/<ms timestamp>-<random>-<sanitised name><ext>
"""

import os
import re
import secrets
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import MediaNotFoundError, MediaValidationError
from app.core.logging_config import logger
from app.models.media import Media, MediaCategory, MediaFolder
from app.schemas.media import MediaUploadMetadata
from app.services.storage_service import PresignOperation, StorageService, storage_service

MB = 1024 * 1024


@dataclass(frozen=True)
class FileTypeRule:
    types: tuple
    max_size: int
    folders: tuple


FILE_TYPE_RULES: Dict[str, FileTypeRule] = {
    "images": FileTypeRule(
        types=(
            "image/jpeg", "image/jpg", "image/pjpeg", "image/png", "image/x-png",
            "image/webp", "image/gif", "image/svg+xml", "image/heic", "image/heif",
        ),
        max_size=50 * MB,
        folders=tuple(folder.value for folder in MediaFolder),
    ),
    "documents": FileTypeRule(
        types=(
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
        max_size=10 * MB,
        folders=("documents", "reports", "content"),
    ),
    "videos": FileTypeRule(
        types=("video/mp4", "video/webm", "video/quicktime"),
        max_size=50 * MB,
        folders=("videos", "content"),
    ),
    "audio": FileTypeRule(
        types=("audio/mpeg", "audio/wav", "audio/ogg"),
        max_size=20 * MB,
        folders=("audio", "content"),
    ),
}


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def get_file_type_rule(mime_type: str) -> Optional[FileTypeRule]:
    """Rule for a MIME type; unlisted types fall back by MIME family"""
    normalized = (mime_type or "").lower()
    for rule in FILE_TYPE_RULES.values():
        if normalized in rule.types:
            return rule

    if normalized.startswith("image/"):
        return FILE_TYPE_RULES["images"]
    if normalized.startswith("video/"):
        return FILE_TYPE_RULES["videos"]
    if normalized.startswith("audio/"):
        return FILE_TYPE_RULES["audio"]
    if normalized == "application/pdf" or "word" in normalized:
        return FILE_TYPE_RULES["documents"]
    return None


def validate_file(file: UploadedFile, folder: str) -> List[Dict[str, str]]:
    """Every failed check, empty when the file is acceptable"""
    errors = []
    rule = get_file_type_rule(file.content_type)

    if rule is None:
        errors.append({
            "field": "mimetype",
            "message": f"File type {file.content_type} is not supported",
            "code": "UNSUPPORTED_FILE_TYPE",
        })
        return errors

    if file.size > rule.max_size:
        errors.append({
            "field": "size",
            "message": f"File size {file.size} exceeds maximum allowed size {rule.max_size}",
            "code": "FILE_SIZE_EXCEEDED",
        })

    if folder not in rule.folders:
        errors.append({
            "field": "folder",
            "message": f"Folder {folder} is not compatible with file type {file.content_type}",
            "code": "INCOMPATIBLE_FOLDER",
        })

    return errors


def determine_category(mime_type: str) -> MediaCategory:
    mime_type = (mime_type or "").lower()
    if mime_type.startswith("image/"):
        return MediaCategory.IMAGE
    if mime_type.startswith("video/"):
        return MediaCategory.VIDEO
    if mime_type.startswith("audio/"):
        return MediaCategory.AUDIO
    if mime_type.startswith("application/"):
        return MediaCategory.DOCUMENT
    return MediaCategory.OTHER


def generate_object_key(original_name: str, folder: str) -> str:
    base_name, extension = os.path.splitext(os.path.basename(original_name))
    clean_name = re.sub(r"[^a-zA-Z0-9.-]", "_", base_name)
    timestamp = int(time.time() * 1000)
    return f"{folder}/{timestamp}-{secrets.token_hex(6)}-{clean_name}{extension}"


class MediaService:
    """Media uploads and signed access URLs"""

    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage or storage_service

    async def upload_media(
        self,
        file: UploadedFile,
        metadata: MediaUploadMetadata,
        user_id: Optional[str],
    ) -> Media:
        """
        Validate, upload and record a media file.

        Raises:
            MediaValidationError: listing every failed check
            StorageUploadError: the object store rejected the upload
        """
        folder = metadata.folder.value
        errors = validate_file(file, folder)
        if errors:
            logger.warning(f"Media validation failed for {file.filename}: {[e['code'] for e in errors]}")
            raise MediaValidationError(errors)

        category = determine_category(file.content_type)
        key = generate_object_key(file.filename, folder)

        object_metadata = {
            "original_name": file.filename,
            "uploaded_by": str(user_id or ""),
            "folder": folder,
            "category": category.value,
            "is_public": str(metadata.is_public).lower(),
        }
        if metadata.tags:
            object_metadata["tags"] = "-".join(metadata.tags)

        uploaded = await self.storage.upload_bytes(key, file.content, file.content_type, object_metadata)

        media = Media(
            file_name=uploaded["key"],
            original_name=file.filename,
            url=uploaded["url"],
            size=file.size,
            content_type=file.content_type,
            uploaded_by=user_id,
            folder=folder,
            category=category,
            alt_text=metadata.alt_text,
            title=metadata.title,
            description=metadata.description,
            tags=metadata.tags or None,
            is_public=metadata.is_public,
            is_active=True,
        )

        self.db.add(media)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            # Keep the bucket free of objects without a Media row
            await self.storage.delete_object(key)
            raise

        await self.db.refresh(media)
        logger.info(f"Uploaded media {media.id} -> {key} ({file.size} bytes)")
        return media

    async def get_media(self, media_id: str) -> Media:
        media = await self.db.get(Media, str(media_id))
        if media is None:
            raise MediaNotFoundError(str(media_id))
        return media

    async def generate_presigned_url(
        self,
        media_id: str,
        operation: PresignOperation = "get",
        ttl_seconds: Optional[int] = None,
    ) -> str:
        media = await self.get_media(media_id)
        return await self.storage.generate_presigned_url(
            media.file_name,
            operation,
            ttl_seconds or settings.STORAGE_URL_EXPIRY,
        )
