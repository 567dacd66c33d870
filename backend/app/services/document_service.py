"""
Document Service
================

Uploads public documents (notices, circulars, forms, reports) to object
storage under the ``documents/`` prefix and keeps their metadata.

Deleting a document removes the stored object first; a storage failure is
logged and the row is deleted anyway so the admin list never shows a
document whose metadata cannot be removed.
"""

import os
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select, func, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import DocumentNotFoundError, FieldValidationError, ICMSError, MediaValidationError
from app.core.logging_config import logger
from app.models.document import Document, DocumentCategory, DocumentStatus, DocumentType
from app.schemas.common import BulkOperationResult
from app.schemas.documents import DocumentStatistics, DocumentUpdate, DocumentUploadMetadata
from app.services.media_service import MB, UploadedFile, generate_object_key
from app.services.storage_service import StorageService, storage_service
from app.utils.pagination import Page, paginate
from app.utils.validators import FieldErrors, add_error, check_order, has_both_languages

MAX_DOCUMENT_SIZE = 100 * MB
DOCUMENT_FOLDER = "documents"

DOCUMENT_MIME_TYPES: Dict[str, DocumentType] = {
    "application/pdf": DocumentType.PDF,
    "application/msword": DocumentType.DOC,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentType.DOCX,
    "application/vnd.ms-excel": DocumentType.XLS,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": DocumentType.XLSX,
    "application/vnd.ms-powerpoint": DocumentType.PPT,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": DocumentType.PPTX,
    "text/plain": DocumentType.TXT,
    "application/rtf": DocumentType.RTF,
    "text/csv": DocumentType.CSV,
    "application/zip": DocumentType.ZIP,
    "application/x-rar-compressed": DocumentType.RAR,
}


def determine_document_type(mime_type: str) -> DocumentType:
    return DOCUMENT_MIME_TYPES.get((mime_type or "").lower(), DocumentType.OTHER)


def validate_document_file(file: UploadedFile) -> FieldErrors:
    errors: FieldErrors = []
    if file.size == 0:
        add_error(errors, "file", "File is empty", "EMPTY_FILE")
    if file.size > MAX_DOCUMENT_SIZE:
        add_error(errors, "file", "File size exceeds maximum limit of 100MB", "FILE_SIZE_EXCEEDED")
    if (file.content_type or "").lower() not in DOCUMENT_MIME_TYPES:
        add_error(errors, "file", "File type not allowed", "INVALID_FILE_TYPE")
    return errors


def _as_utc(value: datetime) -> datetime:
    """Naive UTC, so stored and submitted dates compare"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_document_metadata(data: dict) -> FieldErrors:
    errors: FieldErrors = []
    if "title" in data and not has_both_languages(data["title"]):
        add_error(errors, "title", "Title must be provided in both English and Nepali", "INVALID_TITLE")

    publish_date, expiry_date = data.get("publish_date"), data.get("expiry_date")
    if publish_date and expiry_date and _as_utc(expiry_date) < _as_utc(publish_date):
        add_error(errors, "expiry_date", "Expiry date must be after the publish date", "INVALID_EXPIRY_DATE")

    check_order(errors, data.get("order"))
    return errors


class DocumentService:
    """Document uploads, metadata and download links"""

    def __init__(self, storage: Optional[StorageService] = None):
        self.storage = storage or storage_service

    async def get_document(self, db: AsyncSession, document_id: str) -> Document:
        document = await db.get(Document, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def list_documents(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        status: Optional[DocumentStatus] = None,
        category: Optional[DocumentCategory] = None,
        document_type: Optional[DocumentType] = None,
        is_active: Optional[bool] = None,
    ) -> Page:
        query = select(Document)

        conditions = []
        if status is not None:
            conditions.append(Document.status == status)
        if category is not None:
            conditions.append(Document.category == category)
        if document_type is not None:
            conditions.append(Document.document_type == document_type)
        if is_active is not None:
            conditions.append(Document.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                cast(Document.title, String).ilike(pattern)
                | Document.original_name.ilike(pattern)
                | Document.document_number.ilike(pattern)
            )
        if conditions:
            query = query.where(*conditions)

        query = query.order_by(Document.order.asc(), Document.created_at.desc())
        return await paginate(db, query, page, page_size)

    async def upload_document(
        self,
        db: AsyncSession,
        file: UploadedFile,
        metadata: DocumentUploadMetadata,
    ) -> Document:
        """
        Validate, upload and record a document.

        The title defaults to the original file name in both languages.

        Raises:
            FieldValidationError: the file or its metadata failed a check
            StorageUploadError: the object store rejected the upload
        """
        errors = validate_document_file(file)
        if errors:
            logger.warning(f"Document file rejected {file.filename}: {[e['code'] for e in errors]}")
            raise MediaValidationError(errors)

        data = metadata.model_dump()
        if data["title"] is None:
            data["title"] = {"en": file.filename, "ne": file.filename}
        errors = validate_document_metadata(data)
        if errors:
            raise FieldValidationError(errors, "Document validation failed")

        key = generate_object_key(file.filename, DOCUMENT_FOLDER)
        await self.storage.upload_bytes(key, file.content, file.content_type, {
            "original_name": file.filename,
            "category": metadata.category.value,
        })

        document = Document(
            **data,
            file_name=os.path.basename(key),
            original_name=file.filename,
            file_path=key,
            file_size=file.size,
            mime_type=file.content_type,
            document_type=determine_document_type(file.content_type),
        )
        db.add(document)
        await db.commit()
        await db.refresh(document)

        logger.info(f"Uploaded document {document.id} ({file.size} bytes) to {key}")
        return document

    async def update_document(self, db: AsyncSession, document_id: str, payload: DocumentUpdate) -> Document:
        document = await self.get_document(db, document_id)

        data = payload.model_dump(exclude_unset=True)
        merged = {
            "publish_date": document.publish_date,
            "expiry_date": document.expiry_date,
            **data,
        }
        errors = validate_document_metadata(merged)
        if errors:
            raise FieldValidationError(errors, "Document validation failed")

        for field, value in data.items():
            setattr(document, field, value)
        await db.commit()
        await db.refresh(document)
        return document

    async def delete_document(self, db: AsyncSession, document_id: str) -> None:
        document = await self.get_document(db, document_id)

        if document.file_path and not await self.storage.delete_object(document.file_path):
            logger.warning(f"Stored file {document.file_path} was not removed; deleting document {document_id} anyway")

        await db.delete(document)
        await db.commit()
        logger.info(f"Deleted document {document_id}")

    async def generate_download_url(
        self,
        db: AsyncSession,
        document_id: str,
        expires_in: Optional[int] = None,
    ) -> str:
        """Signed GET URL for the stored file (admin access, ignores is_public)"""
        document = await self.get_document(db, document_id)
        return await self.storage.generate_presigned_url(
            document.file_path or document.file_name,
            "get",
            expires_in or settings.STORAGE_URL_EXPIRY,
        )

    async def get_statistics(self, db: AsyncSession) -> DocumentStatistics:
        total = (await db.execute(select(func.count(Document.id)))).scalar() or 0
        active = (await db.execute(
            select(func.count(Document.id)).where(Document.is_active.is_(True))
        )).scalar() or 0
        downloads = (await db.execute(
            select(func.coalesce(func.sum(Document.download_count), 0))
        )).scalar() or 0

        async def grouped(column) -> Dict[str, int]:
            rows = (await db.execute(select(column, func.count(Document.id)).group_by(column))).all()
            return {value.value: count for value, count in rows}

        return DocumentStatistics(
            total=total,
            active=active,
            total_downloads=downloads,
            by_status=await grouped(Document.status),
            by_category=await grouped(Document.category),
            by_type=await grouped(Document.document_type),
        )

    async def bulk_delete(self, db: AsyncSession, ids: List[str]) -> BulkOperationResult:
        result = BulkOperationResult()
        for document_id in ids:
            try:
                await self.delete_document(db, document_id)
                result.success += 1
            except ICMSError as e:
                result.failed += 1
                result.errors.append(f"Failed to delete document {document_id}: {e.message}")
        return result


# Singleton instance
document_service = DocumentService()


def get_document_service() -> DocumentService:
    return document_service
