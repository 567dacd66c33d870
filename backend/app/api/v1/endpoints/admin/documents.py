"""
Admin Document endpoints - upload to object storage, metadata and signed downloads.
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Optional

from app.core.config import settings
from app.core.database import get_db
from app.models.document import DocumentCategory, DocumentStatus, DocumentType
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import BulkIds, TranslatableText
from app.schemas.documents import DocumentDownloadUrl, DocumentResponse, DocumentUpdate, DocumentUploadMetadata
from app.schemas.response import ApiResponse
from app.services.document_service import DocumentService, get_document_service
from app.services.media_service import UploadedFile
from app.utils.pagination import PaginatedResponse

router = APIRouter()


def _translatable(en: Optional[str], ne: Optional[str]) -> Optional[TranslatableText]:
    if en is None and ne is None:
        return None
    return TranslatableText(en=en, ne=ne)


@router.get("")
async def list_documents(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    status: Optional[DocumentStatus] = Query(None),
    category: Optional[DocumentCategory] = Query(None),
    document_type: Optional[DocumentType] = Query(None),
    is_active: Optional[bool] = Query(None),
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await service.list_documents(
        db,
        page=page,
        page_size=page_size,
        search=search,
        status=status,
        category=category,
        document_type=document_type,
        is_active=is_active,
    )
    return ApiResponse.success(PaginatedResponse[DocumentResponse].from_page(result, DocumentResponse))


@router.get("/statistics")
async def get_document_statistics(
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await service.get_statistics(db))


@router.post("/upload", status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    title_en: Optional[str] = Form(None),
    title_ne: Optional[str] = Form(None),
    description_en: Optional[str] = Form(None),
    description_ne: Optional[str] = Form(None),
    category: DocumentCategory = Form(DocumentCategory.OTHER),
    status: DocumentStatus = Form(DocumentStatus.DRAFT),
    document_number: Optional[str] = Form(None),
    version: str = Form("1.0"),
    publish_date: Optional[datetime] = Form(None),
    expiry_date: Optional[datetime] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated"),
    is_public: bool = Form(True),
    requires_auth: bool = Form(False),
    order: int = Form(0),
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Upload a document (multipart/form-data); title defaults to the file name"""
    metadata = DocumentUploadMetadata(
        title=_translatable(title_en, title_ne),
        description=_translatable(description_en, description_ne),
        category=category,
        status=status,
        document_number=document_number,
        version=version,
        publish_date=publish_date,
        expiry_date=expiry_date,
        tags=[tag.strip() for tag in (tags or "").split(",") if tag.strip()],
        is_public=is_public,
        requires_auth=requires_auth,
        order=order,
    )
    uploaded = UploadedFile(
        filename=file.filename or "document",
        content_type=file.content_type or "application/octet-stream",
        content=await file.read(),
    )

    document = await service.upload_document(db, uploaded, metadata)
    return ApiResponse.success(DocumentResponse.model_validate(document))


@router.post("/bulk-delete")
async def bulk_delete_documents(
    body: BulkIds,
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await service.bulk_delete(db, body.ids))


@router.get("/{document_id}")
async def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    document = await service.get_document(db, document_id)
    return ApiResponse.success(DocumentResponse.model_validate(document))


@router.get("/{document_id}/download-url")
async def get_document_download_url(
    document_id: str,
    expires_in: Optional[int] = Query(None, ge=1, le=7 * 24 * 3600),
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Signed download link, usable even for non-public documents"""
    url = await service.generate_download_url(db, document_id, expires_in)
    return ApiResponse.success(DocumentDownloadUrl(
        id=document_id,
        url=url,
        expires_in=expires_in or settings.STORAGE_URL_EXPIRY,
    ))


@router.put("/{document_id}")
async def update_document(
    document_id: str,
    document_data: DocumentUpdate,
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    document = await service.update_document(db, document_id, document_data)
    return ApiResponse.success(DocumentResponse.model_validate(document))


@router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Remove the stored file and the document record"""
    await service.delete_document(db, document_id)
    return ApiResponse.success({"id": document_id, "deleted": True})
