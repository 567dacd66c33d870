from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime

from app.models.document import DocumentCategory, DocumentStatus, DocumentType
from app.schemas.common import TranslatableText


class DocumentUploadMetadata(BaseModel):
    """Form fields sent alongside an uploaded document"""
    title: Optional[TranslatableText] = None
    description: Optional[TranslatableText] = None
    category: DocumentCategory = DocumentCategory.OTHER
    status: DocumentStatus = DocumentStatus.DRAFT
    document_number: Optional[str] = Field(default=None, max_length=100)
    version: str = "1.0"
    publish_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = True
    requires_auth: bool = False
    order: int = 0


class DocumentUpdate(BaseModel):
    title: Optional[TranslatableText] = None
    description: Optional[TranslatableText] = None
    category: Optional[DocumentCategory] = None
    status: Optional[DocumentStatus] = None
    document_number: Optional[str] = Field(default=None, max_length=100)
    version: Optional[str] = None
    publish_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    requires_auth: Optional[bool] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: Dict[str, Optional[str]]
    description: Optional[Dict[str, Optional[str]]] = None
    file_name: str
    original_name: Optional[str] = None
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    document_type: DocumentType
    category: DocumentCategory
    status: DocumentStatus
    document_number: Optional[str] = None
    version: Optional[str] = None
    publish_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    is_public: bool = True
    requires_auth: bool = False
    order: int = 0
    is_active: bool = True
    download_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class DocumentStatistics(BaseModel):
    total: int
    active: int
    total_downloads: int
    by_status: Dict[str, int]
    by_category: Dict[str, int]
    by_type: Dict[str, int]


class DocumentDownloadUrl(BaseModel):
    id: str
    url: str
    expires_in: int
