from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime

from app.models.media import MediaCategory, MediaFolder


class MediaUploadMetadata(BaseModel):
    """Form fields sent alongside an uploaded file"""
    folder: MediaFolder = MediaFolder.GENERAL
    alt_text: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = True


class MediaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    file_name: str
    original_name: str
    url: str
    size: int
    content_type: str
    uploaded_by: Optional[str] = None
    folder: str
    category: MediaCategory
    alt_text: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: bool
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class PresignedUrlResponse(BaseModel):
    url: str
    operation: Literal["get", "put"]
    expires_in: int
