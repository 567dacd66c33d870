"""Building blocks shared by the admin CRUD schemas"""
from pydantic import BaseModel, Field
from typing import List, Optional


class TranslatableText(BaseModel):
    """Text in English and Nepali; completeness is checked by the services"""
    en: Optional[str] = None
    ne: Optional[str] = None


class BulkIds(BaseModel):
    ids: List[str] = Field(..., min_length=1)


class BulkOperationResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


class ReorderItem(BaseModel):
    id: str
    order: int = Field(..., ge=0)


class ReorderRequest(BaseModel):
    items: List[ReorderItem] = Field(..., min_length=1)
