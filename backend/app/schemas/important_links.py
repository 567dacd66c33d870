from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict
from datetime import datetime

from app.schemas.common import TranslatableText


class ImportantLinkCreate(BaseModel):
    link_title: TranslatableText
    link_url: str = Field(..., min_length=1, max_length=1000)
    order: int = 0
    is_active: bool = True


class ImportantLinkUpdate(BaseModel):
    link_title: Optional[TranslatableText] = None
    link_url: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    order: Optional[int] = None
    is_active: Optional[bool] = None


class ImportantLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    link_title: Dict[str, Optional[str]]
    link_url: str
    order: int = 0
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None
