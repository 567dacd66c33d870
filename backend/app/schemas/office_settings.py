from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict
from datetime import datetime

from app.schemas.common import TranslatableText


class OfficeSettingsUpsert(BaseModel):
    """Full settings payload; creates the row or replaces the existing one"""
    directorate: TranslatableText
    office_name: TranslatableText
    office_address: TranslatableText
    phone_number: TranslatableText
    email: str
    background_photo_id: Optional[str] = None
    x_link: Optional[str] = None
    map_iframe: Optional[str] = None
    website: Optional[str] = None
    youtube: Optional[str] = None


class OfficeSettingsUpdate(BaseModel):
    directorate: Optional[TranslatableText] = None
    office_name: Optional[TranslatableText] = None
    office_address: Optional[TranslatableText] = None
    phone_number: Optional[TranslatableText] = None
    email: Optional[str] = None
    background_photo_id: Optional[str] = None
    x_link: Optional[str] = None
    map_iframe: Optional[str] = None
    website: Optional[str] = None
    youtube: Optional[str] = None


class OfficeSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    directorate: Dict[str, Optional[str]]
    office_name: Dict[str, Optional[str]]
    office_address: Dict[str, Optional[str]]
    phone_number: Dict[str, Optional[str]]
    email: str
    background_photo_id: Optional[str] = None
    x_link: Optional[str] = None
    map_iframe: Optional[str] = None
    website: Optional[str] = None
    youtube: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
