from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Boolean, Text, JSON
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class MediaCategory(str, enum.Enum):
    """Media category, derived from the MIME family"""
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


class MediaFolder(str, enum.Enum):
    """Storage folder the object key is placed under"""
    SLIDERS = "sliders"
    LOGOS = "logos"
    OFFICE_SETTINGS = "office-settings"
    USERS = "users"
    EMPLOYEES = "employees"
    CONTENT = "content"
    DOCUMENTS = "documents"
    REPORTS = "reports"
    VIDEOS = "videos"
    AUDIO = "audio"
    GENERAL = "general"


class Media(Base):
    """Uploaded media object stored in the object store"""
    __tablename__ = "media"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    file_name = Column(String(500), nullable=False, unique=True)  # object key
    original_name = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)
    content_type = Column(String(100), nullable=False)
    uploaded_by = Column(GUID, nullable=True, index=True)
    folder = Column(String(50), nullable=False, default=MediaFolder.GENERAL.value)
    category = Column(SQLEnum(MediaCategory), nullable=False, default=MediaCategory.OTHER)

    alt_text = Column(String(255), nullable=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    is_public = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Media {self.file_name}>"
