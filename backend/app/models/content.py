from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, JSON
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ContentStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Content(Base):
    """CMS article (news, notices, pages)"""
    __tablename__ = "contents"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(JSON, nullable=False)  # {"en": "...", "ne": "..."}
    slug = Column(String(255), unique=True, nullable=False)
    status = Column(SQLEnum(ContentStatus), default=ContentStatus.DRAFT, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    published_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Content {self.slug}>"
