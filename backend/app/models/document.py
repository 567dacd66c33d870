from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Boolean, JSON
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class DocumentStatus(str, enum.Enum):
    """Publication status"""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    EXPIRED = "expired"


class DocumentType(str, enum.Enum):
    """File format, derived from the MIME type on upload"""
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    XLS = "xls"
    XLSX = "xlsx"
    PPT = "ppt"
    PPTX = "pptx"
    TXT = "txt"
    RTF = "rtf"
    CSV = "csv"
    ZIP = "zip"
    RAR = "rar"
    OTHER = "other"


class DocumentCategory(str, enum.Enum):
    OFFICIAL = "official"
    REPORT = "report"
    FORM = "form"
    POLICY = "policy"
    PROCEDURE = "procedure"
    GUIDELINE = "guideline"
    NOTICE = "notice"
    CIRCULAR = "circular"
    OTHER = "other"


class Document(Base):
    """Downloadable public document (notices, circulars, forms, reports)"""
    __tablename__ = "documents"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Translatable: {"en": "...", "ne": "..."}
    title = Column(JSON, nullable=False)
    description = Column(JSON, nullable=True)

    # Stored object
    file_name = Column(String(500), nullable=False)
    original_name = Column(String(500), nullable=True)
    file_path = Column(String(1000), nullable=True)  # object storage key
    file_size = Column(Integer, nullable=True)  # in bytes
    mime_type = Column(String(100), nullable=True)

    document_type = Column(SQLEnum(DocumentType), default=DocumentType.OTHER, nullable=False)
    category = Column(SQLEnum(DocumentCategory), default=DocumentCategory.OTHER, nullable=False)
    status = Column(SQLEnum(DocumentStatus), default=DocumentStatus.DRAFT, nullable=False)

    document_number = Column(String(100), nullable=True)
    version = Column(String(20), default="1.0")
    publish_date = Column(DateTime, nullable=True)
    expiry_date = Column(DateTime, nullable=True)
    tags = Column(JSON, nullable=True)  # ["budget", "2081"]

    is_public = Column(Boolean, default=True)
    requires_auth = Column(Boolean, default=False)
    order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    download_count = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Document {self.file_name}>"
