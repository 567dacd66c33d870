# Re-export all models for convenient imports
from app.models.user import User, UserRole
from app.models.document import Document, DocumentCategory, DocumentStatus, DocumentType
from app.models.media import Media, MediaCategory, MediaFolder
from app.models.content import Content, ContentStatus
from app.models.hr import Department, Employee
from app.models.header import HeaderAlignment, HeaderConfig
from app.models.important_link import ImportantLink
from app.models.office_settings import OfficeSettings

__all__ = [
    # User
    "User",
    "UserRole",
    # Documents
    "Document",
    "DocumentCategory",
    "DocumentStatus",
    "DocumentType",
    # Media
    "Media",
    "MediaCategory",
    "MediaFolder",
    # Content
    "Content",
    "ContentStatus",
    # HR
    "Department",
    "Employee",
    # Site configuration
    "HeaderAlignment",
    "HeaderConfig",
    "ImportantLink",
    "OfficeSettings",
]
