from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Text
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class OfficeSettings(Base):
    """Office contact details; the site uses the first (only) row"""
    __tablename__ = "office_settings"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Translatable: {"en": "...", "ne": "..."}
    directorate = Column(JSON, nullable=False)
    office_name = Column(JSON, nullable=False)
    office_address = Column(JSON, nullable=False)
    phone_number = Column(JSON, nullable=False)

    email = Column(String(255), nullable=False)
    background_photo_id = Column(GUID, ForeignKey("media.id", ondelete="SET NULL"), nullable=True)
    x_link = Column(String(500), nullable=True)
    map_iframe = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)
    youtube = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<OfficeSettings {self.id}>"
