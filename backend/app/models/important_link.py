from sqlalchemy import Column, String, DateTime, Integer, Boolean, JSON
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ImportantLink(Base):
    """Footer / quick link to an external site"""
    __tablename__ = "important_links"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    link_title = Column(JSON, nullable=False)  # {"en": "...", "ne": "..."}
    link_url = Column(String(1000), nullable=False)
    order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ImportantLink {self.link_url}>"
