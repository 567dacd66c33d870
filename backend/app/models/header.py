from sqlalchemy import Column, DateTime, Enum as SQLEnum, Integer, Boolean, JSON
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class HeaderAlignment(str, enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class HeaderConfig(Base):
    """
    Public site header: typography, logos and layout.

    typography: {"font_family", "font_size", "font_weight", "color", "line_height", "letter_spacing"}
    logo:       {"left_logo": {...}, "right_logo": {...}, "logo_alignment", "logo_spacing"}
    layout:     {"header_height", "background_color", "border_color", "border_width", "padding", "margin"}
    """
    __tablename__ = "header_configs"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(JSON, nullable=False)  # {"en": "...", "ne": "..."}
    order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    is_published = Column(Boolean, default=False)

    typography = Column(JSON, nullable=False)
    alignment = Column(SQLEnum(HeaderAlignment), default=HeaderAlignment.LEFT, nullable=False)
    logo = Column(JSON, nullable=True)
    layout = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<HeaderConfig {self.id}>"
