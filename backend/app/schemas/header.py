from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any
from datetime import datetime

from app.models.header import HeaderAlignment
from app.schemas.common import TranslatableText


class Typography(BaseModel):
    font_family: str = ""
    font_size: float = 16
    font_weight: str = "normal"
    color: str = ""
    line_height: float = 1.5
    letter_spacing: float = 0


class LogoItem(BaseModel):
    media_id: Optional[str] = None
    alt_text: Optional[TranslatableText] = None
    width: Optional[int] = None
    height: Optional[int] = None


class LogoSettings(BaseModel):
    left_logo: Optional[LogoItem] = None
    right_logo: Optional[LogoItem] = None
    logo_alignment: str = "left"
    logo_spacing: int = 0


class BoxSpacing(BaseModel):
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


class Layout(BaseModel):
    header_height: int = 80
    background_color: str = "#ffffff"
    border_color: Optional[str] = None
    border_width: Optional[int] = None
    padding: BoxSpacing = Field(default_factory=lambda: BoxSpacing(top=10, right=20, bottom=10, left=20))
    margin: BoxSpacing = Field(default_factory=BoxSpacing)


class HeaderConfigCreate(BaseModel):
    name: TranslatableText
    order: int = 0
    is_active: bool = True
    is_published: bool = False
    typography: Typography
    alignment: HeaderAlignment = HeaderAlignment.LEFT
    logo: Optional[LogoSettings] = None
    layout: Layout = Field(default_factory=Layout)


class HeaderConfigUpdate(BaseModel):
    name: Optional[TranslatableText] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    is_published: Optional[bool] = None
    typography: Optional[Typography] = None
    alignment: Optional[HeaderAlignment] = None
    logo: Optional[LogoSettings] = None
    layout: Optional[Layout] = None


class HeaderConfigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Dict[str, Optional[str]]
    order: int = 0
    is_active: bool = True
    is_published: bool = False
    typography: Dict[str, Any]
    alignment: HeaderAlignment
    logo: Optional[Dict[str, Any]] = None
    layout: Dict[str, Any]
    created_at: datetime
    updated_at: Optional[datetime] = None


class HeaderCss(BaseModel):
    id: str
    css: str
