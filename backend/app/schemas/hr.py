from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime

from app.schemas.common import TranslatableText


# ==================== Departments ====================

class DepartmentCreate(BaseModel):
    department_name: TranslatableText
    parent_id: Optional[str] = None
    department_head_id: Optional[str] = None
    order: int = 0
    is_active: bool = True


class DepartmentUpdate(BaseModel):
    department_name: Optional[TranslatableText] = None
    parent_id: Optional[str] = None
    department_head_id: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    department_name: Dict[str, Optional[str]]
    parent_id: Optional[str] = None
    department_head_id: Optional[str] = None
    order: int = 0
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None


class DepartmentTreeNode(DepartmentResponse):
    children: List["DepartmentTreeNode"] = Field(default_factory=list)


class DepartmentStatistics(BaseModel):
    total: int
    active: int
    inactive: int
    with_employees: int
    root_departments: int


# ==================== Employees ====================

class EmployeeCreate(BaseModel):
    name: TranslatableText
    position: TranslatableText
    department_id: str
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    telephone: Optional[str] = None
    room_number: Optional[str] = None
    photo_media_id: Optional[str] = None
    order: int = 0
    is_active: bool = True
    show_up_in_homepage: bool = False
    show_down_in_homepage: bool = False


class EmployeeUpdate(BaseModel):
    name: Optional[TranslatableText] = None
    position: Optional[TranslatableText] = None
    department_id: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    telephone: Optional[str] = None
    room_number: Optional[str] = None
    photo_media_id: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    show_up_in_homepage: Optional[bool] = None
    show_down_in_homepage: Optional[bool] = None


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Dict[str, Optional[str]]
    position: Dict[str, Optional[str]]
    department_id: str
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    telephone: Optional[str] = None
    room_number: Optional[str] = None
    photo_media_id: Optional[str] = None
    order: int = 0
    is_active: bool = True
    show_up_in_homepage: bool = False
    show_down_in_homepage: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None
