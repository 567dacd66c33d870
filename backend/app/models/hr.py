from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Department(Base):
    """Office department, optionally nested under a parent"""
    __tablename__ = "departments"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    department_name = Column(JSON, nullable=False)  # {"en": "...", "ne": "..."}
    parent_id = Column(GUID, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    department_head_id = Column(GUID, nullable=True)  # Employee id, not enforced
    order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employees = relationship("Employee", back_populates="department", passive_deletes=True)

    def __repr__(self):
        return f"<Department {self.id}>"


class Employee(Base):
    """Staff member listed in the public directory"""
    __tablename__ = "employees"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(JSON, nullable=False)
    position = Column(JSON, nullable=False)
    department_id = Column(GUID, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(255), nullable=True)
    mobile_number = Column(String(20), nullable=True)
    telephone = Column(String(20), nullable=True)
    room_number = Column(String(50), nullable=True)
    photo_media_id = Column(GUID, ForeignKey("media.id", ondelete="SET NULL"), nullable=True)
    order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    # Homepage placement
    show_up_in_homepage = Column(Boolean, default=False)
    show_down_in_homepage = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    department = relationship("Department", back_populates="employees")

    def __repr__(self):
        return f"<Employee {self.id}>"
