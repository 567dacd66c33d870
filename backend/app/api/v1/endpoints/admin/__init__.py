"""
Admin API endpoints for the ICMS back office.
All endpoints require admin privileges.
"""
from fastapi import APIRouter

from app.api.v1.endpoints.admin import (
    dashboard,
    departments,
    documents,
    employees,
    header,
    important_links,
    office_settings,
)

admin_router = APIRouter(prefix="/admin")

admin_router.include_router(dashboard.router, prefix="/dashboard", tags=["Admin Dashboard"])
admin_router.include_router(departments.router, prefix="/departments", tags=["Admin - Departments"])
admin_router.include_router(employees.router, prefix="/employees", tags=["Admin - Employees"])
admin_router.include_router(documents.router, prefix="/documents", tags=["Admin - Documents"])
admin_router.include_router(header.router, prefix="/header-configs", tags=["Admin - Header"])
admin_router.include_router(important_links.router, prefix="/important-links", tags=["Admin - Important Links"])
admin_router.include_router(office_settings.router, prefix="/office-settings", tags=["Admin - Office Settings"])
