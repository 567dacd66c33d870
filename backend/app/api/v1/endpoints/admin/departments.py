"""
Admin Department endpoints - CRUD, hierarchy and bulk status changes.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import BulkIds
from app.schemas.hr import DepartmentCreate, DepartmentResponse, DepartmentUpdate, EmployeeResponse
from app.schemas.response import ApiResponse
from app.services.department_service import department_service
from app.services.employee_service import employee_service
from app.utils.pagination import PaginatedResponse

router = APIRouter()


@router.get("")
async def list_departments(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(None, description="Search in English/Nepali name"),
    is_active: Optional[bool] = Query(None),
    parent_id: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """List departments with pagination and filters"""
    result = await department_service.list_departments(
        db, page=page, page_size=page_size, search=search, is_active=is_active, parent_id=parent_id
    )
    return ApiResponse.success(PaginatedResponse[DepartmentResponse].from_page(result, DepartmentResponse))


@router.get("/hierarchy")
async def get_department_hierarchy(
    active_only: bool = Query(False),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Departments nested under their parents"""
    return ApiResponse.success(await department_service.get_hierarchy(db, active_only=active_only))


@router.get("/statistics")
async def get_department_statistics(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await department_service.get_statistics(db))


@router.post("", status_code=201)
async def create_department(
    department_data: DepartmentCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    department = await department_service.create_department(db, department_data)
    return ApiResponse.success(DepartmentResponse.model_validate(department))


@router.post("/bulk-activate")
async def bulk_activate_departments(
    body: BulkIds,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await department_service.bulk_set_active(db, body.ids, True))


@router.post("/bulk-deactivate")
async def bulk_deactivate_departments(
    body: BulkIds,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await department_service.bulk_set_active(db, body.ids, False))


@router.post("/bulk-delete")
async def bulk_delete_departments(
    body: BulkIds,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete several departments; ones still in use are reported in `errors`"""
    return ApiResponse.success(await department_service.bulk_delete(db, body.ids))


@router.get("/{department_id}")
async def get_department(
    department_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    department = await department_service.get_department(db, department_id)
    return ApiResponse.success(DepartmentResponse.model_validate(department))


@router.get("/{department_id}/employees")
async def get_department_employees(
    department_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Active employees of a department in display order"""
    employees = await employee_service.get_employees_by_department(db, department_id)
    return ApiResponse.success([EmployeeResponse.model_validate(e) for e in employees])


@router.put("/{department_id}")
async def update_department(
    department_id: str,
    department_data: DepartmentUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    department = await department_service.update_department(db, department_id, department_data)
    return ApiResponse.success(DepartmentResponse.model_validate(department))


@router.delete("/{department_id}")
async def delete_department(
    department_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Refused (409) while the department has employees or child departments"""
    await department_service.delete_department(db, department_id)
    return ApiResponse.success({"id": department_id, "deleted": True})
