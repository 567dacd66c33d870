"""
Admin Employee endpoints - staff directory CRUD and bulk status changes.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import BulkIds
from app.schemas.hr import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from app.schemas.response import ApiResponse
from app.services.employee_service import employee_service
from app.utils.pagination import PaginatedResponse

router = APIRouter()


@router.get("")
async def list_employees(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search in name, position and email"),
    is_active: Optional[bool] = Query(None),
    department_id: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await employee_service.list_employees(
        db, page=page, page_size=page_size, search=search, is_active=is_active, department_id=department_id
    )
    return ApiResponse.success(PaginatedResponse[EmployeeResponse].from_page(result, EmployeeResponse))


@router.post("", status_code=201)
async def create_employee(
    employee_data: EmployeeCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    employee = await employee_service.create_employee(db, employee_data)
    return ApiResponse.success(EmployeeResponse.model_validate(employee))


@router.post("/bulk-activate")
async def bulk_activate_employees(
    body: BulkIds,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await employee_service.bulk_set_active(db, body.ids, True))


@router.post("/bulk-deactivate")
async def bulk_deactivate_employees(
    body: BulkIds,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await employee_service.bulk_set_active(db, body.ids, False))


@router.post("/bulk-delete")
async def bulk_delete_employees(
    body: BulkIds,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse.success(await employee_service.bulk_delete(db, body.ids))


@router.get("/{employee_id}")
async def get_employee(
    employee_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    employee = await employee_service.get_employee(db, employee_id)
    return ApiResponse.success(EmployeeResponse.model_validate(employee))


@router.put("/{employee_id}")
async def update_employee(
    employee_id: str,
    employee_data: EmployeeUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    employee = await employee_service.update_employee(db, employee_id, employee_data)
    return ApiResponse.success(EmployeeResponse.model_validate(employee))


@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await employee_service.delete_employee(db, employee_id)
    return ApiResponse.success({"id": employee_id, "deleted": True})
