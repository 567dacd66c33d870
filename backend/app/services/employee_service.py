"""
Employee Service - staff directory management
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, cast, String
from typing import List, Optional

from app.core.exceptions import EmployeeNotFoundError, FieldValidationError, ICMSError
from app.core.logging_config import logger
from app.models.hr import Department, Employee
from app.schemas.common import BulkOperationResult
from app.schemas.hr import EmployeeCreate, EmployeeUpdate
from app.services.department_service import department_service
from app.utils.pagination import Page, paginate
from app.utils.validators import (
    FieldErrors,
    add_error,
    check_order,
    has_both_languages,
    is_valid_email,
    is_valid_phone,
)


class EmployeeService:
    """Service for managing employees"""

    async def get_employee(self, db: AsyncSession, employee_id: str) -> Employee:
        employee = await db.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def list_employees(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        department_id: Optional[str] = None,
    ) -> Page:
        query = select(Employee)

        conditions = []
        if is_active is not None:
            conditions.append(Employee.is_active == is_active)
        if department_id:
            conditions.append(Employee.department_id == department_id)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                cast(Employee.name, String).ilike(pattern)
                | cast(Employee.position, String).ilike(pattern)
                | Employee.email.ilike(pattern)
            )
        if conditions:
            query = query.where(*conditions)

        query = query.order_by(Employee.order.asc(), Employee.created_at.asc())
        return await paginate(db, query, page, page_size)

    async def get_employees_by_department(self, db: AsyncSession, department_id: str) -> List[Employee]:
        """Active employees of one department in display order"""
        await department_service.get_department(db, department_id)
        result = await db.execute(
            select(Employee)
            .where(Employee.department_id == department_id, Employee.is_active.is_(True))
            .order_by(Employee.order.asc())
        )
        return list(result.scalars().all())

    async def validate_employee(self, db: AsyncSession, data: dict) -> FieldErrors:
        errors: FieldErrors = []

        if "name" in data and not has_both_languages(data["name"]):
            add_error(errors, "name", "Employee name must be provided in both English and Nepali", "INVALID_EMPLOYEE_NAME")

        if "position" in data and not has_both_languages(data["position"]):
            add_error(errors, "position", "Position must be provided in both English and Nepali", "INVALID_POSITION")

        if "department_id" in data:
            department_id = data["department_id"]
            if not department_id or not str(department_id).strip():
                add_error(errors, "department_id", "Department ID must be a valid string", "INVALID_DEPARTMENT_ID")
            elif await db.get(Department, department_id) is None:
                add_error(errors, "department_id", "Department not found", "DEPARTMENT_NOT_FOUND")

        if data.get("email") and not is_valid_email(data["email"]):
            add_error(errors, "email", "Invalid email format", "INVALID_EMAIL_FORMAT")

        if data.get("mobile_number") and not is_valid_phone(data["mobile_number"]):
            add_error(errors, "mobile_number", "Invalid mobile number format", "INVALID_MOBILE_NUMBER")

        if data.get("telephone") and not is_valid_phone(data["telephone"]):
            add_error(errors, "telephone", "Invalid telephone number format", "INVALID_TELEPHONE_NUMBER")

        check_order(errors, data.get("order"))
        return errors

    async def create_employee(self, db: AsyncSession, payload: EmployeeCreate) -> Employee:
        data = payload.model_dump()
        errors = await self.validate_employee(db, data)
        if errors:
            raise FieldValidationError(errors)

        employee = Employee(**data)
        db.add(employee)
        await db.commit()
        await db.refresh(employee)

        logger.info(f"Created employee {employee.id} in department {employee.department_id}")
        return employee

    async def update_employee(self, db: AsyncSession, employee_id: str, payload: EmployeeUpdate) -> Employee:
        employee = await self.get_employee(db, employee_id)

        data = payload.model_dump(exclude_unset=True)
        errors = await self.validate_employee(db, data)
        if errors:
            raise FieldValidationError(errors)

        for field, value in data.items():
            setattr(employee, field, value)
        await db.commit()
        await db.refresh(employee)

        logger.info(f"Updated employee {employee_id}: {sorted(data)}")
        return employee

    async def delete_employee(self, db: AsyncSession, employee_id: str) -> None:
        employee = await self.get_employee(db, employee_id)
        await db.delete(employee)
        await db.commit()
        logger.info(f"Deleted employee {employee_id}")

    async def bulk_set_active(self, db: AsyncSession, ids: List[str], is_active: bool) -> BulkOperationResult:
        action = "activate" if is_active else "deactivate"
        result = BulkOperationResult()
        for employee_id in ids:
            try:
                await self.update_employee(db, employee_id, EmployeeUpdate(is_active=is_active))
                result.success += 1
            except ICMSError as e:
                result.failed += 1
                result.errors.append(f"Failed to {action} employee {employee_id}: {e.message}")
        return result

    async def bulk_delete(self, db: AsyncSession, ids: List[str]) -> BulkOperationResult:
        result = BulkOperationResult()
        for employee_id in ids:
            try:
                await self.delete_employee(db, employee_id)
                result.success += 1
            except ICMSError as e:
                result.failed += 1
                result.errors.append(f"Failed to delete employee {employee_id}: {e.message}")
        return result


# Singleton instance
employee_service = EmployeeService()
