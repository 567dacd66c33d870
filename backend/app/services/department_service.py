"""
Department Service - CRUD and hierarchy for office departments

Handles:
- Paginated listing and search
- Field validation (bilingual names, non-negative order, parent checks)
- Delete guards for departments that still have employees or children
- Bulk activate / deactivate / delete
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, cast, String
from typing import Dict, List, Optional

from app.core.exceptions import (
    DepartmentInUseError,
    DepartmentNotFoundError,
    FieldValidationError,
    ICMSError,
)
from app.core.logging_config import logger
from app.models.hr import Department, Employee
from app.schemas.common import BulkOperationResult
from app.schemas.hr import DepartmentCreate, DepartmentStatistics, DepartmentTreeNode, DepartmentUpdate
from app.utils.pagination import Page, paginate
from app.utils.validators import FieldErrors, add_error, check_order, has_both_languages


class DepartmentService:
    """Service for managing departments"""

    # ==================== READ ====================

    async def get_department(self, db: AsyncSession, department_id: str) -> Department:
        department = await db.get(Department, department_id)
        if department is None:
            raise DepartmentNotFoundError(department_id)
        return department

    async def list_departments(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        parent_id: Optional[str] = None,
    ) -> Page:
        """List departments ordered by display order"""
        query = select(Department)

        conditions = []
        if is_active is not None:
            conditions.append(Department.is_active == is_active)
        if parent_id is not None:
            conditions.append(Department.parent_id == parent_id)
        if search:
            conditions.append(cast(Department.department_name, String).ilike(f"%{search}%"))
        if conditions:
            query = query.where(*conditions)

        query = query.order_by(Department.order.asc(), Department.created_at.asc())
        return await paginate(db, query, page, page_size)

    async def get_hierarchy(self, db: AsyncSession, active_only: bool = False) -> List[DepartmentTreeNode]:
        """
        Departments as a forest of parent/child trees.

        A department whose parent is missing (or filtered out) becomes a root.
        """
        query = select(Department).order_by(Department.order.asc(), Department.created_at.asc())
        if active_only:
            query = query.where(Department.is_active.is_(True))
        departments = (await db.execute(query)).scalars().all()

        nodes: Dict[str, DepartmentTreeNode] = {
            d.id: DepartmentTreeNode.model_validate(d) for d in departments
        }
        roots = []
        for department in departments:
            node = nodes[department.id]
            parent = nodes.get(department.parent_id) if department.parent_id else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        return roots

    async def get_statistics(self, db: AsyncSession) -> DepartmentStatistics:
        total = (await db.execute(select(func.count(Department.id)))).scalar() or 0
        active = (await db.execute(
            select(func.count(Department.id)).where(Department.is_active.is_(True))
        )).scalar() or 0
        roots = (await db.execute(
            select(func.count(Department.id)).where(Department.parent_id.is_(None))
        )).scalar() or 0
        with_employees = (await db.execute(
            select(func.count(func.distinct(Employee.department_id)))
        )).scalar() or 0

        return DepartmentStatistics(
            total=total,
            active=active,
            inactive=total - active,
            with_employees=with_employees,
            root_departments=roots,
        )

    # ==================== VALIDATION ====================

    async def validate_department(
        self,
        db: AsyncSession,
        data: dict,
        department_id: Optional[str] = None,
    ) -> FieldErrors:
        """Every rule `data` breaks; only the keys present are checked"""
        errors: FieldErrors = []

        if "department_name" in data and not has_both_languages(data["department_name"]):
            add_error(
                errors, "department_name",
                "Department name must be provided in both English and Nepali",
                "INVALID_DEPARTMENT_NAME",
            )

        check_order(errors, data.get("order"))

        parent_id = data.get("parent_id")
        if parent_id:
            if await db.get(Department, parent_id) is None:
                add_error(errors, "parent_id", "Parent department not found", "PARENT_DEPARTMENT_NOT_FOUND")
            elif department_id and await self._is_descendant_or_self(db, parent_id, department_id):
                add_error(
                    errors, "parent_id",
                    "A department cannot be nested under itself or its own children",
                    "INVALID_PARENT_DEPARTMENT",
                )

        return errors

    async def _is_descendant_or_self(self, db: AsyncSession, candidate_id: str, department_id: str) -> bool:
        """Walk up from candidate_id looking for department_id"""
        seen = set()
        current = candidate_id
        while current and current not in seen:
            if current == department_id:
                return True
            seen.add(current)
            current = (await db.execute(
                select(Department.parent_id).where(Department.id == current)
            )).scalar()
        return False

    # ==================== WRITE ====================

    async def create_department(self, db: AsyncSession, payload: DepartmentCreate) -> Department:
        data = payload.model_dump()
        errors = await self.validate_department(db, data)
        if errors:
            raise FieldValidationError(errors)

        department = Department(**data)
        db.add(department)
        await db.commit()
        await db.refresh(department)

        logger.info(f"Created department {department.id}")
        return department

    async def update_department(self, db: AsyncSession, department_id: str, payload: DepartmentUpdate) -> Department:
        department = await self.get_department(db, department_id)

        data = payload.model_dump(exclude_unset=True)
        errors = await self.validate_department(db, data, department_id=department_id)
        if errors:
            raise FieldValidationError(errors)

        for field, value in data.items():
            setattr(department, field, value)
        await db.commit()
        await db.refresh(department)

        logger.info(f"Updated department {department_id}: {sorted(data)}")
        return department

    async def delete_department(self, db: AsyncSession, department_id: str) -> None:
        """
        Raises:
            DepartmentNotFoundError
            DepartmentInUseError: employees or child departments still reference it
        """
        department = await self.get_department(db, department_id)

        employees = (await db.execute(
            select(func.count(Employee.id)).where(Employee.department_id == department_id)
        )).scalar() or 0
        if employees:
            raise DepartmentInUseError(department_id, "employees")

        children = (await db.execute(
            select(func.count(Department.id)).where(Department.parent_id == department_id)
        )).scalar() or 0
        if children:
            raise DepartmentInUseError(department_id, "child departments")

        await db.delete(department)
        await db.commit()
        logger.info(f"Deleted department {department_id}")

    # ==================== BULK ====================

    async def bulk_set_active(self, db: AsyncSession, ids: List[str], is_active: bool) -> BulkOperationResult:
        action = "activate" if is_active else "deactivate"
        result = BulkOperationResult()
        for department_id in ids:
            try:
                await self.update_department(db, department_id, DepartmentUpdate(is_active=is_active))
                result.success += 1
            except ICMSError as e:
                result.failed += 1
                result.errors.append(f"Failed to {action} department {department_id}: {e.message}")
        return result

    async def bulk_delete(self, db: AsyncSession, ids: List[str]) -> BulkOperationResult:
        result = BulkOperationResult()
        for department_id in ids:
            try:
                await self.delete_department(db, department_id)
                result.success += 1
            except ICMSError as e:
                result.failed += 1
                result.errors.append(f"Failed to delete department {department_id}: {e.message}")
        return result


# Singleton instance
department_service = DepartmentService()
