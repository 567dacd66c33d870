"""
Unit Tests for DepartmentService and EmployeeService
Tests for: validation rules, delete guards, hierarchy, bulk operations
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DepartmentInUseError,
    DepartmentNotFoundError,
    EmployeeNotFoundError,
    FieldValidationError,
)
from app.schemas.hr import DepartmentCreate, DepartmentUpdate, EmployeeCreate, EmployeeUpdate
from app.services.department_service import department_service
from app.services.employee_service import employee_service


def _name(en: str, ne: str = 'नेपाली') -> dict:
    return {'en': en, 'ne': ne}


async def _department(db: AsyncSession, en: str, order: int = 0, parent_id: str = None):
    return await department_service.create_department(
        db, DepartmentCreate(department_name=_name(en), order=order, parent_id=parent_id)
    )


async def _employee(db: AsyncSession, department_id: str, en: str = 'Hari Prasad', order: int = 0):
    return await employee_service.create_employee(db, EmployeeCreate(
        name=_name(en),
        position=_name('Officer', 'अधिकृत'),
        department_id=department_id,
        order=order,
    ))


class TestDepartmentCrud:

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session: AsyncSession):
        department = await _department(db_session, 'Administration', order=2)

        fetched = await department_service.get_department(db_session, department.id)

        assert fetched.department_name == {'en': 'Administration', 'ne': 'नेपाली'}
        assert fetched.order == 2
        assert fetched.is_active is True

    @pytest.mark.asyncio
    async def test_missing_department_is_not_found(self, db_session: AsyncSession):
        with pytest.raises(DepartmentNotFoundError) as exc_info:
            await department_service.get_department(db_session, 'missing-id')

        assert exc_info.value.code == 'DEPARTMENT_NOT_FOUND'
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_every_invalid_field_is_reported(self, db_session: AsyncSession):
        payload = DepartmentCreate(department_name={'en': 'Finance'}, order=-1, parent_id='no-such-parent')

        with pytest.raises(FieldValidationError) as exc_info:
            await department_service.create_department(db_session, payload)

        codes = [e['code'] for e in exc_info.value.details['errors']]
        assert codes == ['INVALID_DEPARTMENT_NAME', 'INVALID_ORDER', 'PARENT_DEPARTMENT_NOT_FOUND']

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session: AsyncSession):
        department = await _department(db_session, 'Planning', order=3)

        updated = await department_service.update_department(
            db_session, department.id, DepartmentUpdate(is_active=False)
        )

        assert updated.is_active is False
        assert updated.order == 3
        assert updated.department_name['en'] == 'Planning'

    @pytest.mark.asyncio
    async def test_department_cannot_be_nested_under_its_child(self, db_session: AsyncSession):
        parent = await _department(db_session, 'Parent')
        child = await _department(db_session, 'Child', parent_id=parent.id)

        with pytest.raises(FieldValidationError) as exc_info:
            await department_service.update_department(
                db_session, parent.id, DepartmentUpdate(parent_id=child.id)
            )

        assert exc_info.value.details['errors'][0]['code'] == 'INVALID_PARENT_DEPARTMENT'

    @pytest.mark.asyncio
    async def test_search_and_active_filter(self, db_session: AsyncSession):
        await _department(db_session, 'Administration', order=1)
        await _department(db_session, 'Accounts', order=2)
        archived = await _department(db_session, 'Archive', order=3)
        await department_service.update_department(db_session, archived.id, DepartmentUpdate(is_active=False))

        page = await department_service.list_departments(db_session, search='admin')
        assert [d.department_name['en'] for d in page.items] == ['Administration']

        page = await department_service.list_departments(db_session, is_active=True)
        assert page.total == 2

    @pytest.mark.asyncio
    async def test_pagination(self, db_session: AsyncSession):
        for i in range(5):
            await _department(db_session, f'Section {i}', order=i)

        page = await department_service.list_departments(db_session, page=2, page_size=2)

        assert page.total == 5
        assert page.total_pages == 3
        assert [d.department_name['en'] for d in page.items] == ['Section 2', 'Section 3']


class TestDepartmentDelete:

    @pytest.mark.asyncio
    async def test_delete_empty_department(self, db_session: AsyncSession):
        department = await _department(db_session, 'Temporary')

        await department_service.delete_department(db_session, department.id)

        with pytest.raises(DepartmentNotFoundError):
            await department_service.get_department(db_session, department.id)

    @pytest.mark.asyncio
    async def test_department_with_employees_is_kept(self, db_session: AsyncSession):
        department = await _department(db_session, 'Administration')
        await _employee(db_session, department.id)

        with pytest.raises(DepartmentInUseError) as exc_info:
            await department_service.delete_department(db_session, department.id)

        assert exc_info.value.message == 'Cannot delete department with employees'
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_department_with_children_is_kept(self, db_session: AsyncSession):
        parent = await _department(db_session, 'Parent')
        await _department(db_session, 'Child', parent_id=parent.id)

        with pytest.raises(DepartmentInUseError, match='child departments'):
            await department_service.delete_department(db_session, parent.id)

    @pytest.mark.asyncio
    async def test_bulk_delete_reports_each_failure(self, db_session: AsyncSession):
        empty = await _department(db_session, 'Empty')
        staffed = await _department(db_session, 'Staffed')
        await _employee(db_session, staffed.id)

        result = await department_service.bulk_delete(db_session, [empty.id, staffed.id, 'missing-id'])

        assert result.success == 1
        assert result.failed == 2
        assert 'Cannot delete department with employees' in result.errors[0]
        assert 'missing-id' in result.errors[1]


class TestHierarchyAndStatistics:

    @pytest.mark.asyncio
    async def test_children_nest_under_parents(self, db_session: AsyncSession):
        root = await _department(db_session, 'Office', order=0)
        await _department(db_session, 'Accounts', order=2, parent_id=root.id)
        await _department(db_session, 'Admin', order=1, parent_id=root.id)
        await _department(db_session, 'Standalone', order=5)

        tree = await department_service.get_hierarchy(db_session)

        assert [node.department_name['en'] for node in tree] == ['Office', 'Standalone']
        assert [child.department_name['en'] for child in tree[0].children] == ['Admin', 'Accounts']

    @pytest.mark.asyncio
    async def test_inactive_parent_promotes_children_when_filtered(self, db_session: AsyncSession):
        root = await _department(db_session, 'Office')
        await _department(db_session, 'Accounts', parent_id=root.id)
        await department_service.update_department(db_session, root.id, DepartmentUpdate(is_active=False))

        tree = await department_service.get_hierarchy(db_session, active_only=True)

        assert [node.department_name['en'] for node in tree] == ['Accounts']

    @pytest.mark.asyncio
    async def test_statistics(self, db_session: AsyncSession):
        root = await _department(db_session, 'Office')
        child = await _department(db_session, 'Accounts', parent_id=root.id)
        await _employee(db_session, child.id)
        await department_service.bulk_set_active(db_session, [child.id], False)

        stats = await department_service.get_statistics(db_session)

        assert (stats.total, stats.active, stats.inactive) == (2, 1, 1)
        assert stats.with_employees == 1
        assert stats.root_departments == 1


class TestEmployees:

    @pytest.mark.asyncio
    async def test_create_requires_existing_department(self, db_session: AsyncSession):
        payload = EmployeeCreate(
            name=_name('Sita'),
            position={'en': 'Clerk'},
            department_id='missing-department',
            email='not-an-email',
            mobile_number='98-ABC',
        )

        with pytest.raises(FieldValidationError) as exc_info:
            await employee_service.create_employee(db_session, payload)

        codes = {e['code'] for e in exc_info.value.details['errors']}
        assert codes == {'INVALID_POSITION', 'DEPARTMENT_NOT_FOUND', 'INVALID_EMAIL_FORMAT', 'INVALID_MOBILE_NUMBER'}

    @pytest.mark.asyncio
    async def test_valid_contact_details_are_accepted(self, db_session: AsyncSession):
        department = await _department(db_session, 'Administration')

        employee = await employee_service.create_employee(db_session, EmployeeCreate(
            name=_name('Sita Sharma'),
            position=_name('Officer'),
            department_id=department.id,
            email='sita@example.gov.np',
            mobile_number='+977 9800000000',
            telephone='(01) 4200000',
            show_up_in_homepage=True,
        ))

        assert employee.telephone == '(01) 4200000'
        assert employee.show_up_in_homepage is True
        assert employee.show_down_in_homepage is False

    @pytest.mark.asyncio
    async def test_by_department_lists_active_staff_in_order(self, db_session: AsyncSession):
        department = await _department(db_session, 'Administration')
        second = await _employee(db_session, department.id, 'Second', order=2)
        await _employee(db_session, department.id, 'First', order=1)
        retired = await _employee(db_session, department.id, 'Retired', order=0)
        await employee_service.update_employee(db_session, retired.id, EmployeeUpdate(is_active=False))

        employees = await employee_service.get_employees_by_department(db_session, department.id)

        assert [e.name['en'] for e in employees] == ['First', 'Second']
        assert employees[1].id == second.id

    @pytest.mark.asyncio
    async def test_by_department_unknown_department(self, db_session: AsyncSession):
        with pytest.raises(DepartmentNotFoundError):
            await employee_service.get_employees_by_department(db_session, 'missing-department')

    @pytest.mark.asyncio
    async def test_list_filters_by_department_and_search(self, db_session: AsyncSession):
        admin = await _department(db_session, 'Administration')
        accounts = await _department(db_session, 'Accounts')
        await _employee(db_session, admin.id, 'Hari Prasad')
        await _employee(db_session, accounts.id, 'Gita Rai')

        page = await employee_service.list_employees(db_session, department_id=accounts.id)
        assert [e.name['en'] for e in page.items] == ['Gita Rai']

        page = await employee_service.list_employees(db_session, search='hari')
        assert [e.name['en'] for e in page.items] == ['Hari Prasad']

    @pytest.mark.asyncio
    async def test_bulk_deactivate_and_delete(self, db_session: AsyncSession):
        department = await _department(db_session, 'Administration')
        first = await _employee(db_session, department.id, 'First')
        second = await _employee(db_session, department.id, 'Second')

        result = await employee_service.bulk_set_active(db_session, [first.id, 'missing-id'], False)
        assert (result.success, result.failed) == (1, 1)
        assert (await employee_service.get_employee(db_session, first.id)).is_active is False

        result = await employee_service.bulk_delete(db_session, [first.id, second.id])
        assert result.success == 2
        with pytest.raises(EmployeeNotFoundError):
            await employee_service.get_employee(db_session, second.id)

        # Department is free to go once its staff are removed
        await department_service.delete_department(db_session, department.id)
