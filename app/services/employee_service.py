"""Employee directory service."""
import logging
from datetime import date
from typing import List, Optional, Tuple
import uuid

from sqlalchemy import select, func, and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ConflictError, BadRequestError
from app.models.hr import (
    Department,
    Position,
    Employee,
    EmployeeBenefit,
    EmployeeStatus,
    EmploymentType,
)
from app.schemas.hr import EmployeeCreate, EmployeeUpdate


logger = logging.getLogger(__name__)

EMPLOYEE_CODE_PREFIX = "EMP"

# Columns that must be unique across employees, with the label used in errors
UNIQUE_FIELDS = (
    ("employee_code", "Employee code"),
    ("email", "Email"),
    ("national_id", "National ID"),
    ("food_ordering_user_id", "Food ordering user ID"),
)

# Non-nullable columns; an explicit null in an update leaves them unchanged
REQUIRED_FIELDS = {
    "employee_code", "first_name", "last_name", "department_id", "position_id",
    "employment_type", "status", "start_date", "base_salary",
}


class EmployeeService:
    """Service for employee CRUD, account linking and code generation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self):
        return select(Employee).options(
            selectinload(Employee.department),
            selectinload(Employee.position),
        )

    async def get_employee(self, employee_id: uuid.UUID) -> Employee:
        """Get employee by ID with department and position loaded."""
        stmt = (
            self._base_query()
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        employee = result.scalar_one_or_none()
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def list_employees(
        self,
        search: Optional[str] = None,
        department_id: Optional[uuid.UUID] = None,
        position_id: Optional[uuid.UUID] = None,
        status: Optional[EmployeeStatus] = None,
        employment_type: Optional[EmploymentType] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Employee], int]:
        """Get paginated employees ordered by employee code."""
        filters = []
        if department_id:
            filters.append(Employee.department_id == department_id)
        if position_id:
            filters.append(Employee.position_id == position_id)
        if status:
            filters.append(Employee.status == status.value)
        if employment_type:
            filters.append(Employee.employment_type == employment_type.value)
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(
                    Employee.first_name.ilike(pattern),
                    Employee.last_name.ilike(pattern),
                    Employee.nickname.ilike(pattern),
                    Employee.employee_code.ilike(pattern),
                    Employee.email.ilike(pattern),
                )
            )

        count_stmt = select(func.count(Employee.id))
        stmt = self._base_query().order_by(Employee.employee_code)
        if filters:
            count_stmt = count_stmt.where(and_(*filters))
            stmt = stmt.where(and_(*filters))

        total = (await self.db.execute(count_stmt)).scalar() or 0

        result = await self.db.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().all()), total

    async def get_active_benefits(self, employee_id: uuid.UUID) -> List[EmployeeBenefit]:
        """Active benefit assignments of an employee."""
        await self.get_employee(employee_id)

        stmt = (
            select(EmployeeBenefit)
            .options(
                selectinload(EmployeeBenefit.benefit),
                selectinload(EmployeeBenefit.employee),
            )
            .where(
                EmployeeBenefit.employee_id == employee_id,
                EmployeeBenefit.is_active.is_(True),
            )
            .order_by(EmployeeBenefit.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # ==================== VALIDATION ====================

    async def _ensure_unique(self, values: dict, exclude_id: Optional[uuid.UUID] = None) -> None:
        for field, label in UNIQUE_FIELDS:
            value = values.get(field)
            if value is None:
                continue
            stmt = select(Employee.id).where(getattr(Employee, field) == value)
            if exclude_id:
                stmt = stmt.where(Employee.id != exclude_id)
            if (await self.db.execute(stmt)).first():
                raise ConflictError(f"{label} {value} already exists")

    async def _ensure_references(
        self,
        department_id: Optional[uuid.UUID],
        position_id: Optional[uuid.UUID],
    ) -> None:
        if department_id and not await self.db.get(Department, department_id):
            raise BadRequestError(f"Department with ID {department_id} not found")
        if position_id and not await self.db.get(Position, position_id):
            raise BadRequestError(f"Position with ID {position_id} not found")

    async def _commit_unique(self) -> None:
        """Commit, reporting a unique-constraint race lost after _ensure_unique as a conflict."""
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Employee with the same code, email, national ID or linked user already exists")

    # ==================== CREATE / UPDATE / DELETE ====================

    async def create_employee(self, data: EmployeeCreate) -> Employee:
        """
        Create an employee.

        Raises:
            ConflictError: code, email, national ID or linked user already taken
            BadRequestError: unknown department or position
        """
        values = data.model_dump()
        await self._ensure_unique(values)
        await self._ensure_references(data.department_id, data.position_id)

        values["employment_type"] = data.employment_type.value
        values["gender"] = data.gender.value if data.gender else None
        values["start_date"] = data.start_date or date.today()

        employee = Employee(status=EmployeeStatus.ACTIVE.value, **values)
        self.db.add(employee)
        await self._commit_unique()

        logger.info("Created employee %s", employee.employee_code)
        return await self.get_employee(employee.id)

    async def update_employee(self, employee_id: uuid.UUID, data: EmployeeUpdate) -> Employee:
        """Partial update with the same uniqueness and reference checks as create."""
        employee = await self.get_employee(employee_id)
        update_data = data.model_dump(exclude_unset=True)

        changed = {
            field: update_data[field]
            for field, _ in UNIQUE_FIELDS
            if update_data.get(field) is not None and update_data[field] != getattr(employee, field)
        }
        await self._ensure_unique(changed, exclude_id=employee_id)
        await self._ensure_references(update_data.get("department_id"), update_data.get("position_id"))

        for field, value in update_data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            if hasattr(value, "value"):
                value = value.value
            setattr(employee, field, value)

        await self._commit_unique()
        return await self.get_employee(employee_id)

    async def remove_employee(self, employee_id: uuid.UUID) -> Employee:
        """Soft delete: mark as TERMINATED and stamp the end date."""
        employee = await self.get_employee(employee_id)
        employee.status = EmployeeStatus.TERMINATED.value
        employee.end_date = date.today()
        await self.db.commit()

        logger.info("Terminated employee %s", employee.employee_code)
        return await self.get_employee(employee_id)

    # ==================== ACCOUNT LINKING ====================

    async def link_user(self, employee_id: uuid.UUID, food_ordering_user_id: int) -> Employee:
        """
        Link an employee to a food-ordering user account.

        Raises:
            ConflictError: the user is already linked to another employee
        """
        employee = await self.get_employee(employee_id)
        await self._ensure_unique(
            {"food_ordering_user_id": food_ordering_user_id}, exclude_id=employee_id
        )
        employee.food_ordering_user_id = food_ordering_user_id
        await self._commit_unique()
        return await self.get_employee(employee_id)

    async def unlink_user(self, employee_id: uuid.UUID) -> Employee:
        employee = await self.get_employee(employee_id)
        employee.food_ordering_user_id = None
        await self.db.commit()
        return await self.get_employee(employee_id)

    # ==================== CODES ====================

    async def generate_employee_code(self) -> str:
        """Next EMP### code after the highest existing one."""
        result = await self.db.execute(
            select(Employee.employee_code)
            .where(Employee.employee_code.like(f"{EMPLOYEE_CODE_PREFIX}%"))
        )
        numbers = []
        for code in result.scalars().all():
            suffix = code[len(EMPLOYEE_CODE_PREFIX):]
            if suffix.isdigit():
                numbers.append(int(suffix))

        next_number = max(numbers) + 1 if numbers else 1
        return f"{EMPLOYEE_CODE_PREFIX}{str(next_number).zfill(3)}"
