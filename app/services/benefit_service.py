"""Benefit assignment service."""
import logging
from datetime import date
from typing import List, Optional, Tuple
import uuid

from sqlalchemy import select, func, and_
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ConflictError, BadRequestError
from app.models.hr import Benefit, Employee, EmployeeBenefit
from app.schemas.hr import EmployeeBenefitAssign, EmployeeBenefitUpdate


logger = logging.getLogger(__name__)


class BenefitService:
    """Assigns benefits to employees; removal only deactivates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self):
        return select(EmployeeBenefit).options(
            selectinload(EmployeeBenefit.benefit),
            selectinload(EmployeeBenefit.employee),
        )

    async def get_assignment(self, assignment_id: uuid.UUID) -> EmployeeBenefit:
        stmt = (
            self._base_query()
            .where(EmployeeBenefit.id == assignment_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        assignment = result.scalar_one_or_none()
        if not assignment:
            raise NotFoundError("Employee benefit", assignment_id)
        return assignment

    async def list_assignments(
        self,
        employee_id: Optional[uuid.UUID] = None,
        benefit_id: Optional[uuid.UUID] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[EmployeeBenefit], int]:
        """Active assignments, optionally filtered by employee or benefit."""
        filters = [EmployeeBenefit.is_active.is_(True)]
        if employee_id:
            filters.append(EmployeeBenefit.employee_id == employee_id)
        if benefit_id:
            filters.append(EmployeeBenefit.benefit_id == benefit_id)

        total = (await self.db.execute(
            select(func.count(EmployeeBenefit.id)).where(and_(*filters))
        )).scalar() or 0

        stmt = (
            self._base_query()
            .where(and_(*filters))
            .order_by(EmployeeBenefit.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def assign(self, data: EmployeeBenefitAssign) -> EmployeeBenefit:
        """
        Assign a benefit to an employee, reactivating a previous assignment.

        Raises:
            BadRequestError: unknown employee or benefit
            ConflictError: the benefit is already active for the employee
        """
        if not await self.db.get(Employee, data.employee_id):
            raise BadRequestError(f"Employee with ID {data.employee_id} not found")
        if not await self.db.get(Benefit, data.benefit_id):
            raise BadRequestError(f"Benefit with ID {data.benefit_id} not found")

        result = await self.db.execute(
            select(EmployeeBenefit).where(
                EmployeeBenefit.employee_id == data.employee_id,
                EmployeeBenefit.benefit_id == data.benefit_id,
            )
        )
        assignment = result.scalar_one_or_none()

        if assignment and assignment.is_active:
            raise ConflictError("Employee already has this benefit assigned")

        if assignment:
            assignment.is_active = True
            assignment.amount = data.amount
            assignment.start_date = data.start_date or date.today()
            assignment.end_date = data.end_date
            assignment.notes = data.notes
            logger.info("Reactivated benefit %s for employee %s", data.benefit_id, data.employee_id)
        else:
            fields = data.model_dump()
            fields["start_date"] = data.start_date or date.today()
            assignment = EmployeeBenefit(**fields, is_active=True)
            self.db.add(assignment)

        await self.db.commit()
        return await self.get_assignment(assignment.id)

    async def update_assignment(self, assignment_id: uuid.UUID, data: EmployeeBenefitUpdate) -> EmployeeBenefit:
        assignment = await self.get_assignment(assignment_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("amount", "is_active"):
                continue
            setattr(assignment, field, value)

        await self.db.commit()
        return await self.get_assignment(assignment_id)

    async def remove_assignment(self, assignment_id: uuid.UUID) -> EmployeeBenefit:
        """Deactivate an assignment and stamp its end date; the row is kept."""
        assignment = await self.get_assignment(assignment_id)
        assignment.is_active = False
        assignment.end_date = date.today()
        await self.db.commit()
        return await self.get_assignment(assignment_id)
