"""Service for salary records: CRUD, lifecycle transitions and monthly generation."""
import logging
from typing import List, Optional, Tuple
from decimal import Decimal
import uuid

from sqlalchemy import select, func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ConflictError, BadRequestError
from app.models.hr import Employee, EmployeeStatus
from app.models.salary import SalaryRecord, SalaryStatus
from app.schemas.salary import (
    SalaryRecordCreate,
    SalaryRecordUpdate,
    SalaryGenerateRequest,
    SalaryGenerateResponse,
    SalaryGenerationError,
)
from app.services import salary_state_machine
from app.services.payroll_calculator import (
    ZERO,
    calculate_salary,
    calculate_social_security,
)


logger = logging.getLogger(__name__)

# Fields that feed the calculator; anything else on an update is copied as-is
CALCULATION_FIELDS = (
    "base_salary",
    "overtime_hours",
    "overtime_rate",
    "bonus",
    "allowances",
    "commission",
    "social_security",
    "tax",
    "other_deductions",
)


class SalaryService:
    """Service for salary record management and payroll generation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== QUERIES ====================

    async def get_record(self, record_id: uuid.UUID) -> SalaryRecord:
        """Get salary record by ID with its employee loaded."""
        stmt = (
            select(SalaryRecord)
            .options(selectinload(SalaryRecord.employee))
            .where(SalaryRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        record = result.scalar_one_or_none()
        if not record:
            raise NotFoundError("Salary record", record_id)
        return record

    async def find_by_period(self, employee_id: uuid.UUID, month: int, year: int) -> Optional[SalaryRecord]:
        stmt = select(SalaryRecord).where(
            and_(
                SalaryRecord.employee_id == employee_id,
                SalaryRecord.month == month,
                SalaryRecord.year == year,
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_records(
        self,
        employee_id: Optional[uuid.UUID] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[SalaryRecord], int]:
        """Get paginated salary records, newest period first."""
        filters = []
        if employee_id:
            filters.append(SalaryRecord.employee_id == employee_id)
        if month:
            filters.append(SalaryRecord.month == month)
        if year:
            filters.append(SalaryRecord.year == year)
        if status:
            filters.append(SalaryRecord.status == status.value)

        count_stmt = select(func.count(SalaryRecord.id))
        stmt = (
            select(SalaryRecord)
            .options(selectinload(SalaryRecord.employee))
            .order_by(SalaryRecord.year.desc(), SalaryRecord.month.desc(), SalaryRecord.created_at.desc())
        )
        if filters:
            count_stmt = count_stmt.where(and_(*filters))
            stmt = stmt.where(and_(*filters))

        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = stmt.offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def list_by_month(self, year: int, month: int) -> Tuple[List[SalaryRecord], dict]:
        """All records of one period, ordered by employee first name, with totals."""
        stmt = (
            select(SalaryRecord)
            .join(Employee, SalaryRecord.employee_id == Employee.id)
            .options(selectinload(SalaryRecord.employee))
            .where(SalaryRecord.year == year, SalaryRecord.month == month)
            .order_by(Employee.first_name.asc())
        )
        result = await self.db.execute(stmt)
        records = list(result.scalars().all())

        summary = {
            "total_records": len(records),
            "total_gross_salary": sum((r.gross_salary for r in records), ZERO),
            "total_net_salary": sum((r.net_salary for r in records), ZERO),
            "total_deductions": sum((r.total_deductions for r in records), ZERO),
            "paid_count": sum(1 for r in records if r.status == SalaryStatus.PAID.value),
            "pending_count": sum(1 for r in records if r.status == SalaryStatus.PENDING.value),
        }
        return records, summary

    async def get_summary(self, year: Optional[int] = None, month: Optional[int] = None) -> dict:
        """Totals and status counts, optionally restricted to a year and/or month."""
        filters = []
        if year:
            filters.append(SalaryRecord.year == year)
        if month:
            filters.append(SalaryRecord.month == month)

        totals_stmt = select(
            func.count(SalaryRecord.id),
            func.coalesce(func.sum(SalaryRecord.gross_salary), 0),
            func.coalesce(func.sum(SalaryRecord.net_salary), 0),
            func.coalesce(func.sum(SalaryRecord.bonus), 0),
            func.coalesce(func.sum(SalaryRecord.overtime_amount), 0),
            func.coalesce(
                func.sum(SalaryRecord.social_security + SalaryRecord.tax + SalaryRecord.other_deductions),
                0,
            ),
        )
        status_stmt = select(SalaryRecord.status, func.count(SalaryRecord.id)).group_by(SalaryRecord.status)
        if filters:
            totals_stmt = totals_stmt.where(and_(*filters))
            status_stmt = status_stmt.where(and_(*filters))

        count, gross, net, bonus, overtime, deductions = (await self.db.execute(totals_stmt)).one()
        by_status = {s.value.lower(): 0 for s in SalaryStatus}
        for status_value, status_count in (await self.db.execute(status_stmt)).all():
            by_status[status_value.lower()] = status_count

        return {
            "total_records": count or 0,
            "total_gross_salary": Decimal(str(gross)),
            "total_net_salary": Decimal(str(net)),
            "total_bonus": Decimal(str(bonus)),
            "total_overtime": Decimal(str(overtime)),
            "total_deductions": Decimal(str(deductions)),
            "by_status": by_status,
        }

    async def list_for_employee(self, employee_id: uuid.UUID) -> List[SalaryRecord]:
        """Salary history of one employee, newest first."""
        stmt = (
            select(SalaryRecord)
            .options(selectinload(SalaryRecord.employee))
            .where(SalaryRecord.employee_id == employee_id)
            .order_by(SalaryRecord.year.desc(), SalaryRecord.month.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # ==================== CREATE / UPDATE / DELETE ====================

    async def create_record(self, data: SalaryRecordCreate) -> SalaryRecord:
        """
        Create a salary record for one employee and period.

        Raises:
            BadRequestError: employee does not exist
            ConflictError: a record for (employee, month, year) already exists
        """
        employee = await self.db.get(Employee, data.employee_id)
        if not employee:
            raise BadRequestError(f"Employee with ID {data.employee_id} not found")

        if await self.find_by_period(data.employee_id, data.month, data.year):
            raise ConflictError(
                f"Salary record for employee {data.employee_id} "
                f"for {data.month}/{data.year} already exists"
            )

        amounts = data.model_dump(include=set(CALCULATION_FIELDS), exclude_none=True)
        breakdown = calculate_salary(**amounts)

        record = SalaryRecord(
            employee_id=data.employee_id,
            month=data.month,
            year=data.year,
            deduction_notes=data.deduction_notes,
            notes=data.notes,
            status=SalaryStatus.PENDING.value,
            **breakdown.as_record_fields(),
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                f"Salary record for employee {data.employee_id} "
                f"for {data.month}/{data.year} already exists"
            )

        return await self.get_record(record.id)

    async def update_record(self, record_id: uuid.UUID, data: SalaryRecordUpdate) -> SalaryRecord:
        """
        Merge supplied fields over the stored record and recompute derived amounts.

        Raises:
            NotFoundError: record does not exist
            InvalidStateError: record is PAID or CANCELLED
        """
        record = await self.get_record(record_id)
        salary_state_machine.ensure_editable(record)

        update_data = data.model_dump(exclude_unset=True)
        amounts = {field: getattr(record, field) for field in CALCULATION_FIELDS}
        for field in CALCULATION_FIELDS:
            if update_data.get(field) is not None:
                amounts[field] = update_data[field]

        breakdown = calculate_salary(**amounts)
        for key, value in breakdown.as_record_fields().items():
            setattr(record, key, value)
        for key in ("deduction_notes", "notes"):
            if key in update_data:
                setattr(record, key, update_data[key])

        await self.db.commit()
        return await self.get_record(record_id)

    async def delete_record(self, record_id: uuid.UUID) -> None:
        """Hard delete a salary record."""
        record = await self.get_record(record_id)
        await self.db.delete(record)
        await self.db.commit()
        logger.info("Deleted salary record %s", record_id)

    # ==================== LIFECYCLE ====================

    async def approve(self, record_id: uuid.UUID) -> SalaryRecord:
        record = await self.get_record(record_id)
        salary_state_machine.approve(record)
        await self.db.commit()
        return await self.get_record(record_id)

    async def mark_paid(
        self,
        record_id: uuid.UUID,
        payment_method: Optional[str] = None,
        payment_ref: Optional[str] = None,
    ) -> SalaryRecord:
        record = await self.get_record(record_id)
        salary_state_machine.mark_paid(record, payment_method, payment_ref)
        await self.db.commit()
        return await self.get_record(record_id)

    async def cancel(self, record_id: uuid.UUID) -> SalaryRecord:
        record = await self.get_record(record_id)
        salary_state_machine.cancel(record)
        await self.db.commit()
        return await self.get_record(record_id)

    # ==================== GENERATION ====================

    async def generate(self, data: SalaryGenerateRequest) -> SalaryGenerateResponse:
        """
        Create PENDING records for every eligible employee for a period.

        Employees that already have a record are skipped. Each record is
        committed on its own; a failure for one employee is rolled back and
        reported in ``errors`` without stopping the run.
        """
        emp_query = (
            select(Employee)
            .options(selectinload(Employee.benefits))
            .where(Employee.status == EmployeeStatus.ACTIVE.value)
            .order_by(Employee.employee_code)
        )
        if data.employee_ids:
            emp_query = emp_query.where(Employee.id.in_(data.employee_ids))

        emp_result = await self.db.execute(emp_query)
        # Snapshot plain values: a rollback expires ORM instances
        cohort = [
            (
                emp.id,
                emp.employee_code,
                emp.base_salary,
                sum((b.amount for b in emp.benefits if b.is_active), ZERO),
            )
            for emp in emp_result.scalars().all()
        ]

        results = SalaryGenerateResponse()

        for employee_id, employee_code, base_salary, allowances in cohort:
            try:
                if await self.find_by_period(employee_id, data.month, data.year):
                    results.skipped += 1
                    results.skipped_employee_ids.append(employee_id)
                    continue

                breakdown = calculate_salary(
                    base_salary=base_salary,
                    overtime_hours=ZERO,
                    allowances=allowances,
                    social_security=calculate_social_security(base_salary),
                )
                self.db.add(SalaryRecord(
                    employee_id=employee_id,
                    month=data.month,
                    year=data.year,
                    status=SalaryStatus.PENDING.value,
                    **breakdown.as_record_fields(),
                ))
                await self.db.commit()

                results.created += 1
                results.created_employee_ids.append(employee_id)
            except Exception as e:
                await self.db.rollback()
                logger.warning(
                    "Salary generation failed for employee %s (%s/%s): %s",
                    employee_code, data.month, data.year, e,
                )
                message = (
                    "Salary record for this period already exists"
                    if isinstance(e, IntegrityError) else str(e)
                )
                results.errors.append(SalaryGenerationError(
                    employee_id=employee_id,
                    employee_code=employee_code,
                    message=f"Failed to create record for employee {employee_code}: {message}",
                ))

        logger.info(
            "Salary generation %s/%s: created=%d skipped=%d errors=%d",
            data.month, data.year, results.created, results.skipped, len(results.errors),
        )
        return results
