"""API endpoints for salary records and monthly payroll generation."""
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.api.deps import DB, CurrentUser, require_admin
from app.models.salary import SalaryStatus
from app.schemas.base import PaginationParams
from app.schemas.salary import (
    SalaryRecordCreate,
    SalaryRecordUpdate,
    SalaryRecordResponse,
    SalaryRecordListResponse,
    SalaryGenerateRequest,
    SalaryGenerateResponse,
    SalaryMonthResponse,
    SalarySummaryResponse,
)
from app.services.salary_service import SalaryService


router = APIRouter()


# ==================== Queries ====================

@router.get("", response_model=SalaryRecordListResponse)
async def list_salary_records(
    db: DB,
    current_user: CurrentUser,
    employee_id: Optional[UUID] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2020),
    status: Optional[SalaryStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """List salary records, newest period first."""
    pagination = PaginationParams(page=page, limit=limit)
    records, total = await SalaryService(db).list_records(
        employee_id=employee_id,
        month=month,
        year=year,
        status=status,
        skip=pagination.offset,
        limit=pagination.limit,
    )
    return SalaryRecordListResponse(
        data=[SalaryRecordResponse.model_validate(r) for r in records],
        meta=pagination.meta(total),
    )


@router.get("/summary", response_model=SalarySummaryResponse)
async def get_salary_summary(
    db: DB,
    current_user: CurrentUser,
    year: Optional[int] = Query(None, ge=2020),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    """Payroll totals and status counts."""
    return await SalaryService(db).get_summary(year=year, month=month)


@router.get("/by-month/{year}/{month}", response_model=SalaryMonthResponse)
async def get_salary_by_month(
    year: Annotated[int, Path(ge=2020)],
    month: Annotated[int, Path(ge=1, le=12)],
    db: DB,
    current_user: CurrentUser,
):
    """All records of one period with totals."""
    records, summary = await SalaryService(db).list_by_month(year, month)
    return SalaryMonthResponse(
        data=[SalaryRecordResponse.model_validate(r) for r in records],
        summary=summary,
    )


@router.get("/{record_id}", response_model=SalaryRecordResponse)
async def get_salary_record(
    record_id: UUID,
    db: DB,
    current_user: CurrentUser,
):
    return await SalaryService(db).get_record(record_id)


# ==================== Mutations ====================

@router.post(
    "",
    response_model=SalaryRecordResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_salary_record(
    record_in: SalaryRecordCreate,
    db: DB,
):
    """Create a salary record for one employee and period."""
    return await SalaryService(db).create_record(record_in)


@router.post("/generate", response_model=SalaryGenerateResponse, dependencies=[Depends(require_admin)])
async def generate_salary_records(
    request: SalaryGenerateRequest,
    db: DB,
):
    """Create PENDING records for all active employees (or the listed ones) for a period."""
    return await SalaryService(db).generate(request)


@router.patch("/{record_id}", response_model=SalaryRecordResponse, dependencies=[Depends(require_admin)])
async def update_salary_record(
    record_id: UUID,
    record_in: SalaryRecordUpdate,
    db: DB,
):
    """Partial update; derived amounts are recomputed."""
    return await SalaryService(db).update_record(record_id, record_in)


@router.patch("/{record_id}/approve", response_model=SalaryRecordResponse, dependencies=[Depends(require_admin)])
async def approve_salary_record(
    record_id: UUID,
    db: DB,
):
    return await SalaryService(db).approve(record_id)


@router.patch("/{record_id}/pay", response_model=SalaryRecordResponse, dependencies=[Depends(require_admin)])
async def pay_salary_record(
    record_id: UUID,
    db: DB,
    payment_method: Optional[str] = Query(None, max_length=50),
    payment_ref: Optional[str] = Query(None, max_length=100),
):
    """Mark a record as paid."""
    return await SalaryService(db).mark_paid(record_id, payment_method, payment_ref)


@router.patch("/{record_id}/cancel", response_model=SalaryRecordResponse, dependencies=[Depends(require_admin)])
async def cancel_salary_record(
    record_id: UUID,
    db: DB,
):
    return await SalaryService(db).cancel(record_id)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_salary_record(
    record_id: UUID,
    db: DB,
):
    await SalaryService(db).delete_record(record_id)
