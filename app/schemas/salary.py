"""Pydantic schemas for salary records and payroll generation."""
from datetime import datetime
from typing import Optional, List
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, Field

from app.schemas.base import (
    BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema, Money, PageMeta,
)
from app.models.salary import MAX_OVERTIME_HOURS, MAX_OVERTIME_RATE, SalaryStatus


# ==================== Salary Record Schemas ====================

class SalaryAmountsBase(BaseModel):
    """Pay components shared by create and update."""
    overtime_hours: Optional[Decimal] = Field(None, ge=0, le=MAX_OVERTIME_HOURS)
    overtime_rate: Optional[Decimal] = Field(
        None, ge=1, le=MAX_OVERTIME_RATE, description="Overtime multiplier, default 1.5"
    )
    bonus: Optional[Decimal] = Field(None, ge=0)
    allowances: Optional[Decimal] = Field(None, ge=0)
    commission: Optional[Decimal] = Field(None, ge=0)
    social_security: Optional[Decimal] = Field(None, ge=0)
    tax: Optional[Decimal] = Field(None, ge=0)
    other_deductions: Optional[Decimal] = Field(None, ge=0)
    deduction_notes: Optional[str] = None
    notes: Optional[str] = None


class SalaryRecordCreate(SalaryAmountsBase, BaseCreateSchema):
    """Schema for creating a single salary record."""
    employee_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2020)
    base_salary: Decimal = Field(..., ge=0)


class SalaryRecordUpdate(SalaryAmountsBase, BaseUpdateSchema):
    """Partial update; employee and period are fixed once created."""
    base_salary: Optional[Decimal] = Field(None, ge=0)


class SalaryGenerateRequest(BaseCreateSchema):
    """Generate records for a period (empty employee_ids = all active employees)."""
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2020)
    employee_ids: Optional[List[UUID]] = None


class SalaryEmployeeBrief(BaseResponseSchema):
    id: UUID
    employee_code: str
    first_name: str
    last_name: str


class SalaryRecordResponse(BaseResponseSchema):
    """Response schema for a salary record."""
    id: UUID
    employee_id: UUID
    month: int
    year: int

    base_salary: Money
    overtime_hours: Money
    overtime_rate: Money
    overtime_amount: Money
    bonus: Money
    allowances: Money
    commission: Money

    social_security: Money
    tax: Money
    other_deductions: Money
    total_deductions: Money
    deduction_notes: Optional[str] = None

    gross_salary: Money
    net_salary: Money

    status: SalaryStatus
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_ref: Optional[str] = None
    notes: Optional[str] = None

    employee: Optional[SalaryEmployeeBrief] = None

    created_at: datetime
    updated_at: datetime


class SalaryRecordListResponse(BaseModel):
    """Paginated salary records."""
    data: List[SalaryRecordResponse]
    meta: PageMeta


# ==================== Generation ====================

class SalaryGenerationError(BaseModel):
    employee_id: UUID
    employee_code: str
    message: str


class SalaryGenerateResponse(BaseModel):
    """Tally of a generation run."""
    created: int = 0
    skipped: int = 0
    errors: List[SalaryGenerationError] = []
    created_employee_ids: List[UUID] = []
    skipped_employee_ids: List[UUID] = []


# ==================== Summaries ====================

class SalaryMonthSummary(BaseModel):
    total_records: int
    total_gross_salary: Money
    total_net_salary: Money
    total_deductions: Money
    paid_count: int
    pending_count: int


class SalaryMonthResponse(BaseModel):
    """Records of one month with their totals."""
    data: List[SalaryRecordResponse]
    summary: SalaryMonthSummary


class SalaryStatusCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    paid: int = 0
    cancelled: int = 0


class SalarySummaryResponse(BaseModel):
    total_records: int
    total_gross_salary: Money
    total_net_salary: Money
    total_bonus: Money
    total_overtime: Money
    total_deductions: Money
    by_status: SalaryStatusCounts
