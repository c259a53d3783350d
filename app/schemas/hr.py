"""Pydantic schemas for employees and benefit assignments."""
from datetime import datetime, date
from typing import Optional, List
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, Field, EmailStr

from app.schemas.base import (
    BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema, Money, PageMeta,
)
from app.models.hr import EmploymentType, EmployeeStatus, Gender, BenefitType


# ==================== Reference Data ====================

class DepartmentBrief(BaseResponseSchema):
    id: UUID
    code: str
    name: str


class PositionBrief(BaseResponseSchema):
    id: UUID
    code: str
    name: str


class BenefitBrief(BaseResponseSchema):
    id: UUID
    code: str
    name: str
    type: BenefitType
    default_amount: Money


class EmployeeBrief(BaseResponseSchema):
    id: UUID
    employee_code: str
    first_name: str
    last_name: str


# ==================== Employee Schemas ====================

class EmployeeBase(BaseModel):
    """Base schema for Employee."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    nickname: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    national_id: Optional[str] = Field(None, max_length=20)

    # Employment
    department_id: UUID
    position_id: UUID
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    start_date: Optional[date] = None
    base_salary: Decimal = Field(..., ge=0)

    # Bank Details
    bank_account: Optional[str] = Field(None, max_length=30)
    bank_name: Optional[str] = Field(None, max_length=100)

    # Emergency Contact
    emergency_contact_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_phone: Optional[str] = Field(None, max_length=20)

    image_url: Optional[str] = Field(None, max_length=500)
    food_ordering_user_id: Optional[int] = Field(None, ge=1)


class EmployeeCreate(EmployeeBase, BaseCreateSchema):
    """Schema for creating Employee."""
    employee_code: str = Field(..., min_length=1, max_length=20)


class EmployeeUpdate(BaseUpdateSchema):
    """Schema for updating Employee."""
    employee_code: Optional[str] = Field(None, min_length=1, max_length=20)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    nickname: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    national_id: Optional[str] = Field(None, max_length=20)
    department_id: Optional[UUID] = None
    position_id: Optional[UUID] = None
    employment_type: Optional[EmploymentType] = None
    status: Optional[EmployeeStatus] = None
    start_date: Optional[date] = None
    base_salary: Optional[Decimal] = Field(None, ge=0)
    bank_account: Optional[str] = Field(None, max_length=30)
    bank_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_phone: Optional[str] = Field(None, max_length=20)
    image_url: Optional[str] = Field(None, max_length=500)


class EmployeeLinkUser(BaseModel):
    """Link an employee to a food-ordering user account."""
    food_ordering_user_id: int = Field(..., ge=1)


class EmployeeResponse(BaseResponseSchema):
    """Response schema for Employee."""
    id: UUID
    employee_code: str
    food_ordering_user_id: Optional[int] = None
    first_name: str
    last_name: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    national_id: Optional[str] = None
    department_id: UUID
    position_id: UUID
    department: Optional[DepartmentBrief] = None
    position: Optional[PositionBrief] = None
    employment_type: EmploymentType
    status: EmployeeStatus
    start_date: date
    end_date: Optional[date] = None
    base_salary: Money
    bank_account: Optional[str] = None
    bank_name: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EmployeeListResponse(BaseModel):
    """Paginated employees."""
    data: List[EmployeeResponse]
    meta: PageMeta


class EmployeeCodeResponse(BaseModel):
    employee_code: str


# ==================== Benefit Assignment Schemas ====================

class EmployeeBenefitAssign(BaseCreateSchema):
    """Assign a benefit to an employee."""
    employee_id: UUID
    benefit_id: UUID
    amount: Decimal = Field(..., ge=0, description="Monthly amount")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class EmployeeBenefitUpdate(BaseUpdateSchema):
    amount: Optional[Decimal] = Field(None, ge=0)
    end_date: Optional[date] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class EmployeeBenefitResponse(BaseResponseSchema):
    """Response schema for a benefit assignment."""
    id: UUID
    employee_id: UUID
    benefit_id: UUID
    amount: Money
    is_active: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None
    benefit: Optional[BenefitBrief] = None
    employee: Optional[EmployeeBrief] = None
    created_at: datetime
    updated_at: datetime


class EmployeeDetailResponse(EmployeeResponse):
    """Employee with active benefit assignments."""
    benefits: List[EmployeeBenefitResponse] = []


class EmployeeBenefitListResponse(BaseModel):
    """Paginated benefit assignments."""
    data: List[EmployeeBenefitResponse]
    meta: PageMeta
