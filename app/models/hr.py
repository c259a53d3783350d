"""HR models for the restaurant staff directory.

Supports:
- Departments and positions (reference data)
- Employee records, optionally linked to a food-ordering user account
- Benefit types and per-employee benefit assignments
"""
import uuid
from datetime import datetime, date, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional, List
from decimal import Decimal

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Integer, Text, Numeric, Date
from sqlalchemy import UniqueConstraint, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.salary import SalaryRecord


# ==================== Enums ====================

class EmploymentType(str, Enum):
    """Type of employment."""
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERN = "INTERN"


class EmployeeStatus(str, Enum):
    """Employee status in organization."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class Gender(str, Enum):
    """Gender options."""
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class BenefitType(str, Enum):
    """Kinds of recurring monthly benefits."""
    HEALTH_INSURANCE = "HEALTH_INSURANCE"
    TRANSPORTATION = "TRANSPORTATION"
    MEAL_ALLOWANCE = "MEAL_ALLOWANCE"
    PHONE_ALLOWANCE = "PHONE_ALLOWANCE"
    HOUSING_ALLOWANCE = "HOUSING_ALLOWANCE"
    OTHER = "OTHER"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==================== Department ====================

class Department(Base):
    """
    Restaurant department (kitchen, service, cashier, ...).
    """
    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    code: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        comment="KITCHEN, SERVICE, CASHIER, etc."
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    # Relationships
    positions: Mapped[List["Position"]] = relationship("Position", back_populates="department")
    employees: Mapped[List["Employee"]] = relationship("Employee", back_populates="department")

    def __repr__(self) -> str:
        return f"<Department(code='{self.code}', name='{self.name}')>"


# ==================== Position ====================

class Position(Base):
    """
    Job position within a department, with a suggested base salary.
    """
    __tablename__ = "positions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    code: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer, default=1)
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)

    department_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    # Relationships
    department: Mapped[Optional["Department"]] = relationship("Department", back_populates="positions")
    employees: Mapped[List["Employee"]] = relationship("Employee", back_populates="position")

    def __repr__(self) -> str:
        return f"<Position(code='{self.code}', name='{self.name}')>"


# ==================== Employee ====================

class Employee(Base):
    """
    Employee record, optionally linked to a food-ordering user account.
    Employees are never hard-deleted; removal sets status to TERMINATED.
    """
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # Identification
    employee_code: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        comment="EMP001"
    )
    food_ordering_user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        unique=True,
        nullable=True,
        comment="User id in the food-ordering service"
    )

    # Personal Information
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    nickname: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        comment="MALE, FEMALE, OTHER"
    )
    national_id: Mapped[Optional[str]] = mapped_column(String(20), unique=True, nullable=True)

    # Employment Details
    department_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False
    )
    position_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("positions.id", ondelete="RESTRICT"),
        nullable=False
    )
    employment_type: Mapped[str] = mapped_column(
        String(50),
        default=EmploymentType.FULL_TIME.value,
        nullable=False,
        comment="FULL_TIME, PART_TIME, CONTRACT, INTERN"
    )
    status: Mapped[str] = mapped_column(
        String(50),
        default=EmployeeStatus.ACTIVE.value,
        nullable=False,
        index=True,
        comment="ACTIVE, INACTIVE, ON_LEAVE, TERMINATED"
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Bank Details
    bank_account: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    bank_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Emergency Contact
    emergency_contact_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    emergency_contact_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    # Relationships
    department: Mapped["Department"] = relationship("Department", back_populates="employees")
    position: Mapped["Position"] = relationship("Position", back_populates="employees")
    benefits: Mapped[List["EmployeeBenefit"]] = relationship(
        "EmployeeBenefit",
        back_populates="employee"
    )
    salary_records: Mapped[List["SalaryRecord"]] = relationship(
        "SalaryRecord",
        back_populates="employee"
    )

    __table_args__ = (
        CheckConstraint("base_salary >= 0", name="ck_employees_base_salary_non_negative"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Employee(code='{self.employee_code}')>"


# ==================== Benefits ====================

class Benefit(Base):
    """
    Benefit type offered to staff (health insurance, meal allowance, ...).
    """
    __tablename__ = "benefits"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    code: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(50),
        default=BenefitType.OTHER.value,
        nullable=False,
        comment="HEALTH_INSURANCE, TRANSPORTATION, MEAL_ALLOWANCE, PHONE_ALLOWANCE, HOUSING_ALLOWANCE, OTHER"
    )
    default_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    assignments: Mapped[List["EmployeeBenefit"]] = relationship(
        "EmployeeBenefit",
        back_populates="benefit"
    )

    def __repr__(self) -> str:
        return f"<Benefit(code='{self.code}')>"


class EmployeeBenefit(Base):
    """
    Monthly benefit assigned to one employee. Removal deactivates the row.
    """
    __tablename__ = "employee_benefits"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False
    )
    benefit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("benefits.id", ondelete="RESTRICT"),
        nullable=False
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="Monthly amount")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )

    # Relationships
    employee: Mapped["Employee"] = relationship("Employee", back_populates="benefits")
    benefit: Mapped["Benefit"] = relationship("Benefit", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("employee_id", "benefit_id", name="uq_employee_benefit"),
        CheckConstraint("amount >= 0", name="ck_employee_benefits_amount_non_negative"),
        Index("idx_employee_benefits_employee", "employee_id"),
    )

    def __repr__(self) -> str:
        return f"<EmployeeBenefit(employee='{self.employee_id}', benefit='{self.benefit_id}', amount={self.amount})>"
