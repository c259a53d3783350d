"""Monthly salary records."""
import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from decimal import Decimal

from sqlalchemy import String, DateTime, ForeignKey, Integer, Text, Numeric
from sqlalchemy import UniqueConstraint, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.hr import utcnow

if TYPE_CHECKING:
    from app.models.hr import Employee

# Largest values the overtime_hours Numeric(8, 2) and overtime_rate Numeric(4, 2) columns hold
MAX_OVERTIME_HOURS = Decimal("999999.99")
MAX_OVERTIME_RATE = Decimal("99.99")


class SalaryStatus(str, Enum):
    """Salary record lifecycle status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class SalaryRecord(Base):
    """
    One employee's payroll computation for a month.
    Derived amounts (overtime, gross, net) are always recomputed by the service.
    """
    __tablename__ = "salary_records"

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

    # Period
    month: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-12")
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Earnings inputs
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=0, nullable=False)
    overtime_rate: Mapped[Decimal] = mapped_column(
        Numeric(4, 2),
        default=Decimal("1.5"),
        nullable=False,
        comment="Multiplier on the hourly rate"
    )
    bonus: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    allowances: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    commission: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)

    # Deductions
    social_security: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    deduction_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Derived
    overtime_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    gross_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        default=SalaryStatus.PENDING.value,
        nullable=False,
        index=True,
        comment="PENDING, APPROVED, PAID, CANCELLED"
    )

    # Payment Details
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_ref: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

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
    employee: Mapped["Employee"] = relationship("Employee", back_populates="salary_records")

    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_salary_records_employee_period"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_salary_records_month_range"),
        CheckConstraint("year >= 2020", name="ck_salary_records_year_min"),
        Index("idx_salary_records_period", "year", "month"),
    )

    @property
    def total_deductions(self) -> Decimal:
        return self.social_security + self.tax + self.other_deductions

    def __repr__(self) -> str:
        return f"<SalaryRecord(employee='{self.employee_id}', period={self.month}/{self.year}, status='{self.status}')>"
