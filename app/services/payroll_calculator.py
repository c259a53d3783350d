"""
Payroll arithmetic for monthly salary records.

Pure functions only: no database access, no side effects. Amounts are
Decimal and rounded half-up to cents.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.config import settings
from app.core.exceptions import PayrollCalculationError
from app.models.salary import MAX_OVERTIME_HOURS, MAX_OVERTIME_RATE


CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value) -> Decimal:
    """Convert to Decimal and round half-up to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SalaryBreakdown:
    """Inputs and derived amounts of one salary computation."""
    base_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_amount: Decimal
    bonus: Decimal
    allowances: Decimal
    commission: Decimal
    social_security: Decimal
    tax: Decimal
    other_deductions: Decimal
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    def as_record_fields(self) -> dict:
        """Columns to set on a SalaryRecord."""
        return {
            "base_salary": self.base_salary,
            "overtime_hours": self.overtime_hours,
            "overtime_rate": self.overtime_rate,
            "overtime_amount": self.overtime_amount,
            "bonus": self.bonus,
            "allowances": self.allowances,
            "commission": self.commission,
            "social_security": self.social_security,
            "tax": self.tax,
            "other_deductions": self.other_deductions,
            "gross_salary": self.gross_salary,
            "net_salary": self.net_salary,
        }


def monthly_hours() -> int:
    return settings.PAYROLL_WORKING_DAYS_PER_MONTH * settings.PAYROLL_HOURS_PER_DAY


def calculate_hourly_rate(base_salary: Decimal) -> Decimal:
    """Hourly rate = base salary / (working days x hours per day), unrounded."""
    return Decimal(base_salary) / Decimal(monthly_hours())


def calculate_overtime(base_salary: Decimal, overtime_hours: Decimal, overtime_rate: Decimal) -> Decimal:
    """Overtime pay = hourly rate x overtime hours x overtime rate."""
    return to_money(calculate_hourly_rate(base_salary) * Decimal(overtime_hours) * Decimal(overtime_rate))


def calculate_social_security(base_salary: Decimal) -> Decimal:
    """Flat-rate social security contribution, capped per month."""
    contribution = Decimal(base_salary) * settings.PAYROLL_SOCIAL_SECURITY_RATE
    return to_money(min(contribution, settings.PAYROLL_SOCIAL_SECURITY_CAP))


def _require_non_negative(name: str, value: Decimal) -> None:
    if value < ZERO:
        raise PayrollCalculationError(f"{name} must be >= 0, got {value}", {"field": name})


def calculate_salary(
    base_salary,
    overtime_hours=ZERO,
    overtime_rate: Optional[Decimal] = None,
    bonus=ZERO,
    allowances=ZERO,
    commission=ZERO,
    social_security=ZERO,
    tax=ZERO,
    other_deductions=ZERO,
) -> SalaryBreakdown:
    """
    Compute overtime, gross and net salary from the raw inputs.

    gross = base + overtime + bonus + allowances + commission
    net   = gross - (social security + tax + other deductions)

    Raises:
        PayrollCalculationError: if an input is outside its allowed range
    """
    if overtime_rate is None:
        overtime_rate = settings.PAYROLL_DEFAULT_OVERTIME_RATE

    base_salary = to_money(base_salary)
    # Stored at two decimals; overtime is computed from the stored values
    overtime_hours = to_money(overtime_hours)
    overtime_rate = to_money(overtime_rate)
    bonus = to_money(bonus)
    allowances = to_money(allowances)
    commission = to_money(commission)
    social_security = to_money(social_security)
    tax = to_money(tax)
    other_deductions = to_money(other_deductions)

    for name, value in (
        ("base_salary", base_salary),
        ("overtime_hours", overtime_hours),
        ("bonus", bonus),
        ("allowances", allowances),
        ("commission", commission),
        ("social_security", social_security),
        ("tax", tax),
        ("other_deductions", other_deductions),
    ):
        _require_non_negative(name, value)

    if overtime_rate < Decimal("1"):
        raise PayrollCalculationError(
            f"overtime_rate must be >= 1, got {overtime_rate}", {"field": "overtime_rate"}
        )
    if overtime_rate > MAX_OVERTIME_RATE:
        raise PayrollCalculationError(
            f"overtime_rate must be <= {MAX_OVERTIME_RATE}, got {overtime_rate}", {"field": "overtime_rate"}
        )
    if overtime_hours > MAX_OVERTIME_HOURS:
        raise PayrollCalculationError(
            f"overtime_hours must be <= {MAX_OVERTIME_HOURS}, got {overtime_hours}", {"field": "overtime_hours"}
        )

    overtime_amount = calculate_overtime(base_salary, overtime_hours, overtime_rate)
    gross_salary = base_salary + overtime_amount + bonus + allowances + commission
    total_deductions = social_security + tax + other_deductions
    net_salary = gross_salary - total_deductions

    return SalaryBreakdown(
        base_salary=base_salary,
        overtime_hours=overtime_hours,
        overtime_rate=overtime_rate,
        overtime_amount=overtime_amount,
        bonus=bonus,
        allowances=allowances,
        commission=commission,
        social_security=social_security,
        tax=tax,
        other_deductions=other_deductions,
        gross_salary=gross_salary,
        total_deductions=total_deductions,
        net_salary=net_salary,
    )
