# Models module
from app.models.hr import (
    Department,
    Position,
    Employee,
    EmployeeStatus,
    EmploymentType,
    Gender,
    Benefit,
    BenefitType,
    EmployeeBenefit,
)
from app.models.salary import SalaryRecord, SalaryStatus

__all__ = [
    # HR
    "Department",
    "Position",
    "Employee",
    "EmployeeStatus",
    "EmploymentType",
    "Gender",
    "Benefit",
    "BenefitType",
    "EmployeeBenefit",
    # Payroll
    "SalaryRecord",
    "SalaryStatus",
]
