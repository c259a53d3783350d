# Services module
from app.services.salary_service import SalaryService
from app.services.employee_service import EmployeeService
from app.services.benefit_service import BenefitService
from app.services.identity_service import (
    IdentityUser,
    IdentityProvider,
    HttpIdentityProvider,
    StubIdentityProvider,
    FallbackIdentityProvider,
    get_identity_provider,
)

__all__ = [
    "SalaryService",
    "EmployeeService",
    "BenefitService",
    # Identity
    "IdentityUser",
    "IdentityProvider",
    "HttpIdentityProvider",
    "StubIdentityProvider",
    "FallbackIdentityProvider",
    "get_identity_provider",
]
