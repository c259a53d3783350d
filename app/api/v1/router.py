from fastapi import APIRouter

from app.api.v1.endpoints import (
    # Access Control
    auth,
    # HR
    employees,
    benefits,
    # Payroll
    salary,
)


# Create main API router
api_router = APIRouter(prefix="/api/v1")

# ==================== Access Control ====================
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"]
)

# ==================== HR ====================
api_router.include_router(
    employees.router,
    prefix="/employees",
    tags=["Employees"]
)
api_router.include_router(
    benefits.router,
    prefix="/benefits",
    tags=["Benefits"]
)

# ==================== Payroll ====================
api_router.include_router(
    salary.router,
    prefix="/salary",
    tags=["Salary"]
)
