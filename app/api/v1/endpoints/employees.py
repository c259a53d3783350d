"""API endpoints for the employee directory."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import DB, CurrentUser, require_admin
from app.models.hr import EmployeeStatus, EmploymentType
from app.schemas.base import PaginationParams
from app.schemas.hr import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeLinkUser,
    EmployeeResponse,
    EmployeeDetailResponse,
    EmployeeListResponse,
    EmployeeCodeResponse,
    EmployeeBenefitResponse,
)
from app.schemas.salary import SalaryRecordResponse
from app.services.employee_service import EmployeeService
from app.services.salary_service import SalaryService


router = APIRouter()


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    db: DB,
    current_user: CurrentUser,
    search: Optional[str] = None,
    department_id: Optional[UUID] = None,
    position_id: Optional[UUID] = None,
    status: Optional[EmployeeStatus] = None,
    employment_type: Optional[EmploymentType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """List employees with filters."""
    pagination = PaginationParams(page=page, limit=limit)
    employees, total = await EmployeeService(db).list_employees(
        search=search,
        department_id=department_id,
        position_id=position_id,
        status=status,
        employment_type=employment_type,
        skip=pagination.offset,
        limit=pagination.limit,
    )
    return EmployeeListResponse(
        data=[EmployeeResponse.model_validate(e) for e in employees],
        meta=pagination.meta(total),
    )


@router.get("/generate-code", response_model=EmployeeCodeResponse)
async def generate_employee_code(
    db: DB,
    current_user: CurrentUser,
):
    """Suggest the next free employee code."""
    code = await EmployeeService(db).generate_employee_code()
    return EmployeeCodeResponse(employee_code=code)


@router.get("/{employee_id}", response_model=EmployeeDetailResponse)
async def get_employee(
    employee_id: UUID,
    db: DB,
    current_user: CurrentUser,
):
    """Get employee with department, position and active benefits."""
    service = EmployeeService(db)
    employee = await service.get_employee(employee_id)
    benefits = await service.get_active_benefits(employee_id)

    return EmployeeDetailResponse(
        **EmployeeResponse.model_validate(employee).model_dump(),
        benefits=[EmployeeBenefitResponse.model_validate(b) for b in benefits],
    )


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_employee(
    emp_in: EmployeeCreate,
    db: DB,
):
    return await EmployeeService(db).create_employee(emp_in)


@router.patch("/{employee_id}", response_model=EmployeeResponse, dependencies=[Depends(require_admin)])
async def update_employee(
    employee_id: UUID,
    emp_in: EmployeeUpdate,
    db: DB,
):
    return await EmployeeService(db).update_employee(employee_id, emp_in)


@router.delete("/{employee_id}", response_model=EmployeeResponse, dependencies=[Depends(require_admin)])
async def remove_employee(
    employee_id: UUID,
    db: DB,
):
    """Terminate an employee. The record is kept."""
    return await EmployeeService(db).remove_employee(employee_id)


@router.post("/{employee_id}/link-user", response_model=EmployeeResponse, dependencies=[Depends(require_admin)])
async def link_user(
    employee_id: UUID,
    link_in: EmployeeLinkUser,
    db: DB,
):
    """Link the employee to a food-ordering user account."""
    return await EmployeeService(db).link_user(employee_id, link_in.food_ordering_user_id)


@router.post("/{employee_id}/unlink-user", response_model=EmployeeResponse, dependencies=[Depends(require_admin)])
async def unlink_user(
    employee_id: UUID,
    db: DB,
):
    return await EmployeeService(db).unlink_user(employee_id)


@router.get("/{employee_id}/salary-history", response_model=List[SalaryRecordResponse])
async def get_salary_history(
    employee_id: UUID,
    db: DB,
    current_user: CurrentUser,
):
    """All salary records of the employee, newest first."""
    await EmployeeService(db).get_employee(employee_id)
    return await SalaryService(db).list_for_employee(employee_id)


@router.get("/{employee_id}/benefits", response_model=List[EmployeeBenefitResponse])
async def get_employee_benefits(
    employee_id: UUID,
    db: DB,
    current_user: CurrentUser,
):
    return await EmployeeService(db).get_active_benefits(employee_id)
