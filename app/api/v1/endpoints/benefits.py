"""API endpoints for employee benefit assignments."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import DB, CurrentUser, require_admin
from app.schemas.base import PaginationParams
from app.schemas.hr import (
    EmployeeBenefitAssign,
    EmployeeBenefitUpdate,
    EmployeeBenefitResponse,
    EmployeeBenefitListResponse,
)
from app.services.benefit_service import BenefitService


router = APIRouter()


@router.get("/employee-benefits", response_model=EmployeeBenefitListResponse)
async def list_employee_benefits(
    db: DB,
    current_user: CurrentUser,
    employee_id: Optional[UUID] = None,
    benefit_id: Optional[UUID] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """List active benefit assignments."""
    pagination = PaginationParams(page=page, limit=limit)
    assignments, total = await BenefitService(db).list_assignments(
        employee_id=employee_id,
        benefit_id=benefit_id,
        skip=pagination.offset,
        limit=pagination.limit,
    )
    return EmployeeBenefitListResponse(
        data=[EmployeeBenefitResponse.model_validate(a) for a in assignments],
        meta=pagination.meta(total),
    )


@router.get("/employee-benefits/{assignment_id}", response_model=EmployeeBenefitResponse)
async def get_employee_benefit(
    assignment_id: UUID,
    db: DB,
    current_user: CurrentUser,
):
    return await BenefitService(db).get_assignment(assignment_id)


@router.post(
    "/assign",
    response_model=EmployeeBenefitResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def assign_benefit(
    assign_in: EmployeeBenefitAssign,
    db: DB,
):
    """Assign a benefit to an employee."""
    return await BenefitService(db).assign(assign_in)


@router.patch(
    "/employee-benefits/{assignment_id}",
    response_model=EmployeeBenefitResponse,
    dependencies=[Depends(require_admin)],
)
async def update_employee_benefit(
    assignment_id: UUID,
    update_in: EmployeeBenefitUpdate,
    db: DB,
):
    return await BenefitService(db).update_assignment(assignment_id, update_in)


@router.delete(
    "/employee-benefits/{assignment_id}",
    response_model=EmployeeBenefitResponse,
    dependencies=[Depends(require_admin)],
)
async def remove_employee_benefit(
    assignment_id: UUID,
    db: DB,
):
    """Deactivate a benefit assignment."""
    return await BenefitService(db).remove_assignment(assignment_id)
