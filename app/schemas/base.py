"""
Base Schema Classes for Pydantic Models

RULE: All response schemas that read from ORM models inherit from BaseResponseSchema.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer


# Money is Decimal internally and a JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class BaseResponseSchema(BaseModel):
    """
    Base class for response schemas built from ORM objects.

    Usage:
        class SalaryRecordResponse(BaseResponseSchema):
            id: UUID
            net_salary: Money
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            UUID: str,
            datetime: lambda v: v.isoformat() if v else None,
        },
        populate_by_name=True,
    )


class BaseCreateSchema(BaseModel):
    """Base class for create/input schemas."""
    model_config = ConfigDict(
        extra='ignore',
    )


class BaseUpdateSchema(BaseModel):
    """
    Base class for update/patch schemas.

    All fields are optional; services read them with ``model_dump(exclude_unset=True)``.
    """
    model_config = ConfigDict(
        extra='ignore',
    )


class PageMeta(BaseModel):
    """Pagination block returned next to ``data``."""
    total: int
    page: int
    limit: int
    total_pages: int


class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> PageMeta:
        total_pages = (total + self.limit - 1) // self.limit
        return PageMeta(total=total, page=self.page, limit=self.limit, total_pages=total_pages)
