"""Domain errors raised by the HR and payroll services.

Each error carries the HTTP status it maps to; the handler registered in
``app.main`` renders them as ``{"detail": message}``.
"""
from typing import Dict, Optional

from fastapi import status


class HRMError(Exception):
    """Base class for service-layer errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(HRMError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id):
        super().__init__(
            f"{entity} with ID {entity_id} not found",
            {"entity": entity, "id": str(entity_id)},
        )


class ConflictError(HRMError):
    """Uniqueness violation or a delete blocked by dependent rows."""
    status_code = status.HTTP_409_CONFLICT


class BadRequestError(HRMError):
    """Malformed input or an unknown foreign reference."""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateError(BadRequestError):
    """Status transition not allowed from the current status."""

    def __init__(self, message: str, current_status: str):
        super().__init__(message, {"current_status": current_status})
        self.current_status = current_status


class PayrollCalculationError(BadRequestError):
    """Payroll inputs outside their allowed ranges."""
    pass


class IdentityServiceUnavailableError(HRMError):
    """The food-ordering identity service could not be reached."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
