"""
Salary Record State Machine

All salary status changes go through this module.

    PENDING  -> APPROVED, PAID, CANCELLED
    APPROVED -> PAID, CANCELLED
    PAID      (terminal)
    CANCELLED (terminal)
"""

import logging
from typing import Optional, List, Dict
from datetime import datetime, timezone

from app.core.exceptions import InvalidStateError
from app.models.salary import SalaryStatus


logger = logging.getLogger(__name__)


# =============================================================================
# TRANSITION RULES
# =============================================================================

SALARY_TRANSITIONS: Dict[str, List[str]] = {
    SalaryStatus.PENDING.value: [
        SalaryStatus.APPROVED.value,
        SalaryStatus.PAID.value,
        SalaryStatus.CANCELLED.value,
    ],
    SalaryStatus.APPROVED.value: [
        SalaryStatus.PAID.value,
        SalaryStatus.CANCELLED.value,
    ],
    SalaryStatus.PAID.value: [],
    SalaryStatus.CANCELLED.value: [],
}

TERMINAL_STATUSES = (SalaryStatus.PAID.value, SalaryStatus.CANCELLED.value)


def can_transition(current_status: str, new_status: str) -> bool:
    """Check if a transition is allowed."""
    return new_status in SALARY_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(current_status: str) -> List[str]:
    return SALARY_TRANSITIONS.get(current_status, [])


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def can_approve(status: str) -> bool:
    return status == SalaryStatus.PENDING.value


def can_pay(status: str) -> bool:
    return status in (SalaryStatus.PENDING.value, SalaryStatus.APPROVED.value)


def can_cancel(status: str) -> bool:
    return not is_terminal(status)


def can_edit(status: str) -> bool:
    """Amounts may change only while the record is still open."""
    return not is_terminal(status)


# =============================================================================
# GUARDS
# =============================================================================

def ensure_editable(record) -> None:
    """
    Reject changes to the amounts of a PAID or CANCELLED record.

    Raises:
        InvalidStateError: if the record is in a terminal status
    """
    if not can_edit(record.status):
        raise InvalidStateError(
            f"Cannot modify a {record.status} salary record",
            current_status=record.status,
        )


# =============================================================================
# TRANSITION EXECUTORS
# =============================================================================

def approve(record) -> None:
    """PENDING -> APPROVED."""
    if not can_approve(record.status):
        raise InvalidStateError(
            f"Can only approve PENDING records. Current status: {record.status}",
            current_status=record.status,
        )
    _set_status(record, SalaryStatus.APPROVED.value)


def mark_paid(record, payment_method: Optional[str] = None, payment_ref: Optional[str] = None) -> None:
    """PENDING/APPROVED -> PAID, stamping the payment metadata."""
    if record.status == SalaryStatus.PAID.value:
        raise InvalidStateError("Record is already marked as paid", current_status=record.status)
    if record.status == SalaryStatus.CANCELLED.value:
        raise InvalidStateError("Cannot mark cancelled record as paid", current_status=record.status)

    _set_status(record, SalaryStatus.PAID.value)
    record.paid_at = datetime.now(timezone.utc)
    record.payment_method = payment_method
    record.payment_ref = payment_ref


def cancel(record) -> None:
    """PENDING/APPROVED -> CANCELLED."""
    if not can_cancel(record.status):
        raise InvalidStateError(
            f"Cannot cancel a {record.status} salary record",
            current_status=record.status,
        )
    _set_status(record, SalaryStatus.CANCELLED.value)


def _set_status(record, new_status: str) -> None:
    current_status = record.status
    if not can_transition(current_status, new_status):
        allowed = get_allowed_transitions(current_status)
        raise InvalidStateError(
            f"Cannot change salary record from '{current_status}' to '{new_status}'. "
            f"Allowed transitions: {', '.join(allowed) or 'none'}",
            current_status=current_status,
        )
    record.status = new_status
    logger.info("Salary record %s: %s -> %s", record.id, current_status, new_status)
