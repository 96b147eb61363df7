"""
Fee status engine.

Pure functions over fee and payment records (ORM rows or response schemas; anything
with the right attributes). Nothing here reads the clock: callers pass ``now``.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Iterable, Union

from feeledger.core.enums import EffectiveFeeStatus, FeeStatus, PaymentStatus
from feeledger.core.schemas import StudentTotals


def to_decimal(val) -> Decimal:
    if val is None:
        return Decimal("0")
    return val if isinstance(val, Decimal) else Decimal(str(val))


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def due_instant(due_date: Union[date, datetime]) -> datetime:
    """A date-only due date falls due at midnight UTC of that day."""
    if isinstance(due_date, datetime):
        return _as_utc(due_date)
    return datetime.combine(due_date, time.min, tzinfo=timezone.utc)


def is_overdue(fee, now: datetime) -> bool:
    return fee.status == FeeStatus.pending and due_instant(fee.due_date) < _as_utc(now)


def effective_status(fee, now: datetime) -> EffectiveFeeStatus:
    """paid if paid; overdue if pending and past due; pending otherwise."""
    if fee.status == FeeStatus.paid:
        return EffectiveFeeStatus.paid
    if is_overdue(fee, now):
        return EffectiveFeeStatus.overdue
    return EffectiveFeeStatus.pending


def student_totals(fees: Iterable, payments: Iterable, now: datetime) -> StudentTotals:
    total_outstanding = Decimal("0")
    pending_count = 0
    overdue_count = 0
    for fee in fees:
        if fee.status == FeeStatus.pending:
            total_outstanding += to_decimal(fee.amount)
        derived = effective_status(fee, now)
        if derived == EffectiveFeeStatus.pending:
            pending_count += 1
        elif derived == EffectiveFeeStatus.overdue:
            overdue_count += 1

    total_paid = sum(
        (to_decimal(p.amount) for p in payments if p.status == PaymentStatus.completed),
        Decimal("0"),
    )
    return StudentTotals(
        total_outstanding=total_outstanding,
        total_paid=total_paid,
        pending_count=pending_count,
        overdue_count=overdue_count,
    )
