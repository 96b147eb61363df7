"""
Aggregation engine: organization-wide statistics and presentation joins.

Every statistic is recomputed from the full collections on each call; nothing is
accumulated between calls. Joins never fail on a missing reference: absent records
and empty values resolve to fixed placeholders.
"""

from decimal import Decimal
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional

from feeledger.core.enums import FeeStatus, PaymentStatus, ProfileRole
from feeledger.core.schemas import OrganizationStats, ReceiptRecord, TransactionView
from feeledger.core.status_engine import to_decimal

UNKNOWN_STUDENT_NAME = "Unknown"
UNKNOWN_STUDENT_EMAIL = "N/A"
UNKNOWN_FEE_TYPE = "Fee"

RECEIPT_STUDENT_NAME = "Student"
RECEIPT_STUDENT_ID = "N/A"
RECEIPT_EMAIL = ""
RECEIPT_DEPARTMENT = "N/A"
RECEIPT_SEMESTER = 1


def field_or(record: Optional[Any], name: str, default: Any) -> Any:
    """Attribute of an optional record, or default when the record or value is missing."""
    if record is None:
        return default
    value = getattr(record, name, None)
    if value is None or value == "":
        return default
    return value


def lookup_field(mapping: Mapping[Hashable, Any], key: Optional[Hashable], name: str, default: Any) -> Any:
    return field_or(mapping.get(key) if key is not None else None, name, default)


def index_by(records: Iterable[Any], attr: str) -> Dict[Hashable, Any]:
    return {getattr(r, attr): r for r in records}


def organization_stats(payments: Iterable, fees: Iterable, profiles: Iterable) -> OrganizationStats:
    """
    transaction_count is the number of payment records passed in; any cap on that
    collection is applied by whoever fetched it.
    """
    payments = list(payments)
    total_revenue = sum(
        (to_decimal(p.amount) for p in payments if p.status == PaymentStatus.completed),
        Decimal("0"),
    )
    pending_dues = sum(
        (to_decimal(f.amount) for f in fees if f.status == FeeStatus.pending),
        Decimal("0"),
    )
    active_students = sum(1 for p in profiles if p.role == ProfileRole.STUDENT)
    return OrganizationStats(
        total_revenue=total_revenue,
        pending_dues=pending_dues,
        active_students=active_students,
        transaction_count=len(payments),
    )


def join_transaction_view(
    payments: Iterable,
    fees_by_id: Mapping[Hashable, Any],
    profiles_by_owner: Mapping[Hashable, Any],
) -> List[TransactionView]:
    return [
        TransactionView(
            id=p.id,
            user_id=p.user_id,
            fee_id=p.fee_id,
            student_name=lookup_field(profiles_by_owner, p.user_id, "full_name", UNKNOWN_STUDENT_NAME),
            student_email=lookup_field(profiles_by_owner, p.user_id, "email", UNKNOWN_STUDENT_EMAIL),
            fee_type=lookup_field(fees_by_id, p.fee_id, "fee_type", UNKNOWN_FEE_TYPE),
            amount=to_decimal(p.amount),
            paid_at=p.paid_at,
            receipt_number=p.receipt_number,
            transaction_id=p.transaction_id,
            payment_method=p.payment_method,
            status=p.status,
        )
        for p in payments
    ]


def build_receipt_record(payment, fee: Optional[Any], profile: Optional[Any]) -> ReceiptRecord:
    def _breakdown(name: str) -> Optional[Decimal]:
        value = field_or(fee, name, None)
        return None if value is None else to_decimal(value)

    return ReceiptRecord(
        receipt_number=payment.receipt_number,
        student_name=field_or(profile, "full_name", RECEIPT_STUDENT_NAME),
        student_id=field_or(profile, "student_id", RECEIPT_STUDENT_ID),
        email=field_or(profile, "email", RECEIPT_EMAIL),
        department=field_or(profile, "department", RECEIPT_DEPARTMENT),
        semester=field_or(profile, "semester", RECEIPT_SEMESTER),
        fee_type=field_or(fee, "fee_type", UNKNOWN_FEE_TYPE),
        academic_year=field_or(fee, "academic_year", None),
        due_date=field_or(fee, "due_date", None),
        amount=to_decimal(payment.amount),
        payment_method=payment.payment_method,
        transaction_id=field_or(payment, "transaction_id", str(payment.id)),
        paid_at=payment.paid_at,
        tuition_fee=_breakdown("tuition_fee"),
        library_fee=_breakdown("library_fee"),
        lab_fee=_breakdown("lab_fee"),
        other_charges=_breakdown("other_charges"),
    )
