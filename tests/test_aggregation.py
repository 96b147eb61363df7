import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from feeledger.core.aggregation import (
    build_receipt_record,
    field_or,
    index_by,
    join_transaction_view,
    lookup_field,
    organization_stats,
)
from feeledger.core.enums import FeeStatus, PaymentStatus, ProfileRole

PAID_AT = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)


def profile(role=ProfileRole.STUDENT, **fields):
    base = dict(user_id=uuid.uuid4(), full_name="Ravi Kumar", email="ravi@example.edu",
                student_id="CS-101", department="Computer Science", semester=3)
    base.update(fields)
    return SimpleNamespace(role=role.value, **base)


def fee(user_id, amount="45000", status=FeeStatus.pending, fee_type="Semester Fee"):
    return SimpleNamespace(
        id=uuid.uuid4(), user_id=user_id, amount=Decimal(amount), status=status.value,
        fee_type=fee_type, academic_year="2025-26", due_date=date(2026, 1, 31),
        tuition_fee=Decimal("30000"), library_fee=Decimal("5000"),
        lab_fee=Decimal("5000"), other_charges=Decimal("5000"),
    )


def payment(user_id, fee_id, amount="45000", transaction_id="TXN1760870400000ABC123"):
    return SimpleNamespace(
        id=uuid.uuid4(), user_id=user_id, fee_id=fee_id, amount=Decimal(amount),
        status=PaymentStatus.completed.value, payment_method="card",
        transaction_id=transaction_id, receipt_number="RCP1760870400000XYZ789", paid_at=PAID_AT,
    )


def test_field_or_treats_missing_and_empty_alike() -> None:
    record = SimpleNamespace(name="", email=None, semester=0)
    assert field_or(None, "name", "Unknown") == "Unknown"
    assert field_or(record, "name", "Unknown") == "Unknown"
    assert field_or(record, "email", "N/A") == "N/A"
    assert field_or(record, "missing", "x") == "x"
    # Only None and "" fall back.
    assert field_or(record, "semester", 1) == 0
    assert lookup_field({}, None, "name", "Unknown") == "Unknown"


def test_organization_stats() -> None:
    students = [profile(), profile()]
    admin = profile(role=ProfileRole.ADMIN)
    fees = [
        fee(students[0].user_id, status=FeeStatus.paid),
        fee(students[0].user_id, amount="45000"),
        fee(students[1].user_id, amount="12000.50"),
    ]
    payments = [payment(students[0].user_id, fees[0].id)]

    stats = organization_stats(payments, fees, students + [admin])

    assert stats.total_revenue == Decimal("45000")
    assert stats.pending_dues == Decimal("57000.50")
    assert stats.active_students == 2
    assert stats.transaction_count == 1


def test_organization_stats_one_more_payment_adds_exactly_its_amount() -> None:
    students = [profile(), profile()]
    fees = [fee(s.user_id) for s in students]
    payments = [payment(students[0].user_id, fees[0].id)]
    before = organization_stats(payments, fees, students)

    extra = payment(students[1].user_id, fees[1].id, amount="1234.56")
    after = organization_stats(payments + [extra], fees, students)

    assert after.total_revenue - before.total_revenue == Decimal("1234.56")
    assert after.active_students == before.active_students
    assert after.transaction_count == before.transaction_count + 1


def test_organization_stats_empty() -> None:
    stats = organization_stats([], [], [])
    assert stats.total_revenue == Decimal("0")
    assert stats.pending_dues == Decimal("0")
    assert stats.active_students == 0
    assert stats.transaction_count == 0


def test_join_transaction_view_resolves_references() -> None:
    student = profile()
    f = fee(student.user_id, fee_type="Exam Fee")
    p = payment(student.user_id, f.id)

    [view] = join_transaction_view([p], index_by([f], "id"), index_by([student], "user_id"))

    assert view.student_name == "Ravi Kumar"
    assert view.student_email == "ravi@example.edu"
    assert view.fee_type == "Exam Fee"
    assert view.amount == Decimal("45000")
    assert view.receipt_number == "RCP1760870400000XYZ789"


def test_join_transaction_view_fallbacks() -> None:
    orphan = payment(uuid.uuid4(), uuid.uuid4())
    blank = profile(full_name="", email=None)
    blank_fee = fee(blank.user_id, fee_type="")
    partial = payment(blank.user_id, blank_fee.id)

    views = join_transaction_view(
        [orphan, partial], index_by([blank_fee], "id"), index_by([blank], "user_id")
    )

    for view in views:
        assert view.student_name == "Unknown"
        assert view.student_email == "N/A"
        assert view.fee_type == "Fee"


def test_build_receipt_record() -> None:
    student = profile()
    f = fee(student.user_id)
    p = payment(student.user_id, f.id)

    record = build_receipt_record(p, f, student)

    assert record.student_name == "Ravi Kumar"
    assert record.student_id == "CS-101"
    assert record.department == "Computer Science"
    assert record.semester == 3
    assert record.fee_type == "Semester Fee"
    assert record.academic_year == "2025-26"
    assert record.transaction_id == "TXN1760870400000ABC123"
    assert record.tuition_fee == Decimal("30000")
    assert record.other_charges == Decimal("5000")


def test_build_receipt_record_fallbacks() -> None:
    p = payment(uuid.uuid4(), uuid.uuid4(), transaction_id="")

    record = build_receipt_record(p, None, None)

    assert record.student_name == "Student"
    assert record.student_id == "N/A"
    assert record.email == ""
    assert record.department == "N/A"
    assert record.semester == 1
    assert record.fee_type == "Fee"
    assert record.transaction_id == str(p.id)
    assert record.academic_year is None
    assert record.tuition_fee is None
    assert record.amount == Decimal("45000")
