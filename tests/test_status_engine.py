import itertools
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from feeledger.core.enums import EffectiveFeeStatus, FeeStatus, PaymentStatus
from feeledger.core.status_engine import due_instant, effective_status, is_overdue, student_totals

NOW = datetime(2026, 3, 15, 10, 30, tzinfo=timezone.utc)


def fee(status=FeeStatus.pending, due_date=date(2026, 4, 1), amount="45000", **breakdown):
    return SimpleNamespace(status=status.value, due_date=due_date, amount=Decimal(amount), **breakdown)


def payment(amount, status=PaymentStatus.completed):
    return SimpleNamespace(amount=Decimal(amount), status=status.value)


@pytest.mark.parametrize(
    "status,due_date,expected",
    [
        (FeeStatus.paid, date(2026, 1, 1), EffectiveFeeStatus.paid),
        (FeeStatus.paid, date(2027, 1, 1), EffectiveFeeStatus.paid),
        (FeeStatus.pending, date(2026, 3, 14), EffectiveFeeStatus.overdue),
        (FeeStatus.pending, date(2026, 3, 16), EffectiveFeeStatus.pending),
    ],
)
def test_effective_status_law(status, due_date, expected) -> None:
    assert effective_status(fee(status=status, due_date=due_date), NOW) == expected


def test_due_date_falls_due_at_midnight_utc() -> None:
    # Due today: the due instant (00:00 UTC) has already passed at 10:30.
    assert is_overdue(fee(due_date=NOW.date()), NOW) is True
    assert is_overdue(fee(due_date=NOW.date()), datetime(2026, 3, 15, 0, 0, tzinfo=timezone.utc)) is False
    assert due_instant(date(2026, 3, 15)) == datetime(2026, 3, 15, tzinfo=timezone.utc)


def test_naive_now_is_treated_as_utc() -> None:
    naive = NOW.replace(tzinfo=None)
    assert effective_status(fee(due_date=date(2026, 3, 14)), naive) == EffectiveFeeStatus.overdue


def test_student_totals() -> None:
    fees = [
        fee(due_date=date(2026, 1, 31), amount="45000"),
        fee(due_date=date(2026, 7, 31), amount="45000"),
        fee(status=FeeStatus.paid, due_date=date(2025, 7, 31), amount="40000"),
    ]
    payments = [payment("40000"), payment("1500.50")]

    totals = student_totals(fees, payments, NOW)

    assert totals.total_outstanding == Decimal("90000")
    assert totals.total_paid == Decimal("41500.50")
    assert totals.pending_count == 1
    assert totals.overdue_count == 1


def test_student_totals_permutation_invariant() -> None:
    fees = [
        fee(due_date=date(2026, 1, 31), amount="45000"),
        fee(due_date=date(2026, 7, 31), amount="12000.25"),
        fee(status=FeeStatus.paid, due_date=date(2025, 7, 31), amount="40000"),
    ]
    payments = [payment("40000"), payment("250.75"), payment("10")]
    expected = student_totals(fees, payments, NOW)

    for fee_order in itertools.permutations(fees):
        for payment_order in itertools.permutations(payments):
            assert student_totals(fee_order, payment_order, NOW) == expected


def test_student_totals_empty() -> None:
    totals = student_totals([], [], NOW)
    assert totals.total_outstanding == Decimal("0")
    assert totals.total_paid == Decimal("0")
    assert totals.pending_count == 0
    assert totals.overdue_count == 0


def test_fixture_breakdowns_sum_to_amount() -> None:
    fixtures = [
        fee(amount="45000", tuition_fee=Decimal("30000"), library_fee=Decimal("5000"),
            lab_fee=Decimal("5000"), other_charges=Decimal("5000")),
        fee(amount="12000.50", tuition_fee=Decimal("10000.50"), library_fee=Decimal("1000"),
            lab_fee=Decimal("0"), other_charges=Decimal("1000")),
    ]
    for f in fixtures:
        assert f.tuition_fee + f.library_fee + f.lab_fee + f.other_charges == f.amount


def test_overdue_is_derived_at_read_time() -> None:
    yesterday = (NOW - timedelta(days=1)).date()
    f = fee(due_date=yesterday)
    assert f.status == "pending"
    assert effective_status(f, NOW) == EffectiveFeeStatus.overdue
