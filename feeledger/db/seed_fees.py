"""
Seed script to assign semester fees to a student.

This script:
1. Creates one pending "Semester Fee" per requested semester with the standard breakdown
2. Skips semesters that already have a fee for the student

Usage:
    python -m feeledger.db.seed_fees <user_id> 2025-26 --semesters 1,2 --due-dates 2025-07-31,2026-01-31
"""
import argparse
import asyncio
from datetime import date
from decimal import Decimal
from typing import Dict, List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# Import all models so foreign keys resolve
from feeledger.core.models import Fee, Payment, Profile  # noqa: F401
from feeledger.core.enums import FeeStatus
from feeledger.db.session import AsyncSessionLocal

SEMESTER_FEE_TYPE = "Semester Fee"

STANDARD_BREAKDOWN: Dict[str, Decimal] = {
    "tuition_fee": Decimal("30000.00"),
    "library_fee": Decimal("5000.00"),
    "lab_fee": Decimal("5000.00"),
    "other_charges": Decimal("5000.00"),
}
STANDARD_AMOUNT = sum(STANDARD_BREAKDOWN.values(), Decimal("0"))


async def seed_semester_fees(
    db: AsyncSession,
    user_id: UUID,
    academic_year: str,
    semesters: Sequence[int],
    due_dates: Sequence[date],
) -> List[Fee]:
    """Create the missing semester fees. Returns the fees created by this call."""
    if len(semesters) != len(due_dates):
        raise ValueError("semesters and due_dates must have the same length")

    result = await db.execute(
        select(Fee.semester).where(
            Fee.user_id == user_id,
            Fee.academic_year == academic_year,
            Fee.fee_type == SEMESTER_FEE_TYPE,
        )
    )
    existing = set(result.scalars().all())

    created: List[Fee] = []
    for semester, due_date in zip(semesters, due_dates):
        if semester in existing:
            continue
        fee = Fee(
            user_id=user_id,
            fee_type=SEMESTER_FEE_TYPE,
            amount=STANDARD_AMOUNT,
            due_date=due_date,
            status=FeeStatus.pending.value,
            academic_year=academic_year,
            semester=semester,
            **STANDARD_BREAKDOWN,
        )
        db.add(fee)
        created.append(fee)

    await db.commit()
    return created


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assign standard semester fees to a student.")
    parser.add_argument("user_id", type=UUID)
    parser.add_argument("academic_year")
    parser.add_argument("--semesters", default="1,2")
    parser.add_argument("--due-dates", required=True, help="Comma separated ISO dates, one per semester")
    return parser.parse_args(argv)


async def main(argv=None) -> None:
    """Main entry point for the seed script."""
    args = _parse_args(argv)
    semesters = [int(s) for s in args.semesters.split(",") if s.strip()]
    due_dates = [date.fromisoformat(d.strip()) for d in args.due_dates.split(",") if d.strip()]

    async with AsyncSessionLocal() as db:
        try:
            created = await seed_semester_fees(db, args.user_id, args.academic_year, semesters, due_dates)
        except Exception as e:
            print(f"Error seeding fees: {e}")
            await db.rollback()
            raise

    print("=" * 60)
    print("Fee Seeding Summary")
    print("=" * 60)
    print(f"Student: {args.user_id}")
    print(f"Fees created: {len(created)}")
    print(f"Semesters skipped: {len(semesters) - len(created)}")
    print(f"Amount per semester: {STANDARD_AMOUNT}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
