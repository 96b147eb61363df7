from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.core.enums import FeeStatus
from feeledger.core.models import Fee
from feeledger.db.seed_fees import STANDARD_AMOUNT, seed_semester_fees

from helpers import make_profile


@pytest.mark.asyncio
async def test_seed_semester_fees(db_session: AsyncSession) -> None:
    student = await make_profile(db_session)

    created = await seed_semester_fees(
        db_session, student.user_id, "2025-26", [1, 2], [date(2025, 7, 31), date(2026, 1, 31)]
    )

    assert STANDARD_AMOUNT == Decimal("45000")
    assert [f.semester for f in created] == [1, 2]
    for fee in created:
        assert fee.status == FeeStatus.pending
        assert fee.tuition_fee + fee.library_fee + fee.lab_fee + fee.other_charges == fee.amount


@pytest.mark.asyncio
async def test_seed_skips_existing_semesters(db_session: AsyncSession) -> None:
    student = await make_profile(db_session)
    await seed_semester_fees(db_session, student.user_id, "2025-26", [1], [date(2025, 7, 31)])

    created = await seed_semester_fees(
        db_session, student.user_id, "2025-26", [1, 2], [date(2025, 7, 31), date(2026, 1, 31)]
    )

    assert [f.semester for f in created] == [2]
    result = await db_session.execute(select(Fee).where(Fee.user_id == student.user_id))
    assert len(result.scalars().all()) == 2


@pytest.mark.asyncio
async def test_seed_rejects_mismatched_arguments(db_session: AsyncSession) -> None:
    student = await make_profile(db_session)
    with pytest.raises(ValueError):
        await seed_semester_fees(db_session, student.user_id, "2025-26", [1, 2], [date(2025, 7, 31)])
