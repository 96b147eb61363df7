"""Factories shared by the test modules."""

import uuid
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from feeledger.auth.schemas import CurrentUser
from feeledger.auth.security import create_access_token
from feeledger.core.enums import FeeStatus, ProfileRole
from feeledger.core.models import Fee, Profile


async def make_profile(
    db: AsyncSession,
    role: ProfileRole = ProfileRole.STUDENT,
    full_name: str = "Asha Verma",
    email: Optional[str] = None,
    **fields,
) -> Profile:
    profile = Profile(
        user_id=uuid.uuid4(),
        full_name=full_name,
        email=email or f"{uuid.uuid4().hex[:10]}@example.edu",
        role=role.value,
        **fields,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def make_fee(
    db: AsyncSession,
    user_id: uuid.UUID,
    due_date: date,
    semester: int = 1,
    status: FeeStatus = FeeStatus.pending,
    tuition_fee: Decimal = Decimal("30000"),
    library_fee: Decimal = Decimal("5000"),
    lab_fee: Decimal = Decimal("5000"),
    other_charges: Decimal = Decimal("5000"),
    fee_type: str = "Semester Fee",
) -> Fee:
    fee = Fee(
        user_id=user_id,
        fee_type=fee_type,
        amount=tuition_fee + library_fee + lab_fee + other_charges,
        due_date=due_date,
        status=status.value,
        academic_year="2025-26",
        semester=semester,
        tuition_fee=tuition_fee,
        library_fee=library_fee,
        lab_fee=lab_fee,
        other_charges=other_charges,
    )
    db.add(fee)
    await db.commit()
    await db.refresh(fee)
    return fee


def as_current_user(profile: Profile) -> CurrentUser:
    return CurrentUser(id=profile.user_id, role=profile.role, email=profile.email)


def auth_headers(profile: Profile) -> Dict[str, str]:
    token = create_access_token(subject={"sub": str(profile.user_id), "role": profile.role})
    return {"Authorization": f"Bearer {token}"}


@contextmanager
def failing_statement(engine: AsyncEngine, prefix: str):
    """Make every statement starting with prefix fail as an unavailable store would."""

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith(prefix):
            raise OperationalError(statement, parameters, RuntimeError("store unavailable"))

    event.listen(engine.sync_engine, "before_cursor_execute", before_cursor_execute)
    try:
        yield
    finally:
        event.remove(engine.sync_engine, "before_cursor_execute", before_cursor_execute)
