"""Student roster (admin) and profile self-service."""

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.schemas import CurrentUser
from feeledger.core.enums import ProfileRole
from feeledger.core.exceptions import ServiceError
from feeledger.core.models import Fee, Payment, Profile
from feeledger.core.status_engine import student_totals

from .schemas import ProfileResponse, ProfileUpdate, StudentCreate, StudentRosterItem

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "A user with this email already exists"


async def list_students(
    db: AsyncSession,
    search: Optional[str] = None,
    semester: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[StudentRosterItem]:
    """Student profiles with total_due (pending fees) and total_paid (completed payments)."""
    stmt = select(Profile).where(Profile.role == ProfileRole.STUDENT.value)
    if search and search.strip():
        term = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Profile.full_name.ilike(term),
                Profile.email.ilike(term),
                Profile.student_id.ilike(term),
            )
        )
    if semester is not None:
        stmt = stmt.where(Profile.semester == semester)
    stmt = stmt.order_by(Profile.full_name.asc())
    profiles = (await db.execute(stmt)).scalars().all()
    if not profiles:
        return []

    owner_ids = [p.user_id for p in profiles]
    fees_by_owner = defaultdict(list)
    for fee in (await db.execute(select(Fee).where(Fee.user_id.in_(owner_ids)))).scalars().all():
        fees_by_owner[fee.user_id].append(fee)
    payments_by_owner = defaultdict(list)
    for payment in (await db.execute(select(Payment).where(Payment.user_id.in_(owner_ids)))).scalars().all():
        payments_by_owner[payment.user_id].append(payment)

    now = now or datetime.now(timezone.utc)
    items = []
    for profile in profiles:
        totals = student_totals(fees_by_owner[profile.user_id], payments_by_owner[profile.user_id], now)
        items.append(
            StudentRosterItem(
                **ProfileResponse.model_validate(profile).model_dump(),
                total_due=totals.total_outstanding,
                total_paid=totals.total_paid,
            )
        )
    return items


async def create_student(db: AsyncSession, payload: StudentCreate) -> ProfileResponse:
    profile = Profile(
        user_id=payload.user_id or uuid.uuid4(),
        full_name=payload.full_name.strip(),
        email=payload.email.lower(),
        student_id=payload.student_id,
        department=payload.department,
        semester=payload.semester,
        phone=payload.phone,
        role=ProfileRole.STUDENT.value,
    )
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError(DUPLICATE_USER_MESSAGE, status.HTTP_409_CONFLICT) from e
    await db.refresh(profile)
    logger.info("Added student %s (%s)", profile.user_id, profile.email)
    return ProfileResponse.model_validate(profile)


async def _load_profile(db: AsyncSession, user_id: UUID) -> Profile:
    profile = (
        await db.execute(select(Profile).where(Profile.user_id == user_id))
    ).scalar_one_or_none()
    if not profile:
        raise ServiceError("Profile not found", status.HTTP_404_NOT_FOUND)
    return profile


async def get_profile(db: AsyncSession, current_user: CurrentUser) -> ProfileResponse:
    return ProfileResponse.model_validate(await _load_profile(db, current_user.id))


async def update_profile(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: ProfileUpdate,
) -> ProfileResponse:
    """Owner updates their own display fields. Role and email are not editable here."""
    profile = await _load_profile(db, current_user.id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "full_name" and value is None:
            continue
        setattr(profile, field, value.strip() if field == "full_name" else value)
    await db.commit()
    await db.refresh(profile)
    return ProfileResponse.model_validate(profile)
