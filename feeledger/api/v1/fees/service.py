"""Fees service: fee assignment and owner-scoped fee reads."""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.schemas import CurrentUser
from feeledger.core.enums import FeeStatus, ProfileRole
from feeledger.core.exceptions import ServiceError
from feeledger.core.models import Fee, Profile
from feeledger.core.status_engine import effective_status, to_decimal

from .schemas import FeeCreate, FeeResponse

logger = logging.getLogger(__name__)


def owner_scope(current_user: CurrentUser, user_id: Optional[UUID]) -> Optional[UUID]:
    """Students only ever see their own rows; admins see everyone unless they filter."""
    if not current_user.is_admin:
        return current_user.id
    return user_id


def fee_to_response(fee: Fee, now: datetime) -> FeeResponse:
    return FeeResponse(
        id=fee.id,
        user_id=fee.user_id,
        fee_type=fee.fee_type,
        amount=to_decimal(fee.amount),
        due_date=fee.due_date,
        status=fee.status,
        effective_status=effective_status(fee, now),
        academic_year=fee.academic_year,
        semester=fee.semester,
        tuition_fee=to_decimal(fee.tuition_fee),
        library_fee=to_decimal(fee.library_fee),
        lab_fee=to_decimal(fee.lab_fee),
        other_charges=to_decimal(fee.other_charges),
        created_at=fee.created_at,
    )


async def create_fee(db: AsyncSession, payload: FeeCreate) -> FeeResponse:
    student = (
        await db.execute(
            select(Profile).where(
                Profile.user_id == payload.user_id,
                Profile.role == ProfileRole.STUDENT.value,
            )
        )
    ).scalar_one_or_none()
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)

    fee = Fee(
        user_id=payload.user_id,
        fee_type=payload.fee_type.strip(),
        amount=payload.amount,
        due_date=payload.due_date,
        status=FeeStatus.pending.value,
        academic_year=payload.academic_year.strip(),
        semester=payload.semester,
        tuition_fee=payload.tuition_fee,
        library_fee=payload.library_fee,
        lab_fee=payload.lab_fee,
        other_charges=payload.other_charges,
    )
    db.add(fee)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError("Fee violates ledger constraints", status.HTTP_400_BAD_REQUEST) from e
    await db.refresh(fee)
    logger.info(
        "Assigned %s of %s to student %s (semester %s, %s)",
        fee.fee_type, fee.amount, fee.user_id, fee.semester, fee.academic_year,
    )
    return fee_to_response(fee, datetime.now(timezone.utc))


async def list_fees(
    db: AsyncSession,
    current_user: CurrentUser,
    user_id: Optional[UUID] = None,
    status_filter: Optional[FeeStatus] = None,
    now: Optional[datetime] = None,
) -> List[FeeResponse]:
    stmt = select(Fee)
    owner_id = owner_scope(current_user, user_id)
    if owner_id is not None:
        stmt = stmt.where(Fee.user_id == owner_id)
    if status_filter is not None:
        stmt = stmt.where(Fee.status == status_filter.value)
    stmt = stmt.order_by(Fee.due_date.asc(), Fee.semester.asc())
    result = await db.execute(stmt)
    now = now or datetime.now(timezone.utc)
    return [fee_to_response(fee, now) for fee in result.scalars().all()]
