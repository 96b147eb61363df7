"""Fees router: list, assign, per-student summary."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.api.v1.payments.ledger_view import StudentLedgerView
from feeledger.api.v1.payments.schemas import StudentLedgerSnapshot
from feeledger.auth.dependencies import get_current_user
from feeledger.auth.rbac import require_admin
from feeledger.auth.schemas import CurrentUser
from feeledger.core.enums import FeeStatus
from feeledger.core.exceptions import ServiceError
from feeledger.db.session import get_db

from .schemas import FeeCreate, FeeResponse
from . import service

router = APIRouter(prefix="/api/v1/fees", tags=["fees"])


@router.get("", response_model=List[FeeResponse])
async def list_fees(
    user_id: Optional[UUID] = Query(None, description="Admin only: restrict to one student"),
    fee_status: Optional[FeeStatus] = Query(None, alias="status", description="pending or paid"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[FeeResponse]:
    return await service.list_fees(db, current_user, user_id=user_id, status_filter=fee_status)


@router.post(
    "",
    response_model=FeeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_fee(
    payload: FeeCreate,
    db: AsyncSession = Depends(get_db),
) -> FeeResponse:
    try:
        return await service.create_fee(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/summary", response_model=StudentLedgerSnapshot)
async def get_fee_summary(
    user_id: Optional[UUID] = Query(None, description="Admin only: student to summarize"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> StudentLedgerSnapshot:
    if current_user.is_admin and user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="user_id is required for administrators",
        )
    view = StudentLedgerView(db, current_user, user_id=user_id)
    await view.refresh()
    return view.snapshot()
