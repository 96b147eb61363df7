"""Payments router: pay a fee, payment history, receipt record."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.dependencies import get_current_user
from feeledger.auth.rbac import require_student
from feeledger.auth.schemas import CurrentUser
from feeledger.core.exceptions import ServiceError
from feeledger.core.schemas import ReceiptRecord, TransactionView
from feeledger.db.session import get_db

from .ledger_view import StudentLedgerView
from .schemas import PaymentCreate, PaymentSubmitResponse
from . import service

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


@router.post(
    "",
    response_model=PaymentSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_payment(
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> PaymentSubmitResponse:
    view = StudentLedgerView(db, current_user)
    try:
        outcome = await view.pay(payload.fee_id, payment_method=payload.payment_method)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PaymentSubmitResponse(**outcome.model_dump(), ledger=view.snapshot())


@router.get("", response_model=List[TransactionView])
async def list_payments(
    user_id: Optional[UUID] = Query(None, description="Admin only: restrict to one student"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    search: Optional[str] = Query(None, description="Matches student name, email, receipt number or fee type"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[TransactionView]:
    return await service.list_payments(db, current_user, user_id=user_id, limit=limit, search=search)


@router.get("/export")
async def export_payments(
    user_id: Optional[UUID] = Query(None, description="Admin only: restrict to one student"),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Download the visible transactions as an Excel workbook."""
    views = await service.list_payments(db, current_user, user_id=user_id, search=search)
    return Response(
        content=service.build_transactions_excel(views),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=transactions.xlsx"},
    )


@router.get("/{payment_id}/receipt", response_model=ReceiptRecord)
async def get_receipt(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ReceiptRecord:
    try:
        return await service.get_receipt(db, current_user, payment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
