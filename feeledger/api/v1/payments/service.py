"""Payments service: settlement of a fee, payment history, receipts."""

import asyncio
import io
import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import status
from openpyxl import Workbook
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.api.v1.fees.service import owner_scope
from feeledger.auth.schemas import CurrentUser
from feeledger.core.aggregation import build_receipt_record, index_by, join_transaction_view
from feeledger.core.change_feed import ChangeFeed, payments_feed
from feeledger.core.config import settings
from feeledger.core.enums import ChangeEventType, FeeStatus, PaymentStatus
from feeledger.core.exceptions import ServiceError, StoreUnavailableError
from feeledger.core.models import Fee, Payment, Profile
from feeledger.core.receipt_ids import generate_payment_identifiers
from feeledger.core.schemas import ReceiptRecord, TransactionView
from feeledger.core.status_engine import to_decimal

from .schemas import PaymentOutcome, PaymentResponse

logger = logging.getLogger(__name__)

PAYMENT_SUCCESS_MESSAGE = "Payment successful! Receipt generated."
FEE_NOT_FLAGGED_WARNING = (
    "Payment was recorded but the fee is still marked pending. "
    "Do not pay again; the fee will be reconciled by the accounts office."
)


async def submit_payment(
    db: AsyncSession,
    current_user: CurrentUser,
    fee_id: UUID,
    payment_method: Optional[str] = None,
    feed: ChangeFeed = payments_feed,
) -> PaymentOutcome:
    """
    Settle one of the requester's fees.

    Order: read fee, simulated processing delay, generate identifiers, insert payment
    (commit), mark fee paid (commit). The two commits are independent. A failed insert
    leaves nothing behind and raises StoreUnavailableError. A failed fee update after a
    successful insert is reported as success with fee_status_updated=False; the payment
    is never rolled back. The INSERT change event is published once the fee update has
    committed or failed, so a refresh it triggers sees the settled fee.

    Nothing here excludes a concurrent submission for the same fee: both may pass the
    pending check and both may insert a payment.
    """
    method = (payment_method or "").strip().lower() or settings.default_payment_method

    try:
        fee = (
            await db.execute(
                select(Fee).where(Fee.id == fee_id, Fee.user_id == current_user.id)
            )
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error("Could not load fee %s for payment: %s", fee_id, e)
        raise StoreUnavailableError() from e
    if not fee:
        raise ServiceError("Fee not found", status.HTTP_404_NOT_FOUND)
    if fee.status == FeeStatus.paid:
        raise ServiceError("Fee is already paid", status.HTTP_409_CONFLICT)

    amount = to_decimal(fee.amount)

    # Card processing is simulated and always succeeds.
    await asyncio.sleep(settings.payment_processing_delay_seconds)

    identifiers = generate_payment_identifiers()
    payment = Payment(
        user_id=current_user.id,
        fee_id=fee.id,
        amount=amount,
        payment_method=method,
        transaction_id=identifiers.transaction_id,
        receipt_number=identifiers.receipt_number,
        status=PaymentStatus.completed.value,
        paid_at=datetime.now(timezone.utc),
    )
    db.add(payment)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Payment insert failed for fee %s, nothing recorded: %s", fee_id, e)
        raise StoreUnavailableError() from e

    recorded = PaymentResponse.model_validate(payment)
    logger.info(
        "Recorded payment %s (%s, %s) of %s for fee %s",
        recorded.id, recorded.transaction_id, recorded.receipt_number, recorded.amount, fee_id,
    )

    try:
        fee.status = FeeStatus.paid.value
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "Payment %s recorded but fee %s is still pending; needs reconciliation: %s",
            recorded.id, fee_id, e,
        )
        feed.publish(ChangeEventType.INSERT, recorded.id)
        return PaymentOutcome(
            success=True,
            message=PAYMENT_SUCCESS_MESSAGE,
            payment=recorded,
            fee_status_updated=False,
            warning=FEE_NOT_FLAGGED_WARNING,
        )

    logger.info("Fee %s marked paid by payment %s", fee_id, recorded.id)
    feed.publish(ChangeEventType.INSERT, recorded.id)
    return PaymentOutcome(
        success=True,
        message=PAYMENT_SUCCESS_MESSAGE,
        payment=recorded,
        fee_status_updated=True,
    )


def _matches(view: TransactionView, term: str) -> bool:
    term = term.lower()
    return any(
        term in value.lower()
        for value in (view.student_name, view.student_email, view.receipt_number, view.fee_type)
    )


async def list_payments(
    db: AsyncSession,
    current_user: CurrentUser,
    user_id: Optional[UUID] = None,
    limit: Optional[int] = None,
    search: Optional[str] = None,
) -> List[TransactionView]:
    stmt = select(Payment)
    owner_id = owner_scope(current_user, user_id)
    if owner_id is not None:
        stmt = stmt.where(Payment.user_id == owner_id)
    stmt = stmt.order_by(Payment.paid_at.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    payments = (await db.execute(stmt)).scalars().all()
    if not payments:
        return []

    fee_ids = {p.fee_id for p in payments}
    owner_ids = {p.user_id for p in payments}
    fees = (await db.execute(select(Fee).where(Fee.id.in_(fee_ids)))).scalars().all()
    profiles = (await db.execute(select(Profile).where(Profile.user_id.in_(owner_ids)))).scalars().all()

    views = join_transaction_view(payments, index_by(fees, "id"), index_by(profiles, "user_id"))
    if search and search.strip():
        views = [v for v in views if _matches(v, search.strip())]
    return views


async def get_receipt(
    db: AsyncSession,
    current_user: CurrentUser,
    payment_id: UUID,
) -> ReceiptRecord:
    stmt = select(Payment).where(Payment.id == payment_id)
    owner_id = owner_scope(current_user, None)
    if owner_id is not None:
        stmt = stmt.where(Payment.user_id == owner_id)
    payment = (await db.execute(stmt)).scalar_one_or_none()
    if not payment:
        raise ServiceError("Payment not found", status.HTTP_404_NOT_FOUND)

    fee = await db.get(Fee, payment.fee_id)
    profile = (
        await db.execute(select(Profile).where(Profile.user_id == payment.user_id))
    ).scalar_one_or_none()
    return build_receipt_record(payment, fee, profile)


TRANSACTION_EXPORT_HEADERS = [
    "receipt_number",
    "transaction_id",
    "student_name",
    "student_email",
    "fee_type",
    "amount",
    "payment_method",
    "status",
    "paid_at (UTC)",
]


def _excel_datetime(value: datetime) -> datetime:
    # Excel cells cannot carry a timezone.
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def build_transactions_excel(views: List[TransactionView]) -> bytes:
    """Build Excel file with one row per transaction, newest first as given."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Transactions"
    ws.append(TRANSACTION_EXPORT_HEADERS)
    for v in views:
        ws.append([
            v.receipt_number,
            v.transaction_id,
            v.student_name,
            v.student_email,
            v.fee_type,
            v.amount,
            v.payment_method,
            v.status,
            _excel_datetime(v.paid_at),
        ])
    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()
