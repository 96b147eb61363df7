"""
A student's local view of their fees and payments.

pay() runs the settlement, marks the fee paid locally as soon as both writes are
acknowledged, then re-fetches from the store. The re-fetched state replaces the local
state, so the store always has the last word.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.api.v1.fees import service as fees_service
from feeledger.api.v1.fees.schemas import FeeResponse
from feeledger.auth.schemas import CurrentUser
from feeledger.core.enums import EffectiveFeeStatus, FeeStatus
from feeledger.core.exceptions import ServiceError
from feeledger.core.schemas import TransactionView
from feeledger.core.status_engine import student_totals

from . import service as payments_service
from .schemas import PaymentOutcome, StudentLedgerSnapshot

logger = logging.getLogger(__name__)


class StudentLedgerView:
    def __init__(self, db: AsyncSession, current_user: CurrentUser, user_id: Optional[UUID] = None) -> None:
        self.db = db
        self.current_user = current_user
        self.user_id = user_id if (current_user.is_admin and user_id is not None) else current_user.id
        self.fees: List[FeeResponse] = []
        self.payments: List[TransactionView] = []

    @property
    def pending_fees(self) -> List[FeeResponse]:
        return [f for f in self.fees if f.status == FeeStatus.pending]

    async def refresh(self) -> None:
        fees = await fees_service.list_fees(self.db, self.current_user, user_id=self.user_id)
        payments = await payments_service.list_payments(self.db, self.current_user, user_id=self.user_id)
        self.fees = fees
        self.payments = payments

    def mark_paid(self, fee_id: UUID) -> bool:
        """Optimistic local update. False if the fee is not in the local view."""
        for i, fee in enumerate(self.fees):
            if fee.id == fee_id:
                self.fees[i] = fee.model_copy(
                    update={"status": FeeStatus.paid, "effective_status": EffectiveFeeStatus.paid}
                )
                return True
        return False

    async def pay(self, fee_id: UUID, payment_method: Optional[str] = None) -> PaymentOutcome:
        outcome = await payments_service.submit_payment(
            self.db, self.current_user, fee_id, payment_method=payment_method
        )
        if outcome.fee_status_updated:
            self.mark_paid(fee_id)
        try:
            await self.refresh()
        except (ServiceError, SQLAlchemyError):
            # The payment is recorded; keep the optimistic state until the next refresh.
            logger.warning("Re-fetch after payment %s failed; local view may be stale", outcome.payment.id, exc_info=True)
        return outcome

    def snapshot(self, now: Optional[datetime] = None) -> StudentLedgerSnapshot:
        now = now or datetime.now(timezone.utc)
        return StudentLedgerSnapshot(
            user_id=self.user_id,
            as_of=now,
            totals=student_totals(self.fees, self.payments, now),
            fees=self.fees,
            payments=self.payments,
        )
