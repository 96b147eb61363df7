"""Payments schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from feeledger.api.v1.fees.schemas import FeeResponse
from feeledger.core.schemas import StudentTotals, TransactionView


class PaymentCreate(BaseModel):
    fee_id: UUID
    payment_method: Optional[str] = Field(None, min_length=1, max_length=30, description="card, upi, netbanking")

    @field_validator("payment_method", mode="before")
    @classmethod
    def blank_method_to_default(cls, v):
        # Blank means "use the configured default".
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class PaymentResponse(BaseModel):
    id: UUID
    user_id: UUID
    fee_id: UUID
    amount: Decimal
    payment_method: str
    transaction_id: str
    receipt_number: str
    status: str
    paid_at: datetime

    class Config:
        from_attributes = True


class PaymentOutcome(BaseModel):
    """Result of one settlement attempt.

    success is anchored to the payment being recorded. fee_status_updated is False when
    the payment exists but the fee could not be flagged paid; warning then says so.
    """

    success: bool
    message: str
    payment: PaymentResponse
    fee_status_updated: bool
    warning: Optional[str] = None


class StudentLedgerSnapshot(BaseModel):
    user_id: UUID
    as_of: datetime
    totals: StudentTotals
    fees: List[FeeResponse]
    payments: List[TransactionView]


class PaymentSubmitResponse(PaymentOutcome):
    ledger: StudentLedgerSnapshot
