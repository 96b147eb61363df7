"""Payment: one completed settlement of a fee. Immutable once written."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String, Uuid

from feeledger.core.enums import PaymentStatus
from feeledger.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Payment(Base):
    """
    Settlement of exactly one fee. amount is the fee amount read at submission time.
    No unique constraint on fee_id: concurrent submissions for
    one fee are not excluded by the store.
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("status IN ('completed')", name="chk_payment_status"),
        CheckConstraint("amount >= 0", name="chk_payment_amount_non_negative"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.user_id", ondelete="RESTRICT"), nullable=False, index=True)
    fee_id = Column(Uuid(as_uuid=True), ForeignKey("fees.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(30), nullable=False)
    transaction_id = Column(String(40), nullable=False)
    receipt_number = Column(String(40), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.completed.value)
    paid_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
