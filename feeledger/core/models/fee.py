"""Fee: one obligation for one student for one semester. Status moves pending -> paid only."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Uuid

from feeledger.core.enums import FeeStatus
from feeledger.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Fee(Base):
    """
    Fee obligation with a four-part breakdown.
    The breakdown is checked against amount at insert; it is not re-validated on read.
    Overdue is never stored here.
    """

    __tablename__ = "fees"
    __table_args__ = (
        CheckConstraint("status IN ('pending','paid')", name="chk_fee_status"),
        CheckConstraint(
            "amount >= 0 AND tuition_fee >= 0 AND library_fee >= 0 AND lab_fee >= 0 AND other_charges >= 0",
            name="chk_fee_non_negative",
        ),
        CheckConstraint(
            "tuition_fee + library_fee + lab_fee + other_charges = amount",
            name="chk_fee_breakdown_total",
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.user_id", ondelete="RESTRICT"), nullable=False, index=True)
    fee_type = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=FeeStatus.pending.value)  # pending, paid
    academic_year = Column(String(20), nullable=False)
    semester = Column(Integer, nullable=False)

    tuition_fee = Column(Numeric(12, 2), nullable=False, default=0)
    library_fee = Column(Numeric(12, 2), nullable=False, default=0)
    lab_fee = Column(Numeric(12, 2), nullable=False, default=0)
    other_charges = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
