"""Profile: one per registered person. Identity reference is user_id, issued by the auth service."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, UniqueConstraint, Uuid

from feeledger.core.enums import ProfileRole
from feeledger.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    """Display and student-specific fields for a user. Never deleted in normal operation."""

    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_profile_user_id"),
        UniqueConstraint("email", name="uq_profile_email"),
        CheckConstraint("role IN ('student','admin')", name="chk_profile_role"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    # Student-only fields
    student_id = Column(String(50), nullable=True)
    department = Column(String(100), nullable=True)
    semester = Column(Integer, nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default=ProfileRole.STUDENT.value)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
