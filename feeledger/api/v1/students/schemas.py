"""Student roster and profile schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from feeledger.core.enums import ProfileRole


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class StudentCreate(BaseModel):
    # Identity issued by the auth service; generated when the student has not registered yet.
    user_id: Optional[UUID] = None
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    student_id: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)
    semester: Optional[int] = Field(1, ge=1)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("student_id", "department", "phone", mode="before")
    @classmethod
    def blank_optional_fields(cls, v):
        return _blank_to_none(v)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    student_id: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)
    semester: Optional[int] = Field(None, ge=1)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("student_id", "department", "phone", mode="before")
    @classmethod
    def blank_optional_fields(cls, v):
        return _blank_to_none(v)


class ProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    full_name: str
    email: str
    student_id: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[int] = None
    phone: Optional[str] = None
    role: ProfileRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentRosterItem(ProfileResponse):
    total_due: Decimal
    total_paid: Decimal
