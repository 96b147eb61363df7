"""Fees schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from feeledger.core.enums import EffectiveFeeStatus, FeeStatus

BREAKDOWN_MISMATCH_MESSAGE = "tuition_fee + library_fee + lab_fee + other_charges must equal amount"


class FeeCreate(BaseModel):
    user_id: UUID
    fee_type: str = Field("Semester Fee", min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    due_date: date
    academic_year: str = Field(..., min_length=1, max_length=20, description="e.g. 2025-26")
    semester: int = Field(..., ge=1)
    tuition_fee: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    library_fee: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    lab_fee: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    other_charges: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)

    @model_validator(mode="after")
    def validate_breakdown_total(self) -> "FeeCreate":
        if self.tuition_fee + self.library_fee + self.lab_fee + self.other_charges != self.amount:
            raise ValueError(BREAKDOWN_MISMATCH_MESSAGE)
        return self


class FeeResponse(BaseModel):
    id: UUID
    user_id: UUID
    fee_type: str
    amount: Decimal
    due_date: date
    status: FeeStatus
    effective_status: EffectiveFeeStatus
    academic_year: str
    semester: int
    tuition_fee: Decimal
    library_fee: Decimal
    lab_fee: Decimal
    other_charges: Decimal
    created_at: Optional[datetime] = None
