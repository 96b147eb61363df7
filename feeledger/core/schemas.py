"""Result shapes produced by the status and aggregation engines."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class StudentTotals(BaseModel):
    """Derived per-student totals. Overdue fees are included in total_outstanding."""

    total_outstanding: Decimal
    total_paid: Decimal
    pending_count: int
    overdue_count: int


class OrganizationStats(BaseModel):
    total_revenue: Decimal
    pending_dues: Decimal
    active_students: int
    transaction_count: int


class TransactionView(BaseModel):
    """Payment denormalized with the payer's display fields and the fee type."""

    id: UUID
    user_id: UUID
    fee_id: UUID
    student_name: str
    student_email: str
    fee_type: str
    amount: Decimal
    paid_at: datetime
    receipt_number: str
    transaction_id: str
    payment_method: str
    status: str


class ReceiptRecord(BaseModel):
    """Flat record handed to receipt rendering."""

    receipt_number: str
    student_name: str
    student_id: str
    email: str
    department: str
    semester: int
    fee_type: str
    academic_year: Optional[str] = None
    due_date: Optional[date] = None
    amount: Decimal
    payment_method: str
    transaction_id: str
    paid_at: datetime
    tuition_fee: Optional[Decimal] = None
    library_fee: Optional[Decimal] = None
    lab_fee: Optional[Decimal] = None
    other_charges: Optional[Decimal] = None
