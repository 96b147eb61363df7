"""Dashboard schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from feeledger.core.enums import ChangeEventType
from feeledger.core.schemas import OrganizationStats, TransactionView


class DashboardSnapshot(BaseModel):
    stats: OrganizationStats
    recent_transactions: List[TransactionView]
    generated_at: datetime
    # Set when the snapshot was produced in response to a payments change.
    event_type: Optional[ChangeEventType] = None
