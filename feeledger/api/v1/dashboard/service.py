"""Dashboard service: organization statistics recomputed from the full collections."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.core.aggregation import index_by, join_transaction_view, organization_stats
from feeledger.core.config import settings
from feeledger.core.models import Fee, Payment, Profile

from .schemas import DashboardSnapshot


async def load_dashboard(db: AsyncSession, recent_limit: Optional[int] = None) -> DashboardSnapshot:
    """
    Statistics cover every payment on record. Only the recent transactions list is
    capped (recent_limit, defaulting to settings.recent_transactions_limit).
    """
    if recent_limit is None:
        recent_limit = settings.recent_transactions_limit

    payments = (
        await db.execute(select(Payment).order_by(Payment.paid_at.desc()))
    ).scalars().all()
    fees = (await db.execute(select(Fee))).scalars().all()
    profiles = (await db.execute(select(Profile))).scalars().all()

    stats = organization_stats(payments, fees, profiles)
    recent = join_transaction_view(
        payments[:recent_limit],
        index_by(fees, "id"),
        index_by(profiles, "user_id"),
    )
    return DashboardSnapshot(
        stats=stats,
        recent_transactions=recent,
        generated_at=datetime.now(timezone.utc),
    )
