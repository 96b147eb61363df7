"""
Live dashboard refresh driven by the payments change feed.

Each event schedules a full re-fetch and recompute. Refreshes may overlap; they are not
sequenced, so whichever finishes last sets ``latest``.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from feeledger.core.change_feed import ChangeEvent, ChangeFeed, payments_feed

from .schemas import DashboardSnapshot
from .service import load_dashboard

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[DashboardSnapshot], Awaitable[None]]


class DashboardRefresher:
    def __init__(
        self,
        session_factory: async_sessionmaker,
        on_update: Optional[SnapshotCallback] = None,
    ) -> None:
        self.session_factory = session_factory
        self.on_update = on_update
        self.latest: Optional[DashboardSnapshot] = None
        self.refresh_count = 0
        self._tasks: Set[asyncio.Task] = set()

    def start(self, feed: ChangeFeed = payments_feed) -> Callable[[], None]:
        """Register as the feed's handler. Returns the unsubscribe callable."""
        return feed.subscribe(self.handle_event)

    def handle_event(self, event: ChangeEvent) -> None:
        task = asyncio.get_running_loop().create_task(self._refresh_logged(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def refresh(self, event: Optional[ChangeEvent] = None) -> DashboardSnapshot:
        async with self.session_factory() as db:
            snapshot = await load_dashboard(db)
        if event is not None:
            snapshot = snapshot.model_copy(update={"event_type": event.event_type})
        self.latest = snapshot
        self.refresh_count += 1
        logger.debug(
            "Dashboard refreshed (#%d): revenue=%s pending=%s transactions=%d",
            self.refresh_count,
            snapshot.stats.total_revenue,
            snapshot.stats.pending_dues,
            snapshot.stats.transaction_count,
        )
        if self.on_update is not None:
            await self.on_update(snapshot)
        return snapshot

    async def _refresh_logged(self, event: ChangeEvent) -> None:
        try:
            await self.refresh(event)
        except SQLAlchemyError:
            logger.exception("Dashboard refresh after %s event failed", event.event_type.value)

    async def drain(self) -> None:
        """Wait until every scheduled refresh has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
