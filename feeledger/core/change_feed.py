"""
In-process change notification feed for a single table.

Writers publish after their commit; subscribers receive every event in publish order.
Handlers are plain callables and must not block: async work is scheduled by the handler.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import UUID

from feeledger.core.enums import ChangeEventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: ChangeEventType
    record_id: Optional[UUID] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


ChangeHandler = Callable[[ChangeEvent], None]


class ChangeFeed:
    """subscribe(handler) -> unsubscribe(). A failing handler is logged and skipped."""

    def __init__(self, table: str) -> None:
        self.table = table
        self._handlers: List[ChangeHandler] = []

    def subscribe(self, handler: ChangeHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def publish(self, event_type: ChangeEventType, record_id: Optional[UUID] = None) -> ChangeEvent:
        event = ChangeEvent(table=self.table, event_type=event_type, record_id=record_id)
        logger.debug("%s %s on %s -> %d subscriber(s)", event_type.value, record_id, self.table, len(self._handlers))
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Change handler %r failed for %s event on %s", handler, event_type.value, self.table)
        return event


payments_feed = ChangeFeed("payments")
