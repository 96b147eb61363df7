"""Dashboard router: organization statistics and the live feed."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from feeledger.auth.dependencies import resolve_user_from_token
from feeledger.auth.rbac import require_admin
from feeledger.db.session import get_db, get_session_factory

from .live import DashboardRefresher
from .schemas import DashboardSnapshot
from . import service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardSnapshot,
    dependencies=[Depends(require_admin)],
)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
) -> DashboardSnapshot:
    return await service.load_dashboard(db)


@router.websocket("/live")
async def dashboard_live(
    websocket: WebSocket,
    token: str = Query(...),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> None:
    async with session_factory() as db:
        current_user = await resolve_user_from_token(db, token)
    if current_user is None or not current_user.is_admin:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    queue: "asyncio.Queue[DashboardSnapshot]" = asyncio.Queue()
    refresher = DashboardRefresher(session_factory, on_update=queue.put)
    unsubscribe = refresher.start()

    async def push_snapshots() -> None:
        while True:
            snapshot = await queue.get()
            await websocket.send_json(jsonable_encoder(snapshot))

    async def wait_for_disconnect() -> None:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    # Stop on whichever ends first: the client leaving or a failed send.
    pusher = asyncio.create_task(push_snapshots())
    watcher = asyncio.create_task(wait_for_disconnect())
    try:
        await refresher.refresh()
        done, _ = await asyncio.wait({pusher, watcher}, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                raise exc
        logger.debug("Live dashboard client %s disconnected", current_user.id)
    finally:
        for task in (pusher, watcher):
            task.cancel()
        await asyncio.gather(pusher, watcher, return_exceptions=True)
        unsubscribe()
        await refresher.close()
