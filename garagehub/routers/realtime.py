"""
Websocket stream of row changes for the authenticated garage.
"""
import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from garagehub.auth import garage_for_user, get_user_from_token
from garagehub.config import get_settings
from garagehub.database import AsyncSessionLocal
from garagehub.realtime import ChangeEvent, feed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/realtime")
async def realtime_changes(
    websocket: WebSocket,
    token: str = Query(...),
    table: Optional[List[str]] = Query(default=None),
):
    """
    Stream change events as JSON, optionally only for the given tables.

    A client that stops reading is disconnected once its buffer of pending
    changes is full.
    """
    async with AsyncSessionLocal() as db:
        user = await get_user_from_token(db, token)
        if user is None or not user.is_active:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        garage = await garage_for_user(db, user)

    tables = set(table or [])
    queue: asyncio.Queue = asyncio.Queue(maxsize=get_settings().realtime_queue_size)
    overflow = asyncio.Event()

    def enqueue(change: ChangeEvent):
        if tables and change.table not in tables:
            return
        try:
            queue.put_nowait(change.to_message())
        except asyncio.QueueFull:
            overflow.set()

    async def send_changes():
        while True:
            message = await queue.get()
            await websocket.send_json(message)

    async def receive_until_closed():
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Realtime client disconnected for garage %s", garage.id)

    subscription = feed.subscribe(enqueue, garage_id=garage.id)
    await websocket.accept()
    logger.info("Realtime client connected for garage %s", garage.id)

    sender = asyncio.create_task(send_changes())
    receiver = asyncio.create_task(receive_until_closed())
    overflowed = asyncio.create_task(overflow.wait())
    tasks = (sender, receiver, overflowed)
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        subscription.unsubscribe()
        for task in tasks:
            task.cancel()

    if receiver in done:
        return
    if overflowed in done:
        logger.warning("Realtime client for garage %s fell behind, closing", garage.id)
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return
    logger.error("Realtime stream for garage %s failed: %r", garage.id, sender.exception())
    await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
