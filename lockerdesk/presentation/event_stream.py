from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from lockerdesk.infrastructure.config import settings
from lockerdesk.infrastructure.notifications import NotificationHub, QueueSubscriber
from lockerdesk.presentation.dependencies import get_notification_hub

logger = logging.getLogger(__name__)

router = APIRouter()


async def _forward(websocket: WebSocket, subscriber: QueueSubscriber) -> None:
    while True:
        message = await subscriber.queue.get()
        await websocket.send_json(message)


async def _drain(websocket: WebSocket) -> None:
    # Incoming frames are ignored; receiving is how a disconnect is noticed
    while True:
        await websocket.receive_text()


@router.websocket("/ws/events")
async def events_websocket(websocket: WebSocket, hub: NotificationHub = Depends(get_notification_hub)) -> None:
    """
    Push every state change to the connected dashboard. No replay: a client
    only sees events published while it is connected.
    """
    await websocket.accept()
    client = f"{websocket.client.host}:{websocket.client.port}" if websocket.client else "ws"
    subscriber = QueueSubscriber(asyncio.get_running_loop(), maxsize=settings.event_queue_size, name=client)
    subscription = hub.subscribe(subscriber, name=client)
    logger.info("Event stream connected: %s", client)

    tasks = [
        asyncio.create_task(_forward(websocket, subscriber)),
        asyncio.create_task(_drain(websocket)),
    ]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            error = task.exception()
            if error is not None and not isinstance(error, WebSocketDisconnect):
                logger.warning("Event stream %s closed with error: %s", client, error)
    finally:
        for task in tasks:
            task.cancel()
        hub.unsubscribe(subscription)
        logger.info("Event stream disconnected: %s", client)
