"""WebSocket endpoint relaying planner change notifications."""

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from meal_planner.config import get_settings
from meal_planner.database import SessionLocal
from meal_planner.models.user import User
from meal_planner.services.auth import user_id_from_token
from meal_planner.services.realtime import RealtimeService, user_channel

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ws", tags=["websocket"])


@router.websocket("/planner")
async def websocket_planner_sync(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    """WebSocket endpoint for meal plan and grocery list change events.

    Authentication via token query parameter (WebSocket doesn't support headers).
    Subscribes to the user's Redis channel so other sessions can re-fetch.
    """
    if not get_settings().is_backend_configured:
        await websocket.close(code=4004, reason="Backend not configured")
        return

    user_id = user_id_from_token(token)
    if user_id is None:
        await websocket.close(code=4001, reason="Invalid token")
        return

    # Manual DB session for WebSocket (can't use Depends normally)
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.id == user_id).first()
    finally:
        db.close()
    if not user:
        await websocket.close(code=4001, reason="User not found")
        return

    realtime_service = RealtimeService()
    try:
        await websocket.accept()
        logger.info(f"WebSocket connected: user={user_id}")

        async def handle_messages() -> None:
            """Receive messages from Redis and forward to WebSocket."""
            async for message in realtime_service.subscribe(user_channel(user_id)):
                try:
                    await websocket.send_json(message)
                except WebSocketDisconnect:
                    break
                except Exception as e:
                    logger.error(f"Error sending WebSocket message: {e}")
                    break

        async def handle_ping() -> None:
            """Send periodic pings to keep connection alive."""
            while True:
                try:
                    await asyncio.sleep(30)
                    await websocket.send_json({"type": "ping"})
                except Exception:
                    break

        async def handle_client() -> None:
            """Handle incoming messages from client (pong responses)."""
            while True:
                try:
                    await websocket.receive_json()
                except Exception:
                    break

        # The connection is over as soon as any side stops; the Redis listener
        # never returns on its own after a client disconnect.
        tasks = {
            asyncio.create_task(handle_messages()),
            asyncio.create_task(handle_ping()),
            asyncio.create_task(handle_client()),
        }
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.info(f"WebSocket closed: user={user_id}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: user={user_id}")
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)
    finally:
        await realtime_service.cleanup()
