"""
HTTP and WebSocket handlers for the multiplayer server
"""
import logging
from pathlib import Path

from aiohttp import web

from .session import Session
from .state import RoomRegistry

logger = logging.getLogger("hueguess")

REGISTRY = web.AppKey("registry", RoomRegistry)
STATIC_DIR = web.AppKey("static_dir", Path)

# ============================================================
# WEBSOCKET
# ============================================================

async def ws_multiplayer(request: web.Request) -> web.WebSocketResponse:
    """One multiplayer session per WebSocket connection"""
    ws = web.WebSocketResponse()
    await ws.prepare(request)

    session = Session(ws, request.app[REGISTRY])
    logger.info(f"📡 {session.id} connected")

    try:
        async for msg in ws:
            if msg.type == web.WSMsgType.TEXT:
                await session.handle(msg.data)
            elif msg.type == web.WSMsgType.ERROR:
                logger.debug(f"WebSocket error for {session.id}: {ws.exception()}")
    except Exception:
        logger.exception(f"Unexpected error in session {session.id}")
        await ws.close()
    finally:
        await session.close()
        logger.info(f"📡 {session.id} disconnected")

    return ws

# ============================================================
# HTTP
# ============================================================

async def index(request: web.Request) -> web.FileResponse:
    return web.FileResponse(request.app[STATIC_DIR] / "index.html")


async def health(request: web.Request) -> web.Response:
    return web.json_response({
        "status": "healthy",
        "rooms": len(request.app[REGISTRY]),
    })
