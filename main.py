#!/usr/bin/env python3
"""
Hue Guess - multiplayer colour guessing server
WebSocket rooms + static frontend
"""
import logging
import os
from pathlib import Path
from typing import Optional

from aiohttp import web

from hueguess.api import REGISTRY, STATIC_DIR, health, index, ws_multiplayer
from hueguess.state import RoomRegistry

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("hueguess")

DEFAULT_STATIC_DIR = Path(os.getenv('HUEGUESS_STATIC_DIR', './frontend'))
ROOM_CODE_STYLE = os.getenv('ROOM_CODE_STYLE', 'hex')


def normalize_base_path(path: str) -> str:
    """'' -> '/', 'game' -> '/game/', '/game/' -> '/game/'"""
    path = path.strip().strip('/')
    return f"/{path}/" if path else "/"


BASE_PATH = normalize_base_path(os.getenv('BASE_PATH', '/'))


def create_app(
    registry: Optional[RoomRegistry] = None,
    base_path: str = BASE_PATH,
    static_dir: Path = DEFAULT_STATIC_DIR,
) -> web.Application:
    """Create and configure the aiohttp application"""
    base_path = normalize_base_path(base_path)
    app = web.Application()
    app[REGISTRY] = registry if registry is not None else RoomRegistry(code_style=ROOM_CODE_STYLE)
    app[STATIC_DIR] = static_dir

    app.router.add_get(base_path + "multiplayer", ws_multiplayer)
    app.router.add_get(base_path + "health", health)

    # Frontend files; the directory is optional so the API runs on its own
    if static_dir.is_dir():
        app.router.add_get(base_path, index)
        app.router.add_static(base_path, static_dir, name='static')
    else:
        logger.warning(f"Static dir {static_dir} not found, serving API only")

    logger.info(f"🎨 Hue Guess server ready • base path {base_path}")
    return app


def main():
    app = create_app()
    port = int(os.environ.get("PORT", 8000))
    host = os.environ.get("SERVER_HOST", "0.0.0.0")

    logger.info(f"🚀 Starting server on {host}:{port}")
    web.run_app(app, host=host, port=port)


if __name__ == "__main__":
    main()
