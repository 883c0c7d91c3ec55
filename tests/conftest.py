import asyncio
import os
import sys

import pytest

# Ensure the repository root (containing main.py and `hueguess`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hueguess.session import Session
from hueguess.state import RoomRegistry
from main import create_app


class FakeTransport:
    """Stands in for a WebSocketResponse; records what was sent."""

    def __init__(self, fail=False):
        self.sent = []
        self.closed = False
        self.fail = fail

    async def send_json(self, message):
        if self.fail or self.closed:
            raise ConnectionResetError("Cannot write to closing transport")
        self.sent.append(message)

    async def close(self):
        self.closed = True

    def types(self):
        return [m['type'] for m in self.sent]

    def last(self):
        return self.sent[-1]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def make_session(registry):
    def _make(fail=False):
        return Session(FakeTransport(fail=fail), registry)
    return _make


@pytest.fixture()
def static_dir(tmp_path):
    (tmp_path / 'index.html').write_text('<h1>Hue Guess</h1>')
    return tmp_path


@pytest.fixture()
async def client(aiohttp_client, registry, static_dir):
    app = create_app(registry=registry, static_dir=static_dir)
    return await aiohttp_client(app)


class StalledTransport(FakeTransport):
    """A client whose write buffer never drains."""

    async def send_json(self, message):
        await asyncio.Event().wait()
