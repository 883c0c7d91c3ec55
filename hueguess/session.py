"""
Per-connection session state machine

A session starts Unbound, becomes Bound when it creates (host) or joins
(guesser) a room, and ends Closed. Every inbound message is parsed into a
typed message and dispatched to the handler for the session's current
state. Room mutations for a message happen before the first send, so no
other session can observe a half-applied change.
"""
import enum
import logging
from typing import Optional

from .game import Game, GuessOutcome
from .messages import (
    CreateMessage, GuessMessage, JoinMessage, ProtocolError, StartMessage,
    parse_message,
)
from .relay import broadcast, close_all, send_state
from .state import Role, Room, RoomRegistry, should_delete_room
from .utils import generate_session_id

logger = logging.getLogger("hueguess")

ALREADY_IN_GAME = "You are already in a game."
NOT_HOST = "You are not the host."
ALREADY_STARTED = "Game already started."
NOT_STARTED = "Game not started."
INVALID_GUESS = "Invalid guess."
HOST_LEFT = "The host left the game."
GUESTS_LEFT = "All guests left the game."


class SessionState(enum.Enum):
    UNBOUND = "unbound"
    BOUND = "bound"
    CLOSED = "closed"


class Session:
    def __init__(self, transport, registry: RoomRegistry, session_id: Optional[str] = None):
        self.id = session_id or generate_session_id()
        self.transport = transport
        self.registry = registry
        self.state = SessionState.UNBOUND
        self.role = Role.UNASSIGNED
        self.room: Optional[Room] = None
        self._handlers = {
            CreateMessage: self.on_create,
            JoinMessage: self.on_join,
            StartMessage: self.on_start,
            GuessMessage: self.on_guess,
        }

    def __repr__(self) -> str:
        code = self.room.code if self.room else None
        return f"<Session {self.id} {self.state.value} {self.role.value} room={code}>"

    @property
    def is_host(self) -> bool:
        return self.role is Role.HOST

    async def send(self, message: dict) -> None:
        await self.transport.send_json(message)

    async def send_error(self, message: str) -> None:
        await self.send({"type": "error", "message": message})

    def _bind(self, room: Room, role: Role) -> None:
        self.room = room
        self.role = role
        self.state = SessionState.BOUND
        room.members.add(self)

    async def handle(self, raw: str) -> None:
        """Feed one inbound text frame through the state machine"""
        if self.state is SessionState.CLOSED:
            return
        try:
            message = parse_message(raw)
        except ProtocolError as e:
            await self.send_error(e.message)
            return
        if message is None:
            logger.debug(f"Ignoring malformed frame from {self.id}")
            return
        await self._handlers[type(message)](message)

    # ---- Unbound -> Bound ----

    async def on_create(self, message: CreateMessage) -> None:
        if self.state is not SessionState.UNBOUND:
            await self.send_error(ALREADY_IN_GAME)
            return
        room = self.registry.create(message.difficulty)
        self._bind(room, Role.HOST)
        logger.info(f"👑 {self.id} hosts room {room.code}")
        await self.send({"type": "connect", "code": room.code})

    async def on_join(self, message: JoinMessage) -> None:
        if self.state is not SessionState.UNBOUND:
            await self.send_error(ALREADY_IN_GAME)
            return
        room = self.registry.get(message.room_code)
        if room is None:
            await self.send({"type": "notfound"})
            return
        self._bind(room, Role.GUESSER)
        logger.info(f"✅ {self.id} joined room {room.code} ({len(room.members)} members)")

        await self.send({"type": "connect", "code": room.code})
        await broadcast(room, {"type": "join"}, sender=self, include_sender=False)
        if room.game is not None:
            await send_state(room, only=self)

    # ---- Bound[host] ----

    async def on_start(self, message: StartMessage) -> None:
        room = self.room
        if not self.is_host or room is None:
            await self.send_error(NOT_HOST)
            return
        if room.game is not None:
            await self.send_error(ALREADY_STARTED)
            return
        room.game = Game(room.difficulty)
        logger.info(f"▶️ Game started in room {room.code}")
        await send_state(room)

    async def on_guess(self, message: GuessMessage) -> None:
        room = self.room
        if not self.is_host or room is None:
            await self.send_error(NOT_HOST)
            return
        game = room.game
        if game is None:
            await self.send_error(NOT_STARTED)
            return

        # A correct guess replaces the palette, so remember what was clicked
        palette = list(game.colors)
        answer = game.answer
        outcome = game.guess(message.index)
        if not outcome.valid:
            await self.send_error(INVALID_GUESS)
            return

        correct = outcome is GuessOutcome.CORRECT
        over = game.is_over()
        if over:
            room.game = None

        await broadcast(room, {
            "type": "guess",
            "correct": correct,
            "index": message.index,
            "color": list(palette[message.index]),
            "answer": None if correct else list(answer),
            "score": game.score,
            "lives": game.lives,
        })
        if correct:
            await send_state(room)
        if over:
            logger.info(f"💀 Game over in room {room.code} (score {game.score})")
            await broadcast(room, {"type": "gameover", "score": game.score})

    # ---- Bound -> Closed ----

    async def close(self) -> None:
        """Leave the room (if any) and tell whoever is left. Safe to call twice."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        room = self.room
        if room is None:
            return

        room.members.discard(self)
        # The host may already have torn the room down
        if not self.registry.is_live(room):
            return

        remaining = len(room.members)
        logger.info(f"👋 {self.id} ({self.role.value}) left room {room.code} ({remaining} remaining)")

        if should_delete_room(self.role, remaining):
            self.registry.delete(room.code)
            if remaining:
                await broadcast(room, {"type": "error", "message": HOST_LEFT})
                await close_all(room)
        elif self.role is Role.GUESSER and room.guesser_count == 0:
            await broadcast(room, {"type": "error", "message": GUESTS_LEFT})
        else:
            await broadcast(room, {"type": "leave"})
