"""
In-memory room state: rooms, membership and the room registry
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Set

from .game import Game
from .utils import ROOM_CODE_STYLES, generate_room_code

logger = logging.getLogger("hueguess")


class Role(enum.Enum):
    UNASSIGNED = "unassigned"
    HOST = "host"
    GUESSER = "guesser"


@dataclass(eq=False)
class Room:
    code: str
    difficulty: str
    # Active game; None before the first start and after game over
    game: Optional[Game] = None
    members: Set = field(default_factory=set)

    @property
    def guesser_count(self) -> int:
        return sum(1 for m in self.members if m.role is Role.GUESSER)


def should_delete_room(role: Role, remaining_members: int) -> bool:
    """Whether a room must go away after a member with `role` left it"""
    return role is Role.HOST or remaining_members <= 0


class RoomRegistry:
    """
    Room code -> Room mapping for one server process.

    All access happens on the event loop thread, so no locking is needed.
    """

    def __init__(
        self,
        code_style: str = "hex",
        code_factory: Optional[Callable[[], str]] = None,
    ):
        if code_style not in ROOM_CODE_STYLES:
            raise ValueError(f"Unknown room code style: {code_style!r}")
        self.code_style = code_style
        self._code_factory = code_factory or (lambda: generate_room_code(code_style))
        self._rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code) -> bool:
        return code in self._rooms

    def _unused_code(self) -> str:
        code = self._code_factory()
        while code in self._rooms:
            logger.warning(f"Room code collision detected, regenerating: {code}")
            code = self._code_factory()
        return code

    def create(self, difficulty: str) -> Room:
        """Allocate an empty room under a fresh code"""
        room = Room(code=self._unused_code(), difficulty=difficulty)
        self._rooms[room.code] = room
        logger.info(f"🎨 Room created: {room.code} ({difficulty})")
        return room

    def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def delete(self, code: str) -> None:
        if self._rooms.pop(code, None) is not None:
            logger.info(f"🛑 Room closed: {code}")

    def is_live(self, room: Room) -> bool:
        """True while `room` is still the room registered under its code"""
        return self._rooms.get(room.code) is room
