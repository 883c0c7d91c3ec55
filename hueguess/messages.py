"""
Inbound WebSocket messages

Frames are parsed into one small dataclass per message type before any
handler sees them.
"""
import json
from dataclasses import dataclass
from typing import Optional, Union

from .game import is_difficulty


class ProtocolError(Exception):
    """A frame that can be answered with an error message"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MessageError(ProtocolError):
    """Known message type with a missing or malformed field"""


class UnknownMessageType(ProtocolError):
    def __init__(self, type_: str):
        self.type = type_
        super().__init__("Invalid message type.")


@dataclass(frozen=True)
class CreateMessage:
    difficulty: str


@dataclass(frozen=True)
class JoinMessage:
    room_code: str


@dataclass(frozen=True)
class StartMessage:
    pass


@dataclass(frozen=True)
class GuessMessage:
    index: Union[int, float]


Message = Union[CreateMessage, JoinMessage, StartMessage, GuessMessage]


def _parse_create(data: dict) -> CreateMessage:
    difficulty = data.get("difficulty")
    if not difficulty or not isinstance(difficulty, str):
        raise MessageError("No difficulty specified.")
    if not is_difficulty(difficulty):
        raise MessageError("Invalid difficulty.")
    return CreateMessage(difficulty)


def _parse_join(data: dict) -> JoinMessage:
    code = data.get("roomCode")
    if not code or not isinstance(code, str):
        raise MessageError("No game code specified.")
    return JoinMessage(code.strip().upper())


def _parse_start(data: dict) -> StartMessage:
    return StartMessage()


def _parse_guess(data: dict) -> GuessMessage:
    index = data.get("index")
    if isinstance(index, float) and index.is_integer():
        index = int(index)
    if isinstance(index, bool) or not isinstance(index, (int, float)):
        raise MessageError("No guess specified.")
    # Non-integral numbers still reach the game, which rejects them as an invalid guess
    return GuessMessage(index)


_PARSERS = {
    "create": _parse_create,
    "join": _parse_join,
    "start": _parse_start,
    "guess": _parse_guess,
}


def parse_message(raw: str) -> Optional[Message]:
    """
    Parse one text frame

    Returns:
        The typed message, or None when the frame should be ignored
        (not JSON, not an object, or no string `type`).

    Raises:
        UnknownMessageType: `type` is a string we don't handle
        MessageError: a required field is missing or malformed
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    type_ = data.get("type")
    if not type_ or not isinstance(type_, str):
        return None

    parser = _PARSERS.get(type_)
    if parser is None:
        raise UnknownMessageType(type_)
    return parser(data)
