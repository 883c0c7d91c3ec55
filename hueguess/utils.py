"""
Utility functions for ID and room code generation
"""
import random
import uuid

from .game import choose_random_rgb, rgb_to_hex

ROOM_CODE_STYLES = ("hex", "numeric")


def generate_session_id() -> str:
    """Generate a process-unique session ID"""
    return "session_" + uuid.uuid4().hex


def generate_hex_room_code() -> str:
    """Room code taken from a random colour, e.g. "3FA2C0" """
    return rgb_to_hex(choose_random_rgb())[1:]


def generate_numeric_room_code(length: int = 6) -> str:
    """Zero padded decimal room code, e.g. "004213" """
    return str(random.randrange(10 ** length)).zfill(length)


def generate_room_code(style: str = "hex") -> str:
    if style == "numeric":
        return generate_numeric_room_code()
    if style == "hex":
        return generate_hex_room_code()
    raise ValueError(f"Unknown room code style: {style!r}")
