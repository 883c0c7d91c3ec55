"""
Fan-out of messages to every session in a room

Sends to different members run concurrently, so a slow or stalled client
only delays its own delivery.
"""
import asyncio
import logging

from .state import Role, Room

logger = logging.getLogger("hueguess")

# Seconds a single send may wait on a client's write buffer
SEND_TIMEOUT = 5.0


async def _send(member, message: dict) -> None:
    try:
        await asyncio.wait_for(member.transport.send_json(message), SEND_TIMEOUT)
    except asyncio.TimeoutError:
        logger.debug(f"Timed out sending {message.get('type')} to {member.id}")
    except Exception as e:
        logger.debug(f"Failed to send {message.get('type')} to {member.id}: {e}")


async def _close(member) -> None:
    try:
        await asyncio.wait_for(member.transport.close(), SEND_TIMEOUT)
    except asyncio.TimeoutError:
        logger.debug(f"Timed out closing {member.id}")
    except Exception as e:
        logger.debug(f"Failed to close {member.id}: {e}")


async def broadcast(room: Room, message: dict, sender=None, include_sender: bool = True) -> None:
    """Send `message` to the room's members, optionally skipping `sender`"""
    await asyncio.gather(*(
        _send(member, message)
        for member in list(room.members)
        if include_sender or member is not sender
    ))


async def send_state(room: Room, only=None) -> None:
    """Send each member (or just `only`) the state view for its role"""
    game = room.game
    if game is None:
        return
    await asyncio.gather(*(
        _send(member, game.view(host=member.role is Role.HOST))
        for member in list(room.members)
        if only is None or member is only
    ))


async def close_all(room: Room) -> None:
    """Close every remaining member's transport"""
    await asyncio.gather(*(_close(member) for member in list(room.members)))
