import asyncio
from contextlib import suppress

from hueguess import relay
from hueguess.game import Game
from hueguess.relay import broadcast, close_all, send_state
from hueguess.state import Role, Room

from conftest import FakeTransport, StalledTransport


class Member:
    def __init__(self, id, role=Role.GUESSER, fail=False):
        self.id = id
        self.role = role
        self.transport = FakeTransport(fail=fail)


def make_room(*members):
    return Room(code='C0FFEE', difficulty='easy', members=set(members))


async def test_broadcast_includes_sender_by_default():
    a, b = Member('a'), Member('b')
    await broadcast(make_room(a, b), {'type': 'leave'}, sender=a)
    assert a.transport.sent == [{'type': 'leave'}]
    assert b.transport.sent == [{'type': 'leave'}]


async def test_broadcast_can_exclude_sender():
    a, b = Member('a'), Member('b')
    await broadcast(make_room(a, b), {'type': 'join'}, sender=a, include_sender=False)
    assert a.transport.sent == []
    assert b.transport.sent == [{'type': 'join'}]


async def test_failed_send_does_not_stop_others():
    broken = Member('broken', fail=True)
    fine = [Member(str(i)) for i in range(3)]
    await broadcast(make_room(broken, *fine), {'type': 'gameover', 'score': 4})
    for member in fine:
        assert member.transport.sent == [{'type': 'gameover', 'score': 4}]


async def test_send_state_per_role():
    host = Member('h', role=Role.HOST)
    guest = Member('g')
    room = make_room(host, guest)
    room.game = Game('easy')

    await send_state(room)

    assert host.transport.last()['colors'] is not None
    assert host.transport.last()['answer'] is None
    assert guest.transport.last()['answer'] == list(room.game.answer)
    assert guest.transport.last()['colors'] is None


async def test_send_state_to_one_member():
    host, guest = Member('h', role=Role.HOST), Member('g')
    room = make_room(host, guest)
    room.game = Game('easy')

    await send_state(room, only=guest)

    assert host.transport.sent == []
    assert guest.transport.types() == ['state']


async def test_send_state_without_game_is_noop():
    guest = Member('g')
    await send_state(make_room(guest))
    assert guest.transport.sent == []


def stalled(id, role=Role.GUESSER):
    member = Member(id, role=role)
    member.transport = StalledTransport()
    return member


async def test_stalled_member_does_not_delay_others(monkeypatch):
    monkeypatch.setattr(relay, 'SEND_TIMEOUT', 0.05)
    stuck = stalled('stuck')
    fine = [Member(str(i)) for i in range(3)]

    await asyncio.wait_for(broadcast(make_room(stuck, *fine), {'type': 'leave'}), 1)

    for member in fine:
        assert member.transport.sent == [{'type': 'leave'}]


async def test_others_receive_before_stalled_send_gives_up():
    stuck = stalled('stuck')
    guest = Member('g')
    task = asyncio.ensure_future(broadcast(make_room(stuck, guest), {'type': 'join'}))

    await asyncio.sleep(0.05)
    assert guest.transport.sent == [{'type': 'join'}]
    assert not task.done()
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task


async def test_close_all_closes_everyone():
    members = [Member(str(i)) for i in range(3)]
    await close_all(make_room(*members))
    assert all(m.transport.closed for m in members)
