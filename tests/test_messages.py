import json

import pytest

from hueguess.messages import (
    CreateMessage, GuessMessage, JoinMessage, MessageError, StartMessage,
    UnknownMessageType, parse_message,
)


def frame(**data):
    return json.dumps(data)


def test_parse_create():
    assert parse_message(frame(type='create', difficulty='hard')) == CreateMessage('hard')


def test_parse_join_upper_cases_code():
    assert parse_message(frame(type='join', roomCode='ab12cd')) == JoinMessage('AB12CD')


def test_parse_start():
    assert parse_message(frame(type='start')) == StartMessage()


def test_parse_guess():
    assert parse_message(frame(type='guess', index=3)) == GuessMessage(3)
    assert parse_message(frame(type='guess', index=2.0)) == GuessMessage(2)


@pytest.mark.parametrize('raw', [
    'not json',
    '[1, 2, 3]',
    '"create"',
    frame(difficulty='easy'),
    frame(type=5),
    frame(type=''),
    frame(type=None),
])
def test_malformed_frames_are_ignored(raw):
    assert parse_message(raw) is None


def test_unknown_type():
    with pytest.raises(UnknownMessageType) as exc:
        parse_message(frame(type='dance'))
    assert exc.value.message == 'Invalid message type.'


@pytest.mark.parametrize('data, message', [
    ({'type': 'create'}, 'No difficulty specified.'),
    ({'type': 'create', 'difficulty': 3}, 'No difficulty specified.'),
    ({'type': 'create', 'difficulty': 'nightmare'}, 'Invalid difficulty.'),
    ({'type': 'join'}, 'No game code specified.'),
    ({'type': 'join', 'roomCode': 123456}, 'No game code specified.'),
    ({'type': 'guess'}, 'No guess specified.'),
    ({'type': 'guess', 'index': '2'}, 'No guess specified.'),
    ({'type': 'guess', 'index': True}, 'No guess specified.'),
])
def test_missing_or_malformed_fields(data, message):
    with pytest.raises(MessageError) as exc:
        parse_message(json.dumps(data))
    assert exc.value.message == message


def test_deeply_nested_json_is_ignored():
    assert parse_message('[' * 100000 + ']' * 100000) is None
    assert parse_message('{"a":' * 100000 + '1' + '}' * 100000) is None
