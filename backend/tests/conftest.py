import os
import random
import sys

import pytest

# Ensure the backend root (containing the `shadowsignal` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from shadowsignal.config import Config
from shadowsignal.game.service import GameSettings, SessionCoordinator
from shadowsignal.server import create_app


class RecordingTransport:
    """In-memory stand-in for the Socket.IO transport.

    ``sent`` keeps every delivery as (target, event, payload) where target is
    a sid for unicasts and ``room:<code>`` for room broadcasts.
    """

    def __init__(self):
        self.sent = []
        self.groups = {}

    def send_to(self, sid, event, payload):
        self.sent.append((sid, event, payload))

    def send_to_room(self, room_code, event, payload):
        self.sent.append((f'room:{room_code}', event, payload))

    def join(self, sid, room_code):
        self.groups.setdefault(room_code, set()).add(sid)

    def leave(self, sid, room_code):
        self.groups.get(room_code, set()).discard(sid)

    def events(self, target=None):
        return [e for t, e, _ in self.sent if target is None or t == target]

    def last(self, event, target=None):
        for t, e, payload in reversed(self.sent):
            if e == event and (target is None or t == target):
                return payload
        raise AssertionError(f'{event} was never sent')

    def clear(self):
        self.sent = []


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SOCKETIO_ASYNC_MODE = 'threading'
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def coordinator(transport):
    return SessionCoordinator(transport, settings=GameSettings(), rng=random.Random(1234))


@pytest.fixture()
def room_of_three(coordinator, transport):
    """Room hosted by 'a' with 'b' and 'c' seated, still in the lobby."""
    coordinator.create_room('a', 'Alice')
    code = transport.last('roomCreated')['roomCode']
    coordinator.join_room('b', code, 'Bob')
    coordinator.join_room('c', code, 'Cara')
    transport.clear()
    return coordinator.rooms.get(code)


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(app_and_socketio):
    flask_app, socketio = app_and_socketio
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
