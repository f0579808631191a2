import os
import sys
import pytest

# Ensure the backend root (containing the `typo_royale` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from typo_royale import create_app, socketio
from typo_royale.services.sessions import RoomRegistry, SessionCoordinator


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    ROUND_ADVANCE_DELAY_SEC = 0
    TYPING_SENTENCES = ['alpha beta gamma', 'delta epsilon zeta']
    LOG_LEVEL = 'DEBUG'


class FakeScheduler:
    """Holds advance callbacks until a test fires them."""

    def __init__(self):
        self.tasks = {}
        self.cancelled = []

    def schedule(self, room_id, round_idx, callback):
        key = (room_id, round_idx)
        if key in self.tasks:
            return False
        self.tasks[key] = callback
        return True

    def cancel(self, room_id, round_idx=None):
        self.cancelled.append((room_id, round_idx))
        keys = [k for k in self.tasks if k[0] == room_id and (round_idx is None or k[1] == round_idx)]
        for k in keys:
            del self.tasks[k]
        return len(keys)

    def fire_all(self):
        callbacks = list(self.tasks.values())
        self.tasks.clear()
        for cb in callbacks:
            cb()


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload, room_id):
        self.events.append((event, room_id, payload))

    def names(self):
        return [e[0] for e in self.events]

    def last(self, name):
        for event, _room, payload in reversed(self.events):
            if event == name:
                return payload
        return None

    def clear(self):
        self.events.clear()


@pytest.fixture()
def coordinator():
    return SessionCoordinator(
        registry=RoomRegistry(),
        prompts=lambda: 'type this fast',
        scheduler=FakeScheduler(),
        publish=RecordingPublisher(),
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        application.extensions['typo_royale'].registry.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['typo_royale'].registry


@pytest.fixture()
def sio_factory(flask_app):
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
