import os
import sys
import threading
import pytest

# Ensure the backend root (containing the `mathtug` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from mathtug import create_app, socketio
from mathtug.services.games.scheduler import TimerHandle


class TestConfig:
    TESTING = True
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class ManualScheduler:
    """Scheduler with a hand-driven clock; timers fire only inside advance()."""

    def __init__(self):
        self.clock = 0.0
        self.lock = threading.RLock()
        self._timers = []
        self._seq = 0

    def now(self):
        return self.clock

    def call_later(self, delay_sec, callback, *args, label=''):
        handle = TimerHandle(label)
        self._seq += 1
        self._timers.append((self.clock + delay_sec, self._seq, handle, callback, args))
        return handle

    def pending(self):
        return [t[2] for t in self._timers if t[2].pending]

    def advance(self, seconds):
        target = self.clock + seconds
        while True:
            due = [t for t in self._timers if t[2].pending and t[0] <= target]
            if not due:
                break
            when, _, handle, callback, args = min(due, key=lambda t: (t[0], t[1]))
            self.clock = when
            handle.fired = True
            callback(*args)
        self.clock = target
        self._timers = [t for t in self._timers if t[2].pending]


class RecordingNotifier:
    """Captures outbound messages instead of sending them over Socket.IO."""

    def __init__(self):
        self.messages = []
        self.rooms = {}

    def room(self, room, event, payload=None):
        self.messages.append(('room', room, event, payload))

    def participant(self, participant_id, event, payload=None):
        self.messages.append(('participant', participant_id, event, payload))

    def join(self, participant_id, room):
        self.rooms.setdefault(room, set()).add(participant_id)

    def leave(self, participant_id, room):
        self.rooms.get(room, set()).discard(participant_id)

    def events(self, name, kind=None):
        return [m for m in self.messages if m[2] == name and (kind is None or m[0] == kind)]

    def payloads(self, name):
        return [m[3] for m in self.events(name)]

    def clear(self):
        self.messages.clear()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    application.extensions['mathtug'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
