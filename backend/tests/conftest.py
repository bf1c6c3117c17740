import os
import sys
import pytest

# Ensure the backend root (containing the `tictactoe` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tictactoe import create_app, socketio
from tictactoe.services.connections import Connection


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/ws'
    DEFAULT_VARIANT = 'classic'
    BOARD_SIZE = None
    WIN_LENGTH = None
    PLAYER_COUNT = None
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def dispatcher(flask_app):
    return flask_app.extensions['session_sync']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


class RecordingTransport:
    """Collects frames written to a fake connection."""

    def __init__(self, fail=False):
        self.frames = []
        self.fail = fail

    def __call__(self, frame):
        if self.fail:
            raise OSError('broken pipe')
        self.frames.append(frame)


@pytest.fixture()
def make_connection():
    counter = iter(range(1, 10_000))

    def _make(fail=False):
        transport = RecordingTransport(fail=fail)
        connection = Connection(id=f'conn-{next(counter)}', send_frame=transport)
        connection.transport = transport
        return connection

    return _make
