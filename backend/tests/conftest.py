import os
import sys
import random
from urllib.parse import urlsplit

import pytest

# Ensure the backend root (containing the `starcatcher` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from starcatcher import create_app, db, socketio
from starcatcher.client import ClientResult, LeaderboardClient, sort_entries
from starcatcher.game.scheduler import Scheduler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    LEADERBOARD_BROADCAST = 1


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import starcatcher.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


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
    except RuntimeError:
        pass


class _BridgeResponse:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code

    def json(self):
        data = self._response.get_json(silent=True)
        if data is None:
            raise ValueError('response body is not JSON')
        return data


class FlaskHttpBridge:
    """Session-like object that routes LeaderboardClient calls into the Flask test client."""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path, json))
        return _BridgeResponse(self.test_client.open(path, method=method, json=json))


@pytest.fixture()
def http_bridge(client):
    return FlaskHttpBridge(client)


@pytest.fixture()
def lb_client(http_bridge):
    return LeaderboardClient('http://leaderboard.test', session=http_bridge)


class FakeLeaderboardClient:
    """In-memory stand-in for LeaderboardClient used by engine tests."""

    def __init__(self, submit_ok=True):
        self.submit_ok = submit_ok
        self.entries = []
        self.submitted = []
        self.list_calls = 0

    def list(self):
        self.list_calls += 1
        return sort_entries(list(self.entries))

    def submit(self, name, score, level):
        self.submitted.append((name, score, level))
        if not self.submit_ok:
            return ClientResult(ok=False, error='connection refused')
        self.entries.append({'name': name, 'score': score, 'level': level})
        return ClientResult(ok=True, status=201)


@pytest.fixture()
def fake_client():
    return FakeLeaderboardClient()


@pytest.fixture()
def failing_client():
    return FakeLeaderboardClient(submit_ok=False)


@pytest.fixture()
def scheduler():
    return Scheduler()


@pytest.fixture()
def rng():
    return random.Random(1234)
