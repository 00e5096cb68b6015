import os
import random
import sys
import pytest

# Ensure the backend root (containing the `cleaning_party` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from cleaning_party import create_app, db
from cleaning_party.services.games import GameEngine
from cleaning_party.store import MemorySessionStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_STORE = 'sql'
    SESSION_CONSISTENCY = 'last_write_wins'
    CAS_MAX_RETRIES = 3
    ROUND_DURATION_MS = 20 * 60 * 1000
    SILLY_TASK_COUNT = 4
    LOG_LEVEL = 'DEBUG'


class FakeClock:
    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import cleaning_party.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return MemorySessionStore()


@pytest.fixture()
def make_engine(store, clock):
    def factory(**options):
        options.setdefault('clock', clock)
        options.setdefault('rng', random.Random(7))
        return GameEngine(options.pop('store', store), **options)
    return factory


@pytest.fixture()
def engine(make_engine):
    return make_engine()
