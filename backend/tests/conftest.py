import json
import os
import sys
import pytest

# Ensure the backend root (containing the `atlas` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from atlas import create_app, db, socketio


# Small catalog where every computer reply is forced:
# Spain/Sweden -> Nigeria, Angola -> Austria, Senegal -> (no L nation) player wins
TEST_NATIONS = ['Spain', 'Sweden', 'Senegal', 'Nigeria', 'Angola', 'Austria', 'Japan', 'Peru']


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORE_BACKEND = 'sql'
    GUEST_USERNAME = 'Guest'
    STARTING_LETTER = 'S'
    RANDOM_SEED = 7


class FirstChoice:
    """Random source that always picks the first eligible nation."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture()
def nations_file(tmp_path):
    path = tmp_path / 'nations.json'
    path.write_text(json.dumps(TEST_NATIONS), encoding='utf-8')
    return str(path)


@pytest.fixture(params=['sql', 'json'])
def flask_app(request, tmp_path, nations_file):
    config = type('Config', (TestConfig,), {
        'STORE_BACKEND': request.param,
        'NATIONS_FILE': nations_file,
        'JSON_STORE_PATH': str(tmp_path / 'data.json'),
    })
    application = create_app(config)
    with application.app_context():
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
    except Exception:
        pass
