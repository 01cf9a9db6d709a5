import pytest

from atlas import create_app, db
from atlas.models import GameState
from atlas.services.storage import PersistenceError
import conftest


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['nations'] == 8


def test_add_user(client):
    res = client.post('/api/adduser', json={'username': 'alice'})
    assert res.status_code == 201
    assert res.get_json()['message'] == "User 'alice' created successfully."
    res = client.post('/api/adduser', json={'username': 'alice'})
    assert res.status_code == 200
    assert 'already exists' in res.get_json()['message']


def test_add_user_requires_username(client):
    assert client.post('/api/adduser', json={}).status_code == 400
    assert client.post('/api/adduser', json={'username': '  '}).status_code == 400
    assert client.post('/api/adduser', json={'username': 'Guest'}).status_code == 400


def test_play_first_turn(client):
    res = client.post('/api/play', json={'nation': 'Spain'})
    assert res.status_code == 200
    data = res.get_json()
    assert data == {
        'userNation': 'Spain',
        'computerNation': 'Nigeria',
        'nextLetter': 'A',
        'message': 'Your turn! Name a nation starting with "A".',
        'gameOver': False,
    }
    state = client.get('/api/session').get_json()
    assert state == {'usedNations': ['Spain', 'Nigeria'], 'lastLetter': 'A'}


def test_play_repeated_nation_loses(client):
    client.post('/api/play', json={'nation': 'Spain'})
    res = client.post('/api/play', json={'nation': 'spain'})
    assert res.status_code == 400
    data = res.get_json()
    assert data['gameOver'] is True
    assert 'already been used' in data['error']
    assert client.get('/api/session').get_json()['usedNations'] == ['Spain', 'Nigeria']


def test_play_unknown_nation_loses(client):
    res = client.post('/api/play', json={'nation': 'Xyzabc'})
    assert res.status_code == 400
    assert res.get_json() == {'error': '"Xyzabc" is not a valid nation. You Lost!', 'gameOver': True}
    assert client.get('/api/session').get_json()['usedNations'] == []


def test_play_empty_and_wrong_letter(client):
    res = client.post('/api/play', json={'nation': '   '})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Nation name cannot be empty.'
    res = client.post('/api/play', json={})
    assert res.status_code == 400
    res = client.post('/api/play', json={'nation': 'Peru'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Must start with "S". You Lost!'
    res = client.post('/api/play', json={'nation': 12})
    assert res.status_code == 400


def test_play_player_wins(client):
    res = client.post('/api/play', json={'nation': 'Senegal'})
    assert res.status_code == 200
    data = res.get_json()
    assert data['gameOver'] is True
    assert data['computerNation'] is None
    assert data['nextLetter'] is None


def test_full_game_then_reset(client):
    assert client.post('/api/play', json={'nation': 'Sweden'}).get_json()['computerNation'] == 'Nigeria'
    data = client.post('/api/play', json={'nation': 'Angola'}).get_json()
    assert data['computerNation'] == 'Austria'
    assert data['nextLetter'] == 'A'

    res = client.post('/api/reset', json={})
    assert res.status_code == 200
    assert res.get_json()['lastLetter'] == 'S'
    assert client.get('/api/session').get_json() == {'usedNations': [], 'lastLetter': 'S'}
    assert client.post('/api/play', json={'nation': 'Spain'}).status_code == 200


def test_score_flow(client):
    client.post('/api/adduser', json={'username': 'alice'})
    assert client.post('/api/score', json={'username': 'alice', 'score': 50}).status_code == 200
    assert client.post('/api/score', json={'username': 'alice', 'score': 30}).get_json()['score'] == 50
    res = client.get('/api/score/alice')
    assert res.get_json() == {'username': 'alice', 'score': 50}


def test_score_validation(client):
    assert client.post('/api/score', json={'username': 'Guest', 'score': 5}).status_code == 400
    assert client.post('/api/score', json={'score': 5}).status_code == 400
    assert client.post('/api/score', json={'username': 'alice'}).status_code == 400
    assert client.post('/api/score', json={'username': 'ghost', 'score': 5}).status_code == 404
    client.post('/api/adduser', json={'username': 'alice'})
    assert client.post('/api/score', json={'username': 'alice', 'score': 2 ** 64}).status_code == 400
    assert client.post('/api/score', json={'username': 'alice', 'score': -3}).status_code == 400
    assert client.get('/api/score/alice').get_json()['score'] == 0


def test_unknown_player_score_defaults_to_zero(client):
    res = client.get('/api/score/nobody')
    assert res.status_code == 200
    assert res.get_json() == {'username': 'nobody', 'score': 0}


def test_leaderboard(client):
    for name, score in [('alice', 10), ('bob', 30), ('cara', 20)]:
        client.post('/api/adduser', json={'username': name})
        client.post('/api/score', json={'username': name, 'score': score})
    res = client.get('/api/scores')
    assert res.status_code == 200
    assert [row['username'] for row in res.get_json()] == ['bob', 'cara', 'alice']


def test_delete_user(client):
    client.post('/api/adduser', json={'username': 'alice'})
    res = client.post('/api/deleteuser', json={'username': 'alice'})
    assert res.status_code == 200
    assert res.get_json()['success'] is True
    assert client.post('/api/deleteuser', json={'username': 'alice'}).status_code == 404
    assert client.post('/api/deleteuser', json={'username': 'Guest'}).status_code == 400
    assert client.post('/api/deleteuser', json={}).status_code == 400


def test_hint(client):
    res = client.get('/api/hint/n')
    assert res.status_code == 200
    assert res.get_json() == {'letter': 'N', 'nation': 'Nigeria'}
    assert client.get('/api/hint/ab').status_code == 400
    assert client.get('/api/hint/z').status_code == 404
    client.post('/api/play', json={'nation': 'Spain'})
    assert client.get('/api/hint/n').status_code == 404


def test_reset_with_username_zeroes_that_score(client):
    for name in ('alice', 'bob'):
        client.post('/api/adduser', json={'username': name})
        client.post('/api/score', json={'username': name, 'score': 20})
    res = client.post('/api/reset', json={'username': 'alice'})
    assert res.status_code == 200
    assert client.get('/api/score/alice').get_json()['score'] == 0
    assert client.get('/api/score/bob').get_json()['score'] == 20


def test_reset_all_zeroes_scores_and_session(client):
    client.post('/api/adduser', json={'username': 'alice'})
    client.post('/api/score', json={'username': 'alice', 'score': 20})
    client.post('/api/play', json={'nation': 'Spain'})
    res = client.post('/api/reset-all')
    assert res.status_code == 200
    assert res.get_json()['lastLetter'] == 'S'
    assert client.get('/api/scores').get_json() == [{'username': 'alice', 'score': 0}]
    assert client.get('/api/session').get_json() == {'usedNations': [], 'lastLetter': 'S'}



@pytest.mark.parametrize('backend', ['sql', 'json'])
def test_state_survives_app_restart(tmp_path, nations_file, backend):
    config = type('Config', (conftest.TestConfig,), {
        'STORE_BACKEND': backend,
        'NATIONS_FILE': nations_file,
        'JSON_STORE_PATH': str(tmp_path / 'data.json'),
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///' + str(tmp_path / 'atlas.db'),
    })
    first = create_app(config)
    client = first.test_client()
    client.post('/api/adduser', json={'username': 'alice'})
    client.post('/api/score', json={'username': 'alice', 'score': 7})
    client.post('/api/play', json={'nation': 'Spain'})
    with first.app_context():
        db.session.remove()
        db.engine.dispose()

    second = create_app(config)
    client = second.test_client()
    assert client.get('/api/score/alice').get_json()['score'] == 7
    assert client.get('/api/session').get_json() == {'usedNations': ['Spain', 'Nigeria'], 'lastLetter': 'A'}
    assert client.post('/api/play', json={'nation': 'Spain'}).status_code == 400


def test_corrupt_json_session_stops_startup(tmp_path, nations_file):
    path = tmp_path / 'data.json'
    path.write_text('{"users": [], "usedNations": [1], "lastLetter": "S"}', encoding='utf-8')
    config = type('Config', (conftest.TestConfig,), {
        'STORE_BACKEND': 'json',
        'NATIONS_FILE': nations_file,
        'JSON_STORE_PATH': str(path),
    })
    with pytest.raises(PersistenceError):
        create_app(config)


@pytest.mark.parametrize('flask_app', ['sql'], indirect=True)
def test_corrupt_sql_session_is_a_server_error(client):
    db.session.add(GameState(id=1, used_nations='{broken', last_letter='S'))
    db.session.commit()
    assert client.get('/api/session').status_code == 500
    assert client.post('/api/play', json={'nation': 'Spain'}).status_code == 500


def test_failed_score_reset_leaves_game_untouched(flask_app, client, monkeypatch):
    client.post('/api/play', json={'nation': 'Spain'})
    ledger = flask_app.extensions['atlas'].ledger

    def fail(*args, **kwargs):
        raise PersistenceError('disk full')

    monkeypatch.setattr(ledger, 'reset_all', fail)
    monkeypatch.setattr(ledger, 'reset_score', fail)
    assert client.post('/api/reset-all').status_code == 500
    assert client.post('/api/reset', json={'username': 'alice'}).status_code == 500
    assert client.get('/api/session').get_json() == {'usedNations': ['Spain', 'Nigeria'], 'lastLetter': 'A'}
