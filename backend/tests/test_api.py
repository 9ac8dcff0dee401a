import pytest
from sqlalchemy.exc import OperationalError


def _post(client, name, score, level):
    return client.post('/api/leaderboard', json={'name': name, 'score': score, 'level': level})


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_empty_leaderboard(client):
    res = client.get('/api/leaderboard')
    assert res.status_code == 200
    assert res.get_json() == []


def test_post_creates_entry(client):
    res = _post(client, 'Ava_99', 50, 3)
    assert res.status_code == 201
    data = res.get_json()
    assert data['success'] is True
    entry = data['newEntry']
    assert entry['name'] == 'Ava_99'
    assert entry['score'] == 50
    assert entry['level'] == 3
    assert entry['date']


def test_list_sorted_by_score_then_level(client):
    _post(client, 'Low', 10, 5)
    _post(client, 'High', 90, 1)
    _post(client, 'MidLow', 40, 2)
    _post(client, 'MidHigh', 40, 4)
    names = [e['name'] for e in client.get('/api/leaderboard').get_json()]
    assert names == ['High', 'MidHigh', 'MidLow', 'Low']


def test_post_keeps_duplicate_names(client):
    _post(client, 'Ava_99', 20, 1)
    _post(client, 'Ava_99', 30, 2)
    entries = client.get('/api/leaderboard').get_json()
    assert [e['score'] for e in entries if e['name'] == 'Ava_99'] == [30, 20]


def test_post_rejects_short_name(client):
    res = _post(client, 'Al', 10, 1)
    assert res.status_code == 400
    assert 'at least 3 characters' in res.get_json()['error']
    assert client.get('/api/leaderboard').get_json() == []


def test_post_rejects_bad_score(client):
    assert _post(client, 'Ava_99', -5, 1).status_code == 400
    assert _post(client, 'Ava_99', 'lots', 1).status_code == 400
    assert client.post('/api/leaderboard', json={'name': 'Ava_99'}).status_code == 400
    assert _post(client, 'Ava_99', 10, 0).status_code == 400


@pytest.mark.parametrize('score', ['--5', '\u00b2', 10 ** 20, 2 ** 31])
def test_post_rejects_malformed_or_oversized_score(client, score):
    res = _post(client, 'Ava_99', score, 1)
    assert res.status_code == 400
    assert 'score' in res.get_json()['error']
    assert client.get('/api/leaderboard').get_json() == []


def test_post_rejects_oversized_level(client):
    res = _post(client, 'Ava_99', 10, 10 ** 20)
    assert res.status_code == 400
    assert 'level' in res.get_json()['error']


def test_put_updates_existing_entry(client):
    _post(client, 'Ava_99', 50, 3)
    res = client.put('/api/leaderboard/Ava_99', json={'score': 10, 'level': 1})
    assert res.status_code == 200
    updated = res.get_json()['updatedPlayer']
    assert updated['score'] == 10
    assert updated['level'] == 1

    rows = [e for e in client.get('/api/leaderboard').get_json() if e['name'] == 'Ava_99']
    assert len(rows) == 1
    assert rows[0]['score'] == 10


def test_put_rejects_oversized_score(client):
    res = client.put('/api/leaderboard/Nova', json={'score': 10 ** 20, 'level': 1})
    assert res.status_code == 400
    assert client.get('/api/leaderboard').get_json() == []


def test_put_creates_missing_entry(client):
    res = client.put('/api/leaderboard/Nova', json={'score': 70, 'level': 2})
    assert res.status_code == 200
    assert res.get_json()['success'] is True
    entries = client.get('/api/leaderboard').get_json()
    assert [(e['name'], e['score'], e['level']) for e in entries] == [('Nova', 70, 2)]


def test_delete_entry(client):
    _post(client, 'Ava_99', 50, 3)
    _post(client, 'Nova', 20, 1)
    res = client.delete('/api/leaderboard/Ava_99')
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is True
    assert data['message'] == 'Ava_99 deleted'
    assert data['deleted']['name'] == 'Ava_99'
    assert [e['name'] for e in client.get('/api/leaderboard').get_json()] == ['Nova']


def test_delete_missing_entry_is_404(client):
    _post(client, 'Nova', 20, 1)
    res = client.delete('/api/leaderboard/NoSuchPlayer')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Player not found'
    assert len(client.get('/api/leaderboard').get_json()) == 1


def test_clear_leaderboard(client):
    _post(client, 'Ava_99', 50, 3)
    _post(client, 'Nova', 20, 1)
    res = client.delete('/api/leaderboard')
    assert res.status_code == 200
    assert res.get_json() == {'success': True, 'message': 'Leaderboard cleared'}
    assert client.get('/api/leaderboard').get_json() == []


def test_store_failure_returns_500(client, monkeypatch):
    import starcatcher.api.leaderboard as routes

    def broken(*args, **kwargs):
        raise OperationalError('INSERT', {}, Exception('database is locked'))

    monkeypatch.setattr(routes, 'insert_entry', broken)
    res = _post(client, 'Ava_99', 50, 3)
    assert res.status_code == 500
    assert 'error' in res.get_json()


def test_db_reset_seeds_entries(flask_app, client):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['db-reset'])
    assert result.exit_code == 0
    assert 'reset and seeded' in result.output
    entries = client.get('/api/leaderboard').get_json()
    assert len(entries) == 3
    assert entries[0]['name'] == 'Nova'
