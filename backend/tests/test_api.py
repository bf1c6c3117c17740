def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_hello(client):
    res = client.get('/api/hello')
    assert res.status_code == 200
    assert res.get_json()['message'].startswith('Hello')


def test_create_session(client):
    res = client.post('/api/sessions/create')
    assert res.status_code == 201
    data = res.get_json()
    assert data['id'] == 1
    assert data['variant'] == 'classic'
    assert data['board'] == [None] * 9
    assert data['active'] is True
    assert data['scores'] == [0, 0, 0, 0]


def test_create_session_with_variant(client):
    res = client.post('/api/sessions/create', json={'variant': 'grand'})
    assert res.status_code == 201
    data = res.get_json()
    assert data['boardSize'] == 5
    assert len(data['board']) == 25
    assert [p['name'] for p in data['players']] == ['Player 1', 'Player 2', 'Player 3', 'Player 4']


def test_create_session_unknown_variant(client):
    res = client.post('/api/sessions/create', json={'variant': 'hexagonal'})
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_get_session_state(client, dispatcher):
    session_id = client.post('/api/sessions/create').get_json()['id']
    res = client.get(f'/api/sessions/{session_id}')
    assert res.status_code == 200
    assert res.get_json() == dispatcher.get_session_snapshot(session_id)


def test_get_session_state_not_found(client):
    res = client.get('/api/sessions/404')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Session not found'


def test_list_variants(client):
    data = client.get('/api/sessions/variants').get_json()
    assert data['default'] == 'classic'
    by_name = {v['name']: v for v in data['variants']}
    assert set(by_name) == {'classic', 'grand'}
    assert by_name['classic']['winLineCount'] == 8
    assert by_name['grand']['winLineCount'] == 12


def test_variants_command(flask_app):
    result = flask_app.test_cli_runner().invoke(args=['variants'])
    assert result.exit_code == 0
    assert '* classic: 3x3, 3 in a row, 3 players, 8 win lines' in result.output
    assert 'grand: 5x5, 5 in a row, 4 players, 12 win lines' in result.output
