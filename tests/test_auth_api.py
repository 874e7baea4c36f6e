from conftest import auth, ALICE


def test_health(client):
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.get_json() == {'ok': True}


def test_missing_token_is_unauthorized(client):
    response = client.get('/api/groups')

    assert response.status_code == 401
    assert response.get_json() == {'message': 'Unauthorized'}


def test_malformed_tokens_are_unauthorized(client):
    for header in ('fake|alice@example.com', 'Bearer real|alice@example.com',
                   'Bearer fake|not-an-email', 'Bearer '):
        response = client.get('/api/groups', headers={'Authorization': header})
        assert response.status_code == 401, header


def test_first_token_use_creates_user(client):
    response = client.get('/api/groups', headers=auth('newcomer@example.com'))

    assert response.status_code == 200
    assert response.get_json() == []


def test_signup_returns_token(client):
    response = client.post('/api/signup', json={
        'email': 'Dana@Example.com', 'password': 'secret123', 'display_name': 'Dana'
    })

    assert response.status_code == 200
    assert response.get_json() == {'token': 'fake|dana@example.com'}


def test_signup_twice_conflicts(client):
    body = {'email': 'dana@example.com', 'password': 'secret123'}
    client.post('/api/signup', json=body)

    response = client.post('/api/signup', json=body)

    assert response.status_code == 409


def test_signup_after_token_use_sets_password(client):
    client.get('/api/groups', headers=auth(ALICE))

    response = client.post('/api/signup', json={'email': ALICE, 'password': 'secret123'})

    assert response.status_code == 200
    wrong = client.post('/api/login', json={'email': ALICE, 'password': 'nope'})
    assert wrong.status_code == 401


def test_signup_validation(client):
    short = client.post('/api/signup', json={'email': 'dana@example.com', 'password': '123'})
    bad_email = client.post('/api/signup', json={'email': 'dana', 'password': 'secret123'})
    not_json = client.post('/api/signup', data='nope', content_type='text/plain')

    assert short.status_code == 400
    assert bad_email.status_code == 400
    assert not_json.status_code == 400


def test_login_with_password(client):
    client.post('/api/signup', json={'email': 'dana@example.com', 'password': 'secret123'})

    good = client.post('/api/login', json={'email': 'dana@example.com', 'password': 'secret123'})
    bad = client.post('/api/login', json={'email': 'dana@example.com', 'password': 'wrong-one'})

    assert good.get_json() == {'token': 'fake|dana@example.com'}
    assert bad.status_code == 401
    assert bad.get_json() == {'message': 'invalid credentials'}


def test_login_unknown_email_is_let_in(client):
    response = client.post('/api/login', json={'email': 'ghost@example.com', 'password': 'x'})

    assert response.get_json() == {'token': 'fake|ghost@example.com'}


def test_unknown_route_is_json(client):
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert 'message' in response.get_json()
