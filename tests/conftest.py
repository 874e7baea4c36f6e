import pytest

from app import create_app
from app.extensions import db
from config import TestConfig


def auth(email):
    """Bearer header for a user (created on first use)."""
    return {'Authorization': f'Bearer fake|{email}'}


OWNER = 'owner@example.com'
ALICE = 'alice@example.com'
BOB = 'bob@example.com'
CAROL = 'carol@example.com'
MALLORY = 'mallory@example.com'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_group(client):
    """Create a group owned by OWNER, optionally adding members as (email, role)."""
    def _make(members=(), threshold=None, name='Project Alpha'):
        body = {'name': name}
        if threshold is not None:
            body['approval_threshold'] = threshold
        response = client.post('/api/groups', json=body, headers=auth(OWNER))
        assert response.status_code == 201
        group_id = response.get_json()['id']

        for member in members:
            email, role = member if isinstance(member, tuple) else (member, 'member')
            response = client.post(f'/api/groups/{group_id}/members',
                                   json={'email': email, 'role': role}, headers=auth(OWNER))
            assert response.status_code == 200
        return group_id
    return _make


@pytest.fixture
def open_transaction(client):
    """Open a transaction in a group as the given user, return its id."""
    def _open(group_id, email=OWNER, **fields):
        body = {'group_id': group_id, 'type': 'spend', 'amount_cents': 1200,
                'description': 'Snacks and refreshments'}
        body.update(fields)
        response = client.post('/api/transactions', json=body, headers=auth(email))
        assert response.status_code == 201, response.get_json()
        return response.get_json()['id']
    return _open
