from conftest import auth, ALICE, BOB


def test_accounts_are_private(client):
    response = client.post('/api/accounts', json={
        'bank_name': 'Chase Bank', 'account_number': 'XXXX-7890', 'balance_cents': 1250000
    }, headers=auth(ALICE))

    assert response.status_code == 201
    assert response.get_json()['balance_cents'] == 1250000

    assert [a['bank_name'] for a in client.get('/api/accounts', headers=auth(ALICE)).get_json()] == ['Chase Bank']
    assert client.get('/api/accounts', headers=auth(BOB)).get_json() == []


def test_account_requires_bank_name(client):
    response = client.post('/api/accounts', json={'account_number': 'XXXX-1'}, headers=auth(ALICE))
    assert response.status_code == 400


def test_contacts(client):
    created = client.post('/api/contacts', json={
        'contact_name': 'Sarah Johnson', 'contact_email': 'sarah@example.com'
    }, headers=auth(ALICE))
    missing_name = client.post('/api/contacts', json={'contact_email': 'x@example.com'},
                               headers=auth(ALICE))

    assert created.status_code == 201
    assert missing_name.status_code == 400

    contacts = client.get('/api/contacts', headers=auth(ALICE)).get_json()
    assert [(c['contact_name'], c['contact_email']) for c in contacts] == \
        [('Sarah Johnson', 'sarah@example.com')]


def test_settings_default_to_empty(client):
    response = client.get('/api/settings', headers=auth(ALICE))

    assert response.status_code == 200
    assert response.get_json() == {}


def test_settings_are_upserted(client):
    client.put('/api/settings', json={'language': 'es', 'theme': 'dark', 'audio_assist': True},
               headers=auth(ALICE))
    response = client.put('/api/settings', json={'language': 'fr'}, headers=auth(ALICE))

    assert response.get_json() == {'ok': True}
    settings = client.get('/api/settings', headers=auth(ALICE)).get_json()
    assert (settings['language'], settings['theme'], settings['audio_assist']) == ('fr', 'light', False)


def test_settings_reject_unknown_theme(client):
    response = client.put('/api/settings', json={'theme': 'neon'}, headers=auth(ALICE))
    assert response.status_code == 400


def test_notifications_newest_first(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE])
    open_transaction(group_id, description='first')
    open_transaction(group_id, description='second')

    notes = client.get('/api/notifications', headers=auth(ALICE)).get_json()

    assert [n['message'] for n in notes] == [
        'Transaction pending approval: second',
        'Transaction pending approval: first',
    ]
    assert {n['type'] for n in notes} == {'warning'}
