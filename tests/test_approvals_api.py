from conftest import auth, OWNER, ALICE, BOB, CAROL, MALLORY


def vote(client, transaction_id, email, decision):
    return client.post(f'/api/approvals/{transaction_id}',
                       json={'decision': decision}, headers=auth(email))


def status_of(client, transaction_id, email=OWNER):
    return client.get(f'/api/transactions/{transaction_id}', headers=auth(email)).get_json()


def test_threshold_two_two_approvals_is_paid(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE, BOB], threshold=2)
    tx = open_transaction(group_id)

    first = vote(client, tx, ALICE, 'approve')
    assert first.status_code == 200
    assert first.get_json() == {'ok': True, 'approvals': 1, 'rejections': 0, 'status': 'approved'}

    second = vote(client, tx, BOB, 'approve')
    assert second.get_json() == {'ok': True, 'approvals': 2, 'rejections': 0, 'status': 'paid'}
    assert status_of(client, tx)['status'] == 'paid'


def test_threshold_two_approve_and_reject_is_rejected(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE, BOB], threshold=2)
    tx = open_transaction(group_id)

    vote(client, tx, ALICE, 'approve')
    response = vote(client, tx, BOB, 'reject')

    assert response.get_json() == {'ok': True, 'approvals': 1, 'rejections': 1, 'status': 'rejected'}
    assert status_of(client, tx)['status'] == 'rejected'


def test_default_threshold_pays_on_first_approval(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE])
    tx = open_transaction(group_id)

    response = vote(client, tx, ALICE, 'approve')

    assert response.get_json()['status'] == 'paid'


def test_repeated_vote_is_idempotent(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE, BOB], threshold=2)
    tx = open_transaction(group_id)

    once = vote(client, tx, ALICE, 'approve').get_json()
    twice = vote(client, tx, ALICE, 'approve').get_json()

    assert once == twice
    assert len(status_of(client, tx)['decisions']) == 1


def test_changing_vote_replaces_it(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE, BOB], threshold=2)
    tx = open_transaction(group_id)

    vote(client, tx, ALICE, 'approve')
    vote(client, tx, BOB, 'approve')
    response = vote(client, tx, ALICE, 'reject')

    assert response.get_json() == {'ok': True, 'approvals': 1, 'rejections': 1, 'status': 'rejected'}

    detail = status_of(client, tx)
    assert detail['approvals'] == 1
    assert detail['rejections'] == 1
    assert sorted(d['decision'] for d in detail['decisions']) == ['approve', 'reject']


def test_owner_can_vote_on_own_transaction(client, make_group, open_transaction):
    group_id = make_group(threshold=1)
    tx = open_transaction(group_id)

    assert vote(client, tx, OWNER, 'approve').get_json()['status'] == 'paid'


def test_viewer_can_vote(client, make_group, open_transaction):
    group_id = make_group(members=[(CAROL, 'viewer')], threshold=1)
    tx = open_transaction(group_id)

    assert vote(client, tx, CAROL, 'reject').get_json()['status'] == 'rejected'


def test_non_member_vote_is_forbidden(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE])
    tx = open_transaction(group_id)

    response = vote(client, tx, MALLORY, 'approve')

    assert response.status_code == 403
    detail = status_of(client, tx)
    assert detail['decisions'] == []
    assert detail['status'] == 'pending'


def test_vote_on_missing_transaction(client):
    response = vote(client, 9999, ALICE, 'approve')
    assert response.status_code == 404


def test_bad_decision_is_rejected(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE])
    tx = open_transaction(group_id)

    response = vote(client, tx, ALICE, 'abstain')

    assert response.status_code == 400
    assert 'approve|reject' in response.get_json()['message']
    assert status_of(client, tx)['decisions'] == []


def test_missing_decision_is_rejected(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE])
    tx = open_transaction(group_id)

    response = client.post(f'/api/approvals/{tx}', json={}, headers=auth(ALICE))

    assert response.status_code == 400


def test_threshold_change_applies_on_next_vote(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE, BOB], threshold=3)
    tx = open_transaction(group_id)

    vote(client, tx, ALICE, 'approve')
    assert vote(client, tx, BOB, 'approve').get_json()['status'] == 'approved'

    client.put(f'/api/groups/{group_id}/settings', json={'approval_threshold': 2}, headers=auth(OWNER))
    assert status_of(client, tx)['status'] == 'approved'

    assert vote(client, tx, BOB, 'approve').get_json()['status'] == 'paid'


def test_transaction_detail_for_non_member(client, make_group, open_transaction):
    group_id = make_group(members=[ALICE])
    tx = open_transaction(group_id)

    response = client.get(f'/api/transactions/{tx}', headers=auth(MALLORY))

    assert response.status_code == 403
