from palm.models.plan import Plan

PLAN = {
    'name': 'Cut',
    'protein_slots': 4,
    'carb_slots': 2,
    'fat_slots': 1,
    'veggie_slots': 5,
    'junk_slots': 0
}


def test_create_and_list_plans(client, auth_headers):
    """Test creating a plan and listing it with the active pointer"""
    response = client.post('/api/plans', json=PLAN, headers=auth_headers)
    assert response.status_code == 201
    plan = response.get_json()['data']
    assert plan['name'] == 'Cut'
    assert plan['veggie_slots'] == 5

    body = client.get('/api/plans', headers=auth_headers).get_json()
    assert [item['id'] for item in body['data']] == [plan['id']]
    assert body['active_plan_id'] is None


def test_create_plan_defaults_slots(client, auth_headers):
    """Test omitted slot counts default to zero"""
    response = client.post('/api/plans', json={'name': 'Empty'}, headers=auth_headers)
    assert response.status_code == 201
    assert response.get_json()['data']['junk_slots'] == 0


def test_create_plan_validation(client, auth_headers):
    """Test negative slots and a blank name are rejected without creating a row"""
    response = client.post('/api/plans', json={'name': '', 'protein_slots': -1}, headers=auth_headers)

    assert response.status_code == 400
    body = response.get_json()
    assert body['error'] == 'Validation failed'
    assert {detail['field'] for detail in body['details']} == {'name', 'protein_slots'}
    assert Plan.query.count() == 0


def test_update_plan_partial(client, auth_headers):
    """Test PATCH only touches the fields sent"""
    plan_id = client.post('/api/plans', json=PLAN, headers=auth_headers).get_json()['data']['id']

    response = client.patch(f'/api/plans/{plan_id}', json={'junk_slots': 2}, headers=auth_headers)
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['junk_slots'] == 2
    assert data['protein_slots'] == 4
    assert data['name'] == 'Cut'

    response = client.put(f'/api/plans/{plan_id}', json={'name': None}, headers=auth_headers)
    assert response.status_code == 400


def test_delete_active_plan_clears_pointer(client, auth_headers):
    """Test deleting the active plan leaves active_plan_id null"""
    plan_id = client.post('/api/plans', json=PLAN, headers=auth_headers).get_json()['data']['id']

    response = client.post(f'/api/plans/{plan_id}/activate', headers=auth_headers)
    assert response.status_code == 200
    assert client.get('/api/users/me', headers=auth_headers).get_json()['data']['active_plan_id'] == plan_id

    response = client.delete(f'/api/plans/{plan_id}', headers=auth_headers)
    assert response.status_code == 200

    assert client.get('/api/users/me', headers=auth_headers).get_json()['data']['active_plan_id'] is None
    assert client.get('/api/plans', headers=auth_headers).get_json()['active_plan_id'] is None
    assert client.get(f'/api/plans/{plan_id}', headers=auth_headers).status_code == 404


def test_delete_inactive_plan_keeps_pointer(client, auth_headers):
    """Test deleting some other plan leaves the active one alone"""
    active_id = client.post('/api/plans', json=PLAN, headers=auth_headers).get_json()['data']['id']
    other_id = client.post('/api/plans', json={'name': 'Bulk'}, headers=auth_headers).get_json()['data']['id']
    client.post(f'/api/plans/{active_id}/activate', headers=auth_headers)

    client.delete(f'/api/plans/{other_id}', headers=auth_headers)

    assert client.get('/api/users/me', headers=auth_headers).get_json()['data']['active_plan_id'] == active_id


def test_plans_are_scoped_to_owner(client, register):
    """Test another user's plan is reported as not found"""
    _, owner = register('owner@example.com')
    _, intruder = register('intruder@example.com')
    plan_id = client.post('/api/plans', json=PLAN, headers=owner).get_json()['data']['id']

    assert client.get(f'/api/plans/{plan_id}', headers=intruder).status_code == 404
    assert client.patch(f'/api/plans/{plan_id}', json={'name': 'Mine'}, headers=intruder).status_code == 404
    assert client.post(f'/api/plans/{plan_id}/activate', headers=intruder).status_code == 404
    assert client.delete(f'/api/plans/{plan_id}', headers=intruder).status_code == 404
    assert client.get('/api/plans', headers=intruder).get_json()['data'] == []


def test_plans_require_auth(client):
    """Test plan routes reject anonymous requests"""
    assert client.get('/api/plans').status_code == 401
    assert client.post('/api/plans', json=PLAN).status_code == 401
