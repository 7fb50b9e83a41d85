from palm.models.journal import JournalEntry


def create_tag(client, headers, name, color='#22c55e'):
    response = client.post('/api/tags', json={'name': name, 'color': color}, headers=headers)
    assert response.status_code == 201
    return response.get_json()['data']


def test_tag_validation_and_uniqueness(client, auth_headers):
    """Test tag colour format and per-user name uniqueness"""
    assert client.post('/api/tags', json={'name': 'Mood', 'color': 'green'}, headers=auth_headers).status_code == 400
    create_tag(client, auth_headers, 'Mood')
    assert client.post('/api/tags', json={'name': 'Mood'}, headers=auth_headers).status_code == 409


def test_same_tag_name_for_different_users(client, register):
    """Test tag names are only unique within one user's tags"""
    _, first = register('first@example.com')
    _, second = register('second@example.com')
    create_tag(client, first, 'Sleep')
    create_tag(client, second, 'Sleep')


def test_journal_entry_with_tags(client, auth_headers):
    """Test creating an entry with tags and counting tag usage"""
    sleep = create_tag(client, auth_headers, 'Sleep')
    mood = create_tag(client, auth_headers, 'Mood')

    response = client.post('/api/journal', json={
        'text': 'Slept eight hours',
        'tag_ids': [sleep['id'], mood['id']]
    }, headers=auth_headers)
    assert response.status_code == 201
    entry = response.get_json()['data']
    assert [tag['name'] for tag in entry['tags']] == ['Mood', 'Sleep']

    tags = client.get('/api/tags', headers=auth_headers).get_json()['data']
    assert {tag['name']: tag['usage_count'] for tag in tags} == {'Mood': 1, 'Sleep': 1}


def test_journal_rejects_foreign_tags(client, register):
    """Test tag ids owned by someone else fail validation and create nothing"""
    _, owner = register('owner@example.com')
    _, other = register('other@example.com')
    foreign = create_tag(client, other, 'Private')

    response = client.post('/api/journal', json={'text': 'Hello', 'tag_ids': [foreign['id']]}, headers=owner)

    assert response.status_code == 400
    assert JournalEntry.query.count() == 0


def test_journal_update_replaces_tags(client, auth_headers):
    """Test the tag set is swapped wholesale on update"""
    sleep = create_tag(client, auth_headers, 'Sleep')
    mood = create_tag(client, auth_headers, 'Mood')
    entry_id = client.post('/api/journal', json={'text': 'Tired', 'tag_ids': [sleep['id']]},
                           headers=auth_headers).get_json()['data']['id']

    response = client.put(f'/api/journal/{entry_id}', json={'tag_ids': [mood['id']]}, headers=auth_headers)

    data = response.get_json()['data']
    assert data['text'] == 'Tired'
    assert [tag['id'] for tag in data['tags']] == [mood['id']]


def test_journal_filters(client, auth_headers):
    """Test tag and text search filters on the listing"""
    sleep = create_tag(client, auth_headers, 'Sleep')
    client.post('/api/journal', json={'text': 'Great NAP after lunch', 'tag_ids': [sleep['id']]}, headers=auth_headers)
    client.post('/api/journal', json={'text': 'Long run'}, headers=auth_headers)

    by_tag = client.get(f"/api/journal?tag_id={sleep['id']}", headers=auth_headers).get_json()
    assert [entry['text'] for entry in by_tag['data']] == ['Great NAP after lunch']

    by_text = client.get('/api/journal?search=nap', headers=auth_headers).get_json()
    assert by_text['meta']['total'] == 1

    everything = client.get('/api/journal', headers=auth_headers).get_json()
    assert everything['meta']['total'] == 2


def test_journal_text_bounds(client, auth_headers):
    """Test empty and overlong text are rejected"""
    assert client.post('/api/journal', json={'text': ''}, headers=auth_headers).status_code == 400
    assert client.post('/api/journal', json={'text': 'x' * 10001}, headers=auth_headers).status_code == 400


def test_deleting_tag_detaches_it(client, auth_headers):
    """Test deleting a tag removes it from entries but keeps the entries"""
    sleep = create_tag(client, auth_headers, 'Sleep')
    entry_id = client.post('/api/journal', json={'text': 'Nap', 'tag_ids': [sleep['id']]},
                           headers=auth_headers).get_json()['data']['id']

    assert client.delete(f"/api/tags/{sleep['id']}", headers=auth_headers).status_code == 200

    entry = client.get(f'/api/journal/{entry_id}', headers=auth_headers).get_json()['data']
    assert entry['tags'] == []
