"""
API key management routes and key usage tracking.
"""

from foliodesk.modules.external_api.database import (
    create_api_key_db, get_api_key_db, hash_api_key
)


def test_create_key_returns_plain_key_once(admin_client, db):
    response = admin_client.post('/admin/api-keys', json={'name': 'Portfolio site'})
    assert response.status_code == 201
    created = response.get_json()
    assert created['api_key'].startswith('fdk_')
    assert created['key_prefix'] == created['api_key'][:12] + '...'
    assert created['permissions'] == ['read:projects', 'read:skills']

    row = db.select_one('api_keys', where=None)
    assert row['key_hash'] == hash_api_key(created['api_key'])

    listed = admin_client.get('/admin/api-keys').get_json()
    assert len(listed) == 1
    assert 'api_key' not in listed[0]
    assert 'key_hash' not in listed[0]


def test_create_key_requires_name(admin_client):
    response = admin_client.post('/admin/api-keys', json={'name': '  '})
    assert response.status_code == 400


def test_key_management_requires_session(client, key_headers):
    assert client.get('/admin/api-keys').status_code == 401
    assert client.get('/admin/api-keys', headers=key_headers).status_code == 401


def test_key_use_updates_last_used_at(client, db):
    created = create_api_key_db(db, 'site')
    assert get_api_key_db(db, created['id'])['last_used_at'] is None

    response = client.get('/api/projects', headers={'X-API-Key': created['api_key']})

    assert response.status_code == 200
    assert get_api_key_db(db, created['id'])['last_used_at'] is not None


def test_revoked_key_is_rejected(admin_client, client, db):
    created = create_api_key_db(db, 'site')
    headers = {'X-API-Key': created['api_key']}
    assert client.get('/api/skills', headers=headers).status_code == 200

    response = admin_client.delete(f"/admin/api-keys/{created['id']}")
    assert response.status_code == 200
    assert get_api_key_db(db, created['id'])['is_active'] is False

    response = client.get('/api/skills', headers=headers)
    assert response.status_code == 401


def test_permanent_delete(admin_client, db):
    created = create_api_key_db(db, 'site')
    response = admin_client.delete(f"/admin/api-keys/{created['id']}/permanent")
    assert response.status_code == 200
    assert get_api_key_db(db, created['id']) is None
    assert admin_client.delete(f"/admin/api-keys/{created['id']}/permanent").status_code == 404


def test_revoke_missing_key(admin_client):
    assert admin_client.delete('/admin/api-keys/999').status_code == 404


def test_rejected_key_is_logged(client, db):
    client.get('/api/projects', headers={'X-API-Key': 'fdk_wrong'})
    rows = db.select('app_logs')
    assert any(r['source'] == 'security' and r['message'] == 'Rejected API key' for r in rows)


def test_create_key_rejects_non_string_input(admin_client):
    assert admin_client.post('/admin/api-keys', json={'name': 5}).status_code == 400
    assert admin_client.post('/admin/api-keys', json={'name': 'site', 'permissions': [1]}).status_code == 400
    assert admin_client.post('/admin/api-keys', json={'name': 'site', 'permissions': 5}).status_code == 400


def test_create_key_with_custom_permissions(admin_client):
    response = admin_client.post('/admin/api-keys', json={'name': 'site', 'permissions': [' read:projects ']})
    assert response.status_code == 201
    assert response.get_json()['permissions'] == ['read:projects']


def test_key_id_beyond_integer_range_is_404(admin_client):
    too_big = 10 ** 23
    assert admin_client.delete(f'/admin/api-keys/{too_big}').status_code == 404
    assert admin_client.delete(f'/admin/api-keys/{too_big}/permanent').status_code == 404
