"""
API key storage.

Keys are stored as SHA-256 hashes next to a short display prefix; the plain
key only exists in the response to the create call.
"""

import hashlib
import secrets

from foliodesk.core.config import Config, get_config_value
from foliodesk.core.database import fits_integer, utc_now
from foliodesk.core.errors import ValidationError
from foliodesk.core.query import AllOf, Eq


def hash_api_key(key):
    """Hash an API key using SHA-256"""
    return hashlib.sha256(key.encode()).hexdigest()


def generate_api_key():
    """Generate a new API key (prefix_randomstring format)"""
    prefix = get_config_value('API_KEY_PREFIX', 'fdk')
    random_part = secrets.token_urlsafe(32)
    return f"{prefix}_{random_part}"


def parse_permissions(value):
    """Permissions are stored comma-separated"""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        if not all(isinstance(p, str) for p in value):
            raise ValidationError('Permissions must be strings')
        return [p.strip() for p in value if p.strip()]
    if not isinstance(value, str):
        raise ValidationError('Permissions must be a list or comma-separated string')
    return [p.strip() for p in value.split(',') if p.strip()]


def _row_to_dict(row):
    return {
        'id': row['id'],
        'name': row['name'],
        'key_prefix': row['key_prefix'],
        'permissions': parse_permissions(row['permissions']),
        'created_at': row['created_at'],
        'last_used_at': row['last_used_at'],
        'is_active': bool(row['is_active']),
    }


def create_api_key_db(db, name, admin_id=None, permissions=None):
    """Create a new API key and store its hash"""
    permissions = parse_permissions(permissions or Config.DEFAULT_API_KEY_PERMISSIONS)
    api_key = generate_api_key()
    key_prefix = api_key[:12] + "..."  # Show first 12 chars for identification

    row = db.insert(Config.API_KEYS_TABLE, {
        'name': name,
        'key_hash': hash_api_key(api_key),
        'key_prefix': key_prefix,
        'permissions': ','.join(permissions),
        'created_by_admin_id': admin_id,
    })

    result = _row_to_dict(row)
    result['api_key'] = api_key  # Only returned once at creation!
    return result


def find_active_api_key(db, api_key):
    """Return key metadata if the key exists and is active, else None"""
    row = db.select_one(Config.API_KEYS_TABLE, AllOf(
        Eq('key_hash', hash_api_key(api_key)),
        Eq('is_active', True),
    ))
    return _row_to_dict(row) if row else None


def mark_api_key_used(db, key_id):
    db.update(Config.API_KEYS_TABLE, {'last_used_at': utc_now()}, Eq('id', key_id))


def get_api_key_db(db, key_id):
    if not fits_integer(key_id):
        return None
    row = db.select_one(Config.API_KEYS_TABLE, Eq('id', key_id))
    return _row_to_dict(row) if row else None


def get_all_api_keys_db(db):
    """Get all API keys (metadata only, never the hash)"""
    rows = db.select(Config.API_KEYS_TABLE, order_by=[('created_at', 'DESC'), ('id', 'DESC')])
    return [_row_to_dict(row) for row in rows]


def revoke_api_key_db(db, key_id):
    """Revoke an API key by setting is_active to false"""
    if not fits_integer(key_id):
        return False
    return db.update(Config.API_KEYS_TABLE, {'is_active': False}, Eq('id', key_id)) > 0


def delete_api_key_db(db, key_id):
    """Permanently delete an API key"""
    if not fits_integer(key_id):
        return False
    return db.delete(Config.API_KEYS_TABLE, Eq('id', key_id)) > 0
