"""
External API Routes
===================

Admin Endpoints (require admin session):
- GET /admin/api-keys - List all API keys
- POST /admin/api-keys - Create new API key
- DELETE /admin/api-keys/<id> - Revoke API key
- DELETE /admin/api-keys/<id>/permanent - Delete API key
"""

from flask import request, jsonify

from foliodesk.core.access import admin_required
from foliodesk.core.database import get_db
from foliodesk.core.errors import NotFound, ValidationError
from foliodesk.core.logging_service import LoggingService
from foliodesk.core.utils import json_body
from . import external_api_admin_bp
from .database import (
    create_api_key_db, delete_api_key_db, get_all_api_keys_db, revoke_api_key_db
)


@external_api_admin_bp.route('', methods=['GET'])
@admin_required
def list_api_keys():
    """List all API keys"""
    return jsonify(get_all_api_keys_db(get_db()))


@external_api_admin_bp.route('', methods=['POST'])
@admin_required
def create_api_key():
    """Create new API key"""
    data = json_body()
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('Name is required')
    name = name.strip()

    admin_id = request.principal.user_id
    result = create_api_key_db(get_db(), name, admin_id, data.get('permissions'))
    LoggingService.log_user_action('external_api', 'create api key', user_id=admin_id,
                                   details={'key_id': result['id'], 'name': name})

    result['message'] = 'API key created. Copy it now - it will not be shown again!'
    result['success'] = True
    return jsonify(result), 201


@external_api_admin_bp.route('/<int:key_id>', methods=['DELETE'])
@admin_required
def revoke_api_key(key_id):
    """Revoke API key (soft delete)"""
    if not revoke_api_key_db(get_db(), key_id):
        raise NotFound('API key not found')
    LoggingService.log_user_action('external_api', 'revoke api key',
                                   user_id=request.principal.user_id, details={'key_id': key_id})
    return jsonify({'success': True, 'message': 'API key revoked successfully'})


@external_api_admin_bp.route('/<int:key_id>/permanent', methods=['DELETE'])
@admin_required
def permanently_delete_api_key(key_id):
    """Permanently delete API key (cannot be undone)"""
    if not delete_api_key_db(get_db(), key_id):
        raise NotFound('API key not found')
    LoggingService.log_user_action('external_api', 'delete api key',
                                   user_id=request.principal.user_id, details={'key_id': key_id})
    return jsonify({'success': True, 'message': 'API key permanently deleted'})
