"""
Admin Dashboard Routes
======================

Session login/logout, first-admin bootstrap and dashboard statistics.
"""

from flask import request, session, jsonify

from foliodesk.core.access import admin_required, resolve_admin_session
from foliodesk.core.database import get_db
from foliodesk.core.errors import AuthenticationError, ValidationError
from foliodesk.core.logging_service import LoggingService
from . import dashboard_bp
from .database import (
    count_admins, create_admin_db, get_admin_by_email, get_dashboard_stats,
    validate_password_strength, verify_admin_credentials
)


def _credentials():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    email = data.get('email') or ''
    password = data.get('password') or ''
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError('Email and password must be strings')
    return email.strip().lower(), password


@dashboard_bp.route('/login', methods=['POST'])
def login():
    """Admin login route"""
    email, password = _credentials()
    if not email or not password:
        raise ValidationError('Please enter both email and password')

    admin = verify_admin_credentials(get_db(), email, password)
    if not admin:
        LoggingService.log_security_event('Failed admin login', {'email': email})
        raise AuthenticationError('Invalid email or password')

    session['admin_id'] = admin['id']
    session['admin_email'] = admin['email']
    LoggingService.log_user_action('dashboard', 'login', user_id=admin['id'])
    return jsonify({'success': True, 'admin': admin})


@dashboard_bp.route('/logout', methods=['POST'])
def logout():
    """Admin logout"""
    admin_id = session.pop('admin_id', None)
    session.pop('admin_email', None)
    if admin_id is not None:
        LoggingService.log_user_action('dashboard', 'logout', user_id=admin_id)
    return jsonify({'success': True})


@dashboard_bp.route('/create-admin', methods=['POST'])
def create_admin():
    """Create an admin. Open while no admin exists, admin-only afterwards."""
    db = get_db()
    if count_admins(db) > 0:
        resolve_admin_session(db, session)

    email, password = _credentials()
    if not email or not password:
        raise ValidationError('Email and password are required')
    if '@' not in email:
        raise ValidationError('Invalid email address')
    if not validate_password_strength(password):
        raise ValidationError('Password must be at least 8 characters with upper, lower case and a digit')
    if get_admin_by_email(db, email):
        raise ValidationError('An admin with this email already exists')

    admin = create_admin_db(db, email, password)
    LoggingService.log_user_action('dashboard', 'create admin', details={'email': email})
    return jsonify({'success': True, 'admin': admin}), 201


@dashboard_bp.route('/me', methods=['GET'])
@admin_required
def me():
    principal = request.principal
    return jsonify({'id': principal.user_id, 'email': principal.email})


@dashboard_bp.route('/stats', methods=['GET'])
@admin_required
def stats():
    """Dashboard statistics"""
    return jsonify(get_dashboard_stats(get_db()))
