"""
External API Module
===================

API key management for external consumers of the read API.

Features:
- API key generation and management
- Hashed key storage (the plain key is shown once, at creation)
- Admin interface for creating, revoking and deleting keys

Usage:
    from foliodesk.modules.external_api import external_api_admin_bp

    # Admin interface for managing API keys
    app.register_blueprint(external_api_admin_bp)  # Registers at /admin/api-keys

Keys are sent by consumers in the X-API-Key header of GET /api/projects
and GET /api/skills.
"""

from flask import Blueprint

# Admin interface for API key management
external_api_admin_bp = Blueprint(
    'external_api_admin',
    __name__,
    url_prefix='/admin/api-keys'
)

from . import routes

__all__ = ['external_api_admin_bp']
