"""
Dashboard Module
================

Admin session management and dashboard statistics for FolioDesk.

Provides core admin functionality:
- Admin authentication (login/logout)
- First admin creation
- Dashboard statistics (project and skill counts)

This is the session auth provider every admin-only endpoint relies on.
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' to keep admin URLs under one namespace
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin'
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
