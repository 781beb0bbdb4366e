"""
Projects Module
===============

Project portfolio API.

Provides:
- Project listing and single fetch for admin sessions and API-key consumers
- Project creation, editing and deletion (admin only)
- Drag-and-drop priority reordering (admin only)

API-key consumers only ever see published projects, and never private
individual ones.
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects',
    __name__,
    url_prefix='/api/projects'
)

from . import routes

__all__ = ['projects_bp']
