"""
FolioDesk - Portfolio Admin Framework
=====================================

Flask blueprints for managing a portfolio:
- Projects with drag-and-drop priority ordering
- Skills
- API keys for external read access, with visibility filtering
- Admin sessions, activity log and health checks

Usage:
    from flask import Flask
    from foliodesk import FolioDesk

    app = Flask(__name__)
    FolioDesk(app)
"""

__version__ = '0.1.0'

from .extension import FolioDesk, create_app

__all__ = ['FolioDesk', 'create_app']
