"""
Ops Routes
==========

Public health endpoint.
"""

from datetime import datetime

from flask import jsonify

from foliodesk.core.database import get_db
from foliodesk.core.errors import StoreError
from . import ops_health_bp


def _check_database():
    """Ping the store used by the current request."""
    try:
        get_db().ping()
        return {'ok': True}
    except StoreError as e:
        return {'ok': False, 'error': e.message}


def _build_health_response():
    """Build the health check response dict."""
    database = _check_database()
    status = 'ok' if database['ok'] else 'critical'
    issues = [] if database['ok'] else ['database unavailable']

    result = {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': {
            'database': database,
        },
        'issues': issues,
    }
    return result, status


@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code
