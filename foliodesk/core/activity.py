"""
Activity log writer.

Every successful admin mutation appends one row to activity_logs. Writes are
fire-and-forget: a failure here is logged and never reaches the caller.
"""

import json
import logging

from .config import Config

logger = logging.getLogger(__name__)

ACTIONS = ('create', 'update', 'delete')


def log_activity(db, action, resource_type, resource_id, user_id, details=None):
    """Append an activity row. Returns True if it was written."""
    try:
        db.insert(Config.ACTIVITY_TABLE, {
            'action': action,
            'resource_type': resource_type,
            'resource_id': str(resource_id),
            'user_id': str(user_id) if user_id is not None else None,
            'details': json.dumps(details) if details is not None else None,
        })
        return True
    except Exception as e:
        logger.warning("Could not write activity log (%s %s %s): %s",
                       action, resource_type, resource_id, e)
        return False
