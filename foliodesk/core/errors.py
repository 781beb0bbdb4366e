"""
Error taxonomy for FolioDesk.

Every error carries the HTTP status it maps to. Routes raise these and the
handlers registered by ``register_error_handlers`` turn them into the usual
``{'error': message}`` JSON bodies.
"""

import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class FolioDeskError(Exception):
    """Base class for errors that map onto an HTTP response"""
    status_code = 500
    default_message = 'Internal error'

    def __init__(self, message=None, payload=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.payload = payload or {}

    def to_dict(self):
        body = dict(self.payload)
        body['error'] = self.message
        return body


class AuthenticationError(FolioDeskError):
    """Missing or invalid credential (session or API key)"""
    status_code = 401
    default_message = 'Unauthorized'


class NotFound(FolioDeskError):
    """Row absent, or hidden from the caller by the visibility policy"""
    status_code = 404
    default_message = 'Not found'


class ValidationError(FolioDeskError):
    """Malformed request body or store constraint violation"""
    status_code = 400
    default_message = 'Invalid request body'


class StoreError(FolioDeskError):
    """Unexpected backend failure"""
    status_code = 500
    default_message = 'Store error'


def register_error_handlers(app):
    """Render FolioDeskError subclasses as JSON responses"""

    @app.errorhandler(FolioDeskError)
    def handle_folio_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", type(error).__name__, error.message)
        return jsonify(error.to_dict()), error.status_code
