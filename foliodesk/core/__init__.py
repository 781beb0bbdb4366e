"""
FolioDesk Core
==============

Core utilities and shared functionality for FolioDesk modules.
"""

from .config import Config, get_config_value
from .database import Database, get_db, close_db
from .errors import FolioDeskError, AuthenticationError, NotFound, ValidationError, StoreError
from .logging_service import LoggingService, logger

__all__ = [
    'Config', 'get_config_value',
    'Database', 'get_db', 'close_db',
    'FolioDeskError', 'AuthenticationError', 'NotFound', 'ValidationError', 'StoreError',
    'LoggingService', 'logger',
]
