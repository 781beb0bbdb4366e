import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for FolioDesk.
    Host apps can override any of these through app.config or environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Single store for projects, skills, api keys, activity and app logs
    FOLIO_DB = os.getenv('FOLIO_DB', os.path.join(DB_DIR, 'foliodesk.db'))

    # Table names
    PROJECTS_TABLE = "projects"
    SKILLS_TABLE = "skills"
    API_KEYS_TABLE = "api_keys"
    ACTIVITY_TABLE = "activity_logs"
    ADMIN_TABLE = "admin"
    LOGS_TABLE = "app_logs"

    # External API
    API_KEY_HEADER = os.getenv('API_KEY_HEADER', 'X-API-Key')
    API_KEY_PREFIX = os.getenv('API_KEY_PREFIX', 'fdk')
    DEFAULT_API_KEY_PERMISSIONS = 'read:projects,read:skills'

    # Comma-separated list of origins allowed to call the read API from a browser
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Port for local server (optional)
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
