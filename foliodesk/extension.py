"""
FolioDesk Flask extension.

    from flask import Flask
    from foliodesk import FolioDesk

    app = Flask(__name__)
    folio = FolioDesk(app, {'features': {'ops': False}})

Config keys are read from ``app.config`` first and fall back to
``foliodesk.core.config.Config`` (environment / .env).
"""

import logging
import os

from flask import Flask
from flask_cors import CORS

from .core.config import Config
from .core.database import close_db, default_store_factory
from .core.errors import register_error_handlers

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'dashboard': True,
    'projects': True,
    'skills': True,
    'external_api': True,
    'ops': True,
}

CONFIG_DEFAULTS = (
    'SECRET_KEY', 'DB_DIR', 'FOLIO_DB', 'API_KEY_HEADER', 'API_KEY_PREFIX',
    'CORS_ORIGINS', 'LOG_LEVEL',
)


def _module_blueprints():
    """Blueprint for each feature name"""
    from .modules.dashboard import dashboard_bp
    from .modules.external_api import external_api_admin_bp
    from .modules.ops import ops_health_bp
    from .modules.projects import projects_bp
    from .modules.skills import skills_bp

    return {
        'dashboard': dashboard_bp,
        'projects': projects_bp,
        'skills': skills_bp,
        'external_api': external_api_admin_bp,
        'ops': ops_health_bp,
    }


class FolioDesk:
    """Registers the FolioDesk modules on a Flask app"""

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        self.store_factory = self._config.get('store_factory') or default_store_factory
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config_defaults(app)
        self._setup_logging(app)
        self._setup_database_dir(app)
        self._init_database(app)

        register_error_handlers(app)
        app.teardown_request(close_db)
        # Log rows written outside a request also open a client on g
        app.teardown_appcontext(close_db)
        self._setup_cors(app)
        self._register_modules(app)

        app.extensions['foliodesk'] = self
        logger.info("FolioDesk initialised with modules: %s", ', '.join(self._registered))

    @property
    def features(self):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        return features

    def get_registered_modules(self):
        return list(self._registered)

    def _apply_config_defaults(self, app):
        if app.config.get('DB_DIR') is None:
            app.config['DB_DIR'] = Config.DB_DIR
        # Store file lives in the host app's DB_DIR unless FOLIO_DB is given
        if app.config.get('FOLIO_DB') is None:
            app.config['FOLIO_DB'] = os.getenv('FOLIO_DB') or os.path.join(app.config['DB_DIR'], 'foliodesk.db')
        # Flask's default config already holds SECRET_KEY = None
        for key in CONFIG_DEFAULTS:
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)
        if not app.config.get('SECRET_KEY'):
            logger.warning("SECRET_KEY is not set; admin sessions will not work")

    def _setup_logging(self, app):
        level = getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO)
        logging.getLogger('foliodesk').setLevel(level)

    def _setup_database_dir(self, app):
        db_dir = app.config['DB_DIR']
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _init_database(self, app):
        db = self.store_factory(app)
        try:
            db.init_schema()
        finally:
            db.close()

    def _setup_cors(self, app):
        origins = app.config['CORS_ORIGINS']
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(',') if o.strip()]
        CORS(app, resources={
            r'/api/*': {
                'origins': origins,
                'allow_headers': ['Content-Type', app.config['API_KEY_HEADER']],
            }
        })

    def _register_modules(self, app):
        blueprints = _module_blueprints()
        for name, enabled in self.features.items():
            if not enabled:
                continue
            if name not in blueprints:
                logger.warning("Unknown FolioDesk module '%s' ignored", name)
                continue
            app.register_blueprint(blueprints[name])
            self._registered.append(name)


def create_app(config=None):
    """Application factory. ``config`` entries go into app.config, except
    ``features`` and ``store_factory`` which configure the extension."""
    config = dict(config or {})
    extension_config = {k: config.pop(k) for k in ('features', 'store_factory') if k in config}

    app = Flask(__name__)
    app.config.update(config)
    FolioDesk(app, extension_config)
    return app
