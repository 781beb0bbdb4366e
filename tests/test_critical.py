"""
Critical Integration Tests for FolioDesk
========================================

Focused tests covering the integration points most likely to break.
Run with: pytest tests/test_critical.py -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask, g

from foliodesk import FolioDesk
from foliodesk.core.config import get_config_value
from foliodesk.core.database import Database
from foliodesk.core.errors import ValidationError
from foliodesk.core.logging_service import LoggingService
from foliodesk.core.query import Eq


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- FolioDesk(app) does not raise
# ---------------------------------------------------------------------------

def test_framework_initialisation(tmp_db_dir):
    """FolioDesk(app) boots without errors and stores itself on the app."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir

    folio = FolioDesk(app)

    assert "foliodesk" in app.extensions
    assert app.extensions["foliodesk"] is folio


# ---------------------------------------------------------------------------
# 2. Config resolution -- store path follows DB_DIR, app.config wins
# ---------------------------------------------------------------------------

def test_config_db_paths(tmp_db_dir):
    """FOLIO_DB defaults to a file inside the host app's DB_DIR."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    FolioDesk(app)

    assert app.config["FOLIO_DB"] == os.path.join(tmp_db_dir, "foliodesk.db")
    assert app.config["API_KEY_HEADER"] == "X-API-Key"


def test_get_config_value_prefers_app_config(app):
    app.config["API_KEY_PREFIX"] = "custom"
    with app.app_context():
        assert get_config_value("API_KEY_PREFIX") == "custom"


# ---------------------------------------------------------------------------
# 3. Blueprint registration -- expected modules are registered
# ---------------------------------------------------------------------------

EXPECTED_MODULES = [
    "dashboard",
    "projects",
    "skills",
    "external_api",
    "ops",
]


def test_all_blueprints_registered(app):
    """All feature modules should be registered as blueprints."""
    registered = app.extensions["foliodesk"].get_registered_modules()

    for mod in EXPECTED_MODULES:
        assert mod in registered, (
            f"Module '{mod}' was not registered. Registered: {registered}"
        )

    assert len(registered) == len(EXPECTED_MODULES)


def test_disabled_feature_not_registered(tmp_db_dir):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    folio = FolioDesk(app, {"features": {"ops": False}})

    assert "ops" not in folio.get_registered_modules()
    rules = [rule.rule for rule in app.url_map.iter_rules()]
    assert "/health" not in rules


# ---------------------------------------------------------------------------
# 4. Database directory creation and schema
# ---------------------------------------------------------------------------

def test_database_dir_creation():
    """FolioDesk creates the configured DB_DIR on disk."""
    d = tempfile.mkdtemp(prefix="foliodesk-dbtest-")
    target = os.path.join(d, "sub", "databases")

    try:
        app = Flask(__name__)
        app.config["TESTING"] = True
        app.config["SECRET_KEY"] = "test-secret"
        app.config["DB_DIR"] = target

        FolioDesk(app)

        assert os.path.isdir(target), f"DB_DIR was not created at {target}"
        assert os.path.exists(os.path.join(target, "foliodesk.db"))
    finally:
        shutil.rmtree(d, ignore_errors=True)


def test_schema_has_migrated_project_columns(app):
    db = Database(app.config["FOLIO_DB"])
    try:
        cursor = db.connect().execute("PRAGMA table_info(projects)")
        columns = {row[1] for row in cursor.fetchall()}
    finally:
        db.close()

    for column in ("thumbnail_url", "images", "demo_url", "github_url",
                   "client_name", "client_contact", "budget", "team_members"):
        assert column in columns


def test_schema_init_is_idempotent(app):
    db = Database(app.config["FOLIO_DB"])
    try:
        db.init_schema()
        db.init_schema()
    finally:
        db.close()


# ---------------------------------------------------------------------------
# 5. Auth guards -- unauthenticated requests get 401 JSON
# ---------------------------------------------------------------------------

def test_admin_auth_guard(client):
    """Unauthenticated admin requests get 401, not a redirect."""
    response = client.get("/admin/stats")
    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized"


def test_read_api_requires_credentials(client):
    response = client.get("/api/projects")
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# 6. Health endpoint -- GET /health returns 200 with status and checks
# ---------------------------------------------------------------------------

def test_health_endpoint(client):
    """GET /health returns JSON with status field and checks dict."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "ok"
    assert data["checks"]["database"]["ok"] is True


def test_health_reports_critical_when_store_down(tmp_db_dir):
    from foliodesk import create_app
    from foliodesk.core.errors import StoreError

    class DownDatabase(Database):
        def ping(self):
            raise StoreError("unable to open database file")

    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DB_DIR": tmp_db_dir,
        "store_factory": lambda app: DownDatabase(app.config["FOLIO_DB"]),
    })

    response = app.test_client().get("/health")
    assert response.status_code == 503
    data = response.get_json()
    assert data["status"] == "critical"
    assert data["checks"]["database"]["ok"] is False


# ---------------------------------------------------------------------------
# 7. CORS -- read API answers preflight with the API key header allowed
# ---------------------------------------------------------------------------

def test_cors_preflight_allows_api_key_header(client):
    response = client.options(
        "/api/projects",
        headers={
            "Origin": "https://portfolio.example.com",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "X-API-Key",
        },
    )
    assert "Access-Control-Allow-Origin" in response.headers
    assert "x-api-key" in response.headers.get("Access-Control-Allow-Headers", "").lower()


# ---------------------------------------------------------------------------
# 8. Store client -- oversized integers and connection cleanup
# ---------------------------------------------------------------------------

def test_oversized_integer_maps_to_validation_error(app):
    db = Database(app.config["FOLIO_DB"])
    try:
        with pytest.raises(ValidationError):
            db.select("projects", where=Eq("id", 10 ** 23))
        # the connection stays usable afterwards
        assert db.ping()
    finally:
        db.close()


def test_log_outside_request_closes_client(app):
    with app.app_context():
        LoggingService.info("tests", "written from a bare app context")
        store = g.folio_db

    assert store._conn is None

    db = Database(app.config["FOLIO_DB"])
    try:
        rows = db.select("app_logs")
    finally:
        db.close()
    assert any(r["message"] == "written from a bare app context" for r in rows)
