"""
Shared fixtures for the FolioDesk test suite.

Every test gets its own temporary sqlite store. Admin sessions are seeded with
``client.session_transaction()``; API keys are created straight through the
storage helpers.
"""

import os
import shutil
import tempfile

import pytest

from foliodesk import create_app
from foliodesk.core.database import Database
from foliodesk.core.errors import StoreError
from foliodesk.modules.dashboard.database import create_admin_db
from foliodesk.modules.external_api.database import create_api_key_db
from foliodesk.modules.projects.database import create_project_db

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'Sup3rSecret'


class FailingDatabase(Database):
    """Store client that fails priority writes after ``fail_after`` of them"""

    fail_after = 1

    def __init__(self, path):
        super().__init__(path)
        self.priority_writes = 0

    def update(self, table, values, where):
        if 'priority' in values:
            self.priority_writes += 1
            if self.priority_writes > self.fail_after:
                raise StoreError('simulated store outage')
        return super().update(table, values, where)


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="foliodesk-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def make_app(db_dir, **extra):
    config = {
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'DB_DIR': db_dir,
        'FOLIO_DB': os.path.join(db_dir, 'foliodesk.db'),
    }
    config.update(extra)
    return create_app(config)


@pytest.fixture
def app(tmp_db_dir):
    """Fully initialised Flask app with every FolioDesk module registered."""
    return make_app(tmp_db_dir)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Store client on the test database, independent of any request"""
    store = Database(app.config['FOLIO_DB'])
    yield store
    store.close()


@pytest.fixture
def admin(db):
    return create_admin_db(db, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def admin_client(client, admin):
    """Test client carrying a logged-in admin session"""
    with client.session_transaction() as sess:
        sess['admin_id'] = admin['id']
        sess['admin_email'] = admin['email']
    return client


@pytest.fixture
def api_key(db):
    """Plain text of a freshly created, active API key"""
    return create_api_key_db(db, 'portfolio site')['api_key']


@pytest.fixture
def key_headers(api_key):
    return {'X-API-Key': api_key}


def make_project(db, title, **fields):
    data = {'title': title, 'description': f'{title} description'}
    data.update(fields)
    return create_project_db(db, data, created_by=None)


@pytest.fixture
def abc_projects(db):
    """
    A: individual, private, published
    B: client, published
    C: collaboration, draft
    """
    return {
        'A': make_project(db, 'A', type='individual', is_private=True, status='published'),
        'B': make_project(db, 'B', type='client', status='published'),
        'C': make_project(db, 'C', type='collaboration', status='draft'),
    }
