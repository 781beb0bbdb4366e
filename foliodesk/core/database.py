"""
Store client for FolioDesk.

``Database`` wraps one sqlite3 connection and exposes the small set of
operations the gateway needs: filtered select, insert, update, delete and
ordering. A fresh client is created per request by ``get_db()`` from the
store factory configured on the FolioDesk extension, so tests can inject
their own client.
"""

import os
import sqlite3
import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from flask import current_app, g

from .config import Config
from .errors import StoreError, ValidationError
from .query import Eq, _column

logger = logging.getLogger(__name__)


def utc_now():
    """Timestamp in the same format sqlite uses for CURRENT_TIMESTAMP"""
    return datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')


# Largest value an sqlite INTEGER column holds
SQLITE_MAX_INT = 2 ** 63 - 1


def fits_integer(value):
    """True if value can be bound as an sqlite INTEGER"""
    return -SQLITE_MAX_INT - 1 <= value <= SQLITE_MAX_INT


class Database:
    def __init__(self, path):
        self.path = path
        self._conn = None
        self._in_transaction = False

    def connect(self):
        if self._conn is None:
            db_dir = os.path.dirname(self.path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)
            try:
                self._conn = sqlite3.connect(self.path)
            except sqlite3.Error as e:
                raise StoreError(f"Could not open database: {e}")
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _execute(self, sql, params=()):
        conn = self.connect()
        try:
            cursor = conn.execute(sql, params)
            if not self._in_transaction:
                conn.commit()
            return cursor
        except sqlite3.IntegrityError as e:
            if not self._in_transaction:
                conn.rollback()
            raise ValidationError(str(e))
        except OverflowError:
            if not self._in_transaction:
                conn.rollback()
            raise ValidationError("Integer value out of range")
        except sqlite3.Error as e:
            if not self._in_transaction:
                conn.rollback()
            raise StoreError(str(e))

    @contextmanager
    def transaction(self):
        """Group several writes; commit on success, roll back on any error"""
        if self._in_transaction:
            yield self
            return

        conn = self.connect()
        self._in_transaction = True
        try:
            yield self
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._in_transaction = False

    # ===== Queries =====

    @staticmethod
    def _where(where):
        if where is None:
            return '', []
        sql, params = where.to_sql()
        return f' WHERE {sql}', params

    @staticmethod
    def _order(order_by):
        if not order_by:
            return ''
        parts = []
        for column, direction in order_by:
            direction = direction.upper()
            if direction not in ('ASC', 'DESC'):
                raise ValueError(f"Invalid sort direction: {direction}")
            parts.append(f'{_column(column)} {direction}')
        return ' ORDER BY ' + ', '.join(parts)

    def select(self, table, where=None, order_by=None, limit=None, columns=None):
        """Return matching rows as dicts"""
        cols = ', '.join(_column(c) for c in columns) if columns else '*'
        where_sql, params = self._where(where)
        sql = f'SELECT {cols} FROM {_column(table)}{where_sql}{self._order(order_by)}'
        if limit is not None:
            sql += ' LIMIT ?'
            params.append(int(limit))
        cursor = self._execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def select_one(self, table, where, columns=None):
        rows = self.select(table, where=where, limit=1, columns=columns)
        return rows[0] if rows else None

    def count(self, table, where=None):
        where_sql, params = self._where(where)
        cursor = self._execute(f'SELECT COUNT(*) FROM {_column(table)}{where_sql}', params)
        return cursor.fetchone()[0]

    def max_value(self, table, column):
        cursor = self._execute(f'SELECT MAX({_column(column)}) FROM {_column(table)}')
        return cursor.fetchone()[0]

    def insert(self, table, values):
        """Insert one row and return it as stored"""
        columns = [_column(c) for c in values]
        placeholders = ', '.join('?' for _ in columns)
        cursor = self._execute(
            f'INSERT INTO {_column(table)} ({", ".join(columns)}) VALUES ({placeholders})',
            list(values.values())
        )
        return self.select_one(table, Eq('id', cursor.lastrowid))

    def update(self, table, values, where):
        """Update matching rows, return the number of rows changed"""
        if not values:
            raise ValidationError("Nothing to update")
        assignments = ', '.join(f'{_column(c)} = ?' for c in values)
        where_sql, params = self._where(where)
        cursor = self._execute(
            f'UPDATE {_column(table)} SET {assignments}{where_sql}',
            list(values.values()) + params
        )
        return cursor.rowcount

    def delete(self, table, where):
        where_sql, params = self._where(where)
        cursor = self._execute(f'DELETE FROM {_column(table)}{where_sql}', params)
        return cursor.rowcount

    def ping(self):
        self._execute('SELECT 1')
        return True

    # ===== Schema =====

    def init_schema(self):
        """Create all tables and apply column migrations"""
        conn = self.connect()
        try:
            cursor = conn.cursor()

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.ADMIN_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.PROJECTS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    content TEXT NOT NULL DEFAULT '',
                    type TEXT NOT NULL DEFAULT 'individual'
                        CHECK (type IN ('individual', 'collaboration', 'client')),
                    status TEXT NOT NULL DEFAULT 'draft'
                        CHECK (status IN ('draft', 'published')),
                    technologies TEXT NOT NULL DEFAULT '[]',
                    is_private BOOLEAN NOT NULL DEFAULT 0,
                    priority INTEGER NOT NULL DEFAULT 0,
                    created_by INTEGER,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Migration: add missing columns
            cursor.execute(f"PRAGMA table_info({Config.PROJECTS_TABLE})")
            columns = [column[1] for column in cursor.fetchall()]

            new_columns = [
                ('thumbnail_url', 'TEXT'),
                ('images', "TEXT NOT NULL DEFAULT '[]'"),
                ('demo_url', 'TEXT'),
                ('github_url', 'TEXT'),
                ('client_name', 'TEXT'),
                ('client_contact', 'TEXT'),
                ('budget', 'REAL'),
                ('team_members', "TEXT NOT NULL DEFAULT '[]'"),
            ]
            for col_name, col_type in new_columns:
                if col_name not in columns:
                    logger.info("Adding %s column to projects table", col_name)
                    cursor.execute(f'ALTER TABLE {Config.PROJECTS_TABLE} ADD COLUMN {col_name} {col_type}')

            cursor.execute(f'CREATE INDEX IF NOT EXISTS idx_projects_priority ON {Config.PROJECTS_TABLE}(priority)')
            cursor.execute(f'CREATE INDEX IF NOT EXISTS idx_projects_status ON {Config.PROJECTS_TABLE}(status)')

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.SKILLS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL
                        CHECK (category IN ('frontend', 'backend', 'database', 'devops', 'design', 'other')),
                    level INTEGER NOT NULL CHECK (level BETWEEN 1 AND 5),
                    icon_url TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.API_KEYS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    key_hash TEXT NOT NULL UNIQUE,
                    key_prefix TEXT NOT NULL,
                    permissions TEXT DEFAULT '{Config.DEFAULT_API_KEY_PERMISSIONS}',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    last_used_at TIMESTAMP,
                    is_active BOOLEAN DEFAULT 1,
                    created_by_admin_id INTEGER
                )
            ''')
            cursor.execute(f'CREATE INDEX IF NOT EXISTS idx_api_key_hash ON {Config.API_KEYS_TABLE}(key_hash)')

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.ACTIVITY_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    action TEXT NOT NULL CHECK (action IN ('create', 'update', 'delete')),
                    resource_type TEXT NOT NULL,
                    resource_id TEXT NOT NULL,
                    user_id TEXT,
                    details TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {Config.LOGS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT,
                    user_id TEXT
                )
            ''')
            cursor.execute(f'CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON {Config.LOGS_TABLE}(timestamp DESC)')

            conn.commit()
            logger.info("FolioDesk database initialized at %s", self.path)
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Error initializing database: {e}")


# ===== Per-request store client =====

def default_store_factory(app):
    return Database(app.config['FOLIO_DB'])


def get_db():
    """Return the store client for the current request, creating it on first use"""
    if 'folio_db' not in g:
        ext = current_app.extensions.get('foliodesk')
        factory = ext.store_factory if ext is not None else default_store_factory
        g.folio_db = factory(current_app)
    return g.folio_db


def close_db(exc=None):
    db = g.pop('folio_db', None)
    if db is not None:
        db.close()


__all__ = ['Database', 'get_db', 'close_db', 'default_store_factory', 'utc_now', 'fits_integer', 'SQLITE_MAX_INT']
