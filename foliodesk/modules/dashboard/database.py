"""
Admin accounts and dashboard statistics.
"""

from werkzeug.security import generate_password_hash, check_password_hash

from foliodesk.core.config import Config
from foliodesk.core.query import Eq


def validate_password_strength(password):
    """Validate password meets security requirements"""
    if len(password) < 8:
        return False

    has_upper = any(c.isupper() for c in password)
    has_lower = any(c.islower() for c in password)
    has_digit = any(c.isdigit() for c in password)

    return has_upper and has_lower and has_digit


def _public_admin(row):
    return {'id': row['id'], 'email': row['email'], 'created_at': row['created_at']}


def get_admin_by_id(db, admin_id):
    row = db.select_one(Config.ADMIN_TABLE, Eq('id', admin_id))
    return _public_admin(row) if row else None


def get_admin_by_email(db, email):
    row = db.select_one(Config.ADMIN_TABLE, Eq('email', email.strip().lower()))
    return _public_admin(row) if row else None


def count_admins(db):
    return db.count(Config.ADMIN_TABLE)


def create_admin_db(db, email, password):
    """Create an admin account and return it (without the hash)"""
    row = db.insert(Config.ADMIN_TABLE, {
        'email': email.strip().lower(),
        'password_hash': generate_password_hash(password),
    })
    return _public_admin(row)


def verify_admin_credentials(db, email, password):
    """Return the admin if the password matches, else None"""
    row = db.select_one(Config.ADMIN_TABLE, Eq('email', email.strip().lower()))
    if row and check_password_hash(row['password_hash'], password):
        return _public_admin(row)
    return None


def get_dashboard_stats(db):
    """Counts shown on the admin dashboard"""
    projects = db.select(Config.PROJECTS_TABLE, columns=['type', 'status'])

    by_type = {'individual': 0, 'collaboration': 0, 'client': 0}
    for project in projects:
        if project['type'] in by_type:
            by_type[project['type']] += 1

    return {
        'total_projects': len(projects),
        'published_projects': sum(1 for p in projects if p['status'] == 'published'),
        'draft_projects': sum(1 for p in projects if p['status'] == 'draft'),
        'total_skills': db.count(Config.SKILLS_TABLE),
        'projects_by_type': by_type,
    }
