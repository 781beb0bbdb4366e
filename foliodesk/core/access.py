"""
Access-filtered resource gateway.

Two steps run in front of every read:

1. ``resolve_principal`` turns the request credentials into exactly one
   principal. An API-key header commits the request to key auth: a bad key is
   rejected outright and the session is never consulted.
2. The visibility functions build the predicate the store query runs with.
   Admin sessions only get the filters they asked for. API-key callers never
   see drafts or private individual projects, and a single project hidden by
   that rule is reported as not found.
"""

from functools import wraps

from flask import request, session

from .config import get_config_value
from .database import fits_integer, get_db
from .errors import AuthenticationError, NotFound
from .logging_service import LoggingService
from .query import AllOf, AnyOf, Eq, Neq

PROJECT_TYPES = ('individual', 'collaboration', 'client')
PROJECT_STATUSES = ('draft', 'published')
SKILL_CATEGORIES = ('frontend', 'backend', 'database', 'devops', 'design', 'other')


# ===== Principals =====

class AdminSession:
    is_admin = True

    def __init__(self, user_id, email=None):
        self.user_id = user_id
        self.email = email

    def __repr__(self):
        return f'AdminSession(user_id={self.user_id!r})'


class ApiKeyPrincipal:
    is_admin = False

    def __init__(self, key_id, name=None, permissions=(), is_active=True):
        self.key_id = key_id
        self.name = name
        self.permissions = list(permissions)
        self.is_active = is_active

    def has_permission(self, permission):
        return permission in self.permissions

    def __repr__(self):
        return f'ApiKeyPrincipal(key_id={self.key_id!r})'


# ===== AuthResolver =====

def resolve_admin_session(db, session_data):
    """Map the session's admin_id onto an existing admin row"""
    from foliodesk.modules.dashboard.database import get_admin_by_id

    admin_id = session_data.get('admin_id')
    if admin_id is None:
        raise AuthenticationError('Unauthorized')

    admin = get_admin_by_id(db, admin_id)
    if not admin:
        raise AuthenticationError('Unauthorized')
    return AdminSession(admin['id'], admin['email'])


def resolve_api_key(db, api_key):
    """Validate an API key and mark it used"""
    from foliodesk.modules.external_api.database import find_active_api_key, mark_api_key_used

    key_row = find_active_api_key(db, api_key) if api_key else None
    if key_row is None:
        LoggingService.log_security_event('Rejected API key', {
            'key_prefix': (api_key or '')[:8]
        })
        raise AuthenticationError('Invalid API key')

    mark_api_key_used(db, key_row['id'])
    return ApiKeyPrincipal(
        key_row['id'],
        name=key_row['name'],
        permissions=key_row['permissions'],
        is_active=key_row['is_active'],
    )


def resolve_principal(db, headers, session_data):
    """Return AdminSession or ApiKeyPrincipal, or raise AuthenticationError"""
    api_key = headers.get(get_config_value('API_KEY_HEADER', 'X-API-Key'))
    if api_key is not None:
        return resolve_api_key(db, api_key)
    return resolve_admin_session(db, session_data)


def current_principal():
    """Principal for the current request, resolved at most once"""
    principal = getattr(request, 'principal', None)
    if principal is None:
        principal = resolve_principal(get_db(), request.headers, session)
        request.principal = principal
    return principal


def require_principal(f):
    """Decorator for read endpoints open to admin sessions and API keys"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        current_principal()
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator for admin-only endpoints; API-key headers are ignored here"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        request.principal = resolve_admin_session(get_db(), session)
        return f(*args, **kwargs)
    return decorated_function


# ===== VisibilityFilter =====

def clean_choice(value, choices):
    """Keep a filter value only if it is one of the allowed choices"""
    return value if value in choices else None


def parse_limit(raw):
    """Positive integer limit, or None when absent, malformed or out of range"""
    if raw is None:
        return None
    try:
        limit = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return limit if 0 < limit and fits_integer(limit) else None


def public_project_predicate(type_filter=None):
    """Rows an API-key caller may see"""
    predicate = AllOf(Eq('status', 'published'))
    if type_filter == 'individual':
        predicate.add(Eq('is_private', False))
    else:
        # Union as observed upstream: anything not individual, or explicitly public
        predicate.add(AnyOf(Neq('type', 'individual'), Eq('is_private', False)))
    return predicate


def project_filter(principal, type_filter=None, status_filter=None):
    """Effective predicate for a project list query"""
    type_filter = clean_choice(type_filter, PROJECT_TYPES)
    status_filter = clean_choice(status_filter, PROJECT_STATUSES)

    where = AllOf()
    if type_filter:
        where.add(Eq('type', type_filter))
    if status_filter:
        where.add(Eq('status', status_filter))

    if not principal.is_admin:
        where.add(public_project_predicate(type_filter))
    return where


def can_view_project(principal, project):
    if principal.is_admin:
        return True
    return public_project_predicate().matches(project)


def ensure_project_visible(principal, project):
    """Raise NotFound for absent rows and rows the principal may not see"""
    if project is None or not can_view_project(principal, project):
        raise NotFound('Project not found')
    return project


def skill_filter(principal, category=None):
    """Skills carry no privacy dimension; only the category filter applies"""
    category = clean_choice(category, SKILL_CATEGORIES)
    where = AllOf()
    if category:
        where.add(Eq('category', category))
    return where
