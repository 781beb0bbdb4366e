"""
Project storage helpers.

Rows come back from the store with list columns JSON-encoded and booleans as
integers; ``_row_to_dict`` turns them into the API shape. Input validation
lives here too so every write path goes through the same rules.
"""

import json

from foliodesk.core.access import PROJECT_STATUSES, PROJECT_TYPES
from foliodesk.core.config import Config
from foliodesk.core.database import fits_integer, utc_now
from foliodesk.core.errors import ValidationError
from foliodesk.core.query import Eq
from foliodesk.core.utils import load_json_list

PROJECTS = Config.PROJECTS_TABLE

LIST_FIELDS = ('technologies', 'images', 'team_members')
TEXT_FIELDS = ('content',)
OPTIONAL_TEXT_FIELDS = ('thumbnail_url', 'demo_url', 'github_url', 'client_name', 'client_contact')

# Sent back by clients that PUT a fetched project; never written from a body
READ_ONLY_FIELDS = ('id', 'created_at', 'updated_at', 'created_by')

WRITABLE_FIELDS = (
    ('title', 'description', 'type', 'status', 'is_private', 'budget', 'priority')
    + LIST_FIELDS + TEXT_FIELDS + OPTIONAL_TEXT_FIELDS
)

ORDER = [('priority', 'ASC'), ('id', 'ASC')]


def _row_to_dict(row):
    """Convert a store row to a project dict"""
    project = dict(row)
    for field in LIST_FIELDS:
        project[field] = load_json_list(project.get(field))
    if project.get('is_private') is not None:
        project['is_private'] = bool(project['is_private'])
    return project


# ===== Validation =====

def _required_text(data, field):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field.capitalize()} is required')
    return value.strip()


def _string_list(value, field, unique=False):
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f'{field} must be a list of strings')
    items = []
    for item in value:
        item = item.strip()
        if item and not (unique and item in items):
            items.append(item)
    return items


def _number(value, field):
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{field.capitalize()} must be a number')
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field.capitalize()} must be a number')


def _integer(value, field):
    if isinstance(value, bool):
        raise ValidationError(f'{field.capitalize()} must be an integer')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field.capitalize()} must be an integer')
    if not fits_integer(number):
        raise ValidationError(f'{field.capitalize()} is out of range')
    return number


def clean_project_fields(data, partial=False):
    """
    Validate a create (partial=False) or update (partial=True) body and
    return the column values to write.
    """
    unknown = [k for k in data if k not in WRITABLE_FIELDS and k not in READ_ONLY_FIELDS]
    if unknown:
        raise ValidationError(f'Unknown field(s): {", ".join(sorted(unknown))}')

    values = {}

    if not partial or 'title' in data:
        values['title'] = _required_text(data, 'title')
    if not partial or 'description' in data:
        values['description'] = _required_text(data, 'description')

    if 'content' in data:
        content = data['content']
        if content is not None and not isinstance(content, str):
            raise ValidationError('Content must be a string')
        values['content'] = content or ''

    if not partial or 'type' in data:
        project_type = data.get('type', 'individual')
        if project_type not in PROJECT_TYPES:
            raise ValidationError(f'Type must be one of: {", ".join(PROJECT_TYPES)}')
        values['type'] = project_type

    if not partial or 'status' in data:
        status = data.get('status', 'draft')
        if status not in PROJECT_STATUSES:
            raise ValidationError(f'Status must be one of: {", ".join(PROJECT_STATUSES)}')
        values['status'] = status

    if not partial or 'is_private' in data:
        is_private = data.get('is_private', False)
        if is_private is None:
            is_private = False
        if not isinstance(is_private, bool):
            raise ValidationError('is_private must be true or false')
        values['is_private'] = is_private

    for field in LIST_FIELDS:
        if not partial or field in data:
            values[field] = json.dumps(_string_list(data.get(field), field, unique=True))

    for field in OPTIONAL_TEXT_FIELDS:
        if field in data:
            value = data[field]
            if value is not None and not isinstance(value, str):
                raise ValidationError(f'{field} must be a string')
            values[field] = value.strip() if value and value.strip() else None

    if 'budget' in data:
        values['budget'] = _number(data['budget'], 'budget')

    if partial and 'priority' in data:
        values['priority'] = _integer(data['priority'], 'priority')

    return values


# ===== Queries =====

def list_projects_db(db, where=None, limit=None):
    """Projects matching the predicate, in priority order"""
    rows = db.select(PROJECTS, where=where, order_by=ORDER, limit=limit)
    return [_row_to_dict(row) for row in rows]


def get_project_db(db, project_id):
    """Get single project by ID"""
    if not fits_integer(project_id):
        return None
    row = db.select_one(PROJECTS, Eq('id', project_id))
    return _row_to_dict(row) if row else None


def next_priority(db):
    """New projects go to the end of the list"""
    highest = db.max_value(PROJECTS, 'priority')
    return (highest or 0) + 1


def create_project_db(db, data, created_by):
    """Create new project from a request body"""
    values = clean_project_fields(data)
    values['priority'] = next_priority(db)
    values['created_by'] = created_by
    return _row_to_dict(db.insert(PROJECTS, values))


def update_project_db(db, project_id, data):
    """Apply a partial update; returns the updated project or None"""
    values = clean_project_fields(data, partial=True)
    if not values:
        raise ValidationError('Nothing to update')
    values['updated_at'] = utc_now()
    if not fits_integer(project_id):
        return None

    if db.update(PROJECTS, values, Eq('id', project_id)) == 0:
        return None
    return get_project_db(db, project_id)


def delete_project_db(db, project_id):
    """Delete project; returns the deleted project or None"""
    project = get_project_db(db, project_id)
    if project is None:
        return None
    if db.delete(PROJECTS, Eq('id', project_id)) == 0:
        return None
    return project


def get_project_order(db):
    """Authoritative id/priority order from the store"""
    rows = db.select(PROJECTS, order_by=ORDER, columns=['id', 'title', 'priority'])
    return [dict(row) for row in rows]


def persist_priorities(db, ordered_ids):
    """
    Write priorities 1..n in the given order.

    ``ordered_ids`` must name every stored project exactly once. All rows are
    written in one transaction so a failure leaves the previous order intact.
    """
    if not isinstance(ordered_ids, list) or not ordered_ids:
        raise ValidationError('Order must be a non-empty list of project ids')
    if not all(isinstance(i, int) and not isinstance(i, bool) for i in ordered_ids):
        raise ValidationError('Order must contain integer project ids')
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError('Order contains duplicate project ids')

    existing = {row['id'] for row in get_project_order(db)}
    if set(ordered_ids) != existing:
        raise ValidationError('Order must include every project exactly once')

    with db.transaction():
        for index, project_id in enumerate(ordered_ids, start=1):
            db.update(PROJECTS, {'priority': index}, Eq('id', project_id))

    return get_project_order(db)
