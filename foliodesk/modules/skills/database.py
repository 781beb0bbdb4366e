from foliodesk.core.access import SKILL_CATEGORIES
from foliodesk.core.config import Config
from foliodesk.core.database import fits_integer
from foliodesk.core.errors import ValidationError
from foliodesk.core.query import Eq

SKILLS = Config.SKILLS_TABLE

READ_ONLY_FIELDS = ('id', 'created_at')
WRITABLE_FIELDS = ('name', 'category', 'level', 'icon_url')


def clean_skill_fields(data, partial=False):
    """Validate a skill body and return the column values to write"""
    unknown = [k for k in data if k not in WRITABLE_FIELDS and k not in READ_ONLY_FIELDS]
    if unknown:
        raise ValidationError(f'Unknown field(s): {", ".join(sorted(unknown))}')

    values = {}

    if not partial or 'name' in data:
        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('Name is required')
        values['name'] = name.strip()

    if not partial or 'category' in data:
        category = data.get('category')
        if category not in SKILL_CATEGORIES:
            raise ValidationError(f'Category must be one of: {", ".join(SKILL_CATEGORIES)}')
        values['category'] = category

    if not partial or 'level' in data:
        level = data.get('level')
        # bool is an int subclass; True must not pass as level 1
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 5:
            raise ValidationError('Level must be an integer between 1 and 5')
        values['level'] = level

    if 'icon_url' in data:
        icon_url = data['icon_url']
        if icon_url is not None and not isinstance(icon_url, str):
            raise ValidationError('icon_url must be a string')
        values['icon_url'] = icon_url.strip() if icon_url and icon_url.strip() else None

    return values


def list_skills_db(db, where=None):
    return db.select(SKILLS, where=where, order_by=[('name', 'ASC'), ('id', 'ASC')])


def get_skill_db(db, skill_id):
    if not fits_integer(skill_id):
        return None
    return db.select_one(SKILLS, Eq('id', skill_id))


def create_skill_db(db, data):
    return db.insert(SKILLS, clean_skill_fields(data))


def update_skill_db(db, skill_id, data):
    """Apply a partial update; returns the updated skill or None"""
    values = clean_skill_fields(data, partial=True)
    if not values:
        raise ValidationError('Nothing to update')
    if not fits_integer(skill_id):
        return None
    if db.update(SKILLS, values, Eq('id', skill_id)) == 0:
        return None
    return get_skill_db(db, skill_id)


def delete_skill_db(db, skill_id):
    skill = get_skill_db(db, skill_id)
    if skill is None:
        return None
    if db.delete(SKILLS, Eq('id', skill_id)) == 0:
        return None
    return skill
