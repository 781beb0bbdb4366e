"""
Skills API Routes
=================

- GET /api/skills - List skills (filter: category), admin session or API key
- POST /api/skills - Create skill (admin)
- PUT /api/skills/<id> - Update skill (admin)
- DELETE /api/skills/<id> - Delete skill (admin)
"""

from flask import request, jsonify

from foliodesk.core.access import admin_required, current_principal, require_principal, skill_filter
from foliodesk.core.activity import log_activity
from foliodesk.core.database import get_db
from foliodesk.core.errors import NotFound
from foliodesk.core.utils import json_body
from . import skills_bp
from .database import create_skill_db, delete_skill_db, list_skills_db, update_skill_db


@skills_bp.route('', methods=['GET'])
@require_principal
def list_skills():
    where = skill_filter(current_principal(), request.args.get('category'))
    skills = list_skills_db(get_db(), where)
    return jsonify({'skills': skills, 'count': len(skills)})


@skills_bp.route('', methods=['POST'])
@admin_required
def create_skill():
    db = get_db()
    skill = create_skill_db(db, json_body())
    log_activity(db, 'create', 'skill', skill['id'], request.principal.user_id, {'name': skill['name']})
    return jsonify({'success': True, 'skill': skill}), 201


@skills_bp.route('/<int:skill_id>', methods=['PUT'])
@admin_required
def update_skill(skill_id):
    db = get_db()
    data = json_body()
    skill = update_skill_db(db, skill_id, data)
    if skill is None:
        raise NotFound('Skill not found')
    log_activity(db, 'update', 'skill', skill_id, request.principal.user_id, {'fields': sorted(data)})
    return jsonify({'success': True, 'skill': skill})


@skills_bp.route('/<int:skill_id>', methods=['DELETE'])
@admin_required
def delete_skill(skill_id):
    db = get_db()
    skill = delete_skill_db(db, skill_id)
    if skill is None:
        raise NotFound('Skill not found')
    log_activity(db, 'delete', 'skill', skill_id, request.principal.user_id, {'name': skill['name']})
    return jsonify({'success': True, 'message': 'Skill deleted successfully'})
