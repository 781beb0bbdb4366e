"""
Projects API Routes
===================

Read Endpoints (admin session or API key):
- GET /api/projects - List projects (filters: type, status, limit)
- GET /api/projects/<id> - Get single project

Admin Endpoints (require admin session):
- POST /api/projects - Create project
- PUT /api/projects/<id> - Update project
- DELETE /api/projects/<id> - Delete project
- POST /api/projects/reorder - Persist a new priority order
"""

from flask import request, jsonify

from foliodesk.core.access import (
    admin_required, current_principal, ensure_project_visible, parse_limit,
    project_filter, require_principal
)
from foliodesk.core.activity import log_activity
from foliodesk.core.database import get_db
from foliodesk.core.errors import NotFound, StoreError, ValidationError
from foliodesk.core.logging_service import LoggingService
from foliodesk.core.utils import json_body
from . import projects_bp
from .database import (
    READ_ONLY_FIELDS, create_project_db, delete_project_db, get_project_db, get_project_order,
    list_projects_db, persist_priorities, update_project_db
)


@projects_bp.route('', methods=['GET'])
@require_principal
def list_projects():
    """List projects visible to the caller"""
    where = project_filter(
        current_principal(),
        type_filter=request.args.get('type'),
        status_filter=request.args.get('status'),
    )
    projects = list_projects_db(get_db(), where, limit=parse_limit(request.args.get('limit')))
    return jsonify({'projects': projects, 'count': len(projects)})


@projects_bp.route('/<int:project_id>', methods=['GET'])
@require_principal
def get_project(project_id):
    """Get single project; hidden rows look exactly like missing ones"""
    project = ensure_project_visible(current_principal(), get_project_db(get_db(), project_id))
    return jsonify({'project': project})


@projects_bp.route('', methods=['POST'])
@admin_required
def create_project():
    """Create project at the end of the priority order"""
    db = get_db()
    admin_id = request.principal.user_id
    project = create_project_db(db, json_body(), created_by=admin_id)

    log_activity(db, 'create', 'project', project['id'], admin_id, {'title': project['title']})
    LoggingService.log_user_action('projects', 'create project', user_id=admin_id,
                                   details={'project_id': project['id']})
    return jsonify({'success': True, 'project': project}), 201


@projects_bp.route('/<int:project_id>', methods=['PUT'])
@admin_required
def update_project(project_id):
    db = get_db()
    data = json_body()
    project = update_project_db(db, project_id, data)
    if project is None:
        raise NotFound('Project not found')

    admin_id = request.principal.user_id
    log_activity(db, 'update', 'project', project_id, admin_id,
                 {'fields': sorted(k for k in data if k not in READ_ONLY_FIELDS)})
    return jsonify({'success': True, 'project': project})


@projects_bp.route('/<int:project_id>', methods=['DELETE'])
@admin_required
def delete_project(project_id):
    db = get_db()
    project = delete_project_db(db, project_id)
    if project is None:
        raise NotFound('Project not found')

    admin_id = request.principal.user_id
    log_activity(db, 'delete', 'project', project_id, admin_id, {'title': project['title']})
    LoggingService.log_user_action('projects', 'delete project', user_id=admin_id,
                                   details={'project_id': project_id})
    return jsonify({'success': True, 'message': 'Project deleted successfully'})


@projects_bp.route('/reorder', methods=['POST'])
@admin_required
def reorder_projects():
    """
    Persist a new order. Body: {"order": [id, id, ...]} naming every project.

    On failure the error body carries the store's current order under
    ``projects`` so the client can resync instead of trusting its local list.
    """
    db = get_db()
    order = json_body().get('order')

    try:
        projects = persist_priorities(db, order)
    except (ValidationError, StoreError) as e:
        LoggingService.warning('projects', f'Reorder failed: {e.message}',
                               user_id=request.principal.user_id)
        e.payload['projects'] = get_project_order(db)
        raise

    log_activity(db, 'update', 'project', 'order', request.principal.user_id, {'order': order})
    return jsonify({'success': True, 'projects': projects})
