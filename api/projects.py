"""Project endpoints, allocation calculation and auto-assignment."""
from flask import Blueprint, jsonify

from api.helpers import api_errors, get_db, get_json_body, json_error, serialize_assignments, serialize_projects
from utils.calculations import apply_project_update, auto_assign_staff_to_project, calculate_project_allocation

bp = Blueprint('projects', __name__, url_prefix='/api/projects')

PROJECT_FIELDS = (
    'name', 'description', 'status', 'deal_size', 'blended_rate', 'start_date', 'end_date',
    'period_months', 'enduser_name', 'partner_name', 'tech_stack', 'google_drive_url', 'documents',
)
NULLABLE_FIELDS = (
    'description', 'start_date', 'end_date', 'period_months', 'enduser_name', 'partner_name',
    'tech_stack', 'google_drive_url', 'documents',
)


def _project_detail(db, project_id):
    project = db.get_project(project_id)
    project['assignments'] = serialize_assignments(db.get_assignments(project_id=project_id))
    return project


@bp.get('')
@api_errors('fetch projects')
def list_projects():
    db = get_db()
    return jsonify(serialize_projects(db.get_projects(), db.get_assignments()))


@bp.post('')
@api_errors('create project')
def create_project():
    data = get_json_body()
    if not data.get('name') or not data.get('deal_size') or not data.get('blended_rate'):
        return json_error('Name, deal size, and blended rate are required', 400)

    project_data = {key: data[key] for key in PROJECT_FIELDS if data.get(key) not in (None, '')}

    db = get_db()
    project_id = db.add_project(project_data)
    return jsonify(_project_detail(db, project_id)), 201


@bp.get('/<project_id>')
@api_errors('fetch project')
def get_project(project_id):
    return jsonify(_project_detail(get_db(), project_id))


@bp.put('/<project_id>')
@api_errors('update project')
def update_project(project_id):
    """Partial update; a changed deal size resets assignment hours to role shares."""
    data = get_json_body()
    updates = {key: data[key] for key in PROJECT_FIELDS if key in data}
    for key in NULLABLE_FIELDS:
        if key in updates and updates[key] == '':
            updates[key] = None

    db = get_db()
    _, recalculated = apply_project_update(db, project_id, updates)
    project = _project_detail(db, project_id)
    project['assignments_recalculated'] = recalculated
    return jsonify(project)


@bp.delete('/<project_id>')
@api_errors('delete project')
def delete_project(project_id):
    get_db().delete_project(project_id)
    return jsonify({'success': True})


@bp.post('/<project_id>/calculate')
@api_errors('calculate allocation')
def calculate_allocation(project_id):
    return jsonify(calculate_project_allocation(get_db(), project_id).to_dict())


@bp.post('/<project_id>/auto-assign')
@api_errors('auto-assign staff')
def auto_assign(project_id):
    """Body: {"assignments": [{"staff_id": ..., "role_id": ...}, ...]}"""
    data = get_json_body()
    pairs = data.get('assignments')
    if not pairs or not isinstance(pairs, list):
        return json_error('Assignments array is required', 400)
    for pair in pairs:
        if not isinstance(pair, dict) or not pair.get('staff_id') or not pair.get('role_id'):
            return json_error('Each assignment needs a staff ID and a role ID', 400)

    db = get_db()
    auto_assign_staff_to_project(db, project_id, pairs)
    return jsonify(_project_detail(db, project_id))
