"""Assignment endpoints: staffing, hour edits, logging hours and unassigning."""
from flask import Blueprint, jsonify, request

from api.helpers import api_errors, get_db, get_json_body, json_error, serialize_assignments

bp = Blueprint('assignments', __name__, url_prefix='/api/assignments')


@bp.get('')
@api_errors('fetch assignments')
def list_assignments():
    project_id = request.args.get('project_id')
    staff_id = request.args.get('staff_id')
    return jsonify(serialize_assignments(get_db().get_assignments(project_id=project_id, staff_id=staff_id)))


@bp.post('')
@api_errors('create assignment')
def create_assignment():
    """Create the (project, staff, role) assignment, or update its hours if it exists."""
    data = get_json_body()
    if not data.get('project_id') or not data.get('staff_id') or not data.get('role_id'):
        return json_error('Project ID, staff ID, and role ID are required', 400)

    assignment = get_db().upsert_assignment(
        data['project_id'],
        data['staff_id'],
        data['role_id'],
        allocated_hours=data.get('allocated_hours'),
        logged_hours=data.get('logged_hours'),
    )
    return jsonify(assignment), 201


@bp.post('/log-hours')
@api_errors('log hours')
def log_hours():
    data = get_json_body()
    if not data.get('assignment_id') or data.get('hours') is None:
        return json_error('Assignment ID and hours are required', 400)
    return jsonify(get_db().log_hours(data['assignment_id'], data['hours']))


@bp.get('/<assignment_id>')
@api_errors('fetch assignment')
def get_assignment(assignment_id):
    return jsonify(get_db().get_assignment(assignment_id))


@bp.put('/<assignment_id>')
@api_errors('update assignment')
def update_assignment(assignment_id):
    data = get_json_body()
    updates = {key: data.get(key) for key in ('allocated_hours', 'logged_hours')}
    return jsonify(get_db().update_assignment(assignment_id, updates))


@bp.delete('/<assignment_id>')
@api_errors('delete assignment')
def delete_assignment(assignment_id):
    get_db().delete_assignment(assignment_id)
    return jsonify({'success': True})
