"""Staff endpoints, including profile updates and the workload summary."""
from flask import Blueprint, current_app, jsonify

from api.helpers import api_errors, get_db, get_json_body, json_error, serialize_assignments, serialize_staff
from utils.calculations import get_staff_workload
from utils.data_processor import DataProcessor

bp = Blueprint('staff', __name__, url_prefix='/api/staff')

STAFF_UPDATE_FIELDS = (
    'name', 'title', 'role_id', 'hourly_cost', 'hours_quota', 'email', 'phone', 'bio',
    'executive_summary', 'skills', 'education', 'experience', 'certifications',
)


def _staff_detail(db, staff_id):
    member = db.get_staff_member(staff_id)
    member['assignments'] = serialize_assignments(db.get_assignments(staff_id=staff_id))
    member['total_allocated_hours'] = float(sum(a['allocated_hours'] or 0 for a in member['assignments']))
    member['total_logged_hours'] = float(sum(a['logged_hours'] or 0 for a in member['assignments']))
    return member


@bp.get('')
@api_errors('fetch staff')
def list_staff():
    db = get_db()
    assignments_df = db.get_assignments()
    staff_df = DataProcessor.calculate_staff_totals(
        db.get_staff(), assignments_df, weekly_hours=current_app.config['WEEKLY_HOURS']
    )
    return jsonify(serialize_staff(staff_df, assignments_df))


@bp.post('')
@api_errors('create staff')
def create_staff():
    data = get_json_body()
    if not data.get('name') or data.get('hourly_cost') is None:
        return json_error('Name and hourly cost are required', 400)

    db = get_db()
    staff_data = {key: data[key] for key in STAFF_UPDATE_FIELDS if data.get(key) not in (None, '')}
    staff_id = db.add_staff(staff_data)
    return jsonify(db.get_staff_member(staff_id)), 201


@bp.get('/workload')
@api_errors('fetch staff workload')
def staff_workload():
    return jsonify(get_staff_workload(get_db(), weekly_hours=current_app.config['WEEKLY_HOURS']))


@bp.get('/<staff_id>')
@api_errors('fetch staff')
def get_staff_member(staff_id):
    return jsonify(_staff_detail(get_db(), staff_id))


@bp.put('/<staff_id>')
@api_errors('update staff')
def update_staff(staff_id):
    data = get_json_body()
    updates = {key: data[key] for key in STAFF_UPDATE_FIELDS if key in data}

    # Optional text fields may be cleared; required ones are skipped when empty
    for key in ('name', 'hourly_cost', 'hours_quota', 'role_id'):
        if key in updates and updates[key] in (None, ''):
            updates.pop(key)
    for key in list(updates):
        if updates[key] == '':
            updates[key] = None

    db = get_db()
    db.update_staff(staff_id, updates)
    return jsonify(_staff_detail(db, staff_id))


@bp.delete('/<staff_id>')
@api_errors('delete staff')
def delete_staff(staff_id):
    get_db().delete_staff(staff_id)
    return jsonify({'success': True})
