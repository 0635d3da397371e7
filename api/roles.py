"""Role endpoints: list, create, and the batch percentage update."""
from flask import Blueprint, jsonify

from api.helpers import api_errors, get_db, get_json_body, json_error
from utils.database import frame_to_records

bp = Blueprint('roles', __name__, url_prefix='/api/roles')


@bp.get('')
@api_errors('fetch roles')
def list_roles():
    return jsonify(frame_to_records(get_db().get_roles()))


@bp.post('')
@api_errors('create role')
def create_role():
    data = get_json_body()
    if not data.get('role_name') or data.get('default_allocation_percentage') is None:
        return json_error('Role name and default allocation percentage are required', 400)

    db = get_db()
    role_id = db.add_role({
        'role_name': data['role_name'],
        'default_allocation_percentage': data['default_allocation_percentage'],
    })
    return jsonify(db.get_role(role_id)), 201


@bp.put('')
@api_errors('update roles')
def update_role_percentages():
    """Body: {"roles": [{"id": ..., "default_allocation_percentage": ...}, ...]}; must total 100%."""
    data = get_json_body()
    roles = data.get('roles')
    if not roles or not isinstance(roles, list):
        return json_error('Roles array is required', 400)

    updated = get_db().update_role_percentages(roles)
    return jsonify(frame_to_records(updated))
