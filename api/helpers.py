"""
API helper utilities for common patterns.

This module provides reusable helpers for:
- Error handler registration
- Per-endpoint exception mapping
- Request body parsing
- Record serialization
"""
import sqlite3
from functools import wraps
from typing import Any, Dict, List

import pandas as pd
from flask import current_app, jsonify, request

from utils.database import PROJECT_JSON_FIELDS, STAFF_JSON_FIELDS, decode_json_field, frame_to_records
from utils.errors import RecordNotFound
from utils.logger import get_logger

logger = get_logger(__name__)


def register_error_handlers(app):
    """
    Register JSON error handlers for common HTTP error codes.

    Usage:
        app = Flask(__name__)
        register_error_handlers(app)
    """

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({'error': str(e.description) if hasattr(e, 'description') else 'Bad request'}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({'error': 'Internal server error'}), 500


def json_error(message, status):
    return jsonify({'error': message}), status


def api_errors(action):
    """
    Map exceptions raised inside an endpoint to JSON error responses.

    RecordNotFound -> 404 with its message
    ValueError / sqlite3.IntegrityError -> 400 with the message
    anything else -> 500 with "Failed to <action>" (traceback logged)
    """
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except RecordNotFound as exc:
                return json_error(str(exc), 404)
            except (ValueError, sqlite3.IntegrityError) as exc:
                logger.warning(f"Rejected request to {action}: {exc}")
                return json_error(str(exc), 400)
            except Exception:
                logger.exception(f"Error trying to {action}")
                return json_error(f"Failed to {action}", 500)
        return wrapper
    return decorator


def get_db():
    return current_app.config['DB_MANAGER']


def get_json_body() -> Dict[str, Any]:
    """Request JSON as a dict; a missing or non-object body raises ValueError."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def decode_record(record: Dict, json_fields) -> Dict:
    for key in json_fields:
        if key in record:
            record[key] = decode_json_field(record[key])
    return record


def serialize_assignments(assignments_df: pd.DataFrame) -> List[Dict]:
    return frame_to_records(assignments_df)


def serialize_projects(projects_df: pd.DataFrame, assignments_df: pd.DataFrame) -> List[Dict]:
    """Project records with decoded list fields and their assignments nested"""
    projects = [decode_record(p, PROJECT_JSON_FIELDS) for p in frame_to_records(projects_df)]
    assignments = serialize_assignments(assignments_df)
    for project in projects:
        project['assignments'] = [a for a in assignments if a['project_id'] == project['id']]
    return projects


def serialize_staff(staff_df: pd.DataFrame, assignments_df: pd.DataFrame) -> List[Dict]:
    """Staff records with decoded profile fields and their assignments nested"""
    members = [decode_record(s, STAFF_JSON_FIELDS) for s in frame_to_records(staff_df)]
    assignments = serialize_assignments(assignments_df)
    for member in members:
        member['assignments'] = [a for a in assignments if a['staff_id'] == member['id']]
    return members
