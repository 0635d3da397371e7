"""Document upload and download."""
from flask import Blueprint, abort, current_app, jsonify, request, send_file

from api.helpers import api_errors, json_error
from utils.uploads import resolve_upload_path, save_upload

bp = Blueprint('uploads', __name__)


@bp.post('/api/upload')
@api_errors('upload file')
def upload_file():
    """Multipart form: `file` plus an optional `project_id` naming the target folder."""
    file = request.files.get('file')
    if file is None or not file.filename:
        return json_error('No file provided', 400)

    project_id = request.form.get('project_id') or None
    stored = save_upload(
        file.read(),
        file.filename,
        project_id=project_id,
        upload_root=current_app.config['UPLOAD_DIR'],
    )
    return jsonify({'success': True, 'file': stored})


@bp.get('/uploads/<path:file_path>')
def serve_upload(file_path):
    try:
        full_path = resolve_upload_path(current_app.config['UPLOAD_DIR'], file_path)
    except ValueError:
        abort(404)
    if not full_path.is_file():
        abort(404)
    return send_file(full_path)
