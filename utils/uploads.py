"""
Project document uploads.

Files are stored under <upload_root>/<project_id or "general">/ with a
sanitized, timestamped name so repeated uploads of the same file never
collide.
"""
import re
import time
from datetime import datetime, timezone
from pathlib import Path

from utils.logger import get_logger

logger = get_logger(__name__)

GENERAL_FOLDER = 'general'
UPLOAD_URL_PREFIX = '/uploads'

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9_-]')


def safe_filename(original_name, timestamp_ms):
    """'My Plan (v2).pdf' -> 'My_Plan__v2__<timestamp_ms>.pdf'"""
    name = Path(original_name or 'upload').name
    path = Path(name)
    extension = path.suffix
    base_name = path.stem if extension else name
    safe_base = _UNSAFE_CHARS.sub('_', base_name) or 'upload'
    return f"{safe_base}_{timestamp_ms}{extension}"


def _folder_for(project_id):
    if not project_id:
        return GENERAL_FOLDER
    folder = _UNSAFE_CHARS.sub('_', str(project_id))
    return folder or GENERAL_FOLDER


def resolve_upload_path(upload_root, relative_path):
    """
    Resolve a stored upload path, refusing anything outside upload_root.

    Raises ValueError for paths that escape the root.
    """
    root = Path(upload_root).resolve()
    candidate = (root / relative_path).resolve()
    try:
        candidate.relative_to(root)
    except ValueError as exc:
        raise ValueError(f"Upload path must be inside {root}") from exc
    return candidate


def save_upload(content, original_name, project_id=None, upload_root='uploads'):
    """
    Write uploaded bytes to disk.

    Args:
        content: File content as bytes
        original_name: Name the client sent
        project_id: Owning project, or None for the shared folder
        upload_root: Base upload directory

    Returns:
        dict with the original name, the public url and the upload time
    """
    if content is None:
        raise ValueError("No file provided")
    if not original_name:
        raise ValueError("Uploaded file has no name")

    folder = _folder_for(project_id)
    target_dir = Path(upload_root) / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    # Exclusive create; a name taken in the same millisecond moves to the next one
    timestamp_ms = int(time.time() * 1000)
    while True:
        file_name = safe_filename(original_name, timestamp_ms)
        file_path = target_dir / file_name
        try:
            with open(file_path, 'xb') as f:
                f.write(content)
            break
        except FileExistsError:
            timestamp_ms += 1

    logger.info(f"Stored upload '{original_name}' at {file_path} ({len(content)} bytes)")

    return {
        'name': original_name,
        'url': f"{UPLOAD_URL_PREFIX}/{folder}/{file_name}",
        'uploaded_at': datetime.now(timezone.utc).isoformat(timespec='seconds'),
    }
