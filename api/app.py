from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from flask import Flask, jsonify

from api import assignments, projects, roles, staff, uploads
from api.helpers import register_error_handlers
from utils.config import load_settings
from utils.database import DatabaseManager
from utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(config: Optional[Dict[str, object]] = None, db_manager: Optional[DatabaseManager] = None) -> Flask:
    """
    Build the JSON API.

    Settings come from the environment (see utils.config) and may be
    overridden with `config` keys: DB_PATH, UPLOAD_DIR, WEEKLY_HOURS,
    TESTING. An existing DatabaseManager can be injected for tests.
    """
    settings = load_settings()
    app = Flask(__name__)
    app.config.update(
        DB_PATH=str(settings.db_path),
        UPLOAD_DIR=str(settings.upload_dir),
        WEEKLY_HOURS=settings.weekly_hours,
    )
    if config:
        app.config.update(config)

    Path(app.config['UPLOAD_DIR']).mkdir(parents=True, exist_ok=True)
    app.config['DB_MANAGER'] = db_manager or DatabaseManager(app.config['DB_PATH'])

    register_error_handlers(app)
    for module in (roles, staff, projects, assignments, uploads):
        app.register_blueprint(module.bp)

    @app.get('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    logger.info(f"API ready: db={app.config['DB_PATH']} uploads={app.config['UPLOAD_DIR']}")
    return app


def main():
    settings = load_settings()
    setup_logging(log_level=getattr(logging, settings.log_level, logging.INFO),
                  log_dir=settings.log_dir, log_name="api.log")
    app = create_app()
    app.run(host="127.0.0.1", port=5000, debug=False)


if __name__ == "__main__":
    main()
