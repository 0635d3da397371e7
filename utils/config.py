"""Runtime settings for the dashboard and the JSON API, read from the environment."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DB_PATH = 'data/staffing_dashboard.db'
DEFAULT_UPLOAD_DIR = 'uploads'
DEFAULT_LOG_DIR = 'logs'

# Weekly hours a staff member is expected to carry when no quota is recorded
DEFAULT_WEEKLY_HOURS = 40.0

PROJECT_STATUSES = ['Active', 'Potential', 'Completed']

# Batch role updates must land on 100% within this tolerance
PERCENTAGE_TOLERANCE = 0.01


def _env_path(name, default):
    return Path(os.getenv(name) or default).expanduser()


def _env_float(name, default):
    value = os.getenv(name)
    if value in (None, ''):
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


@dataclass
class Settings:
    db_path: Path = field(default_factory=lambda: _env_path('STAFFING_DB_PATH', DEFAULT_DB_PATH))
    upload_dir: Path = field(default_factory=lambda: _env_path('STAFFING_UPLOAD_DIR', DEFAULT_UPLOAD_DIR))
    log_dir: Path = field(default_factory=lambda: _env_path('STAFFING_LOG_DIR', DEFAULT_LOG_DIR))
    log_level: str = field(default_factory=lambda: os.getenv('STAFFING_LOG_LEVEL', 'INFO').upper())
    weekly_hours: float = field(default_factory=lambda: _env_float('STAFFING_WEEKLY_HOURS', DEFAULT_WEEKLY_HOURS))


def load_settings():
    """Build a Settings object from the current environment."""
    return Settings()
