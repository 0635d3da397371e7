"""
pytest fixtures for the staffing dashboard

Provides a throwaway SQLite database per test, a seeded variant, and a
Flask test client wired to that database.
"""

import pytest

from api.app import create_app
from utils.database import DatabaseManager
from utils.sample_data import generate_sample_data


@pytest.fixture
def db(tmp_path):
    """
    Empty DatabaseManager backed by a file in tmp_path.

    Closed after the test.
    """
    manager = DatabaseManager(tmp_path / 'test.db')
    yield manager
    manager.close()


@pytest.fixture
def seeded_db(db):
    """Database loaded with the sample roles, staff, projects and assignments."""
    generate_sample_data(db)
    return db


@pytest.fixture
def roles_100(db):
    """
    Three roles whose percentages total exactly 100.

    Returns:
        dict of role name -> role id
    """
    return {
        'pm': db.add_role({'id': 'r-pm', 'role_name': 'PM', 'default_allocation_percentage': 20}),
        'dev': db.add_role({'id': 'r-dev', 'role_name': 'Developer', 'default_allocation_percentage': 50}),
        'qa': db.add_role({'id': 'r-qa', 'role_name': 'QA', 'default_allocation_percentage': 30}),
    }


@pytest.fixture
def project_id(db, roles_100):
    """A 75000 / 125 project (600 total hours) on top of roles_100."""
    return db.add_project({
        'id': 'p-1',
        'name': 'Website',
        'deal_size': 75000,
        'blended_rate': 125,
    })


@pytest.fixture
def staff_id(db, roles_100):
    return db.add_staff({'id': 's-1', 'name': 'Alice', 'hourly_cost': 150, 'role_id': roles_100['pm']})


@pytest.fixture
def app(db, tmp_path):
    """
    Flask app for testing.

    Uses the per-test database and an upload directory under tmp_path.
    """
    app = create_app(
        config={'TESTING': True, 'UPLOAD_DIR': str(tmp_path / 'uploads')},
        db_manager=db,
    )
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
