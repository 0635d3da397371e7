"""
Test DatabaseManager CRUD, constraints and JSON list fields.
"""

import sqlite3

import pytest

from utils.database import DatabaseManager, decode_json_field, encode_json_field
from utils.errors import RecordNotFound


class TestSchema:
    """Test table creation and connection settings."""

    def test_new_database_is_empty(self, db):
        assert db.is_empty()

    def test_foreign_keys_enabled(self, db):
        assert db.conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_reopen_existing_file(self, tmp_path):
        first = DatabaseManager(tmp_path / 'reopen.db')
        first.add_role({'role_name': 'PM', 'default_allocation_percentage': 10})
        first.close()

        second = DatabaseManager(tmp_path / 'reopen.db')
        assert len(second.get_roles()) == 1
        second.close()

    def test_reset_database(self, seeded_db):
        seeded_db.reset_database()
        assert seeded_db.is_empty()


class TestRoles:
    """Test role creation and the batch percentage update."""

    def test_add_and_order(self, db, roles_100):
        roles = db.get_roles()
        assert roles['role_name'].tolist() == ['Developer', 'QA', 'PM']

    def test_add_requires_fields(self, db):
        with pytest.raises(ValueError):
            db.add_role({'role_name': 'PM'})

    @pytest.mark.parametrize('percentage', [-1, 101])
    def test_add_rejects_out_of_range(self, db, percentage):
        with pytest.raises(ValueError):
            db.add_role({'role_name': 'PM', 'default_allocation_percentage': percentage})

    def test_duplicate_name(self, db, roles_100):
        with pytest.raises(sqlite3.IntegrityError):
            db.add_role({'role_name': 'PM', 'default_allocation_percentage': 5})

    def test_batch_update(self, db, roles_100):
        roles = db.update_role_percentages([
            {'id': 'r-pm', 'default_allocation_percentage': 10},
            {'id': 'r-dev', 'default_allocation_percentage': 60},
            {'id': 'r-qa', 'default_allocation_percentage': 30},
        ])
        assert dict(zip(roles['id'], roles['default_allocation_percentage'])) == {
            'r-dev': 60, 'r-qa': 30, 'r-pm': 10,
        }

    @pytest.mark.parametrize('dev_pct', [49.99, 50.01])
    def test_batch_update_within_tolerance(self, db, roles_100, dev_pct):
        db.update_role_percentages([
            {'id': 'r-pm', 'default_allocation_percentage': 20},
            {'id': 'r-dev', 'default_allocation_percentage': dev_pct},
            {'id': 'r-qa', 'default_allocation_percentage': 30},
        ])
        assert db.get_role('r-dev')['default_allocation_percentage'] == dev_pct

    @pytest.mark.parametrize('dev_pct', [49.9, 50.1, 0])
    def test_batch_update_rejects_bad_total(self, db, roles_100, dev_pct):
        with pytest.raises(ValueError, match='100%'):
            db.update_role_percentages([
                {'id': 'r-pm', 'default_allocation_percentage': 20},
                {'id': 'r-dev', 'default_allocation_percentage': dev_pct},
                {'id': 'r-qa', 'default_allocation_percentage': 30},
            ])
        assert db.get_role('r-dev')['default_allocation_percentage'] == 50

    def test_batch_update_unknown_id_rolls_back(self, db, roles_100):
        with pytest.raises(RecordNotFound):
            db.update_role_percentages([
                {'id': 'r-pm', 'default_allocation_percentage': 70},
                {'id': 'missing', 'default_allocation_percentage': 30},
            ])
        assert db.get_role('r-pm')['default_allocation_percentage'] == 20

    def test_batch_update_requires_list(self, db):
        with pytest.raises(ValueError):
            db.update_role_percentages([])


class TestStaff:
    """Test staff CRUD and profile fields."""

    def test_add_defaults(self, db, roles_100):
        staff_id = db.add_staff({'name': 'Dana', 'hourly_cost': 95})
        member = db.get_staff_member(staff_id)

        assert member['hours_quota'] == 40
        assert member['role_id'] == 'r-dev'
        assert member['role_name'] == 'Developer'
        assert member['skills'] == []

    def test_add_requires_name_and_cost(self, db, roles_100):
        with pytest.raises(ValueError):
            db.add_staff({'name': 'No cost'})

    def test_add_without_roles(self, db):
        with pytest.raises(ValueError, match='No roles'):
            db.add_staff({'name': 'Dana', 'hourly_cost': 95})

    def test_add_unknown_role(self, db, roles_100):
        with pytest.raises(RecordNotFound):
            db.add_staff({'name': 'Dana', 'hourly_cost': 95, 'role_id': 'missing'})

    def test_profile_lists_round_trip(self, db, staff_id):
        education = [{'degree': 'BS', 'institution': 'MIT', 'year': '2010'}]
        member = db.update_staff(staff_id, {
            'skills': ['Python', 'SQL'],
            'education': education,
            'bio': 'Hello',
        })

        assert member['skills'] == ['Python', 'SQL']
        assert member['education'] == education
        assert member['bio'] == 'Hello'

    def test_update_empty_name(self, db, staff_id):
        with pytest.raises(ValueError):
            db.update_staff(staff_id, {'name': ''})

    def test_update_missing(self, db, roles_100):
        with pytest.raises(RecordNotFound):
            db.update_staff('missing', {'title': 'x'})

    def test_delete_cascades_assignments(self, db, project_id, staff_id, roles_100):
        db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)

        db.delete_staff(staff_id)

        assert db.get_assignments().empty
        with pytest.raises(RecordNotFound):
            db.get_staff_member(staff_id)

    def test_delete_missing(self, db):
        with pytest.raises(RecordNotFound):
            db.delete_staff('missing')


class TestProjects:
    """Test project CRUD and derived total hours."""

    def test_add_derives_total_hours(self, db, project_id):
        project = db.get_project(project_id)
        assert project['total_hours'] == 600
        assert project['status'] == 'Active'
        assert project['tech_stack'] == []
        assert project['documents'] == []

    def test_add_requires_fields(self, db):
        with pytest.raises(ValueError):
            db.add_project({'name': 'x', 'deal_size': 1000})

    def test_add_rejects_bad_status(self, db):
        with pytest.raises(ValueError):
            db.add_project({'name': 'x', 'deal_size': 1000, 'blended_rate': 100, 'status': 'Lost'})

    def test_update_ignores_total_hours(self, db, project_id):
        project = db.update_project(project_id, {'total_hours': 1, 'blended_rate': 150})
        assert project['total_hours'] == 500

    def test_update_empty_status_keeps_existing(self, db, project_id):
        db.update_project(project_id, {'status': 'Potential'})
        project = db.update_project(project_id, {'status': ''})
        assert project['status'] == 'Potential'

    def test_update_rejects_zero_rate(self, db, project_id):
        with pytest.raises(ValueError):
            db.update_project(project_id, {'blended_rate': 0})

    def test_update_missing(self, db):
        with pytest.raises(RecordNotFound):
            db.update_project('missing', {'name': 'x'})

    def test_filters(self, db, roles_100):
        db.add_project({'name': 'Alpha', 'deal_size': 1000, 'blended_rate': 100, 'status': 'Active'})
        db.add_project({'name': 'Beta', 'deal_size': 1000, 'blended_rate': 100, 'status': 'Potential',
                        'partner_name': 'Alpha Partners'})
        db.add_project({'name': 'Gamma', 'deal_size': 1000, 'blended_rate': 100, 'status': 'Completed'})

        assert set(db.get_projects({'status': ['Active', 'Potential']})['name']) == {'Alpha', 'Beta'}
        assert set(db.get_projects({'search': 'alpha'})['name']) == {'Alpha', 'Beta'}
        assert len(db.get_projects()) == 3

    def test_documents(self, db, project_id):
        doc = {'name': 'plan.pdf', 'url': '/uploads/p-1/plan_1.pdf', 'uploaded_at': '2024-01-01T00:00:00'}
        db.add_project_document(project_id, doc)
        assert db.get_project(project_id)['documents'] == [doc]

    def test_delete_cascades_assignments(self, db, project_id, staff_id, roles_100):
        db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)

        db.delete_project(project_id)

        assert db.get_assignments().empty

    def test_delete_missing(self, db):
        with pytest.raises(RecordNotFound):
            db.delete_project('missing')


class TestAssignments:
    """Test the assignment upsert, hour updates and logging."""

    def test_upsert_creates_then_updates(self, db, project_id, staff_id, roles_100):
        first = db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)
        second = db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=25)

        assert first['id'] == second['id']
        assert second['allocated_hours'] == 25
        assert len(db.get_assignments()) == 1

    def test_upsert_keeps_unspecified_hours(self, db, project_id, staff_id, roles_100):
        db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10, logged_hours=4)
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=12)
        assert assignment['logged_hours'] == 4

    def test_same_staff_different_roles(self, db, project_id, staff_id, roles_100):
        db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)
        db.upsert_assignment(project_id, staff_id, roles_100['qa'], allocated_hours=10)
        assert len(db.get_assignments(project_id=project_id)) == 2

    def test_joined_names(self, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['qa'])
        assert assignment['project_name'] == 'Website'
        assert assignment['staff_name'] == 'Alice'
        assert assignment['role_name'] == 'QA'
        assert assignment['allocated_hours'] == 0

    def test_upsert_unknown_references(self, db, project_id, staff_id, roles_100):
        with pytest.raises(RecordNotFound):
            db.upsert_assignment('missing', staff_id, roles_100['pm'])
        with pytest.raises(RecordNotFound):
            db.upsert_assignment(project_id, 'missing', roles_100['pm'])
        with pytest.raises(RecordNotFound):
            db.upsert_assignment(project_id, staff_id, 'missing')

    def test_upsert_negative_hours(self, db, project_id, staff_id, roles_100):
        with pytest.raises(ValueError):
            db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=-1)

    def test_update_assignment(self, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)
        updated = db.update_assignment(assignment['id'], {'allocated_hours': 20, 'logged_hours': None})
        assert updated['allocated_hours'] == 20
        assert updated['logged_hours'] == 0

    def test_update_rejects_other_fields(self, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'])
        with pytest.raises(ValueError):
            db.update_assignment(assignment['id'], {'role_id': roles_100['qa']})

    def test_log_hours_accumulates(self, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)
        db.log_hours(assignment['id'], 3)
        updated = db.log_hours(assignment['id'], 2.5)
        assert updated['logged_hours'] == 5.5

    def test_log_hours_cannot_go_negative(self, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'], logged_hours=2)
        with pytest.raises(ValueError):
            db.log_hours(assignment['id'], -5)

    def test_filters(self, db, project_id, staff_id, roles_100):
        bob = db.add_staff({'name': 'Bob', 'hourly_cost': 100})
        db.upsert_assignment(project_id, staff_id, roles_100['pm'])
        db.upsert_assignment(project_id, bob, roles_100['dev'])

        assert len(db.get_assignments(project_id=project_id)) == 2
        assert db.get_assignments(staff_id=bob)['staff_name'].tolist() == ['Bob']

    def test_delete(self, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'])
        db.delete_assignment(assignment['id'])
        with pytest.raises(RecordNotFound):
            db.get_assignment(assignment['id'])
        with pytest.raises(RecordNotFound):
            db.delete_assignment(assignment['id'])


class TestJsonFields:
    """Test encoding and decoding of JSON list columns."""

    def test_encode(self):
        assert encode_json_field(['a', 'b']) == '["a", "b"]'
        assert encode_json_field(None) is None
        assert encode_json_field('  ') is None

    def test_decode(self):
        assert decode_json_field('["a"]') == ['a']
        assert decode_json_field(None) == []
        assert decode_json_field('not json') == []
        assert decode_json_field(float('nan')) == []

    def test_malformed_column_reads_as_empty(self, db, staff_id):
        db.conn.execute("UPDATE staff SET skills = ? WHERE id = ?", ('{broken', staff_id))
        assert db.get_staff_member(staff_id)['skills'] == []
