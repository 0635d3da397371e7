"""
Test the JSON API endpoints through the Flask test client.
"""

import io

import pytest


class TestHealth:

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok'}

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert 'error' in response.get_json()


class TestRoleEndpoints:
    """Test /api/roles."""

    def test_list(self, client, roles_100):
        response = client.get('/api/roles')
        assert response.status_code == 200
        assert [r['role_name'] for r in response.get_json()] == ['Developer', 'QA', 'PM']

    def test_create(self, client):
        response = client.post('/api/roles', json={'role_name': 'Designer', 'default_allocation_percentage': 15})
        assert response.status_code == 201
        body = response.get_json()
        assert body['role_name'] == 'Designer'
        assert body['default_allocation_percentage'] == 15

    def test_create_missing_fields(self, client):
        response = client.post('/api/roles', json={'role_name': 'Designer'})
        assert response.status_code == 400

    def test_create_duplicate(self, client, roles_100):
        response = client.post('/api/roles', json={'role_name': 'PM', 'default_allocation_percentage': 5})
        assert response.status_code == 400

    def test_batch_update(self, client, roles_100):
        response = client.put('/api/roles', json={'roles': [
            {'id': 'r-pm', 'default_allocation_percentage': 25},
            {'id': 'r-dev', 'default_allocation_percentage': 50},
            {'id': 'r-qa', 'default_allocation_percentage': 25},
        ]})
        assert response.status_code == 200
        assert {r['id']: r['default_allocation_percentage'] for r in response.get_json()}['r-pm'] == 25

    def test_batch_update_bad_total(self, client, roles_100):
        response = client.put('/api/roles', json={'roles': [
            {'id': 'r-pm', 'default_allocation_percentage': 30},
            {'id': 'r-dev', 'default_allocation_percentage': 50},
            {'id': 'r-qa', 'default_allocation_percentage': 30},
        ]})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Total allocation must equal 100%'

    def test_batch_update_requires_array(self, client):
        response = client.put('/api/roles', json={'roles': 'nope'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Roles array is required'


class TestStaffEndpoints:
    """Test /api/staff."""

    def test_create_and_get(self, client, roles_100):
        response = client.post('/api/staff', json={
            'name': 'Dana', 'hourly_cost': 95, 'skills': ['Go'], 'role_id': 'r-qa',
        })
        assert response.status_code == 201
        staff_id = response.get_json()['id']

        response = client.get(f'/api/staff/{staff_id}')
        body = response.get_json()
        assert response.status_code == 200
        assert body['skills'] == ['Go']
        assert body['role_name'] == 'QA'
        assert body['assignments'] == []
        assert body['total_allocated_hours'] == 0

    def test_create_missing_fields(self, client, roles_100):
        assert client.post('/api/staff', json={'name': 'Dana'}).status_code == 400

    def test_list_includes_totals(self, client, seeded_db):
        response = client.get('/api/staff')
        staff = {s['id']: s for s in response.get_json()}

        alice = staff['staff-alice']
        assert alice['total_allocated_hours'] == 160
        assert alice['total_logged_hours'] == 75
        assert len(alice['assignments']) == 2
        assert alice['is_over_allocated'] is True

    def test_update_clears_optional_fields(self, client, staff_id):
        client.put(f'/api/staff/{staff_id}', json={'title': 'Lead'})
        response = client.put(f'/api/staff/{staff_id}', json={'title': '', 'name': ''})
        body = response.get_json()
        assert response.status_code == 200
        assert body['title'] is None
        assert body['name'] == 'Alice'

    def test_missing_member(self, client):
        assert client.get('/api/staff/missing').status_code == 404
        assert client.put('/api/staff/missing', json={'title': 'x'}).status_code == 404
        assert client.delete('/api/staff/missing').status_code == 404

    def test_delete(self, client, staff_id):
        assert client.delete(f'/api/staff/{staff_id}').get_json() == {'success': True}
        assert client.get(f'/api/staff/{staff_id}').status_code == 404

    def test_workload(self, client, seeded_db):
        response = client.get('/api/staff/workload')
        workload = {w['staff_id']: w for w in response.get_json()}
        assert response.status_code == 200
        assert workload['staff-dave']['total_allocated_hours'] == 650
        assert workload['staff-dave']['role_name'] == 'Software Developer'


class TestProjectEndpoints:
    """Test /api/projects."""

    def test_create(self, client, roles_100):
        response = client.post('/api/projects', json={
            'name': 'Portal', 'deal_size': 75000, 'blended_rate': 125, 'tech_stack': ['React'],
        })
        body = response.get_json()
        assert response.status_code == 201
        assert body['total_hours'] == 600
        assert body['status'] == 'Active'
        assert body['tech_stack'] == ['React']
        assert body['assignments'] == []

    @pytest.mark.parametrize('payload', [
        {'deal_size': 1000, 'blended_rate': 100},
        {'name': 'x', 'blended_rate': 100},
        {'name': 'x', 'deal_size': 1000},
        {'name': 'x', 'deal_size': 1000, 'blended_rate': 0},
    ])
    def test_create_missing_fields(self, client, payload):
        assert client.post('/api/projects', json=payload).status_code == 400

    def test_list_nests_assignments(self, client, seeded_db):
        projects = {p['id']: p for p in client.get('/api/projects').get_json()}
        assert len(projects) == 3
        assert len(projects['project-website']['assignments']) == 4
        assert projects['project-website']['total_hours'] == 600

    def test_update_deal_size_recalculates(self, client, db, project_id, staff_id, roles_100):
        db.upsert_assignment(project_id, staff_id, roles_100['dev'], allocated_hours=7)

        response = client.put(f'/api/projects/{project_id}', json={'deal_size': 150000})
        body = response.get_json()

        assert response.status_code == 200
        assert body['assignments_recalculated'] is True
        assert body['total_hours'] == 1200
        assert body['assignments'][0]['allocated_hours'] == 600

    def test_update_without_deal_size_change(self, client, db, project_id, staff_id, roles_100):
        db.upsert_assignment(project_id, staff_id, roles_100['dev'], allocated_hours=7)

        response = client.put(f'/api/projects/{project_id}', json={'name': 'Renamed', 'description': ''})
        body = response.get_json()

        assert body['assignments_recalculated'] is False
        assert body['name'] == 'Renamed'
        assert body['description'] is None
        assert body['assignments'][0]['allocated_hours'] == 7

    def test_update_bad_status(self, client, project_id):
        response = client.put(f'/api/projects/{project_id}', json={'status': 'Lost'})
        assert response.status_code == 400

    def test_missing_project(self, client):
        assert client.get('/api/projects/missing').status_code == 404
        assert client.put('/api/projects/missing', json={'name': 'x'}).status_code == 404
        assert client.delete('/api/projects/missing').status_code == 404
        assert client.post('/api/projects/missing/calculate').status_code == 404

    def test_delete(self, client, project_id):
        assert client.delete(f'/api/projects/{project_id}').status_code == 200
        assert client.get(f'/api/projects/{project_id}').status_code == 404

    def test_calculate(self, client, project_id):
        response = client.post(f'/api/projects/{project_id}/calculate')
        body = response.get_json()
        assert response.status_code == 200
        assert body['total_hours'] == 600
        assert [a['role_id'] for a in body['allocations']] == ['r-dev', 'r-qa', 'r-pm']

    def test_auto_assign(self, client, project_id, staff_id, roles_100):
        response = client.post(f'/api/projects/{project_id}/auto-assign', json={
            'assignments': [{'staff_id': staff_id, 'role_id': roles_100['dev']}],
        })
        body = response.get_json()
        assert response.status_code == 200
        assert len(body['assignments']) == 1
        assert body['assignments'][0]['allocated_hours'] == 300

    def test_auto_assign_validation(self, client, project_id):
        url = f'/api/projects/{project_id}/auto-assign'
        assert client.post(url, json={}).status_code == 400
        assert client.post(url, json={'assignments': [{'staff_id': 's-1'}]}).status_code == 400


class TestAssignmentEndpoints:
    """Test /api/assignments."""

    def test_create_and_upsert(self, client, project_id, staff_id, roles_100):
        payload = {'project_id': project_id, 'staff_id': staff_id, 'role_id': roles_100['pm'],
                   'allocated_hours': 50}
        first = client.post('/api/assignments', json=payload)
        second = client.post('/api/assignments', json={**payload, 'allocated_hours': 80})

        assert first.status_code == 201
        assert first.get_json()['id'] == second.get_json()['id']
        assert second.get_json()['allocated_hours'] == 80

    def test_create_missing_fields(self, client, project_id):
        response = client.post('/api/assignments', json={'project_id': project_id})
        assert response.status_code == 400

    def test_create_unknown_staff(self, client, project_id, roles_100):
        response = client.post('/api/assignments', json={
            'project_id': project_id, 'staff_id': 'missing', 'role_id': roles_100['pm'],
        })
        assert response.status_code == 404

    def test_filters(self, client, seeded_db):
        by_project = client.get('/api/assignments?project_id=project-crm').get_json()
        by_staff = client.get('/api/assignments?staff_id=staff-carol').get_json()
        assert len(by_project) == 4
        assert {a['project_id'] for a in by_staff} == {'project-crm', 'project-mobile'}

    def test_update_and_log_hours(self, client, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'], allocated_hours=10)

        response = client.put(f"/api/assignments/{assignment['id']}", json={'allocated_hours': 40})
        assert response.get_json()['allocated_hours'] == 40

        response = client.post('/api/assignments/log-hours', json={
            'assignment_id': assignment['id'], 'hours': 6,
        })
        assert response.status_code == 200
        assert response.get_json()['logged_hours'] == 6

    def test_log_hours_validation(self, client):
        assert client.post('/api/assignments/log-hours', json={'hours': 1}).status_code == 400
        response = client.post('/api/assignments/log-hours', json={'assignment_id': 'missing', 'hours': 1})
        assert response.status_code == 404

    def test_negative_hours(self, client, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'])
        response = client.put(f"/api/assignments/{assignment['id']}", json={'allocated_hours': -1})
        assert response.status_code == 400

    def test_delete(self, client, db, project_id, staff_id, roles_100):
        assignment = db.upsert_assignment(project_id, staff_id, roles_100['pm'])
        assert client.delete(f"/api/assignments/{assignment['id']}").status_code == 200
        assert client.delete(f"/api/assignments/{assignment['id']}").status_code == 404


class TestUploadEndpoints:
    """Test /api/upload and /uploads/<path>."""

    def test_upload_and_download(self, client, project_id):
        response = client.post('/api/upload', data={
            'file': (io.BytesIO(b'hello'), 'My Plan (v2).pdf'),
            'project_id': project_id,
        }, content_type='multipart/form-data')
        body = response.get_json()

        assert response.status_code == 200
        assert body['success'] is True
        assert body['file']['name'] == 'My Plan (v2).pdf'
        assert body['file']['url'].startswith(f'/uploads/{project_id}/My_Plan__v2__')
        assert body['file']['url'].endswith('.pdf')

        download = client.get(body['file']['url'])
        assert download.status_code == 200
        assert download.data == b'hello'

    def test_upload_without_project_goes_to_general(self, client):
        response = client.post('/api/upload', data={
            'file': (io.BytesIO(b'x'), 'notes.txt'),
        }, content_type='multipart/form-data')
        assert response.get_json()['file']['url'].startswith('/uploads/general/notes_')

    def test_upload_without_file(self, client):
        response = client.post('/api/upload', data={}, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_download_missing(self, client):
        assert client.get('/uploads/general/nothing.txt').status_code == 404

    def test_download_traversal(self, client):
        assert client.get('/uploads/../test.db').status_code == 404
