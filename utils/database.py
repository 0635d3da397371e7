import sqlite3
import json
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import pandas as pd

from utils.calculations import calculate_total_hours
from utils.config import DEFAULT_DB_PATH, DEFAULT_WEEKLY_HOURS, PERCENTAGE_TOLERANCE, PROJECT_STATUSES
from utils.errors import RecordNotFound
from utils.logger import get_logger

logger = get_logger(__name__)

# Columns holding serialized JSON lists
STAFF_JSON_FIELDS = ('skills', 'education', 'experience', 'certifications')
PROJECT_JSON_FIELDS = ('tech_stack', 'documents')

ROLE_COLUMNS = {'id', 'role_name', 'default_allocation_percentage'}
STAFF_COLUMNS = {
    'id', 'name', 'title', 'role_id', 'hourly_cost', 'hours_quota', 'email', 'phone',
    'bio', 'executive_summary', 'skills', 'education', 'experience', 'certifications',
}
PROJECT_COLUMNS = {
    'id', 'name', 'description', 'status', 'deal_size', 'blended_rate', 'total_hours',
    'start_date', 'end_date', 'period_months', 'enduser_name', 'partner_name',
    'tech_stack', 'google_drive_url', 'documents',
}
ASSIGNMENT_HOUR_COLUMNS = {'allocated_hours', 'logged_hours'}


def encode_json_field(value):
    """Serialize a list/dict for a TEXT column. Strings are stored as given."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def decode_json_field(value):
    """Parse a serialized JSON column. Empty or malformed text yields []."""
    if value is None:
        return []
    if isinstance(value, (list, dict)):
        return value
    if isinstance(value, float) and pd.isna(value):
        return []
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return []


def frame_to_records(df):
    """DataFrame -> list of dicts with NaN replaced by None and plain Python scalars."""
    if df.empty:
        return []
    clean = df.astype(object).where(pd.notna(df), None)
    return clean.to_dict('records')


def _new_id(prefix):
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _now():
    return datetime.now().isoformat()


def _check_columns(data, allowed, table):
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"Unknown {table} field(s): {', '.join(sorted(unknown))}")


def _to_float(value, label):
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must be a number") from exc


class DatabaseManager:
    def __init__(self, db_path=DEFAULT_DB_PATH):
        """Initialize database connection and create tables if they don't exist"""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path), check_same_thread=False, isolation_level=None)
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.create_tables()
        self.migrate_staff_profile_fields()
        self.migrate_project_document_fields()

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self):
        """Run a block of statements in a single BEGIN/COMMIT."""
        cursor = self.conn.cursor()
        cursor.execute("BEGIN")
        try:
            yield cursor
        except Exception:
            cursor.execute("ROLLBACK")
            raise
        else:
            cursor.execute("COMMIT")

    def create_tables(self):
        """Create all necessary tables"""
        cursor = self.conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS roles (
                id TEXT PRIMARY KEY,
                role_name TEXT NOT NULL UNIQUE,
                default_allocation_percentage REAL NOT NULL DEFAULT 0,
                created_at TEXT,
                updated_at TEXT
            )
        ''')

        # Profile list fields (skills, education, experience, certifications) hold JSON text
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS staff (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                title TEXT,
                role_id TEXT,
                hourly_cost REAL NOT NULL,
                hours_quota REAL DEFAULT 40,
                email TEXT,
                phone TEXT,
                bio TEXT,
                executive_summary TEXT,
                skills TEXT,
                education TEXT,
                experience TEXT,
                certifications TEXT,
                created_at TEXT,
                updated_at TEXT,
                FOREIGN KEY (role_id) REFERENCES roles (id)
            )
        ''')

        # total_hours is derived: deal_size / blended_rate
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                status TEXT DEFAULT 'Active',
                deal_size REAL NOT NULL,
                blended_rate REAL NOT NULL,
                total_hours REAL,
                start_date TEXT,
                end_date TEXT,
                period_months INTEGER,
                enduser_name TEXT,
                partner_name TEXT,
                tech_stack TEXT,
                google_drive_url TEXT,
                documents TEXT,
                created_at TEXT,
                updated_at TEXT
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS assignments (
                id TEXT PRIMARY KEY,
                project_id TEXT NOT NULL,
                staff_id TEXT NOT NULL,
                role_id TEXT NOT NULL,
                allocated_hours REAL DEFAULT 0,
                logged_hours REAL DEFAULT 0,
                created_at TEXT,
                updated_at TEXT,
                UNIQUE(project_id, staff_id, role_id),
                FOREIGN KEY (project_id) REFERENCES projects (id) ON DELETE CASCADE,
                FOREIGN KEY (staff_id) REFERENCES staff (id) ON DELETE CASCADE,
                FOREIGN KEY (role_id) REFERENCES roles (id)
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_assignments_project_id ON assignments(project_id)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_assignments_staff_id ON assignments(staff_id)')

        self.conn.commit()

    def migrate_staff_profile_fields(self):
        """
        Add profile columns to staff tables created before profiles existed.
        This migration is safe to run multiple times.
        """
        cursor = self.conn.cursor()
        cursor.execute("PRAGMA table_info(staff)")
        columns = [col[1] for col in cursor.fetchall()]

        for column in ('email', 'phone', 'bio', 'executive_summary') + STAFF_JSON_FIELDS:
            if column not in columns:
                cursor.execute(f'ALTER TABLE staff ADD COLUMN {column} TEXT')
                logger.info(f"Added '{column}' column to staff table")

        self.conn.commit()

    def migrate_project_document_fields(self):
        """
        Add period_months, google_drive_url and documents to older projects tables.
        This migration is safe to run multiple times.
        """
        cursor = self.conn.cursor()
        cursor.execute("PRAGMA table_info(projects)")
        columns = [col[1] for col in cursor.fetchall()]

        if 'period_months' not in columns:
            cursor.execute('ALTER TABLE projects ADD COLUMN period_months INTEGER')
            logger.info("Added 'period_months' column to projects table")
        for column in ('google_drive_url', 'documents'):
            if column not in columns:
                cursor.execute(f'ALTER TABLE projects ADD COLUMN {column} TEXT')
                logger.info(f"Added '{column}' column to projects table")

        self.conn.commit()

    def is_empty(self):
        """Check if database is empty"""
        cursor = self.conn.cursor()
        counts = []
        for table in ('roles', 'staff', 'projects'):
            cursor.execute(f"SELECT COUNT(*) FROM {table}")
            counts.append(cursor.fetchone()[0])
        return all(count == 0 for count in counts)

    def reset_database(self):
        """Drop and recreate every table. All data is lost."""
        cursor = self.conn.cursor()
        for table in ('assignments', 'projects', 'staff', 'roles'):
            cursor.execute(f"DROP TABLE IF EXISTS {table}")
        self.conn.commit()
        self.create_tables()
        logger.warning("Database reset: all tables dropped and recreated")

    def _fetch_one(self, query, params=()):
        cursor = self.conn.cursor()
        cursor.execute(query, params)
        row = cursor.fetchone()
        if row is None:
            return None
        columns = [col[0] for col in cursor.description]
        return dict(zip(columns, row))

    def _require(self, table, record_id, kind):
        row = self._fetch_one(f"SELECT id FROM {table} WHERE id = ?", (record_id,))
        if row is None:
            raise RecordNotFound(kind, record_id)

    # Role methods
    def get_roles(self):
        """Get all roles, highest default percentage first"""
        query = "SELECT * FROM roles ORDER BY default_allocation_percentage DESC, role_name"
        return pd.read_sql_query(query, self.conn)

    def get_role(self, role_id):
        role = self._fetch_one("SELECT * FROM roles WHERE id = ?", (role_id,))
        if role is None:
            raise RecordNotFound('Role', role_id)
        return role

    def get_role_by_name(self, role_name):
        return self._fetch_one("SELECT * FROM roles WHERE role_name = ?", (role_name,))

    def get_default_role(self):
        """Role given to new staff when none is chosen: the largest default share"""
        return self._fetch_one(
            "SELECT * FROM roles ORDER BY default_allocation_percentage DESC, role_name LIMIT 1"
        )

    def add_role(self, role_data):
        """Add a new role and return its id"""
        role_data = dict(role_data)
        _check_columns(role_data, ROLE_COLUMNS, 'role')

        if not role_data.get('role_name') or role_data.get('default_allocation_percentage') is None:
            raise ValueError("Role name and default allocation percentage are required")

        percentage = _to_float(role_data['default_allocation_percentage'], 'Default allocation percentage')
        if percentage < 0 or percentage > 100:
            raise ValueError("Default allocation percentage must be between 0 and 100")

        role_data['default_allocation_percentage'] = percentage
        role_data.setdefault('id', _new_id('role'))
        role_data['created_at'] = _now()
        role_data['updated_at'] = _now()

        columns = list(role_data.keys())
        placeholders = ','.join('?' * len(columns))
        query = f"INSERT INTO roles ({','.join(columns)}) VALUES ({placeholders})"

        cursor = self.conn.cursor()
        cursor.execute(query, list(role_data.values()))
        self.conn.commit()
        logger.info(f"Added role '{role_data['role_name']}' ({percentage}%)")
        return role_data['id']

    def update_role_percentages(self, updates):
        """
        Batch update default allocation percentages.

        Args:
            updates: list of {'id': ..., 'default_allocation_percentage': ...}

        The percentages in the batch must total 100 (±0.01). All rows are
        written in one transaction; an unknown id rolls the batch back.
        """
        if not isinstance(updates, list) or not updates:
            raise ValueError("Roles array is required")

        parsed = []
        for item in updates:
            if not isinstance(item, dict) or 'id' not in item:
                raise ValueError("Each role update needs an id")
            parsed.append((item['id'], _to_float(item.get('default_allocation_percentage'),
                                                 'Default allocation percentage')))

        total = sum(percentage for _, percentage in parsed)
        if round(abs(total - 100), 6) > PERCENTAGE_TOLERANCE:
            raise ValueError("Total allocation must equal 100%")

        now = _now()
        with self.transaction() as cursor:
            for role_id, percentage in parsed:
                cursor.execute(
                    "UPDATE roles SET default_allocation_percentage = ?, updated_at = ? WHERE id = ?",
                    (percentage, now, role_id)
                )
                if cursor.rowcount == 0:
                    raise RecordNotFound('Role', role_id)

        logger.info(f"Updated allocation percentages for {len(parsed)} roles")
        return self.get_roles()

    # Staff methods
    def get_staff(self):
        """Get all staff with their role name, ordered by name"""
        query = """
            SELECT s.*, r.role_name
            FROM staff s
            LEFT JOIN roles r ON s.role_id = r.id
            ORDER BY s.name
        """
        return pd.read_sql_query(query, self.conn)

    def get_staff_member(self, staff_id):
        """Get one staff member with profile list fields decoded"""
        member = self._fetch_one("""
            SELECT s.*, r.role_name
            FROM staff s
            LEFT JOIN roles r ON s.role_id = r.id
            WHERE s.id = ?
        """, (staff_id,))
        if member is None:
            raise RecordNotFound('Staff member', staff_id)
        for key in STAFF_JSON_FIELDS:
            member[key] = decode_json_field(member.get(key))
        return member

    def add_staff(self, staff_data):
        """Add a new staff member and return its id"""
        staff_data = dict(staff_data)
        _check_columns(staff_data, STAFF_COLUMNS, 'staff')

        if not staff_data.get('name') or staff_data.get('hourly_cost') is None:
            raise ValueError("Name and hourly cost are required")

        staff_data['hourly_cost'] = _to_float(staff_data['hourly_cost'], 'Hourly cost')
        quota = staff_data.get('hours_quota')
        staff_data['hours_quota'] = _to_float(quota, 'Hours quota') if quota else DEFAULT_WEEKLY_HOURS

        if staff_data.get('role_id'):
            self._require('roles', staff_data['role_id'], 'Role')
        else:
            default_role = self.get_default_role()
            if default_role is None:
                raise ValueError("No roles available")
            staff_data['role_id'] = default_role['id']

        for key in STAFF_JSON_FIELDS:
            if key in staff_data:
                staff_data[key] = encode_json_field(staff_data[key])

        staff_data.setdefault('id', _new_id('staff'))
        staff_data['created_at'] = _now()
        staff_data['updated_at'] = _now()

        columns = list(staff_data.keys())
        placeholders = ','.join('?' * len(columns))
        query = f"INSERT INTO staff ({','.join(columns)}) VALUES ({placeholders})"

        cursor = self.conn.cursor()
        cursor.execute(query, list(staff_data.values()))
        self.conn.commit()
        logger.info(f"Added staff member '{staff_data['name']}' ({staff_data['id']})")
        return staff_data['id']

    def update_staff(self, staff_id, updates):
        """Partially update a staff member and return the updated record"""
        updates = {k: v for k, v in dict(updates).items() if k != 'id'}
        _check_columns(updates, STAFF_COLUMNS, 'staff')

        if 'name' in updates and not updates['name']:
            raise ValueError("Name cannot be empty")
        if 'hourly_cost' in updates:
            updates['hourly_cost'] = _to_float(updates['hourly_cost'], 'Hourly cost')
        if 'hours_quota' in updates:
            updates['hours_quota'] = _to_float(updates['hours_quota'], 'Hours quota')
        if updates.get('role_id'):
            self._require('roles', updates['role_id'], 'Role')
        for key in STAFF_JSON_FIELDS:
            if key in updates:
                updates[key] = encode_json_field(updates[key])

        if not updates:
            return self.get_staff_member(staff_id)

        updates['updated_at'] = _now()
        set_clause = ','.join([f"{k}=?" for k in updates.keys()])
        query = f"UPDATE staff SET {set_clause} WHERE id=?"

        cursor = self.conn.cursor()
        cursor.execute(query, list(updates.values()) + [staff_id])
        if cursor.rowcount == 0:
            raise RecordNotFound('Staff member', staff_id)
        self.conn.commit()
        return self.get_staff_member(staff_id)

    def delete_staff(self, staff_id):
        """Delete a staff member; their assignments are removed with them"""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM staff WHERE id = ?", (staff_id,))
        if cursor.rowcount == 0:
            raise RecordNotFound('Staff member', staff_id)
        self.conn.commit()
        logger.info(f"Deleted staff member {staff_id}")

    # Project methods
    def get_projects(self, filters=None):
        """Get all projects (newest first) or filtered projects"""
        query = "SELECT * FROM projects"
        params = []

        if filters:
            conditions = []
            if 'status' in filters and filters['status']:
                placeholders = ','.join('?' * len(filters['status']))
                conditions.append(f"status IN ({placeholders})")
                params.extend(filters['status'])
            if filters.get('search'):
                conditions.append("(name LIKE ? OR enduser_name LIKE ? OR partner_name LIKE ?)")
                term = f"%{filters['search']}%"
                params.extend([term, term, term])

            if conditions:
                query += " WHERE " + " AND ".join(conditions)

        query += " ORDER BY created_at DESC"
        return pd.read_sql_query(query, self.conn, params=params)

    def get_project(self, project_id):
        """Get one project with tech stack and documents decoded"""
        project = self._fetch_one("SELECT * FROM projects WHERE id = ?", (project_id,))
        if project is None:
            raise RecordNotFound('Project', project_id)
        for key in PROJECT_JSON_FIELDS:
            project[key] = decode_json_field(project.get(key))
        return project

    def _prepare_project_fields(self, project_data):
        if 'status' in project_data:
            if not project_data['status']:
                project_data['status'] = PROJECT_STATUSES[0]
            elif project_data['status'] not in PROJECT_STATUSES:
                raise ValueError(f"Status must be one of: {', '.join(PROJECT_STATUSES)}")
        if 'period_months' in project_data:
            months = project_data['period_months']
            project_data['period_months'] = int(_to_float(months, 'Period months')) if months not in ('', None) else None
        for key in PROJECT_JSON_FIELDS:
            if key in project_data:
                project_data[key] = encode_json_field(project_data[key])
        return project_data

    def add_project(self, project_data):
        """Add a new project, deriving total_hours, and return its id"""
        project_data = dict(project_data)
        _check_columns(project_data, PROJECT_COLUMNS, 'project')

        if not project_data.get('name') or not project_data.get('deal_size') or not project_data.get('blended_rate'):
            raise ValueError("Name, deal size, and blended rate are required")

        project_data['deal_size'] = _to_float(project_data['deal_size'], 'Deal size')
        project_data['blended_rate'] = _to_float(project_data['blended_rate'], 'Blended rate')
        project_data['total_hours'] = calculate_total_hours(project_data['deal_size'], project_data['blended_rate'])
        project_data.setdefault('status', PROJECT_STATUSES[0])
        self._prepare_project_fields(project_data)

        project_data.setdefault('id', _new_id('project'))
        project_data['created_at'] = _now()
        project_data['updated_at'] = _now()

        columns = list(project_data.keys())
        placeholders = ','.join('?' * len(columns))
        query = f"INSERT INTO projects ({','.join(columns)}) VALUES ({placeholders})"

        cursor = self.conn.cursor()
        cursor.execute(query, list(project_data.values()))
        self.conn.commit()
        logger.info(
            f"Added project '{project_data['name']}' ({project_data['id']}): "
            f"{project_data['total_hours']:.1f} hrs"
        )
        return project_data['id']

    def update_project(self, project_id, updates):
        """
        Partially update a project and return the updated record.

        total_hours is always re-derived from the merged deal size and rate;
        a caller-supplied total_hours is ignored.
        """
        updates = {k: v for k, v in dict(updates).items() if k not in ('id', 'total_hours')}
        _check_columns(updates, PROJECT_COLUMNS, 'project')

        existing = self.get_project(project_id)

        if 'name' in updates and not updates['name']:
            raise ValueError("Name cannot be empty")
        if 'status' in updates and not updates['status']:
            updates.pop('status')
        if updates.get('deal_size') is None:
            updates.pop('deal_size', None)
        else:
            updates['deal_size'] = _to_float(updates['deal_size'], 'Deal size')
        if updates.get('blended_rate') is None:
            updates.pop('blended_rate', None)
        else:
            updates['blended_rate'] = _to_float(updates['blended_rate'], 'Blended rate')

        deal_size = updates.get('deal_size', existing['deal_size'])
        blended_rate = updates.get('blended_rate', existing['blended_rate'])
        updates['total_hours'] = calculate_total_hours(deal_size, blended_rate)
        self._prepare_project_fields(updates)

        updates['updated_at'] = _now()
        set_clause = ','.join([f"{k}=?" for k in updates.keys()])
        query = f"UPDATE projects SET {set_clause} WHERE id=?"

        cursor = self.conn.cursor()
        cursor.execute(query, list(updates.values()) + [project_id])
        self.conn.commit()
        logger.info(f"Updated project {project_id}: {sorted(k for k in updates if k != 'updated_at')}")
        return self.get_project(project_id)

    def set_project_total_hours(self, project_id, total_hours):
        cursor = self.conn.cursor()
        cursor.execute(
            "UPDATE projects SET total_hours = ?, updated_at = ? WHERE id = ?",
            (total_hours, _now(), project_id)
        )
        if cursor.rowcount == 0:
            raise RecordNotFound('Project', project_id)
        self.conn.commit()

    def add_project_document(self, project_id, document):
        """Append an uploaded document ({name, url, uploaded_at}) to a project"""
        project = self.get_project(project_id)
        documents = list(project['documents']) + [document]
        cursor = self.conn.cursor()
        cursor.execute(
            "UPDATE projects SET documents = ?, updated_at = ? WHERE id = ?",
            (encode_json_field(documents), _now(), project_id)
        )
        self.conn.commit()
        return documents

    def delete_project(self, project_id):
        """Delete a project; its assignments are removed with it"""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        if cursor.rowcount == 0:
            raise RecordNotFound('Project', project_id)
        self.conn.commit()
        logger.info(f"Deleted project {project_id}")

    # Assignment methods
    _ASSIGNMENT_SELECT = """
        SELECT a.*, p.name as project_name, p.status as project_status,
               s.name as staff_name, r.role_name, r.default_allocation_percentage
        FROM assignments a
        JOIN projects p ON a.project_id = p.id
        JOIN staff s ON a.staff_id = s.id
        JOIN roles r ON a.role_id = r.id
    """

    def get_assignments(self, project_id=None, staff_id=None):
        """Get assignments filtered by project and/or staff member, newest first"""
        query = self._ASSIGNMENT_SELECT
        params = []
        conditions = []

        if project_id:
            conditions.append("a.project_id = ?")
            params.append(project_id)
        if staff_id:
            conditions.append("a.staff_id = ?")
            params.append(staff_id)

        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY a.created_at DESC"

        return pd.read_sql_query(query, self.conn, params=params)

    def get_assignment(self, assignment_id):
        assignment = self._fetch_one(self._ASSIGNMENT_SELECT + " WHERE a.id = ?", (assignment_id,))
        if assignment is None:
            raise RecordNotFound('Assignment', assignment_id)
        return assignment

    def upsert_assignment(self, project_id, staff_id, role_id, allocated_hours=None, logged_hours=None):
        """
        Create the (project, staff, role) assignment or update its hours.

        Hours left as None keep their stored value on update and start at 0
        on create.
        """
        if not project_id or not staff_id or not role_id:
            raise ValueError("Project ID, staff ID, and role ID are required")

        self._require('projects', project_id, 'Project')
        self._require('staff', staff_id, 'Staff member')
        self._require('roles', role_id, 'Role')

        if allocated_hours is not None:
            allocated_hours = _to_float(allocated_hours, 'Allocated hours')
            if allocated_hours < 0:
                raise ValueError("Allocated hours cannot be negative")
        if logged_hours is not None:
            logged_hours = _to_float(logged_hours, 'Logged hours')
            if logged_hours < 0:
                raise ValueError("Logged hours cannot be negative")

        now = _now()
        cursor = self.conn.cursor()
        cursor.execute('''
            INSERT INTO assignments
                (id, project_id, staff_id, role_id, allocated_hours, logged_hours, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(project_id, staff_id, role_id) DO UPDATE SET
                allocated_hours = CASE WHEN ? IS NULL THEN allocated_hours ELSE excluded.allocated_hours END,
                logged_hours = CASE WHEN ? IS NULL THEN logged_hours ELSE excluded.logged_hours END,
                updated_at = excluded.updated_at
        ''', (
            _new_id('assign'), project_id, staff_id, role_id,
            allocated_hours if allocated_hours is not None else 0,
            logged_hours if logged_hours is not None else 0,
            now, now,
            allocated_hours, logged_hours,
        ))
        self.conn.commit()

        assignment = self._fetch_one(
            self._ASSIGNMENT_SELECT + " WHERE a.project_id = ? AND a.staff_id = ? AND a.role_id = ?",
            (project_id, staff_id, role_id)
        )
        logger.info(
            f"Upserted assignment {assignment['id']}: {assignment['staff_name']} as "
            f"{assignment['role_name']} on {assignment['project_name']} "
            f"({assignment['allocated_hours']:.1f} hrs)"
        )
        return assignment

    def update_assignment(self, assignment_id, updates):
        """Update allocated and/or logged hours of an assignment"""
        updates = {k: v for k, v in dict(updates).items() if v is not None}
        _check_columns(updates, ASSIGNMENT_HOUR_COLUMNS, 'assignment')

        for key in list(updates):
            updates[key] = _to_float(updates[key], key.replace('_', ' ').capitalize())
            if updates[key] < 0:
                raise ValueError(f"{key.replace('_', ' ').capitalize()} cannot be negative")

        if not updates:
            return self.get_assignment(assignment_id)

        updates['updated_at'] = _now()
        set_clause = ','.join([f"{k}=?" for k in updates.keys()])
        query = f"UPDATE assignments SET {set_clause} WHERE id=?"

        cursor = self.conn.cursor()
        cursor.execute(query, list(updates.values()) + [assignment_id])
        if cursor.rowcount == 0:
            raise RecordNotFound('Assignment', assignment_id)
        self.conn.commit()
        return self.get_assignment(assignment_id)

    def log_hours(self, assignment_id, hours):
        """Add hours to an assignment's logged total"""
        hours = _to_float(hours, 'Hours')
        current = self.get_assignment(assignment_id)
        new_logged_hours = float(current['logged_hours'] or 0) + hours
        if new_logged_hours < 0:
            raise ValueError("Logged hours cannot go below zero")
        return self.update_assignment(assignment_id, {'logged_hours': new_logged_hours})

    def delete_assignment(self, assignment_id):
        """Delete (unassign) an assignment"""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM assignments WHERE id = ?", (assignment_id,))
        if cursor.rowcount == 0:
            raise RecordNotFound('Assignment', assignment_id)
        self.conn.commit()
        logger.info(f"Deleted assignment {assignment_id}")
