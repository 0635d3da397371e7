import pandas as pd
from typing import Dict, Optional

from utils.calculations import calculate_role_hours
from utils.config import DEFAULT_WEEKLY_HOURS
from utils.logger import get_logger

logger = get_logger(__name__)


class DataProcessor:
    """Process and summarize staffing data for the dashboard pages"""

    @staticmethod
    def _assigned_hours_for_role(assignments_df: pd.DataFrame, role_id, exclude_assignment_id=None) -> float:
        if assignments_df is None or assignments_df.empty:
            return 0.0
        role_assignments = assignments_df[assignments_df['role_id'] == role_id]
        if exclude_assignment_id is not None:
            role_assignments = role_assignments[role_assignments['id'] != exclude_assignment_id]
        return float(role_assignments['allocated_hours'].fillna(0).sum())

    @staticmethod
    def calculate_role_breakdown(total_hours: float, roles_df: pd.DataFrame, assignments_df: pd.DataFrame) -> pd.DataFrame:
        """
        Hour allocation by role for one project.

        Returns one row per role (in roles_df order) with:
        - role_hours: the role's default share of total_hours
        - assigned_hours: hours already allocated to staff in that role
        - remaining_hours: role_hours - assigned_hours, floored at 0
        - assigned_pct: assigned share of role_hours, capped at 100
        - staff_summary: "Name (60h), ..." for the people on the role
        """
        columns = ['role_id', 'role_name', 'percentage', 'role_hours',
                   'assigned_hours', 'remaining_hours', 'assigned_pct', 'staff_summary']
        if roles_df.empty:
            return pd.DataFrame(columns=columns)

        rows = []
        for _, role in roles_df.iterrows():
            percentage = float(role['default_allocation_percentage'])
            role_hours = calculate_role_hours(total_hours or 0, percentage)
            assigned_hours = DataProcessor._assigned_hours_for_role(assignments_df, role['id'])

            staff_summary = ''
            if assignments_df is not None and not assignments_df.empty:
                on_role = assignments_df[assignments_df['role_id'] == role['id']]
                staff_summary = ', '.join(
                    f"{a['staff_name']} ({float(a['allocated_hours']):.0f}h)" for _, a in on_role.iterrows()
                )

            assigned_pct = min(assigned_hours / role_hours * 100, 100) if role_hours > 0 else 0.0

            rows.append({
                'role_id': role['id'],
                'role_name': role['role_name'],
                'percentage': percentage,
                'role_hours': role_hours,
                'assigned_hours': assigned_hours,
                'remaining_hours': max(0.0, role_hours - assigned_hours),
                'assigned_pct': assigned_pct,
                'staff_summary': staff_summary,
            })

        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def get_role_available_hours(total_hours: float, percentage: float, assignments_df: pd.DataFrame, role_id) -> float:
        """Role hours not yet handed to anyone on the project"""
        role_hours = calculate_role_hours(total_hours or 0, percentage)
        return max(0.0, role_hours - DataProcessor._assigned_hours_for_role(assignments_df, role_id))

    @staticmethod
    def get_max_allowed_hours(total_hours: float, percentage: float, assignments_df: pd.DataFrame,
                              role_id, assignment_id) -> float:
        """Most hours one assignment may hold: the role's hours minus everyone else's on that role"""
        role_hours = calculate_role_hours(total_hours or 0, percentage)
        others = DataProcessor._assigned_hours_for_role(assignments_df, role_id, exclude_assignment_id=assignment_id)
        return max(0.0, role_hours - others)

    @staticmethod
    def role_share_table(total_hours: float, roles_df: pd.DataFrame) -> pd.DataFrame:
        """Role, % and Hours for each role's share of total_hours"""
        columns = ['Role', '%', 'Hours']
        if roles_df is None or roles_df.empty:
            return pd.DataFrame(columns=columns)

        rows = []
        for _, role in roles_df.iterrows():
            percentage = float(role['default_allocation_percentage'])
            rows.append({
                'Role': role['role_name'],
                '%': percentage,
                'Hours': calculate_role_hours(total_hours or 0, percentage),
            })
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def calculate_staff_totals(staff_df: pd.DataFrame, assignments_df: pd.DataFrame,
                               weekly_hours: float = DEFAULT_WEEKLY_HOURS) -> pd.DataFrame:
        """Add total_allocated_hours, total_logged_hours, project_count and is_over_allocated to staff_df"""
        if staff_df.empty:
            return staff_df.assign(total_allocated_hours=[], total_logged_hours=[],
                                   project_count=[], is_over_allocated=[])

        result = staff_df.copy()

        if assignments_df is not None and not assignments_df.empty:
            grouped = assignments_df.groupby('staff_id')
            totals = grouped[['allocated_hours', 'logged_hours']].sum()
            project_counts = grouped['project_id'].nunique()
        else:
            totals = pd.DataFrame(columns=['allocated_hours', 'logged_hours'])
            project_counts = pd.Series(dtype=float)

        result['total_allocated_hours'] = result['id'].map(totals['allocated_hours']).fillna(0.0).astype(float)
        result['total_logged_hours'] = result['id'].map(totals['logged_hours']).fillna(0.0).astype(float)
        result['project_count'] = result['id'].map(project_counts).fillna(0).astype(int)

        quota = result['hours_quota'].where(result['hours_quota'] > 0, weekly_hours).fillna(weekly_hours)
        result['is_over_allocated'] = result['total_allocated_hours'] > quota

        return result

    @staticmethod
    def summarize_project_assignments(projects_df: pd.DataFrame, assignments_df: pd.DataFrame) -> pd.DataFrame:
        """Add assigned_hours, logged_hours, team_size and logged_pct to projects_df"""
        if projects_df.empty:
            return projects_df

        result = projects_df.copy()
        if assignments_df is not None and not assignments_df.empty:
            grouped = assignments_df.groupby('project_id')
            assigned = grouped['allocated_hours'].sum()
            logged = grouped['logged_hours'].sum()
            team_size = grouped['staff_id'].nunique()
        else:
            assigned = logged = team_size = pd.Series(dtype=float)

        result['assigned_hours'] = result['id'].map(assigned).fillna(0.0).astype(float)
        result['logged_hours'] = result['id'].map(logged).fillna(0.0).astype(float)
        result['team_size'] = result['id'].map(team_size).fillna(0).astype(int)

        # Logged against assigned, not against total_hours
        result['logged_pct'] = (
            result['logged_hours'] / result['assigned_hours'].where(result['assigned_hours'] > 0) * 100
        ).fillna(0.0)
        return result

    @staticmethod
    def calculate_dashboard_stats(projects_df: pd.DataFrame, staff_totals_df: pd.DataFrame) -> Dict:
        """
        Headline numbers for the dashboard.

        Args:
            projects_df: Projects from DatabaseManager.get_projects()
            staff_totals_df: Output of calculate_staff_totals()
        """
        stats = {
            'active_projects': 0,
            'potential_projects': 0,
            'completed_projects': 0,
            'total_deal_value': 0.0,
            'total_hours': 0.0,
            'staff_count': len(staff_totals_df),
            'over_allocated_staff': pd.DataFrame(),
        }

        if not projects_df.empty:
            stats['active_projects'] = int((projects_df['status'] == 'Active').sum())
            stats['potential_projects'] = int((projects_df['status'] == 'Potential').sum())
            stats['completed_projects'] = int((projects_df['status'] == 'Completed').sum())
            stats['total_deal_value'] = float(projects_df['deal_size'].fillna(0).sum())
            stats['total_hours'] = float(projects_df['total_hours'].fillna(0).sum())

        if not staff_totals_df.empty and 'is_over_allocated' in staff_totals_df.columns:
            stats['over_allocated_staff'] = staff_totals_df[staff_totals_df['is_over_allocated']].copy()

        return stats

    @staticmethod
    def role_percentage_total(percentages: Dict[str, float]) -> float:
        return float(sum(percentages.values()))

    @staticmethod
    def find_role_row(roles_df: pd.DataFrame, role_id) -> Optional[pd.Series]:
        if roles_df.empty:
            return None
        match = roles_df[roles_df['id'] == role_id]
        return match.iloc[0] if not match.empty else None
