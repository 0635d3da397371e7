"""
Hour allocation engine.

Total billable hours for a project come from its deal size and blended rate:

    total_hours = deal_size / blended_rate

Each role then receives a default share of those hours:

    role_hours = total_hours * (percentage / 100)

The database-backed helpers read through a DatabaseManager and write back
plain sequential updates; there is no locking, so concurrent recalculations
of the same project are last-write-wins.
"""
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd

from utils.config import DEFAULT_WEEKLY_HOURS
from utils.errors import RecordNotFound
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AllocationResult:
    role_id: str
    role_name: str
    percentage: float
    allocated_hours: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ProjectAllocation:
    project_id: str
    project_name: str
    deal_size: float
    blended_rate: float
    total_hours: float
    allocations: List[AllocationResult] = field(default_factory=list)

    def for_role(self, role_id) -> Optional[AllocationResult]:
        for allocation in self.allocations:
            if allocation.role_id == role_id:
                return allocation
        return None

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_total_hours(deal_size: float, blended_rate: float) -> float:
    """Billable hours bought by a deal: deal_size / blended_rate."""
    if blended_rate is None or blended_rate <= 0:
        raise ValueError("Blended rate must be greater than zero")
    return float(deal_size) / float(blended_rate)


def calculate_role_hours(total_hours: float, percentage: float) -> float:
    """Hours for a role holding `percentage` percent of the project."""
    return float(total_hours) * (float(percentage) / 100)


def calculate_project_allocation(db, project_id) -> ProjectAllocation:
    """
    Recompute a project's total hours, persist them, and break them down by role.

    Roles are returned by descending default allocation percentage.
    Raises RecordNotFound when the project does not exist.
    """
    project = db.get_project(project_id)
    roles_df = db.get_roles()

    deal_size = float(project['deal_size'])
    blended_rate = float(project['blended_rate'])
    total_hours = calculate_total_hours(deal_size, blended_rate)

    db.set_project_total_hours(project_id, total_hours)

    allocations = []
    for _, role in roles_df.iterrows():
        percentage = float(role['default_allocation_percentage'])
        allocations.append(AllocationResult(
            role_id=role['id'],
            role_name=role['role_name'],
            percentage=percentage,
            allocated_hours=calculate_role_hours(total_hours, percentage),
        ))

    return ProjectAllocation(
        project_id=project['id'],
        project_name=project['name'],
        deal_size=deal_size,
        blended_rate=blended_rate,
        total_hours=total_hours,
        allocations=allocations,
    )


def recalculate_project_allocations(db, project_id) -> int:
    """
    Re-derive total hours and reset every assignment on the project to its
    role's share.

    Manually adjusted assignment hours are overwritten. Assignments whose
    role no longer exists in the breakdown keep their hours.

    Returns the number of assignments updated.
    """
    allocation = calculate_project_allocation(db, project_id)
    assignments_df = db.get_assignments(project_id=project_id)

    updated = 0
    for _, assignment in assignments_df.iterrows():
        role_allocation = allocation.for_role(assignment['role_id'])
        if role_allocation is None:
            continue
        db.update_assignment(assignment['id'], {'allocated_hours': role_allocation.allocated_hours})
        updated += 1

    logger.info(
        f"Recalculated project {project_id}: total_hours={allocation.total_hours:.2f}, "
        f"{updated} assignment(s) reset to role shares"
    )
    return updated


def auto_assign_staff_to_project(db, project_id, staff_assignments) -> List[Dict]:
    """
    Upsert one assignment per (staff_id, role_id) pair using the role's
    freshly computed hours.

    Args:
        db: DatabaseManager
        project_id: Project to staff
        staff_assignments: iterable of {'staff_id': ..., 'role_id': ...} dicts
            or (staff_id, role_id) tuples

    Returns:
        List of the resulting assignment records
    """
    allocation = calculate_project_allocation(db, project_id)

    results = []
    for pair in staff_assignments:
        if isinstance(pair, dict):
            staff_id, role_id = pair.get('staff_id'), pair.get('role_id')
        else:
            staff_id, role_id = pair

        role_allocation = allocation.for_role(role_id)
        if role_allocation is None:
            raise RecordNotFound('Role', role_id)

        results.append(db.upsert_assignment(
            project_id,
            staff_id,
            role_id,
            allocated_hours=role_allocation.allocated_hours,
        ))

    logger.info(f"Auto-assigned {len(results)} staff to project {project_id}")
    return results


def apply_project_update(db, project_id, updates) -> Tuple[Dict, bool]:
    """
    Update a project and cascade a deal size change to its assignments.

    Total hours are always re-derived by the store; assignment hours are only
    recalculated when the deal size actually changed.

    Returns:
        (updated project record, whether assignments were recalculated)
    """
    existing = db.get_project(project_id)
    project = db.update_project(project_id, updates)

    recalculated = False
    if 'deal_size' in updates and updates['deal_size'] is not None:
        if float(existing['deal_size']) != float(project['deal_size']):
            recalculate_project_allocations(db, project_id)
            project = db.get_project(project_id)
            recalculated = True

    return project, recalculated


def get_staff_workload(db, weekly_hours: float = DEFAULT_WEEKLY_HOURS) -> List[Dict]:
    """
    Total allocated and logged hours per staff member across all projects.

    A member is over-allocated when their allocated total exceeds their own
    hours quota, or `weekly_hours` when no quota is recorded.
    """
    staff_df = db.get_staff()
    assignments_df = db.get_assignments()

    if not assignments_df.empty:
        totals = assignments_df.groupby('staff_id')[['allocated_hours', 'logged_hours']].sum()
    else:
        totals = pd.DataFrame(columns=['allocated_hours', 'logged_hours'])

    workload = []
    for _, member in staff_df.iterrows():
        if member['id'] in totals.index:
            total_allocated = float(totals.loc[member['id'], 'allocated_hours'])
            total_logged = float(totals.loc[member['id'], 'logged_hours'])
        else:
            total_allocated = 0.0
            total_logged = 0.0

        quota = member.get('hours_quota')
        threshold = float(quota) if pd.notna(quota) and quota else weekly_hours

        workload.append({
            'staff_id': member['id'],
            'staff_name': member['name'],
            'role_name': member['role_name'] if pd.notna(member['role_name']) else None,
            'total_allocated_hours': total_allocated,
            'total_logged_hours': total_logged,
            'is_over_allocated': total_allocated > threshold,
        })

    return workload
