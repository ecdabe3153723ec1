from typing import Dict, Iterable

from student_portal.schemas.auth import Identity
from student_portal.schemas.dashboard import DashboardSummary, ProgramCount, StatusCount, StudentWelcome
from student_portal.services import access_policy
from student_portal.services.access_policy import Section


def summarize(records: Iterable) -> DashboardSummary:
    """
    Counts over an already fetched record set. ``by_program`` keeps the order
    in which each program first appears (charts rely on it).
    """
    total = 0
    active_count = 0
    by_program: Dict[str, int] = {}
    for record in records:
        total += 1
        if record.status == "active":
            active_count += 1
        by_program[record.program] = by_program.get(record.program, 0) + 1

    inactive_count = total - active_count
    return DashboardSummary(
        total=total,
        active_count=active_count,
        inactive_count=inactive_count,
        program_count=len(by_program),
        by_program=[ProgramCount(program=p, count=c) for p, c in by_program.items()],
        status_breakdown=[
            StatusCount(status="active", count=active_count),
            StatusCount(status="inactive", count=inactive_count),
        ],
    )


def build_dashboard(store, identity: Identity):
    if Section.DASHBOARD not in access_policy.can_view(identity.role):
        return StudentWelcome(
            display_name=identity.display_name,
            message="Welcome to the student management system. Open \"My Profile\" to see and update your data.",
        )
    return summarize(store.list_all())
