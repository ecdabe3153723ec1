from typing import Union

from fastapi import APIRouter, Depends

from student_portal.dependencies.auth import get_current_identity, get_student_store
from student_portal.schemas.auth import Identity
from student_portal.schemas.dashboard import DashboardSummary, StudentWelcome
from student_portal.services.dashboard import build_dashboard
from student_portal.services.student_service import StudentStore

router = APIRouter()


@router.get("", response_model=Union[DashboardSummary, StudentWelcome], summary="Dashboard")
def get_dashboard(
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    """
    Totals, active/inactive split and students per program for administrators
    and professors. Students get a pointer to their profile instead.
    """
    return build_dashboard(store, identity)
