from typing import List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from student_portal.dependencies.admin_auth import get_current_admin
from student_portal.dependencies.db import get_db
from student_portal.models.user import UserAccount
from student_portal.schemas.auth import RoleUpdateRequest, UserResponse
from student_portal.services.auth_service import update_user_role

router = APIRouter(
    dependencies=[Depends(get_current_admin)]
)


@router.get("/users", response_model=List[UserResponse], summary="List user accounts")
def list_users(db: Session = Depends(get_db)):
    """
    All logins, so an administrator can pick the owner to link to a student record.
    """
    return db.query(UserAccount).order_by(UserAccount.email).all()


@router.patch("/users/{user_id}/role", response_model=UserResponse, summary="Change a user's role")
def change_role(
    user_id: str,
    req: RoleUpdateRequest = Body(...),
    db: Session = Depends(get_db)
):
    return update_user_role(db, user_id, req.role)
