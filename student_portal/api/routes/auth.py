from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from student_portal.dependencies.auth import get_current_identity
from student_portal.dependencies.db import get_db
from student_portal.schemas.auth import Identity, LoginRequest, LoginResponse, MeResponse, RegisterRequest, UserResponse
from student_portal.services.access_policy import can_view
from student_portal.services.auth_service import authenticate_user, register_student_account

router = APIRouter()


@router.post(
    "/register",
    response_model=UserResponse,
    summary="Register a student account",
    description="Creates a login with the student role. Administrators may change the role later."
)
def register(
    req: RegisterRequest = Body(...),
    db: Session = Depends(get_db)
):
    return register_student_account(db, req)


@router.post("/login", response_model=LoginResponse, summary="Log in and receive an access token")
def login(
    req: LoginRequest = Body(...),
    db: Session = Depends(get_db)
):
    return authenticate_user(db, req.email, req.password)


@router.get("/me", response_model=MeResponse, summary="Current user, role and visible sections")
def me(identity: Identity = Depends(get_current_identity)):
    sections = sorted(section.value for section in can_view(identity.role))
    return MeResponse(
        user_id=identity.user_id,
        email=identity.email,
        display_name=identity.display_name,
        role=identity.role,
        sections=sections,
    )
