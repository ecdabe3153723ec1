import logging
from typing import Optional

from fastapi import HTTPException, status
from passlib.hash import bcrypt
from sqlalchemy.orm import Session

from student_portal.core.config import settings
from student_portal.models.user import UserAccount
from student_portal.schemas.auth import Identity, LoginResponse, RegisterRequest
from student_portal.services.access_policy import Role, to_role
from student_portal.services.token_service import create_access_token

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: str) -> Optional[UserAccount]:
    return db.query(UserAccount).filter(UserAccount.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[UserAccount]:
    return db.query(UserAccount).filter(UserAccount.email == email.lower()).first()


def create_user(db: Session, *, email: str, password: str, display_name: str, role: Role = Role.STUDENT) -> UserAccount:
    user = UserAccount(
        email=email.lower(),
        display_name=display_name.strip(),
        role=role.value,
        password_hash=bcrypt.hash(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register_student_account(db: Session, req: RegisterRequest) -> UserAccount:
    if not req.display_name or not req.display_name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Display name is required.")
    if len(req.password) < 6:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password must have at least 6 characters.")
    if get_user_by_email(db, req.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This email is already registered.")
    user = create_user(db, email=req.email, password=req.password, display_name=req.display_name)
    logger.info(f"Student account registered: {user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> LoginResponse:
    user = get_user_by_email(db, email)
    if not user or not bcrypt.verify(password, user.password_hash):
        logger.info(f"Login failed for {email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password.")

    access_token = create_access_token({"sub": user.id})
    logger.info(f"Login succeeded: user={user.id} role={user.role}")
    return LoginResponse(access_token=access_token, user_id=user.id, role=user.role)


def identity_for(user: UserAccount) -> Identity:
    return Identity(user_id=user.id, role=user.role, display_name=user.display_name, email=user.email)


def update_user_role(db: Session, user_id: str, role: str) -> UserAccount:
    new_role = to_role(role)
    if new_role is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role must be admin, professor or student.")
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    user.role = new_role.value
    db.commit()
    db.refresh(user)
    logger.info(f"Role of user {user.id} set to {user.role}")
    return user


def seed_admin(db: Session) -> Optional[UserAccount]:
    """Create the bootstrap administrator from ADMIN_EMAIL / ADMIN_PASSWORD."""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin bootstrap")
        return None
    existing = get_user_by_email(db, settings.ADMIN_EMAIL)
    if existing:
        return existing
    admin = create_user(
        db,
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        display_name=settings.ADMIN_NAME,
        role=Role.ADMIN,
    )
    logger.info(f"Bootstrap administrator created: {admin.email}")
    return admin
