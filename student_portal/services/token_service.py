import jwt
from datetime import datetime, timedelta, timezone

from student_portal.core.config import settings
from student_portal.core.exceptions import InvalidConfirmation

DELETE_PURPOSE = "delete-student"
ACCESS_TOKEN_TYPE = "access"


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": ACCESS_TOKEN_TYPE})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    # Raises jwt.PyJWTError subclasses; callers turn them into 401s.
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    return payload


def create_delete_confirmation_token(record_id: int, user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.DELETE_CONFIRMATION_EXPIRE_MINUTES)
    to_encode = {
        "sub": user_id,
        "record_id": record_id,
        "purpose": DELETE_PURPOSE,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_delete_confirmation(token: str, record_id: int, user_id: str) -> None:
    """
    Second step of a deletion: the token must have been issued to the same
    user, for the same record, and must not be expired.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidConfirmation("Deletion confirmation has expired, please try again")
    except jwt.InvalidTokenError:
        raise InvalidConfirmation()

    if (
        payload.get("purpose") != DELETE_PURPOSE
        or payload.get("sub") != user_id
        or payload.get("record_id") != record_id
    ):
        raise InvalidConfirmation()
