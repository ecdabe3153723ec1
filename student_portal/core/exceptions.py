# /student_portal/core/exceptions.py
"""
Domain errors raised by the services layer.

Every error carries a user-facing ``message``. The handlers registered in
``student_portal.main`` turn them into JSON responses, so routes never build
error payloads themselves.
"""
from typing import Dict, Optional


class PortalError(Exception):
    message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(PortalError):
    """Field-level rejection of a candidate record. Never reaches the store."""

    message = "Invalid student data"

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__()


CONSTRAINT_MESSAGES = {
    "enrollment_code": "Enrollment code already registered",
    "email": "Email already registered",
    "owner_user_id": "This user is already linked to another student record",
}


class ConstraintViolation(PortalError):
    """Uniqueness (or link) rule enforced by the database on write."""

    def __init__(self, field: Optional[str] = None):
        self.field = field
        super().__init__(CONSTRAINT_MESSAGES.get(field, "Duplicate data"))


class AccessDenied(PortalError):
    def __init__(self, operation: str, role: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.role = role
        super().__init__(message or f"You are not allowed to {operation.replace('_', ' ')} student records")


class RecordNotFound(PortalError):
    message = "Student record not found"


class TransportFailure(PortalError):
    message = "Could not reach the student database. Please try again."


class InvalidConfirmation(PortalError):
    message = "Deletion was not confirmed or the confirmation has expired"
