# /student_portal/services/validation.py
"""
Syntactic checks for a candidate student record.

Every rule runs and every failing field is reported together. Nothing here
touches the database: uniqueness of enrollment code and email is left to the
store, which reports it as a ConstraintViolation.
"""
import logging
from typing import Any, Dict, Mapping

from email_validator import validate_email, EmailNotValidError

from student_portal.core.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

STATUSES = ("active", "inactive")
EMAIL_MAX_LENGTH = 255
# email-validator caps the whole address at 254 and reports it last, after
# the local part and domain have passed
_LIBRARY_LENGTH_ERROR = "The email address is too long ("

# field -> (label, min, max) on the trimmed value
LENGTH_RULES = {
    "full_name": ("Full name", 3, 100),
    "enrollment_code": ("Enrollment code", 3, 50),
    "program": ("Program", 3, 100),
}

EDITABLE_FIELDS = ("full_name", "enrollment_code", "program", "email", "status")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _check_email(value: str) -> str | None:
    if len(value) > EMAIL_MAX_LENGTH:
        return f"Email must be at most {EMAIL_MAX_LENGTH} characters"
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        if str(e).startswith(_LIBRARY_LENGTH_ERROR):
            return None
        return "Invalid email"
    return None


def validate_student(candidate: Mapping[str, Any]) -> Dict[str, str]:
    """Return ``{field: reason}``; an empty dict means the record is valid."""
    errors: Dict[str, str] = {}

    for field, (label, minimum, maximum) in LENGTH_RULES.items():
        value = _text(candidate.get(field))
        if len(value) < minimum:
            errors[field] = f"{label} must have at least {minimum} characters"
        elif len(value) > maximum:
            errors[field] = f"{label} must have at most {maximum} characters"

    email_error = _check_email(_text(candidate.get("email")))
    if email_error:
        errors["email"] = email_error

    if candidate.get("status") not in STATUSES:
        errors["status"] = "Status must be 'active' or 'inactive'"

    return errors


def clean_student(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate and return the editable fields ready for the store (trimmed).
    Raises ValidationFailed with all field errors.
    """
    errors = validate_student(candidate)
    if errors:
        logger.info(f"Student record rejected by validation: {sorted(errors)}")
        raise ValidationFailed(errors)

    cleaned = {field: _text(candidate.get(field)) for field in EDITABLE_FIELDS}
    cleaned["status"] = candidate["status"]
    return cleaned
