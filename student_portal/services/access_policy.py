# /student_portal/services/access_policy.py
"""
Role based access rules for student records.

Roles form a closed set. Both tables below are keyed by every ``Role`` member
and ``_assert_exhaustive`` fails at import time if a role is added without
its grants.

- admin: every operation on every record, full dashboard.
- professor: create, edit, view all. Never delete.
- student: only the record it owns (``owner_user_id == identity.user_id``),
  view and edit; no dashboard, only the profile view.
"""
import logging
from enum import Enum
from typing import FrozenSet, Optional

from student_portal.core.exceptions import AccessDenied
from student_portal.schemas.auth import Identity

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    PROFESSOR = "professor"
    STUDENT = "student"


class Operation(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    VIEW_ALL = "view_all"
    VIEW = "view"


class Section(str, Enum):
    DASHBOARD = "dashboard"
    DIRECTORY = "directory"
    PROFILE = "profile"


_SECTIONS = {
    Role.ADMIN: frozenset({Section.DASHBOARD, Section.DIRECTORY}),
    Role.PROFESSOR: frozenset({Section.DASHBOARD, Section.DIRECTORY}),
    Role.STUDENT: frozenset({Section.PROFILE}),
}

_GRANTS = {
    Role.ADMIN: frozenset(Operation),
    Role.PROFESSOR: frozenset({Operation.CREATE, Operation.EDIT, Operation.VIEW_ALL, Operation.VIEW}),
    Role.STUDENT: frozenset({Operation.EDIT, Operation.VIEW}),
}

# operations a student may only perform on its own record
_OWNER_SCOPED = {
    Role.STUDENT: frozenset({Operation.EDIT, Operation.VIEW}),
}


def _assert_exhaustive():
    for table in (_SECTIONS, _GRANTS):
        missing = set(Role) - set(table)
        if missing:
            raise RuntimeError(f"Access table missing roles: {sorted(r.value for r in missing)}")


_assert_exhaustive()


def to_role(value) -> Optional[Role]:
    try:
        return Role(value)
    except ValueError:
        return None


def can_view(role) -> FrozenSet[Section]:
    role = to_role(role)
    if role is None:
        return frozenset()
    return _SECTIONS[role]


def can_perform(identity: Identity, operation: Operation, record=None) -> bool:
    """
    ``record`` is required for owner-scoped checks; without it a student is
    refused, since ownership cannot be proven.
    """
    role = to_role(identity.role)
    if role is None or operation not in _GRANTS[role]:
        return False

    if operation in _OWNER_SCOPED.get(role, frozenset()):
        return record is not None and record.owner_user_id is not None \
            and record.owner_user_id == identity.user_id
    return True


def require(identity: Identity, operation: Operation, record=None) -> None:
    if not can_perform(identity, operation, record):
        logger.info(
            f"Access denied: user={identity.user_id} role={identity.role} operation={operation.value}"
        )
        raise AccessDenied(operation.value, identity.role)


def require_section(identity: Identity, section: Section) -> None:
    if section not in can_view(identity.role):
        logger.info(f"Section hidden: user={identity.user_id} role={identity.role} section={section.value}")
        raise AccessDenied(section.value, identity.role, message=f"The {section.value} is not available for your role")
