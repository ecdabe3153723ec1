import logging
from enum import Enum
from typing import Any, Mapping, Optional

from student_portal.core.exceptions import PortalError, RecordNotFound
from student_portal.schemas.auth import Identity
from student_portal.services import access_policy
from student_portal.services.access_policy import Operation
from student_portal.services.validation import clean_student

logger = logging.getLogger(__name__)

NO_RECORD_MESSAGE = (
    "You are not linked to any student record yet. "
    "Please contact the administration for more information."
)


class ProfileState(str, Enum):
    LOADING = "loading"
    HAS_RECORD = "has-record"
    NO_RECORD = "no-record"
    ERROR = "error"


class ProfileController:
    """The single student record owned by the current identity, if any."""

    def __init__(self, store, identity: Identity):
        self.store = store
        self.identity = identity
        self.state = ProfileState.LOADING
        self.record = None
        self.error: Optional[PortalError] = None

    def load(self):
        try:
            record = self.store.get_by_owner(self.identity.user_id)
        except PortalError as e:
            self.error = e
            self.state = ProfileState.ERROR
            raise
        if record is not None and not access_policy.can_perform(self.identity, Operation.VIEW, record):
            record = None
        self.record = record
        self.state = ProfileState.HAS_RECORD if record is not None else ProfileState.NO_RECORD
        return record

    def update_own(self, payload: Mapping[str, Any]):
        if self.state is ProfileState.LOADING:
            self.load()
        if self.record is None:
            raise RecordNotFound(NO_RECORD_MESSAGE)
        access_policy.require(self.identity, Operation.EDIT, self.record)
        values = clean_student(payload)
        self.store.update(self.record.id, values)
        logger.info(f"Profile self-edit by user={self.identity.user_id} record={self.record.id}")
        return self.load()
