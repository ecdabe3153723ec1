# /student_portal/services/directory.py
"""
Student directory: fetch the full list, filter it in memory, mutate, refetch.
"""
import logging
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from student_portal.core.exceptions import InvalidConfirmation, PortalError, RecordNotFound
from student_portal.schemas.auth import Identity
from student_portal.services import access_policy
from student_portal.services.access_policy import Operation
from student_portal.services.validation import clean_student

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("full_name", "enrollment_code", "program", "email")


class ViewState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def filter_records(records: Iterable, query: str) -> List:
    """Case-insensitive substring match on name, code, program or email. Keeps order."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(records)
    return [
        record for record in records
        if any(needle in (getattr(record, field, "") or "").lower() for field in SEARCH_FIELDS)
    ]


class DirectoryController:

    def __init__(self, store, identity: Identity):
        self.store = store
        self.identity = identity
        self.state = ViewState.LOADING
        self.records: List = []
        self.error: Optional[PortalError] = None
        self.query = ""
        self.pending_delete = None
        self._generation = 0
        self._mounted = True

    # --- fetch ---

    def begin_fetch(self) -> int:
        self._generation += 1
        self.state = ViewState.LOADING
        return self._generation

    def _is_current(self, ticket: int) -> bool:
        return self._mounted and ticket == self._generation

    def complete_fetch(self, ticket: int, records: List) -> bool:
        if not self._is_current(ticket):
            logger.debug(f"Discarding superseded directory fetch #{ticket}")
            return False
        self.records = list(records)
        self.error = None
        self.state = ViewState.READY
        return True

    def fail_fetch(self, ticket: int, error: PortalError) -> bool:
        if not self._is_current(ticket):
            return False
        self.error = error
        self.state = ViewState.ERROR
        return True

    def refresh(self) -> List:
        access_policy.require(self.identity, Operation.VIEW_ALL)
        ticket = self.begin_fetch()
        try:
            records = self.store.list_all()
        except PortalError as e:
            self.fail_fetch(ticket, e)
            raise
        self.complete_fetch(ticket, records)
        return self.records

    def unmount(self) -> None:
        self._mounted = False

    # --- search ---

    def search(self, query: str) -> List:
        self.query = query or ""
        return self.visible_records()

    def visible_records(self) -> List:
        if self.state is not ViewState.READY:
            return []
        return filter_records(self.records, self.query)

    # --- single record ---

    def get(self, record_id: int):
        return self._fetch_for(Operation.VIEW, record_id)

    def _fetch_for(self, operation: Operation, record_id: int):
        # roles without the full list get AccessDenied for unknown ids too
        try:
            record = self.store.get(record_id)
        except RecordNotFound:
            if not access_policy.can_perform(self.identity, Operation.VIEW_ALL):
                access_policy.require(self.identity, operation)
            raise
        access_policy.require(self.identity, operation, record)
        return record

    # --- mutations ---

    def create(self, payload: Mapping[str, Any]):
        access_policy.require(self.identity, Operation.CREATE)
        values = clean_student(payload)
        values["owner_user_id"] = payload.get("owner_user_id") or None
        record = self.store.insert(values)
        self._refetch_after_mutation()
        return record

    def update(self, record_id: int, payload: Mapping[str, Any]):
        self._fetch_for(Operation.EDIT, record_id)
        values = clean_student(payload)
        # owners edit their own data, not the link to their login
        if "owner_user_id" in payload and access_policy.can_perform(self.identity, Operation.VIEW_ALL):
            values["owner_user_id"] = payload["owner_user_id"] or None
        record = self.store.update(record_id, values)
        self._refetch_after_mutation()
        return record

    def request_delete(self, record_id: int):
        access_policy.require(self.identity, Operation.DELETE)
        record = self.store.get(record_id)
        self.pending_delete = record
        return record

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> None:
        if self.pending_delete is None:
            raise InvalidConfirmation()
        target = self.pending_delete
        self.pending_delete = None
        access_policy.require(self.identity, Operation.DELETE, target)
        self.store.delete(target.id)
        self._refetch_after_mutation()

    def _refetch_after_mutation(self) -> None:
        # The write already succeeded; only directory viewers hold a list.
        if not access_policy.can_perform(self.identity, Operation.VIEW_ALL):
            return
        try:
            self.refresh()
        except PortalError as e:
            logger.warning(f"Refetch after mutation failed: {e.message}")
