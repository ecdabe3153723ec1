# /student_portal/services/student_service.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from student_portal.core.exceptions import ConstraintViolation, RecordNotFound, TransportFailure
from student_portal.models.student import StudentRecord

logger = logging.getLogger(__name__)

# checked in order against the driver's message
CONSTRAINT_COLUMNS = ("enrollment_code", "email", "owner_user_id")

WRITABLE_COLUMNS = ("full_name", "enrollment_code", "program", "email", "status", "owner_user_id")


def constraint_field(error: IntegrityError) -> Optional[str]:
    """
    Which column fired: sqlite says ``UNIQUE constraint failed:
    student_record.email``, postgres names the index
    (``student_record_email_key``). A foreign key failure on the owner link
    mentions no column on sqlite.
    """
    text = str(error.orig).lower()
    for column in CONSTRAINT_COLUMNS:
        if column in text:
            return column
    if "foreign key" in text:
        return "owner_user_id"
    return None


class StudentStore:
    """CRUD over the student_record table. Every write commits or rolls back as a whole."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[StudentRecord]:
        try:
            return (
                self.db.query(StudentRecord)
                .order_by(func.lower(StudentRecord.full_name), StudentRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to list student records")
            raise TransportFailure() from e

    def get(self, record_id: int) -> StudentRecord:
        try:
            record = self.db.query(StudentRecord).filter(StudentRecord.id == record_id).first()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load student record {record_id}")
            raise TransportFailure() from e
        if not record:
            raise RecordNotFound()
        return record

    def get_by_owner(self, user_id: str) -> Optional[StudentRecord]:
        try:
            return self.db.query(StudentRecord).filter(StudentRecord.owner_user_id == user_id).first()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load student record owned by {user_id}")
            raise TransportFailure() from e

    def insert(self, values: Dict[str, Any]) -> StudentRecord:
        record = StudentRecord(**{k: v for k, v in values.items() if k in WRITABLE_COLUMNS})
        self.db.add(record)
        self._commit("insert")
        self.db.refresh(record)
        logger.info(f"Student record created: id={record.id} code={record.enrollment_code}")
        return record

    def update(self, record_id: int, values: Dict[str, Any]) -> StudentRecord:
        record = self.get(record_id)
        for key, value in values.items():
            if key in WRITABLE_COLUMNS:
                setattr(record, key, value)
        self._commit("update")
        self.db.refresh(record)
        logger.info(f"Student record updated: id={record.id}")
        return record

    def delete(self, record_id: int) -> None:
        record = self.get(record_id)
        self.db.delete(record)
        self._commit("delete")
        logger.info(f"Student record deleted: id={record_id}")

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            field = constraint_field(e)
            logger.warning(f"Student {action} rejected by constraint on {field}")
            raise ConstraintViolation(field) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Student {action} failed")
            raise TransportFailure() from e
