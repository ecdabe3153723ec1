import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from student_portal.core.exceptions import ConstraintViolation, RecordNotFound, TransportFailure
from student_portal.db.base import Base
from student_portal.db.session import engine, SessionLocal
from student_portal.dependencies.db import get_db
from student_portal.main import app
from student_portal.models.student import StudentRecord
from student_portal.schemas.auth import Identity
from student_portal.services.access_policy import Role
from student_portal.services.auth_service import create_user
from student_portal.services.token_service import create_access_token

TEST_PASSWORD = "secret123"


# --- in-process fakes ---

def make_record(id, full_name, enrollment_code=None, program="Computer Science",
                email=None, status="active", owner_user_id=None):
    slug = full_name.lower().replace(" ", ".")
    return StudentRecord(
        id=id,
        full_name=full_name,
        enrollment_code=enrollment_code or f"MAT{id:03d}",
        program=program,
        email=email or f"{slug}@school.edu",
        status=status,
        owner_user_id=owner_user_id,
    )


def make_identity(role, user_id=None, name="Test User"):
    return Identity(
        user_id=user_id or f"{role}-1",
        role=role,
        display_name=name,
        email=f"{role}@school.edu",
    )


class RecordingStore:
    """Store double that records every call and enforces the same unique columns."""

    UNIQUE = ("enrollment_code", "email", "owner_user_id")

    def __init__(self, records=()):
        self.records = list(records)
        self.calls = []
        self.fail_list = False
        self._next_id = max((r.id for r in self.records), default=0) + 1

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)

    def list_all(self):
        self.calls.append(("list_all",))
        if self.fail_list:
            raise TransportFailure()
        return sorted(self.records, key=lambda r: (r.full_name.lower(), r.id))

    def get(self, record_id):
        self.calls.append(("get", record_id))
        for record in self.records:
            if record.id == record_id:
                return record
        raise RecordNotFound()

    def get_by_owner(self, user_id):
        self.calls.append(("get_by_owner", user_id))
        return next((r for r in self.records if r.owner_user_id == user_id), None)

    def _check_unique(self, values, exclude_id=None):
        for field in self.UNIQUE:
            value = values.get(field)
            if value is None:
                continue
            if any(getattr(r, field) == value and r.id != exclude_id for r in self.records):
                raise ConstraintViolation(field)

    def insert(self, values):
        self.calls.append(("insert", dict(values)))
        self._check_unique(values)
        record = StudentRecord(id=self._next_id, **values)
        self._next_id += 1
        self.records.append(record)
        return record

    def update(self, record_id, values):
        self.calls.append(("update", record_id, dict(values)))
        record = self.get(record_id)
        self._check_unique(values, exclude_id=record_id)
        for key, value in values.items():
            setattr(record, key, value)
        return record

    def delete(self, record_id):
        self.calls.append(("delete", record_id))
        record = self.get(record_id)
        self.records.remove(record)


@pytest.fixture
def sample_records():
    return [
        make_record(1, "Maria Silva", "MAT001", "Computer Science", status="active", owner_user_id="student-1"),
        make_record(2, "Carlos Souza", "MAT002", "Mathematics", status="active"),
        make_record(3, "Marco Lima", "MAT003", "Computer Science", status="inactive"),
    ]


@pytest.fixture
def store(sample_records):
    return RecordingStore(sample_records)


# --- database backed fixtures ---

@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db):
    return create_user(db, email="admin@school.edu", password=TEST_PASSWORD, display_name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def professor_user(db):
    return create_user(db, email="prof@school.edu", password=TEST_PASSWORD, display_name="Paulo Prof", role=Role.PROFESSOR)


@pytest.fixture
def student_user(db):
    return create_user(db, email="maria.login@school.edu", password=TEST_PASSWORD, display_name="Maria Silva")


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}
    return _headers


@pytest.fixture
def seeded_records(db, student_user):
    records = [
        StudentRecord(full_name="Maria Silva", enrollment_code="MAT001", program="Computer Science",
                      email="maria@school.edu", status="active", owner_user_id=student_user.id),
        StudentRecord(full_name="carlos Souza", enrollment_code="MAT002", program="Mathematics",
                      email="carlos@school.edu", status="active"),
        StudentRecord(full_name="Marco Lima", enrollment_code="MAT003", program="Computer Science",
                      email="marco@school.edu", status="inactive"),
    ]
    db.add_all(records)
    db.commit()
    for record in records:
        db.refresh(record)
    return records
