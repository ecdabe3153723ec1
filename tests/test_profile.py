import pytest

from conftest import make_identity
from student_portal.core.exceptions import RecordNotFound, TransportFailure, ValidationFailed
from student_portal.services.profile import ProfileController, ProfileState


def own_update(**overrides):
    data = {
        "full_name": "Maria Silva Santos",
        "enrollment_code": "MAT001",
        "program": "Computer Science",
        "email": "maria@school.edu",
        "status": "active",
    }
    data.update(overrides)
    return data


def test_linked_student_sees_exactly_their_record(store):
    profile = ProfileController(store, make_identity("student", user_id="student-1"))
    assert profile.state is ProfileState.LOADING

    record = profile.load()

    assert profile.state is ProfileState.HAS_RECORD
    assert record.id == 1
    assert record.full_name == "Maria Silva"
    assert store.count("get_by_owner") == 1
    assert store.count("list_all") == 0


def test_unlinked_student_gets_no_record(store):
    profile = ProfileController(store, make_identity("student", user_id="student-9"))

    assert profile.load() is None
    assert profile.state is ProfileState.NO_RECORD


def test_load_failure_is_surfaced(store):
    def broken(user_id):
        raise TransportFailure()
    store.get_by_owner = broken
    profile = ProfileController(store, make_identity("student", user_id="student-1"))

    with pytest.raises(TransportFailure):
        profile.load()
    assert profile.state is ProfileState.ERROR


def test_self_edit_goes_through_validation(store):
    profile = ProfileController(store, make_identity("student", user_id="student-1"))
    profile.load()

    with pytest.raises(ValidationFailed):
        profile.update_own(own_update(full_name="Ma"))
    assert store.count("update") == 0

    record = profile.update_own(own_update())
    assert record.full_name == "Maria Silva Santos"
    assert record.owner_user_id == "student-1"
    assert profile.state is ProfileState.HAS_RECORD


def test_self_edit_without_record(store):
    profile = ProfileController(store, make_identity("student", user_id="student-9"))
    with pytest.raises(RecordNotFound):
        profile.update_own(own_update())
    assert store.count("update") == 0
