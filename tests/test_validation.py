import pytest

from student_portal.core.exceptions import ValidationFailed
from student_portal.services.validation import clean_student, validate_student


def candidate(**overrides):
    data = {
        "full_name": "Maria Silva",
        "enrollment_code": "MAT001",
        "program": "Computer Science",
        "email": "maria@school.edu",
        "status": "active",
    }
    data.update(overrides)
    return data


def test_valid_record_has_no_errors():
    assert validate_student(candidate()) == {}
    assert validate_student(candidate(status="inactive")) == {}


@pytest.mark.parametrize("field, maximum", [
    ("full_name", 100),
    ("enrollment_code", 50),
    ("program", 100),
])
def test_boundary_lengths_are_accepted(field, maximum):
    assert validate_student(candidate(**{field: "abc"})) == {}
    assert validate_student(candidate(**{field: "x" * maximum})) == {}


@pytest.mark.parametrize("field, maximum", [
    ("full_name", 100),
    ("enrollment_code", 50),
    ("program", 100),
])
def test_out_of_range_lengths_report_only_that_field(field, maximum):
    too_short = validate_student(candidate(**{field: "ab"}))
    too_long = validate_student(candidate(**{field: "x" * (maximum + 1)}))

    assert list(too_short) == [field]
    assert "at least 3" in too_short[field]
    assert list(too_long) == [field]
    assert f"at most {maximum}" in too_long[field]


def test_length_is_measured_after_trimming():
    errors = validate_student(candidate(full_name="   ab   "))
    assert list(errors) == ["full_name"]


def test_missing_fields_are_reported():
    errors = validate_student({"status": "active"})
    assert set(errors) == {"full_name", "enrollment_code", "program", "email"}


@pytest.mark.parametrize("email", ["not-an-email", "maria@", "@school.edu", "maria school@edu.br", ""])
def test_invalid_email_is_rejected(email):
    errors = validate_student(candidate(email=email))
    assert list(errors) == ["email"]


def test_email_longer_than_255_is_rejected():
    errors = validate_student(candidate(email="a" * 250 + "@school.edu"))
    assert errors == {"email": "Email must be at most 255 characters"}


def test_email_of_exactly_255_is_accepted():
    domain = "b" * 63 + "." + "c" * 63 + "." + "d" * 58 + ".edu"
    email = "a" * 64 + "@" + domain
    assert len(email) == 255
    assert validate_student(candidate(email=email)) == {}

    errors = validate_student(candidate(email="a" + email))
    assert errors == {"email": "Email must be at most 255 characters"}


@pytest.mark.parametrize("status", ["ativo", "ACTIVE", "Inactive", "", None, "suspended"])
def test_status_outside_enum_is_always_rejected(status):
    errors = validate_student(candidate(status=status))
    assert list(errors) == ["status"]


def test_all_errors_are_returned_together():
    errors = validate_student({
        "full_name": "Al",
        "enrollment_code": "1",
        "program": "",
        "email": "nope",
        "status": "graduated",
    })
    assert set(errors) == {"full_name", "enrollment_code", "program", "email", "status"}


def test_clean_student_trims_values():
    cleaned = clean_student(candidate(full_name="  Maria Silva  ", program=" Law ", owner_user_id="ignored"))
    assert cleaned == {
        "full_name": "Maria Silva",
        "enrollment_code": "MAT001",
        "program": "Law",
        "email": "maria@school.edu",
        "status": "active",
    }


def test_clean_student_raises_with_every_field_error():
    with pytest.raises(ValidationFailed) as exc_info:
        clean_student(candidate(full_name="Al", status="x"))
    assert set(exc_info.value.errors) == {"full_name", "status"}
