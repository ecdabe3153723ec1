from fastapi import APIRouter, Body, Depends, Query

from student_portal.core.exceptions import InvalidConfirmation
from student_portal.dependencies.auth import get_current_identity, get_student_store
from student_portal.schemas.auth import Identity
from student_portal.schemas.student import (
    StudentRecordCreate, StudentRecordIn, StudentRecordOut, StudentListResponse,
    StudentMutationResponse, DeleteRequestResponse
)
from student_portal.services.directory import DirectoryController
from student_portal.services.student_service import StudentStore
from student_portal.services.token_service import create_delete_confirmation_token, verify_delete_confirmation

router = APIRouter()


def _payload(req: StudentRecordIn) -> dict:
    data = req.model_dump()
    # an omitted owner keeps the current link
    if "owner_user_id" not in req.model_fields_set:
        data.pop("owner_user_id")
    return data


@router.get("", response_model=StudentListResponse, summary="Student directory")
def list_students(
    q: str = Query("", description="Matches name, enrollment code, program or email"),
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    """
    Full list ordered by name (case-insensitive), then filtered in memory by ``q``.
    """
    directory = DirectoryController(store, identity)
    directory.refresh()
    students = [StudentRecordOut.model_validate(r) for r in directory.search(q)]
    return StudentListResponse(query=directory.query, total=len(directory.records), students=students)


@router.get("/{record_id}", response_model=StudentRecordOut, summary="One student record")
def get_student(
    record_id: int,
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    directory = DirectoryController(store, identity)
    return directory.get(record_id)


@router.post("", response_model=StudentMutationResponse, status_code=201, summary="Create a student record")
def create_student(
    req: StudentRecordCreate = Body(...),
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    directory = DirectoryController(store, identity)
    record = directory.create(req.model_dump())
    return StudentMutationResponse(message="Student created successfully!", student=StudentRecordOut.model_validate(record))


@router.put("/{record_id}", response_model=StudentMutationResponse, summary="Update a student record")
def update_student(
    record_id: int,
    req: StudentRecordIn = Body(...),
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    directory = DirectoryController(store, identity)
    record = directory.update(record_id, _payload(req))
    return StudentMutationResponse(message="Student updated successfully!", student=StudentRecordOut.model_validate(record))


@router.post(
    "/{record_id}/delete-request",
    response_model=DeleteRequestResponse,
    summary="Select a student record for deletion",
    description="First step of a deletion. Send the returned token to DELETE to confirm; ignore it to cancel."
)
def request_student_deletion(
    record_id: int,
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    directory = DirectoryController(store, identity)
    record = directory.request_delete(record_id)
    return DeleteRequestResponse(
        message="Are you sure you want to delete this student? This action cannot be undone.",
        confirmation_token=create_delete_confirmation_token(record.id, identity.user_id),
        student=StudentRecordOut.model_validate(record),
    )


@router.delete("/{record_id}", response_model=StudentMutationResponse, summary="Confirm deletion of a student record")
def delete_student(
    record_id: int,
    confirmation_token: str = Query(..., description="Token from the delete-request step"),
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    directory = DirectoryController(store, identity)
    directory.request_delete(record_id)
    try:
        verify_delete_confirmation(confirmation_token, record_id, identity.user_id)
    except InvalidConfirmation:
        directory.cancel_delete()
        raise
    directory.confirm_delete()
    return StudentMutationResponse(message="Student deleted successfully!")
