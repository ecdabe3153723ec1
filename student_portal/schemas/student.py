# /student_portal/schemas/student.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class StudentRecordIn(BaseModel):
    # Plain strings; the validation service reports every field error together.
    full_name: str = ""
    enrollment_code: str = ""
    program: str = ""
    email: str = ""
    status: Optional[str] = None
    owner_user_id: Optional[str] = None


class StudentRecordCreate(StudentRecordIn):
    status: Optional[str] = "active"


class StudentSelfUpdate(BaseModel):
    full_name: str = ""
    enrollment_code: str = ""
    program: str = ""
    email: str = ""
    status: Optional[str] = None


class StudentRecordOut(BaseModel):
    id: int
    full_name: str
    enrollment_code: str
    program: str
    email: str
    status: str
    owner_user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentListResponse(BaseModel):
    query: str
    total: int
    students: List[StudentRecordOut]


class StudentMutationResponse(BaseModel):
    message: str
    student: Optional[StudentRecordOut] = None


class DeleteRequestResponse(BaseModel):
    message: str
    confirmation_token: str
    student: StudentRecordOut


class ProfileResponse(BaseModel):
    state: str  # has-record | no-record
    display_name: str
    email: str
    student: Optional[StudentRecordOut] = None
    message: Optional[str] = None
