from pydantic import BaseModel
from typing import List


class ProgramCount(BaseModel):
    program: str
    count: int


class StatusCount(BaseModel):
    status: str
    count: int


class DashboardSummary(BaseModel):
    view: str = "summary"
    total: int
    active_count: int
    inactive_count: int
    program_count: int
    by_program: List[ProgramCount]
    status_breakdown: List[StatusCount]


class StudentWelcome(BaseModel):
    view: str = "profile"
    display_name: str
    message: str
