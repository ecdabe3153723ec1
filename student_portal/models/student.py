# /student_portal/models/student.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from student_portal.db.base import Base


class StudentRecord(Base):
    __tablename__ = "student_record"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    full_name = Column(String(100), nullable=False)
    enrollment_code = Column(String(50), unique=True, index=True, nullable=False)
    program = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    status = Column(String(10), nullable=False, default="active")  # active | inactive
    # at most one record per login
    owner_user_id = Column(String(36), ForeignKey("user_account.id"), unique=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<StudentRecord(id={self.id}, name='{self.full_name}', code='{self.enrollment_code}')>"
