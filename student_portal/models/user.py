import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from student_portal.db.base import Base


class UserAccount(Base):
    __tablename__ = "user_account"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student", comment="admin | professor | student")
    password_hash = Column(String(255), nullable=False)  # bcrypt
    created_at = Column(DateTime, server_default=func.now())
