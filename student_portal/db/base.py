from sqlalchemy.orm import declarative_base

Base = declarative_base()
import student_portal.models.user
import student_portal.models.student
