from sqlalchemy import Boolean, Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import RoleEnum

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(RoleEnum), nullable=False, default=RoleEnum.STUDENT)
    avatar = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    is_active = Column(Boolean(), default=True)
    is_deleted = Column(Boolean(), nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    teaching_courses = relationship("Course", back_populates="instructor")
    enrollments = relationship("Enrollment", back_populates="student", foreign_keys="Enrollment.student_id")
    course_reviews = relationship("CourseReview", back_populates="user")
