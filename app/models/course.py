from sqlalchemy import Boolean, Column, Integer, String, Float, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import CourseLevelEnum, CourseStatusEnum, DEFAULT_CURRENCY

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)
    category = Column(String, index=True, nullable=False)
    level = Column(Enum(CourseLevelEnum), nullable=False, default=CourseLevelEnum.ALL_LEVELS)
    thumbnail = Column(String, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    status = Column(Enum(CourseStatusEnum), nullable=False, default=CourseStatusEnum.DRAFT, index=True)
    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    enrollment_count = Column(Integer, nullable=False, default=0)
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_course_price_non_negative"),
        CheckConstraint("enrollment_count >= 0", name="ck_course_enrollment_count_non_negative"),
    )

    instructor = relationship("User", back_populates="teaching_courses")
    lectures = relationship("Lecture", back_populates="course", order_by="Lecture.position", cascade="all, delete-orphan")
    reviews = relationship("CourseReview", back_populates="course", cascade="all, delete-orphan")
    enrollments = relationship("Enrollment", back_populates="course")

    @property
    def total_lectures(self) -> int:
        return len(self.lectures)

    @property
    def is_published(self) -> bool:
        return self.status == CourseStatusEnum.PUBLISHED
