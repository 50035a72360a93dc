from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Float, Boolean, Text, ForeignKey, DateTime,
    Enum as SQLEnum, UniqueConstraint, CheckConstraint, Index, func
)
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import (
    EnrollmentStatusEnum, PaymentMethodEnum, PaymentStatusEnum, RefundStatusEnum,
    DEFAULT_CURRENCY, PROGRESS_MIN, PROGRESS_MAX, RATING_MIN, RATING_MAX,
)
from app.utils import enrollment_state


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    # Copied from the course when the student enrolls
    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    enrollment_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    completion_date = Column(DateTime, nullable=True)
    status = Column(SQLEnum(EnrollmentStatusEnum), nullable=False, default=EnrollmentStatusEnum.ACTIVE)
    progress = Column(Integer, nullable=False, default=0)
    last_accessed = Column(DateTime, nullable=False, default=datetime.utcnow)
    total_time_spent = Column(Integer, nullable=False, default=0) # minutes
    notes = Column(Text, nullable=True)

    certificate_issued = Column(Boolean, nullable=False, default=False)
    certificate_issued_at = Column(DateTime, nullable=True)
    certificate_id = Column(String, nullable=True, unique=True)
    certificate_download_url = Column(String, nullable=True)

    payment_amount = Column(Float, nullable=False)
    payment_currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    payment_method = Column(SQLEnum(PaymentMethodEnum), nullable=False)
    payment_transaction_id = Column(String, nullable=False)
    payment_status = Column(SQLEnum(PaymentStatusEnum), nullable=False, default=PaymentStatusEnum.PENDING)
    payment_paid_at = Column(DateTime, nullable=True, default=datetime.utcnow)

    rating_given = Column(Boolean, nullable=False, default=False)
    rating_value = Column(Integer, nullable=True)
    rating_review = Column(Text, nullable=True)
    rating_reviewed_at = Column(DateTime, nullable=True)

    access_expiry = Column(DateTime, nullable=True)
    is_lifetime = Column(Boolean, nullable=False, default=True)

    refund_requested = Column(Boolean, nullable=False, default=False)
    refund_reason = Column(String, nullable=True)
    refund_status = Column(SQLEnum(RefundStatusEnum), nullable=False, default=RefundStatusEnum.NONE)
    refund_processed_at = Column(DateTime, nullable=True)
    refund_amount = Column(Float, nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="unique_student_course_enrollment"),
        CheckConstraint(f"progress >= {PROGRESS_MIN} AND progress <= {PROGRESS_MAX}", name="ck_enrollment_progress_range"),
        CheckConstraint(
            f"rating_value IS NULL OR (rating_value >= {RATING_MIN} AND rating_value <= {RATING_MAX})",
            name="ck_enrollment_rating_range"
        ),
        Index("ix_enrollments_student_status", "student_id", "status"),
        Index("ix_enrollments_course_status", "course_id", "status"),
        Index("ix_enrollments_instructor", "instructor_id"),
        Index("ix_enrollments_enrollment_date", "enrollment_date"),
        Index("ix_enrollments_payment_status", "payment_status"),
    )

    # Every UPDATE is guarded by the version it was read at
    __mapper_args__ = {"version_id_col": version}

    student = relationship("User", back_populates="enrollments", foreign_keys=[student_id])
    instructor = relationship("User", foreign_keys=[instructor_id])
    course = relationship("Course", back_populates="enrollments")
    completed_lectures = relationship(
        "CompletedLecture",
        back_populates="enrollment",
        order_by="CompletedLecture.completed_at",
        cascade="all, delete-orphan"
    )

    @property
    def is_completed(self) -> bool:
        return enrollment_state.is_completed(self.status, self.progress)

    @property
    def is_expired(self) -> bool:
        return enrollment_state.is_expired(self.is_lifetime, self.access_expiry)

    @property
    def effective_status(self) -> EnrollmentStatusEnum:
        return enrollment_state.effective_status(self.status, self.is_expired)

    @property
    def enrollment_duration(self) -> int:
        return enrollment_state.enrollment_duration(self.enrollment_date, self.completion_date)

    def has_completed_lecture(self, lecture_id: int) -> bool:
        return any(cl.lecture_id == lecture_id for cl in self.completed_lectures)


class CompletedLecture(Base):
    __tablename__ = "enrollment_completed_lectures"

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=False, index=True)
    # Not a foreign key: courses without registered lectures still track completions
    lecture_id = Column(Integer, nullable=False)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    time_spent = Column(Integer, nullable=False, default=0) # seconds

    __table_args__ = (
        UniqueConstraint("enrollment_id", "lecture_id", name="unique_enrollment_lecture"),
    )

    enrollment = relationship("Enrollment", back_populates="completed_lectures")
