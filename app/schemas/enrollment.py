from pydantic import Field, field_validator, model_validator
from typing import Optional, List, Any
from datetime import datetime

from app.schemas.base import CamelModel
from app.schemas.course import CourseSummary
from app.schemas.user import UserSummary
from app.core.constants import (
    EnrollmentStatusEnum, PaymentMethodEnum, PaymentStatusEnum, RefundStatusEnum,
    RATING_MIN, RATING_MAX, REVIEW_MAX_LENGTH, NOTES_MAX_LENGTH,
    MAX_ID, MAX_LECTURE_TIME_SPENT,
    REFUND_REASON_MIN_LENGTH, REFUND_REASON_MAX_LENGTH,
)


# Requests

class EnrollmentCreate(CamelModel):
    course_id: int = Field(..., gt=0, le=MAX_ID)
    payment_method: PaymentMethodEnum
    transaction_id: str = Field(..., min_length=1)

    @field_validator("transaction_id")
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Transaction ID is required")
        return v.strip()

class ProgressUpdate(CamelModel):
    lecture_id: int = Field(..., gt=0, le=MAX_ID)
    time_spent: int = Field(0, ge=0, le=MAX_LECTURE_TIME_SPENT)

class NotesUpdate(CamelModel):
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)

    @field_validator("notes", mode="before")
    def strip_notes(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    review: Optional[str] = Field(None, max_length=REVIEW_MAX_LENGTH)

    @field_validator("review", mode="before")
    def strip_review(cls, v):
        return v.strip() if isinstance(v, str) else v

class RefundRequest(CamelModel):
    reason: str = Field(..., min_length=REFUND_REASON_MIN_LENGTH, max_length=REFUND_REASON_MAX_LENGTH)

    @field_validator("reason", mode="before")
    def strip_reason(cls, v):
        return v.strip() if isinstance(v, str) else v

class RefundStatusUpdate(CamelModel):
    refund_status: RefundStatusEnum
    refund_amount: Optional[float] = Field(None, ge=0)

    @field_validator("refund_status")
    def not_none(cls, v):
        if v == RefundStatusEnum.NONE:
            raise ValueError("Invalid refund status")
        return v


# Responses

class Payment(CamelModel):
    amount: float
    currency: str
    method: PaymentMethodEnum
    transaction_id: str
    status: PaymentStatusEnum
    paid_at: Optional[datetime] = None

class Certificate(CamelModel):
    issued: bool = False
    issued_at: Optional[datetime] = None
    certificate_id: Optional[str] = None
    download_url: Optional[str] = None

class Rating(CamelModel):
    given: bool = False
    rating: Optional[int] = None
    review: Optional[str] = None
    reviewed_at: Optional[datetime] = None

class CompletedLecture(CamelModel):
    lecture_id: int
    completed_at: datetime
    time_spent: int

class Enrollment(CamelModel):
    id: int
    student_id: int
    course_id: int
    instructor_id: int
    enrollment_date: datetime
    completion_date: Optional[datetime] = None
    status: EnrollmentStatusEnum
    effective_status: EnrollmentStatusEnum
    progress: int
    completed_lectures: List[CompletedLecture] = Field(default_factory=list)
    last_accessed: Optional[datetime] = None
    total_time_spent: int = 0
    notes: Optional[str] = None
    certificate: Certificate
    payment: Payment
    rating: Rating
    access_expiry: Optional[datetime] = None
    is_lifetime: bool = True
    refund_requested: bool = False
    refund_reason: Optional[str] = None
    refund_status: RefundStatusEnum = RefundStatusEnum.NONE
    refund_processed_at: Optional[datetime] = None
    refund_amount: Optional[float] = None
    is_completed: bool
    is_expired: bool
    enrollment_duration: int
    course: Optional[CourseSummary] = None
    instructor: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_orm_record(cls, data: Any):
        # Flat ORM columns are grouped into the payment/certificate/rating sub-records
        if isinstance(data, dict) or not hasattr(data, "payment_amount"):
            return data
        return {
            "id": data.id,
            "student_id": data.student_id,
            "course_id": data.course_id,
            "instructor_id": data.instructor_id,
            "enrollment_date": data.enrollment_date,
            "completion_date": data.completion_date,
            "status": data.status,
            "effective_status": data.effective_status,
            "progress": data.progress,
            "completed_lectures": list(data.completed_lectures),
            "last_accessed": data.last_accessed,
            "total_time_spent": data.total_time_spent,
            "notes": data.notes,
            "certificate": {
                "issued": data.certificate_issued,
                "issued_at": data.certificate_issued_at,
                "certificate_id": data.certificate_id,
                "download_url": data.certificate_download_url,
            },
            "payment": {
                "amount": data.payment_amount,
                "currency": data.payment_currency,
                "method": data.payment_method,
                "transaction_id": data.payment_transaction_id,
                "status": data.payment_status,
                "paid_at": data.payment_paid_at,
            },
            "rating": {
                "given": data.rating_given,
                "rating": data.rating_value,
                "review": data.rating_review,
                "reviewed_at": data.rating_reviewed_at,
            },
            "access_expiry": data.access_expiry,
            "is_lifetime": data.is_lifetime,
            "refund_requested": data.refund_requested,
            "refund_reason": data.refund_reason,
            "refund_status": data.refund_status,
            "refund_processed_at": data.refund_processed_at,
            "refund_amount": data.refund_amount,
            "is_completed": data.is_completed,
            "is_expired": data.is_expired,
            "enrollment_duration": data.enrollment_duration,
            "course": data.course,
            "instructor": data.instructor,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }

class CertificateIssued(CamelModel):
    certificate: Certificate
    enrollment: Enrollment

class EnrollmentPagination(CamelModel):
    current_page: int
    total_pages: int
    total_enrollments: int
    limit: int

class EnrollmentList(CamelModel):
    enrollments: List[Enrollment]
    pagination: EnrollmentPagination

class EnrollmentStats(CamelModel):
    total_enrollments: int = 0
    active_enrollments: int = 0
    completed_enrollments: int = 0
    cancelled_enrollments: int = 0
    total_revenue: float = 0.0
