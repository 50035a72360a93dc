import logging
import math
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.constants import (
    EnrollmentStatusEnum, PaymentStatusEnum, RefundStatusEnum, PROGRESS_MAX,
)
from app.core.exceptions import (
    BadRequestError, ConcurrencyError, ConflictError, InvalidStateError, NotFoundError,
)
from app.crud.course import course as crud_course
from app.crud.course_review import course_review as crud_review
from app.crud.enrollment import enrollment as crud_enrollment
from app.models.enrollment import Enrollment
from app.models.user import User
from app.schemas.enrollment import (
    EnrollmentCreate, ProgressUpdate, NotesUpdate, ReviewCreate, RefundRequest, RefundStatusUpdate,
    EnrollmentPagination,
)
from app.utils import enrollment_state
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class EnrollmentService:

    def _get_or_raise(self, db: Session, enrollment_id: int) -> Enrollment:
        enrollment = crud_enrollment.get(db, id=enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment not found")
        return enrollment

    def _save(self, db: Session, enrollment: Enrollment) -> Enrollment:
        enrollment_id = enrollment.id
        try:
            return crud_enrollment.save(db, db_obj=enrollment)
        except StaleDataError as exc:
            logger.warning(f"Stale write on enrollment {enrollment_id}: {exc}")
            raise ConcurrencyError() from exc

    def _apply_transition(self, enrollment: Enrollment, now: datetime) -> None:
        new_status = enrollment_state.next_status(enrollment.status, enrollment.progress)
        if new_status != enrollment.status:
            logger.info(f"Enrollment {enrollment.id} moved from {enrollment.status.value} to {new_status.value}")
            enrollment.status = new_status
            if new_status == EnrollmentStatusEnum.COMPLETED:
                enrollment.completion_date = now

    def enroll(self, db: Session, enrollment_in: EnrollmentCreate, current_user: User) -> Enrollment:
        course = crud_course.get(db, id=enrollment_in.course_id)
        if not course:
            raise NotFoundError("Course not found")

        if not course.is_published:
            raise InvalidStateError("Course is not available for enrollment")

        existing = crud_enrollment.get_by_student_and_course(
            db, student_id=current_user.id, course_id=course.id
        )
        if existing:
            raise ConflictError("You are already enrolled in this course")

        now = datetime.utcnow()
        try:
            enrollment = crud_enrollment.create(db, obj_in={
                "student_id": current_user.id,
                "course_id": course.id,
                "instructor_id": course.instructor_id,
                "status": EnrollmentStatusEnum.ACTIVE,
                "progress": 0,
                "enrollment_date": now,
                "last_accessed": now,
                "payment_amount": course.price,
                "payment_currency": course.currency,
                "payment_method": enrollment_in.payment_method,
                "payment_transaction_id": enrollment_in.transaction_id,
                "payment_status": PaymentStatusEnum.COMPLETED,
                "payment_paid_at": now,
            })
        except IntegrityError as exc:
            # A concurrent request inserted the same (student, course) pair first
            logger.warning(f"Duplicate enrollment insert for user {current_user.id} course {course.id}: {exc.orig}")
            raise ConflictError("You are already enrolled in this course") from exc

        crud_course.increment_enrollment_count(db, course_id=course.id)

        logger.info(f"User {current_user.id} enrolled in course {course.id} (enrollment {enrollment.id})")
        return crud_enrollment.get(db, id=enrollment.id)

    def get_enrollment(self, db: Session, enrollment_id: int, current_user: User) -> Enrollment:
        enrollment = self._get_or_raise(db, enrollment_id)
        permission_helper.require_enrollment_owner(current_user, enrollment, "Not authorized to view this enrollment")
        return enrollment

    def complete_lecture(self, db: Session, enrollment_id: int, progress_in: ProgressUpdate, current_user: User) -> Enrollment:
        enrollment = self._get_or_raise(db, enrollment_id)
        permission_helper.require_enrollment_owner(current_user, enrollment)

        total_lectures = crud_course.count_lectures(db, course_id=enrollment.course_id)
        if total_lectures > 0 and not crud_course.get_lecture(
            db, course_id=enrollment.course_id, lecture_id=progress_in.lecture_id
        ):
            raise BadRequestError("Lecture does not belong to this course")

        now = datetime.utcnow()
        if not enrollment.has_completed_lecture(progress_in.lecture_id):
            crud_enrollment.add_completed_lecture(
                db, enrollment=enrollment, lecture_id=progress_in.lecture_id, time_spent=progress_in.time_spent
            )
            enrollment.total_time_spent += enrollment_state.seconds_to_minutes(progress_in.time_spent)

        computed = enrollment_state.compute_progress(len(enrollment.completed_lectures), total_lectures)
        enrollment.progress = max(enrollment.progress, computed)
        enrollment.last_accessed = now
        self._apply_transition(enrollment, now)

        return self._save(db, enrollment)

    def update_notes(self, db: Session, enrollment_id: int, notes_in: NotesUpdate, current_user: User) -> Enrollment:
        enrollment = self._get_or_raise(db, enrollment_id)
        permission_helper.require_enrollment_owner(current_user, enrollment)

        enrollment.notes = notes_in.notes
        enrollment.last_accessed = datetime.utcnow()
        return self._save(db, enrollment)

    def issue_certificate(self, db: Session, enrollment_id: int, current_user: User) -> Enrollment:
        enrollment = self._get_or_raise(db, enrollment_id)
        permission_helper.require_enrollment_owner(current_user, enrollment, "Not authorized to access this certificate")

        if enrollment.progress != PROGRESS_MAX or enrollment.certificate_issued:
            reason = "already_issued" if enrollment.certificate_issued else "not_completed"
            raise InvalidStateError(
                "Cannot issue certificate: course not completed or already issued",
                details={"reason": reason}
            )

        now = datetime.utcnow()
        enrollment.certificate_issued = True
        enrollment.certificate_issued_at = now
        enrollment.certificate_id = enrollment_state.build_certificate_id(enrollment.id, now)
        enrollment.certificate_download_url = enrollment_state.certificate_download_url(enrollment.certificate_id)
        self._apply_transition(enrollment, now)

        enrollment = self._save(db, enrollment)
        logger.info(f"Certificate {enrollment.certificate_id} issued for enrollment {enrollment.id}")
        return enrollment

    def request_refund(self, db: Session, enrollment_id: int, refund_in: RefundRequest, current_user: User) -> Enrollment:
        enrollment = self._get_or_raise(db, enrollment_id)
        permission_helper.require_enrollment_owner(
            current_user, enrollment, "Not authorized to request refund for this enrollment"
        )

        if enrollment.refund_requested:
            raise ConflictError("Refund already requested")

        enrollment.refund_requested = True
        enrollment.refund_reason = refund_in.reason
        enrollment.refund_status = RefundStatusEnum.PENDING
        self._apply_transition(enrollment, datetime.utcnow())

        enrollment = self._save(db, enrollment)
        logger.info(f"Refund requested for enrollment {enrollment.id}")
        return enrollment

    def process_refund(self, db: Session, enrollment_id: int, refund_in: RefundStatusUpdate) -> Enrollment:
        """Admin decision on a refund.

        Any refund status may be set from any other; only ``none`` is
        rejected at the request boundary.
        """
        enrollment = self._get_or_raise(db, enrollment_id)

        now = datetime.utcnow()
        enrollment.refund_status = refund_in.refund_status
        if refund_in.refund_amount is not None:
            enrollment.refund_amount = refund_in.refund_amount
        enrollment.refund_processed_at = now

        if refund_in.refund_status == RefundStatusEnum.APPROVED:
            enrollment.payment_status = PaymentStatusEnum.REFUNDED
        elif enrollment.payment_status == PaymentStatusEnum.REFUNDED:
            enrollment.payment_status = PaymentStatusEnum.COMPLETED
        self._apply_transition(enrollment, now)

        enrollment = self._save(db, enrollment)
        logger.info(f"Refund for enrollment {enrollment.id} set to {enrollment.refund_status.value}")
        return enrollment

    def add_review(self, db: Session, enrollment_id: int, review_in: ReviewCreate, current_user: User) -> Enrollment:
        enrollment = self._get_or_raise(db, enrollment_id)
        permission_helper.require_enrollment_owner(current_user, enrollment, "Not authorized to review this course")

        if enrollment.rating_given:
            raise ConflictError("You have already reviewed this course")

        now = datetime.utcnow()
        enrollment.rating_given = True
        enrollment.rating_value = review_in.rating
        enrollment.rating_review = review_in.review
        enrollment.rating_reviewed_at = now
        self._apply_transition(enrollment, now)
        enrollment = self._save(db, enrollment)

        # Same transaction as the enrollment write
        course = enrollment.course
        if crud_review.get_by_user_and_course(db, user_id=current_user.id, course_id=course.id):
            logger.info(f"User {current_user.id} already has a review on course {course.id}; aggregate left unchanged")
        else:
            crud_review.add_review(
                db, course=course, user_id=current_user.id, rating=review_in.rating, comment=review_in.review
            )

        return enrollment

    def get_my_courses(self, db: Session, current_user: User, status_filter: str = "active") -> List[Enrollment]:
        """``all`` lists every enrollment; an unrecognised status matches nothing."""
        if status_filter == "all":
            return crud_enrollment.get_by_student(db, student_id=current_user.id)
        try:
            status = EnrollmentStatusEnum(status_filter)
        except ValueError:
            return []
        return crud_enrollment.get_by_student(db, student_id=current_user.id, status=status)

    def get_course_enrollments(self, db: Session, course_id: int, current_user: User) -> List[Enrollment]:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found")

        permission_helper.require_course_management_permission(
            current_user, course, "Not authorized to view enrollments for this course"
        )
        return crud_enrollment.get_by_course(db, course_id=course_id)

    def list_enrollments(
        self,
        db: Session,
        *,
        page: int,
        limit: int,
        status: Optional[EnrollmentStatusEnum] = None,
        course_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Tuple[List[Enrollment], EnrollmentPagination]:
        enrollments, total = crud_enrollment.get_filtered(
            db,
            skip=(page - 1) * limit,
            limit=limit,
            status=status,
            course_id=course_id,
            student_id=student_id,
        )
        pagination = EnrollmentPagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_enrollments=total,
            limit=limit,
        )
        return enrollments, pagination

    def get_stats(self, db: Session) -> dict:
        return crud_enrollment.get_stats(db)


enrollment_service = EnrollmentService()
