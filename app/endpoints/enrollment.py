from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum, EnrollmentStatusEnum, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_ID, MAX_PAGE
from app.models.user import User
from app.schemas.response import APIResponse
from app.schemas.enrollment import (
    Enrollment, EnrollmentCreate, ProgressUpdate, NotesUpdate, ReviewCreate, RefundRequest, RefundStatusUpdate,
    CertificateIssued, Certificate, EnrollmentList, EnrollmentStats,
)
from app.services.enrollment import enrollment_service
from app.utils import deps

router = APIRouter()


@router.post("", response_model=APIResponse[Enrollment], status_code=status.HTTP_201_CREATED)
def enroll_in_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_in: EnrollmentCreate,
    current_user: User = Depends(deps.require_role(RoleEnum.STUDENT))
):
    enrollment = enrollment_service.enroll(db, enrollment_in=enrollment_in, current_user=current_user)
    return APIResponse(message="Successfully enrolled in course", data=Enrollment.model_validate(enrollment))


@router.get("", response_model=APIResponse[EnrollmentList])
def list_enrollments(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.require_role(RoleEnum.ADMIN)),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status_filter: Optional[EnrollmentStatusEnum] = Query(None, alias="status"),
    course_id: Optional[int] = Query(None, alias="courseId", gt=0, le=MAX_ID),
    student_id: Optional[int] = Query(None, alias="studentId", gt=0, le=MAX_ID),
):
    enrollments, pagination = enrollment_service.list_enrollments(
        db, page=page, limit=limit, status=status_filter, course_id=course_id, student_id=student_id
    )
    return APIResponse(
        message="Enrollments retrieved successfully",
        data=EnrollmentList(enrollments=[Enrollment.model_validate(e) for e in enrollments], pagination=pagination)
    )


@router.get("/my-courses", response_model=APIResponse[List[Enrollment]])
def get_my_courses(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    status_filter: str = Query("active", alias="status", max_length=20),
):
    enrollments = enrollment_service.get_my_courses(db, current_user=current_user, status_filter=status_filter)
    return APIResponse(
        message="Enrolled courses retrieved successfully",
        data=[Enrollment.model_validate(e) for e in enrollments]
    )


@router.get("/stats", response_model=APIResponse[EnrollmentStats])
def get_enrollment_stats(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.require_role(RoleEnum.ADMIN)),
):
    stats = enrollment_service.get_stats(db)
    return APIResponse(message="Enrollment statistics retrieved successfully", data=EnrollmentStats(**stats))


@router.get("/course/{course_id}", response_model=APIResponse[List[Enrollment]])
def get_course_enrollments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int = Path(..., gt=0, le=MAX_ID),
    current_user: User = Depends(deps.require_role(RoleEnum.INSTRUCTOR, RoleEnum.ADMIN))
):
    enrollments = enrollment_service.get_course_enrollments(db, course_id=course_id, current_user=current_user)
    return APIResponse(
        message="Course enrollments retrieved successfully",
        data=[Enrollment.model_validate(e) for e in enrollments]
    )


@router.get("/{enrollment_id}", response_model=APIResponse[Enrollment])
def read_enrollment(
    *,
    db: Session = Depends(deps.get_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    current_user: User = Depends(deps.get_current_user)
):
    enrollment = enrollment_service.get_enrollment(db, enrollment_id=enrollment_id, current_user=current_user)
    return APIResponse(message="Enrollment retrieved successfully", data=Enrollment.model_validate(enrollment))


@router.put("/{enrollment_id}/progress", response_model=APIResponse[Enrollment])
def update_progress(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    progress_in: ProgressUpdate,
    current_user: User = Depends(deps.get_current_user)
):
    enrollment = enrollment_service.complete_lecture(
        db, enrollment_id=enrollment_id, progress_in=progress_in, current_user=current_user
    )
    return APIResponse(message="Progress updated successfully", data=Enrollment.model_validate(enrollment))


@router.put("/{enrollment_id}/notes", response_model=APIResponse[Enrollment])
def update_notes(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    notes_in: NotesUpdate,
    current_user: User = Depends(deps.get_current_user)
):
    enrollment = enrollment_service.update_notes(
        db, enrollment_id=enrollment_id, notes_in=notes_in, current_user=current_user
    )
    return APIResponse(message="Notes updated successfully", data=Enrollment.model_validate(enrollment))


@router.post("/{enrollment_id}/review", response_model=APIResponse[Enrollment])
def add_review(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    review_in: ReviewCreate,
    current_user: User = Depends(deps.get_current_user)
):
    enrollment = enrollment_service.add_review(
        db, enrollment_id=enrollment_id, review_in=review_in, current_user=current_user
    )
    return APIResponse(message="Review added successfully", data=Enrollment.model_validate(enrollment))


@router.post("/{enrollment_id}/certificate", response_model=APIResponse[CertificateIssued])
def issue_certificate(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    current_user: User = Depends(deps.get_current_user)
):
    enrollment = enrollment_service.issue_certificate(db, enrollment_id=enrollment_id, current_user=current_user)
    enrollment_out = Enrollment.model_validate(enrollment)
    return APIResponse(
        message="Certificate issued successfully",
        data=CertificateIssued(certificate=Certificate.model_validate(enrollment_out.certificate), enrollment=enrollment_out)
    )


@router.post("/{enrollment_id}/refund", response_model=APIResponse[Enrollment])
def request_refund(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    refund_in: RefundRequest,
    current_user: User = Depends(deps.get_current_user)
):
    enrollment = enrollment_service.request_refund(
        db, enrollment_id=enrollment_id, refund_in=refund_in, current_user=current_user
    )
    return APIResponse(message="Refund request submitted successfully", data=Enrollment.model_validate(enrollment))


@router.put("/{enrollment_id}/refund-status", response_model=APIResponse[Enrollment])
def update_refund_status(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int = Path(..., gt=0, le=MAX_ID),
    refund_in: RefundStatusUpdate,
    current_user: User = Depends(deps.require_role(RoleEnum.ADMIN))
):
    enrollment = enrollment_service.process_refund(db, enrollment_id=enrollment_id, refund_in=refund_in)
    return APIResponse(message="Refund status updated successfully", data=Enrollment.model_validate(enrollment))
