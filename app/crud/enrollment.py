from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func, case
from typing import List, Optional, Tuple, Dict, Any

from app.crud.base import CRUDBase
from app.core.constants import EnrollmentStatusEnum
from app.models.enrollment import Enrollment, CompletedLecture
from app.schemas.enrollment import EnrollmentCreate


class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentCreate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Enrollment).options(
            selectinload(Enrollment.course),
            selectinload(Enrollment.instructor),
            selectinload(Enrollment.completed_lectures),
        )

    def get(self, db: Session, id: int) -> Optional[Enrollment]:
        return self._query_with_relationships(db).filter(Enrollment.id == id).first()

    def get_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> Optional[Enrollment]:
        return (
            db.query(Enrollment)
            .filter(Enrollment.student_id == student_id)
            .filter(Enrollment.course_id == course_id)
            .first()
        )

    def get_by_student(self, db: Session, student_id: int, status: Optional[EnrollmentStatusEnum] = None) -> List[Enrollment]:
        query = self._query_with_relationships(db).filter(Enrollment.student_id == student_id)
        if status is not None:
            query = query.filter(Enrollment.status == status)
        return query.order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc()).all()

    def get_by_course(self, db: Session, course_id: int) -> List[Enrollment]:
        return (
            self._query_with_relationships(db)
            .options(selectinload(Enrollment.student))
            .filter(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
            .all()
        )

    def get_filtered(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 20,
        status: Optional[EnrollmentStatusEnum] = None,
        course_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Tuple[List[Enrollment], int]:
        query = db.query(Enrollment)
        if status is not None:
            query = query.filter(Enrollment.status == status)
        if course_id is not None:
            query = query.filter(Enrollment.course_id == course_id)
        if student_id is not None:
            query = query.filter(Enrollment.student_id == student_id)

        total = query.count()
        enrollments = (
            query.options(
                selectinload(Enrollment.course),
                selectinload(Enrollment.instructor),
                selectinload(Enrollment.completed_lectures),
            )
            .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return enrollments, total

    def get_stats(self, db: Session) -> Dict[str, Any]:
        def _count_status(status: EnrollmentStatusEnum):
            return func.coalesce(func.sum(case((Enrollment.status == status, 1), else_=0)), 0)

        row = db.query(
            func.count(Enrollment.id),
            _count_status(EnrollmentStatusEnum.ACTIVE),
            _count_status(EnrollmentStatusEnum.COMPLETED),
            _count_status(EnrollmentStatusEnum.CANCELLED),
            func.coalesce(func.sum(Enrollment.payment_amount), 0),
        ).one()

        return {
            "total_enrollments": int(row[0] or 0),
            "active_enrollments": int(row[1] or 0),
            "completed_enrollments": int(row[2] or 0),
            "cancelled_enrollments": int(row[3] or 0),
            "total_revenue": round(float(row[4] or 0), 2),
        }

    def add_completed_lecture(self, db: Session, *, enrollment: Enrollment, lecture_id: int, time_spent: int) -> CompletedLecture:
        completed = CompletedLecture(lecture_id=lecture_id, time_spent=time_spent)
        enrollment.completed_lectures.append(completed)
        return completed


enrollment = CRUDEnrollment(Enrollment)
