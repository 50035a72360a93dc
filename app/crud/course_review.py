from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Optional, Tuple

from app.crud.base import CRUDBase
from app.models.course import Course
from app.models.course_review import CourseReview
from app.schemas.enrollment import ReviewCreate


class CRUDCourseReview(CRUDBase[CourseReview, ReviewCreate, ReviewCreate]):

    def get_by_user_and_course(self, db: Session, user_id: int, course_id: int) -> Optional[CourseReview]:
        return (
            db.query(CourseReview)
            .filter(CourseReview.user_id == user_id)
            .filter(CourseReview.course_id == course_id)
            .first()
        )

    def get_average_and_count(self, db: Session, course_id: int) -> Tuple[float, int]:
        average, count = (
            db.query(func.avg(CourseReview.rating), func.count(CourseReview.id))
            .filter(CourseReview.course_id == course_id)
            .one()
        )
        return (round(float(average), 2) if average else 0.0), int(count or 0)

    def add_review(self, db: Session, *, course: Course, user_id: int, rating: int, comment: Optional[str]) -> CourseReview:
        """Store the review and refresh the course's aggregate rating from the review rows."""
        review = self.create(db, obj_in={
            "course_id": course.id,
            "user_id": user_id,
            "rating": rating,
            "comment": comment,
        })
        course.rating_average, course.rating_count = self.get_average_and_count(db, course_id=course.id)
        db.add(course)
        db.flush()
        return review


course_review = CRUDCourseReview(CourseReview)
