from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func
from typing import Any, Dict, List, Optional, Tuple

from app.crud.base import CRUDBase
from app.core.constants import CourseLevelEnum, CourseStatusEnum
from app.models.course import Course
from app.models.lecture import Lecture
from app.schemas.course import CourseCreate, CourseUpdate


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Course).options(
            selectinload(Course.lectures),
            selectinload(Course.instructor),
        )

    def get(self, db: Session, id: int) -> Optional[Course]:
        return self._query_with_relationships(db).filter(Course.id == id).first()

    def get_published(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 12,
        category: Optional[str] = None,
        level: Optional[CourseLevelEnum] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
    ) -> Tuple[List[Course], int]:
        query = self._query_with_relationships(db).filter(Course.status == CourseStatusEnum.PUBLISHED)
        if category:
            query = query.filter(Course.category == category)
        if level and level != CourseLevelEnum.ALL_LEVELS:
            query = query.filter(Course.level == level)
        if price_min is not None:
            query = query.filter(Course.price >= price_min)
        if price_max is not None:
            query = query.filter(Course.price <= price_max)

        total = query.count()
        courses = query.order_by(Course.created_at.desc(), Course.id.desc()).offset(skip).limit(limit).all()
        return courses, total

    def get_featured(self, db: Session, *, limit: int) -> List[Course]:
        return (
            self._query_with_relationships(db)
            .filter(Course.status == CourseStatusEnum.PUBLISHED)
            .filter(Course.is_featured.is_(True))
            .order_by(Course.rating_average.desc(), Course.enrollment_count.desc(), Course.id.desc())
            .limit(limit)
            .all()
        )

    def get_category_stats(self, db: Session) -> List[Dict[str, Any]]:
        count = func.count(Course.id)
        rows = (
            db.query(Course.category, count, func.avg(Course.rating_average), func.avg(Course.price))
            .filter(Course.status == CourseStatusEnum.PUBLISHED)
            .group_by(Course.category)
            .order_by(count.desc(), Course.category)
            .all()
        )
        return [
            {
                "category": category,
                "count": int(total),
                "average_rating": round(float(avg_rating or 0), 2),
                "average_price": round(float(avg_price or 0), 2),
            }
            for category, total, avg_rating, avg_price in rows
        ]

    def increment_enrollment_count(self, db: Session, *, course_id: int) -> None:
        # Incremented in SQL, not read-modify-write
        (
            db.query(Course)
            .filter(Course.id == course_id)
            .update({Course.enrollment_count: Course.enrollment_count + 1}, synchronize_session="fetch")
        )
        db.flush()

    def count_lectures(self, db: Session, *, course_id: int) -> int:
        return db.query(func.count(Lecture.id)).filter(Lecture.course_id == course_id).scalar() or 0

    def get_lecture(self, db: Session, *, course_id: int, lecture_id: int) -> Optional[Lecture]:
        return (
            db.query(Lecture)
            .filter(Lecture.course_id == course_id)
            .filter(Lecture.id == lecture_id)
            .first()
        )

    def add_lecture(self, db: Session, *, course: Course, title: str, duration: int, position: Optional[int] = None) -> Lecture:
        if position is None:
            position = self.count_lectures(db, course_id=course.id)
        lecture = Lecture(course_id=course.id, title=title, duration=duration, position=position)
        db.add(lecture)
        db.flush()
        db.refresh(lecture)
        db.refresh(course)
        return lecture


course = CRUDCourse(Course)
