import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.constants import CourseLevelEnum, CourseStatusEnum, RoleEnum, FEATURED_COURSES_LIMIT
from app.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.crud.course import course as crud_course
from app.crud.course_review import course_review as crud_review
from app.crud.user import user as crud_user
from app.models.course import Course
from app.models.course_review import CourseReview
from app.models.lecture import Lecture
from app.models.user import User
from app.schemas.course import CourseCreate, CourseUpdate, CoursePagination, LectureCreate, CourseReviewCreate
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class CourseService:

    def _get_or_raise(self, db: Session, course_id: int) -> Course:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def create_course(self, db: Session, course_in: CourseCreate, current_user: User) -> Course:
        instructor_id = current_user.id
        if permission_helper.is_admin(current_user) and course_in.instructor_id:
            instructor = crud_user.get(db, id=course_in.instructor_id)
            if not instructor:
                raise NotFoundError("Instructor not found")
            if instructor.role not in (RoleEnum.INSTRUCTOR, RoleEnum.ADMIN):
                raise BadRequestError("Assigned user is not an instructor")
            instructor_id = instructor.id

        course_data = course_in.model_dump(exclude={"instructor_id"})
        course_data["instructor_id"] = instructor_id
        course_data["status"] = CourseStatusEnum.DRAFT
        new_course = crud_course.create(db, obj_in=course_data)

        logger.info(f"Course {new_course.id} created by user {current_user.id}")
        return new_course

    def update_course(self, db: Session, course_id: int, course_in: CourseUpdate, current_user: User) -> Course:
        course = self._get_or_raise(db, course_id)
        permission_helper.require_course_management_permission(current_user, course, "Not authorized to update this course")

        update_data = course_in.model_dump(exclude_unset=True)
        if "is_featured" in update_data and not permission_helper.is_admin(current_user):
            raise ForbiddenError("Only admins can feature courses")
        if "status" in update_data and update_data["status"] != course.status:
            logger.info(f"Course {course.id} status {course.status.value} -> {update_data['status'].value}")
        return crud_course.update(db, db_obj=course, obj_in=update_data)

    def archive_course(self, db: Session, course_id: int, current_user: User) -> Course:
        course = self._get_or_raise(db, course_id)
        permission_helper.require_course_management_permission(current_user, course, "Not authorized to delete this course")

        return crud_course.update(db, db_obj=course, obj_in={"status": CourseStatusEnum.ARCHIVED})

    def get_course(self, db: Session, course_id: int, current_user: Optional[User] = None) -> Course:
        course = self._get_or_raise(db, course_id)
        if course.is_published:
            return course
        # Unpublished courses are hidden from everyone but their owner and admins
        if current_user is None or not permission_helper.can_manage_course(current_user, course):
            raise NotFoundError("Course not found")
        return course

    def list_courses(
        self,
        db: Session,
        *,
        page: int,
        limit: int,
        category: Optional[str] = None,
        level: Optional[CourseLevelEnum] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
    ) -> Tuple[List[Course], CoursePagination]:
        if price_min is not None and price_max is not None and price_min > price_max:
            raise BadRequestError("Minimum price cannot exceed maximum price")

        courses, total = crud_course.get_published(
            db,
            skip=(page - 1) * limit,
            limit=limit,
            category=category,
            level=level,
            price_min=price_min,
            price_max=price_max,
        )
        total_pages = math.ceil(total / limit)
        pagination = CoursePagination(
            current_page=page,
            total_pages=total_pages,
            total_courses=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
            limit=limit,
        )
        return courses, pagination

    def add_lecture(self, db: Session, course_id: int, lecture_in: LectureCreate, current_user: User) -> Lecture:
        course = self._get_or_raise(db, course_id)
        if not permission_helper.can_manage_course(current_user, course):
            raise ForbiddenError("Not authorized to add lectures to this course")

        return crud_course.add_lecture(
            db, course=course, title=lecture_in.title, duration=lecture_in.duration, position=lecture_in.position
        )

    def get_featured(self, db: Session) -> List[Course]:
        return crud_course.get_featured(db, limit=FEATURED_COURSES_LIMIT)

    def get_categories(self, db: Session) -> List[dict]:
        return crud_course.get_category_stats(db)

    def add_review(self, db: Session, course_id: int, review_in: CourseReviewCreate, current_user: User) -> CourseReview:
        course = self._get_or_raise(db, course_id)
        if not course.is_published:
            raise NotFoundError("Course not found")

        if crud_review.get_by_user_and_course(db, user_id=current_user.id, course_id=course.id):
            raise ConflictError("You have already reviewed this course")

        review = crud_review.add_review(
            db, course=course, user_id=current_user.id, rating=review_in.rating, comment=review_in.comment
        )
        logger.info(f"User {current_user.id} reviewed course {course.id} with {review_in.rating}")
        return review


course_service = CourseService()
