from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum, CourseLevelEnum, COURSE_PAGE_SIZE, MAX_COURSE_PAGE_SIZE, MAX_ID, MAX_PAGE
from app.models.user import User
from app.schemas.response import APIResponse
from app.schemas.course import (
    Course, CourseCreate, CourseUpdate, CourseList, Lecture, LectureCreate,
    CourseReview, CourseReviewCreate, CategorySummary,
)
from app.services.course import course_service
from app.utils import deps

router = APIRouter()


def get_optional_user(
    db: Session = Depends(deps.get_db),
    credentials=Depends(deps.http_bearer)
) -> Optional[User]:
    """Resolves the caller when a bearer token is sent; anonymous otherwise."""
    if credentials is None:
        return None
    return deps.get_current_user(db=db, credentials=credentials)


@router.post("", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate,
    current_user: User = Depends(deps.require_role(RoleEnum.INSTRUCTOR, RoleEnum.ADMIN))
):
    new_course = course_service.create_course(db, course_in=course_in, current_user=current_user)
    return APIResponse(message="Course created successfully", data=Course.model_validate(new_course))


@router.get("", response_model=APIResponse[CourseList])
def list_courses(
    db: Session = Depends(deps.get_db),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(COURSE_PAGE_SIZE, ge=1, le=MAX_COURSE_PAGE_SIZE),
    category: Optional[str] = None,
    level: Optional[CourseLevelEnum] = None,
    price_min: Optional[float] = Query(None, alias="minPrice", ge=0),
    price_max: Optional[float] = Query(None, alias="maxPrice", ge=0),
):
    courses, pagination = course_service.list_courses(
        db,
        page=page,
        limit=limit,
        category=category,
        level=level,
        price_min=price_min,
        price_max=price_max,
    )
    return APIResponse(
        message="Courses retrieved successfully",
        data=CourseList(courses=[Course.model_validate(c) for c in courses], pagination=pagination)
    )


@router.get("/featured", response_model=APIResponse[List[Course]])
def get_featured_courses(db: Session = Depends(deps.get_db)):
    courses = course_service.get_featured(db)
    return APIResponse(message="Featured courses retrieved successfully", data=[Course.model_validate(c) for c in courses])


@router.get("/categories", response_model=APIResponse[List[CategorySummary]])
def get_categories(db: Session = Depends(deps.get_db)):
    categories = course_service.get_categories(db)
    return APIResponse(message="Categories retrieved successfully", data=[CategorySummary(**c) for c in categories])


@router.get("/{course_id}", response_model=APIResponse[Course])
def read_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int = Path(..., gt=0, le=MAX_ID),
    current_user: Optional[User] = Depends(get_optional_user)
):
    course = course_service.get_course(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course retrieved successfully", data=Course.model_validate(course))


@router.put("/{course_id}", response_model=APIResponse[Course])
def update_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int = Path(..., gt=0, le=MAX_ID),
    course_in: CourseUpdate,
    current_user: User = Depends(deps.require_role(RoleEnum.INSTRUCTOR, RoleEnum.ADMIN))
):
    course = course_service.update_course(db, course_id=course_id, course_in=course_in, current_user=current_user)
    return APIResponse(message="Course updated successfully", data=Course.model_validate(course))


@router.delete("/{course_id}", response_model=APIResponse[Course])
def delete_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int = Path(..., gt=0, le=MAX_ID),
    current_user: User = Depends(deps.require_role(RoleEnum.INSTRUCTOR, RoleEnum.ADMIN))
):
    """Archives the course; enrollments referencing it are kept."""
    course = course_service.archive_course(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course archived successfully", data=Course.model_validate(course))


@router.post("/{course_id}/lectures", response_model=APIResponse[Lecture], status_code=status.HTTP_201_CREATED)
def add_lecture(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int = Path(..., gt=0, le=MAX_ID),
    lecture_in: LectureCreate,
    current_user: User = Depends(deps.require_role(RoleEnum.INSTRUCTOR, RoleEnum.ADMIN))
):
    lecture = course_service.add_lecture(db, course_id=course_id, lecture_in=lecture_in, current_user=current_user)
    return APIResponse(message="Lecture added successfully", data=Lecture.model_validate(lecture))


@router.post("/{course_id}/reviews", response_model=APIResponse[CourseReview], status_code=status.HTTP_201_CREATED)
def add_course_review(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int = Path(..., gt=0, le=MAX_ID),
    review_in: CourseReviewCreate,
    current_user: User = Depends(deps.get_current_user)
):
    review = course_service.add_review(db, course_id=course_id, review_in=review_in, current_user=current_user)
    return APIResponse(message="Review added successfully", data=CourseReview.model_validate(review))
