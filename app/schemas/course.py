from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.schemas.base import CamelModel
from app.core.constants import (
    CourseLevelEnum, CourseStatusEnum, COURSE_CATEGORIES, DEFAULT_CURRENCY,
    COURSE_TITLE_MIN_LENGTH, COURSE_TITLE_MAX_LENGTH,
    COURSE_DESCRIPTION_MIN_LENGTH, COURSE_DESCRIPTION_MAX_LENGTH,
    MAX_ID, MAX_LECTURE_DURATION, MAX_LECTURE_POSITION, RATING_MIN, RATING_MAX, REVIEW_MAX_LENGTH,
)


def _check_category(v):
    if v is not None and v not in COURSE_CATEGORIES:
        raise ValueError("Invalid category")
    return v


class LectureCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    position: Optional[int] = Field(None, ge=0, le=MAX_LECTURE_POSITION)
    duration: int = Field(0, ge=0, le=MAX_LECTURE_DURATION)

class Lecture(CamelModel):
    id: int
    course_id: int
    title: str
    position: int
    duration: int

class CourseBase(CamelModel):
    title: str = Field(..., min_length=COURSE_TITLE_MIN_LENGTH, max_length=COURSE_TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=COURSE_DESCRIPTION_MIN_LENGTH, max_length=COURSE_DESCRIPTION_MAX_LENGTH)
    category: str
    level: CourseLevelEnum = CourseLevelEnum.ALL_LEVELS
    thumbnail: Optional[str] = None
    price: float = Field(..., ge=0)
    currency: str = Field(DEFAULT_CURRENCY, min_length=3, max_length=3)

    @field_validator("category")
    def validate_category(cls, v):
        return _check_category(v)

class CourseCreate(CourseBase):
    # Only honoured for admins; instructors always own what they create
    instructor_id: Optional[int] = Field(None, gt=0, le=MAX_ID)

class CourseUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=COURSE_TITLE_MIN_LENGTH, max_length=COURSE_TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, min_length=COURSE_DESCRIPTION_MIN_LENGTH, max_length=COURSE_DESCRIPTION_MAX_LENGTH)
    category: Optional[str] = None
    level: Optional[CourseLevelEnum] = None
    thumbnail: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[CourseStatusEnum] = None
    is_featured: Optional[bool] = None

    @field_validator("category")
    def validate_category(cls, v):
        return _check_category(v)

class CourseSummary(CamelModel):
    id: int
    title: str
    thumbnail: Optional[str] = None
    instructor_id: int

class Course(CourseBase):
    id: int
    status: CourseStatusEnum
    is_featured: bool = False
    instructor_id: int
    enrollment_count: int = 0
    rating_average: float = 0.0
    rating_count: int = 0
    total_lectures: int = 0
    lectures: List[Lecture] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CoursePagination(CamelModel):
    current_page: int
    total_pages: int
    total_courses: int
    has_next_page: bool
    has_prev_page: bool
    limit: int

class CourseList(CamelModel):
    courses: List[Course]
    pagination: CoursePagination

class CourseReviewCreate(CamelModel):
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    comment: Optional[str] = Field(None, max_length=REVIEW_MAX_LENGTH)

    @field_validator("comment", mode="before")
    def strip_comment(cls, v):
        return v.strip() if isinstance(v, str) else v

class CourseReview(CamelModel):
    id: int
    user_id: int
    course_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

class CategorySummary(CamelModel):
    """Published-course aggregate for one category."""
    category: str
    count: int
    average_rating: float
    average_price: float
