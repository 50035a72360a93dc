from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import RATING_MIN, RATING_MAX


class CourseReview(Base):
    __tablename__ = "course_reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'course_id', name='unique_user_course_review'),
        CheckConstraint(f"rating >= {RATING_MIN} AND rating <= {RATING_MAX}", name="ck_course_review_rating_range"),
    )

    user = relationship("User", back_populates="course_reviews")
    course = relationship("Course", back_populates="reviews")
