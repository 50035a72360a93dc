from app.core.constants import RoleEnum
from app.core.exceptions import ForbiddenError
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.user import User


class PermissionHelper:
    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == RoleEnum.ADMIN

    @staticmethod
    def is_instructor_of_course(user: User, course: Course) -> bool:
        return course.instructor_id == user.id

    @staticmethod
    def is_enrollment_owner(user: User, enrollment: Enrollment) -> bool:
        return enrollment.student_id == user.id

    @staticmethod
    def can_manage_course(user: User, course: Course) -> bool:
        if PermissionHelper.is_admin(user):
            return True
        return PermissionHelper.is_instructor_of_course(user, course)

    @staticmethod
    def require_enrollment_owner(user: User, enrollment: Enrollment, error_message: str = "Not authorized to update this enrollment"):
        if not PermissionHelper.is_enrollment_owner(user, enrollment):
            raise ForbiddenError(error_message)

    @staticmethod
    def require_course_management_permission(user: User, course: Course, error_message: str = "Not authorized to manage this course"):
        if not PermissionHelper.can_manage_course(user, course):
            raise ForbiddenError(error_message)
