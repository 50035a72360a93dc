from enum import Enum


class RoleEnum(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"

class CourseStatusEnum(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class CourseLevelEnum(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    ALL_LEVELS = "All Levels"

class EnrollmentStatusEnum(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

class PaymentMethodEnum(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    BANK_TRANSFER = "bank_transfer"
    CRYPTO = "crypto"

class PaymentStatusEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

class RefundStatusEnum(str, Enum):
    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


COURSE_CATEGORIES = [
    "Programming", "Business", "Design", "Languages", "Music",
    "Cybersecurity", "Cloud Computing", "Blockchain", "Game Development",
    "Artificial Intelligence", "Mobile Development", "Data Science",
    "DevOps", "Professional Skills",
]

DEFAULT_CURRENCY = "USD"

# Bounds shared by the ORM constraints and the request schemas
PROGRESS_MIN = 0
PROGRESS_MAX = 100
RATING_MIN = 1
RATING_MAX = 5
REVIEW_MAX_LENGTH = 1000
NOTES_MAX_LENGTH = 1000
REFUND_REASON_MIN_LENGTH = 10
REFUND_REASON_MAX_LENGTH = 500
FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
COURSE_TITLE_MIN_LENGTH = 5
COURSE_TITLE_MAX_LENGTH = 100
COURSE_DESCRIPTION_MIN_LENGTH = 20
COURSE_DESCRIPTION_MAX_LENGTH = 1000

# Used only when a course has no registered lectures
FALLBACK_PROGRESS_PER_LECTURE = 10

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
COURSE_PAGE_SIZE = 12
MAX_COURSE_PAGE_SIZE = 50

CERTIFICATE_ID_PREFIX = "CERT"
CERTIFICATE_URL_PREFIX = "/certificates"

# Upper bounds for client-supplied integers; ids fit a signed 32-bit column
MAX_ID = 2**31 - 1
MAX_PAGE = 100_000
MAX_LECTURE_TIME_SPENT = 24 * 60 * 60  # seconds
MAX_LECTURE_DURATION = 24 * 60  # minutes
MAX_LECTURE_POSITION = 10_000

FEATURED_COURSES_LIMIT = 6
BIO_MAX_LENGTH = 500
