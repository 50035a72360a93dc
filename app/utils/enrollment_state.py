"""Pure rules for the enrollment lifecycle.

Nothing in here touches the database: the service layer calls these to work
out the next state of an enrollment, and the model exposes the derived values
(``is_completed``, ``is_expired``, ``enrollment_duration``) through them so
they are always computed on read.
"""
import math
from datetime import datetime, timezone
from typing import Optional

from app.core.constants import (
    EnrollmentStatusEnum,
    PROGRESS_MIN,
    PROGRESS_MAX,
    FALLBACK_PROGRESS_PER_LECTURE,
    CERTIFICATE_ID_PREFIX,
    CERTIFICATE_URL_PREFIX,
)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def clamp_progress(value: int) -> int:
    return max(PROGRESS_MIN, min(PROGRESS_MAX, int(value)))


def compute_progress(completed_count: int, total_lectures: int) -> int:
    """Percentage of the course covered by ``completed_count`` lectures.

    Courses without registered lectures fall back to a fixed share per
    lecture.
    """
    if completed_count <= 0:
        return PROGRESS_MIN
    if total_lectures > 0:
        return clamp_progress(math.floor(completed_count * 100 / total_lectures))
    return clamp_progress(completed_count * FALLBACK_PROGRESS_PER_LECTURE)


def next_status(current: EnrollmentStatusEnum, progress: int) -> EnrollmentStatusEnum:
    """Status an enrollment moves to after a mutation.

    Only ``active`` reacts to progress; ``completed`` and ``cancelled`` are
    terminal and ``expired`` is never stored.
    """
    if current == EnrollmentStatusEnum.ACTIVE and progress >= PROGRESS_MAX:
        return EnrollmentStatusEnum.COMPLETED
    return current


def is_completed(status: EnrollmentStatusEnum, progress: int) -> bool:
    return status == EnrollmentStatusEnum.COMPLETED or progress == PROGRESS_MAX


def is_expired(is_lifetime: bool, access_expiry: Optional[datetime], now: Optional[datetime] = None) -> bool:
    if is_lifetime or access_expiry is None:
        return False
    now = _as_naive_utc(now or datetime.utcnow())
    return now > _as_naive_utc(access_expiry)


def effective_status(status: EnrollmentStatusEnum, expired: bool) -> EnrollmentStatusEnum:
    if status == EnrollmentStatusEnum.ACTIVE and expired:
        return EnrollmentStatusEnum.EXPIRED
    return status


def enrollment_duration(enrollment_date: Optional[datetime], completion_date: Optional[datetime] = None,
                        now: Optional[datetime] = None) -> int:
    """Whole days (rounded up) between enrolling and completing, or now."""
    if enrollment_date is None:
        return 0
    end = _as_naive_utc(completion_date or now or datetime.utcnow())
    seconds = (end - _as_naive_utc(enrollment_date)).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def seconds_to_minutes(seconds: int) -> int:
    return math.ceil(max(0, seconds) / 60)


def build_certificate_id(enrollment_id: int, issued_at: datetime) -> str:
    issued_ms = int(issued_at.replace(tzinfo=timezone.utc).timestamp() * 1000) if issued_at.tzinfo is None \
        else int(issued_at.timestamp() * 1000)
    return f"{CERTIFICATE_ID_PREFIX}-{enrollment_id}-{issued_ms}"


def certificate_download_url(certificate_id: str) -> str:
    return f"{CERTIFICATE_URL_PREFIX}/{certificate_id}"
