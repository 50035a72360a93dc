from datetime import datetime, timedelta, timezone

import pytest

from app.core.constants import EnrollmentStatusEnum
from app.utils import enrollment_state


@pytest.mark.parametrize("completed,total,expected", [
    (0, 10, 0),
    (1, 10, 10),
    (1, 3, 33),
    (2, 3, 66),
    (3, 3, 100),
    (5, 3, 100),
    (4, 0, 40),
    (12, 0, 100),
])
def test_compute_progress(completed, total, expected):
    assert enrollment_state.compute_progress(completed, total) == expected


def test_clamp_progress():
    assert enrollment_state.clamp_progress(-3) == 0
    assert enrollment_state.clamp_progress(150) == 100
    assert enrollment_state.clamp_progress(42) == 42


def test_next_status_completes_active_at_100():
    assert enrollment_state.next_status(EnrollmentStatusEnum.ACTIVE, 99) == EnrollmentStatusEnum.ACTIVE
    assert enrollment_state.next_status(EnrollmentStatusEnum.ACTIVE, 100) == EnrollmentStatusEnum.COMPLETED


@pytest.mark.parametrize("status", [EnrollmentStatusEnum.COMPLETED, EnrollmentStatusEnum.CANCELLED])
def test_next_status_terminal_states(status):
    assert enrollment_state.next_status(status, 100) == status
    assert enrollment_state.next_status(status, 10) == status


def test_is_completed():
    assert enrollment_state.is_completed(EnrollmentStatusEnum.ACTIVE, 100)
    assert enrollment_state.is_completed(EnrollmentStatusEnum.COMPLETED, 40)
    assert not enrollment_state.is_completed(EnrollmentStatusEnum.ACTIVE, 99)


def test_is_expired():
    now = datetime(2026, 3, 1, 12, 0)
    past = now - timedelta(days=1)
    future = now + timedelta(days=1)

    assert not enrollment_state.is_expired(True, past, now=now)
    assert not enrollment_state.is_expired(False, None, now=now)
    assert not enrollment_state.is_expired(False, future, now=now)
    assert enrollment_state.is_expired(False, past, now=now)
    assert enrollment_state.is_expired(False, past.replace(tzinfo=timezone.utc), now=now)


def test_effective_status():
    assert enrollment_state.effective_status(EnrollmentStatusEnum.ACTIVE, True) == EnrollmentStatusEnum.EXPIRED
    assert enrollment_state.effective_status(EnrollmentStatusEnum.ACTIVE, False) == EnrollmentStatusEnum.ACTIVE
    assert enrollment_state.effective_status(EnrollmentStatusEnum.COMPLETED, True) == EnrollmentStatusEnum.COMPLETED


def test_enrollment_duration_rounds_up_days():
    start = datetime(2026, 1, 1, 9, 0)
    assert enrollment_state.enrollment_duration(start, start) == 0
    assert enrollment_state.enrollment_duration(start, start + timedelta(hours=1)) == 1
    assert enrollment_state.enrollment_duration(start, start + timedelta(days=3)) == 3
    assert enrollment_state.enrollment_duration(start, now=start + timedelta(days=2, minutes=1)) == 3
    assert enrollment_state.enrollment_duration(None) == 0


def test_seconds_to_minutes():
    assert enrollment_state.seconds_to_minutes(0) == 0
    assert enrollment_state.seconds_to_minutes(1) == 1
    assert enrollment_state.seconds_to_minutes(120) == 2
    assert enrollment_state.seconds_to_minutes(121) == 3


def test_certificate_identifiers():
    issued_at = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
    certificate_id = enrollment_state.build_certificate_id(7, issued_at)
    assert certificate_id == "CERT-7-1767225600000"
    assert enrollment_state.build_certificate_id(7, issued_at.replace(tzinfo=None)) == certificate_id
    assert enrollment_state.certificate_download_url(certificate_id) == "/certificates/CERT-7-1767225600000"
