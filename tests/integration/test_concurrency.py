import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConcurrencyError
from app.crud.enrollment import enrollment as crud_enrollment
from app.middleware.exceptions import http_exception_handler, stale_data_exception_handler
from app.middleware.logging import RequestLoggingMiddleware
from app.models.lecture import Lecture
from app.schemas.enrollment import ProgressUpdate
from app.services.enrollment import enrollment_service
from starlette.exceptions import HTTPException as StarletteHTTPException


def test_stale_enrollment_write_is_rejected(database_engine, enrollment_id):
    """Two sessions read the same enrollment; the second writer loses."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    first = SessionLocal()
    second = SessionLocal()
    try:
        a = crud_enrollment.get(first, id=enrollment_id)
        b = crud_enrollment.get(second, id=enrollment_id)
        assert a.version == b.version

        a.notes = "first writer"
        first.commit()

        b.notes = "second writer"
        with pytest.raises(StaleDataError):
            second.flush()
        second.rollback()
    finally:
        first.close()
        second.close()

    check = SessionLocal()
    try:
        assert crud_enrollment.get(check, id=enrollment_id).notes == "first writer"
    finally:
        check.close()


def test_interleaved_lecture_completions_conflict(database_engine, db_session, course_factory, student, student_headers, enroll):
    """Both sessions load the enrollment before either writes; the later completion is refused."""
    course = course_factory(lectures=2)
    response = enroll(course.id, student_headers)
    assert response.status_code == 201, response.json()
    enrollment_id = response.json()["data"]["id"]
    first_lecture, second_lecture = (
        db_session.query(Lecture).filter(Lecture.course_id == course.id).order_by(Lecture.position).all()
    )

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    first = SessionLocal()
    second = SessionLocal()
    try:
        # Loaded into the first session's identity map at the starting version
        assert crud_enrollment.get(first, id=enrollment_id).progress == 0

        enrollment_service.complete_lecture(
            second,
            enrollment_id=enrollment_id,
            progress_in=ProgressUpdate(lecture_id=first_lecture.id, time_spent=120),
            current_user=student,
        )
        second.commit()

        with pytest.raises(ConcurrencyError) as exc_info:
            enrollment_service.complete_lecture(
                first,
                enrollment_id=enrollment_id,
                progress_in=ProgressUpdate(lecture_id=second_lecture.id, time_spent=60),
                current_user=student,
            )
        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "CONCURRENT_MODIFICATION"
        assert isinstance(exc_info.value.__cause__, StaleDataError)
        first.rollback()
    finally:
        first.close()
        second.close()

    check = SessionLocal()
    try:
        stored = crud_enrollment.get(check, id=enrollment_id)
        assert stored.progress == 50
        assert [lecture.lecture_id for lecture in stored.completed_lectures] == [first_lecture.id]
    finally:
        check.close()


def _error_app():
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(StaleDataError, stale_data_exception_handler)

    @app.put("/stale")
    def stale():
        raise StaleDataError("UPDATE statement on table 'enrollments' expected to update 1 row(s); 0 were matched.")

    @app.put("/conflict")
    def conflict():
        raise ConcurrencyError()

    return app


@pytest.mark.parametrize("path", ["/stale", "/conflict"])
def test_concurrent_modification_maps_to_409(path):
    response = TestClient(_error_app()).put(path)
    body = response.json()
    assert response.status_code == 409
    assert body["code"] == "CONCURRENT_MODIFICATION"
    assert body["message"] == "Enrollment was modified concurrently, retry the request"
    assert body["success"] is False
    assert body["request_id"] == response.headers["X-Request-ID"]
