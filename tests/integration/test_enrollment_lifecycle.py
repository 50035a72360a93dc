from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.lecture import Lecture
from tests.helpers.asserts import api_call, assert_error


def test_full_enrollment_lifecycle(client: TestClient, db_session: Session, course_factory, student_headers, admin_headers, enroll):
    """
    Student enrolls in a $49.99 course with 10 lectures, completes every lecture,
    gets a certificate, then asks for a refund that an admin approves.
    """
    print("\n[TEST] Full enrollment lifecycle")

    print("[1] Creating published course with 10 lectures")
    course = course_factory(price=49.99, lectures=10)
    lecture_ids = [
        l.id for l in db_session.query(Lecture).filter(Lecture.course_id == course.id).order_by(Lecture.position)
    ]
    assert len(lecture_ids) == 10

    print("[2] Enrolling student")
    response = enroll(course.id, student_headers, payment_method="credit_card", transaction_id="txn-1")
    assert response.status_code == 201, response.json()
    enrollment = response.json()["data"]
    enrollment_id = enrollment["id"]
    assert enrollment["status"] == "active"
    assert enrollment["progress"] == 0
    assert enrollment["payment"]["status"] == "completed"
    print(f"[OK] Enrollment {enrollment_id} created")

    print("[3] Completing lectures")
    expected_progress = 0
    for index, lecture_id in enumerate(lecture_ids, start=1):
        data = api_call(
            client, "PUT", f"/api/enrollments/{enrollment_id}/progress",
            headers=student_headers, json={"lectureId": lecture_id, "timeSpent": 300}
        )["data"]
        expected_progress = index * 10
        assert data["progress"] == expected_progress
        if index < 10:
            assert data["status"] == "active"
            assert data["completionDate"] is None
    assert data["status"] == "completed"
    assert data["isCompleted"] is True
    assert data["completionDate"] is not None
    assert data["totalTimeSpent"] == 50
    print(f"[OK] Progress reached {expected_progress}")

    print("[4] Issuing certificate")
    result = api_call(client, "POST", f"/api/enrollments/{enrollment_id}/certificate", headers=student_headers)["data"]
    certificate = result["certificate"]
    assert certificate["issued"] is True
    assert certificate["certificateId"].startswith(f"CERT-{enrollment_id}-")
    assert certificate["downloadUrl"] == f"/certificates/{certificate['certificateId']}"
    assert result["enrollment"]["certificate"] == certificate

    response = client.post(f"/api/enrollments/{enrollment_id}/certificate", headers=student_headers)
    body = assert_error(response, 400, code="INVALID_STATE")
    assert body["details"] == {"reason": "already_issued"}
    print(f"[OK] Certificate {certificate['certificateId']} issued once")

    print("[5] Requesting refund")
    data = api_call(
        client, "POST", f"/api/enrollments/{enrollment_id}/refund",
        headers=student_headers, json={"reason": "Found a better course elsewhere"}
    )["data"]
    assert data["refundStatus"] == "pending"
    assert data["status"] == "completed"

    print("[6] Admin approves refund")
    data = api_call(
        client, "PUT", f"/api/enrollments/{enrollment_id}/refund-status",
        headers=admin_headers, json={"refundStatus": "approved", "refundAmount": 49.99}
    )["data"]
    assert data["refundStatus"] == "approved"
    assert data["refundAmount"] == 49.99
    assert data["refundProcessedAt"] is not None
    print("[OK] Refund approved")

    stats = api_call(client, "GET", "/api/enrollments/stats", headers=admin_headers)["data"]
    assert stats["completedEnrollments"] == 1
    assert stats["activeEnrollments"] == 0


def test_completion_is_sticky(client, db_session, course_factory, student_headers, enroll):
    """A completed enrollment stays completed even when a lecture is added to the course later."""
    course = course_factory(lectures=1)
    lecture_id = db_session.query(Lecture).filter(Lecture.course_id == course.id).one().id
    enrollment_id = enroll(course.id, student_headers).json()["data"]["id"]

    data = api_call(
        client, "PUT", f"/api/enrollments/{enrollment_id}/progress",
        headers=student_headers, json={"lectureId": lecture_id}
    )["data"]
    assert data["status"] == "completed"
    completion_date = data["completionDate"]

    db_session.add(Lecture(course_id=course.id, title="Bonus", position=1, duration=5))
    db_session.commit()

    data = api_call(
        client, "PUT", f"/api/enrollments/{enrollment_id}/progress",
        headers=student_headers, json={"lectureId": lecture_id}
    )["data"]
    assert data["status"] == "completed"
    assert data["progress"] == 100
    assert data["completionDate"] == completion_date


def test_review_on_course_already_reviewed_leaves_aggregate(client, db_session, published_course, student, enrollment_id, student_headers):
    from app.crud.course_review import course_review as crud_review

    crud_review.add_review(db_session, course=published_course, user_id=student.id, rating=2, comment="Earlier review")
    db_session.commit()

    data = api_call(
        client, "POST", f"/api/enrollments/{enrollment_id}/review",
        headers=student_headers, json={"rating": 5}
    )["data"]
    assert data["rating"]["rating"] == 5

    db_session.refresh(published_course)
    assert published_course.rating_count == 1
    assert published_course.rating_average == 2.0
