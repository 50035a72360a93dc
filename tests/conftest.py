import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.constants import RoleEnum, CourseStatusEnum, CourseLevelEnum
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token
from app.models.course import Course
from app.models.lecture import Lecture
from app.models.user import User
from app.utils import deps as deps_utils
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

TEST_PASSWORD = "testpass123"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url == "sqlite:///./test.db" and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    def _override_transactional_db():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = _override_transactional_db
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def user_factory(db_session):
    def _create(role: RoleEnum = RoleEnum.STUDENT, email: str = None, full_name: str = None) -> User:
        user = User(
            full_name=full_name or f"Test {role.value.title()}",
            email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=True
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create

@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token(user_id=user.id, role=user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture
def student(user_factory):
    return user_factory(RoleEnum.STUDENT)

@pytest.fixture
def instructor(user_factory):
    return user_factory(RoleEnum.INSTRUCTOR)

@pytest.fixture
def admin(user_factory):
    return user_factory(RoleEnum.ADMIN)

@pytest.fixture
def student_headers(student, auth_headers):
    return auth_headers(student)

@pytest.fixture
def instructor_headers(instructor, auth_headers):
    return auth_headers(instructor)

@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)

@pytest.fixture
def course_factory(db_session, instructor):
    def _create(
        price: float = 49.99,
        status: CourseStatusEnum = CourseStatusEnum.PUBLISHED,
        lectures: int = 0,
        owner: User = None,
        title: str = None,
        category: str = "Programming",
        is_featured: bool = False,
    ) -> Course:
        course = Course(
            title=title or f"Course {uuid.uuid4().hex[:6]}",
            description="A course used by the test suite to exercise enrollments.",
            category=category,
            level=CourseLevelEnum.BEGINNER,
            price=price,
            currency="USD",
            status=status,
            instructor_id=(owner or instructor).id,
            is_featured=is_featured,
        )
        db_session.add(course)
        db_session.flush()
        for position in range(lectures):
            db_session.add(Lecture(course_id=course.id, title=f"Lecture {position + 1}", position=position, duration=10))
        db_session.commit()
        db_session.refresh(course)
        return course
    return _create

@pytest.fixture
def published_course(course_factory):
    return course_factory()

@pytest.fixture
def enroll(client):
    def _enroll(course_id: int, headers: dict, payment_method: str = "credit_card", transaction_id: str = None):
        return client.post(
            "/api/enrollments",
            headers=headers,
            json={
                "courseId": course_id,
                "paymentMethod": payment_method,
                "transactionId": transaction_id or f"txn-{uuid.uuid4().hex[:8]}",
            }
        )
    return _enroll

@pytest.fixture
def enrollment_id(published_course, student_headers, enroll):
    response = enroll(published_course.id, student_headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]["id"]
