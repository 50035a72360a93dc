from fastapi.testclient import TestClient

from app.core.constants import RoleEnum
from app.schemas.user import PublicProfile, UserList
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.contract import validate_envelope


def test_admin_lists_users(client: TestClient, user_factory, admin, admin_headers):
    grace = user_factory(RoleEnum.STUDENT, email="grace@test.com", full_name="Grace Hopper")
    alan = user_factory(RoleEnum.INSTRUCTOR, email="alan@test.com", full_name="Alan Turing")

    data = validate_envelope(api_call(client, "GET", "/api/users?limit=2", headers=admin_headers), UserList)
    assert [u["id"] for u in data["users"]] == [alan.id, grace.id]
    assert data["pagination"] == {"currentPage": 1, "totalPages": 2, "totalUsers": 3, "limit": 2}

    data = api_call(client, "GET", "/api/users?role=instructor", headers=admin_headers)["data"]
    assert [u["id"] for u in data["users"]] == [alan.id]

    data = api_call(client, "GET", "/api/users?search=hopper", headers=admin_headers)["data"]
    assert [u["email"] for u in data["users"]] == ["grace@test.com"]


def test_user_list_requires_admin(client, instructor_headers):
    assert_error(client.get("/api/users", headers=instructor_headers), 403, code="FORBIDDEN")
    assert_error(client.get("/api/users"), 401)


def test_list_instructors(client, user_factory, instructor, admin_headers):
    user_factory(RoleEnum.STUDENT)
    retired = user_factory(RoleEnum.INSTRUCTOR, full_name="Retired Instructor")
    api_call(client, "PUT", f"/api/users/{retired.id}/status", headers=admin_headers, json={"isActive": False})

    data = api_call(client, "GET", "/api/users/instructors")["data"]
    assert [u["id"] for u in data] == [instructor.id]
    assert data[0]["role"] == "instructor"
    assert "email" not in data[0]


def test_public_profile(client, student, admin_headers):
    data = validate_envelope(api_call(client, "GET", f"/api/users/{student.id}"), PublicProfile)
    assert data["fullName"] == student.full_name
    assert "email" not in data

    api_call(client, "PUT", f"/api/users/{student.id}/status", headers=admin_headers, json={"isActive": False})
    assert_error(client.get(f"/api/users/{student.id}"), 404, message="User not found")
    assert_error(client.get("/api/users/999999"), 404)
    assert_error(client.get(f"/api/users/{2**31}"), 400, code="VALIDATION_ERROR")


def test_status_update_rules(client, admin, admin_headers, student, student_headers):
    response = client.put(f"/api/users/{admin.id}/status", headers=admin_headers, json={"isActive": False})
    assert_error(response, 400, message="You cannot deactivate your own account")

    response = client.put(f"/api/users/{student.id}/status", headers=student_headers, json={"isActive": False})
    assert_error(response, 403, code="FORBIDDEN")

    response = client.put(f"/api/users/{student.id}/status", headers=admin_headers, json={})
    body = assert_error(response, 400, code="VALIDATION_ERROR")
    assert body["errors"][0]["field"] == "isActive"


def test_admin_deletes_user(client, student, student_headers, admin_headers):
    body = api_call(client, "DELETE", f"/api/users/{student.id}", headers=admin_headers)
    assert body["message"] == "User deleted successfully"
    assert body["data"]["isActive"] is False

    assert_error(client.get("/api/users/profile", headers=student_headers), 403)
    assert_error(client.get(f"/api/users/{student.id}"), 404)
    assert_error(client.delete(f"/api/users/{student.id}", headers=admin_headers), 404)

    data = api_call(client, "GET", "/api/users", headers=admin_headers)["data"]
    assert student.id not in [u["id"] for u in data["users"]]


def test_delete_user_rules(client, admin, admin_headers, instructor, student_headers):
    response = client.delete(f"/api/users/{admin.id}", headers=admin_headers)
    assert_error(response, 400, message="You cannot delete your own account")

    assert_error(client.delete(f"/api/users/{instructor.id}", headers=student_headers), 403)
