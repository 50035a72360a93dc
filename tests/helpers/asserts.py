from typing import Optional, Dict, Any
from fastapi.testclient import TestClient

def api_call(client: TestClient, method: str, path: str, headers: Optional[Dict[str, str]] = None, json: Optional[Dict[str, Any]] = None, expected_status: int = 200) -> Dict[str, Any]:
    response = client.request(method, path, headers=headers, json=json)
    try:
        body = response.json()
    except ValueError:
        body = response.text
    assert response.status_code == expected_status, f"{method} {path} => {response.status_code}, body={body}, json={json}"
    return body

def assert_error(response, status_code: int, code: Optional[str] = None, message: Optional[str] = None) -> Dict[str, Any]:
    body = response.json()
    assert response.status_code == status_code, body
    assert body["success"] is False
    assert body["path"] == response.request.url.path
    assert body["request_id"]
    assert body["timestamp"]
    if code is not None:
        assert body["code"] == code, body
    if message is not None:
        assert body["message"] == message, body
    return body
