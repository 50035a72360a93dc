import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import settings
from app.middleware.logging import RequestLoggingMiddleware, resolve_request_id, response_log_level


def test_resolve_request_id_reuses_caller_value():
    assert resolve_request_id("req-123") == "req-123"


@pytest.mark.parametrize("incoming", [None, "", "x" * 65, "bad\nid"])
def test_resolve_request_id_generates_fresh_value(incoming):
    generated = resolve_request_id(incoming)
    assert generated != incoming
    assert len(generated) == 36


@pytest.mark.parametrize("path,status_code,duration_ms,expected", [
    ("/api/courses", 200, 5, logging.INFO),
    ("/health", 200, 5, logging.DEBUG),
    ("/health", 503, 5, logging.ERROR),
    ("/api/enrollments", 404, 5, logging.WARNING),
    ("/api/enrollments", 409, 5, logging.WARNING),
    ("/api/enrollments", 500, 5, logging.ERROR),
    ("/api/courses", 200, settings.SLOW_REQUEST_THRESHOLD_MS, logging.WARNING),
    ("/health", 200, settings.SLOW_REQUEST_THRESHOLD_MS + 1, logging.WARNING),
])
def test_response_log_level(path, status_code, duration_ms, expected):
    assert response_log_level(path, status_code, duration_ms) == expected


def test_middleware_sets_request_id_header():
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/echo")
    def echo():
        return {"ok": True}

    client = TestClient(app)
    assert client.get("/echo", headers={"X-Request-ID": "trace-1"}).headers["X-Request-ID"] == "trace-1"
    assert len(client.get("/echo", headers={"X-Request-ID": "x" * 100}).headers["X-Request-ID"]) == 36
