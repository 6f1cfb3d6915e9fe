# tests/test_health.py
from typing import Any

from fastapi import status


def test_health_responds(client: Any) -> None:
    """Verify that the health endpoint reports ok."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root_describes_api(client: Any) -> None:
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["docs"] == "/docs"
    assert "version" in body


def test_validation_errors_are_bad_request(client: Any) -> None:
    """Malformed bodies are reported as 400 with field details."""
    r = client.post("/api/register", json={"username": "x"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == "Invalid request"
    assert r.json()["errors"]
