from __future__ import annotations

from unittest.mock import patch

from bodymetrics.core.middleware import SECURITY_HEADERS


def test_preserves_incoming_request_id_header(client):
    incoming_id = "test-request-id-123"
    resp = client.get("/api/v1/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert isinstance(generated, str)

    duration = resp.headers.get("X-Request-Duration-ms")
    assert duration is not None


def test_error_body_carries_the_request_id(client):
    resp = client.get("/api/v1/users", headers={"X-Request-ID": "corr-42"})

    assert resp.status_code == 403
    assert resp.json()["request_id"] == "corr-42"
    assert resp.headers["X-Request-ID"] == "corr-42"


def test_security_headers_on_every_response(client, api_headers):
    for resp in (
        client.get("/api/v1/health"),
        client.get("/api/v1/users", headers=api_headers),
    ):
        for name, value in SECURITY_HEADERS.items():
            assert resp.headers[name] == value


def test_oversized_body_is_rejected_with_413(client, api_headers):
    with patch("bodymetrics.core.middleware.settings") as mock_settings:
        mock_settings.app.max_body_bytes = 64
        mock_settings.log.request_id_header = "X-Request-ID"
        resp = client.post(
            "/api/v1/auth/register",
            json={"email": "big@example.com", "password": "x" * 200},
            headers=api_headers,
        )

    assert resp.status_code == 413
    assert resp.json()["error"] == "request body too large"


def test_body_at_the_limit_is_accepted(client, api_headers):
    body = b'{"email": "edge@example.com", "password": "secret123"}'
    with patch("bodymetrics.core.middleware.settings") as mock_settings:
        mock_settings.app.max_body_bytes = len(body)
        mock_settings.log.request_id_header = "X-Request-ID"
        resp = client.post(
            "/api/v1/auth/register",
            content=body,
            headers={**api_headers, "Content-Type": "application/json"},
        )

    assert resp.status_code == 201


def test_health_needs_no_credentials(client):
    resp = client.get("/api/v1/health")

    assert resp.json() == {"status": "ok"}
