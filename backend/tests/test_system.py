from datetime import datetime, timedelta, timezone

from messages_api.schemas.message import isoformat_utc

ALLOWED_ORIGIN = "http://localhost:8080"


def test_info_without_origin(client):
    r = client.get("/api")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Hello from Backend with PostgreSQL!"
    assert body["client"] == "unknown"
    assert body["timestamp"].endswith("Z")
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_info_reports_caller_origin(client):
    r = client.get("/api", headers={"Origin": ALLOWED_ORIGIN})
    assert r.status_code == 200
    assert r.json()["client"] == ALLOWED_ORIGIN


def test_health_connected(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["database"] == "connected"
    assert body["timestamp"].endswith("Z")


def test_health_disconnected(make_client, broken_engine):
    client = make_client(broken_engine, wait=False)
    r = client.get("/api/health")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["database"] == "disconnected"
    assert "unable to open database file" in body["error"]


def test_cors_preflight_for_allowed_origin(client):
    r = client.options(
        "/api/messages",
        headers={
            "Origin": ALLOWED_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
    allowed_methods = r.headers["access-control-allow-methods"]
    for method in ("GET", "POST", "PUT", "DELETE", "OPTIONS"):
        assert method in allowed_methods


def test_cors_preflight_for_unknown_origin(client):
    r = client.options(
        "/api/messages",
        headers={
            "Origin": "https://evil.example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert r.status_code == 400
    assert "access-control-allow-origin" not in r.headers


def test_cors_rejects_other_request_headers(client):
    r = client.options(
        "/api/messages",
        headers={
            "Origin": ALLOWED_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization",
        },
    )
    assert r.status_code == 400


def test_simple_request_carries_allow_origin(client):
    r = client.get("/api/messages", headers={"Origin": "https://anisbaa.github.io"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "https://anisbaa.github.io"


def test_isoformat_utc_treats_naive_values_as_utc():
    assert isoformat_utc(datetime(2024, 5, 1, 12, 30, 0, 123456)) == "2024-05-01T12:30:00.123Z"


def test_isoformat_utc_converts_aware_values():
    plus_two = timezone(timedelta(hours=2))
    value = datetime(2024, 5, 1, 14, 30, tzinfo=plus_two)
    assert isoformat_utc(value) == "2024-05-01T12:30:00.000Z"
