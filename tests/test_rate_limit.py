import sys

from fastapi.testclient import TestClient

from conftest import make_payload


def test_31st_request_within_a_minute_is_rejected(client, fetch_rsvps):
    payload = make_payload()
    for i in range(30):
        r = client.post("/api/rsvp", json=payload)
        assert r.status_code == 200, f"request {i + 1} failed: {r.text}"

    r = client.post("/api/rsvp", json=payload)

    assert r.status_code == 429
    assert r.json() == {"ok": False, "error": "Rate limit exceeded"}
    assert "Retry-After" in r.headers
    assert r.headers["X-RateLimit-Limit"] == "30"
    assert len(fetch_rsvps()) == 30


def test_limit_applies_before_validation(load_app):
    module = load_app(RATE_LIMIT_PER_MINUTE=2)
    with TestClient(module.app) as client:
        assert client.post("/api/rsvp", json={}).status_code == 400
        assert client.post("/api/rsvp", content=b"not json").status_code == 400

        r = client.post("/api/rsvp", json={})

    assert r.status_code == 429
    assert r.json()["error"] == "Rate limit exceeded"


def from_ip(app, ip):
    """Wrap an ASGI app so every HTTP request appears to come from `ip`."""

    async def wrapped(scope, receive, send):
        if scope["type"] == "http":
            scope = dict(scope, client=(ip, 50000))
        await app(scope, receive, send)

    return wrapped


def test_limit_is_per_client_ip(load_app, fetch_rsvps):
    module = load_app(RATE_LIMIT_PER_MINUTE=1)
    with TestClient(module.app) as first:
        assert first.post("/api/rsvp", json=make_payload()).status_code == 200
        assert first.post("/api/rsvp", json=make_payload()).status_code == 429

        second = TestClient(from_ip(module.app, "203.0.113.7"))
        assert second.post("/api/rsvp", json=make_payload()).status_code == 200

    assert [row.ip for row in fetch_rsvps()] == ["testclient", "203.0.113.7"]


def test_health_is_not_rate_limited(load_app):
    module = load_app(RATE_LIMIT_PER_MINUTE=1)
    with TestClient(module.app) as client:
        client.post("/api/rsvp", json=make_payload())
        assert client.post("/api/rsvp", json=make_payload()).status_code == 429

        for _ in range(5):
            assert client.get("/healthz").status_code == 200


def test_limiter_can_be_disabled(load_app):
    module = load_app(RATE_LIMIT_ENABLED=0, RATE_LIMIT_PER_MINUTE=1)
    with TestClient(module.app) as client:
        statuses = {client.post("/api/rsvp", json=make_payload()).status_code for _ in range(3)}

    assert statuses == {200}


def behind_uvicorn_proxy_headers(module):
    """The app as `python main.py` serves it: uvicorn's proxy header handling in front."""
    from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

    config = sys.modules["app.core.config"]
    return ProxyHeadersMiddleware(module.app, trusted_hosts=config.FORWARDED_ALLOW_IPS)


def test_forged_forwarded_for_does_not_reset_the_limit(load_app, fetch_rsvps):
    module = load_app(RATE_LIMIT_PER_MINUTE=2)
    with TestClient(module.app):
        client = TestClient(behind_uvicorn_proxy_headers(module))
        statuses = [
            client.post("/api/rsvp", json=make_payload(), headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
            for i in range(5)
        ]

    assert statuses == [200, 200, 429, 429, 429]
    assert {row.ip for row in fetch_rsvps()} == {"testclient"}


def test_local_proxy_forwarded_for_is_honoured(load_app, fetch_rsvps):
    module = load_app(RATE_LIMIT_PER_MINUTE=1)
    with TestClient(module.app):
        via_proxy = TestClient(from_ip(behind_uvicorn_proxy_headers(module), "127.0.0.1"))
        first = via_proxy.post("/api/rsvp", json=make_payload(), headers={"X-Forwarded-For": "198.51.100.9"})
        second = via_proxy.post("/api/rsvp", json=make_payload(), headers={"X-Forwarded-For": "198.51.100.10"})

    assert (first.status_code, second.status_code) == (200, 200)
    assert [row.ip for row in fetch_rsvps()] == ["198.51.100.9", "198.51.100.10"]
