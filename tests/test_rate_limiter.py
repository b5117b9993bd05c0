from fastapi import FastAPI
from fastapi.testclient import TestClient

from carepulse.infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from carepulse.middleware import RateLimitMiddleware, RequestSizeLimitMiddleware


def test_memory_rate_limiter_allows_then_blocks():
    rl = InMemoryRateLimiter()
    key = "k1"
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is False
    assert rl.allow("k2", max_requests=2, window_seconds=60) is True


def test_memory_rate_limiter_reset():
    rl = InMemoryRateLimiter()
    assert rl.allow("k1", 1, 60) is True
    assert rl.allow("k1", 1, 60) is False
    rl.reset()
    assert rl.allow("k1", 1, 60) is True


def make_app(**limits):
    app = FastAPI()
    app.add_middleware(RequestSizeLimitMiddleware, max_size=limits.get("max_size", 1024))
    app.add_middleware(RateLimitMiddleware, limiter=InMemoryRateLimiter(), rate_limit=limits.get("rate_limit", 2))

    @app.post("/echo")
    def echo(payload: dict):
        return payload

    return app


def test_rate_limit_middleware_returns_envelope():
    client = TestClient(make_app(rate_limit=2))
    assert client.post("/echo", json={}).status_code == 200
    assert client.post("/echo", json={}).status_code == 200
    res = client.post("/echo", json={})
    assert res.status_code == 429
    assert res.json()["success"] is False
    assert res.json()["error"]["details"] == {"limitPerMinute": 2}


def test_request_size_limit():
    client = TestClient(make_app(max_size=16, rate_limit=100))
    res = client.post("/echo", json={"note": "x" * 64})
    assert res.status_code == 413
    assert res.json()["error"]["message"] == "Request entity too large"
