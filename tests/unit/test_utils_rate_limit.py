import time
import pytest
from fastapi import FastAPI, Depends, Request, Response, HTTPException
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter
from redis.exceptions import ConnectionError as RedisConnectionError

from checkout_backend.utils import rate_limit
from checkout_backend.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.get("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    client = TestClient(_make_app(times=2, seconds=60))
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    r3 = client.get("/limitedA")
    assert r3.status_code == 429
    assert r3.json()["detail"] == "Too Many Requests"


def test_rate_limit_is_per_path_and_client(monkeypatch):
    client = TestClient(_make_app(times=1, seconds=60))
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    # autre chemin: compteur indépendant
    assert client.get("/limitedB").status_code == 200
    # autre client (X-Forwarded-For): compteur indépendant
    assert client.get("/limitedA", headers={"x-forwarded-for": "10.0.0.9"}).status_code == 200


def test_rate_limit_resets_after_window(monkeypatch):
    client = TestClient(_make_app(times=1, seconds=1))
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    time.sleep(1.1)
    assert client.get("/limitedA").status_code == 200


def test_rate_limit_disabled_flag_bypasses_limit(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)

    for _ in range(3):
        assert client.get("/limitedA").status_code == 200


def test_rate_limit_health_info(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app()
    client = TestClient(app)
    app.state.rate_limit_enabled = True

    monkeypatch.setattr(FastAPILimiter, "redis", None, raising=False)
    info = client.get("/rl_info").json()
    assert info["enabled"] is True
    assert info["ready"] is False
    assert info["backend"] is None

    monkeypatch.setattr(FastAPILimiter, "redis", object(), raising=False)
    monkeypatch.setenv("RATE_LIMIT_REDIS_URL", "redis://localhost:6379/0")
    info2 = client.get("/rl_info").json()
    assert info2["ready"] is True
    assert info2["backend"] == "redis"
    assert info2["redis"] == {"scheme": "redis", "host": "localhost", "port": 6379}


class _StubLimiter:
    """RateLimiter factice: 429 au-delà de `times`, ou erreur injectée."""
    calls = []
    error = None

    def __init__(self, times, seconds, identifier=None):
        self.times = times
        self.identifier = identifier

    async def __call__(self, request, response):
        assert isinstance(request, Request)
        assert isinstance(response, Response)
        if _StubLimiter.error is not None:
            raise _StubLimiter.error
        key = await self.identifier(request)
        _StubLimiter.calls.append(key)
        if _StubLimiter.calls.count(key) > self.times:
            raise HTTPException(status_code=429, detail="Too Many Requests")


@pytest.fixture
def stub_limiter(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    _StubLimiter.calls = []
    _StubLimiter.error = None
    monkeypatch.setattr(rate_limit, "RateLimiter", _StubLimiter)
    return _StubLimiter


def test_redis_limiter_receives_request_and_response(stub_limiter):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    assert stub_limiter.calls[0].endswith(":/limitedA")


def test_redis_unavailable_lets_requests_through(stub_limiter):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    stub_limiter.error = RedisConnectionError("connection refused")
    client = TestClient(app)

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200


def test_limiter_programming_errors_are_not_swallowed(stub_limiter):
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    stub_limiter.error = TypeError("bad call")
    client = TestClient(app)

    with pytest.raises(TypeError):
        client.get("/limitedA")


def test_fallback_store_drops_idle_keys(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    app = _make_app(times=5, seconds=1)
    client = TestClient(app)

    assert client.get("/limitedA").status_code == 200
    time.sleep(1.1)
    assert client.get("/limitedB").status_code == 200
    keys = list(app.state._rl_store[1])
    assert len(keys) == 1
    assert keys[0].endswith(":/limitedB")


def test_prune_removes_expired_hits():
    store = {"a": [0.0, 0.5], "b": [0.5, 9.5]}
    assert rate_limit._prune(store, now=10.0, seconds=2) == {"b": [9.5]}
