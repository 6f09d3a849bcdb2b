# tests/test_rate_limit.py
import pytest
from fastapi.testclient import TestClient
from redis.asyncio import Redis

from minijwt.config import Settings, get_settings
from minijwt.main import app
from minijwt.middleware import rate_limit
from minijwt.tokens import jwt

SECRET = "supersecret"


def test_inmem_hit_counts_within_window(monkeypatch: pytest.MonkeyPatch) -> None:
    rate_limit._inmem.clear()
    monkeypatch.setattr(rate_limit.time, "time", lambda: 1000.0)

    assert rate_limit._inmem_hit("rl:a", limit=2, window_seconds=1) is False
    assert rate_limit._inmem_hit("rl:a", limit=2, window_seconds=1) is False
    assert rate_limit._inmem_hit("rl:a", limit=2, window_seconds=1) is True
    # other clients have their own window
    assert rate_limit._inmem_hit("rl:b", limit=2, window_seconds=1) is False


def test_inmem_hit_resets_after_window(monkeypatch: pytest.MonkeyPatch) -> None:
    rate_limit._inmem.clear()
    now = [1000.0]
    monkeypatch.setattr(rate_limit.time, "time", lambda: now[0])

    for _ in range(3):
        rate_limit._inmem_hit("rl:a", limit=2, window_seconds=1)
    now[0] += 1.5

    assert rate_limit._inmem_hit("rl:a", limit=2, window_seconds=1) is False


def test_get_redis_only_with_url() -> None:
    assert rate_limit.get_redis(None) is None
    assert isinstance(rate_limit.get_redis("redis://localhost:6379/0"), Redis)


def test_verify_route_is_rate_limited(client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(
        JWT_SECRET=SECRET, RATE_LIMIT_REQUESTS=2, RATE_LIMIT_WINDOW_SECONDS=60
    )
    token = jwt.encode(b"{}", SECRET)

    codes = [client.post("/v1/tokens/verify", json={"token": token}).status_code for _ in range(3)]

    assert codes == [200, 200, 429]


def test_issue_route_is_not_rate_limited(client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(
        JWT_SECRET=SECRET, RATE_LIMIT_REQUESTS=1, RATE_LIMIT_WINDOW_SECONDS=60
    )
    codes = [client.post("/v1/tokens", json={"claims": {}}).status_code for _ in range(3)]
    assert codes == [200, 200, 200]


def test_expired_windows_are_swept(monkeypatch: pytest.MonkeyPatch) -> None:
    rate_limit._inmem.clear()
    now = [1000.0]
    monkeypatch.setattr(rate_limit.time, "time", lambda: now[0])
    monkeypatch.setattr(rate_limit, "_SWEEP_THRESHOLD", 10)

    for i in range(10):
        rate_limit._inmem_hit(f"rl:host-{i}", limit=5, window_seconds=1)
    assert len(rate_limit._inmem) == 10

    now[0] += 2
    rate_limit._inmem_hit("rl:fresh", limit=5, window_seconds=1)

    assert list(rate_limit._inmem) == ["rl:fresh"]


def test_live_windows_survive_a_sweep(monkeypatch: pytest.MonkeyPatch) -> None:
    rate_limit._inmem.clear()
    monkeypatch.setattr(rate_limit.time, "time", lambda: 1000.0)
    monkeypatch.setattr(rate_limit, "_SWEEP_THRESHOLD", 2)

    for key in ("rl:a", "rl:b", "rl:c"):
        rate_limit._inmem_hit(key, limit=5, window_seconds=60)

    assert set(rate_limit._inmem) == {"rl:a", "rl:b", "rl:c"}
