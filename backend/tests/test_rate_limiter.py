from types import SimpleNamespace

from fastapi import FastAPI
from fastapi.testclient import TestClient

from namhae_welfare.utils import rate_limiter
from namhae_welfare.utils.rate_limiter import RateLimiter


def _app(limit: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimiter, requests_per_minute=limit)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    return app


def test_requests_over_limit_get_429():
    client = TestClient(_app(2))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200

    blocked = client.get("/ping")
    assert blocked.status_code == 429
    assert "error" in blocked.json()


def test_zero_limit_disables_limiter():
    client = TestClient(_app(0))
    assert all(client.get("/ping").status_code == 200 for _ in range(10))


def test_idle_clients_are_swept_from_store():
    limiter = RateLimiter(_app(5), requests_per_minute=5)
    limiter._store = {"10.0.0.1": [0.0, 10.0], "10.0.0.2": [100.0]}

    limiter._sweep(now=110.0)

    assert limiter._store == {"10.0.0.2": [100.0]}
    assert limiter._last_sweep == 110.0


def test_window_slides(monkeypatch):
    clock = {"now": 1000.0}
    monkeypatch.setattr(rate_limiter, "time", SimpleNamespace(time=lambda: clock["now"]))
    client = TestClient(_app(1))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 429

    clock["now"] += 61
    assert client.get("/ping").status_code == 200
