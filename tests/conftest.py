# tests/conftest.py
import os

os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://fake-store.test")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test-token")

import pytest
from fastapi.testclient import TestClient

from support_desk.core.store import RedisRestClient, get_store
from support_desk.main import app
from tests.fake_redis import FakeRedis


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def store(fake_redis):
    return RedisRestClient("https://fake-store.test", fake_redis.token, transport=fake_redis.transport())


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def ticking_clock(monkeypatch):
    """Each call to the service clock advances one second."""
    from datetime import datetime, timedelta, timezone

    from support_desk.ticket import services

    state = {"now": datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)}

    def fake_now():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr(services, "_utcnow", fake_now)
    return state
