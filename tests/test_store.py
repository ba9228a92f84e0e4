# tests/test_store.py
import asyncio
import json

import httpx
import pytest

from support_desk.core.store import RedisRestClient, StoreError


def run(coro):
    return asyncio.run(coro)


def test_commands_are_posted_as_json_arrays(fake_redis, store):
    run(store.zadd("tickets", 1700000000000, "abc"))
    run(store.zrange("tickets", 0, -1, rev=True))

    assert fake_redis.calls == [
        ["ZADD", "tickets", 1700000000000, "abc"],
        ["ZRANGE", "tickets", 0, -1, "REV"],
    ]


def test_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers["authorization"]
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"result": "OK"})

    client = RedisRestClient("https://store.test/", "s3cret", transport=httpx.MockTransport(handler))
    assert run(client.set("k", "v")) == "OK"
    assert seen == {"auth": "Bearer s3cret", "url": "https://store.test/"}


def test_wrong_token_raises(fake_redis):
    client = RedisRestClient("https://store.test", "wrong", transport=fake_redis.transport())
    with pytest.raises(StoreError, match="Unauthorized"):
        run(client.get("k"))


def test_error_reply_raises(fake_redis, store):
    fake_redis.fail_on.add("GET")
    with pytest.raises(StoreError, match="simulated failure"):
        run(store.get("k"))


def test_unexpected_reply_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
    client = RedisRestClient("https://store.test", "t", transport=transport)
    with pytest.raises(StoreError, match="HTTP 502"):
        run(client.get("k"))


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = RedisRestClient("https://store.test", "t", transport=httpx.MockTransport(handler))
    with pytest.raises(StoreError):
        run(client.get("k"))


def test_get_json_decodes_string_and_structured_values(fake_redis, store):
    fake_redis.values["a"] = json.dumps({"id": "a"})
    fake_redis.values["b"] = {"id": "b"}

    assert run(store.get_json("a")) == {"id": "a"}
    assert run(store.get_json("b")) == {"id": "b"}
    assert run(store.get_json("missing")) is None


def test_get_json_rejects_non_objects(fake_redis, store):
    fake_redis.values["bad"] = "{not json"
    fake_redis.values["list"] = json.dumps([1, 2])

    with pytest.raises(StoreError):
        run(store.get_json("bad"))
    with pytest.raises(StoreError):
        run(store.get_json("list"))


def test_requires_url_and_token():
    with pytest.raises(ValueError):
        RedisRestClient("", "token")
    with pytest.raises(ValueError):
        RedisRestClient("https://store.test", "")
