# support_desk/core/store.py
"""
Hosted Redis REST client

Each command is POSTed to the endpoint as a JSON array, e.g.
``["ZADD", "tickets", 1700000000000, "<id>"]``, with a bearer token.
The service answers ``{"result": ...}`` or ``{"error": "..."}``.
"""

import json
from typing import Any

import httpx
import structlog
from fastapi import Request

from support_desk.core.config import Settings

logger = structlog.get_logger()


class StoreError(Exception):
    """Any failure talking to the store or decoding what it returned"""


class RedisRestClient:
    """Async client for a Redis instance exposed over HTTP (Upstash style)"""

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url or not token:
            raise ValueError("Store URL and token are required")
        self.url = url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def command(self, *args: Any) -> Any:
        """Run one command and return its ``result`` field"""
        name = str(args[0]).upper() if args else ""
        try:
            response = await self._client.post("/", json=list(args))
        except httpx.HTTPError as e:
            logger.error("Store request failed", command=name, error=str(e))
            raise StoreError(f"{name} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and "error" in payload:
            logger.error(
                "Store returned an error",
                command=name,
                status=response.status_code,
                error=payload["error"],
            )
            raise StoreError(f"{name} failed: {payload['error']}")
        if response.is_error or not isinstance(payload, dict) or "result" not in payload:
            logger.error("Unexpected store reply", command=name, status=response.status_code)
            raise StoreError(f"{name} failed with HTTP {response.status_code}")
        return payload["result"]

    async def get(self, key: str) -> Any:
        return await self.command("GET", key)

    async def get_json(self, key: str) -> dict | None:
        """
        Read a JSON record, or None when the key is absent.

        Values normally come back as JSON strings, but some writers store
        structured values; both decode to a dict here.
        """
        raw = await self.get(key)
        if raw is None:
            return None
        if isinstance(raw, (bytes, str)):
            try:
                raw = json.loads(raw)
            except ValueError as e:
                raise StoreError(f"Value at {key} is not valid JSON") from e
        if not isinstance(raw, dict):
            raise StoreError(f"Value at {key} is not a JSON object")
        return raw

    async def set(self, key: str, value: str) -> Any:
        return await self.command("SET", key, value)

    async def set_json(self, key: str, value: dict) -> Any:
        return await self.set(key, json.dumps(value))

    async def delete(self, *keys: str) -> int:
        return await self.command("DEL", *keys)

    async def zadd(self, key: str, score: float, member: str) -> int:
        return await self.command("ZADD", key, score, member)

    async def zrange(self, key: str, start: int = 0, end: int = -1, rev: bool = False) -> list[str]:
        args = ["ZRANGE", key, start, end]
        if rev:
            args.append("REV")
        return await self.command(*args) or []

    async def zrem(self, key: str, *members: str) -> int:
        return await self.command("ZREM", key, *members)

    async def aclose(self) -> None:
        await self._client.aclose()


def create_store(settings: Settings) -> RedisRestClient:
    return RedisRestClient(
        url=settings.UPSTASH_REDIS_REST_URL,
        token=settings.UPSTASH_REDIS_REST_TOKEN,
        timeout=settings.STORE_TIMEOUT,
    )


# Common store dependency
def get_store(request: Request) -> RedisRestClient:
    return request.app.state.store
