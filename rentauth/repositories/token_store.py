"""Redis-backed key/value store for short-lived tokens."""

from __future__ import annotations

from typing import Optional

import redis


class TokenStoreError(Exception):
    """The key-value store could not be reached or rejected the command."""


class RedisTokenStore:
    """
    Thin wrapper around a Redis client.

    Expiry is enforced by Redis itself (``SET ... EX``); callers never keep
    timestamps. The client is thread safe, so one store can be shared between
    requests.
    """

    def __init__(self, client: "redis.Redis") -> None:
        self.r = client

    @classmethod
    def from_url(cls, url: str) -> "RedisTokenStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self.r.set(key, value, ex=ttl_seconds)
        except redis.exceptions.ConnectionError as e:
            raise TokenStoreError(f"Connection failed: {e}") from e
        except redis.exceptions.RedisError as e:
            raise TokenStoreError(f"Failed to store key: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.r.get(key)
        except redis.exceptions.ConnectionError as e:
            raise TokenStoreError(f"Connection failed: {e}") from e
        except redis.exceptions.RedisError as e:
            raise TokenStoreError(f"Failed to read key: {e}") from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def delete(self, key: str) -> None:
        try:
            self.r.delete(key)
        except redis.exceptions.ConnectionError as e:
            raise TokenStoreError(f"Connection failed: {e}") from e
        except redis.exceptions.RedisError as e:
            raise TokenStoreError(f"Failed to delete key: {e}") from e
