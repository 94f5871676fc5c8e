"""Implementação de KeyValueStorage usando Redis."""

from __future__ import annotations

import logging
from typing import Any

from zweihander.domain.protocols.storage import KeyValueStorage, StorageError
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class RedisKeyValueStorage(KeyValueStorage):
    """Armazenamento em Redis (compartilhado entre instâncias)."""

    def __init__(self, redis_client: Any, key_prefix: str = "zweihander:") -> None:
        self._redis = redis_client
        self._key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Adiciona prefixo à chave."""
        return f"{self._key_prefix}{key}"

    def get_item(self, key: str) -> str | None:
        try:
            payload = self._redis.get(self._make_key(key))
        except Exception as e:
            logger.error(
                "Failed to read item from Redis",
                extra={"key": key, "error_type": type(e).__name__},
            )
            raise StorageError(f"Redis get failed: {e}") from e

        if payload is None:
            return None
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return payload

    def set_item(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._make_key(key), value)
        except Exception as e:
            logger.error(
                "Failed to save item to Redis",
                extra={"key": key, "error_type": type(e).__name__},
            )
            raise StorageError(f"Redis set failed: {e}") from e
        logger.debug("Item saved (Redis)", extra={"key": key})

    def remove_item(self, key: str) -> None:
        try:
            self._redis.delete(self._make_key(key))
        except Exception as e:
            logger.error(
                "Failed to remove item from Redis",
                extra={"key": key, "error_type": type(e).__name__},
            )
            raise StorageError(f"Redis delete failed: {e}") from e
