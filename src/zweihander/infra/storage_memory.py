"""Implementação de KeyValueStorage em memória (dev/testes)."""

from __future__ import annotations

import logging

from zweihander.domain.protocols.storage import KeyValueStorage
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class InMemoryKeyValueStorage(KeyValueStorage):
    """Armazenamento em memória (não sobrevive a restart)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        logger.debug("Item saved (in-memory)", extra={"key": key})

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            logger.debug("Item removed (in-memory)", extra={"key": key})
