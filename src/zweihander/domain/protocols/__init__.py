"""Protocolos (portas) do domínio."""

from zweihander.domain.protocols.storage import KeyValueStorage, StorageError

__all__ = ["KeyValueStorage", "StorageError"]
