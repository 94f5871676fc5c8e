"""Factory de armazenamento chave-valor durável.

Backends:
- "memory": InMemoryKeyValueStorage (dev/testes)
- "file": JsonFileKeyValueStorage (desktop/CLI)
- "redis": RedisKeyValueStorage (instâncias compartilhadas)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zweihander.domain.protocols.storage import KeyValueStorage, StorageError
from zweihander.infra.storage_file import JsonFileKeyValueStorage
from zweihander.infra.storage_memory import InMemoryKeyValueStorage
from zweihander.infra.storage_redis import RedisKeyValueStorage
from zweihander.observability.logging import get_logger

if TYPE_CHECKING:
    from zweihander.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def create_key_value_storage(settings: Settings | None = None) -> KeyValueStorage:
    """Factory para criar o armazenamento apropriado.

    Args:
        settings: Configurações da aplicação. Se None, usa get_settings()

    Returns:
        Instância do backend configurado

    Raises:
        ValueError: Se backend não reconhecido ou configuração incompleta
        StorageError: Se Redis não estiver disponível
    """
    if settings is None:
        from zweihander.config.settings import get_settings

        settings = get_settings()

    backend = settings.storage_backend.lower()
    if backend == "memory":
        logger.info("Usando InMemoryKeyValueStorage (apenas dev/testes)")
        return InMemoryKeyValueStorage()

    if backend == "file":
        if not settings.storage_path:
            raise ValueError("STORAGE_PATH é obrigatório quando storage_backend=file")
        logger.info("Usando JsonFileKeyValueStorage", extra={"path": settings.storage_path})
        return JsonFileKeyValueStorage(settings.storage_path)

    if backend == "redis":
        return _create_redis_storage(settings)

    raise ValueError(f"Backend de armazenamento não reconhecido: {backend}")


def _create_redis_storage(settings: Settings) -> KeyValueStorage:
    """Cria storage Redis; testa a conexão na criação."""
    if not settings.redis_url:
        raise ValueError("REDIS_URL é obrigatório quando storage_backend=redis")

    import redis

    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=5.0,
            socket_connect_timeout=5.0,
        )
        client.ping()
    except redis.RedisError as e:
        logger.error(
            "Falha ao conectar ao Redis",
            extra={"error_type": type(e).__name__},
        )
        raise StorageError(f"Não foi possível conectar ao Redis: {e}") from e

    logger.info(
        "Usando RedisKeyValueStorage",
        extra={"url": settings.redis_url.split("@")[-1]},  # Sem credenciais
    )
    return RedisKeyValueStorage(client, key_prefix=settings.redis_key_prefix)
