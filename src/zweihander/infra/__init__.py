"""Camada de infraestrutura: HTTP e armazenamento durável.

Uso típico:
    from zweihander.infra import HttpClient, create_key_value_storage

Infraestrutura não decide regra de negócio; domínio não conhece infraestrutura.
"""

from zweihander.infra.http import (
    HttpClient,
    HttpClientConfig,
    HttpError,
    create_http_client_config,
)
from zweihander.infra.storage import create_key_value_storage
from zweihander.infra.storage_file import JsonFileKeyValueStorage
from zweihander.infra.storage_memory import InMemoryKeyValueStorage
from zweihander.infra.storage_redis import RedisKeyValueStorage

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "HttpError",
    "create_http_client_config",
    "create_key_value_storage",
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "RedisKeyValueStorage",
]
