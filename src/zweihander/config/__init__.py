"""Configurações centralizadas do zweihander.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única
- Constantes da API de dados (REST_API_PATH, AUTH_API_PATH)

Uso típico:
    from zweihander.config import get_settings
"""

from zweihander.config.settings import (
    AUTH_API_PATH,
    PLACEHOLDER_ANON_KEY,
    PLACEHOLDER_URL,
    REST_API_PATH,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "REST_API_PATH",
    "AUTH_API_PATH",
    "PLACEHOLDER_URL",
    "PLACEHOLDER_ANON_KEY",
]
