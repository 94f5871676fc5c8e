"""Disponibilidade do gateway como variante explícita.

Serviços recebem ``Configured(gateway)`` ou ``Unconfigured(reason)`` e
ramificam pelo tipo, em vez de testar se um cliente global existe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from zweihander.adapters.data_api.client import DataGateway, create_data_gateway
from zweihander.observability.logging import get_logger

if TYPE_CHECKING:
    from zweihander.config.settings import Settings
    from zweihander.domain.protocols.storage import KeyValueStorage

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Configured:
    """API de dados disponível."""

    gateway: DataGateway


@dataclass(frozen=True, slots=True)
class Unconfigured:
    """API de dados ausente; serviços operam em modo demonstração."""

    reason: str = "Supabase não configurado"


GatewayCapability: TypeAlias = Configured | Unconfigured


def create_gateway(settings: Settings, storage: KeyValueStorage) -> GatewayCapability:
    """Cria o gateway quando URL e chave estão preenchidas."""
    if not settings.is_remote_configured:
        logger.info("Gateway não configurado; modo demonstração ativo")
        return Unconfigured()
    return Configured(create_data_gateway(settings, storage))
