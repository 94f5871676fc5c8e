"""Adapter da API de dados hospedada (REST + auth por senha)."""

from zweihander.adapters.data_api.capability import (
    Configured,
    GatewayCapability,
    Unconfigured,
    create_gateway,
)
from zweihander.adapters.data_api.client import DataGateway, create_data_gateway
from zweihander.adapters.data_api.models import (
    EqFilter,
    OrderClause,
    QueryDescriptor,
    QueryResult,
    SignInResult,
)
from zweihander.adapters.data_api.query import QueryBuilder

__all__ = [
    "Configured",
    "DataGateway",
    "EqFilter",
    "GatewayCapability",
    "OrderClause",
    "QueryBuilder",
    "QueryDescriptor",
    "QueryResult",
    "SignInResult",
    "Unconfigured",
    "create_data_gateway",
    "create_gateway",
]
