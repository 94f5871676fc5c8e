"""Query builder encadeável sobre um recurso REST.

Uso típico:
    result = await gateway.from_("posts").select("*").order("created_at").execute()
    result = await gateway.from_("posts").eq("id", 7).delete()

Todos os terminais retornam QueryResult e nunca levantam exceção.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from zweihander.adapters.data_api.models import (
    OrderClause,
    QueryDescriptor,
    QueryResult,
)
from zweihander.infra.http import HttpError
from zweihander.observability.logging import get_logger

if TYPE_CHECKING:
    from zweihander.adapters.data_api.client import DataGateway

logger: logging.Logger = get_logger(__name__)

_RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class QueryBuilder:
    """Acumula select/filtros/ordem/limite e executa a chamada HTTP."""

    def __init__(self, gateway: DataGateway, table: str) -> None:
        self._gateway = gateway
        self._descriptor = QueryDescriptor(table=table)

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._descriptor

    def select(self, columns: str = "*") -> QueryBuilder:
        self._descriptor = replace(self._descriptor, columns=columns)
        return self

    def eq(self, column: str, value: Any) -> QueryBuilder:
        """Filtro de igualdade; filtros se acumulam (AND)."""
        self._descriptor = self._descriptor.with_filter(column, value)
        return self

    def order(self, column: str, *, ascending: bool = False) -> QueryBuilder:
        self._descriptor = replace(self._descriptor, order=OrderClause(column, ascending))
        return self

    def limit(self, count: int) -> QueryBuilder:
        if count < 0:
            raise ValueError("limit deve ser >= 0")
        self._descriptor = replace(self._descriptor, limit=count)
        return self

    async def execute(self) -> QueryResult:
        """GET com select/filtros/ordem/limite."""
        try:
            data = await self._gateway.request_resource(
                "GET", self._descriptor.table, params=self._descriptor.read_params()
            )
        except HttpError as e:
            return QueryResult(data=None, error=str(e))
        return QueryResult(data=data if data is not None else [])

    async def insert(self, rows: dict[str, Any] | list[dict[str, Any]]) -> QueryResult:
        """POST de uma ou mais linhas (linha única vira lista)."""
        payload = rows if isinstance(rows, list) else [rows]
        try:
            data = await self._gateway.request_resource(
                "POST",
                self._descriptor.table,
                json=payload,
                headers=_RETURN_REPRESENTATION,
            )
        except HttpError as e:
            return QueryResult(data=None, error=str(e))
        return QueryResult(data=data)

    async def update(self, values: dict[str, Any]) -> QueryResult:
        """PATCH restrito pelos filtros acumulados."""
        self._warn_if_unscoped("update")
        try:
            data = await self._gateway.request_resource(
                "PATCH",
                self._descriptor.table,
                params=self._descriptor.filter_params(),
                json=values,
                headers=_RETURN_REPRESENTATION,
            )
        except HttpError as e:
            return QueryResult(data=None, error=str(e))
        return QueryResult(data=data)

    async def delete(self) -> QueryResult:
        """DELETE restrito pelos filtros acumulados."""
        self._warn_if_unscoped("delete")
        try:
            await self._gateway.request_resource(
                "DELETE",
                self._descriptor.table,
                params=self._descriptor.filter_params(),
            )
        except HttpError as e:
            return QueryResult(data=None, error=str(e))
        return QueryResult(data=None)

    def _warn_if_unscoped(self, operation: str) -> None:
        # Mutação sem filtro é legal e atinge o recurso inteiro.
        if not self._descriptor.is_scoped:
            logger.warning(
                "Mutação sem filtro afeta todo o recurso",
                extra={"operation": operation, "table": self._descriptor.table},
            )
