"""Modelos do adapter da API de dados: descritor de query e resultados."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from zweihander.domain.models import AuthSession, User


def format_filter_value(value: Any) -> str:
    """Serializa valor de filtro no formato textual da API REST."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True, slots=True)
class EqFilter:
    """Filtro de igualdade exata (``<col>=eq.<valor>``)."""

    column: str
    value: Any

    def to_param(self) -> tuple[str, str]:
        return self.column, f"eq.{format_filter_value(self.value)}"


@dataclass(frozen=True, slots=True)
class OrderClause:
    """Ordenação por coluna (``order=<col>.<asc|desc>``)."""

    column: str
    ascending: bool = False

    def to_param(self) -> tuple[str, str]:
        direction = "asc" if self.ascending else "desc"
        return "order", f"{self.column}.{direction}"


@dataclass(frozen=True, slots=True)
class QueryDescriptor:
    """Descrição imutável de uma query sobre um recurso.

    A serialização é determinística: select, filtros na ordem de chamada,
    order e limit. O encoding dos valores fica a cargo do httpx.
    """

    table: str
    columns: str = "*"
    filters: tuple[EqFilter, ...] = field(default_factory=tuple)
    order: OrderClause | None = None
    limit: int | None = None

    def with_filter(self, column: str, value: Any) -> QueryDescriptor:
        return replace(self, filters=(*self.filters, EqFilter(column, value)))

    @property
    def is_scoped(self) -> bool:
        """True se há ao menos um filtro (mutações restritas a linhas)."""
        return bool(self.filters)

    def filter_params(self) -> list[tuple[str, str]]:
        return [f.to_param() for f in self.filters]

    def read_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.columns != "*":
            params.append(("select", self.columns))
        params.extend(self.filter_params())
        if self.order is not None:
            params.append(self.order.to_param())
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        return params


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Resultado de uma operação de recurso: dado ou mensagem de erro."""

    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class SignInResult:
    """Resultado de login por senha."""

    user: User | None = None
    session: AuthSession | None = None
    error: str | None = None
