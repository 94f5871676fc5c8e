"""Contexto de correlação por operação (sem servidor HTTP).

Cada operação pública dos serviços abre um escopo com um correlation_id
novo, de forma que todos os logs de uma mesma ação do usuário (login,
publicação de post, ...) possam ser agrupados.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator
from contextvars import ContextVar

from zweihander.utils.ids import new_correlation_id

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente (ou vazio)."""

    return _correlation_id.get()


@contextlib.contextmanager
def correlation_scope(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Define correlation_id durante o bloco; reaproveita o atual se existir."""
    current = _correlation_id.get()
    value = correlation_id or current or new_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
