"""Formato uniforme de retorno das operações públicas dos serviços."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ServiceResult:
    """Sucesso + dado, ou falha + mensagem legível. Nunca exceção."""

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> ServiceResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> ServiceResult:
        return cls(success=False, data=data, error=error)
