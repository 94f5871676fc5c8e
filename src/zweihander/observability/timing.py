"""Latência das chamadas à API de dados.

Cada chamada medida gera um único registro com a operação, o desfecho
(``ok``, ``error`` ou ``exception``), o tempo decorrido e o correlation_id
da ação do usuário que a disparou.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Generator
from dataclasses import dataclass

from zweihander.domain.enums import CallOutcome, RemoteOperation
from zweihander.observability.context import get_correlation_id
from zweihander.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class TimedCall:
    """Registro mutável de uma chamada em andamento."""

    operation: RemoteOperation
    outcome: CallOutcome = CallOutcome.OK
    error: str | None = None
    elapsed_ms: float = 0.0

    def fail(self, error: str) -> None:
        """Marca a chamada como resolvida com erro (sem exceção)."""
        self.outcome = CallOutcome.ERROR
        self.error = error


@contextlib.contextmanager
def timed(operation: RemoteOperation) -> Generator[TimedCall, None, None]:
    """Mede a chamada e loga o desfecho ao sair do bloco.

    Uso:
        with timed(RemoteOperation.LOAD_POSTS) as call:
            result = await query.execute()
            if result.error:
                call.fail(result.error)

    Desfecho ``ok`` sai em INFO; ``error`` e ``exception`` em WARNING.
    """
    call = TimedCall(operation)
    start = time.perf_counter()
    try:
        yield call
    except BaseException:
        call.outcome = CallOutcome.EXCEPTION
        raise
    finally:
        call.elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        level = logging.INFO if call.outcome is CallOutcome.OK else logging.WARNING
        logger.log(
            level,
            "remote_call",
            extra={
                "operation": str(call.operation),
                "outcome": str(call.outcome),
                "elapsed_ms": call.elapsed_ms,
                "error": call.error,
                "correlation_id": get_correlation_id(),
            },
        )
