"""Timers cancelláveis sobre asyncio (debounce, auto-limpeza, revalidação).

Todo agendamento devolve um ScheduledHandle; quem agenda guarda o handle e
o cancela no teardown. Callbacks podem ser síncronos ou corrotinas.
Exige event loop em execução no momento do agendamento.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

Callback = Callable[[], Awaitable[Any] | Any]


async def _invoke(name: str, callback: Callback) -> None:
    try:
        result = callback()
        if inspect.isawaitable(result):
            await result
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception("Tarefa agendada falhou", extra={"task_name": name})


class ScheduledHandle:
    """Handle de uma tarefa agendada."""

    def __init__(self, name: str, task: asyncio.Task[None]) -> None:
        self._name = name
        self._task = task
        self._cancelled = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        """Cancela a tarefa; no-op se já concluída ou cancelada."""
        if self._cancelled:
            return
        self._cancelled = True
        if not self._task.done():
            self._task.cancel()


class TaskScheduler:
    """Agenda tarefas one-shot e periódicas e rastreia os handles vivos."""

    def __init__(self) -> None:
        self._handles: set[ScheduledHandle] = set()

    @property
    def pending(self) -> int:
        return sum(1 for handle in self._handles if not handle.done)

    def call_later(self, delay: float, callback: Callback, *, name: str = "timer") -> ScheduledHandle:
        """Executa ``callback`` uma vez após ``delay`` segundos."""

        async def runner() -> None:
            await asyncio.sleep(delay)
            await _invoke(name, callback)

        return self._track(name, runner())

    def call_every(
        self, interval: float, callback: Callback, *, name: str = "interval"
    ) -> ScheduledHandle:
        """Executa ``callback`` a cada ``interval`` segundos até ser cancelado."""

        async def runner() -> None:
            while True:
                await asyncio.sleep(interval)
                await _invoke(name, callback)

        return self._track(name, runner())

    def _track(self, name: str, coro: Awaitable[None]) -> ScheduledHandle:
        task = asyncio.get_running_loop().create_task(coro, name=name)  # type: ignore[arg-type]
        handle = ScheduledHandle(name, task)
        self._handles.add(handle)
        task.add_done_callback(lambda _task: self._handles.discard(handle))
        return handle

    def cancel_all(self) -> None:
        """Cancela todas as tarefas pendentes (teardown)."""
        handles = list(self._handles)
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug("Tarefas agendadas canceladas", extra={"count": len(handles)})
