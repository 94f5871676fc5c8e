"""Avisos inline por formulário, com auto-limpeza após timeout."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from zweihander.application.scheduling import ScheduledHandle, TaskScheduler
from zweihander.application.state.listeners import ListenerRegistry, Subscription
from zweihander.domain.enums import NoticeKind
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Notice:
    target: str
    message: str
    kind: NoticeKind


class NoticeBoard:
    """Guarda o aviso corrente de cada alvo (ex.: ``login-message``).

    Um aviso novo no mesmo alvo cancela a limpeza pendente do anterior.
    """

    def __init__(self, scheduler: TaskScheduler, timeout_seconds: float = 5.0) -> None:
        self._scheduler = scheduler
        self._timeout = timeout_seconds
        self._notices: dict[str, Notice] = {}
        self._clear_handles: dict[str, ScheduledHandle] = {}
        self._listeners = ListenerRegistry()

    def show(self, target: str, message: str, kind: NoticeKind | str = NoticeKind.SUCCESS) -> Notice:
        notice = Notice(target=str(target), message=message, kind=NoticeKind(kind))
        self._set(notice.target, notice)

        previous = self._clear_handles.pop(notice.target, None)
        if previous:
            previous.cancel()
        self._clear_handles[notice.target] = self._scheduler.call_later(
            self._timeout,
            lambda: self._expire(notice),
            name=f"notice-clear:{notice.target}",
        )
        return notice

    def get(self, target: str) -> Notice | None:
        return self._notices.get(str(target))

    def clear(self, target: str) -> None:
        target = str(target)
        handle = self._clear_handles.pop(target, None)
        if handle:
            handle.cancel()
        if target in self._notices:
            self._set(target, None)

    def subscribe(self, target: str, callback: Callable[[Notice | None, Notice | None], None]) -> Subscription:
        return self._listeners.add(str(target), callback)

    def cancel_pending(self) -> None:
        for handle in self._clear_handles.values():
            handle.cancel()
        self._clear_handles.clear()

    def _expire(self, notice: Notice) -> None:
        # Alvo substituído ou já limpo: nada a fazer.
        if self._notices.get(notice.target) is not notice:
            return
        self._clear_handles.pop(notice.target, None)
        self._set(notice.target, None)

    def _set(self, target: str, notice: Notice | None) -> None:
        old = self._notices.get(target)
        if notice is None:
            self._notices.pop(target, None)
        else:
            self._notices[target] = notice
        self._listeners.notify(target, notice, old)
