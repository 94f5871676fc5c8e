"""Registro de listeners por chave de estado.

A ordem de registro define a ordem de notificação. Registrar o mesmo
callback duas vezes gera duas notificações.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

Listener = Callable[[Any, Any], None]


class _Registration:
    __slots__ = ("callback",)

    def __init__(self, callback: Listener) -> None:
        self.callback = callback


class Subscription:
    """Handle devolvido no registro; ``dispose()`` remove exatamente este registro."""

    def __init__(self, registry: ListenerRegistry, key: str, registration: _Registration) -> None:
        self._registry = registry
        self._key = key
        self._registration = registration
        self._active = True

    @property
    def key(self) -> str:
        return self._key

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        """Remove o listener; chamadas repetidas são no-op."""
        if not self._active:
            return
        self._active = False
        self._registry._discard(self._key, self._registration)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *args: Any) -> None:
        self.dispose()


class ListenerRegistry:
    """Mapa chave -> lista ordenada de callbacks."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[_Registration]] = {}

    def add(self, key: str, callback: Listener) -> Subscription:
        registration = _Registration(callback)
        self._listeners.setdefault(key, []).append(registration)
        return Subscription(self, key, registration)

    def remove(self, key: str, callback: Listener) -> None:
        """Remove o primeiro registro de ``callback``; no-op se não houver.

        Compara com ``==``: para funções e lambdas equivale a identidade, e
        métodos ligados (recriados a cada acesso a ``obj.metodo``) casam quando
        apontam para a mesma função e a mesma instância.
        """
        registrations = self._listeners.get(key)
        if not registrations:
            return
        for index, registration in enumerate(registrations):
            if registration.callback == callback:
                del registrations[index]
                return

    def _discard(self, key: str, registration: _Registration) -> None:
        registrations = self._listeners.get(key)
        if not registrations:
            return
        for index, candidate in enumerate(registrations):
            if candidate is registration:
                del registrations[index]
                return

    def count(self, key: str) -> int:
        return len(self._listeners.get(key, ()))

    def notify(self, key: str, new_value: Any, old_value: Any) -> None:
        """Chama todos os listeners de ``key`` em ordem, de forma síncrona.

        Uma falha em um listener é logada e não impede os seguintes.
        """
        # Cópia: listeners podem se remover durante a notificação.
        for registration in list(self._listeners.get(key, ())):
            try:
                registration.callback(new_value, old_value)
            except Exception:
                logger.exception("Listener de estado falhou", extra={"state_key": key})
