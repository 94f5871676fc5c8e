"""Contrato de armazenamento chave-valor durável (token, rascunho, e-mail)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Falha de acesso ao armazenamento (quota, backend indisponível, ...)."""


class KeyValueStorage(ABC):
    """Contrato mínimo síncrono, no formato de um localStorage.

    Implementações levantam StorageError em falha de backend; quem chama
    decide se a operação é best-effort.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...
