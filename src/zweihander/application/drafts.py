"""Rascunho local de post: persistência best-effort e auto-save com debounce."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from pydantic import ValidationError

from zweihander.application.scheduling import ScheduledHandle, TaskScheduler
from zweihander.domain.enums import StorageSlot
from zweihander.domain.models import Draft
from zweihander.domain.protocols.storage import KeyValueStorage, StorageError
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class DraftStore:
    """Slot ``blog-draft`` no armazenamento durável.

    Falhas de armazenamento são logadas e nunca interrompem quem chama.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        max_age_hours: float = 24.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._storage = storage
        self._max_age_ms = max_age_hours * 60 * 60 * 1000
        self._clock = clock or time.time

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def save(self, title: str, content: str) -> bool:
        draft = Draft(title=title, content=content, timestamp=self._now_ms())
        try:
            self._storage.set_item(StorageSlot.DRAFT, draft.model_dump_json())
        except StorageError as e:
            logger.warning("Erro ao salvar rascunho", extra={"error": str(e)})
            return False
        logger.debug("Rascunho salvo", extra={"timestamp": draft.timestamp})
        return True

    def load(self) -> Draft | None:
        """Rascunho válido e recente, ou None (vazio, antigo ou corrompido)."""
        try:
            raw = self._storage.get_item(StorageSlot.DRAFT)
        except StorageError as e:
            logger.warning("Erro ao carregar rascunho", extra={"error": str(e)})
            return None
        if not raw:
            return None

        try:
            draft = Draft.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Rascunho corrompido ignorado", extra={"error_type": type(e).__name__})
            return None

        if self._now_ms() - draft.timestamp >= self._max_age_ms or draft.is_empty:
            return None
        return draft

    def clear(self) -> None:
        try:
            self._storage.remove_item(StorageSlot.DRAFT)
        except StorageError as e:
            logger.warning("Erro ao limpar rascunho", extra={"error": str(e)})


class DraftAutoSaver:
    """Debounce: cada ``schedule`` substitui o salvamento pendente."""

    def __init__(self, drafts: DraftStore, scheduler: TaskScheduler, delay_seconds: float = 1.0) -> None:
        self._drafts = drafts
        self._scheduler = scheduler
        self._delay = delay_seconds
        self._handle: ScheduledHandle | None = None
        self._pending: tuple[str, str] | None = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, title: str, content: str) -> ScheduledHandle:
        self.cancel()
        self._pending = (title, content)
        self._handle = self._scheduler.call_later(self._delay, self._fire, name="draft-autosave")
        return self._handle

    def flush(self) -> bool:
        """Salva imediatamente o pendente (se houver)."""
        if self._handle:
            self._handle.cancel()
        return self._fire()

    def _fire(self) -> bool:
        self._handle = None
        pending, self._pending = self._pending, None
        if pending is None:
            return False
        return self._drafts.save(*pending)

    def cancel(self) -> None:
        if self._handle:
            self._handle.cancel()
            self._handle = None
        self._pending = None
