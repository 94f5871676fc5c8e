"""Testes para application/drafts.py."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock

import pytest
from conftest import FakeClock

from zweihander.application.drafts import DraftAutoSaver, DraftStore
from zweihander.application.scheduling import TaskScheduler
from zweihander.domain.enums import StorageSlot
from zweihander.domain.protocols.storage import StorageError
from zweihander.infra.storage_memory import InMemoryKeyValueStorage

HOUR = 60 * 60


class TestDraftStore:
    """Persistência do rascunho."""

    def test_save_and_load(self, storage: InMemoryKeyValueStorage) -> None:
        drafts = DraftStore(storage, clock=FakeClock())

        assert drafts.save("Título", "Texto") is True
        draft = drafts.load()

        assert draft is not None
        assert (draft.title, draft.content) == ("Título", "Texto")
        assert draft.timestamp == 1_000_000

    def test_stored_as_json_in_draft_slot(self, storage: InMemoryKeyValueStorage) -> None:
        DraftStore(storage, clock=FakeClock()).save("T", "C")

        payload = json.loads(storage.get_item(StorageSlot.DRAFT))

        assert payload == {"title": "T", "content": "C", "timestamp": 1_000_000}

    def test_old_draft_ignored(self, storage: InMemoryKeyValueStorage) -> None:
        clock = FakeClock()
        drafts = DraftStore(storage, max_age_hours=24, clock=clock)
        drafts.save("T", "C")

        clock.advance(24 * HOUR)

        assert drafts.load() is None

    def test_recent_draft_kept(self, storage: InMemoryKeyValueStorage) -> None:
        clock = FakeClock()
        drafts = DraftStore(storage, max_age_hours=24, clock=clock)
        drafts.save("T", "C")

        clock.advance(23 * HOUR)

        assert drafts.load() is not None

    def test_empty_draft_ignored(self, storage: InMemoryKeyValueStorage) -> None:
        drafts = DraftStore(storage, clock=FakeClock())
        drafts.save("", "")
        assert drafts.load() is None

    def test_corrupt_draft_ignored(self) -> None:
        storage = InMemoryKeyValueStorage({StorageSlot.DRAFT: "{nao-json"})
        assert DraftStore(storage).load() is None

    def test_clear(self, storage: InMemoryKeyValueStorage) -> None:
        drafts = DraftStore(storage, clock=FakeClock())
        drafts.save("T", "C")
        drafts.clear()
        assert drafts.load() is None

    def test_storage_failure_is_swallowed(self) -> None:
        storage = MagicMock()
        storage.set_item.side_effect = StorageError("quota")
        storage.get_item.side_effect = StorageError("quota")
        storage.remove_item.side_effect = StorageError("quota")
        drafts = DraftStore(storage)

        assert drafts.save("T", "C") is False
        assert drafts.load() is None
        drafts.clear()


class TestDraftAutoSaver:
    """Debounce do auto-save."""

    @pytest.mark.asyncio
    async def test_only_last_edit_is_saved(self, storage: InMemoryKeyValueStorage) -> None:
        drafts = DraftStore(storage)
        saver = DraftAutoSaver(drafts, TaskScheduler(), delay_seconds=0.02)

        saver.schedule("T", "a")
        saver.schedule("T", "ab")
        saver.schedule("T", "abc")
        assert storage.get_item(StorageSlot.DRAFT) is None

        await asyncio.sleep(0.05)

        draft = drafts.load()
        assert draft is not None
        assert draft.content == "abc"
        assert saver.has_pending is False

    @pytest.mark.asyncio
    async def test_flush_saves_immediately(self, storage: InMemoryKeyValueStorage) -> None:
        drafts = DraftStore(storage)
        saver = DraftAutoSaver(drafts, TaskScheduler(), delay_seconds=10)

        saver.schedule("T", "agora")

        assert saver.flush() is True
        draft = drafts.load()
        assert draft is not None
        assert draft.content == "agora"

    @pytest.mark.asyncio
    async def test_cancel_discards_pending(self, storage: InMemoryKeyValueStorage) -> None:
        drafts = DraftStore(storage)
        saver = DraftAutoSaver(drafts, TaskScheduler(), delay_seconds=0.01)

        saver.schedule("T", "x")
        saver.cancel()
        await asyncio.sleep(0.03)

        assert drafts.load() is None
        assert saver.flush() is False
