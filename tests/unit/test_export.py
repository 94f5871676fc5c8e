"""Testes para application/export.py e renderers de export."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest
from conftest import make_post

from zweihander.adapters.data_api.capability import Unconfigured
from zweihander.application.export import (
    ExportFile,
    PostTransferService,
    create_backup,
    export_posts,
    parse_import,
)
from zweihander.application.posts import PostService
from zweihander.application.renderers.export_renderers import CSV_HEADER, render_csv
from zweihander.application.state.store import StateStore

GENERATED_AT = datetime(2025, 3, 14, 18, 0, tzinfo=UTC)


class TestExportPosts:
    """Export JSON/CSV."""

    def test_json_export(self) -> None:
        exported = export_posts([make_post(1, title="Olá")], "json", GENERATED_AT)

        assert exported.filename == "blog-posts-2025-03-14.json"
        assert exported.mime_type == "application/json"
        data = json.loads(exported.content)
        assert data[0]["id"] == 1
        assert data[0]["title"] == "Olá"
        assert '"Olá"' in exported.content

    def test_csv_export(self) -> None:
        exported = export_posts([make_post(7, title='Diga "oi"', content="a,b")], "csv", GENERATED_AT)

        assert exported == ExportFile(
            filename="blog-posts-2025-03-14.csv",
            content=f'{CSV_HEADER}\n7,"Diga ""oi""","a,b",2025-01-01T12:00:00+00:00',
            mime_type="text/csv",
        )

    def test_csv_empty_has_header_only(self) -> None:
        assert render_csv([]) == "ID,Título,Conteúdo,Data de Criação"

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="Formato não suportado"):
            export_posts([], "xml")

    def test_backup(self) -> None:
        backup = create_backup([make_post(1)], GENERATED_AT)

        payload = json.loads(backup.content)
        assert backup.filename == "blog-backup-2025-03-14.json"
        assert payload["version"] == "1.0"
        assert payload["timestamp"] == GENERATED_AT.isoformat()
        assert len(payload["posts"]) == 1


class TestParseImport:
    """Formatos aceitos no import."""

    def test_plain_list(self) -> None:
        assert parse_import('[{"title": "T", "content": "C"}]') == [{"title": "T", "content": "C"}]

    def test_backup_object(self) -> None:
        assert parse_import('{"posts": [{"title": "T"}], "version": "1.0"}') == [{"title": "T"}]

    @pytest.mark.parametrize("text", ['{"outros": []}', '"texto"', "{quebrado"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError, match="Formato de arquivo inválido"):
            parse_import(text)


class TestPostTransferService:
    """Export/import sobre o estado."""

    def _service(self, state: StateStore) -> PostTransferService:
        return PostTransferService(state, PostService(state, Unconfigured()), clock=lambda: GENERATED_AT)

    @pytest.mark.asyncio
    async def test_import_skips_incomplete_entries(self) -> None:
        state = StateStore()
        text = json.dumps(
            [
                {"title": "A", "content": "conteúdo A"},
                {"title": "", "content": "sem título"},
                {"content": "só conteúdo"},
                {"title": "B", "content": "conteúdo B"},
            ]
        )

        result = await self._service(state).import_posts(text)

        assert result.success is True
        assert result.data == 2
        assert {p.title for p in state.posts} == {"A", "B"}

    @pytest.mark.asyncio
    async def test_import_invalid_file(self) -> None:
        result = await self._service(StateStore()).import_posts('{"x": 1}')
        assert result.error == "Formato de arquivo inválido"

    @pytest.mark.asyncio
    async def test_round_trip(self) -> None:
        source = StateStore()
        source.set_posts([make_post(1, title="Um", content="primeiro"), make_post(2, title="Dois", content="segundo")])
        exported = self._service(source).export("json").data

        target = StateStore()
        result = await self._service(target).import_posts(exported.content)

        assert result.data == 2
        assert {(p.title, p.content) for p in target.posts} == {("Um", "primeiro"), ("Dois", "segundo")}

    @pytest.mark.asyncio
    async def test_backup_can_be_imported(self) -> None:
        source = StateStore()
        source.set_posts([make_post(1, title="Um", content="primeiro")])
        backup = self._service(source).backup().data

        target = StateStore()
        result = await self._service(target).import_posts(backup.content)

        assert result.data == 1

    def test_export_unknown_format_is_failure(self) -> None:
        result = self._service(StateStore()).export("pdf")
        assert result.success is False
        assert result.error == "Formato não suportado"
