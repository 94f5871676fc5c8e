"""Testes de integração: AppContext montado a partir das settings."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest
from conftest import mock_httpx_client

from zweihander.adapters.data_api.capability import Configured, Unconfigured
from zweihander.application.context import create_app_context
from zweihander.config.settings import Settings
from zweihander.domain.enums import StorageSlot
from zweihander.infra.storage_memory import InMemoryKeyValueStorage
from zweihander.observability.logging import CorrelationIdFilter


class TestBootstrap:
    """Logging e validação na montagem."""

    def test_configures_service_logging(self, demo_settings: Settings) -> None:
        create_app_context(demo_settings, InMemoryKeyValueStorage())

        root = logging.getLogger()
        assert root.level == logging.getLevelName(demo_settings.log_level)
        assert any(
            isinstance(f, CorrelationIdFilter) for handler in root.handlers for f in handler.filters
        )

    def test_invalid_settings_rejected(self, demo_settings: Settings) -> None:
        settings = demo_settings.model_copy(update={"posts_per_page": 0, "storage_backend": "sqlite"})

        with pytest.raises(ValueError, match="Configuração inválida") as exc_info:
            create_app_context(settings, InMemoryKeyValueStorage())

        assert "POSTS_PER_PAGE" in str(exc_info.value)
        assert "STORAGE_BACKEND" in str(exc_info.value)


class TestDemoFlow:
    """Fluxo completo sem API configurada."""

    @pytest.mark.asyncio
    async def test_login_create_and_logout(self, demo_settings: Settings) -> None:
        context = create_app_context(demo_settings, InMemoryKeyValueStorage())
        assert isinstance(context.gateway, Unconfigured)

        loaded = await context.posts.load_posts()
        assert loaded.success is True
        assert len(context.state.posts) == 3

        login = await context.auth.login("admin@zweihander.com", "admin123")
        assert login.success is True
        assert context.state.user.name == "Admin Demo"

        created = await context.posts.create_post("Novo post", "Conteúdo do novo post")
        assert created.success is True
        assert context.state.posts[0].title == "Novo post"
        assert context.posts.get_stats()["total_posts"] == 4

        await context.auth.logout()
        assert context.state.is_authenticated is False

        await context.aclose()

    @pytest.mark.asyncio
    async def test_wrong_demo_password(self, demo_settings: Settings) -> None:
        context = create_app_context(demo_settings, InMemoryKeyValueStorage())

        result = await context.auth.login("admin@zweihander.com", "x")

        assert result.error == "Credenciais inválidas"
        await context.aclose()

    @pytest.mark.asyncio
    async def test_draft_autosave_roundtrip(self, demo_settings: Settings) -> None:
        settings = demo_settings.model_copy(update={"draft_autosave_delay_seconds": 0.01})
        storage = InMemoryKeyValueStorage()
        context = create_app_context(settings, storage)

        context.autosaver.schedule("Rascunho", "texto")
        await asyncio.sleep(0.05)

        draft = context.drafts.load()
        assert draft is not None
        assert draft.title == "Rascunho"
        assert storage.get_item(StorageSlot.DRAFT) is not None
        await context.aclose()


class TestRemoteFlow:
    """Fluxo com gateway configurado (HTTP mockado)."""

    @pytest.mark.asyncio
    async def test_stored_token_restored_and_closed(self, remote_settings: Settings) -> None:
        storage = InMemoryKeyValueStorage({StorageSlot.AUTH_TOKEN: "user-jwt"})
        context = create_app_context(remote_settings, storage)
        assert isinstance(context.gateway, Configured)

        inner = mock_httpx_client(httpx.Response(200, json=[{"id": 1}]))
        context.gateway.gateway._client = inner

        await context.auth.init()

        assert context.state.is_authenticated is True
        assert context.auth.session_validation_active is True

        await context.aclose()

        assert context.auth.session_validation_active is False
        inner.aclose.assert_awaited_once()
