from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import httpx
import pytest

from zweihander.config.settings import Settings, get_settings
from zweihander.domain.models import Post
from zweihander.infra.storage_memory import InMemoryKeyValueStorage
from zweihander.observability.logging import CorrelationIdFilter


class FakeClock:
    """Relógio manual para testes de TTL e idade de rascunho."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_post(post_id: int | str = 1, title: str = "Título", content: str = "Conteúdo do post") -> Post:
    return Post(
        id=post_id,
        title=title,
        content=content,
        excerpt=content,
        created_at=datetime(2025, 1, 1, 12, 0, tzinfo=UTC),
    )


def mock_httpx_client(*responses: httpx.Response) -> AsyncMock:
    """AsyncMock no lugar de httpx.AsyncClient, devolvendo ``responses`` em ordem."""
    client = AsyncMock()
    client.is_closed = False
    client.request.side_effect = list(responses)
    return client


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Desfaz o configure_logging feito pelo teste (handlers com o filtro do serviço)."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture()
def demo_settings() -> Settings:
    """Settings sem API remota (modo demonstração)."""
    get_settings.cache_clear()
    return Settings(_env_file=None, supabase_url="YOUR_SUPABASE_URL", supabase_anon_key="YOUR_SUPABASE_ANON_KEY")


@pytest.fixture()
def remote_settings() -> Settings:
    get_settings.cache_clear()
    return Settings(
        _env_file=None,
        supabase_url="https://proj.supabase.co",
        supabase_anon_key="anon-key",
    )
