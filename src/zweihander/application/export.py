"""Export, backup e import de posts (ferramentas administrativas).

Responsabilidades:
- Gerar arquivos de export (JSON/CSV) e backup a partir do estado
- Interpretar arquivos de import (lista ou objeto com ``posts``)
- Importar entradas válidas pelo PostService (mesma validação da criação)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from zweihander.application.posts import PostService
from zweihander.application.renderers.export_renderers import (
    build_filename,
    render_backup,
    render_csv,
    render_json,
)
from zweihander.application.state.store import StateStore
from zweihander.domain.enums import ExportFormat
from zweihander.domain.models import Post
from zweihander.domain.results import ServiceResult
from zweihander.observability.context import correlation_scope
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

INVALID_IMPORT_MESSAGE = "Formato de arquivo inválido"


@dataclass(frozen=True, slots=True)
class ExportFile:
    filename: str
    content: str
    mime_type: str


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def export_posts(
    posts: Iterable[Post],
    fmt: ExportFormat | str = ExportFormat.JSON,
    generated_at: datetime | None = None,
) -> ExportFile:
    """Renderiza posts no formato pedido.

    Raises:
        ValueError: Formato desconhecido
    """
    try:
        fmt = ExportFormat(fmt)
    except ValueError as e:
        raise ValueError("Formato não suportado") from e

    generated_at = generated_at or _utcnow()
    if fmt is ExportFormat.CSV:
        return ExportFile(
            filename=build_filename("blog-posts", generated_at, "csv"),
            content=render_csv(posts),
            mime_type="text/csv",
        )
    return ExportFile(
        filename=build_filename("blog-posts", generated_at, "json"),
        content=render_json(posts),
        mime_type="application/json",
    )


def create_backup(posts: Iterable[Post], generated_at: datetime | None = None) -> ExportFile:
    generated_at = generated_at or _utcnow()
    return ExportFile(
        filename=build_filename("blog-backup", generated_at, "json"),
        content=render_backup(posts, generated_at),
        mime_type="application/json",
    )


def parse_import(text: str) -> list[dict[str, Any]]:
    """Extrai as entradas de um arquivo de import.

    Aceita uma lista JSON ou um objeto com a chave ``posts`` (formato de backup).

    Raises:
        ValueError: JSON inválido ou estrutura não reconhecida
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(INVALID_IMPORT_MESSAGE) from e

    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict) and isinstance(data.get("posts"), list):
        entries = data["posts"]
    else:
        raise ValueError(INVALID_IMPORT_MESSAGE)
    return [entry for entry in entries if isinstance(entry, dict)]


class PostTransferService:
    """Export/backup do estado corrente e import via PostService."""

    def __init__(
        self,
        state: StateStore,
        posts: PostService,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._state = state
        self._posts = posts
        self._clock = clock or _utcnow

    def export(self, fmt: ExportFormat | str = ExportFormat.JSON) -> ServiceResult:
        try:
            exported = export_posts(self._state.posts, fmt, self._clock())
        except ValueError as e:
            logger.warning("Erro ao exportar posts", extra={"format": str(fmt)})
            return ServiceResult.fail(str(e))
        logger.info("Posts exportados", extra={"format": str(fmt), "count": len(self._state.posts)})
        return ServiceResult.ok(exported)

    def backup(self) -> ServiceResult:
        return ServiceResult.ok(create_backup(self._state.posts, self._clock()))

    async def import_posts(self, text: str) -> ServiceResult:
        """Cria cada entrada com título e conteúdo; ``data`` é a contagem importada."""
        with correlation_scope():
            try:
                entries = parse_import(text)
            except ValueError as e:
                logger.warning("Import rejeitado", extra={"error": str(e)})
                return ServiceResult.fail(str(e))

            imported = 0
            for entry in entries:
                title, content = entry.get("title"), entry.get("content")
                if not (isinstance(title, str) and title and isinstance(content, str) and content):
                    continue
                result = await self._posts.create_post(title, content)
                if result.success:
                    imported += 1

            logger.info("Posts importados", extra={"imported": imported, "entries": len(entries)})
            return ServiceResult.ok(imported)
