"""PostService: CRUD de posts sobre o gateway, publicando no StateStore.

Responsabilidades:
- Validar entrada antes de qualquer chamada de rede
- Delegar ao gateway quando configurado (ou operar com dados de demonstração)
- Traduzir o resultado em mutações do StateStore

Toda operação pública retorna ServiceResult; nunca levanta exceção.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from zweihander.adapters.data_api.capability import Configured, GatewayCapability
from zweihander.application.state.store import POSTS, POSTS_CACHE_KEY, StateStore
from zweihander.domain.enums import RemoteOperation
from zweihander.domain.models import Post
from zweihander.domain.results import ServiceResult
from zweihander.domain.text import count_words, generate_excerpt, truncate_content, validate_post
from zweihander.observability.context import correlation_scope
from zweihander.observability.logging import get_logger
from zweihander.observability.timing import timed
from zweihander.utils.ids import new_post_id

logger: logging.Logger = get_logger(__name__)

POSTS_TABLE = "posts"
EDITABLE_FIELDS = frozenset({"title", "content"})


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def demo_posts() -> list[dict[str, Any]]:
    """Posts de demonstração usados quando a API de dados não está configurada."""
    return [
        {
            "id": 1,
            "title": "SISTEMA INICIALIZADO",
            "content": (
                "Bem-vindo ao Zweihander. Este é um post de demonstração exibido "
                "enquanto a API de dados não está configurada. Configure a URL e a "
                "chave para publicar posts reais."
            ),
            "created_at": datetime(2025, 1, 3, 12, 0, tzinfo=UTC),
        },
        {
            "id": 2,
            "title": "PROTOCOLO DE ESCRITA",
            "content": (
                "Posts são exibidos do mais recente para o mais antigo. Cada card "
                "mostra um resumo gerado a partir do conteúdo, cortado na última "
                "palavra completa."
            ),
            "created_at": datetime(2025, 1, 2, 12, 0, tzinfo=UTC),
        },
        {
            "id": 3,
            "title": "ACESSO ADMINISTRATIVO",
            "content": "Faça login como administrador para criar e remover posts.",
            "created_at": datetime(2025, 1, 1, 12, 0, tzinfo=UTC),
        },
    ]


def _to_wire(values: dict[str, Any]) -> dict[str, Any]:
    """Converte datetimes para ISO-8601 antes de enviar à API."""
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in values.items()}


class PostService:
    """Coordena operações de post entre gateway e estado."""

    def __init__(
        self,
        state: StateStore,
        gateway: GatewayCapability,
        excerpt_length: int = 200,
        preview_length: int = 150,
        posts_per_page: int = 10,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._state = state
        self._gateway = gateway
        self._excerpt_length = excerpt_length
        self._preview_length = preview_length
        self._posts_per_page = posts_per_page
        self._clock = clock or _utcnow

    def generate_excerpt(self, content: str, length: int | None = None) -> str:
        return generate_excerpt(content, self._excerpt_length if length is None else length)

    def truncate_content(self, content: str) -> str:
        """Prévia curta usada na listagem administrativa."""
        return truncate_content(content, self._preview_length)

    def validate_post(self, title: str | None, content: str | None) -> list[str]:
        return validate_post(title, content)

    def _to_post(self, row: dict[str, Any]) -> Post:
        post = Post.model_validate(row)
        if not post.excerpt:
            post = post.model_copy(update={"excerpt": self.generate_excerpt(post.content)})
        return post

    # Leitura

    async def load_posts(self, force_refresh: bool = False) -> ServiceResult:
        """Carrega posts (cache, API ou demonstração) e publica no estado."""
        with correlation_scope():
            if not force_refresh:
                cached = self._state.get_cache(POSTS_CACHE_KEY)
                if cached is not None:
                    # Republica sem renovar o TTL da entrada.
                    self._state.set_state(POSTS, cached)
                    logger.debug("Posts servidos do cache", extra={"count": len(cached)})
                    return ServiceResult.ok(cached)

            rows, error = await self._fetch_rows()
            if error:
                logger.error("Erro ao carregar posts", extra={"error": error})
                return ServiceResult.fail(f"Erro ao carregar posts: {error}")

            try:
                posts = [self._to_post(row) for row in rows]
            except ValidationError as e:
                logger.error("Post inválido retornado pela API", extra={"errors": e.error_count()})
                return ServiceResult.fail("Erro ao carregar posts: resposta inválida")

            self._state.set_posts(posts)
            logger.info("Posts carregados", extra={"count": len(posts)})
            return ServiceResult.ok(posts)

    async def _fetch_rows(self) -> tuple[list[dict[str, Any]], str | None]:
        if not isinstance(self._gateway, Configured):
            return demo_posts(), None

        self._state.set_loading(True)
        try:
            with timed(RemoteOperation.LOAD_POSTS) as call:
                result = await (
                    self._gateway.gateway.from_(POSTS_TABLE)
                    .select("*")
                    .order("created_at", ascending=False)
                    .limit(self._posts_per_page)
                    .execute()
                )
                if result.error:
                    call.fail(result.error)
        finally:
            self._state.set_loading(False)

        if result.error:
            return [], result.error
        return list(result.data or []), None

    # Escrita

    async def create_post(self, title: str, content: str) -> ServiceResult:
        """Valida, persiste e insere o post no topo da coleção."""
        with correlation_scope():
            errors = self.validate_post(title, content)
            if errors:
                return ServiceResult.fail(", ".join(errors))

            title, content = title.strip(), content.strip()
            post_data: dict[str, Any] = {
                "title": title,
                "content": content,
                "excerpt": self.generate_excerpt(content),
                "created_at": self._clock(),
            }

            if isinstance(self._gateway, Configured):
                with timed(RemoteOperation.CREATE_POST) as call:
                    result = await self._gateway.gateway.from_(POSTS_TABLE).insert(_to_wire(post_data))
                    if result.error:
                        call.fail(result.error)
                if result.error:
                    logger.error("Erro ao criar post", extra={"error": result.error})
                    return ServiceResult.fail(result.error)
                rows = result.data if isinstance(result.data, list) else []
                try:
                    post = self._to_post(rows[0]) if rows else Post(id=new_post_id(), **post_data)
                except ValidationError:
                    post = Post(id=new_post_id(), **post_data)
            else:
                post = Post(id=new_post_id(), **post_data)

            if self._state.get_post_by_id(post.id) is not None:
                self._state.update_post(post.id, post.model_dump())
            else:
                self._state.add_post(post)
            logger.info("Post criado", extra={"post_id": post.id})
            return ServiceResult.ok(post)

    async def delete_post(self, post_id: int | str) -> ServiceResult:
        """Remove o post (remoto restrito por id) e atualiza o estado."""
        with correlation_scope():
            if isinstance(self._gateway, Configured):
                with timed(RemoteOperation.DELETE_POST) as call:
                    result = await self._gateway.gateway.from_(POSTS_TABLE).eq("id", post_id).delete()
                    if result.error:
                        call.fail(result.error)
                if result.error:
                    logger.error("Erro ao deletar post", extra={"post_id": post_id, "error": result.error})
                    return ServiceResult.fail(result.error)

            self._state.remove_post(post_id)
            logger.info("Post deletado", extra={"post_id": post_id})
            return ServiceResult.ok()

    async def update_post(self, post_id: int | str, changes: dict[str, Any]) -> ServiceResult:
        """Atualiza título/conteúdo; regenera excerpt quando o conteúdo muda."""
        with correlation_scope():
            unknown = set(changes) - EDITABLE_FIELDS
            if unknown:
                return ServiceResult.fail(f"Campos não editáveis: {', '.join(sorted(unknown))}")

            current = self._state.get_post_by_id(post_id)
            errors = self.validate_post(
                changes.get("title", current.title if current else "-"),
                changes.get("content", current.content if current else "-"),
            )
            if errors:
                return ServiceResult.fail(", ".join(errors))

            updated: dict[str, Any] = {k: v.strip() for k, v in changes.items()}
            updated["updated_at"] = self._clock()
            if "content" in updated:
                updated["excerpt"] = self.generate_excerpt(updated["content"])

            if isinstance(self._gateway, Configured):
                with timed(RemoteOperation.UPDATE_POST) as call:
                    result = await (
                        self._gateway.gateway.from_(POSTS_TABLE).eq("id", post_id).update(_to_wire(updated))
                    )
                    if result.error:
                        call.fail(result.error)
                if result.error:
                    logger.error("Erro ao atualizar post", extra={"post_id": post_id, "error": result.error})
                    return ServiceResult.fail(result.error)

            self._state.update_post(post_id, updated)
            logger.info("Post atualizado", extra={"post_id": post_id})
            return ServiceResult.ok(self._state.get_post_by_id(post_id))

    # Estatísticas

    def get_stats(self) -> dict[str, Any]:
        posts = self._state.posts
        total_words = sum(count_words(post.content) for post in posts)
        return {
            "total_posts": len(posts),
            "total_words": total_words,
            "avg_words_per_post": round(total_words / len(posts)) if posts else 0,
            "last_post_date": posts[0].created_at if posts else None,
        }
