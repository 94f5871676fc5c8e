"""StateStore: fonte única de verdade dos dados exibidos pela UI.

Objeto construído explicitamente e injetado nos serviços (via AppContext).
Mutações notificam listeners de forma síncrona: quando ``set_state`` retorna,
todos os listeners da chave já foram chamados.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Final

from zweihander.application.state.cache import DEFAULT_TTL_SECONDS, ExpiringCache
from zweihander.application.state.listeners import Listener, ListenerRegistry, Subscription
from zweihander.domain.enums import Section
from zweihander.domain.models import Post, User
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

CURRENT_SECTION: Final = "current_section"
IS_AUTHENTICATED: Final = "is_authenticated"
IS_LOADING: Final = "is_loading"
POSTS: Final = "posts"
USER: Final = "user"

STATE_KEYS: Final = frozenset({CURRENT_SECTION, IS_AUTHENTICATED, IS_LOADING, POSTS, USER})

POSTS_CACHE_KEY: Final = "posts"


class StateValidationError(ValueError):
    """Valor viola um invariante do estado (erro de programação do chamador)."""


def _initial_state() -> dict[str, Any]:
    return {
        CURRENT_SECTION: Section.HOME,
        IS_AUTHENTICATED: False,
        IS_LOADING: False,
        POSTS: [],
        USER: None,
    }


def _ensure_unique_ids(posts: Iterable[Post]) -> None:
    seen: set[int | str] = set()
    for post in posts:
        if post.id in seen:
            raise StateValidationError(f"Post duplicado na coleção: id={post.id!r}")
        seen.add(post.id)


class StateStore:
    """Estado observável + cache com TTL.

    Chaves: current_section, is_authenticated, is_loading, posts, user.
    """

    def __init__(
        self,
        cache_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._state: dict[str, Any] = _initial_state()
        self._cache = ExpiringCache(default_ttl=cache_ttl, clock=clock)
        self._listeners = ListenerRegistry()

    # Núcleo

    def _coerce(self, key: str, value: Any) -> Any:
        if key not in STATE_KEYS:
            raise KeyError(f"Chave de estado desconhecida: {key}")

        if key in (IS_AUTHENTICATED, IS_LOADING):
            if not isinstance(value, bool):
                raise StateValidationError(f"{key} deve ser boolean")
            return value

        if key == CURRENT_SECTION:
            try:
                return Section(value)
            except ValueError as e:
                raise StateValidationError(
                    f"current_section deve ser uma seção válida: {value!r}"
                ) from e

        if key == POSTS:
            if not isinstance(value, list):
                raise StateValidationError("posts deve ser uma lista")
            if not all(isinstance(post, Post) for post in value):
                raise StateValidationError("posts deve conter apenas Post")
            _ensure_unique_ids(value)
            return value

        if value is not None and not isinstance(value, User):
            raise StateValidationError("user deve ser User ou None")
        return value

    def set_state(self, key: str, value: Any) -> None:
        """Substitui o valor e notifica listeners com (novo, antigo)."""
        value = self._coerce(key, value)
        old_value = self._state[key]
        self._state[key] = value

        self._listeners.notify(key, value, old_value)

        logger.debug(
            "Estado alterado",
            extra={"state_key": key, "summary": self._summarize(key, value)},
        )

    def get_state(self, key: str) -> Any:
        if key not in STATE_KEYS:
            raise KeyError(f"Chave de estado desconhecida: {key}")
        return self._state[key]

    @staticmethod
    def _summarize(key: str, value: Any) -> Any:
        # Logs sem conteúdo de post ou dados do usuário
        if key == POSTS:
            return len(value)
        if key == USER:
            return value.id if value else None
        return str(value)

    # Listeners

    def add_listener(self, key: str, callback: Listener) -> Subscription:
        """Registra callback(novo, antigo); retorna handle para remoção."""
        return self._listeners.add(key, callback)

    def remove_listener(self, key: str, callback: Listener) -> None:
        """Remove o primeiro registro de ``callback``; no-op se não existir."""
        self._listeners.remove(key, callback)

    def listener_count(self, key: str) -> int:
        return self._listeners.count(key)

    # Cache

    def set_cache(self, key: str, value: Any, ttl: float | None = None) -> None:
        self._cache.set(key, value, ttl)

    def get_cache(self, key: str) -> Any | None:
        return self._cache.get(key)

    def clear_cache(self, key: str | None = None) -> None:
        if key is None:
            self._cache.clear()
        else:
            self._cache.delete(key)

    # Conveniência

    @property
    def posts(self) -> list[Post]:
        return self._state[POSTS]

    @property
    def is_authenticated(self) -> bool:
        return self._state[IS_AUTHENTICATED]

    @property
    def user(self) -> User | None:
        return self._state[USER]

    @property
    def current_section(self) -> Section:
        return self._state[CURRENT_SECTION]

    def set_loading(self, is_loading: bool) -> None:
        self.set_state(IS_LOADING, is_loading)

    def set_authenticated(self, is_authenticated: bool, user: User | None = None) -> None:
        self.set_state(IS_AUTHENTICATED, is_authenticated)
        self.set_state(USER, user)

    def set_current_section(self, section: Section | str) -> None:
        self.set_state(CURRENT_SECTION, section)

    def set_posts(self, posts: list[Post]) -> None:
        """Publica a coleção (uma notificação) e renova o cache de posts."""
        self.set_state(POSTS, posts)
        self.set_cache(POSTS_CACHE_KEY, posts)

    def add_post(self, post: Post) -> None:
        """Insere no início (mais recente primeiro)."""
        self.set_posts([post, *self.posts])

    def remove_post(self, post_id: int | str) -> None:
        self.set_posts([post for post in self.posts if post.id != post_id])

    def update_post(self, post_id: int | str, changes: dict[str, Any]) -> None:
        """Mescla ``changes`` no post com o id informado."""
        self.set_posts(
            [
                post.model_copy(update=changes) if post.id == post_id else post
                for post in self.posts
            ]
        )

    def get_post_by_id(self, post_id: int | str) -> Post | None:
        return next((post for post in self.posts if post.id == post_id), None)

    def reset(self) -> None:
        """Volta aos valores iniciais e limpa o cache; listeners permanecem."""
        self._state = _initial_state()
        self.clear_cache()

    # Debug

    def serialize(self) -> dict[str, Any]:
        user = self.user
        return {
            "current_section": str(self.current_section),
            "is_authenticated": self.is_authenticated,
            "is_loading": self._state[IS_LOADING],
            "posts_count": len(self.posts),
            "user": {"email": user.email} if user else None,
        }

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not isinstance(self._state[IS_AUTHENTICATED], bool):
            errors.append("is_authenticated deve ser boolean")

        if not isinstance(self._state[POSTS], list):
            errors.append("posts deve ser uma lista")
        else:
            ids = [post.id for post in self._state[POSTS]]
            if len(ids) != len(set(ids)):
                errors.append("posts contém ids duplicados")

        if self._state[CURRENT_SECTION] not in set(Section):
            errors.append("current_section deve ser uma seção válida")

        return errors
