"""Estado da aplicação: store observável, listeners e cache com TTL."""

from zweihander.application.state.cache import CacheEntry, ExpiringCache
from zweihander.application.state.listeners import ListenerRegistry, Subscription
from zweihander.application.state.store import (
    CURRENT_SECTION,
    IS_AUTHENTICATED,
    IS_LOADING,
    POSTS,
    STATE_KEYS,
    USER,
    StateStore,
    StateValidationError,
)

__all__ = [
    "CURRENT_SECTION",
    "IS_AUTHENTICATED",
    "IS_LOADING",
    "POSTS",
    "STATE_KEYS",
    "USER",
    "CacheEntry",
    "ExpiringCache",
    "ListenerRegistry",
    "StateStore",
    "StateValidationError",
    "Subscription",
]
