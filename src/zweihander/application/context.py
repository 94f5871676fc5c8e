"""Composição da aplicação: estado, gateway, timers e serviços.

Responsabilidades:
- Conhecer infra e settings
- Construir cada peça uma única vez e injetá-la nos serviços
- Encerrar timers e o cliente HTTP no teardown

Não contém lógica de negócio.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from zweihander.adapters.data_api.capability import Configured, GatewayCapability, create_gateway
from zweihander.application.auth import AuthService
from zweihander.application.drafts import DraftAutoSaver, DraftStore
from zweihander.application.export import PostTransferService
from zweihander.application.notices import NoticeBoard
from zweihander.application.posts import PostService
from zweihander.application.scheduling import TaskScheduler
from zweihander.application.state.store import StateStore
from zweihander.config.settings import Settings, get_settings
from zweihander.domain.protocols.storage import KeyValueStorage
from zweihander.infra.storage import create_key_value_storage
from zweihander.observability.logging import configure_logging, get_logger

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class AppContext:
    settings: Settings
    storage: KeyValueStorage
    gateway: GatewayCapability
    state: StateStore
    scheduler: TaskScheduler
    notices: NoticeBoard
    drafts: DraftStore
    autosaver: DraftAutoSaver
    posts: PostService
    auth: AuthService
    transfer: PostTransferService

    async def aclose(self) -> None:
        """Cancela timers pendentes e fecha o cliente HTTP."""
        self.autosaver.cancel()
        self.notices.cancel_pending()
        self.auth.stop_session_validation()
        self.scheduler.cancel_all()
        if isinstance(self.gateway, Configured):
            await self.gateway.gateway.close()
        logger.info("AppContext encerrado")


def create_app_context(
    settings: Settings | None = None,
    storage: KeyValueStorage | None = None,
) -> AppContext:
    """Constrói o AppContext.

    Parâmetros explícitos têm prioridade; na ausência, resolve via
    ``get_settings()`` e ``create_key_value_storage(settings)``. Configura o
    logging antes de montar as peças.

    Raises:
        ValueError: Settings com erros de armazenamento ou limites do blog
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name, settings.log_format)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_storage_config())
    validation_errors.extend(settings.validate_blog_config())
    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    storage = storage if storage is not None else create_key_value_storage(settings)

    gateway = create_gateway(settings, storage)
    state = StateStore(cache_ttl=settings.cache_ttl_seconds)
    scheduler = TaskScheduler()
    notices = NoticeBoard(scheduler, timeout_seconds=settings.message_timeout_seconds)
    drafts = DraftStore(storage, max_age_hours=settings.draft_max_age_hours)
    posts = PostService(
        state,
        gateway,
        excerpt_length=settings.excerpt_length,
        preview_length=settings.admin_preview_length,
        posts_per_page=settings.posts_per_page,
    )
    auth = AuthService(
        state,
        gateway,
        storage,
        scheduler,
        notices=notices,
        demo_email=settings.demo_auth_email,
        demo_password=settings.demo_auth_password,
        session_validation_interval_minutes=settings.session_validation_interval_minutes,
    )

    context = AppContext(
        settings=settings,
        storage=storage,
        gateway=gateway,
        state=state,
        scheduler=scheduler,
        notices=notices,
        drafts=drafts,
        autosaver=DraftAutoSaver(drafts, scheduler, delay_seconds=settings.draft_autosave_delay_seconds),
        posts=posts,
        auth=auth,
        transfer=PostTransferService(state, posts),
    )
    logger.info(
        "AppContext criado",
        extra={"remote": isinstance(gateway, Configured), "storage_backend": settings.storage_backend},
    )
    return context
