"""AuthService: login/logout, sessão armazenada e revalidação periódica.

Sem API de dados configurada, aceita apenas as credenciais de demonstração
das settings. Operações públicas retornam ServiceResult.
"""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable
from typing import Any

from zweihander.adapters.data_api.capability import Configured, GatewayCapability, Unconfigured
from zweihander.application.notices import NoticeBoard
from zweihander.application.scheduling import ScheduledHandle, TaskScheduler
from zweihander.application.state.listeners import Subscription
from zweihander.application.state.store import IS_AUTHENTICATED, StateStore
from zweihander.domain.enums import NoticeKind, NoticeTarget, RemoteOperation, StorageSlot
from zweihander.domain.models import PasswordStrength, User
from zweihander.domain.protocols.storage import KeyValueStorage, StorageError
from zweihander.domain.results import ServiceResult
from zweihander.domain.text import MIN_PASSWORD_LENGTH, is_valid_email, is_valid_password
from zweihander.observability.context import correlation_scope
from zweihander.observability.logging import get_logger
from zweihander.observability.timing import timed

logger: logging.Logger = get_logger(__name__)

DEMO_USER_ID = "demo-user"
DEMO_USER_NAME = "Admin Demo"
STORED_USER = User(id="stored-user-id", email="stored-user")

SESSION_EXPIRED_MESSAGE = "Sessão expirada. Faça login novamente."
NOT_IMPLEMENTED_MESSAGE = "Funcionalidade não implementada"

PASSWORD_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%^&*"
IDEAL_PASSWORD_LENGTH = 12

_SPECIAL_CHARS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


class AuthService:
    """Autenticação do administrador sobre o gateway (ou modo demonstração)."""

    def __init__(
        self,
        state: StateStore,
        gateway: GatewayCapability,
        storage: KeyValueStorage,
        scheduler: TaskScheduler,
        notices: NoticeBoard | None = None,
        demo_email: str = "admin@zweihander.com",
        demo_password: str = "admin123",
        session_validation_interval_minutes: float = 30,
    ) -> None:
        self._state = state
        self._gateway = gateway
        self._storage = storage
        self._scheduler = scheduler
        self._notices = notices
        self._demo_email = demo_email
        self._demo_password = demo_password
        self._validation_interval_minutes = session_validation_interval_minutes
        self._validation_handle: ScheduledHandle | None = None
        self._auth_subscription: Subscription | None = None

    # Login / logout

    async def login(self, email: str, password: str) -> ServiceResult:
        with correlation_scope():
            if not email or not password:
                return ServiceResult.fail("Email e senha são obrigatórios")
            if not is_valid_email(email):
                return ServiceResult.fail("Email inválido")

            if isinstance(self._gateway, Configured):
                with timed(RemoteOperation.SIGN_IN) as call:
                    result = await self._gateway.gateway.sign_in(email, password)
                    if result.error:
                        call.fail(result.error)
                if result.error:
                    logger.warning("Erro no login", extra={"error": result.error})
                    return ServiceResult.fail(result.error)
                user = result.user
            elif email == self._demo_email and password == self._demo_password:
                user = User(id=DEMO_USER_ID, email=email, name=DEMO_USER_NAME)
            else:
                logger.warning("Erro no login", extra={"mode": "demo"})
                return ServiceResult.fail("Credenciais inválidas")

            self._state.set_authenticated(True, user)
            logger.info("Login realizado", extra={"user_id": user.id if user else None})
            return ServiceResult.ok(user)

    async def login_with_remember(self, email: str, password: str, remember: bool = False) -> ServiceResult:
        result = await self.login(email, password)
        if result.success and remember:
            try:
                self._storage.set_item(StorageSlot.REMEMBERED_USER, email)
            except StorageError as e:
                logger.warning("Não foi possível salvar 'lembrar de mim'", extra={"error": str(e)})
        return result

    def get_remembered_user(self) -> str | None:
        try:
            return self._storage.get_item(StorageSlot.REMEMBERED_USER)
        except StorageError as e:
            logger.warning("Erro ao obter usuário lembrado", extra={"error": str(e)})
            return None

    def clear_remembered_user(self) -> None:
        try:
            self._storage.remove_item(StorageSlot.REMEMBERED_USER)
        except StorageError as e:
            logger.warning("Erro ao limpar usuário lembrado", extra={"error": str(e)})

    async def logout(self) -> ServiceResult:
        """Encerra a sessão; o estado local é sempre limpo."""
        with correlation_scope():
            if isinstance(self._gateway, Configured) and self._gateway.gateway.is_authenticated:
                await self._gateway.gateway.sign_out()
            self._state.set_authenticated(False, None)
            logger.info("Logout realizado")
            return ServiceResult.ok()

    # Sessão armazenada

    async def check_stored_auth(self) -> ServiceResult:
        """Valida o token salvo com uma leitura mínima em ``posts``.

        ``data`` traz ``{"authenticated": bool}``.
        """
        if isinstance(self._gateway, Unconfigured):
            return ServiceResult.fail(self._gateway.reason)

        with correlation_scope():
            gateway = self._gateway.gateway
            if not gateway.is_authenticated:
                return ServiceResult.ok({"authenticated": False})

            with timed(RemoteOperation.VALIDATE_SESSION) as call:
                result = await gateway.from_("posts").select("id").limit(1).execute()
                if result.error:
                    call.fail(result.error)
            if result.error:
                logger.warning("Token inválido, fazendo logout", extra={"error": result.error})
                await self.logout()
                return ServiceResult.ok({"authenticated": False})

            self._state.set_authenticated(True, self._state.user or STORED_USER)
            logger.info("Autenticação restaurada do armazenamento")
            return ServiceResult.ok({"authenticated": True})

    async def refresh_token(self) -> ServiceResult:
        if not self.is_authenticated():
            return ServiceResult.fail("Usuário não autenticado")
        return await self.check_stored_auth()

    # Consultas

    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def get_current_user(self) -> User | None:
        return self._state.user

    @staticmethod
    def is_valid_email(email: str | None) -> bool:
        return is_valid_email(email)

    @staticmethod
    def is_valid_password(password: str | None) -> bool:
        return is_valid_password(password)

    @staticmethod
    def check_password_strength(password: str | None) -> PasswordStrength:
        """Pontua de 0 a 5: tamanho mínimo, dígito, maiúscula, especial, tamanho ideal."""
        strength = PasswordStrength()
        if not password:
            strength.feedback.append("Senha é obrigatória")
            return strength

        checks = (
            (len(password) >= MIN_PASSWORD_LENGTH, "Senha deve ter pelo menos 6 caracteres"),
            (any(c.isdigit() for c in password), "Adicione números para mais segurança"),
            (re.search(r"[A-Z]", password) is not None, "Adicione letras maiúsculas"),
            (_SPECIAL_CHARS.search(password) is not None, "Adicione caracteres especiais"),
        )
        for passed, feedback in checks:
            if passed:
                strength.score += 1
            else:
                strength.feedback.append(feedback)

        if len(password) >= IDEAL_PASSWORD_LENGTH:
            strength.score += 1
        return strength

    @staticmethod
    def generate_random_password(length: int = IDEAL_PASSWORD_LENGTH) -> str:
        return "".join(secrets.choice(PASSWORD_CHARSET) for _ in range(length))

    def on_auth_change(self, callback: Callable[[Any, Any], None]) -> Subscription:
        """Listener de ``is_authenticated``: callback(novo, antigo)."""
        return self._state.add_listener(IS_AUTHENTICATED, callback)

    def off_auth_change(self, callback: Callable[[Any, Any], None]) -> None:
        self._state.remove_listener(IS_AUTHENTICATED, callback)

    # Revalidação periódica

    def start_session_validation(self, interval_minutes: float | None = None) -> ScheduledHandle:
        """(Re)inicia a revalidação; substitui o timer anterior."""
        self.stop_session_validation()
        minutes = self._validation_interval_minutes if interval_minutes is None else interval_minutes
        self._validation_handle = self._scheduler.call_every(
            minutes * 60, self._validate_session, name="session-validation"
        )
        logger.debug("Validação de sessão iniciada", extra={"interval_minutes": minutes})
        return self._validation_handle

    def stop_session_validation(self) -> None:
        if self._validation_handle:
            self._validation_handle.cancel()
            self._validation_handle = None

    @property
    def session_validation_active(self) -> bool:
        return self._validation_handle is not None and not self._validation_handle.cancelled

    async def _validate_session(self) -> None:
        # Sessões de demonstração não têm token a validar.
        if not self.is_authenticated() or isinstance(self._gateway, Unconfigured):
            return

        result = await self.check_stored_auth()
        if result.data and result.data.get("authenticated"):
            return

        logger.info("Sessão inválida, fazendo logout automático")
        await self.logout()
        if self._notices:
            self._notices.show(NoticeTarget.LOGIN, SESSION_EXPIRED_MESSAGE, NoticeKind.ERROR)

    def _handle_auth_change(self, is_authenticated: bool, _old: bool) -> None:
        if is_authenticated:
            if not self.session_validation_active:
                self.start_session_validation()
        else:
            self.stop_session_validation()

    # Ciclo de vida

    async def init(self) -> None:
        """Restaura sessão salva e liga a revalidação às mudanças de auth."""
        if isinstance(self._gateway, Configured):
            await self.check_stored_auth()

        if self._auth_subscription is None:
            self._auth_subscription = self.on_auth_change(self._handle_auth_change)
        if self.is_authenticated() and not self.session_validation_active:
            self.start_session_validation()
        logger.info("AuthService inicializado", extra={"authenticated": self.is_authenticated()})

    def destroy(self) -> None:
        if self._auth_subscription:
            self._auth_subscription.dispose()
            self._auth_subscription = None
        self.clear_all_auth_data()

    def clear_all_auth_data(self) -> None:
        """Remove token e usuário lembrado, zera o estado e para a revalidação."""
        if isinstance(self._gateway, Configured):
            self._gateway.gateway.clear_token()
        else:
            try:
                self._storage.remove_item(StorageSlot.AUTH_TOKEN)
            except StorageError as e:
                logger.warning("Erro ao limpar token", extra={"error": str(e)})
        self.clear_remembered_user()
        self._state.set_authenticated(False, None)
        self.stop_session_validation()
        logger.info("Dados de autenticação limpos")

    def get_auth_info(self) -> dict[str, Any]:
        configured = isinstance(self._gateway, Configured)
        user = self.get_current_user()
        return {
            "is_authenticated": self.is_authenticated(),
            "user": user.model_dump() if user else None,
            "has_gateway": configured,
            "has_stored_token": configured and self._gateway.gateway.is_authenticated,
            "remembered_user": self.get_remembered_user(),
            "session_validation_active": self.session_validation_active,
        }

    # Senha

    async def change_password(self, current_password: str, new_password: str) -> ServiceResult:
        if not self.is_authenticated():
            return ServiceResult.fail("Usuário não autenticado")
        if not is_valid_password(new_password):
            return ServiceResult.fail("Nova senha deve ter pelo menos 6 caracteres")
        if isinstance(self._gateway, Configured):
            return ServiceResult.fail(NOT_IMPLEMENTED_MESSAGE)
        return ServiceResult.fail(self._gateway.reason)

    async def reset_password(self, email: str) -> ServiceResult:
        if not is_valid_email(email):
            return ServiceResult.fail("Email inválido")
        if isinstance(self._gateway, Configured):
            return ServiceResult.fail(NOT_IMPLEMENTED_MESSAGE)
        return ServiceResult.fail(self._gateway.reason)
