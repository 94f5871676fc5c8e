"""Gateway da API de dados hospedada (recursos REST + autenticação por senha).

Estende HttpClient genérico com comportamentos específicos da API:
- Headers ``apikey`` e ``Authorization: Bearer`` em toda requisição
- Token de sessão substitui a chave no Authorization até o logout
- Persistência best-effort do token no armazenamento durável
- Parsing de JSON apenas quando o content-type é JSON

Logging estruturado nunca inclui senha, chave ou token.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from zweihander.adapters.data_api.models import SignInResult
from zweihander.adapters.data_api.query import QueryBuilder
from zweihander.config.settings import AUTH_API_PATH, REST_API_PATH
from zweihander.domain.enums import StorageSlot
from zweihander.domain.models import AuthSession, User
from zweihander.domain.protocols.storage import KeyValueStorage, StorageError
from zweihander.infra.http import (
    HttpClient,
    HttpClientConfig,
    HttpError,
    create_http_client_config,
)
from zweihander.observability.logging import get_logger

if TYPE_CHECKING:
    from zweihander.config.settings import Settings

logger: logging.Logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Credenciais inválidas"


def _parse_auth_error(body: str | None) -> str:
    """Extrai mensagem de erro do corpo retornado pela API de auth."""
    if not body:
        return INVALID_CREDENTIALS_MESSAGE
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return INVALID_CREDENTIALS_MESSAGE
    if not isinstance(data, dict):
        return INVALID_CREDENTIALS_MESSAGE
    for field_name in ("error_description", "msg", "message"):
        message = data.get(field_name)
        if isinstance(message, str) and message:
            return message
    return INVALID_CREDENTIALS_MESSAGE


def _parse_user(raw: Any) -> User | None:
    """Converte o objeto ``user`` da API de auth no modelo de domínio."""
    if not isinstance(raw, dict) or "id" not in raw:
        return None
    metadata = raw.get("user_metadata") or {}
    return User(
        id=str(raw["id"]),
        email=raw.get("email") or "",
        name=metadata.get("name") or metadata.get("full_name"),
    )


def _parse_payload(response: httpx.Response) -> Any:
    """JSON se o content-type for JSON; None nos demais casos."""
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type or not response.content:
        return None
    try:
        return response.json()
    except json.JSONDecodeError as e:
        logger.error("Response JSON inválido", extra={"status_code": response.status_code})
        raise HttpError("Response JSON inválido", status_code=response.status_code) from e


class DataGateway(HttpClient):
    """Cliente da API de dados com gerenciamento do bearer token.

    Uso típico:
        gateway = DataGateway(base_url, api_key, storage)
        result = await gateway.sign_in(email, password)
        posts = await gateway.from_("posts").select("*").execute()
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        storage: KeyValueStorage,
        config: HttpClientConfig | None = None,
    ) -> None:
        """Inicializa gateway e restaura token salvo (se houver).

        Args:
            base_url: URL base do projeto (sem /rest/v1)
            api_key: Chave anônima da API
            storage: Armazenamento durável do token
            config: Configuração HTTP base
        """
        super().__init__(config)
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._storage = storage
        self._auth_token: str | None = self._get_stored_token()

    # Gerenciamento de token

    def _get_stored_token(self) -> str | None:
        try:
            return self._storage.get_item(StorageSlot.AUTH_TOKEN)
        except StorageError as e:
            logger.warning("Armazenamento indisponível", extra={"error": str(e)})
            return None

    def _set_stored_token(self, token: str | None) -> None:
        try:
            if token:
                self._storage.set_item(StorageSlot.AUTH_TOKEN, token)
            else:
                self._storage.remove_item(StorageSlot.AUTH_TOKEN)
        except StorageError as e:
            logger.warning("Erro ao armazenar token", extra={"error": str(e)})

    def clear_token(self) -> None:
        """Descarta o token local sem chamar o servidor."""
        self._auth_token = None
        self._set_stored_token(None)

    @property
    def is_authenticated(self) -> bool:
        """True enquanto houver token de sessão."""
        return bool(self._auth_token)

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        """Headers padrão; o token de sessão substitui a chave no Authorization."""
        headers = {
            "Content-Type": "application/json",
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }
        if extra:
            headers.update(extra)
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    # Recursos REST

    def resource_url(self, table: str) -> str:
        return f"{self._base_url}{REST_API_PATH}/{table}"

    async def request_resource(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Executa requisição sobre um recurso e retorna o payload decodificado.

        Raises:
            HttpError: Status não-2xx, falha de transporte ou JSON inválido
        """
        kwargs: dict[str, Any] = {"headers": self.build_headers(headers)}
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json

        try:
            response = await self.request(method, self.resource_url(table), **kwargs)
        except HttpError as e:
            logger.error(
                "Erro na requisição",
                extra={"method": method, "table": table, "status_code": e.status_code},
            )
            raise
        return _parse_payload(response)

    def from_(self, table: str) -> QueryBuilder:
        """Inicia uma query sobre ``table``."""
        return QueryBuilder(self, table)

    # Autenticação

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Login por senha; nunca levanta exceção."""
        url = f"{self._base_url}{AUTH_API_PATH}/token"
        try:
            response = await self.request(
                "POST",
                url,
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers={"Content-Type": "application/json", "apikey": self._api_key},
            )
            data = response.json()
            user = _parse_user(data.get("user"))
            session = AuthSession.model_validate({**data, "user": user})
        except HttpError as e:
            message = (
                _parse_auth_error(e.body) if e.status_code is not None else str(e)
            )
            logger.warning("Falha no login", extra={"status_code": e.status_code})
            return SignInResult(error=message)
        except (ValueError, ValidationError, AttributeError) as e:
            # ValueError cobre JSONDecodeError
            logger.error("Resposta de autenticação inválida", extra={"error_type": type(e).__name__})
            return SignInResult(error="Resposta de autenticação inválida")

        self._auth_token = session.access_token
        self._set_stored_token(self._auth_token)
        logger.info("Login remoto realizado", extra={"user_id": user.id if user else None})
        return SignInResult(user=user, session=session)

    async def sign_out(self) -> None:
        """Logout best-effort; sempre limpa o token local ao final."""
        try:
            if self._auth_token:
                await self.request(
                    "POST",
                    f"{self._base_url}{AUTH_API_PATH}/logout",
                    headers={
                        "Content-Type": "application/json",
                        "apikey": self._api_key,
                        "Authorization": f"Bearer {self._auth_token}",
                    },
                )
        except HttpError as e:
            logger.warning("Erro ao fazer logout no servidor", extra={"error": str(e)})
        finally:
            self.clear_token()


def create_data_gateway(settings: Settings, storage: KeyValueStorage) -> DataGateway:
    """Factory para criar gateway configurado.

    Args:
        settings: Configurações da aplicação (URL e chave já validadas)
        storage: Armazenamento durável do token

    Returns:
        DataGateway pronto para uso
    """
    gateway = DataGateway(
        base_url=settings.supabase_url,
        api_key=settings.supabase_anon_key,
        storage=storage,
        config=create_http_client_config(settings),
    )
    logger.info(
        "Gateway de dados criado",
        extra={"has_stored_token": gateway.is_authenticated},
    )
    return gateway
