"""Cliente HTTP centralizado com timeout e logging.

Este módulo fornece um cliente HTTP configurável para chamadas
externas (API de dados hospedada), com:
- Timeouts configuráveis
- Logging estruturado (sem tokens)
- Injeção de headers padrão

Não há retry: uma operação que falha deve ser disparada de novo pelo usuário.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from zweihander.observability.logging import get_logger

if TYPE_CHECKING:
    from zweihander.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    Valores padrão são seguros e conservadores.
    """

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP (status não-2xx ou falha de transporte)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _log_request_start(method: str, url: str) -> None:
    """Loga início de requisição sem dados sensíveis."""
    logger.debug(
        "Executando requisição HTTP",
        extra={"method": method, "url": url},
    )


def _log_request_success(method: str, url: str, status_code: int) -> None:
    """Loga sucesso de requisição."""
    logger.debug(
        "Requisição HTTP bem-sucedida",
        extra={
            "method": method,
            "url": url,
            "status_code": status_code,
        },
    )


def _log_status_error(method: str, url: str, status_code: int) -> None:
    """Loga resposta não-2xx."""
    logger.warning(
        "Requisição HTTP falhou",
        extra={
            "method": method,
            "url": url,
            "status_code": status_code,
        },
    )


def _log_transport_error(msg: str, method: str, url: str, error: str) -> None:
    """Loga erro de transporte (timeout, conexão)."""
    logger.warning(
        msg,
        extra={
            "method": method,
            "url": url,
            "error": error,
        },
    )


def _translate_transport_exception(exc: Exception, method: str, url: str) -> HttpError:
    """Converte exceções do httpx em HttpError com mensagem legível."""
    if isinstance(exc, httpx.TimeoutException):
        _log_transport_error("Timeout em requisição HTTP", method, url, str(exc))
        return HttpError("Timeout")

    if isinstance(exc, httpx.ConnectError):
        _log_transport_error("Erro de conexão HTTP", method, url, str(exc))
        return HttpError("Erro de conexão")

    if isinstance(exc, httpx.InvalidURL):
        _log_transport_error("URL inválida em requisição HTTP", method, url, str(exc))
        return HttpError("URL inválida")

    logger.error(
        "Erro inesperado em requisição HTTP",
        extra={"method": method, "url": url, "error_type": type(exc).__name__},
    )
    return HttpError(f"Erro inesperado: {type(exc).__name__}")


class HttpClient:
    """Cliente HTTP assíncrono com logging.

    Uso típico:
        async with HttpClient(config) as client:
            response = await client.post(url, json=payload)
    """

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        """Inicializa cliente com configuração."""
        self._config = config or HttpClientConfig()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Retorna cliente httpx (lazy loading)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers=self._config.default_headers,
                verify=self._config.verify_ssl,
            )
        return self._client

    async def close(self) -> None:
        """Fecha o cliente e libera recursos."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        """Suporte a async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Fecha cliente ao sair do context."""
        await self.close()

    async def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Executa uma única requisição.

        Args:
            method: Método HTTP (GET, POST, etc.)
            url: URL da requisição
            **kwargs: Argumentos passados para httpx

        Returns:
            Resposta HTTP 2xx

        Raises:
            HttpError: Status não-2xx, falha de transporte ou URL malformada
        """
        client = await self._get_client()
        _log_request_start(method, url)

        try:
            response = await client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise _translate_transport_exception(exc, method, url) from exc

        if response.is_success:
            _log_request_success(method, url, response.status_code)
            return response

        _log_status_error(method, url, response.status_code)
        body = response.text
        raise HttpError(
            f"HTTP {response.status_code}: {body}",
            status_code=response.status_code,
            body=body,
        )

    # Métodos de conveniência

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Executa GET."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, json: Any = None, **kwargs: Any) -> httpx.Response:
        """Executa POST."""
        return await self.request("POST", url, json=json, **kwargs)

    async def patch(self, url: str, json: Any = None, **kwargs: Any) -> httpx.Response:
        """Executa PATCH."""
        return await self.request("PATCH", url, json=json, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Executa DELETE."""
        return await self.request("DELETE", url, **kwargs)


def create_http_client_config(settings: Settings) -> HttpClientConfig:
    """Monta HttpClientConfig a partir das settings da aplicação."""
    config = HttpClientConfig(
        timeout_seconds=float(settings.http_timeout_seconds),
        default_headers={
            "User-Agent": f"{settings.service_name}/{settings.version}",
        },
        verify_ssl=True,
    )

    logger.info(
        "Configuração HTTP criada",
        extra={"timeout_seconds": config.timeout_seconds},
    )
    return config
