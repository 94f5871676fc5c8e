"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou arquivo .env).
Nunca hardcode a chave da API de dados no código.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from zweihander.observability.logging import get_logger

# -----------------------------------------------------------------------------
# Constantes da API de dados hospedada (REST + Auth)
# -----------------------------------------------------------------------------
REST_API_PATH: str = "/rest/v1"
AUTH_API_PATH: str = "/auth/v1"
PLACEHOLDER_URL: str = "YOUR_SUPABASE_URL"
PLACEHOLDER_ANON_KEY: str = "YOUR_SUPABASE_ANON_KEY"


class Settings(BaseSettings):
    """Configurações lidas do ambiente (ou de .env).

    Sem ``supabase_url``/``supabase_anon_key`` válidos o blog roda em modo
    demonstração: posts fixos e login apenas com as credenciais demo.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )

    # Aplicação
    service_name: str = "zweihander"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # API de dados hospedada
    supabase_url: str = PLACEHOLDER_URL
    supabase_anon_key: str = PLACEHOLDER_ANON_KEY
    http_timeout_seconds: float = 30.0

    # Blog
    blog_title: str = "Zweihander"
    blog_author: str = "Admin"
    posts_per_page: int = 10  # Tamanho fixo de página
    excerpt_length: int = 200
    admin_preview_length: int = 150

    # Login de demonstração (usado apenas sem API configurada)
    demo_auth_email: str = "admin@zweihander.com"
    demo_auth_password: str = "admin123"

    # Estado / cache
    cache_ttl_seconds: float = 300.0  # 5 minutos

    # UI (timers)
    message_timeout_seconds: float = 5.0
    session_validation_interval_minutes: float = 30.0
    draft_autosave_delay_seconds: float = 1.0
    draft_max_age_hours: float = 24.0

    # Armazenamento chave-valor durável
    storage_backend: str = "memory"  # memory | file | redis
    storage_path: str = ".zweihander/storage.json"  # Para storage_backend=file
    redis_url: str | None = None  # Para storage_backend=redis
    redis_key_prefix: str = "zweihander:"

    @property
    def rest_endpoint(self) -> str:
        """Retorna a URL base dos recursos REST."""
        return f"{self.supabase_url.rstrip('/')}{REST_API_PATH}"

    @property
    def auth_endpoint(self) -> str:
        """Retorna a URL base da API de autenticação."""
        return f"{self.supabase_url.rstrip('/')}{AUTH_API_PATH}"

    @property
    def is_remote_configured(self) -> bool:
        """True se URL e chave foram preenchidas (não são placeholders)."""
        url = (self.supabase_url or "").strip()
        key = (self.supabase_anon_key or "").strip()
        return bool(url and key) and url != PLACEHOLDER_URL and key != PLACEHOLDER_ANON_KEY

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def validate_storage_config(self) -> list[str]:
        """Valida backend de armazenamento durável.

        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        backend = self.storage_backend.lower()
        valid_backends = {"memory", "file", "redis"}

        if backend not in valid_backends:
            errors.append(
                f"STORAGE_BACKEND '{backend}' inválido. Valores válidos: {valid_backends}"
            )
        if backend == "file" and not self.storage_path:
            errors.append("STORAGE_BACKEND=file requer STORAGE_PATH configurado")
        if backend == "redis" and not self.redis_url:
            errors.append("STORAGE_BACKEND=redis requer REDIS_URL configurado")
        if backend == "memory" and self.is_production:
            errors.append(
                "STORAGE_BACKEND=memory é proibido em produção (token e rascunho se perdem)."
            )
        return errors

    def validate_blog_config(self) -> list[str]:
        """Valida limites do blog."""
        errors: list[str] = []
        if self.posts_per_page <= 0:
            errors.append("POSTS_PER_PAGE deve ser > 0")
        if self.excerpt_length <= 0:
            errors.append("EXCERPT_LENGTH deve ser > 0")
        if self.cache_ttl_seconds < 0:
            errors.append("CACHE_TTL_SECONDS não pode ser negativo")
        return errors

    def model_post_init(self, __context: Any) -> None:
        """Registra o modo de operação escolhido (sem expor a chave)."""
        logger: logging.Logger = get_logger(__name__)
        if self.is_remote_configured:
            logger.info(
                "API de dados configurada",
                extra={"environment": self.environment, "storage_backend": self.storage_backend},
            )
        else:
            logger.info(
                "API de dados não configurada; usando modo demonstração",
                extra={"environment": self.environment},
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
