"""Enums de domínio para seções da UI, slots de armazenamento e tipos de aviso."""

from __future__ import annotations

from enum import StrEnum


class Section(StrEnum):
    """Seções navegáveis da aplicação (conjunto fechado)."""

    HOME = "home"
    ABOUT = "about"
    LOGIN = "login"
    ADMIN = "admin"


class StorageSlot(StrEnum):
    """Chaves usadas no armazenamento chave-valor durável."""

    AUTH_TOKEN = "sb-auth-token"
    DRAFT = "blog-draft"
    REMEMBERED_USER = "blog-remember-user"


class NoticeKind(StrEnum):
    """Tipos de aviso inline exibidos perto dos formulários."""

    SUCCESS = "success"
    ERROR = "error"


class NoticeTarget(StrEnum):
    """Alvos conhecidos de avisos inline."""

    LOGIN = "login-message"
    POST = "post-message"


class ExportFormat(StrEnum):
    """Formatos de export suportados."""

    JSON = "json"
    CSV = "csv"


class RemoteOperation(StrEnum):
    """Chamadas à API de dados medidas em latência."""

    LOAD_POSTS = "load_posts"
    CREATE_POST = "create_post"
    UPDATE_POST = "update_post"
    DELETE_POST = "delete_post"
    SIGN_IN = "sign_in"
    VALIDATE_SESSION = "validate_session"


class CallOutcome(StrEnum):
    OK = "ok"
    ERROR = "error"
    EXCEPTION = "exception"
