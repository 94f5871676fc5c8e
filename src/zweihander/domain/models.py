"""Modelos de domínio (contratos principais)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from zweihander.domain.text import MAX_TITLE_LENGTH


class User(BaseModel):
    """Usuário autenticado (admin do blog)."""

    id: str
    email: str
    name: str | None = None


class AuthSession(BaseModel):
    """Sessão retornada pelo endpoint de token (grant_type=password)."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    user: User | None = None


class Post(BaseModel):
    """Post do blog.

    O excerpt é sempre derivável do content (ver domain.text.generate_excerpt).
    """

    id: int | str
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str
    excerpt: str = ""
    created_at: datetime
    updated_at: datetime | None = None


class Draft(BaseModel):
    """Rascunho local de post (não publicado)."""

    title: str = ""
    content: str = ""
    timestamp: int = Field(description="Epoch em milissegundos do último salvamento")

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.content)


class PasswordStrength(BaseModel):
    """Avaliação simples de força de senha."""

    score: int = 0
    feedback: list[str] = Field(default_factory=list)
