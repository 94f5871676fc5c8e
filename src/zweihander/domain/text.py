"""Regras de texto puras: excerpt, validação de post e de credenciais."""

from __future__ import annotations

import re

ELLIPSIS = "..."
MAX_TITLE_LENGTH = 255
MIN_PASSWORD_LENGTH = 6

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def generate_excerpt(content: str, length: int) -> str:
    """Trunca o conteúdo no último espaço antes do corte e adiciona reticências.

    Se o conteúdo cabe em ``length`` é retornado intacto. Caso contrário,
    corta em ``length`` e recua até o último espaço (quando há um espaço
    após o primeiro caractere); sem espaço útil, mantém o corte seco.

    Exemplo:
        >>> generate_excerpt("a b c d e", 3)
        'a...'
    """
    if len(content) <= length:
        return content

    excerpt = content[:length]
    last_space = excerpt.rfind(" ")
    if last_space > 0:
        excerpt = excerpt[:last_space]
    return excerpt + ELLIPSIS


def truncate_content(content: str, max_length: int = 150) -> str:
    """Mesma regra do excerpt, usada nas prévias da lista administrativa."""
    return generate_excerpt(content, max_length)


def validate_post(title: str | None, content: str | None) -> list[str]:
    """Valida título e conteúdo; retorna lista de erros (vazia = OK)."""
    errors: list[str] = []

    if not isinstance(title, str) or not title.strip():
        errors.append("Título é obrigatório")

    if not isinstance(content, str) or not content.strip():
        errors.append("Conteúdo é obrigatório")

    if isinstance(title, str) and len(title.strip()) > MAX_TITLE_LENGTH:
        errors.append(f"Título muito longo (máximo {MAX_TITLE_LENGTH} caracteres)")

    return errors


def is_valid_email(email: str | None) -> bool:
    return bool(email) and _EMAIL_PATTERN.match(email) is not None


def is_valid_password(password: str | None) -> bool:
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def count_words(text: str) -> int:
    """Conta palavras separadas por espaço (mesma regra das estatísticas)."""
    return len(text.split(" "))
