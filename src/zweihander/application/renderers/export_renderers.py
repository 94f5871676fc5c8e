"""Renderizadores de Export: Posts para JSON/CSV.

Responsabilidades:
- Serializar posts em JSON legível (indentado)
- Renderizar CSV com título e conteúdo entre aspas
- Montar o documento de backup versionado
- Nomear arquivos pela data de geração

Funções puras: nenhuma dependência de estado ou I/O.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from zweihander.domain.models import Post

CSV_HEADER = "ID,Título,Conteúdo,Data de Criação"
BACKUP_VERSION = "1.0"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def posts_to_dicts(posts: Iterable[Post]) -> list[dict[str, Any]]:
    return [post.model_dump(mode="json") for post in posts]


def render_json(posts: Iterable[Post]) -> str:
    """Lista de posts em JSON indentado (acentos preservados)."""
    return json.dumps(posts_to_dicts(posts), indent=2, ensure_ascii=False)


def render_csv(posts: Iterable[Post]) -> str:
    """CSV com cabeçalho; título e conteúdo sempre entre aspas.

    Args:
        posts: Posts a exportar (na ordem da coleção)

    Returns:
        Texto CSV (linhas separadas por ``\\n``)
    """
    lines = [CSV_HEADER]
    for post in posts:
        lines.append(
            f"{post.id},{_quote(post.title)},{_quote(post.content)},{post.created_at.isoformat()}"
        )
    return "\n".join(lines)


def render_backup(posts: Iterable[Post], generated_at: datetime) -> str:
    backup = {
        "posts": posts_to_dicts(posts),
        "timestamp": generated_at.isoformat(),
        "version": BACKUP_VERSION,
    }
    return json.dumps(backup, indent=2, ensure_ascii=False)


def build_filename(prefix: str, generated_at: datetime, extension: str) -> str:
    """Ex.: ``blog-posts-2025-01-03.json``."""
    return f"{prefix}-{generated_at.date().isoformat()}.{extension}"
