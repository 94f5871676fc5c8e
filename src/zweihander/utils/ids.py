"""Geradores de identificadores."""

from __future__ import annotations

import uuid


def new_correlation_id() -> str:
    """Gera um correlation_id único."""

    return str(uuid.uuid4())


def new_post_id() -> str:
    """Gera id local para posts criados sem API remota."""

    return f"local-{uuid.uuid4().hex[:12]}"
