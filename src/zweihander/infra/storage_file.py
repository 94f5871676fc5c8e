"""Implementação de KeyValueStorage em arquivo JSON local.

Equivalente ao localStorage do navegador para uso em desktop/CLI: um único
arquivo JSON com um objeto plano de chaves string para valores string.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from zweihander.domain.protocols.storage import KeyValueStorage, StorageError
from zweihander.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class JsonFileKeyValueStorage(KeyValueStorage):
    """Persiste pares chave-valor em um arquivo JSON."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error(
                "Failed to read storage file",
                extra={"path": str(self._path), "error_type": type(e).__name__},
            )
            raise StorageError(f"Falha ao ler armazenamento: {e}") from e

        if not isinstance(data, dict):
            raise StorageError("Arquivo de armazenamento inválido (esperado objeto JSON)")
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(
                "Failed to write storage file",
                extra={"path": str(self._path), "error_type": type(e).__name__},
            )
            raise StorageError(f"Falha ao gravar armazenamento: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)
        logger.debug("Item saved (file)", extra={"key": key})

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)
            logger.debug("Item removed (file)", extra={"key": key})
