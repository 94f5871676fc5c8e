"""Testes para os backends de KeyValueStorage e a factory."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from zweihander.config.settings import Settings
from zweihander.domain.protocols.storage import StorageError
from zweihander.infra.storage import create_key_value_storage
from zweihander.infra.storage_file import JsonFileKeyValueStorage
from zweihander.infra.storage_memory import InMemoryKeyValueStorage
from zweihander.infra.storage_redis import RedisKeyValueStorage


class TestInMemoryKeyValueStorage:
    """Backend em memória."""

    def test_set_get_remove(self) -> None:
        storage = InMemoryKeyValueStorage()
        storage.set_item("sb-auth-token", "tok")
        assert storage.get_item("sb-auth-token") == "tok"

        storage.remove_item("sb-auth-token")
        assert storage.get_item("sb-auth-token") is None

    def test_remove_missing_is_noop(self) -> None:
        InMemoryKeyValueStorage().remove_item("nada")

    def test_initial_values(self) -> None:
        storage = InMemoryKeyValueStorage({"a": "1"})
        assert storage.get_item("a") == "1"


class TestJsonFileKeyValueStorage:
    """Backend em arquivo JSON."""

    def test_persists_between_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "dados" / "storage.json"
        JsonFileKeyValueStorage(path).set_item("blog-draft", '{"title": "T"}')

        assert JsonFileKeyValueStorage(path).get_item("blog-draft") == '{"title": "T"}'

    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        assert JsonFileKeyValueStorage(tmp_path / "x.json").get_item("k") is None

    def test_remove(self, tmp_path: Path) -> None:
        storage = JsonFileKeyValueStorage(tmp_path / "s.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")

        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_corrupt_file_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "s.json"
        path.write_text("{quebrado", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileKeyValueStorage(path).get_item("a")

    def test_non_object_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "s.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileKeyValueStorage(path).get_item("a")


class TestRedisKeyValueStorage:
    """Backend Redis com cliente mockado."""

    def test_set_uses_prefix(self) -> None:
        mock_redis = MagicMock()
        storage = RedisKeyValueStorage(mock_redis, key_prefix="zw:")

        storage.set_item("sb-auth-token", "tok")

        mock_redis.set.assert_called_once_with("zw:sb-auth-token", "tok")

    def test_get_decodes_bytes(self) -> None:
        mock_redis = MagicMock()
        mock_redis.get.return_value = b"tok"

        assert RedisKeyValueStorage(mock_redis).get_item("sb-auth-token") == "tok"
        mock_redis.get.assert_called_once_with("zweihander:sb-auth-token")

    def test_get_missing(self) -> None:
        mock_redis = MagicMock()
        mock_redis.get.return_value = None
        assert RedisKeyValueStorage(mock_redis).get_item("k") is None

    def test_remove(self) -> None:
        mock_redis = MagicMock()
        RedisKeyValueStorage(mock_redis).remove_item("k")
        mock_redis.delete.assert_called_once_with("zweihander:k")

    def test_backend_errors_wrapped(self) -> None:
        mock_redis = MagicMock()
        mock_redis.set.side_effect = ConnectionError("down")

        with pytest.raises(StorageError):
            RedisKeyValueStorage(mock_redis).set_item("k", "v")


class TestCreateKeyValueStorage:
    """Factory por backend."""

    def test_memory(self) -> None:
        storage = create_key_value_storage(Settings(_env_file=None, storage_backend="memory"))
        assert isinstance(storage, InMemoryKeyValueStorage)

    def test_file(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, storage_backend="file", storage_path=str(tmp_path / "s.json"))
        storage = create_key_value_storage(settings)
        assert isinstance(storage, JsonFileKeyValueStorage)
        assert storage.path == tmp_path / "s.json"

    def test_redis_requires_url(self) -> None:
        with pytest.raises(ValueError, match="REDIS_URL"):
            create_key_value_storage(Settings(_env_file=None, storage_backend="redis", redis_url=None))

    def test_redis_uses_from_url(self) -> None:
        settings = Settings(_env_file=None, storage_backend="redis", redis_url="redis://localhost:6379/0")
        mock_client = MagicMock()

        with patch("redis.from_url", return_value=mock_client) as from_url:
            storage = create_key_value_storage(settings)

        assert isinstance(storage, RedisKeyValueStorage)
        from_url.assert_called_once()
        mock_client.ping.assert_called_once()

    def test_redis_unreachable_raises_storage_error(self) -> None:
        import redis

        settings = Settings(_env_file=None, storage_backend="redis", redis_url="redis://localhost:1/0")
        mock_client = MagicMock()
        mock_client.ping.side_effect = redis.ConnectionError("recusado")

        with patch("redis.from_url", return_value=mock_client):
            with pytest.raises(StorageError):
                create_key_value_storage(settings)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError):
            create_key_value_storage(Settings(_env_file=None, storage_backend="sqlite"))
