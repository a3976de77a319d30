"""Unit tests for configuration module."""

from __future__ import annotations

from pathlib import Path

import pytest

from circular_store.adapters.outbound import MemoryStore, SQLiteStore, build_store
from circular_store.infrastructure.config import Config, StorageConfig, get_config


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.storage.backend == "sqlite"
        assert config.storage.synchronous == "FULL"
        assert config.storage.busy_timeout_seconds == 5.0
        assert config.metrics.enabled is False
        assert config.observability.log_format == "json"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings are read from prefixed environment variables."""
        monkeypatch.setenv("CIRCULAR_STORE_STORAGE__BACKEND", "memory")
        monkeypatch.setenv("CIRCULAR_STORE_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.storage.backend == "memory"
        assert config.observability.log_level == "DEBUG"

    def test_ensure_directories(self, temp_dir: Path) -> None:
        """Test that ensure_directories creates the database directory."""
        config = Config(storage=StorageConfig(path=temp_dir / "a" / "b" / "lists.db"))

        config.ensure_directories()

        assert (temp_dir / "a" / "b").is_dir()

    def test_invalid_backend(self) -> None:
        """Test that an unknown backend raises validation error."""
        with pytest.raises(ValueError):
            StorageConfig(backend="redis")  # type: ignore[arg-type]

    def test_invalid_busy_timeout(self) -> None:
        with pytest.raises(ValueError):
            StorageConfig(busy_timeout_seconds=-1)


@pytest.mark.unit
class TestBuildStore:
    """Tests for store selection."""

    def test_memory_backend(self) -> None:
        store = build_store(StorageConfig(backend="memory"))
        assert isinstance(store, MemoryStore)

    def test_sqlite_backend(self, test_config: Config) -> None:
        store = build_store(test_config.storage)
        try:
            assert isinstance(store, SQLiteStore)
            assert store.path == test_config.storage.path
        finally:
            store.close()


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_config returns the same instance."""
        # Memory backend keeps get_config from creating ./data
        monkeypatch.setenv("CIRCULAR_STORE_STORAGE__BACKEND", "memory")
        get_config.cache_clear()
        try:
            config1 = get_config()
            config2 = get_config()
            assert config1 is config2
            assert config1.storage.backend == "memory"
        finally:
            get_config.cache_clear()
