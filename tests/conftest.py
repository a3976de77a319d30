"""Pytest configuration and fixtures for circular_store tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from circular_store.adapters.outbound import MemoryStore, SQLiteStore
from circular_store.infrastructure.config import Config, StorageConfig
from circular_store.infrastructure.container import Container
from circular_store.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration pointing at a temporary database."""
    return Config(
        storage=StorageConfig(
            backend="sqlite",
            path=temp_dir / "data" / "lists.db",
            busy_timeout_seconds=10.0,
            synchronous="OFF",  # Faster for tests
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def memory_store() -> Generator[MemoryStore, None, None]:
    """Provide an empty in-memory store."""
    store = MemoryStore()
    yield store
    store.close()


@pytest.fixture
def sqlite_store(temp_dir: Path) -> Generator[SQLiteStore, None, None]:
    """Provide a SQLite store in a temporary directory."""
    store = SQLiteStore(temp_dir / "lists.db", synchronous="OFF")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, temp_dir: Path) -> Generator:
    """Provide each store implementation in turn."""
    if request.param == "memory":
        s = MemoryStore()
    else:
        s = SQLiteStore(temp_dir / "param.db", synchronous="OFF")
    yield s
    s.close()


@pytest.fixture
def container(test_config: Config) -> Generator[Container, None, None]:
    """Provide a fresh DI container for each test."""
    Container.reset()
    c = Container.create(test_config)
    yield c
    Container.reset()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
