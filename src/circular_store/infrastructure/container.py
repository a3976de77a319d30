"""Dependency injection container for circular lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import structlog
from opentelemetry import trace

from circular_store.infrastructure.config import Config, get_config
from circular_store.infrastructure.logging import setup_logging
from circular_store.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from circular_store.infrastructure.tracing import setup_tracing
from circular_store.ports.outbound.kv_store import KVStore

if TYPE_CHECKING:
    from circular_store.application import CircularList


@dataclass
class Container:
    """Dependency injection container for circular list components."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    store: KVStore

    _instance: ClassVar[Container | None] = None

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        # Imported here: adapters depend on infrastructure.
        from circular_store.adapters.outbound import build_store

        config = config or get_config()
        config.ensure_directories()
        obs = config.observability

        logger = setup_logging(
            obs.log_level,
            obs.log_format,
            storage_backend=config.storage.backend,
            storage_path=str(config.storage.path),
        )
        tracer = setup_tracing(obs.otel_service_name, obs.otel_endpoint)
        if config.metrics.enabled:
            metrics = setup_metrics(config.metrics.port)
        else:
            metrics = get_metrics()
        store = build_store(config.storage)

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            store=store,
        )

        logger.info(
            "circular_store_container_initialized",
            backend=config.storage.backend,
        )

        return cls._instance

    @classmethod
    def get(cls) -> Container:
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Close the store and drop the singleton (useful for testing)."""
        if cls._instance is not None:
            cls._instance.store.close()
        cls._instance = None

    def new_list(self, name: str) -> CircularList:
        """Create a fresh list in the configured store."""
        from circular_store.application import CircularList

        return CircularList.create(self.store, name, self.metrics)

    def open_list(self, name: str) -> CircularList:
        """Open (or initialise) a list in the configured store."""
        from circular_store.application import CircularList

        return CircularList.open(self.store, name, self.metrics)


def get_container() -> Container:
    """Get the dependency injection container."""
    return Container.get()
