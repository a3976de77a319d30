"""Prometheus metrics for circular lists."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all circular list metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "circular_operations_total",
            "Total number of list operations",
            ["operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "circular_operation_latency_seconds",
            "List operation latency in seconds (one storage transaction each)",
            ["operation"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0),
            registry=self._registry,
        )

        # List state metrics
        self.items = Gauge(
            "circular_items",
            "Live item count observed by the last operation",
            ["namespace"],
            registry=self._registry,
        )

        self.pointer_resets_total = Counter(
            "circular_pointer_resets_total",
            "Stale current pointers normalised to index 0",
            ["namespace"],
            registry=self._registry,
        )

        self.duplicates_rejected_total = Counter(
            "circular_duplicates_rejected_total",
            "add_nx calls that found an equal payload",
            ["namespace"],
            registry=self._registry,
        )

        self.info = Info(
            "circular_store",
            "Circular store information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry these metrics are registered in."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Reuses the global registry when it is already registered in the same
    collector registry, so lists created earlier keep reporting.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    target = registry or REGISTRY
    if _metrics is None or _metrics.registry is not target:
        _metrics = MetricsRegistry(target)

    from circular_store import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=target)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
