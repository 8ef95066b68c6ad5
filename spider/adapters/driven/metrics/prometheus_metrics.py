"""Prometheus histogram sink for spider observations."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Histogram, generate_latest
from prometheus_client.utils import INF

from spider.ports.metrics import MetricsPort, ObservationDto

__all__ = ["LATENCY_BUCKETS", "PrometheusMetrics", "exponential_buckets"]


def exponential_buckets(start: float, factor: float, count: int) -> tuple[float, ...]:
    """Build ``count`` upper bounds starting at ``start``, each ``factor`` times the last.

    Raises:
        ValueError: If the arguments cannot produce increasing buckets.
    """
    if count < 1:
        raise ValueError("count must be positive")
    if start <= 0:
        raise ValueError("start must be positive")
    if factor <= 1:
        raise ValueError("factor must be greater than 1")
    return tuple(start * factor**i for i in range(count)) + (INF,)


# 0.001 -> 32 seconds
LATENCY_BUCKETS = exponential_buckets(0.001, 2, 16)


class PrometheusMetrics(MetricsPort):
    """Latency histogram labelled by target name and outcome.

    Exposed as ``http_time`` with labels ``name`` and ``result``.
    prometheus_client guards every child with its own lock, so all
    spider loops may write concurrently.
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        """Register the histogram.

        Args:
            registry: Registry served by the metrics endpoint.
        """
        self.registry = registry
        self._histogram = Histogram(
            "time",
            "end-to-end time of requests",
            labelnames=("name", "result"),
            namespace="http",
            buckets=LATENCY_BUCKETS,
            registry=registry,
        )

    def observe(self, observation: ObservationDto) -> None:
        """Record the elapsed time under (target name, outcome).

        Args:
            observation: Observation emitted by a spider tick.
        """
        self._histogram.labels(observation.target_name, observation.outcome).observe(
            observation.elapsed_sec
        )

    def render(self) -> bytes:
        """Return the registry in Prometheus text exposition format."""
        return generate_latest(self.registry)
