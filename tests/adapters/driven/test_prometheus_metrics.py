"""Tests for the Prometheus latency histogram sink."""

import math
from concurrent.futures import ThreadPoolExecutor

import pytest
from prometheus_client import CollectorRegistry

from spider.adapters.driven.metrics.prometheus_metrics import (
    LATENCY_BUCKETS,
    PrometheusMetrics,
    exponential_buckets,
)
from spider.ports.metrics import ObservationDto

__all__ = []


def count_of(registry: CollectorRegistry, name: str, result: str) -> float | None:
    return registry.get_sample_value("http_time_count", {"name": name, "result": result})


def test_metrics_records_observation() -> None:
    """Observations should land in the (name, result) series."""
    registry = CollectorRegistry()
    metrics = PrometheusMetrics(registry)

    metrics.observe(ObservationDto(target_name="api", outcome="ok", elapsed_sec=0.25))

    assert count_of(registry, "api", "ok") == 1
    assert registry.get_sample_value("http_time_sum", {"name": "api", "result": "ok"}) == 0.25
    assert count_of(registry, "api", "error") is None


def test_metrics_separates_outcomes_and_targets() -> None:
    """Each target and outcome should get its own series."""
    registry = CollectorRegistry()
    metrics = PrometheusMetrics(registry)

    metrics.observe(ObservationDto("api", "ok", 0.1))
    metrics.observe(ObservationDto("api", "error", 0.2))
    metrics.observe(ObservationDto("web", "ok", 0.3))
    metrics.observe(ObservationDto("api", "ok", 0.4))

    assert count_of(registry, "api", "ok") == 2
    assert count_of(registry, "api", "error") == 1
    assert count_of(registry, "web", "ok") == 1


def test_metrics_bucket_layout() -> None:
    """Buckets should span 1ms to ~32s exponentially."""
    assert LATENCY_BUCKETS[0] == 0.001
    assert LATENCY_BUCKETS[-2] == pytest.approx(32.768)
    assert math.isinf(LATENCY_BUCKETS[-1])
    assert len(LATENCY_BUCKETS) == 17

    registry = CollectorRegistry()
    metrics = PrometheusMetrics(registry)
    metrics.observe(ObservationDto("api", "ok", 0.003))

    labels = {"name": "api", "result": "ok"}
    assert registry.get_sample_value("http_time_bucket", {**labels, "le": "0.002"}) == 0
    assert registry.get_sample_value("http_time_bucket", {**labels, "le": "0.004"}) == 1


@pytest.mark.parametrize(
    ("start", "factor", "count"),
    [(0, 2, 3), (1, 1, 3), (1, 2, 0)],
)
def test_exponential_buckets_rejects_invalid_arguments(
    start: float, factor: float, count: int
) -> None:
    """Invalid layouts should be rejected."""
    with pytest.raises(ValueError):
        exponential_buckets(start, factor, count)


def test_metrics_render_exposition_text() -> None:
    """render() should produce the text exposition format."""
    metrics = PrometheusMetrics(CollectorRegistry())
    metrics.observe(ObservationDto("api", "ok", 0.01))

    text = metrics.render().decode()

    assert "# HELP http_time end-to-end time of requests" in text
    assert 'http_time_count{name="api",result="ok"} 1.0' in text


def test_metrics_concurrent_writes_are_not_lost() -> None:
    """Concurrent writers should never lose an observation."""
    registry = CollectorRegistry()
    metrics = PrometheusMetrics(registry)
    writers = 16
    per_writer = 500

    def write(idx: int) -> None:
        name = f"target-{idx % 4}"
        for i in range(per_writer):
            outcome = "ok" if i % 3 else "error"
            metrics.observe(ObservationDto(name, outcome, 0.001 * (i % 50)))

    with ThreadPoolExecutor(max_workers=writers) as pool:
        list(pool.map(write, range(writers)))

    total = sum(
        count_of(registry, f"target-{n}", outcome) or 0
        for n in range(4)
        for outcome in ("ok", "error")
    )
    assert total == writers * per_writer
