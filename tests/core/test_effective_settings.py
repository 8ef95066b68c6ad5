"""Tests for target → global → default settings resolution."""

import pytest

from spider.core.effective_settings import (
    DEFAULT_INTERVAL_SEC,
    DEFAULT_TIMEOUT_SEC,
    EffectiveSettings,
    first_positive,
    resolve_effective_settings,
)
from spider.ports.target import TargetPort

__all__ = []


def make_target(timeout_sec: float | None = None, interval_sec: float | None = None) -> TargetPort:
    return TargetPort(
        name="api",
        url="http://example.test/health",
        timeout_sec=timeout_sec,
        interval_sec=interval_sec,
    )


def test_target_timeout_wins_over_global() -> None:
    """Target-level timeout should take precedence."""
    effective = resolve_effective_settings(make_target(timeout_sec=5), default_timeout_sec=10)
    assert effective.timeout_sec == 5


def test_global_timeout_used_when_target_unset() -> None:
    """Global timeout should apply when the target sets none."""
    effective = resolve_effective_settings(make_target(), default_timeout_sec=10)
    assert effective.timeout_sec == 10


def test_default_timeout_used_when_nothing_set() -> None:
    """Hard-coded timeout should apply when no level sets one."""
    effective = resolve_effective_settings(make_target())
    assert effective.timeout_sec == DEFAULT_TIMEOUT_SEC == 20


def test_target_interval_wins_over_global() -> None:
    """Target-level interval should take precedence."""
    effective = resolve_effective_settings(make_target(interval_sec=5), default_interval_sec=10)
    assert effective.interval_sec == 5


def test_global_interval_used_when_target_unset() -> None:
    """Global interval should apply when the target sets none."""
    effective = resolve_effective_settings(make_target(), default_interval_sec=10)
    assert effective.interval_sec == 10


def test_default_interval_used_when_nothing_set() -> None:
    """Hard-coded interval should apply when no level sets one."""
    effective = resolve_effective_settings(make_target())
    assert effective.interval_sec == DEFAULT_INTERVAL_SEC == 30


def test_zero_values_fall_through() -> None:
    """Zero at any level should be treated as unset."""
    effective = resolve_effective_settings(
        make_target(timeout_sec=0, interval_sec=0),
        default_timeout_sec=0,
        default_interval_sec=7,
    )
    assert effective == EffectiveSettings(timeout_sec=DEFAULT_TIMEOUT_SEC, interval_sec=7)


def test_timeout_and_interval_resolve_independently() -> None:
    """Each setting should cascade on its own."""
    effective = resolve_effective_settings(
        make_target(timeout_sec=3),
        default_timeout_sec=10,
        default_interval_sec=15,
    )
    assert effective == EffectiveSettings(timeout_sec=3, interval_sec=15)


@pytest.mark.parametrize(
    ("values", "expected"),
    [
        ((None, None), 9.0),
        ((0, None), 9.0),
        ((None, 4), 4),
        ((2, 4), 2),
        ((0.0, 0.5), 0.5),
    ],
)
def test_first_positive(values: tuple[float | None, ...], expected: float) -> None:
    """first_positive should skip None and zero."""
    assert first_positive(*values, default=9.0) == expected
