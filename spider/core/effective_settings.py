"""Cascading resolution of per-target timeout and poll interval."""

from dataclasses import dataclass

from spider.ports.target import TargetPort

__all__ = [
    "DEFAULT_INTERVAL_SEC",
    "DEFAULT_TIMEOUT_SEC",
    "EffectiveSettings",
    "first_positive",
    "resolve_effective_settings",
]

DEFAULT_INTERVAL_SEC = 30.0
DEFAULT_TIMEOUT_SEC = 20.0


@dataclass(slots=True, frozen=True)
class EffectiveSettings:
    """Timeout and interval actually used by one spider loop.

    Attributes:
        timeout_sec: Upper bound for each probe.
        interval_sec: Sleep between the end of a probe and the next one.
    """

    timeout_sec: float
    interval_sec: float


def first_positive(*values: float | None, default: float) -> float:
    """Return the first value that is set and non-zero, else default."""
    for value in values:
        if value:
            return value
    return default


def resolve_effective_settings(
    target: TargetPort,
    default_timeout_sec: float | None = None,
    default_interval_sec: float | None = None,
) -> EffectiveSettings:
    """Resolve target → global → hard-coded values.

    Timeout and interval are resolved independently; a missing or zero
    value at one level falls through to the next.

    Args:
        target: Target whose overrides take precedence.
        default_timeout_sec: Global timeout from configuration, if any.
        default_interval_sec: Global interval from configuration, if any.

    Returns:
        Settings for the target's spider loop.
    """
    return EffectiveSettings(
        timeout_sec=first_positive(
            target.timeout_sec, default_timeout_sec, default=DEFAULT_TIMEOUT_SEC
        ),
        interval_sec=first_positive(
            target.interval_sec, default_interval_sec, default=DEFAULT_INTERVAL_SEC
        ),
    )
