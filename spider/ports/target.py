"""Target port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["TargetPort"]


@dataclass(slots=True, frozen=True)
class TargetPort:
    """One monitored HTTP endpoint.

    Built once at startup from validated configuration and never mutated.

    Attributes:
        name: Unique target name, used as the metrics label.
        url: Absolute http(s) URL to probe.
        method: HTTP method sent on every probe.
        timeout_sec: Per-target timeout override; None or 0 means unset.
        interval_sec: Per-target poll interval override; None or 0 means unset.
    """

    name: str
    url: str
    method: str = "GET"
    timeout_sec: float | None = None
    interval_sec: float | None = None
