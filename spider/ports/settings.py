"""Settings port definition (DTO)."""

from dataclasses import dataclass, field

from spider.ports.target import TargetPort

__all__ = ["SpiderSettingsPort"]


@dataclass
class SpiderSettingsPort:
    """Runtime settings for the spider loops.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping.

    Attributes:
        targets: Validated targets, one spider loop each.
        timeout_sec: Global probe timeout, used when a target sets none.
        interval_sec: Global poll interval, used when a target sets none.
    """

    targets: list[TargetPort] = field(default_factory=list)
    timeout_sec: float | None = None
    interval_sec: float | None = None
