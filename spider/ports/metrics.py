"""Metrics port definition (interface and DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

__all__ = ["OUTCOME_ERROR", "OUTCOME_OK", "ObservationDto", "MetricsPort", "outcome_label"]

OUTCOME_OK = "ok"
OUTCOME_ERROR = "error"


def outcome_label(success: bool) -> str:
    """Map a probe result to its metrics label."""
    return OUTCOME_OK if success else OUTCOME_ERROR


@dataclass(slots=True, frozen=True)
class ObservationDto:
    """Immutable record of one spider tick.

    Attributes:
        target_name: Name of the probed target.
        outcome: "ok" or "error".
        elapsed_sec: Wall-clock duration of the probe in seconds.
    """

    target_name: str
    outcome: str
    elapsed_sec: float


class MetricsPort(Protocol):
    """Interface for recording spider observations.

    Implementations are shared by every spider loop and must be safe
    for concurrent writes without external locking.
    """

    def observe(self, observation: ObservationDto, /) -> None:
        """Record one observation.

        Args:
            observation: The observation to record.
        """
        ...
