"""Probe port definition (interface and DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from spider.ports.target import TargetPort

__all__ = ["ProbeOutcomeDto", "ProbePort"]


@dataclass(slots=True, frozen=True)
class ProbeOutcomeDto:
    """Result of a single probe attempt.

    Attributes:
        success: True only for a completed request, fully read body and status 200.
        elapsed_sec: Time from request start to outcome, measured on failures too.
        status_code: HTTP status code when a response arrived; None otherwise.
        error: Short failure reason; None on success.
    """

    success: bool
    elapsed_sec: float
    status_code: int | None = None
    error: str | None = None


class ProbePort(Protocol):
    """Interface for performing one HTTP round trip against a target.

    Implementations must never raise: every failure is reported as
    an outcome with success=False.
    """

    async def probe(self, target: TargetPort, timeout_sec: float, /) -> ProbeOutcomeDto:
        """Probe a target once.

        Args:
            target: Target to probe.
            timeout_sec: Upper bound for the whole request.

        Returns:
            Outcome of the attempt.
        """
        ...
