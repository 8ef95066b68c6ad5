"""Per-target spider loops that probe endpoints and record latency."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from spider.core.effective_settings import EffectiveSettings, resolve_effective_settings
from spider.ports.metrics import OUTCOME_ERROR, MetricsPort, ObservationDto, outcome_label
from spider.ports.probe import ProbeOutcomeDto
from spider.ports.settings import SpiderSettingsPort
from spider.ports.target import TargetPort

__all__ = ["ProbeFn", "get_now_time", "run_spider", "start_spiders"]

logger = logging.getLogger(__name__)

ProbeFn = Callable[[TargetPort, float], Awaitable[ProbeOutcomeDto]]


def get_now_time() -> float:
    """Get current monotonic time in seconds.

    Uses event loop's monotonic clock so wall-clock adjustments
    never produce negative durations.

    Returns:
        Current time in seconds (monotonic).
    """
    return asyncio.get_running_loop().time()


def _never_stop() -> bool:
    return False


async def run_spider(
    target: TargetPort,
    effective: EffectiveSettings,
    probe_fn: ProbeFn,
    metrics: MetricsPort,
    stop_fn: Callable[[], bool] = _never_stop,
) -> int:
    """Probe one target forever, recording one observation per tick.

    Each tick:
    1. Record the start time and await a single probe.
    2. Emit one observation with the measured elapsed time.
    3. Sleep for the configured interval, regardless of probe duration.

    Args:
        target: Target to probe.
        effective: Resolved timeout and interval for this target.
        probe_fn: Async function performing one probe.
        metrics: Shared sink receiving observations.
        stop_fn: Polled before every tick; the loop exits once it returns True.

    Returns:
        Number of ticks performed before stopping.

    Notes:
        - The interval is think time appended after each probe: start times
          drift later by the probe's own duration.
        - A probe_fn that raises is recorded as an error tick; the loop
          never dies because of a single probe.
    """
    ticks = 0
    while not stop_fn():
        started = get_now_time()
        try:
            outcome = await probe_fn(target, effective.timeout_sec)
            result = outcome_label(outcome.success)
        except Exception as e:  # noqa: BLE001
            logger.error(f"{target.name}: unexpected probe error: {e}", exc_info=True)
            result = OUTCOME_ERROR
        elapsed = get_now_time() - started

        metrics.observe(
            ObservationDto(target_name=target.name, outcome=result, elapsed_sec=elapsed)
        )
        logger.debug("- %s: dt:%.3fs result:%s", target.name, elapsed, result)
        ticks += 1

        await asyncio.sleep(effective.interval_sec)

    return ticks


async def start_spiders(
    settings: SpiderSettingsPort,
    probe_fn: ProbeFn,
    metrics: MetricsPort,
    stop_fn: Callable[[], bool] = _never_stop,
) -> None:
    """Start one concurrent spider loop per configured target.

    Effective settings are resolved once per target before its loop
    starts. Runs until every loop has stopped.

    Args:
        settings: Targets and global defaults.
        probe_fn: Async function performing one probe.
        metrics: Shared sink receiving observations from every loop.
        stop_fn: Stop flag shared by all loops.

    Notes:
        - On cancellation, every spider task is cancelled and awaited
          before the cancellation propagates.
    """
    loop = asyncio.get_running_loop()
    tasks: list[asyncio.Task[int]] = []

    for target in settings.targets:
        effective = resolve_effective_settings(
            target,
            default_timeout_sec=settings.timeout_sec,
            default_interval_sec=settings.interval_sec,
        )
        logger.info(
            f"starting {target.name!r} spider: interval={effective.interval_sec}s "
            f"timeout={effective.timeout_sec}s"
        )
        tasks.append(
            loop.create_task(
                run_spider(target, effective, probe_fn, metrics, stop_fn),
                name=f"spider-{target.name}",
            )
        )

    if not tasks:
        logger.warning("No targets configured, nothing to probe.")
        return

    try:
        await asyncio.gather(*tasks)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
