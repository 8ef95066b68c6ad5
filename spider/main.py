"""Application entrypoint."""

import asyncio
import logging

from prometheus_client import CollectorRegistry

from spider.adapters.driven.config.settings import load_settings
from spider.adapters.driven.http.prober import HttpProber
from spider.adapters.driven.logging.logging_config import configure_logs
from spider.adapters.driven.metrics.prometheus_metrics import PrometheusMetrics
from spider.adapters.driving.metrics_server import start_metrics_server
from spider.adapters.driving.signals import make_stop_on_sigterm
from spider.core.spider_loop import start_spiders

__all__ = ["main", "run"]

logger = logging.getLogger(__name__)


async def main() -> None:
    """Start the HTTP spider service.

    Startup sequence:
    1. Load and validate configuration.
    2. Configure logging.
    3. Start the metrics listener.
    4. Run one spider loop per target.
    5. Gracefully shutdown on SIGTERM.
    """
    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        configure_logs()
        logger.error(
            "Configuration error: %s\n"
            "Hint: check SPIDER_CONFIG_FILE, SPIDER_LISTEN, SPIDER_VERBOSE "
            "and that every target has a valid http(s) URL.",
            exc,
        )
        return

    configure_logs(verbose=config.verbose)
    logger.info("Starting HTTP spider service...")
    logger.info(f"Spider configured: {config.summary()}")

    # Wrap config into port so core depends on interface (hexagonal)
    settings_port = config.to_port()
    for target in settings_port.targets:
        logger.debug(f"target {target.name!r}: {target.method} {target.url}")

    metrics = PrometheusMetrics(CollectorRegistry())
    stop = make_stop_on_sigterm()

    runner = await start_metrics_server(metrics, config.listen)
    try:
        async with HttpProber() as prober:
            spiders = asyncio.create_task(
                start_spiders(
                    settings=settings_port,
                    probe_fn=prober.probe,
                    metrics=metrics,
                    stop_fn=stop.is_set,
                )
            )
            stopped = asyncio.create_task(stop.wait())

            # Spiders only return on their own when there is nothing to probe
            await asyncio.wait({spiders, stopped}, return_when=asyncio.FIRST_COMPLETED)
            for task in (spiders, stopped):
                task.cancel()
            results = await asyncio.gather(spiders, stopped, return_exceptions=True)
            if isinstance(results[0], Exception):
                logger.error(f"Unhandled exception in spiders: {results[0]}", exc_info=results[0])
    finally:
        await runner.cleanup()

    logger.info("HTTP spider stopped.")


def run() -> None:
    """Console-script entrypoint."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")


if __name__ == "__main__":
    run()
