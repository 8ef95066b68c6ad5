"""HTTP listener exposing the metrics registry for scraping."""

import logging

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST

from spider.adapters.driven.metrics.prometheus_metrics import PrometheusMetrics

__all__ = ["build_metrics_app", "parse_listen", "start_metrics_server"]

logger = logging.getLogger(__name__)

_METRICS_KEY = web.AppKey("metrics", PrometheusMetrics)

INDEX_HTML = 'see <a href="/metrics">/metrics</a>'


def parse_listen(address: str) -> tuple[str | None, int]:
    """Split a ``[host]:port`` address.

    An empty host means all interfaces.

    Raises:
        ValueError: If the port is missing or not a number.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {address!r}")
    return (host.strip("[]") or None), int(port)


async def _index(request: web.Request) -> web.Response:
    return web.Response(text=INDEX_HTML, content_type="text/html")


async def _metrics(request: web.Request) -> web.Response:
    metrics = request.app[_METRICS_KEY]
    return web.Response(
        body=metrics.render(),
        headers={"Content-Type": CONTENT_TYPE_LATEST},
    )


def build_metrics_app(metrics: PrometheusMetrics) -> web.Application:
    """Build the web application serving ``/`` and ``/metrics``.

    Args:
        metrics: Sink rendered on every scrape.

    Returns:
        Configured aiohttp application.
    """
    app = web.Application()
    app[_METRICS_KEY] = metrics
    app.router.add_get("/", _index)
    app.router.add_get("/metrics", _metrics)
    return app


async def start_metrics_server(metrics: PrometheusMetrics, listen: str) -> web.AppRunner:
    """Start serving metrics in the background.

    Args:
        metrics: Sink to expose.
        listen: ``[host]:port`` address.

    Returns:
        Runner; call ``cleanup()`` on shutdown.
    """
    host, port = parse_listen(listen)
    runner = web.AppRunner(build_metrics_app(metrics))
    await runner.setup()
    site = web.TCPSite(runner, host=host, port=port)
    await site.start()
    logger.info(f"listening on {listen}...")
    return runner
