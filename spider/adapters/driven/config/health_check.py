"""Healthcheck validator for container orchestration."""

import logging

from spider.adapters.driven.config.settings import load_settings
from spider.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Run health check for container orchestration.

    Validates:
    - Environment variables hold valid values.
    - Target file exists and is valid YAML.
    - Every target has a valid http(s) URL, method and durations.
    - At least one target is configured; without targets the spider
      has nothing to probe and exits.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        settings = load_settings()
    except Exception as exc:
        logger.error(f"Spider healthcheck FAILED: {exc}")
        return 1

    if not settings.targets:
        logger.error(f"Spider healthcheck FAILED: no targets in {settings.config_file}")
        return 1

    logger.info(f"Spider healthcheck OK: {settings.summary()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
