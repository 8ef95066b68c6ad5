"""Structured logging setup for the spider."""

import logging

__all__ = ["configure_logs"]


def configure_logs(verbose: bool = False) -> None:
    """Configure console logging.

    Sets up:
    - Root logger at INFO level.
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Application loggers (spider) at DEBUG when verbose, INFO otherwise;
      per-tick lines are DEBUG, so they only appear in verbose mode.
    - Structured format with timestamp, level, module, and line number.

    Args:
        verbose: Enable per-tick diagnostic logs.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    date_format = "%d/%m/%y %H:%M:%S"

    formatter = logging.Formatter(log_format, date_format)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    # Root logger
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Application loggers
    logging.getLogger("spider").setLevel(logging.DEBUG if verbose else logging.INFO)
