"""HTTP probe adapter performing one uncached round trip per tick."""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from types import TracebackType

import aiohttp
from aiohttp import ClientTimeout

from spider.ports.probe import ProbeOutcomeDto, ProbePort
from spider.ports.target import TargetPort

__all__ = ["HttpProber", "SUCCESS_STATUS"]

logger = logging.getLogger(__name__)

SUCCESS_STATUS = 200


class HttpProber(ProbePort):
    """Single-attempt HTTP prober.

    Features:
    - One request per call, no retry.
    - Redirects are not followed; the first response is evaluated.
    - Body is always read to the end before the connection is released.
    - Connections are closed after every request (no keep-alive).
    - Context manager for proper resource cleanup.
    """

    def __init__(self) -> None:
        """Initialize prober; the session is opened by ``async with``."""
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpProber":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(force_close=True),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()

    def _request(
        self, target: TargetPort, timeout_sec: float
    ) -> AbstractAsyncContextManager[aiohttp.ClientResponse]:
        """Build the single request for one probe.

        Args:
            target: Target to request.
            timeout_sec: Bound for connect, handshake, response and body read.

        Returns:
            aiohttp request context manager yielding the response.

        Raises:
            RuntimeError: If session not initialized.
            ValueError: If the request cannot be built.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        return self.session.request(
            target.method,
            target.url,
            timeout=ClientTimeout(total=timeout_sec),
            allow_redirects=False,
        )

    async def probe(self, target: TargetPort, timeout_sec: float) -> ProbeOutcomeDto:
        """Probe a target once and classify the outcome.

        Never raises: every error becomes a failed outcome.

        Args:
            target: Target to probe.
            timeout_sec: Upper bound for the whole request.

        Returns:
            Outcome with success, elapsed time, status and failure reason.
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        status: int | None = None
        error: str | None = None

        try:
            async with self._request(target, timeout_sec) as resp:
                status = resp.status
                await resp.read()
            if status != SUCCESS_STATUS:
                error = f"status code {status}"
        except asyncio.TimeoutError:
            error = f"timeout after {timeout_sec}s"
        except aiohttp.ClientError as e:
            error = f"{type(e).__name__}: {e}"
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error probing {target.name}: {e}", exc_info=True)
            error = f"{type(e).__name__}: {e}"

        elapsed = loop.time() - started
        if error is not None:
            logger.debug(f"{target.name}: {error}")

        return ProbeOutcomeDto(
            success=error is None,
            elapsed_sec=elapsed,
            status_code=status,
            error=error,
        )
