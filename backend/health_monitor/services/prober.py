"""Prober service - performs one bounded HTTP GET against an API endpoint."""
import asyncio
import logging
import time
from typing import Optional

import httpx

from ..models import CheckRecord
from ..utils import Clock, utc_now

logger = logging.getLogger(__name__)


class ProberService:
    """Service for checking a single endpoint of the monitored API.

    Every failure mode is encoded in the returned CheckRecord; check() never
    raises.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Clock = utc_now,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._clock = clock

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            return await client.get(url)

    async def check(self, path: str) -> CheckRecord:
        """GET base_url + path and record status, latency and any error.

        Success means a 2xx status. Timeouts and network errors produce
        status 0. The timeout bounds the whole request, body included, since
        httpx phase timeouts restart on every received chunk. Elapsed time
        covers the request up to the response or the error, in whole
        milliseconds.
        """
        url = self.url_for(path)
        status = 0
        success = False
        error: Optional[str] = None

        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(self._get(url), timeout=self.timeout)

            status = response.status_code
            success = 200 <= status < 300
            if not success:
                error = f"HTTP {status}: {response.reason_phrase}"

        except (httpx.TimeoutException, asyncio.TimeoutError):
            error = f"Request timeout after {self.timeout:g}s"
        except httpx.ConnectError as e:
            error = f"Connection error: {e}"
        except Exception as e:
            error = str(e) or type(e).__name__

        response_time_ms = int(round((time.perf_counter() - start) * 1000))

        if not success:
            logger.debug(f"Check failed for {url}: {error}")

        return CheckRecord(
            timestamp=self._clock(),
            endpoint=path,
            status=status,
            response_time_ms=response_time_ms,
            success=success,
            error=error,
        )
