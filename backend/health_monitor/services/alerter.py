"""Alerter service - failure and slow-response alerts with a global cooldown.

Webhook delivery is best effort: one POST per alert message, no retry.
Delivery failures are logged and discarded so they never hold up a check
cycle.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

import httpx

from ..models import CheckRecord
from ..utils import Clock, utc_now
from .history_store import HistoryStore

logger = logging.getLogger(__name__)


def failure_message(batch: Sequence[CheckRecord]) -> Optional[str]:
    """Message listing every failed check, or None if all succeeded."""
    failures = [c for c in batch if not c.success]
    if not failures:
        return None
    details = "; ".join(f"{c.endpoint}: {c.error or 'failed'}" for c in failures)
    return f"Health check failures: {details}"


def slow_message(batch: Sequence[CheckRecord], threshold_ms: int) -> Optional[str]:
    """Message listing every check slower than the threshold, or None."""
    slow = [c for c in batch if c.response_time_ms > threshold_ms]
    if not slow:
        return None
    details = "; ".join(f"{c.endpoint}: {c.response_time_ms}ms" for c in slow)
    return f"Slow responses detected: {details}"


class AlerterService:
    """Evaluates a cycle's checks and sends rate-limited webhook alerts.

    The cooldown is global across all alert reasons. It is checked once per
    evaluated batch, so the failure and slow-response messages raised by the
    same cycle are delivered together and the last-alert time moves once.
    """

    def __init__(
        self,
        store: HistoryStore,
        webhook_url: Optional[str] = None,
        slow_threshold_ms: int = 5000,
        cooldown: timedelta = timedelta(minutes=5),
        prefix: str = "[Bounty Board Health]",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.webhook_url = webhook_url
        self.slow_threshold_ms = slow_threshold_ms
        self.cooldown = cooldown
        self.prefix = prefix
        self.timeout = timeout
        self._transport = transport
        self._clock = clock

    def build_messages(self, batch: Sequence[CheckRecord]) -> List[str]:
        """Alert messages for one batch: failures first, then slow responses."""
        messages = [failure_message(batch), slow_message(batch, self.slow_threshold_ms)]
        return [m for m in messages if m]

    def in_cooldown(self, now: datetime) -> bool:
        last_alert = self.store.state.last_alert
        return last_alert is not None and now - last_alert < self.cooldown

    async def evaluate(self, batch: Sequence[CheckRecord]) -> int:
        """Alert on the checks of one cycle.

        Returns the number of messages that passed the cooldown gate.
        """
        messages = self.build_messages(batch)
        if not messages:
            return 0
        return await self._dispatch(messages)

    async def notify(self, message: str) -> bool:
        """Log and, unless in cooldown, deliver one message. True if it passed the gate."""
        return await self._dispatch([message]) == 1

    async def _dispatch(self, messages: List[str]) -> int:
        now = self._clock()

        # Every qualifying condition is logged, even when delivery is suppressed
        for message in messages:
            logger.warning(f"[ALERT] {message}")

        if self.in_cooldown(now):
            logger.info(
                f"Alert delivery suppressed: last alert at {self.store.state.last_alert.isoformat()}"
            )
            return 0

        self.store.record_alert(now)

        if not self.webhook_url:
            return len(messages)

        for message in messages:
            await self._send_webhook(message, now)
        return len(messages)

    async def _post(self, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(
                self.webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )

    async def _send_webhook(self, message: str, now: datetime) -> bool:
        """POST one alert to the webhook. Never raises, never retries."""
        payload = {
            "text": f"{self.prefix} {message}",
            "timestamp": now.isoformat().replace("+00:00", "Z"),
        }
        try:
            response = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
            if response.status_code < 400:
                logger.info("Alert webhook sent")
                return True
            logger.warning(f"Alert webhook returned {response.status_code}")
            return False
        except asyncio.TimeoutError:
            logger.error(f"Failed to send alert webhook: timed out after {self.timeout:g}s")
            return False
        except Exception as e:
            logger.error(f"Failed to send alert webhook: {e}")
            return False
