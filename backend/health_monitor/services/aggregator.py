"""Aggregator service - daily rollups and the current status snapshot."""
import datetime as dt
import logging
from typing import Dict, List, Optional, Sequence

from ..models import CheckRecord, DailyRollup, EndpointRollup
from ..schemas.status import StatusSnapshot
from ..utils import Clock, error_rate, format_percent, mean_ms, utc_now
from .history_store import HistoryStore

logger = logging.getLogger(__name__)

# Records per endpoint scanned for the "latest per endpoint" map
RECENT_WINDOW_PER_ENDPOINT = 10


def build_daily_rollup(
    day: dt.date,
    checks: Sequence[CheckRecord],
    endpoint_order: Sequence[str] = (),
) -> Optional[DailyRollup]:
    """Compute the rollup for one day from that day's records.

    Per-endpoint entries follow `endpoint_order`, then any other endpoint
    seen in the records. Returns None when there are no records.
    """
    if not checks:
        return None

    times = [c.response_time_ms for c in checks]
    successes = sum(1 for c in checks if c.success)

    by_endpoint: Dict[str, List[CheckRecord]] = {path: [] for path in endpoint_order}
    for check in checks:
        by_endpoint.setdefault(check.endpoint, []).append(check)

    endpoints = {}
    for path, ep_checks in by_endpoint.items():
        if not ep_checks:
            continue
        ep_successes = sum(1 for c in ep_checks if c.success)
        endpoints[path] = EndpointRollup(
            checks=len(ep_checks),
            successes=ep_successes,
            avg_response_time_ms=mean_ms(c.response_time_ms for c in ep_checks),
            max_response_time_ms=max(c.response_time_ms for c in ep_checks),
            errors=len(ep_checks) - ep_successes,
        )

    return DailyRollup(
        date=day,
        total_checks=len(checks),
        successful_checks=successes,
        avg_response_time_ms=mean_ms(times),
        max_response_time_ms=max(times),
        min_response_time_ms=min(times),
        error_rate=error_rate(successes, len(checks)),
        endpoints=endpoints,
    )


class AggregatorService:
    """Derives rollups and status snapshots from the history store."""

    def __init__(
        self,
        store: HistoryStore,
        endpoint_paths: Sequence[str] = (),
        clock: Clock = utc_now,
    ):
        self.store = store
        self.endpoint_paths = list(endpoint_paths)
        self._clock = clock

    def recompute_today(self) -> Optional[DailyRollup]:
        """Rebuild today's (UTC) rollup from scratch and upsert it.

        Does nothing when there are no checks today, so an existing rollup
        is never replaced by an empty one.
        """
        today = self._clock().date()
        todays_checks = [c for c in self.store.state.checks if c.timestamp.date() == today]
        rollup = build_daily_rollup(today, todays_checks, self.endpoint_paths)
        if rollup is None:
            return None
        self.store.upsert_daily_rollup(rollup)
        logger.debug(f"Rollup for {today}: {rollup.total_checks} checks, {rollup.error_rate}% errors")
        return rollup

    def current_status(self) -> StatusSnapshot:
        """Read-only snapshot over the last 24 hours.

        With no checks in the window, uptime is "100.00" and the error rate
        "0.00" rather than a division by zero.
        """
        state = self.store.state
        last_24h = self.store.last_24h()
        total = len(last_24h)
        successes = sum(1 for c in last_24h if c.success)

        if total:
            uptime = successes / total * 100
            failure_rate = (total - successes) / total * 100
        else:
            uptime, failure_rate = 100.0, 0.0

        return StatusSnapshot(
            uptime=format_percent(uptime),
            avg_response_time_ms=mean_ms(c.response_time_ms for c in last_24h),
            error_rate=format_percent(failure_rate),
            total_checks_last_24h=total,
            endpoints=self.store.recent_by_endpoint(RECENT_WINDOW_PER_ENDPOINT),
            last_check=state.checks[-1].timestamp if state.checks else None,
        )
