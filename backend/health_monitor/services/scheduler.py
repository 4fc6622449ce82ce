"""Scheduler service - runs a check cycle over all endpoints on a fixed interval.

The first cycle runs immediately at start. Ticks are spaced from the start
of one run to the start of the next. Cycles never overlap: run_cycle()
holds a lock, so a tick that fires during a slow cycle waits and runs right
after it. At most one such tick waits; APScheduler skips any further ones.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..models import CheckRecord
from .aggregator import AggregatorService
from .alerter import AlerterService
from .history_store import HistoryStore
from .prober import ProberService

logger = logging.getLogger(__name__)


class SchedulerService:
    """Service for scheduling and running periodic health check cycles."""

    def __init__(
        self,
        prober: ProberService,
        store: HistoryStore,
        aggregator: AggregatorService,
        alerter: AlerterService,
        endpoint_paths: Sequence[str],
        interval_seconds: float = 60,
    ):
        self.prober = prober
        self.store = store
        self.aggregator = aggregator
        self.alerter = alerter
        self.endpoint_paths = list(endpoint_paths)
        self.interval_seconds = interval_seconds
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._running = False
        self._cycle_lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        """Start the scheduler. Must be called from within a running event loop."""
        if self._running:
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self._run_cycle_job,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id="run_health_checks",
            replace_existing=True,
            max_instances=2,  # The running cycle plus one tick waiting on the lock
            coalesce=True,
            next_run_time=datetime.now(timezone.utc),
        )
        self.scheduler.start()
        self._running = True
        logger.info(
            f"Scheduler started (interval={self.interval_seconds:g}s, endpoints={len(self.endpoint_paths)})"
        )

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler and self._running:
            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    async def _run_cycle_job(self):
        """Job wrapper: a failing cycle is logged and never stops the schedule."""
        try:
            await self.run_cycle()
        except Exception as e:
            logger.error(f"Error running health check cycle: {e}", exc_info=True)

    async def probe_all(self) -> List[CheckRecord]:
        """Check every endpoint one after another."""
        batch = []
        for path in self.endpoint_paths:
            batch.append(await self.prober.check(path))
        return batch

    async def run_cycle(self) -> List[CheckRecord]:
        """Run one full cycle and return the records it produced.

        Order: probe all endpoints, commit them as one batch, rebuild
        today's rollup, evaluate alerts, then prune and persist.
        """
        async with self._cycle_lock:
            batch = await self.probe_all()

            # No await between commit and rollup: readers never see one without the other
            self.store.append_batch(batch)
            self.aggregator.recompute_today()

            try:
                await self.alerter.evaluate(batch)
            except Exception as e:
                logger.error(f"Error evaluating alerts: {e}")

            self.store.prune_and_persist()

            failed = sum(1 for c in batch if not c.success)
            logger.info(f"Checked {len(batch)} endpoints ({failed} failed)")
            return batch
