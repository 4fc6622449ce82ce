"""History store - owns the retained check log and daily rollups.

Every mutation builds a new HistoryState and swaps it in with a single
assignment. Readers take one reference via ``state`` and therefore see
either the state before or after a mutation, never a half-applied one.
"""
import bisect
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from ..models import CheckRecord, DailyRollup, HistoryState
from ..persistence import HistoryLoadError, JsonHistoryFile
from ..utils import Clock, utc_now

logger = logging.getLogger(__name__)


class HistoryStore:
    """In-memory history with retention pruning and a persistence port."""

    def __init__(
        self,
        persistence: JsonHistoryFile,
        endpoint_count: int,
        retention_days: int = 7,
        clock: Clock = utc_now,
    ):
        self.persistence = persistence
        self.endpoint_count = endpoint_count
        self.retention = timedelta(days=retention_days)
        self._clock = clock
        self._state = HistoryState()

    @property
    def state(self) -> HistoryState:
        """Current immutable snapshot."""
        return self._state

    def load(self) -> HistoryState:
        """Load prior state; a missing or malformed file yields empty state."""
        try:
            loaded = self.persistence.load()
        except HistoryLoadError as e:
            logger.warning(f"Failed to load history, starting fresh: {e}")
            loaded = None

        if loaded is None:
            loaded = HistoryState()
        else:
            logger.info(
                f"Loaded {len(loaded.checks)} checks and {len(loaded.daily_stats)} daily rollups"
            )
        self._state = loaded
        return loaded

    def append(self, record: CheckRecord) -> None:
        self.append_batch([record])

    def append_batch(self, records: Iterable[CheckRecord]) -> None:
        """Append all records of one cycle in a single swap."""
        records = list(records)
        if not records:
            return
        state = self._state
        self._state = state.model_copy(update={"checks": [*state.checks, *records]})

    def recent_by_endpoint(self, n: int = 10) -> Dict[str, CheckRecord]:
        """Latest record per endpoint within the last n * endpoint_count records.

        The window is bounded, so an endpoint with no record in it is absent
        from the result.
        """
        window = self._state.checks[-(n * self.endpoint_count):] if n > 0 else []
        latest: Dict[str, CheckRecord] = {}
        for check in window:
            latest[check.endpoint] = check
        return latest

    def since(self, cutoff: datetime) -> List[CheckRecord]:
        """Records strictly newer than the cutoff."""
        return [c for c in self._state.checks if c.timestamp > cutoff]

    def last_n_days(self, n: int) -> List[CheckRecord]:
        return self.since(self._clock() - timedelta(days=n))

    def last_24h(self) -> List[CheckRecord]:
        return self.since(self._clock() - timedelta(hours=24))

    def recent_checks(self, limit: int) -> List[CheckRecord]:
        """The last `limit` records in chronological order."""
        return list(self._state.checks[-limit:]) if limit > 0 else []

    def upsert_daily_rollup(self, rollup: DailyRollup) -> None:
        """Replace the rollup for the same date, else insert it in date order."""
        rollups = list(self._state.daily_stats)
        dates = [r.date for r in rollups]
        idx = bisect.bisect_left(dates, rollup.date)
        if idx < len(rollups) and rollups[idx].date == rollup.date:
            rollups[idx] = rollup
        else:
            rollups.insert(idx, rollup)
        self._state = self._state.model_copy(update={"daily_stats": rollups})

    def record_alert(self, when: datetime) -> None:
        """Set the last alert time. Never moves it backwards."""
        last = self._state.last_alert
        if last is not None and when <= last:
            return
        self._state = self._state.model_copy(update={"last_alert": when})

    def prune(self, now: Optional[datetime] = None) -> int:
        """Drop records older than the retention window.

        Check records are cut on the exact timestamp; rollups are cut on the
        calendar date of that cutoff. Returns the number of records dropped.
        """
        cutoff = (now or self._clock()) - self.retention
        cutoff_date = cutoff.date()
        state = self._state
        checks = [c for c in state.checks if c.timestamp >= cutoff]
        rollups = [r for r in state.daily_stats if r.date >= cutoff_date]
        dropped = len(state.checks) - len(checks)
        if dropped or len(rollups) != len(state.daily_stats):
            self._state = state.model_copy(update={"checks": checks, "daily_stats": rollups})
        return dropped

    def persist(self) -> bool:
        """Write the current state; failures are logged and retried next cycle."""
        try:
            self.persistence.save(self._state)
            return True
        except OSError as e:
            logger.error(f"Failed to save history to {self.persistence.path}: {e}")
            return False

    def prune_and_persist(self) -> bool:
        dropped = self.prune()
        if dropped:
            logger.debug(f"Pruned {dropped} checks older than {self.retention.days} days")
        return self.persist()
