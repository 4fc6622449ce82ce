"""HistoryState model - the single persisted aggregate."""
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import Base, ensure_utc
from .check_record import CheckRecord
from .daily_rollup import DailyRollup


class HistoryState(Base):
    """Retained check log, daily rollups and the last alert time.

    Treated as immutable: the history store replaces the whole object on
    every mutation instead of editing its lists in place.
    """

    model_config = ConfigDict(frozen=True)

    checks: List[CheckRecord] = Field(default_factory=list)
    daily_stats: List[DailyRollup] = Field(default_factory=list)
    last_alert: Optional[datetime] = None

    @field_validator("last_alert")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @field_validator("daily_stats")
    @classmethod
    def _one_rollup_per_day(cls, value: List[DailyRollup]) -> List[DailyRollup]:
        by_date = {}
        for rollup in value:
            by_date[rollup.date] = rollup  # Later entries win
        return [by_date[day] for day in sorted(by_date)]
