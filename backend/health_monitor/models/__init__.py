"""Domain models persisted in the history file."""
from .check_record import CheckRecord
from .daily_rollup import DailyRollup, EndpointRollup
from .history import HistoryState

__all__ = ["CheckRecord", "DailyRollup", "EndpointRollup", "HistoryState"]
