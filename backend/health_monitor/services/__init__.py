"""Services for probing, history, aggregation, alerting and scheduling."""
from .aggregator import AggregatorService
from .alerter import AlerterService
from .history_store import HistoryStore
from .prober import ProberService
from .scheduler import SchedulerService

__all__ = ["AggregatorService", "AlerterService", "HistoryStore", "ProberService", "SchedulerService"]
