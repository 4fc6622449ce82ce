"""Status and history response schemas for the dashboard and JSON API."""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from ..models import CheckRecord, DailyRollup
from ..models.base import Base


class StatusSnapshot(Base):
    """Current status over the last 24 hours."""
    uptime: str  # Percentage, 2 decimals, e.g. "99.50"
    avg_response_time_ms: int
    error_rate: str  # Percentage, 2 decimals
    # to_camel would give "totalChecksLast24H"
    total_checks_last_24h: int = Field(alias="totalChecksLast24h")
    endpoints: Dict[str, CheckRecord]  # Latest record per endpoint path
    last_check: Optional[datetime] = None


class HistoryResponse(Base):
    """Daily rollups plus the most recent raw checks."""
    daily_stats: List[DailyRollup]
    recent_checks: List[CheckRecord]


class HealthResponse(Base):
    """Liveness of the monitor itself."""
    status: str
    monitoring: str
