"""Daily rollup models - aggregated statistics for one UTC calendar day."""
import datetime as dt
from typing import Dict

from pydantic import Field, model_validator

from .base import Base


class EndpointRollup(Base):
    """Per-endpoint statistics for one day."""
    checks: int = Field(ge=0)
    successes: int = Field(ge=0)
    avg_response_time_ms: int = Field(ge=0)
    max_response_time_ms: int = Field(ge=0)
    errors: int = Field(ge=0)


class DailyRollup(Base):
    """Overall and per-endpoint statistics for one day."""
    date: dt.date
    total_checks: int = Field(ge=0)
    successful_checks: int = Field(ge=0)
    avg_response_time_ms: int = Field(ge=0)
    max_response_time_ms: int = Field(ge=0)
    min_response_time_ms: int = Field(ge=0)
    error_rate: float = Field(ge=0, le=100)  # Percentage, 2 decimals
    endpoints: Dict[str, EndpointRollup] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _successes_within_total(self) -> "DailyRollup":
        if self.successful_checks > self.total_checks:
            raise ValueError(
                f"successful_checks ({self.successful_checks}) exceeds total_checks ({self.total_checks})"
            )
        return self

    @property
    def uptime(self) -> float:
        """Success percentage for the day (0 checks counts as 0%)."""
        return self.successful_checks / (self.total_checks or 1) * 100
