"""CheckRecord model - one probe of one endpoint."""
from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from .base import Base, ensure_utc


class CheckRecord(Base):
    """Result of a single health check. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    endpoint: str
    status: int = 0  # 0 when the endpoint was unreachable
    response_time_ms: int = Field(ge=0)
    success: bool
    error: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
