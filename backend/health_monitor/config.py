"""Application configuration from environment variables."""
from typing import List

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MonitoredEndpoint(BaseModel):
    """An API path probed every cycle."""
    name: str
    path: str


DEFAULT_ENDPOINTS = [
    MonitoredEndpoint(name="List Bounties", path="/bounties"),
    MonitoredEndpoint(name="Stats", path="/stats"),
    MonitoredEndpoint(name="Single Bounty", path="/bounties/1"),
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # API being monitored
    api_base_url: str = "https://bounty.owockibot.xyz"

    # Time between the start of two check cycles
    poll_interval_ms: int = 60_000

    # Web server
    host: str = "0.0.0.0"
    port: int = 3100

    # JSON file holding the retained history
    history_file: str = "./health-history.json"

    # Optional webhook receiving alerts (empty string means disabled)
    alert_webhook_url: str | None = None

    # JSON list of {"name": ..., "path": ...}
    monitored_endpoints: List[MonitoredEndpoint] = list(DEFAULT_ENDPOINTS)

    probe_timeout_seconds: float = 10.0
    webhook_timeout_seconds: float = 10.0
    slow_response_ms: int = 5000
    alert_cooldown_minutes: int = 5
    alert_prefix: str = "[Bounty Board Health]"
    retention_days: int = 7

    log_level: str = "INFO"

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("alert_webhook_url")
    @classmethod
    def _empty_webhook_is_unset(cls, value: str | None) -> str | None:
        return value or None

    @property
    def endpoint_paths(self) -> List[str]:
        return [ep.path for ep in self.monitored_endpoints]

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000


settings = Settings()
