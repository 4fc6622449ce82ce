"""Service wiring and FastAPI dependencies."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import httpx
from fastapi import Depends, Request

from .config import Settings
from .persistence import JsonHistoryFile
from .services import (
    AggregatorService,
    AlerterService,
    HistoryStore,
    ProberService,
    SchedulerService,
)
from .utils import Clock, utc_now


@dataclass
class MonitorServices:
    """The monitoring core for one process."""
    settings: Settings
    store: HistoryStore
    prober: ProberService
    aggregator: AggregatorService
    alerter: AlerterService
    scheduler: SchedulerService


def build_services(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Clock = utc_now,
) -> MonitorServices:
    """Create and connect the core services from settings.

    `transport` and `clock` replace the network and the wall clock in tests.
    """
    paths = settings.endpoint_paths
    store = HistoryStore(
        JsonHistoryFile(settings.history_file),
        endpoint_count=len(paths),
        retention_days=settings.retention_days,
        clock=clock,
    )
    prober = ProberService(
        settings.api_base_url,
        timeout=settings.probe_timeout_seconds,
        transport=transport,
        clock=clock,
    )
    aggregator = AggregatorService(store, paths, clock=clock)
    alerter = AlerterService(
        store,
        webhook_url=settings.alert_webhook_url,
        slow_threshold_ms=settings.slow_response_ms,
        cooldown=timedelta(minutes=settings.alert_cooldown_minutes),
        prefix=settings.alert_prefix,
        timeout=settings.webhook_timeout_seconds,
        transport=transport,
        clock=clock,
    )
    scheduler = SchedulerService(
        prober,
        store,
        aggregator,
        alerter,
        paths,
        interval_seconds=settings.poll_interval_seconds,
    )
    return MonitorServices(
        settings=settings,
        store=store,
        prober=prober,
        aggregator=aggregator,
        alerter=alerter,
        scheduler=scheduler,
    )


def get_services(request: Request) -> MonitorServices:
    return request.app.state.services


def get_history_store(services: MonitorServices = Depends(get_services)) -> HistoryStore:
    return services.store


def get_aggregator(services: MonitorServices = Depends(get_services)) -> AggregatorService:
    return services.aggregator


def get_settings(services: MonitorServices = Depends(get_services)) -> Settings:
    return services.settings
