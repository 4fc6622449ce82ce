"""Shared fixtures: a controllable clock, a temp history file, record builders
and a local server that drips its response body.
"""
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from health_monitor.models import CheckRecord
from health_monitor.persistence import JsonHistoryFile
from health_monitor.services import AggregatorService, HistoryStore

ENDPOINTS = ["/bounties", "/stats", "/bounties/1"]
NOW = datetime(2026, 1, 20, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_check(
    endpoint: str = "/bounties",
    timestamp: datetime = NOW,
    success: bool = True,
    response_time_ms: int = 100,
    status: Optional[int] = None,
    error: Optional[str] = None,
) -> CheckRecord:
    if status is None:
        status = 200 if success else 500
    if not success and error is None:
        error = f"HTTP {status}" if status else "Request timeout after 10s"
    return CheckRecord(
        timestamp=timestamp,
        endpoint=endpoint,
        status=status,
        response_time_ms=response_time_ms,
        success=success,
        error=error,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def history_file(tmp_path):
    return JsonHistoryFile(tmp_path / "health-history.json")


@pytest.fixture
def store(history_file, clock):
    return HistoryStore(history_file, endpoint_count=len(ENDPOINTS), retention_days=7, clock=clock)


@pytest.fixture
def aggregator(store, clock):
    return AggregatorService(store, ENDPOINTS, clock=clock)


@asynccontextmanager
async def slow_drip_server(delay: float = 0.2, chunks: int = 50):
    """Local HTTP server that sends its body one byte every `delay` seconds.

    Each byte arrives well within a per-read timeout, so only a limit on the
    whole request can stop it. Yields the base URL.
    """
    handlers = set()

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        handlers.add(asyncio.current_task())
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: text/plain\r\n"
                + f"Content-Length: {chunks}\r\n\r\n".encode()
            )
            await writer.drain()
            for _ in range(chunks):
                await asyncio.sleep(delay)
                writer.write(b".")
                await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        for task in handlers:
            task.cancel()
        server.close()
