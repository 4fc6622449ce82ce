"""Aggregator tests: daily rollups and the current status snapshot."""
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from health_monitor.models import DailyRollup
from health_monitor.services.aggregator import build_daily_rollup
from health_monitor.utils import round_half_up

from .conftest import NOW, make_check


class TestBuildDailyRollup:
    def test_overall_and_per_endpoint(self):
        checks = [
            make_check("/bounties", response_time_ms=100),
            make_check("/bounties", response_time_ms=201, success=False),
            make_check("/stats", response_time_ms=50),
        ]

        rollup = build_daily_rollup(date(2026, 1, 20), checks, ["/bounties", "/stats", "/bounties/1"])

        assert rollup.total_checks == 3
        assert rollup.successful_checks == 2
        assert rollup.avg_response_time_ms == 117  # 351 / 3
        assert rollup.max_response_time_ms == 201
        assert rollup.min_response_time_ms == 50
        assert rollup.error_rate == 33.33
        assert list(rollup.endpoints) == ["/bounties", "/stats"]

        bounties = rollup.endpoints["/bounties"]
        assert bounties.checks == 2
        assert bounties.successes == 1
        assert bounties.errors == 1
        assert bounties.avg_response_time_ms == 151  # 150.5 rounds half up
        assert bounties.max_response_time_ms == 201

    def test_unconfigured_endpoint_still_counted(self):
        rollup = build_daily_rollup(date(2026, 1, 20), [make_check("/legacy")], ["/stats"])
        assert list(rollup.endpoints) == ["/legacy"]

    def test_empty_returns_none(self):
        assert build_daily_rollup(date(2026, 1, 20), []) is None

    @pytest.mark.parametrize("successes,total", [(0, 1), (1, 3), (2, 3), (7, 9), (9, 9)])
    def test_error_rate_matches_success_ratio(self, successes, total):
        checks = [make_check(success=i < successes) for i in range(total)]

        rollup = build_daily_rollup(date(2026, 1, 20), checks)

        assert rollup.successful_checks <= rollup.total_checks
        assert rollup.error_rate == round_half_up(100 * (1 - successes / total), 2)

    def test_rollup_rejects_more_successes_than_checks(self):
        with pytest.raises(ValidationError):
            DailyRollup(
                date=date(2026, 1, 20),
                total_checks=1,
                successful_checks=2,
                avg_response_time_ms=1,
                max_response_time_ms=1,
                min_response_time_ms=1,
                error_rate=0,
            )


class TestRecomputeToday:
    def test_only_todays_checks(self, store, aggregator):
        store.append_batch([
            make_check(timestamp=NOW - timedelta(days=1)),
            make_check(timestamp=NOW, success=False),
        ])

        rollup = aggregator.recompute_today()

        assert rollup.date == date(2026, 1, 20)
        assert rollup.total_checks == 1
        assert rollup.error_rate == 100.0
        assert store.state.daily_stats == [rollup]

    def test_idempotent(self, store, aggregator):
        store.append_batch([make_check(), make_check("/stats", response_time_ms=333)])

        first = aggregator.recompute_today()
        second = aggregator.recompute_today()

        assert first == second
        assert store.state.daily_stats == [second]

    def test_no_checks_today_keeps_existing_rollup(self, store, aggregator, clock):
        store.append(make_check())
        existing = aggregator.recompute_today()

        clock.advance(days=1)
        assert aggregator.recompute_today() is None
        assert store.state.daily_stats == [existing]

    def test_recomputed_not_merged(self, store, aggregator):
        store.append(make_check(response_time_ms=100))
        aggregator.recompute_today()
        store.append(make_check(response_time_ms=300))

        rollup = aggregator.recompute_today()

        assert rollup.total_checks == 2
        assert rollup.avg_response_time_ms == 200
        assert len(store.state.daily_stats) == 1

    def test_utc_midnight_boundary(self, store, aggregator, clock):
        clock.now = datetime(2026, 1, 20, 0, 0, 30, tzinfo=timezone.utc)
        store.append_batch([
            make_check(timestamp=datetime(2026, 1, 19, 23, 59, 50, tzinfo=timezone.utc)),
            make_check(timestamp=datetime(2026, 1, 20, 0, 0, 10, tzinfo=timezone.utc)),
        ])

        rollup = aggregator.recompute_today()

        assert rollup.date == date(2026, 1, 20)
        assert rollup.total_checks == 1

    def test_non_utc_timestamps_bucketed_by_utc_date(self, store, aggregator, clock):
        # 00:30 at UTC+2 is 22:30 UTC on the previous day
        plus_two = timezone(timedelta(hours=2))
        clock.now = datetime(2026, 1, 19, 23, 0, tzinfo=timezone.utc)
        store.append(make_check(timestamp=datetime(2026, 1, 20, 0, 30, tzinfo=plus_two)))

        rollup = aggregator.recompute_today()

        assert rollup.date == date(2026, 1, 19)
        assert rollup.total_checks == 1


class TestCurrentStatus:
    def test_empty_history(self, aggregator):
        status = aggregator.current_status()

        assert status.uptime == "100.00"
        assert status.error_rate == "0.00"
        assert status.avg_response_time_ms == 0
        assert status.total_checks_last_24h == 0
        assert status.endpoints == {}
        assert status.last_check is None

    def test_last_24h_statistics(self, store, aggregator):
        store.append_batch([
            make_check("/bounties", NOW - timedelta(hours=30), success=False, response_time_ms=9000),
            make_check("/bounties", NOW - timedelta(minutes=2), response_time_ms=100),
            make_check("/stats", NOW - timedelta(minutes=2), response_time_ms=200),
            make_check("/bounties/1", NOW - timedelta(minutes=2), success=False, response_time_ms=300),
        ])

        status = aggregator.current_status()

        assert status.total_checks_last_24h == 3
        assert status.uptime == "66.67"
        assert status.error_rate == "33.33"
        assert status.avg_response_time_ms == 200
        assert set(status.endpoints) == {"/bounties", "/stats", "/bounties/1"}
        assert status.endpoints["/bounties"].response_time_ms == 100
        assert status.last_check == NOW - timedelta(minutes=2)

    def test_serializes_with_camel_case_keys(self, store, aggregator):
        store.append(make_check())

        data = aggregator.current_status().model_dump(mode="json", by_alias=True)

        assert set(data) == {
            "uptime",
            "avgResponseTimeMs",
            "errorRate",
            "totalChecksLast24h",
            "endpoints",
            "lastCheck",
        }
        assert data["lastCheck"] == "2026-01-20T12:00:00Z"
