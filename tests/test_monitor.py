"""Tests for the in-process performance monitor."""

from __future__ import annotations

import psutil
import pytest

from admin_core.config.schema import MonitoringConfig
from admin_core.metrics import PerformanceMonitor, process_memory


class TestRecordQuery:
    def test_counts_every_query(self, monitor):
        monitor.record_query("members.list", 20)
        monitor.record_query("members.get", 30)
        report = monitor.get_report()
        assert report.queries.count == 2
        assert report.queries.total_time == pytest.approx(50)
        assert report.queries.slow_queries == []

    def test_slow_query_threshold_is_strict(self, monitor):
        monitor.record_query("at_threshold", 100)
        monitor.record_query("over_threshold", 100.5)
        slow = monitor.get_slow_queries()
        assert [q.query for q in slow] == ["over_threshold"]
        assert slow[0].duration == 100.5
        assert slow[0].timestamp

    def test_slow_query_ring_cap(self, monitor):
        for i in range(105):
            monitor.record_query(f"q{i}", 150)
        slow = monitor.get_slow_queries(200)
        assert len(slow) == 100
        assert slow[0].query == "q5"
        assert slow[-1].query == "q104"
        assert monitor.get_report().queries.count == 105

    def test_get_slow_queries_tail(self, monitor):
        for i in range(15):
            monitor.record_query(f"q{i}", 500)
        assert [q.query for q in monitor.get_slow_queries()] == [f"q{i}" for i in range(5, 15)]
        assert [q.query for q in monitor.get_slow_queries(3)] == ["q12", "q13", "q14"]
        assert monitor.get_slow_queries(0) == []

    def test_custom_limits(self, clock, memory):
        m = PerformanceMonitor(
            MonitoringConfig(slow_query_ms=10, slow_query_limit=3),
            clock=clock,
            memory_probe=memory,
        )
        for i in range(5):
            m.record_query(f"q{i}", 11)
        assert [q.query for q in m.get_slow_queries()] == ["q2", "q3", "q4"]


class TestRecordApiRequest:
    def test_running_average_matches_mean(self, monitor):
        durations = [12.0, 48.5, 7.25, 100.0, 3.0]
        for d in durations:
            monitor.record_api_request("GET /api/coupons", d)
        perf = monitor.get_endpoint_performance("GET /api/coupons")
        assert perf.count == len(durations)
        assert perf.avg_time == pytest.approx(sum(durations) / len(durations))

    def test_errors_counted(self, monitor):
        monitor.record_api_request("POST /api/points", 10)
        monitor.record_api_request("POST /api/points", 10, is_error=True)
        monitor.record_api_request("POST /api/points", 10, is_error=True)
        monitor.record_api_request("POST /api/points", 10)
        perf = monitor.get_endpoint_performance("POST /api/points")
        assert perf.errors == 2
        assert perf.error_rate == pytest.approx(50.0)
        report = monitor.get_report()
        assert report.api.requests == 4
        assert report.api.errors == 2

    def test_global_average_is_weighted(self, monitor):
        monitor.record_api_request("a", 10)
        monitor.record_api_request("a", 30)
        monitor.record_api_request("b", 110)
        # (20*2 + 110*1) / 3 = 50
        assert monitor.get_report().api.avg_response_time == pytest.approx(50.0)

    def test_unknown_endpoint(self, monitor):
        assert monitor.get_endpoint_performance("GET /nowhere") is None

    def test_report_endpoints_are_plain_mapping(self, monitor):
        monitor.record_api_request("GET /api/ads", 5)
        endpoints = monitor.get_report().api.endpoints
        assert isinstance(endpoints, dict)
        assert endpoints["GET /api/ads"].count == 1
        assert endpoints["GET /api/ads"].avg_time == pytest.approx(5)


class TestCacheCounters:
    def test_no_events(self, monitor):
        stats = monitor.get_cache_stats()
        assert stats.hit_rate == 0
        assert stats.total == 0

    @pytest.mark.parametrize("hits,misses", [(1, 0), (0, 3), (7, 3), (2, 5)])
    def test_hit_rate(self, monitor, hits, misses):
        for _ in range(hits):
            monitor.record_cache_hit()
        for _ in range(misses):
            monitor.record_cache_miss()
        stats = monitor.get_cache_stats()
        assert stats.hits == hits
        assert stats.misses == misses
        assert stats.total == hits + misses
        assert stats.hit_rate == pytest.approx(100 * hits / (hits + misses))


class TestMemory:
    def test_sample_and_peak(self, monitor, memory):
        memory.used, memory.total = 300, 1000
        monitor.update_memory_usage()
        memory.used = 200
        report = monitor.get_report()
        assert report.memory.used == 200
        assert report.memory.total == 1000
        assert report.memory.peak == 300

    def test_probe_failure_keeps_previous_sample(self, monitor, memory):
        memory.used, memory.total = 400, 1000
        monitor.update_memory_usage()
        memory.fail_with = psutil.AccessDenied()
        monitor.update_memory_usage()
        report = monitor.get_report()
        assert report.memory.used == 400
        assert report.memory.peak == 400

    def test_os_error_swallowed(self, monitor, memory):
        memory.fail_with = OSError("no /proc")
        monitor.update_memory_usage()
        assert monitor.get_report().memory.used == 0

    def test_unexpected_memory_error_swallowed(self, monitor, memory):
        memory.used, memory.total = 400, 1000
        monitor.update_memory_usage()
        memory.fail_with = ValueError("bad reading")
        check = monitor.get_health_check()
        assert check.metrics.memory_usage_percent == pytest.approx(40)
        assert monitor.get_report().memory.used == 400

    def test_malformed_memory_reading_swallowed(self, clock):
        m = PerformanceMonitor(clock=clock, memory_probe=lambda: (1, 2, 3))
        assert m.get_report().memory.used == 0
        assert m.get_health_check().status == "healthy"

    def test_no_probe(self, clock):
        m = PerformanceMonitor(clock=clock, memory_probe=None)
        m.update_memory_usage()
        assert m.get_report().memory.total == 0

    def test_default_probe_reads_process(self):
        used, total = process_memory()
        assert used > 0
        assert total >= used

    def test_monitor_samples_process_by_default(self):
        memory = PerformanceMonitor().get_report().memory
        assert memory.used > 0
        assert memory.total >= memory.used


class TestReport:
    def test_uptime(self, monitor, clock):
        clock.advance(2.5)
        assert monitor.get_report().uptime_ms == pytest.approx(2500)

    def test_snapshot_is_detached(self, monitor):
        monitor.record_query("q", 200)
        monitor.record_api_request("a", 1)
        report = monitor.get_report()
        monitor.record_query("q2", 200)
        monitor.record_api_request("a", 1)
        assert len(report.queries.slow_queries) == 1
        assert report.api.endpoints["a"].count == 1


class TestHealthCheck:
    def test_healthy_when_idle(self, monitor):
        health = monitor.get_health_check()
        assert health.status == "healthy"
        assert health.metrics.error_rate == 0
        assert health.metrics.memory_usage_percent == 0

    def test_warning_on_error_rate(self, monitor):
        for i in range(50):
            monitor.record_api_request("a", 1, is_error=i < 3)  # 6%
        health = monitor.get_health_check()
        assert health.metrics.error_rate == pytest.approx(6.0)
        assert health.status == "warning"

    def test_critical_on_error_rate(self, monitor, memory):
        memory.used, memory.total = 10, 1000
        for i in range(100):
            monitor.record_api_request("a", 1, is_error=i < 11)
        assert monitor.get_health_check().status == "critical"

    def test_slow_queries(self, monitor):
        for i in range(11):
            monitor.record_query(f"q{i}", 200)
        health = monitor.get_health_check()
        assert health.metrics.slow_query_count == 11
        assert health.status == "warning"

    def test_memory_pressure(self, monitor, memory):
        memory.used, memory.total = 850, 1000
        assert monitor.get_health_check().status == "warning"
        memory.used = 960
        health = monitor.get_health_check()
        assert health.metrics.memory_usage_percent == pytest.approx(96.0)
        assert health.status == "critical"

    def test_reports_cache_hit_rate(self, monitor):
        monitor.record_cache_hit()
        monitor.record_cache_miss()
        assert monitor.get_health_check().metrics.cache_hit_rate == pytest.approx(50.0)


class TestReset:
    def test_reset_clears_everything(self, monitor, clock):
        monitor.record_query("q", 500)
        monitor.record_api_request("a", 10, is_error=True)
        monitor.record_cache_hit()
        monitor.record_cache_miss()
        clock.advance(10)

        monitor.reset()

        report = monitor.get_report()
        assert report.api.requests == 0
        assert report.api.errors == 0
        assert report.api.endpoints == {}
        assert report.queries.count == 0
        assert report.uptime_ms == 0
        assert monitor.get_cache_stats().total == 0
        assert monitor.get_slow_queries() == []
        assert monitor.get_endpoint_performance("a") is None
