"""
Tests for backend/supply_info/metric_cache.py

Covers:
- MetricSnapshot / ErrorState / CacheState helpers
- MetricCache success and failure recording
"""

import pytest

from supply_info.constants import CIRCULATING_SUPPLY, TOTAL_SUPPLY
from supply_info.metric_cache import CacheState, ErrorState, MetricCache, MetricSnapshot


class TestSnapshots:
    """Tests for the immutable state records."""

    def test_empty_snapshot(self):
        """Happy path: a fresh snapshot has neither value nor timestamp."""
        snapshot = MetricSnapshot()
        assert snapshot.is_recorded is False
        assert snapshot.to_dict() == {"value": None, "recordedAt": None}

    def test_snapshot_to_dict(self):
        """Happy path: camelCase keys for the wire format."""
        assert MetricSnapshot(598.0, 1700000000).to_dict() == {"value": 598.0, "recordedAt": 1700000000}

    def test_zero_value_counts_as_recorded(self):
        """Edge case: a recorded value of 0 is still a value."""
        assert MetricSnapshot(0.0, 1).is_recorded is True

    def test_cache_state_health(self):
        """Happy path: healthy only while both error states are clear."""
        assert CacheState().is_healthy is True
        assert CacheState(total_supply_error=ErrorState("boom", 1)).is_healthy is False
        assert CacheState(circulating_supply_error=ErrorState("boom", 1)).is_healthy is False


class TestMetricCache:
    """Tests for MetricCache."""

    @pytest.mark.asyncio
    async def test_initial_state_is_empty(self, metric_cache):
        """Happy path: everything is undefined at process start."""
        state = await metric_cache.state()
        assert state.total_supply == MetricSnapshot()
        assert state.circulating_supply == MetricSnapshot()
        assert state.total_supply_error.last_error is None
        assert state.last_attempt_at is None

    @pytest.mark.asyncio
    async def test_record_success_sets_value_and_clears_error(self, metric_cache):
        """Happy path: success writes value + timestamp and clears the error."""
        await metric_cache.record_failure(TOTAL_SUPPLY, "earlier failure", now=10)
        await metric_cache.record_success(TOTAL_SUPPLY, 598.0, now=20)

        snapshot = await metric_cache.get_snapshot(TOTAL_SUPPLY)
        error = await metric_cache.get_error(TOTAL_SUPPLY)
        assert snapshot == MetricSnapshot(598.0, 20)
        assert error == ErrorState(None, 20)

    @pytest.mark.asyncio
    async def test_record_failure_keeps_last_good_value(self, metric_cache):
        """Edge case: a failure never touches the snapshot."""
        await metric_cache.record_success(TOTAL_SUPPLY, 598.0, now=20)
        await metric_cache.record_failure(TOTAL_SUPPLY, "timeout", now=50)

        state = await metric_cache.state()
        assert state.total_supply == MetricSnapshot(598.0, 20)
        assert state.total_supply_error == ErrorState("timeout", 50)
        assert state.last_attempt_at == 50

    @pytest.mark.asyncio
    async def test_metrics_are_independent(self, metric_cache):
        """Happy path: recording one metric does not affect the other."""
        await metric_cache.record_success(TOTAL_SUPPLY, 598.0, now=20)
        await metric_cache.record_failure(CIRCULATING_SUPPLY, "skipped", now=21)

        state = await metric_cache.state()
        assert state.circulating_supply.is_recorded is False
        assert state.total_supply_error.has_error is False
        assert state.circulating_supply_error.last_error == "skipped"

    @pytest.mark.asyncio
    async def test_default_timestamp_is_now(self, metric_cache):
        """Happy path: without an explicit time, unix seconds are used."""
        snapshot = await metric_cache.record_success(TOTAL_SUPPLY, 1.5)
        assert isinstance(snapshot.recorded_at, int)
        assert snapshot.recorded_at > 1_600_000_000

    @pytest.mark.asyncio
    async def test_empty_failure_message_rejected(self, metric_cache):
        """Failure: a failure must describe itself."""
        with pytest.raises(ValueError):
            await metric_cache.record_failure(TOTAL_SUPPLY, "")

    @pytest.mark.asyncio
    async def test_unknown_metric(self, metric_cache):
        """Failure: unknown metric names are rejected."""
        with pytest.raises(KeyError):
            await metric_cache.get_snapshot("marketCap")
