"""
In-memory store for the last recorded supply metrics

Holds the last good value of each metric alongside the outcome of the most
recent attempt to refresh it. Written only by the recording cycle; the HTTP
layer reads it. Nothing is persisted across restarts.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from supply_info.constants import CIRCULATING_SUPPLY, METRIC_KINDS, TOTAL_SUPPLY


def unix_timestamp() -> int:
    return int(time.time())


@dataclass(frozen=True)
class MetricSnapshot:
    """Last successfully recorded value of one metric.

    value and recorded_at are set together or not at all.
    """

    value: Optional[float] = None
    recorded_at: Optional[int] = None

    @property
    def is_recorded(self) -> bool:
        return self.value is not None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {"value": self.value, "recordedAt": self.recorded_at}


@dataclass(frozen=True)
class ErrorState:
    """Outcome of the most recent attempt for one metric (None = it succeeded)."""

    last_error: Optional[str] = None
    last_attempt_at: Optional[int] = None

    @property
    def has_error(self) -> bool:
        return self.last_error is not None


@dataclass(frozen=True)
class CacheState:
    """Point-in-time copy of everything the cache holds."""

    total_supply: MetricSnapshot = field(default_factory=MetricSnapshot)
    circulating_supply: MetricSnapshot = field(default_factory=MetricSnapshot)
    total_supply_error: ErrorState = field(default_factory=ErrorState)
    circulating_supply_error: ErrorState = field(default_factory=ErrorState)
    last_attempt_at: Optional[int] = None

    @property
    def is_healthy(self) -> bool:
        return not (self.total_supply_error.has_error or self.circulating_supply_error.has_error)


class MetricCache:
    """
    Owner of the supply metrics and their error state.

    Snapshots and error states are immutable and swapped whole under the lock,
    so a reader never sees a value without its timestamp (or the reverse).
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._snapshots: Dict[str, MetricSnapshot] = {kind: MetricSnapshot() for kind in METRIC_KINDS}
        self._errors: Dict[str, ErrorState] = {kind: ErrorState() for kind in METRIC_KINDS}
        self._last_attempt_at: Optional[int] = None

    @staticmethod
    def _check_kind(kind: str):
        if kind not in METRIC_KINDS:
            raise KeyError(f"Unknown metric: {kind}")

    async def record_success(self, kind: str, value: float, now: Optional[int] = None) -> MetricSnapshot:
        """Store a new good value and clear the metric's error."""
        self._check_kind(kind)
        now = now if now is not None else unix_timestamp()
        snapshot = MetricSnapshot(value=value, recorded_at=now)
        async with self._lock:
            self._snapshots[kind] = snapshot
            self._errors[kind] = ErrorState(last_error=None, last_attempt_at=now)
            self._last_attempt_at = now
        return snapshot

    async def record_failure(self, kind: str, message: str, now: Optional[int] = None) -> ErrorState:
        """Store a failed attempt. The last good value is left alone."""
        self._check_kind(kind)
        if not message:
            raise ValueError("Failure message must not be empty")
        now = now if now is not None else unix_timestamp()
        error_state = ErrorState(last_error=message, last_attempt_at=now)
        async with self._lock:
            self._errors[kind] = error_state
            self._last_attempt_at = now
        return error_state

    async def get_snapshot(self, kind: str) -> MetricSnapshot:
        self._check_kind(kind)
        async with self._lock:
            return self._snapshots[kind]

    async def get_error(self, kind: str) -> ErrorState:
        self._check_kind(kind)
        async with self._lock:
            return self._errors[kind]

    async def state(self) -> CacheState:
        async with self._lock:
            return CacheState(
                total_supply=self._snapshots[TOTAL_SUPPLY],
                circulating_supply=self._snapshots[CIRCULATING_SUPPLY],
                total_supply_error=self._errors[TOTAL_SUPPLY],
                circulating_supply_error=self._errors[CIRCULATING_SUPPLY],
                last_attempt_at=self._last_attempt_at,
            )
