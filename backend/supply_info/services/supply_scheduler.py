"""
Supply recording scheduler

A single worker task owns the recording cycle. The polling timer and the
manual trigger both submit requests to it, so two cycles never run at the
same time. Requests that pile up while a cycle is running are coalesced
into the next cycle.
"""

import asyncio
import logging
from typing import List, Optional

from supply_info.metric_cache import CacheState
from supply_info.services.recording_service import SupplyRecorder

logger = logging.getLogger(__name__)

_STOP = object()


class SchedulerStoppedError(RuntimeError):
    """Raised to trigger callers when the scheduler is not (or no longer) running."""


class SupplyScheduler:
    """Runs a recording cycle at startup, every interval_seconds, and on demand."""

    def __init__(self, recorder: SupplyRecorder, interval_seconds: int = 30):
        self.recorder = recorder
        self.interval_seconds = interval_seconds
        self.running = False
        self.cycles_completed = 0
        self.last_state: Optional[CacheState] = None
        self._queue: Optional[asyncio.Queue] = None
        self._worker_task: Optional[asyncio.Task] = None
        self._timer_task: Optional[asyncio.Task] = None
        self._timer_pending = False
        self._cycle_in_flight = False

    @property
    def polling_enabled(self) -> bool:
        return self.interval_seconds > 0

    @property
    def cycle_in_flight(self) -> bool:
        return self._cycle_in_flight

    async def start(self):
        """Start the worker (which runs the startup cycle right away) and the polling timer."""
        if self.running:
            logger.warning("Supply scheduler already running")
            return

        self.running = True
        self._queue = asyncio.Queue()
        self._worker_task = asyncio.create_task(self._worker_loop())
        logger.info("Performing initial supply recording on startup...")
        self.request_cycle()

        if self.polling_enabled:
            self._timer_task = asyncio.create_task(self._timer_loop())
            logger.info(f"Starting supply polling every {self.interval_seconds} seconds")
        else:
            logger.info("Polling interval is set to 0 or less. Polling disabled after initial fetch.")

    async def stop(self, grace_seconds: float = 10.0):
        """
        Stop polling and shut the worker down.

        An in-flight cycle gets up to grace_seconds to finish; after that it
        is abandoned. Callers still waiting on a trigger get SchedulerStoppedError.
        """
        if not self.running:
            return
        self.running = False

        if self._timer_task:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None
            logger.info("Polling stopped")

        if self._worker_task:
            self._queue.put_nowait(_STOP)
            try:
                await asyncio.wait_for(asyncio.shield(self._worker_task), timeout=grace_seconds)
            except asyncio.TimeoutError:
                logger.warning(f"Recording cycle did not finish within {grace_seconds}s, abandoning it")
                self._worker_task.cancel()
                try:
                    await self._worker_task
                except asyncio.CancelledError:
                    pass
            self._worker_task = None

        self._fail_waiters(self._drain())
        logger.info("Supply scheduler stopped")

    def request_cycle(self) -> bool:
        """Queue a cycle without waiting for it. At most one such request is pending."""
        if not self.running or self._timer_pending:
            return False
        self._timer_pending = True
        self._queue.put_nowait(None)
        return True

    async def trigger(self) -> CacheState:
        """Queue a cycle and wait for it to complete, returning the resulting cache state."""
        if not self.running:
            raise SchedulerStoppedError("Supply scheduler is not running")

        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(future)
        # Shielded so a disconnecting caller cannot cancel a result other callers share
        return await asyncio.shield(future)

    async def _timer_loop(self):
        while self.running:
            await asyncio.sleep(self.interval_seconds)
            self.request_cycle()

    def _drain(self) -> List[object]:
        items = []
        if self._queue is None:
            return items
        while True:
            try:
                items.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return items

    @staticmethod
    def _fail_waiters(items: List[object]):
        for item in items:
            if isinstance(item, asyncio.Future) and not item.done():
                item.set_exception(SchedulerStoppedError("Supply scheduler stopped"))

    async def _worker_loop(self):
        """Single owner of the recording cycle."""
        while True:
            first = await self._queue.get()
            batch = [first] + self._drain()

            if any(item is _STOP for item in batch):
                self._fail_waiters(batch)
                return

            self._timer_pending = False
            self._cycle_in_flight = True
            try:
                state = await self.recorder.run()
            except asyncio.CancelledError:
                self._fail_waiters(batch)
                raise
            except Exception as e:
                # SupplyRecorder.run absorbs supply errors, so this is a bug
                logger.error(f"Unexpected error in recording cycle: {e}", exc_info=True)
                for item in batch:
                    if isinstance(item, asyncio.Future) and not item.done():
                        item.set_exception(e)
                continue
            finally:
                self._cycle_in_flight = False

            self.cycles_completed += 1
            self.last_state = state
            for item in batch:
                if isinstance(item, asyncio.Future) and not item.done():
                    item.set_result(state)
