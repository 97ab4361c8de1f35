"""
Graceful Shutdown Manager

Stops the supply scheduler within a bounded grace period. If shutdown
hangs past that period, a watchdog thread force-exits the process.
"""

import logging
import os
import threading
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


class ShutdownManager:
    """
    Usage:
        await shutdown_manager.shutdown(scheduler)
    """

    def __init__(self, grace_seconds: float = 10.0):
        self.grace_seconds = grace_seconds
        self._shutting_down = False
        self._shutdown_requested_at: Optional[datetime] = None
        self._watchdog: Optional[threading.Timer] = None

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    def _force_exit(self):
        logger.error("Could not shut down gracefully, forcefully shutting down")
        os._exit(1)

    def arm_watchdog(self):
        """Start the forced-exit timer. Safe to call more than once."""
        if self._watchdog is not None:
            return
        # Slightly longer than the scheduler grace so a normal abandon wins the race
        self._watchdog = threading.Timer(self.grace_seconds + 1.0, self._force_exit)
        self._watchdog.daemon = True
        self._watchdog.start()

    def disarm_watchdog(self):
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None

    async def shutdown(self, scheduler) -> dict:
        """
        Stop the scheduler, letting an in-flight cycle finish or be abandoned.

        Returns:
            dict with ready (bool), waited_seconds (float) and message (str)
        """
        self._shutting_down = True
        self._shutdown_requested_at = datetime.utcnow()
        logger.info("Shutdown requested - stopping supply scheduler...")

        self.arm_watchdog()
        try:
            await scheduler.stop(grace_seconds=self.grace_seconds)
        finally:
            self.disarm_watchdog()

        waited = (datetime.utcnow() - self._shutdown_requested_at).total_seconds()
        message = f"Supply scheduler stopped after {waited:.1f}s"
        logger.info(message)
        return {"ready": True, "waited_seconds": waited, "message": message}
