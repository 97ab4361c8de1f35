"""
Supply API routes

Read-only views over the metric cache, plus a manual recording trigger:
- GET /totalsupply, /circulatingsupply  plain-text number, 503 until recorded
- GET /triggerRecordSupply              run one cycle and return both snapshots
- GET /health                           liveness
- GET /status                           OK, or last good values plus last errors
"""

import logging
import math

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from supply_info.constants import CIRCULATING_SUPPLY, TOTAL_SUPPLY
from supply_info.metric_cache import MetricCache
from supply_info.schemas import StatusErrorResponse, TriggerRecordResponse
from supply_info.services.supply_scheduler import SchedulerStoppedError, SupplyScheduler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["supply"])

UNAVAILABLE_MESSAGE = "Service Unavailable: Data initialization failed or pending."


# Dependencies - will be injected from main.py
def get_metric_cache() -> MetricCache:
    """Get metric cache - will be overridden in main.py"""
    raise NotImplementedError("Must override metric_cache dependency")


def get_scheduler() -> SupplyScheduler:
    """Get supply scheduler - will be overridden in main.py"""
    raise NotImplementedError("Must override scheduler dependency")


def format_supply(value: float) -> str:
    """Render a supply value the way clients expect: 598 rather than 598.0."""
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return repr(value)


async def _metric_response(cache: MetricCache, kind: str, path: str) -> PlainTextResponse:
    snapshot = await cache.get_snapshot(kind)
    if not snapshot.is_recorded:
        logger.warning(f"Service Unavailable: Request to {path}. Data not initialized.")
        return PlainTextResponse(UNAVAILABLE_MESSAGE, status_code=503)
    return PlainTextResponse(format_supply(snapshot.value))


@router.get("/totalsupply", response_class=PlainTextResponse)
async def get_total_supply(cache: MetricCache = Depends(get_metric_cache)):
    return await _metric_response(cache, TOTAL_SUPPLY, "/totalsupply")


@router.get("/circulatingsupply", response_class=PlainTextResponse)
async def get_circulating_supply(cache: MetricCache = Depends(get_metric_cache)):
    return await _metric_response(cache, CIRCULATING_SUPPLY, "/circulatingsupply")


@router.get("/triggerRecordSupply")
async def trigger_record_supply(scheduler: SupplyScheduler = Depends(get_scheduler)):
    """Run one recording cycle (coalesced with any in flight) and return both snapshots."""
    logger.info("Manual trigger received: Recording supply...")
    try:
        state = await scheduler.trigger()
    except SchedulerStoppedError as e:
        logger.warning(f"Manual trigger rejected: {e}")
        return PlainTextResponse(f"Service Unavailable: {e}", status_code=503)
    return TriggerRecordResponse.from_state(state).model_dump(by_alias=True)


@router.get("/health", response_class=PlainTextResponse)
async def health():
    logger.debug("Health check")
    return "OK"


@router.get("/status")
async def get_status(cache: MetricCache = Depends(get_metric_cache)):
    state = await cache.state()
    if state.is_healthy:
        return {"status": "OK"}
    return StatusErrorResponse.from_state(state).model_dump(by_alias=True)
