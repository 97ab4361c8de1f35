import asyncio
import logging
from typing import Optional

from fastapi import FastAPI

from supply_info.config import Settings, settings
from supply_info.metric_cache import MetricCache
from supply_info.routers import supply_router
from supply_info.services.recording_service import SupplyRecorder
from supply_info.services.shutdown_manager import ShutdownManager
from supply_info.services.supply_scheduler import SupplyScheduler
from supply_info.sources import NevmExplorerClient, SyscoinRpcClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_unhandled_exception(loop: asyncio.AbstractEventLoop, context: dict):
    exc = context.get("exception")
    logger.error(f"Unhandled error in background task: {context.get('message')}", exc_info=exc)


def create_app(
    app_settings: Optional[Settings] = None,
    rpc_client: Optional[SyscoinRpcClient] = None,
    explorer_client: Optional[NevmExplorerClient] = None,
) -> FastAPI:
    """Build the app and the single metric cache / scheduler it owns."""
    app_settings = app_settings or settings

    metric_cache = MetricCache()
    recorder = SupplyRecorder(
        metric_cache,
        rpc_client or SyscoinRpcClient.from_settings(app_settings),
        explorer_client or NevmExplorerClient.from_settings(app_settings),
        vault_address=app_settings.syscoin_vault_manager,
        treasury_deduction=app_settings.treasury_deduction,
    )
    scheduler = SupplyScheduler(recorder, interval_seconds=app_settings.polling_interval_seconds)
    shutdown_manager = ShutdownManager(grace_seconds=app_settings.shutdown_grace_seconds)

    app = FastAPI(title="Syscoin Supply Info")
    app.state.settings = app_settings
    app.state.metric_cache = metric_cache
    app.state.scheduler = scheduler
    app.state.shutdown_manager = shutdown_manager

    app.include_router(supply_router.router)
    app.dependency_overrides[supply_router.get_metric_cache] = lambda: metric_cache
    app.dependency_overrides[supply_router.get_scheduler] = lambda: scheduler

    @app.on_event("startup")
    async def startup_event():
        asyncio.get_running_loop().set_exception_handler(_log_unhandled_exception)
        if not app_settings.syscoin_vault_manager:
            logger.warning("SYSCOIN_VAULT_MANAGER is not set; total supply cannot be recorded")
        await scheduler.start()
        logger.info("Startup complete")

    @app.on_event("shutdown")
    async def shutdown_event():
        await shutdown_manager.shutdown(scheduler)

    return app


app = create_app()


def run():
    """Console entry point: configure logging and serve with uvicorn."""
    import uvicorn

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logger.info(f"Syscoin supply info listening on port {settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=int(settings.shutdown_grace_seconds),
    )


if __name__ == "__main__":
    run()
