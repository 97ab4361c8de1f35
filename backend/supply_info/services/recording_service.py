"""
Supply recording cycle

One cycle refreshes total supply, then derives circulating supply from the
cached total. Failures never propagate: each step reports a StepOutcome and
the cycle turns failed outcomes into error state, keeping the last good
value in place.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from supply_info.constants import CIRCULATING_SUPPLY, TOTAL_SUPPLY
from supply_info.exceptions import DependencyError, ErrorKind, SkippedError, SupplyError
from supply_info.metric_cache import CacheState, MetricCache, unix_timestamp
from supply_info.services.supply_calculator import calculate_total_supply
from supply_info.sources import NevmExplorerClient, SyscoinRpcClient

logger = logging.getLogger(__name__)

# Coins held by the treasury are excluded from circulating supply. Currently
# zero because the treasury is accounted for on the UTXO side.
TREASURY_DEDUCTION = 0.0

NEVER_RECORDED_MESSAGE = "Skipped: Total supply has never been recorded."
STALE_TOTAL_MESSAGE = "Skipped: Last total supply fetch failed."

METRIC_LABELS = {
    TOTAL_SUPPLY: "total supply",
    CIRCULATING_SUPPLY: "circulating supply",
}


@dataclass(frozen=True)
class StepOutcome:
    """Result of one recording step: a value or the error that stopped it."""

    value: Optional[float] = None
    error: Optional[SupplyError] = None
    finished_at: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def describe_failure(kind: str, error: SupplyError) -> str:
    """Build the error-state text for a failed or skipped step."""
    if error.kind in (ErrorKind.DEPENDENCY, ErrorKind.SKIPPED):
        return error.message

    label = METRIC_LABELS[kind]
    if error.kind == ErrorKind.UNEXPECTED:
        return f"Failed to record {label}: unexpected error: {error.message or 'Unknown error'}"
    return f"Failed to record {label}: {error.kind.value} error: {error.message or 'Unknown error'}"


class SupplyRecorder:
    """Runs recording cycles against a MetricCache."""

    def __init__(
        self,
        cache: MetricCache,
        rpc_client: SyscoinRpcClient,
        explorer_client: NevmExplorerClient,
        vault_address: str,
        treasury_deduction: float = TREASURY_DEDUCTION,
    ):
        self.cache = cache
        self.rpc_client = rpc_client
        self.explorer_client = explorer_client
        self.vault_address = vault_address
        self.treasury_deduction = treasury_deduction

    async def compute_total_supply(self) -> StepOutcome:
        """Fetch all three sources concurrently and combine them."""
        logger.info("Fetching total supply components...")
        try:
            utxo_info, nevm_supply, balance_response = await asyncio.gather(
                self.rpc_client.get_txoutset_info(),
                self.explorer_client.get_coin_supply(),
                self.explorer_client.get_address_balance(self.vault_address),
            )
            total = calculate_total_supply(utxo_info, nevm_supply, balance_response)
        except SupplyError as e:
            return StepOutcome(error=e, finished_at=unix_timestamp())
        except Exception as e:
            logger.error(f"Unexpected error computing total supply: {e}", exc_info=True)
            return StepOutcome(error=SupplyError(str(e)), finished_at=unix_timestamp())

        logger.info("Total supply components fetched and calculated successfully")
        return StepOutcome(value=total, finished_at=unix_timestamp())

    async def compute_circulating_supply(self) -> StepOutcome:
        """Derive circulating supply from the cached total, if it can be trusted."""
        state = await self.cache.state()

        if not state.total_supply.is_recorded:
            return StepOutcome(error=DependencyError(NEVER_RECORDED_MESSAGE), finished_at=unix_timestamp())
        if state.total_supply_error.has_error:
            return StepOutcome(error=SkippedError(STALE_TOTAL_MESSAGE), finished_at=unix_timestamp())

        try:
            circulating = state.total_supply.value - self.treasury_deduction
        except Exception as e:
            logger.error(f"Unexpected error computing circulating supply: {e}", exc_info=True)
            return StepOutcome(error=SupplyError(str(e)), finished_at=unix_timestamp())

        return StepOutcome(value=circulating, finished_at=unix_timestamp())

    async def _store(self, kind: str, outcome: StepOutcome, now: Optional[int]) -> StepOutcome:
        now = now if now is not None else outcome.finished_at
        if outcome.ok:
            snapshot = await self.cache.record_success(kind, outcome.value, now=now)
            logger.info(f"{METRIC_LABELS[kind].capitalize()} recorded successfully: {snapshot.value} at {snapshot.recorded_at}")
            return outcome

        message = describe_failure(kind, outcome.error)
        if outcome.error.kind in (ErrorKind.DEPENDENCY, ErrorKind.SKIPPED):
            logger.warning(message)
        else:
            logger.error(message)
        await self.cache.record_failure(kind, message, now=now)
        return outcome

    async def record_total_supply(self, now: Optional[int] = None) -> StepOutcome:
        logger.info("Attempting to record total supply...")
        outcome = await self.compute_total_supply()
        return await self._store(TOTAL_SUPPLY, outcome, now)

    async def record_circulating_supply(self, now: Optional[int] = None) -> StepOutcome:
        logger.info("Attempting to record circulating supply...")
        outcome = await self.compute_circulating_supply()
        return await self._store(CIRCULATING_SUPPLY, outcome, now)

    async def run(self) -> CacheState:
        """
        Run one full cycle: total supply, then circulating supply.

        The circulating step reads the error state the total step just wrote,
        and is stamped with the same time so its timestamp never runs ahead
        of the total it was derived from.
        """
        total_outcome = await self.record_total_supply()
        await self.record_circulating_supply(now=total_outcome.finished_at)

        state = await self.cache.state()
        logger.info(
            f"Current state - total: {state.total_supply.value}, "
            f"circulating: {state.circulating_supply.value}, "
            f"errors: {state.total_supply_error.last_error}, {state.circulating_supply_error.last_error}"
        )
        return state
