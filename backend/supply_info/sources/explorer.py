"""
NEVM explorer clients

Two etherscan-style endpoints:
  GET <supply url>                                   -> bare number (NEVM coin supply)
  GET <api>?module=account&action=balance&address=X  -> {"status": "1", "result": "<wei>"}
"""

import logging
from typing import Any, Dict, Optional

import httpx

from supply_info.constants import EXPLORER_TIMEOUT_SECONDS
from supply_info.exceptions import FetchError
from supply_info.sources.http_helpers import to_fetch_error

logger = logging.getLogger(__name__)

COIN_SUPPLY_SOURCE = "NEVM explorer coinsupply"
BALANCE_SOURCE = "NEVM explorer vault balance"


class NevmExplorerClient:
    """Read-only client for the NEVM block explorers."""

    def __init__(
        self,
        supply_url: str,
        api_url: str,
        timeout: float = EXPLORER_TIMEOUT_SECONDS,
    ):
        self.supply_url = supply_url
        self.api_url = api_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "NevmExplorerClient":
        return cls(
            settings.nevm_supply_url,
            settings.nevm_explorer_api_url,
            timeout=settings.explorer_timeout_seconds,
        )

    async def _get_json(self, url: str, source: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url, params=params)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise to_fetch_error(exc, source, self.timeout) from exc

    async def get_coin_supply(self) -> Any:
        """Fetch the NEVM coin supply. Returned as-is; the calculator validates it."""
        logger.info("Fetching NEVM coin supply...")
        return await self._get_json(self.supply_url, COIN_SUPPLY_SOURCE)

    async def get_address_balance(self, address: str) -> Dict[str, Any]:
        """Fetch the raw balance response for an address (balance is in wei, as a string)."""
        if not address:
            raise FetchError(f"{BALANCE_SOURCE}: no address configured", source=BALANCE_SOURCE)
        logger.info(f"Fetching NEVM balance for {address}...")
        return await self._get_json(
            self.api_url,
            BALANCE_SOURCE,
            params={"module": "account", "action": "balance", "address": address},
        )
