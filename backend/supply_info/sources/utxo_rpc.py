"""
Syscoin Core JSON-RPC client

Only gettxoutsetinfo is needed: its total_amount is the UTXO chain's
share of the total supply.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from supply_info.constants import ERROR_BODY_PREVIEW_CHARS, RPC_TIMEOUT_SECONDS
from supply_info.exceptions import FetchError
from supply_info.sources.http_helpers import to_fetch_error

logger = logging.getLogger(__name__)

SOURCE_NAME = "UTXO RPC gettxoutsetinfo"


class SyscoinRpcClient:
    """Minimal JSON-RPC 1.0 client for a Syscoin Core node."""

    def __init__(
        self,
        url: str,
        username: str = "",
        password: str = "",
        timeout: float = RPC_TIMEOUT_SECONDS,
    ):
        self.url = url
        self.timeout = timeout
        self._auth: Optional[httpx.BasicAuth] = (
            httpx.BasicAuth(username, password) if username or password else None
        )

    @classmethod
    def from_settings(cls, settings) -> "SyscoinRpcClient":
        return cls(
            settings.rpc_url,
            username=settings.syscoin_core_rpc_username,
            password=settings.syscoin_core_rpc_password,
            timeout=settings.rpc_timeout_seconds,
        )

    async def call(self, method: str, params: Optional[list] = None, source: Optional[str] = None) -> Any:
        """Run one RPC method and return its result member."""
        source = source or f"UTXO RPC {method}"
        payload = {"jsonrpc": "1.0", "id": method, "method": method, "params": params or []}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                auth=self._auth,
                headers={"Content-Type": "application/json"},
            ) as client:
                resp = await client.post(self.url, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise to_fetch_error(exc, source, self.timeout) from exc

        if not isinstance(data, dict):
            raise FetchError(f"{source} returned a non-object body: {str(data)[:ERROR_BODY_PREVIEW_CHARS]}", source=source)

        error = data.get("error")
        if error:
            detail = error.get("message") if isinstance(error, dict) else None
            message = f"{source} RPC error: {detail or error}"
            logger.error(message)
            raise FetchError(message, source=source)

        return data.get("result")

    async def get_txoutset_info(self) -> Dict[str, Any]:
        """Fetch the UTXO set summary (total_amount, txouts, height, ...)."""
        logger.info("Fetching UTXO gettxoutsetinfo via RPC...")
        result = await self.call("gettxoutsetinfo", source=SOURCE_NAME)
        logger.info("UTXO set info fetched successfully")
        return result
